"""Graphics for the car runner: numpy frame buffers and placeholder shapes."""

from carrunner.graphics.renderer import FrameRenderer
from carrunner.graphics.primitives import (
    create_buffer,
    draw_rect,
    draw_circle,
    draw_line,
    draw_polygon,
    fill,
)

__all__ = [
    # Renderer
    "FrameRenderer",
    # Primitives
    "create_buffer",
    "draw_rect",
    "draw_circle",
    "draw_line",
    "draw_polygon",
    "fill",
]
