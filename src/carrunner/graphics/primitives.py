"""Basic drawing primitives on numpy frame buffers."""

from typing import Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]


def create_buffer(width: int, height: int) -> Buffer:
    """Allocate a black (height, width, 3) buffer."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def blend(color: Color, background: Color, alpha: float) -> Color:
    """Mix ``color`` over ``background`` at the given opacity."""
    a = max(0.0, min(1.0, alpha))
    return tuple(int(c * a + b * (1 - a)) for c, b in zip(color, background))


def draw_rect(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    # Clamp to buffer bounds
    x1 = max(0, min(int(x), w))
    y1 = max(0, min(int(y), h))
    x2 = max(0, min(int(x + width), w))
    y2 = max(0, min(int(y + height), h))
    if x1 >= x2 or y1 >= y2:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
    else:
        for t in range(thickness):
            # Top and bottom edges
            if y1 + t < y2:
                buffer[y1 + t, x1:x2] = color
                buffer[y2 - 1 - t, x1:x2] = color
            # Left and right edges
            if x1 + t < x2:
                buffer[y1:y2, x1 + t] = color
                buffer[y1:y2, x2 - 1 - t] = color


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
) -> None:
    """Draw a filled circle, touching only its bounding box."""
    h, w = buffer.shape[:2]
    x1 = max(0, int(cx - radius))
    y1 = max(0, int(cy - radius))
    x2 = min(w, int(cx + radius) + 1)
    y2 = min(h, int(cy + radius) + 1)
    if x1 >= x2 or y1 >= y2:
        return

    y_indices, x_indices = np.ogrid[y1:y2, x1:x2]
    mask = (x_indices - cx) ** 2 + (y_indices - cy) ** 2 <= radius ** 2
    buffer[y1:y2, x1:x2][mask] = color


def draw_line(
    buffer: Buffer,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    color: Color,
    thickness: int = 1,
) -> None:
    """Draw a line using Bresenham's algorithm."""
    h, w = buffer.shape[:2]
    x1, y1, x2, y2 = int(x1), int(y1), int(x2), int(y2)

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    x, y = x1, y1

    while True:
        for tx in range(-thickness // 2, (thickness + 1) // 2):
            for ty in range(-thickness // 2, (thickness + 1) // 2):
                px, py = x + tx, y + ty
                if 0 <= px < w and 0 <= py < h:
                    buffer[py, px] = color

        if x == x2 and y == y2:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def draw_polygon(buffer: Buffer, points: Sequence[Point], color: Color) -> None:
    """Fill a polygon with the even-odd rule.

    Each pixel centre inside the polygon's bounding box is tested against
    every edge at once with numpy.
    """
    if len(points) < 3:
        return

    h, w = buffer.shape[:2]
    xs = np.array([p[0] for p in points], dtype=np.float64)
    ys = np.array([p[1] for p in points], dtype=np.float64)

    x1 = max(0, int(xs.min()))
    y1 = max(0, int(ys.min()))
    x2 = min(w, int(xs.max()) + 1)
    y2 = min(h, int(ys.max()) + 1)
    if x1 >= x2 or y1 >= y2:
        return

    py, px = np.mgrid[y1:y2, x1:x2]
    px = px + 0.5
    py = py + 0.5
    inside = np.zeros(px.shape, dtype=bool)

    xj, yj = xs[-1], ys[-1]
    for xi, yi in zip(xs, ys):
        if yi != yj:
            crosses = (yi > py) != (yj > py)
            x_at = (xj - xi) * (py - yi) / (yj - yi) + xi
            inside ^= crosses & (px < x_at)
        xj, yj = xi, yi

    buffer[y1:y2, x1:x2][inside] = color


def vertical_gradient(buffer: Buffer, top: Color, bottom: Color, y1: int = 0, y2: int | None = None) -> None:
    """Fill rows ``y1..y2`` with a top-to-bottom color ramp."""
    h = buffer.shape[0]
    y2 = h if y2 is None else min(h, y2)
    y1 = max(0, y1)
    if y1 >= y2:
        return

    t = np.linspace(0.0, 1.0, y2 - y1)[:, None]
    ramp = np.array(top, dtype=np.float64) * (1 - t) + np.array(bottom, dtype=np.float64) * t
    buffer[y1:y2, :] = ramp[:, None, :].astype(np.uint8)
