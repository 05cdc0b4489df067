"""Visual feedback entities for the car runner."""

from .particles import TimedEntity, Particle, FloatingText, spawn_dust, floating_text, update_timed

__all__ = ["TimedEntity", "Particle", "FloatingText", "spawn_dust", "floating_text", "update_timed"]
