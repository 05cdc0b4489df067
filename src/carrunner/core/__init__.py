"""Core framework components for the car runner."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType

__all__ = ["GameState", "StateMachine", "EventBus", "Event", "EventType"]
