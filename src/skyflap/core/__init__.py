"""Core framework components for SKYFLAP."""

from .state import GameState, Action, StateMachine
from .events import EventBus, Event, EventType
from .scheduler import FrameScheduler, AsyncioFrameScheduler, Debouncer

__all__ = [
    "GameState",
    "Action",
    "StateMachine",
    "EventBus",
    "Event",
    "EventType",
    "FrameScheduler",
    "AsyncioFrameScheduler",
    "Debouncer",
]
