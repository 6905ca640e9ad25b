"""
State machine for the SKYFLAP game flow.

States:
    LOADING: Assets and high score are being loaded
    IDLE: Session is built, waiting for the first action
    PLAYING: Frame loop is running
    GAME_OVER: Simulation frozen, waiting for a restart
"""

from enum import Enum, auto
from itertools import product
from typing import Callable, Iterable, Mapping, TypeVar
import logging

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class GameState(Enum):
    """Game phases."""
    LOADING = auto()
    IDLE = auto()
    PLAYING = auto()
    GAME_OVER = auto()


class Action(Enum):
    """Logical input actions."""
    PRIMARY = auto()


def require_exhaustive(
    table: Mapping[K, V],
    keys: Iterable[K],
    name: str,
) -> Mapping[K, V]:
    """Check that a dispatch table has an entry for every key.

    Called once when a table is built, so a missing handler fails at
    import instead of surfacing as a runtime fallback.

    Raises:
        RuntimeError: naming the keys that have no handler
    """
    missing = [key for key in keys if key not in table]
    if missing:
        raise RuntimeError(f"{name} table is missing entries for: {missing}")
    return table


def action_keys() -> list[tuple[GameState, Action]]:
    """Every (state, action) pair an action table must cover."""
    return list(product(GameState, Action))


class StateMachine:
    """
    Tracks the current game state and validates transitions.

    The state machine only guards the flow; what happens on entering a
    state is decided by its owner through listeners.
    """

    # Valid state transitions
    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        # Assets loaded, first session built
        (GameState.LOADING, GameState.IDLE),

        # From IDLE
        (GameState.IDLE, GameState.IDLE),  # Reset again
        (GameState.IDLE, GameState.PLAYING),

        # From PLAYING
        (GameState.PLAYING, GameState.GAME_OVER),
        (GameState.PLAYING, GameState.IDLE),  # Abandon session

        # From GAME_OVER
        (GameState.GAME_OVER, GameState.IDLE),  # Restart goes through reset
    ]

    def __init__(self, initial_state: GameState = GameState.LOADING) -> None:
        self._state = initial_state
        self._listeners: list[Callable[[GameState, GameState], None]] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in list(self._listeners):
            listener(old_state, to_state)

        return True

    def add_listener(
        self,
        callback: Callable[[GameState, GameState], None]
    ) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(
        self,
        callback: Callable[[GameState, GameState], None]
    ) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
