"""
Lolos - Game Session

Owns the single live GameState of a match. The presentation layer sends
actions through :meth:`GameSession.dispatch` and reads back either the full
state or a pydantic snapshot; nothing else writes the state.

Every accepted or rejected action is recorded, so a session created with a
seed can be rebuilt exactly with :meth:`GameSession.replay`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from src.engine.actions import Action, StartGame
from src.engine.base import GameConfig, Phase
from src.engine.randomness import RandomSource, SeededRandom
from src.engine.state import GameState
from src.engine.turn_machine import TurnEngine

if TYPE_CHECKING:
    from src.snapshot.models import GameSnapshot, PlayerView

logger = logging.getLogger(__name__)


class GameSession:
    """Single writer of a match's state.

    Args:
        config: Start a match immediately with this configuration.
        rng: Randomness source. Defaults to ``SeededRandom(seed)``.
        seed: Seed for the default randomness source. Defaults to
            ``Settings.rng_seed`` when no ``rng`` is given.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: RandomSource | None = None,
        *,
        seed: int | None = None,
    ) -> None:
        if rng is None and seed is None:
            from src.config.settings import get_settings

            seed = get_settings().rng_seed
        self._rng = rng if rng is not None else SeededRandom(seed)
        self._seed = seed
        self._state = GameState()
        self._history: list[Action] = []
        if config is not None:
            self.dispatch(StartGame(config=config))

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def history(self) -> tuple[Action, ...]:
        return tuple(self._history)

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def is_over(self) -> bool:
        return self._state.phase == Phase.GAME_OVER

    def dispatch(self, action: Action) -> GameState:
        """Apply one action and return the resulting state."""
        previous_phase = self._state.phase
        self._history.append(action)
        self._state = TurnEngine.apply(self._state, action, self._rng)

        if self._state.phase != previous_phase:
            logger.debug("Phase %s -> %s", previous_phase.value, self._state.phase.value)
        return self._state

    def dispatch_all(self, actions: Iterable[Action]) -> GameState:
        """Apply several actions in order."""
        for action in actions:
            self.dispatch(action)
        return self._state

    def snapshot(self, player_id: int | None = None) -> GameSnapshot | PlayerView:
        """
        Serializable read model of the current state.

        Args:
            player_id: When given, return that seat's private view with the
                other hands hidden.

        Returns:
            GameSnapshot, or PlayerView when ``player_id`` is given
        """
        from src.snapshot.builder import build_player_view, build_snapshot

        if player_id is None:
            return build_snapshot(self._state)
        return build_player_view(self._state, player_id)

    @classmethod
    def replay(cls, actions: Iterable[Action], seed: int | None) -> GameSession:
        """
        Rebuild a session by replaying recorded actions from setup.

        Args:
            actions: Recorded history, starting with StartGame
            seed: Seed of the original session's randomness source

        Returns:
            A new session in the same state as the original
        """
        session = cls(seed=seed)
        session.dispatch_all(actions)
        logger.info("Replayed %d actions (seed=%s)", len(session._history), seed)
        return session
