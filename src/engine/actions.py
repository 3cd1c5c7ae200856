"""
Lolos - Player Actions

The closed command surface accepted by the turn state machine. Each action
is a small immutable value; cards are referenced by their integer id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from src.engine.base import GameConfig, Operator


@dataclass(frozen=True)
class StartGame:
    config: GameConfig


@dataclass(frozen=True)
class BeginTurn:
    pass


@dataclass(frozen=True)
class RollDice:
    """Roll the dice. ``values`` overrides the randomness source."""
    values: tuple[int, ...] | None = None

    @classmethod
    def fixed(cls, values: Sequence[int]) -> RollDice:
        return cls(values=tuple(values))


@dataclass(frozen=True)
class ConfirmEquation:
    """Lock in ``target``; ``equation`` is the player's display text, if any."""
    target: int
    equation: str | None = None


@dataclass(frozen=True)
class RevertToBuilding:
    pass


@dataclass(frozen=True)
class StageCard:
    card_id: int


@dataclass(frozen=True)
class UnstageCard:
    card_id: int


@dataclass(frozen=True)
class ConfirmStaged:
    pass


@dataclass(frozen=True)
class PlayIdentical:
    card_id: int


@dataclass(frozen=True)
class PlayOperator:
    card_id: int


@dataclass(frozen=True)
class PlayFraction:
    card_id: int


@dataclass(frozen=True)
class DefendFractionSolve:
    card_id: int


@dataclass(frozen=True)
class DefendFractionPenalty:
    pass


@dataclass(frozen=True)
class PlayWildcard:
    card_id: int
    operator: Operator


@dataclass(frozen=True)
class DrawCard:
    pass


@dataclass(frozen=True)
class CallLolos:
    """Declare "last card". Defaults to the current player."""
    player_id: int | None = None


@dataclass(frozen=True)
class EndTurn:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


Action = Union[
    StartGame,
    BeginTurn,
    RollDice,
    ConfirmEquation,
    RevertToBuilding,
    StageCard,
    UnstageCard,
    ConfirmStaged,
    PlayIdentical,
    PlayOperator,
    PlayFraction,
    DefendFractionSolve,
    DefendFractionPenalty,
    PlayWildcard,
    DrawCard,
    CallLolos,
    EndTurn,
    ResetGame,
]
