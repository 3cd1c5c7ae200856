"""
Lolos - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the rule engine. Cards, dice rolls and configuration are immutable (frozen
dataclasses) so every state transition produces new values instead of
mutating shared ones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence


class CardKind(Enum):
    """Card variants in a Lolos deck."""
    NUMBER = "number"
    FRACTION = "fraction"
    OPERATOR = "operator"
    WILDCARD = "wildcard"


class Operator(Enum):
    """Arithmetic operators printed on operator cards."""
    ADD = "+"
    SUB = "-"
    MUL = "x"
    DIV = "÷"

    @property
    def is_high_precedence(self) -> bool:
        """Multiplication and division bind tighter than + and -."""
        return self in (Operator.MUL, Operator.DIV)


class Difficulty(Enum):
    """Deck difficulty. The value is the highest number card."""
    EASY = 12
    FULL = 25

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown difficulty {name!r}. Must be one of "
                f"{[d.name.lower() for d in cls]}."
            ) from None


class Phase(Enum):
    """Turn state machine phases."""
    SETUP = "setup"
    TURN_TRANSITION = "turn_transition"
    PRE_ROLL = "pre_roll"
    BUILDING = "building"
    SOLVED = "solved"
    GAME_OVER = "game_over"


FRACTION_DENOMINATORS = (2, 3, 4, 5)


@dataclass(frozen=True)
class Card:
    """
    Immutable card value.

    Attributes:
        id: Stable integer handle, unique within one generated deck
        kind: Card variant
        value: Face value for number cards
        denominator: Denominator for fraction cards (1/d)
        operator: Printed operator for operator cards
        bound_operator: Operator chosen for a wildcard when it was played.
            Attached to the played copy; the printed payload is untouched.
    """
    id: int
    kind: CardKind
    value: int | None = None
    denominator: int | None = None
    operator: Operator | None = None
    bound_operator: Operator | None = None

    def __post_init__(self) -> None:
        """Validate the payload matches the card kind."""
        if self.kind == CardKind.NUMBER:
            if self.value is None or self.value < 0:
                raise ValueError(f"Number card {self.id} needs a value >= 0, got {self.value}.")
        elif self.kind == CardKind.FRACTION:
            if self.denominator not in FRACTION_DENOMINATORS:
                raise ValueError(
                    f"Fraction card {self.id} has denominator {self.denominator}, "
                    f"must be one of {FRACTION_DENOMINATORS}."
                )
        elif self.kind == CardKind.OPERATOR:
            if self.operator is None:
                raise ValueError(f"Operator card {self.id} has no operator.")
        if self.bound_operator is not None and self.kind != CardKind.WILDCARD:
            raise ValueError("Only wildcards can be bound to an operator.")

    @property
    def effective_operator(self) -> Operator | None:
        """The operator this card acts as: printed, or bound for a played wildcard."""
        if self.kind == CardKind.OPERATOR:
            return self.operator
        if self.kind == CardKind.WILDCARD:
            return self.bound_operator
        return None

    def bind(self, operator: Operator) -> "Card":
        """Return a wildcard copy acting as ``operator``."""
        if self.kind != CardKind.WILDCARD:
            raise ValueError(f"Cannot bind an operator to a {self.kind.value} card.")
        return replace(self, bound_operator=operator)

    def unbound(self) -> "Card":
        """Return the card with any wildcard binding removed."""
        if self.bound_operator is None:
            return self
        return replace(self, bound_operator=None)

    def label(self) -> str:
        """Short human-readable face, e.g. ``7``, ``1/3``, ``÷``, ``wild(+)``."""
        if self.kind == CardKind.NUMBER:
            return str(self.value)
        if self.kind == CardKind.FRACTION:
            return f"1/{self.denominator}"
        if self.kind == CardKind.OPERATOR:
            return self.operator.value
        if self.bound_operator is not None:
            return f"wild({self.bound_operator.value})"
        return "wild"

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of the three dice rolled each turn.

    Attributes:
        values: Tuple of three face values (1-6)
    """
    values: tuple[int, int, int]

    NUM_DICE = 3
    FACES = 6

    def __post_init__(self) -> None:
        """Validate dice count and face range."""
        if len(self.values) != self.NUM_DICE:
            raise ValueError(f"Expected {self.NUM_DICE} dice, got {len(self.values)}.")
        for value in self.values:
            if not (1 <= value <= self.FACES):
                raise ValueError(
                    f"Invalid die value {value}. Must be between 1 and {self.FACES}."
                )

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    @property
    def is_triple(self) -> bool:
        """All three dice show the same face."""
        return self.values[0] == self.values[1] == self.values[2]

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> "DiceRoll":
        """Create a DiceRoll from any sequence type."""
        return cls(values=tuple(values))


@dataclass(frozen=True)
class EquationOption:
    """
    One reachable target for a dice roll.

    Attributes:
        equation: Representative equation, e.g. ``"2 x 3 x 4 = 24"``
        result: Non-negative integer the equation evaluates to
    """
    equation: str
    result: int


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a single match.

    Attributes:
        player_names: Seat order of the players (2-6)
        difficulty: Highest number card in the deck
        include_fractions: Whether fraction cards are shuffled in
        cards_per_player: Hand size dealt at setup
        show_possible_results: Whether snapshots expose the valid targets
    """
    player_names: tuple[str, ...]
    difficulty: Difficulty = Difficulty.FULL
    include_fractions: bool = True
    cards_per_player: int = 10
    show_possible_results: bool = True

    MIN_PLAYERS = 2
    MAX_PLAYERS = 6

    def __post_init__(self) -> None:
        """Validate configuration."""
        # Local import keeps validators free to depend on base.
        from src.engine.validators import validate_cards_per_player, validate_player_names

        validate_player_names(self.player_names, self.MIN_PLAYERS, self.MAX_PLAYERS)
        validate_cards_per_player(self.cards_per_player)

    @property
    def num_players(self) -> int:
        return len(self.player_names)
