"""
Lolos - Game State

Immutable game state. Per-phase data lives in a tagged union (one dataclass
per phase) and the outstanding defense obligation in a second one, so fields
that only make sense in one phase cannot leak into another.

    TurnPhase = SetupPhase | TurnTransitionPhase | PreRollPhase
              | BuildingPhase | SolvedPhase | GameOverPhase
    Attack    = NoAttack | FractionAttack | OperatorAttack
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Union

from src.engine.base import Card, DiceRoll, EquationOption, GameConfig, Operator, Phase


class Rejection(Enum):
    """Why the last action was turned into a no-op."""
    ILLEGAL_PHASE = "illegal_phase"
    INVALID_PAYLOAD = "invalid_payload"
    CARD_NOT_IN_HAND = "card_not_in_hand"
    ATTACK_PENDING = "attack_pending"
    NO_CARDS_AVAILABLE = "no_cards_available"


@dataclass(frozen=True)
class Player:
    """
    A seat at the table.

    Attributes:
        id: Seat index, stable for the match
        name: Display name
        hand: Cards held (order irrelevant to the rules)
        called_lolos: Declared "last card" this turn
    """
    id: int
    name: str
    hand: tuple[Card, ...] = ()
    called_lolos: bool = False

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    def find_card(self, card_id: int) -> Card | None:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def without_cards(self, card_ids: set[int] | frozenset[int]) -> Player:
        return replace(self, hand=tuple(c for c in self.hand if c.id not in card_ids))


# -- Phases -------------------------------------------------------------


@dataclass(frozen=True)
class SetupPhase:
    PHASE: ClassVar[Phase] = Phase.SETUP


@dataclass(frozen=True)
class TurnTransitionPhase:
    PHASE: ClassVar[Phase] = Phase.TURN_TRANSITION


@dataclass(frozen=True)
class PreRollPhase:
    PHASE: ClassVar[Phase] = Phase.PRE_ROLL


@dataclass(frozen=True)
class BuildingPhase:
    """Dice are rolled; the player is choosing a target."""
    PHASE: ClassVar[Phase] = Phase.BUILDING

    dice: DiceRoll
    valid_targets: tuple[EquationOption, ...]


@dataclass(frozen=True)
class SolvedPhase:
    """
    A target is locked in; the player is staging cards to match it.

    Attributes:
        dice: This turn's roll
        valid_targets: Targets reachable from the roll
        equation: The option the player committed to
        staged: Number/operator cards tentatively selected
        trap: Operator (or bound wildcard) placed trailing the equation
    """
    PHASE: ClassVar[Phase] = Phase.SOLVED

    dice: DiceRoll
    valid_targets: tuple[EquationOption, ...]
    equation: EquationOption
    staged: tuple[Card, ...] = ()
    trap: Card | None = None

    @property
    def equation_result(self) -> int:
        return self.equation.result


@dataclass(frozen=True)
class GameOverPhase:
    PHASE: ClassVar[Phase] = Phase.GAME_OVER

    winner_id: int


TurnPhase = Union[
    SetupPhase, TurnTransitionPhase, PreRollPhase, BuildingPhase, SolvedPhase, GameOverPhase
]


# -- Attacks ------------------------------------------------------------


@dataclass(frozen=True)
class NoAttack:
    pass


@dataclass(frozen=True)
class FractionAttack:
    """
    Fraction attack owed by the current player.

    Attributes:
        denominator: Combined denominator of the chain; a defending number
            must be divisible by it
        penalty: Cards drawn if the defender gives up (last fraction played)
    """
    denominator: int
    penalty: int


@dataclass(frozen=True)
class OperatorAttack:
    """Operator challenge: the current player must answer with ``operator``."""
    operator: Operator

    PENALTY: ClassVar[int] = 2


Attack = Union[NoAttack, FractionAttack, OperatorAttack]

NO_ATTACK = NoAttack()


# -- Game state ---------------------------------------------------------


@dataclass(frozen=True)
class GameState:
    """
    Complete, immutable state of a match.

    Attributes:
        config: Match configuration (None before setup)
        turn: Phase-specific data
        players: Seats in turn order
        current_player_index: Whose turn it is
        draw_pile: Face-down pile, top = last element
        discard_pile: Face-up pile, top = last element
        pending_attack: Defense owed by the current player
        outgoing_attack: Attack the current player has set up for the next
            player; handed over when the turn ends
        consecutive_identical_plays: Identical-card skips in a row (0-2)
        has_played_cards: The current player committed cards this turn
        has_drawn_card: The current player drew instead of playing
        rounds_played: Completed turns
        message: Advisory text for the presentation layer
        last_rejection: Why the last action was refused, if it was
        last_move: Short description of the last completed play
    """
    config: GameConfig | None = None
    turn: TurnPhase = field(default_factory=SetupPhase)
    players: tuple[Player, ...] = ()
    current_player_index: int = 0
    draw_pile: tuple[Card, ...] = ()
    discard_pile: tuple[Card, ...] = ()
    pending_attack: Attack = NO_ATTACK
    outgoing_attack: Attack = NO_ATTACK
    consecutive_identical_plays: int = 0
    has_played_cards: bool = False
    has_drawn_card: bool = False
    rounds_played: int = 0
    message: str = ""
    last_rejection: Rejection | None = None
    last_move: str | None = None

    MAX_IDENTICAL_PLAYS: ClassVar[int] = 2

    @property
    def phase(self) -> Phase:
        return self.turn.PHASE

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def top_discard(self) -> Card | None:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def dice(self) -> DiceRoll | None:
        return getattr(self.turn, "dice", None)

    @property
    def valid_targets(self) -> tuple[EquationOption, ...]:
        return getattr(self.turn, "valid_targets", ())

    @property
    def equation_result(self) -> int | None:
        if isinstance(self.turn, SolvedPhase):
            return self.turn.equation_result
        return None

    @property
    def staged_cards(self) -> tuple[Card, ...]:
        if isinstance(self.turn, SolvedPhase):
            return self.turn.staged
        return ()

    @property
    def winner(self) -> Player | None:
        if isinstance(self.turn, GameOverPhase):
            return self.players[self.turn.winner_id]
        return None

    @property
    def total_cards(self) -> int:
        """Cards across every hand and both piles."""
        return (
            len(self.draw_pile)
            + len(self.discard_pile)
            + sum(player.hand_size for player in self.players)
        )

    def with_player(self, player: Player) -> GameState:
        """Return new state with one seat replaced."""
        players = tuple(player if p.id == player.id else p for p in self.players)
        return replace(self, players=players)

    def with_changes(self, **changes) -> GameState:
        """Return new state with fields replaced; clears the last rejection."""
        changes.setdefault("last_rejection", None)
        return replace(self, **changes)

    def rejected(self, reason: Rejection, message: str) -> GameState:
        """Return this state unchanged apart from the advisory fields."""
        return replace(self, message=message, last_rejection=reason)
