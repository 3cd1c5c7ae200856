"""
Lolos - Attack/Defense Rule Set

Rules for the special plays:
    - Identical card: before rolling, discard a card identical to the discard
      top to skip the dice phase (at most two skips in a row).
    - Fraction attack: a 1/d card played on a number divisible by d forces the
      next player to defend. Defend with a number divisible by the chain's
      denominator, relay with another fraction (denominators multiply, the
      penalty becomes the new fraction's denominator), or draw the penalty.
    - Operator challenge: an operator left trailing the equation forces the
      next player to answer with the same operator (or a wildcard bound to it)
      or draw two cards.
    - Wildcard: stands in for any operator; the chosen operator is bound to
      the played copy.

All methods are stateless class methods returning plain values. The turn
state machine decides when each rule applies.
"""

from typing import Sequence

from src.engine.base import Card, CardKind, Operator
from src.engine.staging import StagingValidator
from src.engine.state import FractionAttack, OperatorAttack


class AttackRules:
    """Stateless rule checks for identical plays, attacks and defenses."""

    @classmethod
    def is_identical(cls, card: Card, top: Card | None) -> bool:
        """
        Check whether ``card`` matches the discard top structurally.

        Number and fraction cards must share kind and payload. An operator
        card also matches a played wildcard bound to the same operator. A
        wildcard only matches another wildcard.
        """
        if top is None:
            return False

        if card.kind == CardKind.NUMBER:
            return top.kind == CardKind.NUMBER and card.value == top.value
        if card.kind == CardKind.FRACTION:
            return top.kind == CardKind.FRACTION and card.denominator == top.denominator

        if card.kind == CardKind.OPERATOR:
            return top.effective_operator is not None and card.operator == top.effective_operator
        if card.kind == CardKind.WILDCARD:
            return top.kind == CardKind.WILDCARD
        return False

    # -- Fractions -------------------------------------------------------

    @classmethod
    def is_divisible(cls, value: int | None, denominator: int) -> bool:
        """Positive and evenly divisible by ``denominator``."""
        return value is not None and value > 0 and value % denominator == 0

    @classmethod
    def can_start_fraction_attack(cls, card: Card, top: Card | None) -> bool:
        """A fraction may attack a number top divisible by its denominator."""
        if card.kind != CardKind.FRACTION or top is None:
            return False
        if top.kind != CardKind.NUMBER:
            return False
        return cls.is_divisible(top.value, card.denominator)

    @classmethod
    def start_fraction_attack(cls, card: Card) -> FractionAttack:
        """Attack created by a fresh 1/d card: penalty d."""
        if card.kind != CardKind.FRACTION:
            raise ValueError(f"Expected a fraction card, got {card.kind.value}.")
        return FractionAttack(denominator=card.denominator, penalty=card.denominator)

    @classmethod
    def chain_fraction_attack(cls, attack: FractionAttack, card: Card) -> FractionAttack:
        """
        Relay an attack with another fraction.

        The combined denominator is the product; the penalty is the new
        card's denominator alone.
        """
        if card.kind != CardKind.FRACTION:
            raise ValueError(f"Expected a fraction card, got {card.kind.value}.")
        return FractionAttack(
            denominator=attack.denominator * card.denominator,
            penalty=card.denominator,
        )

    @classmethod
    def solves_fraction_attack(cls, card: Card, attack: FractionAttack) -> bool:
        """A number card divisible by the chain's denominator ends the attack."""
        return card.kind == CardKind.NUMBER and cls.is_divisible(card.value, attack.denominator)

    # -- Operators -------------------------------------------------------

    @classmethod
    def resolve_operator(cls, card: Card, chosen: Operator | None = None) -> Card | None:
        """
        Return the copy of an operator-like card to play.

        Operator cards play as printed (``chosen`` must agree if given).
        Wildcards need ``chosen`` and are returned bound to it. Anything
        else returns None.
        """
        if card.kind == CardKind.OPERATOR:
            if chosen is not None and chosen != card.operator:
                return None
            return card
        if card.kind == CardKind.WILDCARD and chosen is not None:
            return card.bind(chosen)
        return None

    @classmethod
    def defends_operator_attack(cls, played: Card, attack: OperatorAttack) -> bool:
        """An operator card, or bound wildcard, answering the same operator."""
        return played.effective_operator == attack.operator

    @classmethod
    def has_operator_defense(cls, hand: Sequence[Card], attack: OperatorAttack) -> bool:
        """Whether the hand holds a matching operator card or any wildcard."""
        return any(
            card.kind == CardKind.WILDCARD
            or (card.kind == CardKind.OPERATOR and card.operator == attack.operator)
            for card in hand
        )

    # -- Hints -----------------------------------------------------------

    @classmethod
    def can_play_anything(
        cls,
        hand: Sequence[Card],
        top: Card | None,
        target: int | None,
        consecutive_identical_plays: int,
        max_identical_plays: int = 2,
    ) -> bool:
        """
        Whether any card in ``hand`` has a legal use right now.

        Operators and wildcards are always usable (as traps); fractions need a
        divisible number on top; numbers need a subset summing to the target.
        """
        if consecutive_identical_plays < max_identical_plays:
            if any(cls.is_identical(card, top) for card in hand):
                return True

        if any(card.kind in (CardKind.OPERATOR, CardKind.WILDCARD) for card in hand):
            return True

        if any(cls.can_start_fraction_attack(card, top) for card in hand):
            return True

        if target is not None:
            values = [card.value for card in hand if card.kind == CardKind.NUMBER]
            if StagingValidator.can_sum_to_target(values, target):
                return True

        return False
