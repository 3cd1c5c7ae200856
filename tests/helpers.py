"""
Lolos - Test Helpers

Card builders and canned mid-game states shared by the test modules.
"""

from src.engine.base import Card, CardKind, GameConfig, Operator
from src.engine.state import GameState, Player, PreRollPhase


def num(card_id: int, value: int) -> Card:
    return Card(id=card_id, kind=CardKind.NUMBER, value=value)


def frac(card_id: int, denominator: int) -> Card:
    return Card(id=card_id, kind=CardKind.FRACTION, denominator=denominator)


def op(card_id: int, operator: Operator) -> Card:
    return Card(id=card_id, kind=CardKind.OPERATOR, operator=operator)


def wild(card_id: int) -> Card:
    return Card(id=card_id, kind=CardKind.WILDCARD)


def filler(start: int, count: int, value: int = 1) -> tuple[Card, ...]:
    """``count`` number cards with ids from ``start``."""
    return tuple(num(start + i, value) for i in range(count))


def make_state(
    hands: list[tuple[Card, ...]],
    *,
    discard: tuple[Card, ...] = (),
    draw: tuple[Card, ...] | None = None,
    turn=None,
    current: int = 0,
    **changes,
) -> GameState:
    """
    Build a mid-game state with explicit hands and piles.

    The default draw pile holds 20 number cards with ids from 900.
    """
    names = ("Ada", "Bo", "Cy", "Dee", "Eve", "Fay")[: len(hands)]
    players = tuple(
        Player(id=i, name=name, hand=hand) for i, (name, hand) in enumerate(zip(names, hands))
    )
    return GameState(
        config=GameConfig(player_names=names),
        turn=turn if turn is not None else PreRollPhase(),
        players=players,
        current_player_index=current,
        draw_pile=draw if draw is not None else filler(900, 20),
        discard_pile=discard,
        **changes,
    )
