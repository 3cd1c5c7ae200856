"""
Lolos - Card & Deck Model

Deck composition (fixed multiplicities):
    - 4 copies of every number 0..N (N = 12 on easy, 25 on full)
    - Fractions: 6x 1/2, 4x each of 1/3, 1/4, 1/5 (optional)
    - 4 copies of each operator (+, -, x, ÷)
    - 4 wildcards

Piles are tuples with the top of the pile as the last element. All methods
are stateless class methods: piles are passed in and returned, never stored.
Card ids are a fresh 0-based sequence per generated deck, so each game owns
its own id space.
"""

from dataclasses import dataclass
from typing import ClassVar, Sequence

from src.engine.base import Card, CardKind, Difficulty, Operator
from src.engine.randomness import RandomSource


@dataclass(frozen=True)
class DealResult:
    """
    Result of dealing a shuffled deck.

    Attributes:
        hands: One tuple of cards per seat, in seat order
        remainder: Undealt cards, which become the draw pile
    """
    hands: tuple[tuple[Card, ...], ...]
    remainder: tuple[Card, ...]


@dataclass(frozen=True)
class DrawResult:
    """
    Result of drawing cards into a hand.

    Attributes:
        draw_pile: Draw pile after drawing (and any reshuffle)
        discard_pile: Discard pile after any reshuffle
        hand: The receiving hand with drawn cards appended
        drawn: Number of cards actually drawn
        exhausted: True if fewer cards than requested were available
    """
    draw_pile: tuple[Card, ...]
    discard_pile: tuple[Card, ...]
    hand: tuple[Card, ...]
    drawn: int
    exhausted: bool


class Deck:
    """Stateless helpers for building and moving cards between piles."""

    NUMBER_COPIES: ClassVar[int] = 4
    FRACTION_COPIES: ClassVar[dict[int, int]] = {2: 6, 3: 4, 4: 4, 5: 4}
    OPERATOR_COPIES: ClassVar[int] = 4
    WILDCARD_COPIES: ClassVar[int] = 4

    @classmethod
    def deck_size(cls, difficulty: Difficulty, include_fractions: bool = True) -> int:
        """Number of cards :meth:`generate` produces for these settings."""
        size = cls.NUMBER_COPIES * (difficulty.value + 1)
        if include_fractions:
            size += sum(cls.FRACTION_COPIES.values())
        size += cls.OPERATOR_COPIES * len(Operator)
        size += cls.WILDCARD_COPIES
        return size

    @classmethod
    def generate(
        cls,
        difficulty: Difficulty = Difficulty.FULL,
        include_fractions: bool = True,
    ) -> tuple[Card, ...]:
        """
        Build a full, unshuffled deck.

        Pure function of its inputs: two calls with the same arguments
        return equal decks with the same ids.

        Args:
            difficulty: Highest number card
            include_fractions: Whether to add the fraction cards

        Returns:
            Tuple of cards with ids 0..len-1
        """
        specs: list[dict] = []

        for _ in range(cls.NUMBER_COPIES):
            for value in range(difficulty.value + 1):
                specs.append({"kind": CardKind.NUMBER, "value": value})

        if include_fractions:
            for denominator, count in cls.FRACTION_COPIES.items():
                specs.extend({"kind": CardKind.FRACTION, "denominator": denominator} for _ in range(count))

        for operator in Operator:
            specs.extend({"kind": CardKind.OPERATOR, "operator": operator} for _ in range(cls.OPERATOR_COPIES))

        specs.extend({"kind": CardKind.WILDCARD} for _ in range(cls.WILDCARD_COPIES))

        return tuple(Card(id=card_id, **spec) for card_id, spec in enumerate(specs))

    @classmethod
    def shuffle(cls, cards: Sequence[Card], rng: RandomSource) -> tuple[Card, ...]:
        """
        Return a uniformly shuffled copy of ``cards`` (Fisher-Yates).

        Args:
            cards: Cards to shuffle (not modified)
            rng: Injected randomness source

        Returns:
            New tuple in shuffled order
        """
        shuffled = list(cards)
        for i in range(len(shuffled) - 1, 0, -1):
            j = rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return tuple(shuffled)

    @classmethod
    def deal(cls, deck: Sequence[Card], player_count: int, per_player: int) -> DealResult:
        """
        Deal round-robin, one card per player per round.

        Dealing stops early if the deck runs out.

        Args:
            deck: Cards to deal from, dealt from the front
            player_count: Number of hands
            per_player: Target hand size

        Returns:
            DealResult with hands and the undealt remainder
        """
        hands: list[list[Card]] = [[] for _ in range(player_count)]
        idx = 0
        for _ in range(per_player):
            for seat in range(player_count):
                if idx < len(deck):
                    hands[seat].append(deck[idx])
                    idx += 1
        return DealResult(
            hands=tuple(tuple(hand) for hand in hands),
            remainder=tuple(deck[idx:]),
        )

    @classmethod
    def take_first_discard(cls, draw_pile: Sequence[Card]) -> tuple[Card | None, tuple[Card, ...]]:
        """
        Pull the opening discard card out of the draw pile.

        Prefers the first number card; falls back to the first card.

        Returns:
            (opening card or None if the pile is empty, remaining draw pile)
        """
        for i, card in enumerate(draw_pile):
            if card.kind == CardKind.NUMBER:
                return card, tuple(draw_pile[:i]) + tuple(draw_pile[i + 1:])
        if not draw_pile:
            return None, ()
        return draw_pile[0], tuple(draw_pile[1:])

    @classmethod
    def reshuffle_if_empty(
        cls,
        draw_pile: Sequence[Card],
        discard_pile: Sequence[Card],
        rng: RandomSource,
    ) -> tuple[tuple[Card, ...], tuple[Card, ...]]:
        """
        Refill an empty draw pile from the discard pile.

        Every discard except the top card is shuffled into a new draw pile.
        Wildcard bindings are dropped as cards return to circulation.
        Piles are returned unchanged when the draw pile still has cards or
        the discard pile has one card or fewer.

        Returns:
            (draw_pile, discard_pile)
        """
        if draw_pile or len(discard_pile) <= 1:
            return tuple(draw_pile), tuple(discard_pile)
        recycled = [card.unbound() for card in discard_pile[:-1]]
        return cls.shuffle(recycled, rng), (discard_pile[-1],)

    @classmethod
    def draw(
        cls,
        draw_pile: Sequence[Card],
        discard_pile: Sequence[Card],
        hand: Sequence[Card],
        count: int,
        rng: RandomSource,
    ) -> DrawResult:
        """
        Draw ``count`` cards from the top of the draw pile into ``hand``.

        The draw pile is reshuffled from the discard pile whenever it empties.
        If both piles run dry the draw stops and the result is flagged as
        exhausted instead of raising.

        Args:
            draw_pile: Current draw pile (top = last element)
            discard_pile: Current discard pile (top = last element)
            hand: Receiving hand
            count: Cards requested
            rng: Randomness source for reshuffles

        Returns:
            DrawResult with the updated piles and hand
        """
        draw = tuple(draw_pile)
        discard = tuple(discard_pile)
        new_hand = list(hand)
        drawn = 0

        for _ in range(count):
            draw, discard = cls.reshuffle_if_empty(draw, discard, rng)
            if not draw:
                break
            new_hand.append(draw[-1])
            draw = draw[:-1]
            drawn += 1

        return DrawResult(
            draw_pile=draw,
            discard_pile=discard,
            hand=tuple(new_hand),
            drawn=drawn,
            exhausted=drawn < count,
        )
