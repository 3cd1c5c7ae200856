"""
Tests for the card and deck model.
"""

from collections import Counter

from src.engine.base import CardKind, Difficulty, Operator
from src.engine.deck import Deck
from src.engine.randomness import SeededRandom
from tests.helpers import filler, num, wild


class TestGenerate:
    """Tests for deck composition."""

    def test_full_deck_size(self):
        """Test full deck: 4x 0..25, 18 fractions, 16 operators, 4 wildcards."""
        deck = Deck.generate(Difficulty.FULL, include_fractions=True)
        assert len(deck) == 142 == Deck.deck_size(Difficulty.FULL, True)

    def test_easy_deck_size(self):
        """Test easy deck with and without fractions."""
        assert len(Deck.generate(Difficulty.EASY, True)) == 90
        assert len(Deck.generate(Difficulty.EASY, False)) == 72

    def test_multiplicities(self):
        """Test copy counts per card kind."""
        deck = Deck.generate(Difficulty.EASY, True)
        numbers = Counter(c.value for c in deck if c.kind == CardKind.NUMBER)
        fractions = Counter(c.denominator for c in deck if c.kind == CardKind.FRACTION)
        operators = Counter(c.operator for c in deck if c.kind == CardKind.OPERATOR)

        assert set(numbers) == set(range(13))
        assert all(count == 4 for count in numbers.values())
        assert fractions == {2: 6, 3: 4, 4: 4, 5: 4}
        assert operators == {o: 4 for o in Operator}
        assert sum(1 for c in deck if c.kind == CardKind.WILDCARD) == 4

    def test_ids_unique_and_deterministic(self):
        """Test ids are 0..n-1 and repeat across calls."""
        first = Deck.generate()
        assert [c.id for c in first] == list(range(len(first)))
        assert Deck.generate() == first


class TestShuffle:
    """Tests for Deck.shuffle."""

    def test_permutation(self):
        """Test shuffle keeps the same cards."""
        deck = Deck.generate(Difficulty.EASY)
        shuffled = Deck.shuffle(deck, SeededRandom(7))
        assert sorted(c.id for c in shuffled) == [c.id for c in deck]

    def test_seeded_is_reproducible(self):
        """Test equal seeds give equal orders."""
        deck = Deck.generate(Difficulty.EASY)
        assert Deck.shuffle(deck, SeededRandom(3)) == Deck.shuffle(deck, SeededRandom(3))
        assert Deck.shuffle(deck, SeededRandom(3)) != deck


class TestDeal:
    """Tests for Deck.deal and opening discard."""

    def test_round_robin(self):
        """Test cards are dealt one per seat per round."""
        deck = filler(0, 10)
        result = Deck.deal(deck, player_count=2, per_player=3)
        assert [c.id for c in result.hands[0]] == [0, 2, 4]
        assert [c.id for c in result.hands[1]] == [1, 3, 5]
        assert [c.id for c in result.remainder] == [6, 7, 8, 9]

    def test_short_deck(self):
        """Test dealing stops when the deck runs out."""
        result = Deck.deal(filler(0, 3), player_count=2, per_player=3)
        assert len(result.hands[0]) == 2
        assert len(result.hands[1]) == 1
        assert result.remainder == ()

    def test_first_discard_is_first_number(self):
        """Test the opening discard skips non-number cards."""
        pile = (wild(0), num(1, 5), num(2, 6))
        card, rest = Deck.take_first_discard(pile)
        assert card == num(1, 5)
        assert rest == (wild(0), num(2, 6))

    def test_first_discard_fallback(self):
        """Test fallback to the first card and the empty pile."""
        assert Deck.take_first_discard((wild(0), wild(1))) == (wild(0), (wild(1),))
        assert Deck.take_first_discard(()) == (None, ())


class TestDraw:
    """Tests for drawing and reshuffling."""

    def test_draw_from_top(self):
        """Test the last element is drawn first."""
        result = Deck.draw(filler(0, 3), (), (), 2, SeededRandom(1))
        assert [c.id for c in result.hand] == [2, 1]
        assert [c.id for c in result.draw_pile] == [0]
        assert result.drawn == 2
        assert not result.exhausted

    def test_reshuffle_keeps_top_discard(self):
        """Test an empty draw pile is refilled from all but the top discard."""
        discard = (num(0, 1), wild(1).bind(Operator.ADD), num(2, 9))
        result = Deck.draw((), discard, (), 1, SeededRandom(1))
        assert result.discard_pile == (num(2, 9),)
        assert result.drawn == 1
        assert len(result.draw_pile) == 1

    def test_reshuffle_strips_wildcard_binding(self):
        """Test recycled wildcards come back unbound."""
        discard = (wild(1).bind(Operator.ADD), num(2, 9))
        draw, rest = Deck.reshuffle_if_empty((), discard, SeededRandom(1))
        assert draw == (wild(1),)
        assert rest == (num(2, 9),)

    def test_no_reshuffle_when_cards_remain(self):
        """Test piles are untouched while the draw pile has cards."""
        draw, discard = Deck.reshuffle_if_empty(filler(0, 1), filler(5, 3), SeededRandom(1))
        assert draw == filler(0, 1)
        assert discard == filler(5, 3)

    def test_exhausted(self):
        """Test drawing from empty piles reports exhaustion without raising."""
        result = Deck.draw((), (num(0, 4),), (num(1, 1),), 3, SeededRandom(1))
        assert result.drawn == 0
        assert result.exhausted
        assert result.hand == (num(1, 1),)
        assert result.discard_pile == (num(0, 4),)

    def test_partial_draw(self):
        """Test a draw that runs out part way."""
        result = Deck.draw(filler(0, 1), (num(5, 2), num(6, 3)), (), 4, SeededRandom(1))
        assert result.drawn == 2
        assert result.exhausted
        assert len(result.hand) + len(result.draw_pile) + len(result.discard_pile) == 3
