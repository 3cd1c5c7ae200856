"""
Tests for the attack/defense rule set.
"""

import pytest

from src.engine.base import Operator
from src.engine.rules import AttackRules
from src.engine.state import FractionAttack, OperatorAttack
from tests.helpers import frac, num, op, wild


class TestIdentical:
    """Tests for identical-card matching."""

    def test_numbers(self):
        """Test numbers match on value."""
        assert AttackRules.is_identical(num(1, 7), num(2, 7))
        assert not AttackRules.is_identical(num(1, 7), num(2, 8))

    def test_fractions(self):
        """Test fractions match on denominator."""
        assert AttackRules.is_identical(frac(1, 3), frac(2, 3))
        assert not AttackRules.is_identical(frac(1, 3), frac(2, 2))

    def test_operators(self):
        """Test operators match printed or bound operators."""
        assert AttackRules.is_identical(op(1, Operator.ADD), op(2, Operator.ADD))
        assert AttackRules.is_identical(op(1, Operator.ADD), wild(2).bind(Operator.ADD))
        assert not AttackRules.is_identical(op(1, Operator.ADD), op(2, Operator.SUB))

    def test_wildcard(self):
        """Test a wildcard only matches another wildcard."""
        assert not AttackRules.is_identical(wild(1), op(2, Operator.MUL))
        assert AttackRules.is_identical(wild(1), wild(2))
        assert AttackRules.is_identical(wild(1), wild(2).bind(Operator.SUB))
        assert not AttackRules.is_identical(wild(1), num(2, 3))

    def test_kind_mismatch(self):
        """Test different kinds never match."""
        assert not AttackRules.is_identical(num(1, 2), frac(2, 2))
        assert not AttackRules.is_identical(num(1, 2), None)


class TestFractionAttack:
    """Tests for fraction attacks."""

    def test_start_requires_divisible_top(self):
        """Test the discard top must be a positive multiple of d."""
        assert AttackRules.can_start_fraction_attack(frac(1, 2), num(2, 8))
        assert not AttackRules.can_start_fraction_attack(frac(1, 3), num(2, 8))
        assert not AttackRules.can_start_fraction_attack(frac(1, 2), num(2, 0))
        assert not AttackRules.can_start_fraction_attack(frac(1, 2), op(2, Operator.ADD))
        assert not AttackRules.can_start_fraction_attack(frac(1, 2), None)

    def test_start(self):
        """Test 1/2 creates denominator 2, penalty 2."""
        assert AttackRules.start_fraction_attack(frac(1, 2)) == FractionAttack(2, 2)

    def test_start_non_fraction(self):
        """Test only fraction cards attack."""
        with pytest.raises(ValueError, match="Expected a fraction"):
            AttackRules.start_fraction_attack(num(1, 4))

    def test_chain(self):
        """Test chaining 1/3 onto 1/2 gives denominator 6, penalty 3."""
        attack = AttackRules.chain_fraction_attack(FractionAttack(2, 2), frac(1, 3))
        assert attack == FractionAttack(denominator=6, penalty=3)

    def test_solve(self):
        """Test defending needs a number divisible by the chain denominator."""
        attack = FractionAttack(6, 3)
        assert AttackRules.solves_fraction_attack(num(1, 12), attack)
        assert not AttackRules.solves_fraction_attack(num(1, 9), attack)
        assert not AttackRules.solves_fraction_attack(num(1, 0), attack)
        assert not AttackRules.solves_fraction_attack(frac(1, 2), attack)


class TestOperatorAttack:
    """Tests for operator challenges."""

    def test_resolve_operator(self):
        """Test operator cards play as printed and wildcards bind."""
        assert AttackRules.resolve_operator(op(1, Operator.ADD)) == op(1, Operator.ADD)
        assert AttackRules.resolve_operator(op(1, Operator.ADD), Operator.SUB) is None
        assert AttackRules.resolve_operator(wild(2), Operator.MUL).bound_operator == Operator.MUL
        assert AttackRules.resolve_operator(wild(2)) is None
        assert AttackRules.resolve_operator(num(3, 3)) is None

    def test_defends(self):
        """Test the answer must match the challenge operator."""
        attack = OperatorAttack(Operator.MUL)
        assert AttackRules.defends_operator_attack(op(1, Operator.MUL), attack)
        assert AttackRules.defends_operator_attack(wild(2).bind(Operator.MUL), attack)
        assert not AttackRules.defends_operator_attack(op(1, Operator.ADD), attack)

    def test_has_defense(self):
        """Test a matching operator or any wildcard is a defense."""
        attack = OperatorAttack(Operator.SUB)
        assert AttackRules.has_operator_defense([num(1, 3), op(2, Operator.SUB)], attack)
        assert AttackRules.has_operator_defense([wild(3)], attack)
        assert not AttackRules.has_operator_defense([op(2, Operator.ADD), num(1, 3)], attack)

    def test_penalty(self):
        """Test an unanswered challenge costs two cards."""
        assert OperatorAttack.PENALTY == 2


class TestCanPlayAnything:
    """Tests for the playable-card hint."""

    def test_identical_available(self):
        """Test an identical card counts until the cap."""
        hand = [num(1, 7)]
        assert AttackRules.can_play_anything(hand, num(2, 7), None, 0)
        assert not AttackRules.can_play_anything(hand, num(2, 7), None, 2)

    def test_operator_always_playable(self):
        """Test operators and wildcards can always be used."""
        assert AttackRules.can_play_anything([wild(1)], num(2, 3), None, 0)

    def test_numbers_against_target(self):
        """Test numbers need a subset summing to the target."""
        hand = [num(1, 4), num(2, 6)]
        assert AttackRules.can_play_anything(hand, num(3, 1), 10, 0)
        assert not AttackRules.can_play_anything(hand, num(3, 1), 5, 0)

    def test_fraction(self):
        """Test a fraction that can attack the discard top."""
        assert AttackRules.can_play_anything([frac(1, 2)], num(2, 4), None, 0)
        assert not AttackRules.can_play_anything([frac(1, 2)], num(2, 5), None, 0)
