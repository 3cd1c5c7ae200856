"""
Tests for the staged-selection validator.
"""

from src.engine.base import Operator
from src.engine.staging import StagingValidator
from tests.helpers import frac, num, op, wild


class TestIsValid:
    """Tests for value-level validation."""

    def test_sum_without_operator(self):
        """Test numbers alone must sum to the target."""
        assert StagingValidator.is_valid([4, 6], None, 10)
        assert not StagingValidator.is_valid([4, 5], None, 10)

    def test_single_number(self):
        """Test a single matching number."""
        assert StagingValidator.is_valid([7], None, 7)

    def test_subtraction_wrong_order_only(self):
        """Test 4 and 6 cannot make 10 with -."""
        assert not StagingValidator.is_valid([4, 6], Operator.SUB, 10)

    def test_subtraction_any_order(self):
        """Test 15 - 5 = 10 is found regardless of staging order."""
        assert StagingValidator.is_valid([5, 15], Operator.SUB, 10)

    def test_operator_in_gap_with_plus_elsewhere(self):
        """Test the operator takes one gap and + fills the rest."""
        # (2 + 3) x 4 = 20, evaluated left to right
        assert StagingValidator.is_valid([2, 3, 4], Operator.MUL, 20)
        # 4 x 2 + 3 = 11
        assert StagingValidator.is_valid([2, 3, 4], Operator.MUL, 11)

    def test_operator_needs_two_numbers(self):
        """Test a lone number with an operator has no gap."""
        assert not StagingValidator.is_valid([10], Operator.ADD, 10)

    def test_exact_division(self):
        """Test division must be exact."""
        assert StagingValidator.is_valid([12, 4], Operator.DIV, 3)
        assert not StagingValidator.is_valid([7, 2], Operator.DIV, 3)

    def test_empty(self):
        """Test nothing staged is never valid."""
        assert not StagingValidator.is_valid([], None, 0)


class TestIsValidSelection:
    """Tests for card-level validation."""

    def test_cards(self):
        """Test validating staged cards."""
        staged = [num(1, 15), op(2, Operator.SUB), num(3, 5)]
        assert StagingValidator.is_valid_selection(staged, 10)

    def test_rejects_two_operators(self):
        """Test at most one operator card."""
        staged = [num(1, 5), op(2, Operator.ADD), op(3, Operator.ADD), num(4, 5)]
        assert not StagingValidator.is_valid_selection(staged, 10)

    def test_rejects_other_kinds(self):
        """Test fractions and wildcards cannot be staged."""
        assert not StagingValidator.is_valid_selection([num(1, 4), frac(2, 2)], 4)
        assert not StagingValidator.is_valid_selection([num(1, 4), wild(2)], 4)


class TestPreviewResult:
    """Tests for the live staging preview."""

    def test_implied_plus(self):
        """Test adjacent numbers are added."""
        assert StagingValidator.preview_result([num(1, 4), num(2, 6)]) == 10

    def test_operator_between(self):
        """Test a staged operator applies to the next number."""
        staged = [num(1, 15), op(2, Operator.SUB), num(3, 5), num(4, 1)]
        assert StagingValidator.preview_result(staged) == 11

    def test_nothing_staged(self):
        """Test preview of nothing is None."""
        assert StagingValidator.preview_result([]) is None

    def test_invalid_division(self):
        """Test a non-exact division previews as None."""
        assert StagingValidator.preview_result([num(1, 7), op(2, Operator.DIV), num(3, 2)]) is None


class TestCanSumToTarget:
    """Tests for the subset-sum hint."""

    def test_subset_exists(self):
        """Test a subset summing to the target."""
        assert StagingValidator.can_sum_to_target([1, 8, 3, 20], 11)

    def test_no_subset(self):
        """Test no subset reaches the target."""
        assert not StagingValidator.can_sum_to_target([2, 4, 6], 5)

    def test_zero_card(self):
        """Test a zero card reaches target zero."""
        assert StagingValidator.can_sum_to_target([0, 3], 0)
        assert not StagingValidator.can_sum_to_target([], 0)
