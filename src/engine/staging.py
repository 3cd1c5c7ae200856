"""
Lolos - Staged-Selection Validator

After fixing a target, the player stages number cards (plus at most one
operator card) to discard. The selection is valid if some ordering of the
numbers, with the operator dropped into one gap and ``+`` in every other gap,
evaluates left to right to exactly the target.
"""

from itertools import permutations
from typing import Sequence

from src.engine.base import Card, CardKind, Operator
from src.engine.equations import apply_operator, evaluate_left_to_right


class StagingValidator:
    """
    Stateless validator for staged card selections.

    All methods are class methods operating on immutable data.
    """

    @classmethod
    def is_valid(
        cls,
        values: Sequence[int],
        operator: Operator | None,
        target: int,
    ) -> bool:
        """
        Check whether staged number values can reach ``target``.

        Args:
            values: Values of the staged number cards
            operator: The staged operator, if any
            target: The turn's equation result

        Returns:
            True if some ordering and operator gap reaches the target
        """
        if not values:
            return False

        if operator is None:
            return sum(values) == target

        # Equal values produce equal orderings; skip repeats.
        for ordering in set(permutations(values)):
            for gap in range(len(ordering) - 1):
                operators = [Operator.ADD] * (len(ordering) - 1)
                operators[gap] = operator
                if evaluate_left_to_right(ordering, operators) == target:
                    return True
        return False

    @classmethod
    def is_valid_selection(cls, staged: Sequence[Card], target: int) -> bool:
        """
        Validate a staged card selection against the target.

        The selection must hold at least one number card and at most one
        operator card; anything else is rejected.
        """
        numbers = [card.value for card in staged if card.kind == CardKind.NUMBER]
        operators = [card.effective_operator for card in staged if card.kind == CardKind.OPERATOR]
        others = [card for card in staged if card.kind not in (CardKind.NUMBER, CardKind.OPERATOR)]

        if others or len(operators) > 1:
            return False
        return cls.is_valid(numbers, operators[0] if operators else None, target)

    @classmethod
    def preview_result(cls, staged: Sequence[Card]) -> int | None:
        """
        Evaluate staged cards in staging order for a live preview.

        Adjacent numbers are joined with ``+``; a staged operator replaces the
        ``+`` before the next number. Returns None when nothing is staged or a
        step is invalid.
        """
        result: int | None = None
        pending = Operator.ADD
        for card in staged:
            if card.kind == CardKind.NUMBER:
                if result is None:
                    result = card.value
                else:
                    result = apply_operator(result, pending, card.value)
                    pending = Operator.ADD
                    if result is None:
                        return None
            elif card.kind == CardKind.OPERATOR:
                pending = card.operator
        return result

    @classmethod
    def can_sum_to_target(cls, values: Sequence[int], target: int) -> bool:
        """True if some non-empty subset of ``values`` sums to ``target``."""
        if target < 0:
            return False
        reachable: set[int] = set()
        for value in values:
            reachable |= {partial + value for partial in reachable if partial + value <= target}
            if value <= target:
                reachable.add(value)
            if target in reachable:
                return True
        return False
