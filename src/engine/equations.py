"""
Lolos - Dice Equation Solver

Every turn the player rolls three dice and must build an equation from them
that lands on a non-negative integer. This module enumerates every reachable
integer so the engine can validate the player's choice.

Enumeration passes:
    1. Three dice, standard precedence: ``a op1 b op2 c`` where x and ÷ bind
       tighter than + and -.
    2. Three dice, explicit left grouping: ``(a op1 b) op2 c``, the form the
       interactive equation builder produces.
    3. Two dice only: every pair of dice with one operator, both operand
       orders.

Both three-dice conventions are kept as separate sources of targets because
they can disagree (``2 + 3 x 4`` is 14 one way and 20 the other).

Division is only valid when exact. Intermediate results may go negative;
final results must be non-negative.
"""

from itertools import combinations, permutations, product
from typing import ClassVar, Sequence

from src.engine.base import DiceRoll, EquationOption, Operator


def apply_operator(a: int, operator: Operator, b: int) -> int | None:
    """
    Apply one operator to two integers.

    Returns:
        The integer result, or None when the operation is not allowed
        (division by zero or a non-exact division).
    """
    if operator == Operator.ADD:
        return a + b
    if operator == Operator.SUB:
        return a - b
    if operator == Operator.MUL:
        return a * b
    if operator == Operator.DIV:
        if b == 0 or a % b != 0:
            return None
        return a // b
    return None


def evaluate_left_to_right(values: Sequence[int], operators: Sequence[Operator]) -> int | None:
    """
    Evaluate ``v0 op0 v1 op1 v2 ...`` strictly left to right.

    Returns:
        Result, or None if any step is invalid
    """
    if len(operators) != len(values) - 1:
        raise ValueError(
            f"Need {len(values) - 1} operators for {len(values)} values, got {len(operators)}."
        )
    result: int | None = values[0]
    for operator, value in zip(operators, values[1:]):
        result = apply_operator(result, operator, value)
        if result is None:
            return None
    return result


def evaluate_with_precedence(a: int, op1: Operator, b: int, op2: Operator, c: int) -> int | None:
    """
    Evaluate ``a op1 b op2 c`` with x and ÷ binding tighter than + and -.

    When ``op2`` outranks ``op1`` the right pair is computed first; otherwise
    evaluation is left to right.
    """
    if op2.is_high_precedence and not op1.is_high_precedence:
        right = apply_operator(b, op2, c)
        if right is None:
            return None
        return apply_operator(a, op1, right)
    return evaluate_left_to_right((a, b, c), (op1, op2))


def _is_valid_target(result: int | None) -> bool:
    return result is not None and result >= 0


class EquationSolver:
    """
    Stateless solver mapping a dice roll to its reachable targets.

    All methods are class methods operating on immutable data.
    """

    ALL_OPERATORS: ClassVar[tuple[Operator, ...]] = tuple(Operator)

    @classmethod
    def precedence_options(cls, values: Sequence[int]) -> list[EquationOption]:
        """Three-dice equations under standard operator precedence."""
        options = []
        for a, b, c in permutations(values):
            for op1, op2 in product(cls.ALL_OPERATORS, repeat=2):
                result = evaluate_with_precedence(a, op1, b, op2, c)
                if _is_valid_target(result):
                    equation = f"{a} {op1.value} {b} {op2.value} {c} = {result}"
                    options.append(EquationOption(equation=equation, result=result))
        return options

    @classmethod
    def left_grouped_options(cls, values: Sequence[int]) -> list[EquationOption]:
        """Three-dice equations grouped as ``(a op1 b) op2 c``."""
        options = []
        for a, b, c in permutations(values):
            for op1, op2 in product(cls.ALL_OPERATORS, repeat=2):
                result = evaluate_left_to_right((a, b, c), (op1, op2))
                if _is_valid_target(result):
                    equation = f"({a} {op1.value} {b}) {op2.value} {c} = {result}"
                    options.append(EquationOption(equation=equation, result=result))
        return options

    @classmethod
    def pair_options(cls, values: Sequence[int]) -> list[EquationOption]:
        """Two-dice equations, every pair in both operand orders."""
        options = []
        for x, y in combinations(values, 2):
            for operator in cls.ALL_OPERATORS:
                for a, b in ((x, y), (y, x)):
                    result = apply_operator(a, operator, b)
                    if _is_valid_target(result):
                        equation = f"{a} {operator.value} {b} = {result}"
                        options.append(EquationOption(equation=equation, result=result))
        return options

    @classmethod
    def valid_targets(cls, dice: DiceRoll | Sequence[int]) -> tuple[EquationOption, ...]:
        """
        Enumerate every reachable target for a roll.

        Args:
            dice: The three rolled values

        Returns:
            One EquationOption per distinct result, sorted ascending by result.
            The first equation found for a result is kept as its label.
        """
        values = dice.values if isinstance(dice, DiceRoll) else tuple(dice)

        by_result: dict[int, EquationOption] = {}
        for option in (
            cls.precedence_options(values)
            + cls.left_grouped_options(values)
            + cls.pair_options(values)
        ):
            by_result.setdefault(option.result, option)

        return tuple(by_result[result] for result in sorted(by_result))

    @classmethod
    def target_results(cls, dice: DiceRoll | Sequence[int]) -> frozenset[int]:
        """Just the reachable integers for a roll."""
        return frozenset(option.result for option in cls.valid_targets(dice))

    @classmethod
    def find_option(
        cls,
        options: Sequence[EquationOption],
        target: int,
    ) -> EquationOption | None:
        """Look up the option for ``target`` in a solved target list."""
        for option in options:
            if option.result == target:
                return option
        return None
