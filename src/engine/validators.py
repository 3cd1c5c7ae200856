"""
Lolos - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

from typing import Sequence

from src.engine.base import DiceRoll

# Six hands of this size still leave a discard card in the smallest deck.
MAX_CARDS_PER_PLAYER = 11


def validate_dice_values(values: Sequence[int]) -> tuple[int, ...]:
    """
    Validate and normalize a turn's dice values.

    Args:
        values: Sequence of dice values to validate

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    values_tuple = tuple(values)
    count = len(values_tuple)

    if count != DiceRoll.NUM_DICE:
        raise ValueError(f"Exactly {DiceRoll.NUM_DICE} dice required, got {count}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= DiceRoll.FACES):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {DiceRoll.FACES}."
            )

    return values_tuple


def validate_player_count(count: int, min_players: int = 2, max_players: int = 6) -> int:
    """
    Validate number of players.

    Args:
        count: Number of players
        min_players: Smallest allowed table
        max_players: Largest allowed table

    Returns:
        Validated count

    Raises:
        ValueError: If count is out of range
    """
    if not isinstance(count, int):
        raise ValueError(f"Player count must be an integer, got {type(count).__name__}.")

    if not (min_players <= count <= max_players):
        raise ValueError(f"Player count must be {min_players}-{max_players}, got {count}.")

    return count


def validate_player_names(
    names: Sequence[str],
    min_players: int = 2,
    max_players: int = 6,
) -> tuple[str, ...]:
    """
    Validate the seat list for a new match.

    Names must be non-blank and unique (case-insensitive).

    Raises:
        ValueError: If the list is invalid
    """
    names_tuple = tuple(names)
    validate_player_count(len(names_tuple), min_players, max_players)

    seen: set[str] = set()
    for i, name in enumerate(names_tuple):
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Player name at seat {i} must be a non-empty string.")
        key = name.strip().casefold()
        if key in seen:
            raise ValueError(f"Duplicate player name {name!r}.")
        seen.add(key)

    return names_tuple


def validate_cards_per_player(count: int) -> int:
    """
    Validate the dealt hand size.

    Raises:
        ValueError: If count is not 1-11
    """
    if not isinstance(count, int):
        raise ValueError(f"Cards per player must be an integer, got {type(count).__name__}.")

    if not (1 <= count <= MAX_CARDS_PER_PLAYER):
        raise ValueError(f"Cards per player must be 1-{MAX_CARDS_PER_PLAYER}, got {count}.")

    return count


def validate_target(target: int) -> int:
    """
    Validate an equation target.

    Raises:
        ValueError: If target is not a non-negative integer
    """
    if not isinstance(target, int) or isinstance(target, bool):
        raise ValueError(f"Target must be an integer, got {type(target).__name__}.")

    if target < 0:
        raise ValueError(f"Target cannot be negative, got {target}.")

    return target
