"""
Lolos Snapshots.

Read-only pydantic models describing a match for the presentation layer.
"""

from src.snapshot.builder import build_player_view, build_snapshot
from src.snapshot.models import (
    AttackModel,
    CardModel,
    EquationModel,
    GameSnapshot,
    PlayerSummary,
    PlayerView,
)

__all__ = [
    "build_snapshot",
    "build_player_view",
    "AttackModel",
    "CardModel",
    "EquationModel",
    "GameSnapshot",
    "PlayerSummary",
    "PlayerView",
]
