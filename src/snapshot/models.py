"""
Lolos - Snapshot Models

Pydantic read models handed to the presentation layer. They are built from
the engine's frozen dataclasses and carry no behavior.
"""

from pydantic import BaseModel, Field


class CardModel(BaseModel):
    """One card as shown to a player."""

    id: int
    kind: str
    label: str
    value: int | None = None
    denominator: int | None = None
    operator: str | None = None
    bound_operator: str | None = None

    model_config = {"from_attributes": True}


class EquationModel(BaseModel):
    """A reachable target and its representative equation."""

    equation: str
    result: int

    model_config = {"from_attributes": True}


class AttackModel(BaseModel):
    """Outstanding defense obligation of the current player."""

    kind: str = Field(description="'fraction' or 'operator'")
    denominator: int | None = None
    penalty: int
    operator: str | None = None


class PlayerSummary(BaseModel):
    """Public information about a seat."""

    id: int
    name: str
    hand_size: int
    called_lolos: bool = False


class GameSnapshot(BaseModel):
    """Full, unfiltered view of a match."""

    phase: str
    players: list[PlayerSummary] = Field(default_factory=list)
    hands: dict[int, list[CardModel]] = Field(default_factory=dict)
    current_player_id: int | None = None
    top_discard: CardModel | None = None
    draw_pile_size: int = 0
    discard_pile_size: int = 0
    dice: list[int] | None = None
    valid_targets: list[EquationModel] | None = None
    equation: EquationModel | None = None
    staged: list[CardModel] = Field(default_factory=list)
    staged_result: int | None = None
    trap: CardModel | None = None
    pending_attack: AttackModel | None = None
    consecutive_identical_plays: int = 0
    rounds_played: int = 0
    winner_id: int | None = None
    message: str = ""
    last_rejection: str | None = None
    last_move: str | None = None


class PlayerView(BaseModel):
    """What one seat may see: their own hand, counts for everyone else."""

    player_id: int
    is_my_turn: bool
    hand: list[CardModel] = Field(default_factory=list)
    can_play_anything: bool = False
    snapshot: GameSnapshot
