"""
Lolos Game Engine.

Pure Python rule engine with zero UI/network dependencies.
Handles the deck, dice equations, staged card selections, attacks and
the turn state machine.
"""

from src.engine.actions import (
    Action,
    BeginTurn,
    CallLolos,
    ConfirmEquation,
    ConfirmStaged,
    DefendFractionPenalty,
    DefendFractionSolve,
    DrawCard,
    EndTurn,
    PlayFraction,
    PlayIdentical,
    PlayOperator,
    PlayWildcard,
    ResetGame,
    RevertToBuilding,
    RollDice,
    StageCard,
    StartGame,
    UnstageCard,
)
from src.engine.base import (
    Card,
    CardKind,
    DiceRoll,
    Difficulty,
    EquationOption,
    GameConfig,
    Operator,
    Phase,
)
from src.engine.deck import Deck
from src.engine.equations import EquationSolver
from src.engine.randomness import RandomSource, SeededRandom
from src.engine.rules import AttackRules
from src.engine.session import GameSession
from src.engine.staging import StagingValidator
from src.engine.state import (
    FractionAttack,
    GameState,
    NoAttack,
    OperatorAttack,
    Player,
    Rejection,
)
from src.engine.turn_machine import TurnEngine, apply_action, new_game

__all__ = [
    # Data Classes
    "Card",
    "DiceRoll",
    "EquationOption",
    "GameConfig",
    "GameState",
    "Player",
    "FractionAttack",
    "OperatorAttack",
    "NoAttack",
    # Enums
    "CardKind",
    "Operator",
    "Difficulty",
    "Phase",
    "Rejection",
    # Randomness
    "RandomSource",
    "SeededRandom",
    # Engines
    "Deck",
    "EquationSolver",
    "StagingValidator",
    "AttackRules",
    "TurnEngine",
    "GameSession",
    "apply_action",
    "new_game",
    # Actions
    "Action",
    "StartGame",
    "BeginTurn",
    "RollDice",
    "ConfirmEquation",
    "RevertToBuilding",
    "StageCard",
    "UnstageCard",
    "ConfirmStaged",
    "PlayIdentical",
    "PlayOperator",
    "PlayFraction",
    "DefendFractionSolve",
    "DefendFractionPenalty",
    "PlayWildcard",
    "DrawCard",
    "CallLolos",
    "EndTurn",
    "ResetGame",
]
