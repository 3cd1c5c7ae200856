"""
Lolos - Snapshot Builder

Converts an engine GameState into pydantic read models. The full snapshot
shows every hand; a player view keeps only the viewer's own hand.
"""

from src.engine.base import Card
from src.engine.rules import AttackRules
from src.engine.staging import StagingValidator
from src.engine.state import FractionAttack, GameState, OperatorAttack, SolvedPhase
from src.snapshot.models import (
    AttackModel,
    CardModel,
    EquationModel,
    GameSnapshot,
    PlayerSummary,
    PlayerView,
)


def card_model(card: Card) -> CardModel:
    return CardModel(
        id=card.id,
        kind=card.kind.value,
        label=card.label(),
        value=card.value,
        denominator=card.denominator,
        operator=card.operator.value if card.operator else None,
        bound_operator=card.bound_operator.value if card.bound_operator else None,
    )


def attack_model(state: GameState) -> AttackModel | None:
    attack = state.pending_attack
    if isinstance(attack, FractionAttack):
        return AttackModel(kind="fraction", denominator=attack.denominator, penalty=attack.penalty)
    if isinstance(attack, OperatorAttack):
        return AttackModel(
            kind="operator", operator=attack.operator.value, penalty=OperatorAttack.PENALTY
        )
    return None


def build_snapshot(state: GameState) -> GameSnapshot:
    """
    Build the full snapshot of a match.

    Args:
        state: Engine state to describe

    Returns:
        GameSnapshot with every hand visible
    """
    turn = state.turn
    solved = turn if isinstance(turn, SolvedPhase) else None

    return GameSnapshot(
        phase=state.phase.value,
        players=[
            PlayerSummary(
                id=p.id, name=p.name, hand_size=p.hand_size, called_lolos=p.called_lolos
            )
            for p in state.players
        ],
        hands={p.id: [card_model(c) for c in p.hand] for p in state.players},
        current_player_id=state.current_player.id if state.players else None,
        top_discard=card_model(state.top_discard) if state.top_discard else None,
        draw_pile_size=len(state.draw_pile),
        discard_pile_size=len(state.discard_pile),
        dice=list(state.dice.values) if state.dice else None,
        valid_targets=(
            [EquationModel.model_validate(o) for o in state.valid_targets]
            if state.dice else None
        ),
        equation=EquationModel.model_validate(solved.equation) if solved else None,
        staged=[card_model(c) for c in state.staged_cards],
        staged_result=StagingValidator.preview_result(state.staged_cards),
        trap=card_model(solved.trap) if solved and solved.trap else None,
        pending_attack=attack_model(state),
        consecutive_identical_plays=state.consecutive_identical_plays,
        rounds_played=state.rounds_played,
        winner_id=state.winner.id if state.winner else None,
        message=state.message,
        last_rejection=state.last_rejection.value if state.last_rejection else None,
        last_move=state.last_move,
    )


def build_player_view(state: GameState, player_id: int) -> PlayerView:
    """
    Build one seat's private view.

    Opponents appear only as hand sizes and Lolos flags. Valid targets are
    withheld when the match was configured without possible results.

    Raises:
        ValueError: If ``player_id`` is not a seat in this match
    """
    if not (0 <= player_id < len(state.players)):
        raise ValueError(f"No player with id {player_id}.")

    player = state.players[player_id]
    snapshot = build_snapshot(state)
    snapshot.hands = {player_id: snapshot.hands[player_id]}
    if state.config is not None and not state.config.show_possible_results:
        snapshot.valid_targets = None

    is_my_turn = state.current_player_index == player_id
    can_play = False
    if is_my_turn:
        can_play = AttackRules.can_play_anything(
            player.hand,
            state.top_discard,
            state.equation_result,
            state.consecutive_identical_plays,
            state.MAX_IDENTICAL_PLAYS,
        )

    return PlayerView(
        player_id=player_id,
        is_my_turn=is_my_turn,
        hand=[card_model(c) for c in player.hand],
        can_play_anything=can_play,
        snapshot=snapshot,
    )
