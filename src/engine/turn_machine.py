"""
Lolos - Turn State Machine

The reducer that owns all rule sequencing:

    Setup -> TurnTransition -> PreRoll -> Building -> Solved -> TurnTransition ...
                                                             -> GameOver

Every action is handled as one atomic transition ``(state, action) -> state``.
Illegal or invalid actions never raise: they return the previous state with
an advisory ``message`` and a ``last_rejection`` reason.

End-of-turn bookkeeping runs on every path that completes a turn:
    1. Empty hand after calling Lolos wins. Empty hand without the call
       draws one penalty card; the player wins only if the draw failed.
    2. One card left without calling Lolos draws one penalty card.
    3. An unanswered operator challenge draws two penalty cards.
    4. Any attack set up this turn passes to the next player.
    5. Every Lolos call is cleared and play moves to the next seat.
"""

from __future__ import annotations

import logging
from typing import Callable

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
from src.engine.base import Card, CardKind, DiceRoll, EquationOption, GameConfig, Phase
from src.engine.deck import Deck, DrawResult
from src.engine.equations import EquationSolver
from src.engine.randomness import RandomSource, roll_die
from src.engine.rules import AttackRules
from src.engine.staging import StagingValidator
from src.engine.state import (
    NO_ATTACK,
    BuildingPhase,
    FractionAttack,
    GameOverPhase,
    GameState,
    OperatorAttack,
    Player,
    PreRollPhase,
    Rejection,
    SolvedPhase,
    TurnTransitionPhase,
)
from src.engine.validators import validate_dice_values, validate_target

logger = logging.getLogger(__name__)

ACTIVE_PHASES = (Phase.PRE_ROLL, Phase.BUILDING, Phase.SOLVED)


class TurnEngine:
    """
    Stateless reducer for a Lolos match.

    All methods are class methods. State and the randomness source are passed
    in; a new state is returned.
    """

    # -- Setup -----------------------------------------------------------

    @classmethod
    def new_game(cls, config: GameConfig, rng: RandomSource) -> GameState:
        """
        Build, shuffle and deal a fresh match.

        Args:
            config: Match configuration
            rng: Randomness source for the shuffle

        Returns:
            State in TurnTransition for the first seat
        """
        deck = Deck.shuffle(Deck.generate(config.difficulty, config.include_fractions), rng)
        dealt = Deck.deal(deck, config.num_players, config.cards_per_player)
        first_discard, draw_pile = Deck.take_first_discard(dealt.remainder)

        players = tuple(
            Player(id=seat, name=name, hand=hand)
            for seat, (name, hand) in enumerate(zip(config.player_names, dealt.hands))
        )
        logger.info(
            "New game: %d players, %s deck of %d cards",
            len(players), config.difficulty.name.lower(), len(deck),
        )
        return GameState(
            config=config,
            turn=TurnTransitionPhase(),
            players=players,
            draw_pile=draw_pile,
            discard_pile=(first_discard,) if first_discard else (),
            message=f"{players[0].name}'s turn.",
        )

    # -- Pile helpers ----------------------------------------------------

    @classmethod
    def reshuffle_if_empty(cls, state: GameState, rng: RandomSource) -> GameState:
        """Refill an empty draw pile from all but the top discard."""
        draw_pile, discard_pile = Deck.reshuffle_if_empty(state.draw_pile, state.discard_pile, rng)
        return state.with_changes(draw_pile=draw_pile, discard_pile=discard_pile)

    @classmethod
    def draw_into_hand(
        cls,
        state: GameState,
        player_index: int,
        count: int,
        rng: RandomSource,
    ) -> tuple[GameState, DrawResult]:
        """Draw ``count`` cards for one seat, reshuffling as needed."""
        player = state.players[player_index]
        result = Deck.draw(state.draw_pile, state.discard_pile, player.hand, count, rng)
        if result.exhausted:
            logger.warning(
                "Draw pile exhausted: %s drew %d of %d", player.name, result.drawn, count
            )
        new_state = state.with_changes(
            draw_pile=result.draw_pile,
            discard_pile=result.discard_pile,
        ).with_player(Player(
            id=player.id,
            name=player.name,
            hand=result.hand,
            called_lolos=player.called_lolos,
        ))
        return new_state, result

    @classmethod
    def _discard_from_hand(cls, state: GameState, cards: list[Card]) -> GameState:
        """Move cards from the current hand to the discard pile, in order."""
        ids = {card.id for card in cards}
        player = state.current_player.without_cards(ids)
        return state.with_changes(discard_pile=state.discard_pile + tuple(cards)).with_player(player)

    # -- Win / end of turn -----------------------------------------------

    @classmethod
    def _game_over(cls, state: GameState, player_index: int) -> GameState:
        winner = state.players[player_index]
        logger.info("Game over: %s wins after %d turns", winner.name, state.rounds_played)
        return state.with_changes(
            turn=GameOverPhase(winner_id=winner.id),
            pending_attack=NO_ATTACK,
            outgoing_attack=NO_ATTACK,
            message=f"{winner.name} wins!",
        )

    @classmethod
    def _check_emptied_hand(
        cls,
        state: GameState,
        rng: RandomSource,
        notes: list[str],
    ) -> GameState:
        """Win on an empty hand after calling Lolos; otherwise draw one penalty card."""
        index = state.current_player_index
        player = state.current_player
        if player.hand_size > 0:
            return state
        if player.called_lolos:
            return cls._game_over(state, index)

        state, _ = cls.draw_into_hand(state, index, 1, rng)
        notes.append(f"{player.name} forgot to call Lolos and draws a penalty card.")
        if state.players[index].hand_size == 0:
            return cls._game_over(state, index)
        return state

    @classmethod
    def end_turn(cls, state: GameState, rng: RandomSource, notes: list[str] | None = None) -> GameState:
        """
        Run end-of-turn bookkeeping and hand play to the next seat.

        Args:
            state: State at the moment the turn completes
            rng: Randomness source for penalty draws
            notes: Messages collected earlier in the same transition

        Returns:
            GameOver state, or TurnTransition for the next seat
        """
        notes = list(notes or [])
        index = state.current_player_index
        player = state.current_player

        if player.hand_size == 0:
            state = cls._check_emptied_hand(state, rng, notes)
            if state.phase == Phase.GAME_OVER:
                return state
        elif player.hand_size == 1 and not player.called_lolos:
            state, _ = cls.draw_into_hand(state, index, 1, rng)
            notes.append(f"{player.name} forgot to call Lolos and draws a penalty card.")

        if isinstance(state.pending_attack, OperatorAttack):
            operator = state.pending_attack.operator
            state, _ = cls.draw_into_hand(state, index, OperatorAttack.PENALTY, rng)
            notes.append(
                f"{player.name} did not answer the {operator.value} challenge "
                f"and draws {OperatorAttack.PENALTY} cards."
            )

        next_index = (index + 1) % len(state.players)
        next_player = state.players[next_index]
        notes.append(f"{next_player.name}'s turn.")

        return state.with_changes(
            turn=TurnTransitionPhase(),
            players=tuple(
                Player(id=p.id, name=p.name, hand=p.hand, called_lolos=False)
                for p in state.players
            ),
            current_player_index=next_index,
            pending_attack=state.outgoing_attack,
            outgoing_attack=NO_ATTACK,
            has_played_cards=False,
            has_drawn_card=False,
            rounds_played=state.rounds_played + 1,
            message=" ".join(notes),
        )

    # -- Action handlers -------------------------------------------------

    @classmethod
    def _find_in_hand(cls, state: GameState, card_id: int) -> Card | None:
        return state.current_player.find_card(card_id)

    @classmethod
    def _start_game(cls, state: GameState, action: StartGame, rng: RandomSource) -> GameState:
        if state.phase != Phase.SETUP:
            return state.rejected(Rejection.ILLEGAL_PHASE, "A game is already in progress.")
        return cls.new_game(action.config, rng)

    @classmethod
    def _begin_turn(cls, state: GameState, action: BeginTurn, rng: RandomSource) -> GameState:
        if state.phase != Phase.TURN_TRANSITION:
            return state.rejected(Rejection.ILLEGAL_PHASE, "The turn has already begun.")

        player = state.current_player
        attack = state.pending_attack

        if isinstance(attack, OperatorAttack):
            if AttackRules.has_operator_defense(player.hand, attack):
                return state.with_changes(
                    turn=PreRollPhase(),
                    message=(
                        f"Operator challenge {attack.operator.value}! Answer with a matching "
                        f"operator or a wildcard, or draw and take the penalty."
                    ),
                )
            state, _ = cls.draw_into_hand(
                state, state.current_player_index, OperatorAttack.PENALTY, rng
            )
            return state.with_changes(
                turn=PreRollPhase(),
                pending_attack=NO_ATTACK,
                message=(
                    f"No defense against {attack.operator.value}! "
                    f"{player.name} draws {OperatorAttack.PENALTY} penalty cards."
                ),
                last_move=f"{player.name} took the {attack.operator.value} penalty",
            )

        if isinstance(attack, FractionAttack):
            return state.with_changes(
                turn=PreRollPhase(),
                message=(
                    f"Fraction attack! Defend with a number divisible by {attack.denominator}, "
                    f"relay it with a fraction, or draw {attack.penalty} cards."
                ),
            )

        return state.with_changes(turn=PreRollPhase(), pending_attack=NO_ATTACK, message="")

    @classmethod
    def _roll_dice(cls, state: GameState, action: RollDice, rng: RandomSource) -> GameState:
        if state.phase != Phase.PRE_ROLL:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't roll the dice now.")
        if state.pending_attack != NO_ATTACK:
            return state.rejected(Rejection.ATTACK_PENDING, "Resolve the attack before rolling.")
        if state.has_drawn_card or state.has_played_cards:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You already acted this turn.")

        if action.values is None:
            values = tuple(roll_die(rng) for _ in range(DiceRoll.NUM_DICE))
        else:
            try:
                values = validate_dice_values(action.values)
            except ValueError as exc:
                return state.rejected(Rejection.INVALID_PAYLOAD, str(exc))
        dice = DiceRoll.from_sequence(values)

        notes: list[str] = []
        if dice.is_triple:
            penalty = dice[0]
            for seat in range(len(state.players)):
                if seat != state.current_player_index:
                    state, _ = cls.draw_into_hand(state, seat, penalty, rng)
            notes.append(f"Triple {penalty}s! Every other player draws {penalty} cards.")

        targets = EquationSolver.valid_targets(dice)
        return state.with_changes(
            turn=BuildingPhase(dice=dice, valid_targets=targets),
            consecutive_identical_plays=0,
            message=" ".join(notes),
        )

    @classmethod
    def _confirm_equation(cls, state: GameState, action: ConfirmEquation, rng: RandomSource) -> GameState:
        if not isinstance(state.turn, BuildingPhase):
            return state.rejected(Rejection.ILLEGAL_PHASE, "Not building an equation.")
        try:
            validate_target(action.target)
        except ValueError as exc:
            return state.rejected(Rejection.INVALID_PAYLOAD, str(exc))

        option = EquationSolver.find_option(state.turn.valid_targets, action.target)
        if option is None:
            return state.rejected(
                Rejection.INVALID_PAYLOAD, f"{action.target} can't be made from these dice."
            )
        if action.equation:
            option = EquationOption(equation=action.equation, result=option.result)

        return state.with_changes(
            turn=SolvedPhase(
                dice=state.turn.dice,
                valid_targets=state.turn.valid_targets,
                equation=option,
            ),
            message="",
        )

    @classmethod
    def _revert_to_building(cls, state: GameState, action: RevertToBuilding, rng: RandomSource) -> GameState:
        if not isinstance(state.turn, SolvedPhase) or state.has_played_cards:
            return state.rejected(Rejection.ILLEGAL_PHASE, "Nothing to revert.")
        return state.with_changes(
            turn=BuildingPhase(dice=state.turn.dice, valid_targets=state.turn.valid_targets),
            message="",
        )

    @classmethod
    def _stage_card(cls, state: GameState, action: StageCard, rng: RandomSource) -> GameState:
        turn = state.turn
        if not isinstance(turn, SolvedPhase) or state.has_played_cards:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't stage cards now.")

        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        if any(c.id == card.id for c in turn.staged) or (turn.trap and turn.trap.id == card.id):
            return state.rejected(Rejection.INVALID_PAYLOAD, "That card is already placed.")
        if card.kind not in (CardKind.NUMBER, CardKind.OPERATOR):
            return state.rejected(
                Rejection.INVALID_PAYLOAD, "Only number and operator cards can be staged."
            )
        if card.kind == CardKind.OPERATOR and any(c.kind == CardKind.OPERATOR for c in turn.staged):
            return state.rejected(Rejection.INVALID_PAYLOAD, "Only one operator can be staged.")

        return state.with_changes(
            turn=SolvedPhase(
                dice=turn.dice,
                valid_targets=turn.valid_targets,
                equation=turn.equation,
                staged=turn.staged + (card,),
                trap=turn.trap,
            ),
            message="",
        )

    @classmethod
    def _unstage_card(cls, state: GameState, action: UnstageCard, rng: RandomSource) -> GameState:
        turn = state.turn
        if not isinstance(turn, SolvedPhase):
            return state.rejected(Rejection.ILLEGAL_PHASE, "Nothing is staged.")
        if not any(c.id == action.card_id for c in turn.staged):
            return state.rejected(Rejection.INVALID_PAYLOAD, "That card is not staged.")

        return state.with_changes(
            turn=SolvedPhase(
                dice=turn.dice,
                valid_targets=turn.valid_targets,
                equation=turn.equation,
                staged=tuple(c for c in turn.staged if c.id != action.card_id),
                trap=turn.trap,
            ),
            message="",
        )

    @classmethod
    def _confirm_staged(cls, state: GameState, action: ConfirmStaged, rng: RandomSource) -> GameState:
        turn = state.turn
        if not isinstance(turn, SolvedPhase) or state.has_played_cards:
            return state.rejected(Rejection.ILLEGAL_PHASE, "Nothing to confirm.")

        numbers = [c for c in turn.staged if c.kind == CardKind.NUMBER]
        operators = [c for c in turn.staged if c.kind == CardKind.OPERATOR]
        if not numbers:
            return state.rejected(Rejection.INVALID_PAYLOAD, "Stage at least one number card.")
        if not StagingValidator.is_valid_selection(turn.staged, turn.equation_result):
            return state.rejected(
                Rejection.INVALID_PAYLOAD,
                f"These cards don't make {turn.equation_result}. Try another combination.",
            )

        player = state.current_player
        played = numbers + operators
        if turn.trap is not None:
            played.append(turn.trap)
        state = cls._discard_from_hand(state, played)

        notes = []
        outgoing = state.outgoing_attack
        if turn.trap is not None:
            outgoing = OperatorAttack(operator=turn.trap.effective_operator)
            notes.append(f"{player.name} set a {outgoing.operator.value} challenge for the next player.")

        values = ", ".join(str(c.value) for c in numbers)
        state = state.with_changes(
            has_played_cards=True,
            consecutive_identical_plays=0,
            outgoing_attack=outgoing,
            last_move=f"{player.name}: {turn.equation.equation} -> played {values}",
        )
        return cls.end_turn(state, rng, notes)

    @classmethod
    def _play_identical(cls, state: GameState, action: PlayIdentical, rng: RandomSource) -> GameState:
        if state.phase != Phase.PRE_ROLL or state.has_played_cards or state.has_drawn_card:
            return state.rejected(Rejection.ILLEGAL_PHASE, "Identical cards can only be played before rolling.")
        if state.pending_attack != NO_ATTACK:
            return state.rejected(Rejection.ATTACK_PENDING, "Resolve the attack first.")
        if state.consecutive_identical_plays >= GameState.MAX_IDENTICAL_PLAYS:
            return state.rejected(
                Rejection.INVALID_PAYLOAD, "Identical-card limit reached. Roll the dice."
            )

        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        top = state.top_discard
        if not AttackRules.is_identical(card, top):
            return state.rejected(Rejection.INVALID_PAYLOAD, "That card doesn't match the discard pile.")

        player = state.current_player
        state = cls._discard_from_hand(state, [card]).with_changes(
            has_played_cards=True,
            consecutive_identical_plays=state.consecutive_identical_plays + 1,
            last_move=f"{player.name} played an identical {card.label()} and skipped the dice",
        )
        return cls.end_turn(state, rng)

    @classmethod
    def _play_operator_like(cls, state: GameState, card: Card, played: Card, rng: RandomSource) -> GameState:
        """Shared path for operator cards and wildcards: defend or set a trap."""
        attack = state.pending_attack
        player = state.current_player

        if isinstance(attack, OperatorAttack):
            if state.phase != Phase.PRE_ROLL:
                return state.rejected(Rejection.ILLEGAL_PHASE, "You can't answer the challenge now.")
            if not AttackRules.defends_operator_attack(played, attack):
                return state.rejected(
                    Rejection.INVALID_PAYLOAD, f"Answer the challenge with {attack.operator.value}."
                )
            state = cls._discard_from_hand(state, [played]).with_changes(
                pending_attack=NO_ATTACK,
                message="Challenge answered! Roll the dice.",
                last_move=f"{player.name} answered the {attack.operator.value} challenge",
            )
            notes: list[str] = []
            state = cls._check_emptied_hand(state, rng, notes)
            if notes:
                state = state.with_changes(message=" ".join(notes))
            return state

        if isinstance(attack, FractionAttack):
            return state.rejected(Rejection.ATTACK_PENDING, "Resolve the fraction attack first.")

        turn = state.turn
        if not isinstance(turn, SolvedPhase) or state.has_played_cards:
            return state.rejected(
                Rejection.ILLEGAL_PHASE, "Operators are placed after solving the equation."
            )
        if turn.trap is not None:
            return state.rejected(Rejection.INVALID_PAYLOAD, "A trap is already placed.")
        if any(c.id == card.id for c in turn.staged):
            return state.rejected(Rejection.INVALID_PAYLOAD, "That card is already staged.")

        return state.with_changes(
            turn=SolvedPhase(
                dice=turn.dice,
                valid_targets=turn.valid_targets,
                equation=turn.equation,
                staged=turn.staged,
                trap=played,
            ),
            message=f"{played.effective_operator.value} placed as a trap for the next player.",
        )

    @classmethod
    def _play_operator(cls, state: GameState, action: PlayOperator, rng: RandomSource) -> GameState:
        if state.phase not in ACTIVE_PHASES:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't play an operator now.")
        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        played = AttackRules.resolve_operator(card)
        if played is None:
            return state.rejected(Rejection.INVALID_PAYLOAD, "That is not an operator card.")
        return cls._play_operator_like(state, card, played, rng)

    @classmethod
    def _play_wildcard(cls, state: GameState, action: PlayWildcard, rng: RandomSource) -> GameState:
        if state.phase not in ACTIVE_PHASES:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't play a wildcard now.")
        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        if card.kind != CardKind.WILDCARD:
            return state.rejected(Rejection.INVALID_PAYLOAD, "That is not a wildcard.")
        return cls._play_operator_like(state, card, card.bind(action.operator), rng)

    @classmethod
    def _play_fraction(cls, state: GameState, action: PlayFraction, rng: RandomSource) -> GameState:
        if state.phase not in ACTIVE_PHASES or state.has_played_cards or state.has_drawn_card:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't play a fraction now.")

        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        if card.kind != CardKind.FRACTION:
            return state.rejected(Rejection.INVALID_PAYLOAD, "That is not a fraction card.")

        player = state.current_player
        attack = state.pending_attack

        if isinstance(attack, FractionAttack):
            outgoing = AttackRules.chain_fraction_attack(attack, card)
            verb = "relayed the attack with"
        elif isinstance(attack, OperatorAttack):
            return state.rejected(Rejection.ATTACK_PENDING, "Answer the operator challenge first.")
        else:
            if not AttackRules.can_start_fraction_attack(card, state.top_discard):
                return state.rejected(
                    Rejection.INVALID_PAYLOAD, f"{card.label()} can't be played on the current card."
                )
            outgoing = AttackRules.start_fraction_attack(card)
            verb = "attacked with"

        state = cls._discard_from_hand(state, [card]).with_changes(
            pending_attack=NO_ATTACK,
            outgoing_attack=outgoing,
            has_played_cards=True,
            consecutive_identical_plays=0,
            last_move=f"{player.name} {verb} {card.label()}",
        )
        return cls.end_turn(state, rng, [f"{player.name} {verb} {card.label()}!"])

    @classmethod
    def _defend_fraction_solve(cls, state: GameState, action: DefendFractionSolve, rng: RandomSource) -> GameState:
        attack = state.pending_attack
        if state.phase != Phase.PRE_ROLL or not isinstance(attack, FractionAttack):
            return state.rejected(Rejection.ILLEGAL_PHASE, "There is no fraction attack to defend.")

        card = cls._find_in_hand(state, action.card_id)
        if card is None:
            return state.rejected(Rejection.CARD_NOT_IN_HAND, "That card is not in your hand.")
        if not AttackRules.solves_fraction_attack(card, attack):
            return state.rejected(
                Rejection.INVALID_PAYLOAD, f"Defend with a number divisible by {attack.denominator}."
            )

        player = state.current_player
        state = cls._discard_from_hand(state, [card]).with_changes(
            pending_attack=NO_ATTACK,
            message="Successful defense! Roll the dice.",
            last_move=f"{player.name} defended with {card.label()}",
        )
        notes: list[str] = []
        state = cls._check_emptied_hand(state, rng, notes)
        if notes:
            state = state.with_changes(message=" ".join(notes))
        return state

    @classmethod
    def _defend_fraction_penalty(cls, state: GameState, action: DefendFractionPenalty, rng: RandomSource) -> GameState:
        attack = state.pending_attack
        if state.phase != Phase.PRE_ROLL or not isinstance(attack, FractionAttack):
            return state.rejected(Rejection.ILLEGAL_PHASE, "There is no fraction attack to accept.")

        player = state.current_player
        state, _ = cls.draw_into_hand(state, state.current_player_index, attack.penalty, rng)
        state = state.with_changes(
            pending_attack=NO_ATTACK,
            last_move=f"{player.name} drew {attack.penalty} penalty cards",
        )
        return cls.end_turn(state, rng, [f"{player.name} drew {attack.penalty} penalty cards."])

    @classmethod
    def _draw_card(cls, state: GameState, action: DrawCard, rng: RandomSource) -> GameState:
        if state.phase not in ACTIVE_PHASES:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You can't draw now.")
        if state.has_played_cards or state.has_drawn_card:
            return state.rejected(Rejection.ILLEGAL_PHASE, "You already acted this turn.")
        if isinstance(state.pending_attack, FractionAttack):
            return state.rejected(
                Rejection.ATTACK_PENDING, "Defend the fraction attack or accept its penalty."
            )

        player = state.current_player
        state, result = cls.draw_into_hand(state, state.current_player_index, 1, rng)
        if result.drawn == 0:
            return state.with_changes(
                has_drawn_card=True,
                message="No cards available. End your turn.",
                last_rejection=Rejection.NO_CARDS_AVAILABLE,
            )

        state = state.with_changes(has_drawn_card=True, last_move=f"{player.name} drew a card")
        return cls.end_turn(state, rng)

    @classmethod
    def _call_lolos(cls, state: GameState, action: CallLolos, rng: RandomSource) -> GameState:
        if state.phase in (Phase.SETUP, Phase.GAME_OVER):
            return state.rejected(Rejection.ILLEGAL_PHASE, "No game in progress.")

        player_id = state.current_player_index if action.player_id is None else action.player_id
        if not (0 <= player_id < len(state.players)):
            return state.rejected(Rejection.INVALID_PAYLOAD, f"No player with id {player_id}.")

        player = state.players[player_id]
        if player.called_lolos:
            return state.rejected(Rejection.INVALID_PAYLOAD, f"{player.name} already called Lolos.")
        if player.hand_size > 2:
            return state.rejected(Rejection.INVALID_PAYLOAD, "Too many cards to call Lolos.")

        return state.with_player(
            Player(id=player.id, name=player.name, hand=player.hand, called_lolos=True)
        ).with_changes(message=f"{player.name} called Lolos!")

    @classmethod
    def _end_turn(cls, state: GameState, action: EndTurn, rng: RandomSource) -> GameState:
        if state.phase not in ACTIVE_PHASES:
            return state.rejected(Rejection.ILLEGAL_PHASE, "No turn to end.")
        if isinstance(state.pending_attack, FractionAttack):
            return state.rejected(
                Rejection.ATTACK_PENDING, "Defend the fraction attack or accept its penalty."
            )
        if not state.has_drawn_card:
            return state.rejected(Rejection.ILLEGAL_PHASE, "Play cards or draw to finish your turn.")
        return cls.end_turn(state, rng)

    @classmethod
    def _reset_game(cls, state: GameState, action: ResetGame, rng: RandomSource) -> GameState:
        logger.info("Game reset")
        return GameState()

    # -- Dispatch --------------------------------------------------------

    @classmethod
    def _handlers(cls) -> dict[type, Callable[[GameState, Action, RandomSource], GameState]]:
        return {
            StartGame: cls._start_game,
            BeginTurn: cls._begin_turn,
            RollDice: cls._roll_dice,
            ConfirmEquation: cls._confirm_equation,
            RevertToBuilding: cls._revert_to_building,
            StageCard: cls._stage_card,
            UnstageCard: cls._unstage_card,
            ConfirmStaged: cls._confirm_staged,
            PlayIdentical: cls._play_identical,
            PlayOperator: cls._play_operator,
            PlayFraction: cls._play_fraction,
            DefendFractionSolve: cls._defend_fraction_solve,
            DefendFractionPenalty: cls._defend_fraction_penalty,
            PlayWildcard: cls._play_wildcard,
            DrawCard: cls._draw_card,
            CallLolos: cls._call_lolos,
            EndTurn: cls._end_turn,
            ResetGame: cls._reset_game,
        }

    @classmethod
    def apply(cls, state: GameState, action: Action, rng: RandomSource) -> GameState:
        """
        Apply one action to the game state.

        Args:
            state: Current state (never modified)
            action: Command from the presentation layer
            rng: Randomness source for dice, shuffles and reshuffles

        Returns:
            The next state, or the same state with an advisory message when
            the action is illegal in this phase or its payload is invalid.
        """
        handler = cls._handlers().get(type(action))
        if handler is None:
            return state.rejected(Rejection.INVALID_PAYLOAD, f"Unknown action {action!r}.")

        if state.phase == Phase.GAME_OVER and not isinstance(action, ResetGame):
            return state.rejected(Rejection.ILLEGAL_PHASE, "The game is over.")
        if state.phase == Phase.SETUP and not isinstance(action, (StartGame, ResetGame)):
            return state.rejected(Rejection.ILLEGAL_PHASE, "Start a game first.")

        new_state = handler(state, action, rng)
        if new_state.last_rejection is not None and new_state.last_rejection != Rejection.NO_CARDS_AVAILABLE:
            logger.debug("Rejected %s (%s): %s", action, new_state.last_rejection.value, new_state.message)
        else:
            logger.debug("Applied %s -> %s", action, new_state.phase.value)
        return new_state


def apply_action(state: GameState, action: Action, rng: RandomSource) -> GameState:
    """Convenience wrapper around :meth:`TurnEngine.apply`."""
    return TurnEngine.apply(state, action, rng)


def new_game(config: GameConfig, rng: RandomSource) -> GameState:
    """Convenience wrapper around :meth:`TurnEngine.new_game`."""
    return TurnEngine.new_game(config, rng)
