"""Simulating and scoring candidate clues."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.log import collect_logs, flush_logs, log_card, log_clue
from src.hanabi.models import BaseClue, CardRef, Clue, ClueAction, ClueChoice, ClueResult
from src.hanabi.util import card_value, is_basic_trash, is_critical, is_trash, unknown_card_value
from src.hanabi.variants import direct_clues

from .hanabi_logic import determine_focus, find_chop, find_clue_value

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _clue_action(game: "Game", clue: Clue) -> ClueAction:
    return ClueAction(
        giver=game.state.our_player_index,
        target=clue.target,
        touched=game.state.clue_touched(clue.target, clue),
        clue=BaseClue(type=clue.type, value=clue.value),
    )


def clue_safe(game: "Game", clue: Clue) -> bool:
    """Whether giving the clue leaves the target without a critical card on chop."""
    with collect_logs():
        hypo_game = game.simulate_clue(_clue_action(game, clue))

    state, common = hypo_game.state, hypo_game.common
    target = clue.target
    if common.thinks_loaded(state, target):
        return True

    hand = state.hands[target]
    chop_index = find_chop(hand, common, after_clue=True)
    if chop_index == -1:
        if state.clue_tokens == 0:
            logger.info("not giving clue %s, target is locked with no clues left", log_clue(clue, state.variant))
            return False
        return True

    chop = state.deck[hand[chop_index]].identity()
    if chop is not None and is_critical(state, chop) and not is_basic_trash(state, chop):
        logger.info("not giving clue %s, chop %s is critical", log_clue(clue, state.variant), log_card(chop, state.variant))
        return False
    return True


def evaluate_clue(
    game: "Game",
    action: ClueAction,
    clue: Clue,
    target_order: int,
    bad_touch_orders: list[int],
) -> "Game | None":
    """
    Simulate a clue and check that the target would understand it.

    Hypothetical logs are only emitted when the clue is understood.

    Returns:
        The hypothetical game after the clue, or None if any card would be misread
    """
    state, common = game.state, game.common
    variant = state.variant

    with collect_logs() as records:
        logger.info("----- ENTERING HYPO %s -----", log_clue(clue, variant))
        hypo_game = game.simulate_clue(action)
        logger.info("----- EXITING HYPO %s -----", log_clue(clue, variant))

    incorrect = None
    for order in state.hands[action.target]:
        card = hypo_game.common.thoughts[order]
        understood = not card.reset and card.matches_inferences()

        if order == target_order:
            if not understood:
                incorrect = f"focused card {order} was misread"
                break
            continue

        old = common.thoughts[order]
        truth = state.deck[order].identity()
        allowed = (
            understood
            or old.reset
            or not old.matches_inferences()
            or not old.inferred
            or card.chop_moved
            or order in bad_touch_orders
            or (old.clued and truth is not None and is_trash(state, game.me, truth, order))
            or card.possible.every(lambda i: is_trash(hypo_game.state, hypo_game.common, i, order))
        )
        if not allowed:
            incorrect = f"card {order} ({log_card(truth, variant)}) would be misread"
            break

    if incorrect is not None:
        logger.info("%s is an incorrect clue: %s", log_clue(clue, variant), incorrect)
        return None

    flush_logs(records)
    return hypo_game


def get_result(game: "Game", hypo_game: "Game", clue: Clue) -> ClueResult:
    """Statistics describing how much a clue improves the game."""
    state, common = game.state, game.common
    hypo_state, hypo_common = hypo_game.state, hypo_game.common
    target = clue.target
    hand = state.hands[target]
    touched = state.clue_touched(target, clue)

    new_touched = [order for order in touched if not common.thoughts[order].clued]

    elim = 0
    for order in hand:
        if common.thoughts[order].clued:
            elim += max(0, len(common.thoughts[order].inferred) - len(hypo_common.thoughts[order].inferred))

    bad_touch = 0
    seen = []
    for order in new_touched:
        truth = state.deck[order].identity()
        if truth is None:
            continue
        if is_trash(state, game.me, truth, order) or truth in seen:
            bad_touch += 1
        seen.append(truth)

    trash = len([order for order in hypo_common.thinks_trash(hypo_state, target) if order in new_touched])

    finesses = [
        CardRef(player_index=player_index, order=order)
        for player_index, player_hand in enumerate(hypo_state.hands)
        for order in player_hand
        if hypo_common.thoughts[order].finessed and not common.thoughts[order].finessed
    ]

    playables = []
    for player_index in range(state.num_players):
        before = set(common.thinks_playables(state, player_index))
        for order in hypo_common.thinks_playables(hypo_state, player_index):
            if order not in before:
                playables.append(CardRef(player_index=player_index, order=order))

    new_chop_index = find_chop(hypo_state.hands[target], hypo_common, after_clue=True)
    if new_chop_index != -1:
        new_chop = hypo_state.hands[target][new_chop_index]
        chop_identity = state.deck[new_chop].identity()
        if chop_identity is not None:
            remainder = card_value(hypo_state, hypo_game.me, chop_identity, new_chop)
        else:
            remainder = unknown_card_value(hypo_state, hypo_game.me, new_chop)
    else:
        remainder = 0 if hypo_common.thinks_trash(hypo_state, target) else 4

    return ClueResult(
        elim=elim,
        new_touched=len(new_touched),
        bad_touch=bad_touch,
        trash=trash,
        finesses=finesses,
        playables=playables,
        remainder=remainder,
    )


def determine_clue(
    game: "Game",
    target: int,
    target_order: int,
    exclude_colour: bool = False,
    exclude_rank: bool = False,
    save: bool = False,
) -> ClueChoice | None:
    """
    Find the best clue that focuses the target card and is understood correctly.

    Args:
        game: Current game
        target: Player holding the card
        target_order: Card to focus
        exclude_colour: Skip colour clues
        exclude_rank: Skip rank clues
        save: Allow clues that leave a critical card on chop

    Returns:
        The highest-valued clue (earliest on ties), or None if no clue works
    """
    state, common = game.state, game.common
    variant = state.variant
    identity = state.deck[target_order].identity()
    if identity is None:
        return None

    logger.info("determining clue to target card %s", log_card(identity, variant))
    hand = state.hands[target]

    best: ClueChoice | None = None
    best_value = float("-inf")
    for clue in direct_clues(variant, target, identity, exclude_colour, exclude_rank):
        touched = state.clue_touched(target, clue)
        focus_order, chop = determine_focus(hand, common, touched, before_clue=True)
        if focus_order != target_order:
            logger.info("%s focuses order %d rather than %d, ignoring", log_clue(clue, variant), focus_order, target_order)
            continue

        safe = clue_safe(game, clue)
        if not save and not safe:
            continue

        bad_touch_orders = [
            order for order in touched
            if not common.thoughts[order].clued
            and is_trash(state, game.me, state.deck[order].identity(), order)
        ]
        action = _clue_action(game, clue)
        hypo_game = evaluate_clue(game, action, clue, target_order, bad_touch_orders)
        if hypo_game is None:
            continue

        result = get_result(game, hypo_game, clue)
        # The new chop only matters if the target may have to discard it soon
        if not (chop and (not safe or state.clue_tokens <= 2)):
            result.remainder = 0

        value = find_clue_value(result)
        logger.info("%s: value %.2f, %s", log_clue(clue, variant), value, result.model_dump(exclude={"finesses", "playables"}))
        if value > best_value:
            best_value = value
            best = ClueChoice(type=clue.type, value=clue.value, target=target, result=result)

    if best is None:
        logger.info("no clue focuses %s correctly", log_card(identity, variant))
    return best
