"""Choosing our move on our turn."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.log import log_card, log_clue, log_hand
from src.hanabi.models import MAX_CLUES, ActionType, Clue, ClueChoice, ClueType, PerformAction
from src.hanabi.util import is_critical, is_trash, unique2

from .clue_finder import determine_clue
from .hanabi_logic import find_chop, find_clue_value

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _clue_command(game: "Game", clue: Clue | ClueChoice) -> PerformAction:
    action_type = ActionType.COLOUR if clue.type == ClueType.COLOUR else ActionType.RANK
    return PerformAction(table_id=game.table_id, type=action_type, target=clue.target, value=clue.value)


def _other_players(game: "Game") -> list[int]:
    state = game.state
    return [(state.our_player_index + offset) % state.num_players for offset in range(1, state.num_players)]


def find_save_clue(game: "Game", target: int) -> ClueChoice | None:
    """A clue saving the target's chop, if it holds a critical card or a unique 2."""
    state, common, me = game.state, game.common, game.me
    hand = state.hands[target]
    if common.thinks_loaded(state, target):
        return None

    chop_index = find_chop(hand, common)
    if chop_index == -1:
        return None

    chop = hand[chop_index]
    identity = state.deck[chop].identity()
    if identity is None or is_trash(state, me, identity, chop):
        return None
    if not (is_critical(state, identity) or unique2(state, me, identity)):
        return None

    logger.info("%s needs a save on %s", state.player_names[target], log_card(identity, state.variant))
    return determine_clue(game, target, chop, save=True)


def _wants_play_clue(game: "Game", order: int) -> bool:
    state, me = game.state, game.me
    identity = state.deck[order].identity()
    if identity is None or game.common.thoughts[order].saved:
        return False
    if is_trash(state, me, identity, order):
        return False
    return identity.rank <= me.hypo_stacks[identity.suit_index] + 1


def find_play_clue(game: "Game", targets: list[int] | None = None) -> ClueChoice | None:
    """The most valuable clue that gets a teammate to play."""
    best: ClueChoice | None = None
    best_value = 0.0
    for target in targets if targets is not None else _other_players(game):
        for order in game.state.hands[target]:
            if not _wants_play_clue(game, order):
                continue
            choice = determine_clue(game, target, order)
            if choice is None or not choice.result.playables:
                continue
            value = find_clue_value(choice.result)
            if value > best_value:
                best, best_value = choice, value
    return best


def find_tempo_clue(game: "Game", target: int) -> ClueChoice | None:
    """A re-clue that gets an already clued, unknown playable card played."""
    state, common = game.state, game.common
    known_playables = common.thinks_playables(state, target)
    best: ClueChoice | None = None
    best_value = float("-inf")
    for order in state.hands[target]:
        identity = state.deck[order].identity()
        if identity is None or not common.thoughts[order].clued or order in known_playables:
            continue
        if not state.is_playable(identity):
            continue
        choice = determine_clue(game, target, order)
        if choice is None or not any(ref.order == order for ref in choice.result.playables):
            continue
        value = find_clue_value(choice.result)
        if value > best_value:
            best, best_value = choice, value
    return best


def find_stall_clue(game: "Game") -> Clue | None:
    """Any useful clue to avoid discarding, falling back to a clue with no new information."""
    state = game.state
    for target in _other_players(game):
        for order in state.hands[target]:
            identity = state.deck[order].identity()
            if identity is None or game.common.thoughts[order].saved or is_trash(state, game.me, identity, order):
                continue
            choice = determine_clue(game, target, order, save=True)
            if choice is not None and find_clue_value(choice.result) >= 0:
                return choice.to_clue()

    for target in _other_players(game):
        for order in state.hands[target]:
            identity = state.deck[order].identity()
            if identity is None:
                continue
            for clue_type, value in ((ClueType.RANK, identity.rank), (ClueType.COLOUR, identity.suit_index)):
                clue = Clue(type=clue_type, value=value, target=target)
                if state.variant.is_cluable(clue) and state.clue_touched(target, clue):
                    return clue
    return None


def take_action(game: "Game") -> PerformAction:
    """
    Decide what to do on our turn.

    In priority order: save a teammate's chop (or distract them with a play
    clue), play a known playable, give the best play clue, give a tempo clue in
    2-player games, stall at max clues, discard known trash, then discard chop.
    """
    state, me = game.state, game.me
    us = state.our_player_index
    hand = state.hands[us]

    playables = me.thinks_playables(state, us)
    trash = me.thinks_trash(state, us)
    logger.info("our hand %s", log_hand(hand, me, state.variant))
    logger.info("playables %s, trash %s", playables, trash)

    if state.clue_tokens > 0:
        saves = {}
        for target in _other_players(game):
            save = find_save_clue(game, target)
            if save is not None:
                saves[target] = (save, find_play_clue(game, [target]))

        for save, play_clue in saves.values():
            if play_clue is None:
                logger.info("giving save clue %s", log_clue(save.to_clue(), state.variant))
                return _clue_command(game, save)

        # A play clue gives them something to do other than discard chop
        if saves:
            _, play_clue = next(iter(saves.values()))
            logger.info("giving play clue %s instead of a save", log_clue(play_clue.to_clue(), state.variant))
            return _clue_command(game, play_clue)

    if playables:
        # Play the lowest possible rank first, ties to the leftmost card
        order = min(playables, key=lambda o: min(i.rank for i in me.thoughts[o].possibilities))
        return PerformAction(table_id=game.table_id, type=ActionType.PLAY, target=order)

    if state.clue_tokens > 0:
        play_clue = find_play_clue(game)
        if play_clue is not None:
            logger.info("giving play clue %s", log_clue(play_clue.to_clue(), state.variant))
            return _clue_command(game, play_clue)

        if state.num_players == 2:
            tempo_clue = find_tempo_clue(game, _other_players(game)[0])
            if tempo_clue is not None:
                logger.info("giving tempo clue %s", log_clue(tempo_clue.to_clue(), state.variant))
                return _clue_command(game, tempo_clue)

    if state.clue_tokens == MAX_CLUES:
        stall = find_stall_clue(game)
        if stall is not None:
            logger.info("stalling with %s", log_clue(stall, state.variant))
            return _clue_command(game, stall)

    if trash:
        return PerformAction(table_id=game.table_id, type=ActionType.DISCARD, target=trash[0])

    if not me.thinks_locked(state, us):
        chop_index = find_chop(hand, me)
        if chop_index != -1:
            return PerformAction(table_id=game.table_id, type=ActionType.DISCARD, target=hand[chop_index])

    if state.clue_tokens > 0:
        stall = find_stall_clue(game)
        if stall is not None:
            logger.info("locked hand, stalling with %s", log_clue(stall, state.variant))
            return _clue_command(game, stall)

    return PerformAction(table_id=game.table_id, type=ActionType.DISCARD, target=me.locked_discard(state, us))
