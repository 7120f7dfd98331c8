"""Interpretation of clues under H-group conventions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.basics import on_clue
from src.hanabi.elim import reset_card, team_elim
from src.hanabi.log import log_card, log_cards, log_clue
from src.hanabi.models import ClueAction, FocusPossibility, WaitingConnection

from .focus_possible import find_focus_possible
from .hanabi_logic import determine_focus

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _apply_connections(game: "Game", fp: FocusPossibility) -> None:
    """Commit the cards a chosen interpretation relies on."""
    state = game.state
    for conn in fp.connections:
        for player in game.all_players:
            card = player.thoughts[conn.order]
            if conn.type == "finesse":
                card.finessed = True
            if conn.type in ("finesse", "prompt"):
                card.intersect("inferred", conn.identities)
                if not card.inferred:
                    reset_card(player, state, conn.order)


def _add_waiting_connection(game: "Game", action: ClueAction, focus_order: int, fp: FocusPossibility) -> None:
    game.common.waiting_connections.append(
        WaitingConnection(
            connections=fp.connections,
            giver=action.giver,
            target=action.target,
            focused_order=focus_order,
            inference=fp.identity,
            action_index=len(game.action_list) - 1,
        )
    )


def interpret_clue(game: "Game", action: ClueAction) -> None:
    """
    Apply a clue and infer what its focused card is.

    Every interpretation that fits the focus card's possibilities is kept in
    its inferences. The interpretation that matches the card (or the only one,
    if we can't see it) has its connections committed.
    """
    state, common = game.state, game.common
    variant = state.variant
    hand = state.hands[action.target]

    focus_order, chop = determine_focus(hand, common, action.touched, before_clue=True)
    newly_focused = not common.thoughts[focus_order].clued

    on_clue(game, action)

    logger.info(
        "%s gave %s, focus order %d%s",
        state.player_names[action.giver], log_clue(action.clue, variant), focus_order,
        " (chop)" if chop else "",
    )

    if newly_focused:
        for player in game.all_players:
            card = player.thoughts[focus_order]
            card.reset = False
            card.inferred = card.possible.intersect(player.all_inferred) or card.possible

    focus_card = common.thoughts[focus_order]
    matched = [
        fp for fp in find_focus_possible(game, action, focus_order, chop)
        if focus_card.possible.has(fp.identity)
    ]

    if not matched:
        logger.warning("no interpretation of %s fits focus order %d", log_clue(action.clue, variant), focus_order)
        game.next_ignore = []
        team_elim(game)
        return

    inferences = [fp.identity for fp in matched]
    for player in game.all_players:
        card = player.thoughts[focus_order]
        card.intersect("inferred", inferences)
        if not card.inferred:
            reset_card(player, state, focus_order)

    logger.info("final inference on focused card [%s]", log_cards(inferences, variant))

    actual = state.deck[focus_order].identity()
    if actual is not None:
        chosen = [fp for fp in matched if fp.identity == actual]
        if not chosen:
            logger.warning(
                "focused card %s doesn't match any inference [%s]",
                log_card(actual, variant), log_cards(inferences, variant),
            )
    elif len(matched) == 1:
        chosen = matched
    else:
        # We can't see the focus: wait on every play interpretation and commit to none yet
        chosen = []
        for fp in matched:
            if fp.connections and not fp.save:
                _add_waiting_connection(game, action, focus_order, fp)

    for fp in chosen:
        _apply_connections(game, fp)
        if fp.connections:
            _add_waiting_connection(game, action, focus_order, fp)

    game.next_ignore = []
    team_elim(game)
