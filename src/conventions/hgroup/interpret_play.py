"""Interpretation of plays under H-group conventions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.basics import on_play
from src.hanabi.elim import reset_card, team_elim
from src.hanabi.log import log_card
from src.hanabi.models import Identity, PlayAction, WaitingConnection

from .hanabi_logic import remove_waiting_connection

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _resolve(game: "Game", wc: WaitingConnection) -> None:
    """Every connection played as expected, so the focus is the inferred identity."""
    state = game.state
    logger.info(
        "waiting connection for %s on order %d resolved",
        log_card(wc.inference, state.variant), wc.focused_order,
    )
    if state.holder_of(wc.focused_order) == -1:
        return
    for player in game.all_players:
        card = player.thoughts[wc.focused_order]
        card.intersect("inferred", wc.inference)
        if not card.inferred:
            reset_card(player, state, wc.focused_order)


def interpret_play(game: "Game", action: PlayAction) -> None:
    """Apply a play and advance (or break) the waiting connections it takes part in."""
    state, common = game.state, game.common
    identity = Identity(suit_index=action.suit_index, rank=action.rank)
    logger.info(
        "%s played %s (order %d)",
        state.player_names[action.player_index], log_card(identity, state.variant), action.order,
    )

    on_play(game, action)

    resolved: list[WaitingConnection] = []
    broken: list[WaitingConnection] = []
    for wc in common.waiting_connections:
        if wc.focused_order == action.order:
            if wc.inference == identity:
                resolved.append(wc)
            else:
                broken.append(wc)
            continue
        if wc.conn_index >= len(wc.connections):
            continue

        conn = wc.connections[wc.conn_index]
        if conn.order != action.order:
            continue
        if identity in conn.identities:
            wc.conn_index += 1
            if wc.conn_index == len(wc.connections):
                resolved.append(wc)
        else:
            logger.warning(
                "connecting order %d played as %s, expected one of %s",
                action.order, log_card(identity, state.variant), [str(i) for i in conn.identities],
            )
            broken.append(wc)

    for wc in broken:
        remove_waiting_connection(game, wc)

    # Longer alternatives that went through this play are still waiting on the rest of the chain
    advanced = [
        wc for wc in common.waiting_connections
        if wc.conn_index < len(wc.connections)
        and all(wc is not other for other in broken)
        and any(conn.order == action.order for conn in wc.connections[:wc.conn_index])
    ]

    # Alternatives for the same clue are disproven once one resolves
    settled = []
    for wc in resolved:
        if any(other.action_index == wc.action_index and other.focused_order == wc.focused_order for other in advanced):
            logger.info("waiting on a layered connection for order %d", wc.focused_order)
            continue
        settled.append(wc)
        if wc.focused_order != action.order:
            _resolve(game, wc)
    done = {id(wc) for wc in resolved + broken}
    done |= {
        id(other) for other in common.waiting_connections
        for wc in settled
        if other.action_index == wc.action_index and other.focused_order == wc.focused_order
    }
    common.waiting_connections = [wc for wc in common.waiting_connections if id(wc) not in done]

    team_elim(game)
