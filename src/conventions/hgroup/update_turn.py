"""End-of-turn bookkeeping for H-group conventions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.elim import team_elim
from src.hanabi.log import log_card
from src.hanabi.models import Action, ClueAction, DiscardAction, PlayAction, TurnAction

from .hanabi_logic import remove_waiting_connection

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def action_actor(action: Action) -> int | None:
    """The player who took a turn-ending action, or None for other actions."""
    if isinstance(action, ClueAction):
        return action.giver
    if isinstance(action, (PlayAction, DiscardAction)):
        return action.player_index
    return None


def update_turn(game: "Game", action: TurnAction) -> None:
    """Drop finesses that the reacting player skipped on their turn."""
    state, common = game.state, game.common

    last_index, last_actor, last_action = -1, None, None
    for index in range(len(game.action_list) - 1, -1, -1):
        last_actor = action_actor(game.action_list[index])
        if last_actor is not None:
            last_index, last_action = index, game.action_list[index]
            break
    if last_actor is None:
        return

    falsified = []
    for wc in common.waiting_connections:
        if wc.conn_index >= len(wc.connections):
            continue
        conn = wc.connections[wc.conn_index]
        # Playing an earlier card of the same chain (a layered finesse) isn't skipping it
        if isinstance(last_action, PlayAction) and any(
            c.order == last_action.order for c in wc.connections[:wc.conn_index]
        ):
            continue
        if (
            conn.type == "finesse"
            and conn.reacting == last_actor
            and last_index > wc.action_index
            and conn.order in state.hands[conn.reacting]
        ):
            logger.info(
                "%s didn't play into finesse, removing inference %s",
                state.player_names[last_actor], log_card(wc.inference, state.variant),
            )
            falsified.append(wc)

    if not falsified:
        return

    for wc in falsified:
        remove_waiting_connection(game, wc)
    common.waiting_connections = [wc for wc in common.waiting_connections if wc not in falsified]
    team_elim(game)
