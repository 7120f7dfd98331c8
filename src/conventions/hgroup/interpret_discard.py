"""Interpretation of discards and misplays under H-group conventions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.basics import on_discard
from src.hanabi.elim import restore_elim, team_elim
from src.hanabi.identity_set import IdentitySet
from src.hanabi.log import log_card
from src.hanabi.models import DiscardAction, Identity, IdentifyAction, IgnoreAction
from src.hanabi.util import is_basic_trash, is_trash

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def interpret_sarcastic(game: "Game", action: DiscardAction) -> list[int]:
    """
    Find the clued cards a sarcastic discard could be aimed at.

    When exactly one card qualifies, every perspective learns its identity.

    Returns:
        Orders of clued cards outside the discarder's hand that could be the discarded identity
    """
    state, common = game.state, game.common
    identity = Identity(suit_index=action.suit_index, rank=action.rank)

    candidates = []
    for player_index, hand in enumerate(state.hands):
        if player_index == action.player_index:
            continue
        for order in hand:
            card = common.thoughts[order]
            if card.clued and card.possible.has(identity) and state.deck[order].matches(identity, assume=True):
                candidates.append(order)

    if len(candidates) == 1:
        order = candidates[0]
        logger.info("sarcastic discard of %s onto order %d", log_card(identity, state.variant), order)
        for player in game.all_players:
            card = player.thoughts[order]
            card.inferred = IdentitySet.create(state.variant.num_suits, [identity])
    elif candidates:
        logger.info("sarcastic discard of %s could target any of %s", log_card(identity, state.variant), candidates)
    return candidates


def interpret_discard(game: "Game", action: DiscardAction) -> None:
    """
    Apply a discard and repair any beliefs it proves wrong.

    A discarded connecting card cancels its waiting connection, rewinding with the
    card ignored when nothing else explains the clue. A misplay or a card that
    contradicted its inferences rewinds with the card identified from the start.
    """
    state, common = game.state, game.common
    identity = Identity(suit_index=action.suit_index, rank=action.rank)
    order = action.order
    thoughts = common.thoughts[order].clone()
    actual_card = state.deck[order].model_copy(deep=True)

    logger.info(
        "%s %s %s (order %d)",
        state.player_names[action.player_index], "bombed" if action.failed else "discarded",
        log_card(identity, state.variant), order,
    )

    on_discard(game, action)

    to_remove = []
    rewritten = False
    for wc in common.waiting_connections:
        dc_index = next(
            (i for i, conn in enumerate(wc.connections) if i >= wc.conn_index and conn.order == order),
            None,
        )
        if dc_index is None:
            continue

        logger.info(
            "discarded connecting card %s, cancelling waiting connection for %s",
            log_card(identity, state.variant), log_card(wc.inference, state.variant),
        )
        to_remove.append(wc)

        alternatives = [
            other for other in common.waiting_connections
            if other is not wc and other not in to_remove and other.action_index == wc.action_index
        ]
        if alternatives:
            continue

        if actual_card.clued and not action.failed and not is_basic_trash(state, identity):
            sarcastics = interpret_sarcastic(game, action)
            if len(sarcastics) == 1:
                conn = wc.connections[dc_index]
                conn.order = sarcastics[0]
                conn.reacting = state.holder_of(sarcastics[0])
                to_remove.remove(wc)
                rewritten = True
                logger.info("rewrote connection to use sarcastic card %d", sarcastics[0])
                continue

        real_connects = sum(1 for conn in wc.connections[:dc_index] if not conn.hidden)
        if game.rewind(wc.action_index, IgnoreAction(conn_index=real_connects, order=order)):
            return

    if to_remove:
        common.waiting_connections = [wc for wc in common.waiting_connections if wc not in to_remove]

    # Discarding an unclued card ends the early game
    if state.early_game and not action.failed and not actual_card.clued:
        logger.info("ending early game from discard of %s", log_card(identity, state.variant))
        state.early_game = False

    # A misplay or a card that contradicted its inferences: rewind knowing what it was
    if not thoughts.rewinded:
        thoughts.suit_index, thoughts.rank = identity.suit_index, identity.rank
        contradicted = not thoughts.matches_inferences() and not is_trash(state, game.me, identity, order)
        if action.failed or contradicted:
            logger.info("rewinding to identify order %d as %s", order, log_card(identity, state.variant))
            identify = IdentifyAction(
                order=order, player_index=action.player_index,
                suit_index=identity.suit_index, rank=identity.rank,
            )
            if game.rewind(actual_card.drawn_index + 1, identify):
                return

    # A sarcastic rewrite already handled the useful card
    if actual_card.clued and not is_basic_trash(state, identity) and not rewritten:
        logger.warning("discarded useful card %s!", log_card(identity, state.variant))
        restore_elim(common, state, identity)
        if not action.failed:
            interpret_sarcastic(game, action)

    team_elim(game)
