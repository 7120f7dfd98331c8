"""Search for the cards that must play before a focused card can be playable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Collection

from src.hanabi.log import log_card
from src.hanabi.models import Connection, Identity
from src.hanabi.player import Player

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _leftmost_unsaved(hand: list[int], player: Player, skip: Collection[int]) -> int | None:
    for order in hand:
        if order not in skip and not player.thoughts[order].saved:
            return order
    return None


def find_connecting(
    game: "Game",
    hypo_common: Player,
    giver: int,
    target: int,
    identity: Identity,
    connected: Collection[int] = (),
    ignore_orders: Collection[int] = (),
) -> Connection | None:
    """
    Find a card that connects to the given identity.

    Connections are searched in order: a card everyone knows is (or can play as)
    the identity, then a prompt, then a finesse on someone other than the giver
    and target, then a finesse on our own hand.

    Args:
        game: Current game
        hypo_common: Common perspective with earlier connections of this chain applied
        giver: Player who gave the clue
        target: Player who received the clue
        identity: Identity that needs to be played
        connected: Orders already used by this chain (including the focus)
        ignore_orders: Orders excluded from the search by a rewind

    Returns:
        The connection, or None if nothing connects
    """
    state = game.state
    us = state.our_player_index
    skip = set(connected) | set(ignore_orders)

    # Known or inferred cards in anyone's hand
    for player_index, hand in enumerate(state.hands):
        for order in hand:
            if order in skip:
                continue
            card = hypo_common.thoughts[order]
            if not card.saved or not card.matches(identity, infer=True, symmetric=True):
                continue
            actual = state.deck[order].identity()
            if actual is not None and actual != identity:
                continue
            conn_type = "known" if card.identity(symmetric=True) == identity else "playable"
            logger.debug("found %s connection %s on order %d", conn_type, log_card(identity, state.variant), order)
            return Connection(
                type=conn_type, reacting=player_index, order=order, identities=[identity],
                is_self=player_index == us,
            )

    for offset in range(1, state.num_players):
        player_index = (giver + offset) % state.num_players
        hand = state.hands[player_index]

        prompt = next(
            (
                order for order in hand
                if order not in skip
                and hypo_common.thoughts[order].clued
                and hypo_common.thoughts[order].identity(infer=True, symmetric=True) is None
                and hypo_common.thoughts[order].possible.has(identity)
            ),
            None,
        )
        if prompt is not None:
            actual = state.deck[prompt].identity()
            if actual is None or actual == identity:
                logger.debug("found prompt %s on order %d", log_card(identity, state.variant), prompt)
                return Connection(
                    type="prompt", reacting=player_index, order=prompt, identities=[identity],
                    is_self=player_index == us,
                )

        if player_index in (target, us):
            continue

        finesse = _leftmost_unsaved(hand, hypo_common, skip)
        if finesse is not None and state.deck[finesse].matches(identity):
            logger.debug("found finesse %s on order %d", log_card(identity, state.variant), finesse)
            return Connection(type="finesse", reacting=player_index, order=finesse, identities=[identity])

    if us not in (giver, target):
        finesse = _leftmost_unsaved(state.hands[us], hypo_common, skip)
        if finesse is not None and game.me.thoughts[finesse].possible.has(identity):
            logger.debug("assuming self-finesse %s on order %d", log_card(identity, state.variant), finesse)
            return Connection(
                type="finesse", reacting=us, order=finesse, identities=[identity], is_self=True,
            )

    return None
