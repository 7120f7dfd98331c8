"""Identity elimination: narrowing possible and inferred sets from what each perspective knows."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .log import log_card, log_cards
from .models import Identity, Link
from .player import Player
from .state import State
from .util import base_count, is_basic_trash

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


def reset_card(player: Player, state: State, order: int) -> None:
    """Rebuild a card's inferences from its possibilities after they collapsed."""
    card = player.thoughts[order]
    card.reset = True
    card.finessed = False
    card.inferred = card.possible
    logger.info(
        "card %d lost all inferences for player %d and was reset to [%s]",
        order, player.player_index, log_cards(card.possible, state.variant),
    )


def card_elim(player: Player, state: State) -> None:
    """Remove identities whose every copy is accounted for by cards this player can identify.

    Only visible or deduced identities count, so a card's true identity is never
    removed from its own possibilities.
    """
    orders = state.all_orders()
    changed = True
    while changed:
        changed = False
        for identity in state.variant.all_identities():
            if not any(player.thoughts[order].possible.has(identity) for order in orders):
                continue

            holders = [order for order in orders if player.known_identity(state, order) == identity]
            if base_count(state, identity) + len(holders) < state.variant.card_count(identity):
                continue

            player.all_possible = player.all_possible.subtract(identity)
            player.all_inferred = player.all_inferred.subtract(identity)

            for order in orders:
                card = player.thoughts[order]
                if order in holders or not card.possible.has(identity):
                    continue
                card.subtract("possible", identity)
                card.subtract("inferred", identity)
                changed = True
                if not card.inferred:
                    reset_card(player, state, order)


def good_touch_elim(player: Player, state: State) -> None:
    """Assume saved cards are neither trash nor duplicates of clued cards.

    A card confirmed as an identity keeps it, and cards in the same link never
    eliminate each other.
    """
    orders = state.all_orders()
    link_of = {order: set(link.orders) for link in player.links for order in link.orders}

    changed = True
    while changed:
        changed = False

        # Unconfirmed finesses don't eliminate from other cards
        confirmed: dict[Identity, list[int]] = {}
        for order in orders:
            if player.thoughts[order].clued:
                identity = player.known_identity(state, order, infer=True)
                if identity is not None:
                    confirmed.setdefault(identity, []).append(order)

        for order in orders:
            card = player.thoughts[order]
            if not card.saved or card.reset or card.identity(symmetric=True) is not None:
                continue

            touched = card.clued or card.finessed
            group = link_of.get(order, set())
            to_remove = []
            for identity in card.inferred:
                holders = confirmed.get(identity, [])
                if order in holders:
                    continue
                if (touched and is_basic_trash(state, identity)) or any(h not in group for h in holders):
                    to_remove.append(identity)

            if not to_remove:
                continue

            card.subtract("inferred", to_remove)
            for identity in to_remove:
                elims = player.elims.setdefault((identity.suit_index, identity.rank), [])
                if order not in elims:
                    elims.append(order)
            changed = True

            if not card.inferred:
                reset_card(player, state, order)


def restore_elim(player: Player, state: State, identity: Identity) -> None:
    """Undo good-touch eliminations of an identity, then recompute them from scratch."""
    for order in player.elims.pop((identity.suit_index, identity.rank), []):
        if state.holder_of(order) == -1:
            continue
        card = player.thoughts[order]
        if card.possible.has(identity):
            card.inferred = card.inferred.union(identity)
    logger.info("restored elimination of %s for player %d", log_card(identity, state.variant), player.player_index)
    good_touch_elim(player, state)


def find_links(player: Player, state: State, hand: list[int]) -> list[Link]:
    """Group saved, unidentified cards that share an inference set no larger than the group."""
    links: list[Link] = []
    linked: set[int] = set()

    for order in hand:
        card = player.thoughts[order]
        if order in linked or not card.saved or card.reset:
            continue
        if player.known_identity(state, order, infer=True) is not None:
            continue

        group = [
            other for other in hand
            if player.thoughts[other].saved
            and not player.thoughts[other].reset
            and player.known_identity(state, other, infer=True) is None
            and player.thoughts[other].inferred == card.inferred
        ]
        if len(group) < 2 or len(group) < len(card.inferred):
            continue

        identities = card.inferred.array
        last_clues = {tuple(player.thoughts[o].clues[-1:]) for o in group}
        promised = (
            all(state.is_playable(identity) for identity in identities)
            and len(last_clues) == 1
            and last_clues != {()}
        )
        logger.debug(
            "linking orders %s as [%s]%s", group, log_cards(identities, state.variant),
            " (promised)" if promised else "",
        )
        links.append(Link(orders=group, identities=identities, promised=promised))
        linked.update(group)

    return links


def refresh_links(player: Player, state: State) -> None:
    """Recompute every link from scratch."""
    player.links = [link for hand in state.hands for link in find_links(player, state, hand)]


def team_elim(game: "Game") -> None:
    """Propagate common knowledge into every player's perspective and refresh all beliefs."""
    state, common = game.state, game.common

    card_elim(common, state)
    refresh_links(common, state)
    good_touch_elim(common, state)

    for player in game.players:
        for order in state.all_orders():
            card = player.thoughts[order]
            common_card = common.thoughts[order]

            card.clued = common_card.clued
            card.newly_clued = common_card.newly_clued
            card.finessed = common_card.finessed
            card.chop_moved = common_card.chop_moved
            card.reset = common_card.reset
            card.inferred = common_card.inferred.intersect(card.possible)
            if not card.inferred:
                reset_card(player, state, order)

        card_elim(player, state)
        refresh_links(player, state)
        good_touch_elim(player, state)

    for player in game.all_players:
        player.update_hypo_stacks(state)
