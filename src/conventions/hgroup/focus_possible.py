"""Enumerate the identities a clue's focused card could be."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.log import log_card, log_clue
from src.hanabi.models import ClueAction, ClueType, Connection, FocusPossibility, Identity
from src.hanabi.util import is_basic_trash, is_critical, playable_away, visible_find

from .connecting import find_connecting

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def _ignored(game: "Game", conn_index: int) -> set[int]:
    """Orders that a rewind excluded from the connection at this index."""
    if conn_index < len(game.next_ignore):
        return set(game.next_ignore[conn_index])
    return set()


def _fill_ins(game: "Game", action: ClueAction) -> int:
    """Number of touched cards that are new or were already touched by the same clue."""
    count = 0
    for order in action.touched:
        card = game.state.deck[order]
        if card.newly_clued or action.clue in card.clues[:-1]:
            count += 1
    return count


def find_colour_focus(
    game: "Game",
    suit_index: int,
    action: ClueAction,
    focus_order: int,
    chop: bool,
) -> list[FocusPossibility]:
    """Possibilities for a colour-clued focus within one suit: a play, or a save on chop."""
    state, common = game.state, game.common
    variant = state.variant
    focus_card = common.thoughts[focus_order]
    focus_possible: list[FocusPossibility] = []

    hypo_common = common.clone()
    connections: list[Connection] = []
    connected = [focus_order]
    next_rank = state.play_stacks[suit_index] + 1

    # Play clue: follow the chain of connecting cards as far as it goes
    while next_rank < state.max_ranks[suit_index]:
        identity = Identity(suit_index=suit_index, rank=next_rank)
        conn = find_connecting(
            game, hypo_common, action.giver, action.target, identity, connected, _ignored(game, len(connections)),
        )
        if conn is None:
            break

        if (
            conn.type in ("known", "playable", "prompt")
            and hypo_common.thoughts[conn.order].newly_clued
            and len(hypo_common.thoughts[conn.order].possible) > 1
            and focus_card.inferred.has(identity)
        ):
            # The same clue touched this card, so it can't be used to connect
            logger.warning(
                "blocked connection: focused card could be %s", log_card(identity, variant),
            )
            break

        if conn.type == "finesse":
            # Stopping here is also a valid interpretation
            focus_possible.append(
                FocusPossibility(suit_index=suit_index, rank=next_rank, connections=list(connections))
            )
            hypo_common.thoughts[conn.order].finessed = True

        connections.append(conn)
        connected.append(conn.order)
        next_rank += 1

    if next_rank <= state.max_ranks[suit_index]:
        focus_possible.append(FocusPossibility(suit_index=suit_index, rank=next_rank, connections=connections))

    if chop:
        last_save_rank = 5 if variant.is_dark(suit_index) else 4
        for rank in range(next_rank + 1, last_save_rank + 1):
            identity = Identity(suit_index=suit_index, rank=rank)
            if is_basic_trash(state, identity):
                continue
            # Dark 2s and 5s can only be colour saved with a fill-in
            if variant.is_dark(suit_index) and rank in (2, 5) and _fill_ins(game, action) < 2:
                continue
            if is_critical(state, identity):
                focus_possible.append(FocusPossibility(suit_index=suit_index, rank=rank, save=True))

    return focus_possible


def find_rank_focus(
    game: "Game",
    rank: int,
    action: ClueAction,
    focus_order: int,
    chop: bool,
) -> list[FocusPossibility]:
    """Possibilities for a rank-clued focus across every suit."""
    state, common = game.state, game.common
    variant = state.variant
    focus_possible: list[FocusPossibility] = []

    for suit_index in range(variant.num_suits):
        identity = Identity(suit_index=suit_index, rank=rank)
        if rank > state.max_ranks[suit_index]:
            continue

        # Play clue: check whether the gap below the focus can be filled
        next_rank = state.play_stacks[suit_index] + 1
        connections: list[Connection] = []
        if rank >= next_rank:
            hypo_common = common.clone()
            connected = [focus_order]
            while next_rank < rank:
                conn = find_connecting(
                    game, hypo_common, action.giver, action.target,
                    Identity(suit_index=suit_index, rank=next_rank), connected, _ignored(game, len(connections)),
                )
                if conn is None:
                    break
                if conn.type == "finesse":
                    hypo_common.thoughts[conn.order].finessed = True
                connections.append(conn)
                connected.append(conn.order)
                next_rank += 1

            if next_rank == rank:
                focus_possible.append(
                    FocusPossibility(suit_index=suit_index, rank=rank, connections=connections)
                )

        if not chop or playable_away(state, identity) <= 0:
            continue

        # Dark 3s and 4s are never rank saved
        if variant.is_dark(suit_index) and rank in (3, 4):
            continue

        giver = game.players[action.giver]
        save2 = rank == 2 and not [
            order for order in visible_find(state, giver, identity) if order != focus_order
        ]
        if is_critical(state, identity) or save2:
            focus_possible.append(FocusPossibility(suit_index=suit_index, rank=rank, save=True))

    return focus_possible


def find_focus_possible(
    game: "Game",
    action: ClueAction,
    focus_order: int,
    chop: bool,
) -> list[FocusPossibility]:
    """
    Every identity the focused card could be, each with the connections it needs.

    Saves come after plays of the same identity and replace them.
    """
    state = game.state
    variant = state.variant
    clue = action.clue
    logger.info(
        "play/hypo/max stacks in clue interpretation: %s %s %s",
        state.play_stacks, game.common.hypo_stacks, state.max_ranks,
    )

    omni = variant.omni_suits()
    focus_possible: list[FocusPossibility] = []

    if clue.type == ClueType.COLOUR:
        for suit_index in variant.rainbowish_suits():
            if suit_index not in omni and suit_index != clue.value:
                focus_possible += find_colour_focus(game, suit_index, action, focus_order, chop)
        focus_possible += find_colour_focus(game, clue.value, action, focus_order, chop)
    else:
        focus_possible += find_rank_focus(game, clue.value, action, focus_order, chop)

    for suit_index in omni:
        focus_possible += find_colour_focus(game, suit_index, action, focus_order, chop)

    # Later entries win over earlier ones with the same identity
    deduped = [
        fp for i, fp in enumerate(focus_possible)
        if not any(later.identity == fp.identity for later in focus_possible[i + 1:])
    ]
    logger.info(
        "focus possible for %s: %s",
        log_clue(clue, variant),
        ", ".join(
            f"{log_card(fp.identity, variant)}{' (save)' if fp.save else ''}" for fp in deduped
        ),
    )
    return deduped
