"""Convention-independent effects of each action on the state and every perspective."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .card import ActualCard, Card
from .elim import card_elim, reset_card
from .log import log_card, log_clue
from .models import MAX_CLUES, ClueAction, DiscardAction, DrawAction, Identity, PlayAction

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


def _reveal(game: "Game", order: int, identity: Identity) -> None:
    game.state.deck[order].suit_index = identity.suit_index
    game.state.deck[order].rank = identity.rank
    for player in game.all_players:
        card = player.thoughts[order]
        card.suit_index = identity.suit_index
        card.rank = identity.rank


def on_draw(game: "Game", action: DrawAction) -> None:
    """Add the drawn card to the leftmost slot of its holder's hand."""
    state = game.state
    order, holder = action.order, action.player_index

    drawn_index = len(game.action_list) - 1
    state.hands[holder].insert(0, order)
    state.deck[order] = ActualCard(
        order=order,
        suit_index=action.suit_index,
        rank=action.rank,
        owner=holder,
        drawn_index=drawn_index,
    )
    state.cards_left -= 1

    for player in game.all_players:
        # Nobody sees their own cards
        visible = player.player_index != holder
        player.thoughts[order] = Card(
            order=order,
            suit_index=action.suit_index if visible else -1,
            rank=action.rank if visible else -1,
            possible=player.all_possible,
            inferred=player.all_inferred,
            drawn_index=drawn_index,
        )
        card_elim(player, state)


def on_clue(game: "Game", action: ClueAction) -> None:
    """Mark touched cards and narrow every card in the target's hand by the clue."""
    state = game.state
    touched_ids = state.variant.touched_ids(action.clue)

    for order in state.hands[action.target]:
        touched = order in action.touched
        actual = state.deck[order]
        if touched:
            if not actual.clued:
                actual.clued = True
                actual.newly_clued = True
            actual.clues.append(action.clue)

        for player in game.all_players:
            card = player.thoughts[order]
            if touched:
                card.intersect("possible", touched_ids)
                if not card.clued:
                    card.clued = True
                    card.newly_clued = True
                card.clues.append(action.clue)
            else:
                card.subtract("possible", touched_ids)

            card.intersect("inferred", card.possible)
            if not card.inferred:
                reset_card(player, state, order)

    state.clue_tokens -= 1
    logger.debug(
        "%s clued %s touching %s",
        state.player_names[action.giver], log_clue(action.clue, state.variant), action.touched,
    )


def on_play(game: "Game", action: PlayAction) -> None:
    """Move a played card onto its stack."""
    state = game.state
    identity = Identity(suit_index=action.suit_index, rank=action.rank)

    state.hands[action.player_index].remove(action.order)
    state.play_stacks[identity.suit_index] = identity.rank
    # Finishing a suit gives back a clue
    if identity.rank == 5 and state.clue_tokens < MAX_CLUES:
        state.clue_tokens += 1

    _reveal(game, action.order, identity)


def on_discard(game: "Game", action: DiscardAction) -> None:
    """Move a discarded or misplayed card to the discard pile."""
    state = game.state
    identity = Identity(suit_index=action.suit_index, rank=action.rank)

    state.hands[action.player_index].remove(action.order)
    state.discard_stacks[identity.suit_index][identity.rank - 1] += 1

    if action.failed:
        state.strikes += 1
    elif state.clue_tokens < MAX_CLUES:
        state.clue_tokens += 1

    if state.discard_stacks[identity.suit_index][identity.rank - 1] == state.variant.card_count(identity):
        state.max_ranks[identity.suit_index] = min(state.max_ranks[identity.suit_index], identity.rank - 1)
        logger.info("all copies of %s are gone", log_card(identity, state.variant))

    _reveal(game, action.order, identity)
