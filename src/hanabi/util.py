"""Board predicates shared by every convention."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .models import Identity
from .state import State

if TYPE_CHECKING:
    from .player import Player


def visible_find(
    state: State,
    player: "Player",
    identity: Identity,
    ignore: Sequence[int] = (),
    infer: Sequence[int] | None = None,
    symmetric: Sequence[int] | None = None,
) -> list[int]:
    """
    Find card orders in everyone's hands that the player thinks match the identity.

    Args:
        state: Current state
        player: The inferring perspective (can only infer on its own cards)
        identity: Identity to look for
        ignore: Player indexes whose hands are skipped
        infer: Player indexes whose cards may match by a single inference
            (defaults to the inferring player and us)
        symmetric: Player indexes whose cards may only match by possibilities
            (defaults to the inferring player)

    Returns:
        Orders of matching cards
    """
    infer = [player.player_index, state.our_player_index] if infer is None else infer
    symmetric = [player.player_index] if symmetric is None else symmetric

    found: list[int] = []
    for player_index, hand in enumerate(state.hands):
        if player_index in ignore:
            continue
        for order in hand:
            card = player.thoughts[order]
            if card.matches(identity, infer=player_index in infer, symmetric=player_index in symmetric):
                found.append(order)
    return found


def base_count(state: State, identity: Identity) -> int:
    """Number of copies of the identity on the play stacks or in the discard pile."""
    played = 1 if state.play_stacks[identity.suit_index] >= identity.rank else 0
    return played + state.discard_stacks[identity.suit_index][identity.rank - 1]


def unknown_identities(state: State, player: "Player", identity: Identity) -> int:
    """Number of copies of the identity still unaccounted for, according to a player."""
    visible = len(visible_find(state, player, identity, ignore=[player.player_index]))
    return state.variant.card_count(identity) - base_count(state, identity) - visible


def is_critical(state: State, identity: Identity) -> bool:
    """Whether only one copy of the identity remains."""
    discarded = state.discard_stacks[identity.suit_index][identity.rank - 1]
    return discarded == state.variant.card_count(identity) - 1


def is_basic_trash(state: State, identity: Identity) -> bool:
    """Whether the identity has already been played or can never be played."""
    return (
        identity.rank <= state.play_stacks[identity.suit_index]
        or identity.rank > state.max_ranks[identity.suit_index]
    )


def is_saved(
    state: State,
    player: "Player",
    identity: Identity,
    order: int = -1,
    ignore_cm: bool = False,
) -> bool:
    """Whether some other card of this identity is already saved in someone's hand."""
    for found in visible_find(state, player, identity):
        card = player.thoughts[found]
        if found == order:
            continue
        committed = card.clued or card.finessed or (card.chop_moved and not ignore_cm)
        if committed and card.matches(identity, assume=True):
            return True
    return False


def is_trash(state: State, player: "Player", identity: Identity, order: int = -1) -> bool:
    """Whether the identity is basic trash or already saved elsewhere."""
    return is_basic_trash(state, identity) or is_saved(state, player, identity, order)


def playable_away(state: State, identity: Identity) -> int:
    """How many plays away the identity is. 0 is playable now, -1 is already trash."""
    if is_basic_trash(state, identity):
        return -1
    return identity.rank - (state.play_stacks[identity.suit_index] + 1)


def get_pace(state: State) -> int:
    """Current score + cards left + number of players - max score."""
    return state.score + state.cards_left + state.num_players - state.max_score


def unique2(state: State, player: "Player", identity: Identity) -> bool:
    """Whether the identity is a 2 with no other copy visible, according to the player."""
    if identity.rank != 2 or state.play_stacks[identity.suit_index] >= 2:
        return False
    if len(visible_find(state, player, identity)) != 1:
        return False
    own_hand = state.hands[state.our_player_index]
    return not any(player.thoughts[order].matches(identity, infer=True, symmetric=True) for order in own_hand)


def card_value(state: State, player: "Player", identity: Identity, order: int = -1) -> float:
    """Relative value of a card: 0 is worthless, 5 is critical."""
    if is_trash(state, player, identity, order) or len(visible_find(state, player, identity)) > 1:
        return 0
    if is_critical(state, identity):
        return 5
    if unique2(state, player, identity):
        return 4
    # Next playable rank is worth 4, a 4 with nothing on the stack is worth 1
    return 5 - (identity.rank - player.hypo_stacks[identity.suit_index])


def unknown_card_value(state: State, player: "Player", order: int) -> float:
    """Average value over an unknown card's possibilities."""
    possible = player.thoughts[order].possible
    if not possible:
        return 0
    return sum(card_value(state, player, identity) for identity in possible) / len(possible)
