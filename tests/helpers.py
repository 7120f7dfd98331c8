"""Shared setup for bot tests.

Hands are written leftmost first with short forms like "r1", and "xx" for an
unknown card. Player 0 draws first, so their rightmost card is order 0.
"""

from src.conventions.hgroup import HGroup
from src.hanabi.elim import team_elim
from src.hanabi.models import (
    BaseClue,
    ClueAction,
    ClueType,
    DiscardAction,
    DrawAction,
    Identity,
    PlayAction,
    TurnAction,
)
from src.hanabi.variants import get_variant

PLAYER_NAMES = ["Alice", "Bob", "Cathy", "Donald", "Emily"]


def expand(short: str, variant_name: str = "No Variant") -> Identity | None:
    """Turn a short form like 'r1' into an identity."""
    if short == "xx":
        return None
    variant = get_variant(variant_name)
    return Identity(suit_index=variant.short_forms.index(short[0]), rank=int(short[1]))


def order_of(game, player_index: int, slot: int) -> int:
    """Order of the card in a 1-indexed slot (1 is leftmost)."""
    return game.state.hands[player_index][slot - 1]


def setup_game(
    hands: list[list[str]],
    our_player_index: int = 0,
    variant_name: str = "No Variant",
    play_stacks: list[int] | None = None,
    discarded: list[str] | None = None,
    clue_tokens: int = 8,
    starting: int = 0,
) -> HGroup:
    """
    Deal the given hands and start the first turn.

    Stacks, discards and clue tokens are written straight into the state, so
    they are not part of the action log (and are lost on a rewind).
    """
    variant = get_variant(variant_name)
    game = HGroup(0, PLAYER_NAMES[:len(hands)], our_player_index, variant)

    order = 0
    for player_index, hand in enumerate(hands):
        for short in reversed(hand):
            identity = None if player_index == our_player_index else expand(short, variant_name)
            game.handle_action(
                DrawAction(
                    player_index=player_index,
                    order=order,
                    suit_index=identity.suit_index if identity else -1,
                    rank=identity.rank if identity else -1,
                ),
                catchup=True,
            )
            order += 1

    state = game.state
    if play_stacks is not None:
        state.play_stacks = list(play_stacks)
    for short in discarded or []:
        identity = expand(short, variant_name)
        state.discard_stacks[identity.suit_index][identity.rank - 1] += 1
    state.clue_tokens = clue_tokens

    team_elim(game)
    game.handle_action(TurnAction(num=0, current_player_index=starting), catchup=True)
    return game


def give_clue(game, giver: int, target: int, clue_type: ClueType, value: int, touched: list[int] | None = None) -> None:
    """Apply a clue. Touched cards are worked out from visible hands unless given."""
    clue = BaseClue(type=clue_type, value=value)
    if touched is None:
        touched = game.state.clue_touched(target, clue)
    game.handle_action(ClueAction(giver=giver, target=target, touched=touched, clue=clue), catchup=True)


def play(game, player_index: int, order: int, short: str) -> None:
    identity = expand(short)
    game.handle_action(
        PlayAction(player_index=player_index, order=order, suit_index=identity.suit_index, rank=identity.rank),
        catchup=True,
    )


def discard(game, player_index: int, order: int, short: str, failed: bool = False) -> None:
    identity = expand(short)
    game.handle_action(
        DiscardAction(
            player_index=player_index, order=order,
            suit_index=identity.suit_index, rank=identity.rank, failed=failed,
        ),
        catchup=True,
    )


def next_turn(game, num: int, player_index: int, decide: bool = False):
    """Start a turn. With `decide`, returns the bot's command if it is our turn."""
    return game.handle_action(TurnAction(num=num, current_player_index=player_index), catchup=not decide)
