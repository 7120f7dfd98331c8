"""Chop, focus and clue-value rules of the H-group conventions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.hanabi.elim import reset_card
from src.hanabi.log import log_card
from src.hanabi.models import ClueResult, WaitingConnection
from src.hanabi.player import Player

if TYPE_CHECKING:
    from src.hanabi.game import Game

logger = logging.getLogger(__name__)


def find_chop(hand: list[int], player: Player, after_clue: bool = False) -> int:
    """
    Index of the rightmost card that isn't clued, finessed or chop moved.

    Args:
        hand: Orders in the hand, leftmost first
        player: Perspective whose card flags are used
        after_clue: Whether cards touched by the clue being processed count as clued

    Returns:
        Index into the hand, or -1 if every card is saved
    """
    for index in range(len(hand) - 1, -1, -1):
        card = player.thoughts[hand[index]]
        clued = card.clued and (after_clue or not card.newly_clued)
        if not (clued or card.finessed or card.chop_moved):
            return index
    return -1


def determine_focus(
    hand: list[int],
    player: Player,
    touched: list[int],
    before_clue: bool = False,
) -> tuple[int, bool]:
    """
    Find the focused card of a clue.

    The chop is focused if touched, otherwise the leftmost newly touched card,
    otherwise the leftmost touched card.

    Args:
        hand: Orders in the target's hand
        player: Perspective whose card flags are used
        touched: Orders touched by the clue
        before_clue: Whether the clue has not been applied to the card flags yet

    Returns:
        (focused order, whether the focus is the chop)
    """
    chop_index = find_chop(hand, player, after_clue=before_clue)

    if chop_index != -1 and hand[chop_index] in touched:
        return hand[chop_index], True

    def previously_clued(order: int) -> bool:
        card = player.thoughts[order]
        return card.clued and (before_clue or not card.newly_clued)

    for order in hand:
        if order in touched and not previously_clued(order):
            return order, False

    for order in hand:
        if order in touched:
            return order, False

    raise ValueError(f"Clue touched no cards in hand {hand}")


def find_clue_value(result: ClueResult) -> float:
    """Score a simulated clue. Higher is better; negative values are never worth giving."""
    good_touch = 0.0
    if result.new_touched > 0:
        good_touch = 0.51 + 0.1 * (result.new_touched - 1)

    return (
        0.5 * (len(result.finesses) + len(result.playables))
        + good_touch
        + 0.01 * result.elim
        - result.bad_touch
        - 0.2 * result.remainder
    )


def remove_waiting_connection(game: "Game", wc: WaitingConnection) -> None:
    """Retract a waiting connection's inference and the finesses it relied on."""
    state, common = game.state, game.common
    logger.info(
        "removing waiting connection for %s on order %d",
        log_card(wc.inference, state.variant), wc.focused_order,
    )

    others = [other for other in common.waiting_connections if other is not wc]
    still_needed = {conn.order for other in others for conn in other.connections[other.conn_index:]}

    for player in game.all_players:
        if state.holder_of(wc.focused_order) != -1:
            focus = player.thoughts[wc.focused_order]
            if focus.inferred.has(wc.inference):
                focus.subtract("inferred", wc.inference)
                if not focus.inferred:
                    reset_card(player, state, wc.focused_order)

        for conn in wc.connections[wc.conn_index:]:
            if conn.type == "finesse" and conn.order not in still_needed and state.holder_of(conn.order) != -1:
                card = player.thoughts[conn.order]
                card.finessed = False
                card.inferred = card.possible
