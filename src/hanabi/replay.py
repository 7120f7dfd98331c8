"""Feeding a finished hanab.live game export through a bot, one action at a time."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .config import BotConfig
from .game import Game
from .models import (
    HAND_SIZE,
    MAX_STRIKES,
    ActionType,
    BaseClue,
    ClueAction,
    ClueType,
    DiscardAction,
    DrawAction,
    EndCondition,
    GameOverAction,
    Identity,
    PerformAction,
    PlayAction,
    TurnAction,
)
from .variants import Variant, get_variant

logger = logging.getLogger(__name__)


class ReplayError(ValueError):
    """The export is malformed or contains an illegal action."""


def load_replay(path: str | Path) -> dict[str, Any]:
    """Read a game export from disk."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _deck_identities(data: dict[str, Any]) -> list[Identity]:
    try:
        return [Identity(suit_index=card["suitIndex"], rank=card["rank"]) for card in data["deck"]]
    except (KeyError, TypeError) as e:
        raise ReplayError(f"Malformed deck in export: {e}") from e


def parse_action(game: Game, raw: dict[str, Any], deck: list[Identity]) -> PlayAction | DiscardAction | ClueAction | GameOverAction:
    """
    Convert one exported action into an internal action.

    Plays of unplayable cards become failed discards.
    """
    state = game.state
    action_type = ActionType(raw["type"])
    target = raw["target"]
    current = state.current_player_index

    if action_type in (ActionType.PLAY, ActionType.DISCARD):
        holder = state.holder_of(target)
        if holder == -1:
            raise ReplayError(f"Card {target} is not in anyone's hand")
        identity = deck[target]
        if action_type == ActionType.PLAY and state.is_playable(identity):
            return PlayAction(player_index=holder, order=target, suit_index=identity.suit_index, rank=identity.rank)
        return DiscardAction(
            player_index=holder, order=target, suit_index=identity.suit_index, rank=identity.rank,
            failed=action_type == ActionType.PLAY,
        )

    if action_type in (ActionType.COLOUR, ActionType.RANK):
        clue_type = ClueType.COLOUR if action_type == ActionType.COLOUR else ClueType.RANK
        clue = BaseClue(type=clue_type, value=raw["value"])
        touched = [order for order in state.hands[target] if state.variant.card_touched(deck[order], clue)]
        if not touched:
            raise ReplayError(f"Clue {raw} touches no cards")
        return ClueAction(giver=current, target=target, touched=touched, clue=clue)

    return GameOverAction(end_condition=raw.get("value") or EndCondition.TERMINATED, player_index=target)


def run_replay(
    data: dict[str, Any],
    game_cls: type[Game],
    our_player_index: int = 0,
    config: BotConfig | None = None,
    variant: Variant | None = None,
    decide: bool = False,
) -> tuple[Game, list[tuple[int, PerformAction]]]:
    """
    Replay an exported game from one seat.

    Args:
        data: hanab.live game export
        game_cls: Convention set to reason with
        our_player_index: Seat to play from (only this seat's cards are hidden)
        config: Bot configuration
        variant: Variant override (defaults to the one named in the export)
        decide: Whether to ask the bot for a move on each of our turns

    Returns:
        (final game, list of (turn number, command the bot would have sent))
    """
    players = data.get("players")
    if not players:
        raise ReplayError("Export has no players")
    if not 0 <= our_player_index < len(players):
        raise ReplayError(f"Player index {our_player_index} out of range")

    if len(players) not in HAND_SIZE:
        raise ReplayError(f"Unsupported number of players: {len(players)}")

    deck = _deck_identities(data)
    options = data.get("options", {})
    variant = variant or get_variant(options.get("variant", "No Variant"))
    hand_size = HAND_SIZE[len(players)] + int(options.get("oneExtraCard", False)) - int(options.get("oneLessCard", False))
    config = config or BotConfig(table_id=data.get("id", 0))
    game = game_cls(config.table_id, players, our_player_index, variant, config)
    commands: list[tuple[int, PerformAction]] = []
    next_order = 0

    def draw(player_index: int) -> None:
        nonlocal next_order
        if next_order >= len(deck):
            return
        identity = deck[next_order]
        hidden = player_index == our_player_index
        game.handle_action(
            DrawAction(
                player_index=player_index,
                order=next_order,
                suit_index=-1 if hidden else identity.suit_index,
                rank=-1 if hidden else identity.rank,
            ),
            catchup=True,
        )
        next_order += 1

    def start_turn(num: int, player_index: int) -> None:
        command = game.handle_action(TurnAction(num=num, current_player_index=player_index), catchup=not decide)
        if command is not None:
            commands.append((num, command))

    for player_index in range(len(players)):
        for _ in range(hand_size):
            draw(player_index)

    turn = 0
    start_turn(turn, 0)

    game_over = False
    for raw in data.get("actions", []):
        action = parse_action(game, raw, deck)
        actor = game.state.current_player_index
        game.handle_action(action, catchup=True)

        if isinstance(action, GameOverAction):
            game_over = True
            break
        if isinstance(action, (PlayAction, DiscardAction)):
            draw(actor)
        if game.state.strikes >= MAX_STRIKES:
            game.handle_action(GameOverAction(end_condition=EndCondition.STRIKEOUT, player_index=actor), catchup=True)
            game_over = True
            break

        turn += 1
        start_turn(turn, (actor + 1) % len(players))

    if not game_over:
        game.handle_action(GameOverAction(end_condition=EndCondition.NORMAL, player_index=-1), catchup=True)

    logger.info("replay finished with score %d/%d", game.state.score, game.state.max_score)
    return game, commands
