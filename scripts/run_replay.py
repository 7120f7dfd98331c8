#!/usr/bin/env python3
"""Replay an exported hanab.live game through the bot and print what it would have done."""

import argparse
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

from src.conventions import CONVENTIONS, get_convention
from src.hanabi.config import BotConfig
from src.hanabi.log import configure_logging
from src.hanabi.models import ActionType
from src.hanabi.replay import load_replay, run_replay


def describe(command, game) -> str:
    """Human-readable summary of an outbound command."""
    state = game.state
    if command.type == ActionType.PLAY:
        return f"play order {command.target}"
    if command.type == ActionType.DISCARD:
        return f"discard order {command.target}"
    if command.type == ActionType.COLOUR:
        return f"clue {state.variant.suits[command.value].lower()} to {state.player_names[command.target]}"
    if command.type == ActionType.RANK:
        return f"clue {command.value} to {state.player_names[command.target]}"
    return command.type.name.lower()


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a hanab.live game export from one seat")
    parser.add_argument("file", type=Path, help="Path to the game export (JSON)")
    parser.add_argument("--index", type=int, default=0, help="Seat to replay from")
    parser.add_argument("--convention", choices=sorted(CONVENTIONS), default="HGroup")
    parser.add_argument("--decide", action="store_true", help="Ask the bot for a move on each of our turns")
    parser.add_argument("--level", default=None, help="Log level (overrides HANABI_BOT_LOG_LEVEL)")
    args = parser.parse_args()

    overrides = {"log_level": args.level} if args.level else {}
    config = BotConfig.from_env(**overrides)
    configure_logging(config.log_level)

    data = load_replay(args.file)
    game, commands = run_replay(
        data,
        get_convention(args.convention),
        our_player_index=args.index,
        config=config,
        decide=args.decide,
    )

    for turn, command in commands:
        print(f"turn {turn + 1}: {describe(command, game)}")
    print(f"score {game.state.score}/{game.state.max_score}, strikes {game.state.strikes}")


if __name__ == "__main__":
    main()
