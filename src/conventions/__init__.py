"""Convention sets the bot can play with."""

from src.hanabi.game import Game

from .hgroup import HGroup

CONVENTIONS: dict[str, type[Game]] = {
    "HGroup": HGroup,
}


def get_convention(name: str) -> type[Game]:
    """Look up a convention set by name."""
    if name not in CONVENTIONS:
        raise ValueError(f"Unsupported convention: {name!r}")
    return CONVENTIONS[name]
