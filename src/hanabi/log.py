"""Logging helpers: readable card/clue names and buffered hypothetical logs."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from .models import BaseClue, ClueType, Identity
from .variants import Variant


LOGGER_ROOT = "src"


def log_card(identity: Identity | None, variant: Variant | None = None) -> str:
    """Short name for an identity, e.g. 'r3'."""
    if identity is None or identity.suit_index < 0:
        return "xx"
    if variant is None:
        return str(identity)
    return f"{variant.short_forms[identity.suit_index]}{identity.rank}"


def log_cards(identities: Iterable[Identity], variant: Variant | None = None) -> str:
    return ",".join(log_card(i, variant) for i in identities)


def log_hand(hand: list[int], player, variant: Variant | None = None) -> str:
    """A hand as one player sees it, with inferences for cards they can't see."""
    parts = []
    for order in hand:
        card = player.thoughts[order]
        identity = card.identity()
        if identity is not None:
            parts.append(log_card(identity, variant))
        else:
            parts.append(f"xx({log_cards(card.inferred, variant)})")
    return " ".join(parts)


def log_clue(clue: BaseClue, variant: Variant | None = None) -> str:
    """Short description of a clue, e.g. 'red to 1' or '3 to 2'."""
    if clue.type == ClueType.COLOUR:
        value = variant.suits[clue.value].lower() if variant else f"colour {clue.value}"
    else:
        value = str(clue.value)
    target = getattr(clue, "target", None)
    return value if target is None else f"({value} to {target})"


def configure_logging(level: str = "INFO") -> None:
    """Set up console logging for scripts."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


class _Collector(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.NOTSET)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def collect_logs() -> Iterator[list[logging.LogRecord]]:
    """Buffer records from the bot's loggers instead of emitting them.

    Pass the yielded list to flush_logs() to emit them after all.
    """
    base = logging.getLogger(LOGGER_ROOT)
    collector = _Collector()
    saved_handlers, saved_propagate = base.handlers[:], base.propagate
    base.handlers = [collector]
    base.propagate = False
    try:
        yield collector.records
    finally:
        base.handlers = saved_handlers
        base.propagate = saved_propagate


def flush_logs(records: list[logging.LogRecord]) -> None:
    """Emit previously collected records through the normal handlers."""
    base = logging.getLogger(LOGGER_ROOT)
    for record in records:
        base.handle(record)
