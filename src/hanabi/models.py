"""Data models for the Hanabi reasoning core."""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# Cards per player at the start of the game, keyed by player count
HAND_SIZE: dict[int, int] = {2: 5, 3: 5, 4: 4, 5: 4, 6: 3}

MAX_CLUES = 8
MAX_STRIKES = 3
MAX_RANK = 5


class ClueType(IntEnum):
    """Clue type as sent over the wire."""
    COLOUR = 0
    RANK = 1


class ActionType(IntEnum):
    """Outbound command type as sent over the wire."""
    PLAY = 0
    DISCARD = 1
    COLOUR = 2
    RANK = 3
    END_GAME = 4


class EndCondition(IntEnum):
    """Reason a game ended."""
    IN_PROGRESS = 0
    NORMAL = 1
    STRIKEOUT = 2
    TIMEOUT = 3
    TERMINATED = 4


class Identity(BaseModel):
    """A (suit, rank) pair. Immutable."""

    model_config = ConfigDict(frozen=True)

    suit_index: int
    rank: int

    def __deepcopy__(self, memo: dict[int, Any]) -> "Identity":
        return self

    def __str__(self) -> str:
        return f"{self.suit_index}:{self.rank}"


class BaseClue(BaseModel):
    """A clue without a recipient."""

    model_config = ConfigDict(frozen=True)

    type: ClueType
    value: int


class Clue(BaseClue):
    """A clue addressed to a specific player."""

    target: int


# Internal action stream
class DrawAction(BaseModel):
    """A card drawn into a hand. Suit and rank are -1 when hidden from us."""

    type: Literal["draw"] = "draw"
    player_index: int
    order: int
    suit_index: int = -1
    rank: int = -1


class ClueAction(BaseModel):
    """A clue given to a player, touching the cards in `touched` (wire name `list`)."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["clue"] = "clue"
    giver: int
    target: int
    touched: list[int] = Field(alias="list")
    clue: BaseClue
    mistake: bool = False


class PlayAction(BaseModel):
    """A successful play."""

    type: Literal["play"] = "play"
    player_index: int
    order: int
    suit_index: int
    rank: int


class DiscardAction(BaseModel):
    """A discard. `failed` marks a misplay (bomb)."""

    type: Literal["discard"] = "discard"
    player_index: int
    order: int
    suit_index: int
    rank: int
    failed: bool = False


class TurnAction(BaseModel):
    """Start of a new turn."""

    type: Literal["turn"] = "turn"
    num: int
    current_player_index: int


class GameOverAction(BaseModel):
    """End of the game."""

    type: Literal["gameOver"] = "gameOver"
    end_condition: int
    player_index: int
    votes: Any = None


# Corrective actions, only ever created by rewinds
class IdentifyAction(BaseModel):
    """Force a card's identity during a rewind."""

    type: Literal["identify"] = "identify"
    order: int
    player_index: int
    suit_index: int
    rank: int
    infer: bool = False


class IgnoreAction(BaseModel):
    """Exclude a card from connection search at a given connection index."""

    type: Literal["ignore"] = "ignore"
    conn_index: int
    order: int


class FinesseAction(BaseModel):
    """Retroactively mark cards as finessed."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["finesse"] = "finesse"
    touched: list[int] = Field(alias="list")
    clue: BaseClue


Action = Annotated[
    Union[
        DrawAction,
        ClueAction,
        PlayAction,
        DiscardAction,
        TurnAction,
        GameOverAction,
        IdentifyAction,
        IgnoreAction,
        FinesseAction,
    ],
    Field(discriminator="type"),
]


class PerformAction(BaseModel):
    """Outbound command for the transport layer.

    `target` is a card order for plays/discards and a player index for clues.
    """

    table_id: int
    type: ActionType
    target: int
    value: int | None = None


# Convention bookkeeping
ConnectionType = Literal["known", "playable", "prompt", "finesse", "terminate"]


class Connection(BaseModel):
    """A card that must play before a focused card can be what it is inferred to be."""

    type: ConnectionType
    reacting: int
    order: int
    identities: list[Identity]
    is_self: bool = False
    hidden: bool = False


class FocusPossibility(BaseModel):
    """One interpretation of a clue's focused card."""

    suit_index: int
    rank: int
    connections: list[Connection] = Field(default_factory=list)
    save: bool = False

    @property
    def identity(self) -> Identity:
        return Identity(suit_index=self.suit_index, rank=self.rank)


class WaitingConnection(BaseModel):
    """A pending hypothesis that a chain of plays will confirm a clue's inference."""

    connections: list[Connection]
    giver: int
    target: int
    conn_index: int = 0
    focused_order: int
    inference: Identity
    action_index: int
    fake: bool = False


class Link(BaseModel):
    """Cards whose identities are resolved collectively rather than individually."""

    orders: list[int]
    identities: list[Identity]
    promised: bool = False


class CardRef(BaseModel):
    """A card in a particular player's hand."""

    player_index: int
    order: int


class ClueResult(BaseModel):
    """Statistics describing the outcome of a simulated clue."""

    elim: int = 0
    new_touched: int = 0
    bad_touch: int = 0
    trash: int = 0
    finesses: list[CardRef] = Field(default_factory=list)
    playables: list[CardRef] = Field(default_factory=list)
    remainder: float = 0


class ClueChoice(BaseModel):
    """A clue chosen by the clue finder, with its evaluated result."""

    type: ClueType
    value: int
    target: int
    result: ClueResult

    def to_clue(self) -> Clue:
        return Clue(type=self.type, value=self.value, target=self.target)
