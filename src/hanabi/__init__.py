"""Convention-independent Hanabi reasoning core."""

from .card import ActualCard, Card
from .config import BotConfig
from .errors import CopyDepthError, HanabiBotError, RewindDepthError
from .game import Game
from .identity_set import IdentitySet
from .models import (
    Action,
    ActionType,
    BaseClue,
    Clue,
    ClueAction,
    ClueType,
    DiscardAction,
    DrawAction,
    GameOverAction,
    Identity,
    IdentifyAction,
    IgnoreAction,
    PerformAction,
    PlayAction,
    TurnAction,
)
from .player import Player
from .state import State
from .variants import Variant, get_variant

__all__ = [
    # Models
    "Action",
    "ActionType",
    "BaseClue",
    "Clue",
    "ClueAction",
    "ClueType",
    "DiscardAction",
    "DrawAction",
    "GameOverAction",
    "Identity",
    "IdentifyAction",
    "IgnoreAction",
    "PerformAction",
    "PlayAction",
    "TurnAction",
    # Beliefs
    "ActualCard",
    "Card",
    "IdentitySet",
    "Player",
    "State",
    # Game
    "BotConfig",
    "Game",
    "Variant",
    "get_variant",
    # Errors
    "CopyDepthError",
    "HanabiBotError",
    "RewindDepthError",
]
