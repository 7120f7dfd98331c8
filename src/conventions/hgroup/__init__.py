"""H-group conventions."""

from src.hanabi.game import Game
from src.hanabi.models import ClueAction, DiscardAction, PerformAction, PlayAction, TurnAction

from .clue_finder import clue_safe, determine_clue, evaluate_clue, get_result
from .connecting import find_connecting
from .focus_possible import find_colour_focus, find_focus_possible, find_rank_focus
from .hanabi_logic import determine_focus, find_chop, find_clue_value
from .interpret_clue import interpret_clue
from .interpret_discard import interpret_discard, interpret_sarcastic
from .interpret_play import interpret_play
from .take_action import take_action
from .update_turn import update_turn


class HGroup(Game):
    """A game played with H-group conventions."""

    convention_name = "HGroup"

    def interpret_clue(self, action: ClueAction) -> None:
        interpret_clue(self, action)

    def interpret_play(self, action: PlayAction) -> None:
        interpret_play(self, action)

    def interpret_discard(self, action: DiscardAction) -> None:
        interpret_discard(self, action)

    def update_turn(self, action: TurnAction) -> None:
        update_turn(self, action)

    def take_action(self) -> PerformAction:
        return take_action(self)


__all__ = [
    "HGroup",
    "clue_safe",
    "determine_clue",
    "determine_focus",
    "evaluate_clue",
    "find_chop",
    "find_clue_value",
    "find_colour_focus",
    "find_connecting",
    "find_focus_possible",
    "find_rank_focus",
    "get_result",
    "interpret_sarcastic",
]
