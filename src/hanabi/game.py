"""Game driver: owns the state and every perspective, and replays the action log on rewinds."""

from __future__ import annotations

import copy
import logging

from .basics import on_draw
from .config import BotConfig
from .elim import team_elim
from .errors import CopyDepthError, RewindDepthError
from .identity_set import IdentitySet
from .log import log_card
from .models import (
    Action,
    ClueAction,
    DiscardAction,
    FinesseAction,
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
from .variants import Variant

logger = logging.getLogger(__name__)


class Game:
    """
    Reasoning core for one seat at one table.

    Subclasses supply the conventions by implementing interpret_clue,
    interpret_play, interpret_discard, update_turn and take_action.
    """

    convention_name = "Basic"

    def __init__(
        self,
        table_id: int,
        player_names: list[str],
        our_player_index: int,
        variant: Variant,
        config: BotConfig | None = None,
    ):
        self.table_id = table_id
        self.config = config or BotConfig(table_id=table_id)
        self.state = State.create(player_names, our_player_index, variant)
        self.players = [Player.create(i, variant.num_suits) for i in range(len(player_names))]
        self.common = Player.create(-1, variant.num_suits)

        self.action_list: list[Action] = []
        # Orders to skip in connection search, indexed by connection index
        self.next_ignore: list[list[int]] = []
        self.rewind_depth = 0
        self.copy_depth = 0
        self.last_command: PerformAction | None = None

    @property
    def me(self) -> Player:
        return self.players[self.state.our_player_index]

    @property
    def all_players(self) -> list[Player]:
        return [*self.players, self.common]

    def create_blank(self) -> "Game":
        """A fresh game at the same table, with no actions applied."""
        return self.__class__(
            self.table_id,
            self.state.player_names,
            self.state.our_player_index,
            self.state.variant,
            self.config,
        )

    def minimal_copy(self) -> "Game":
        """Deep copy for hypothetical simulation. Only the state and perspectives are copied."""
        if self.copy_depth + 1 > self.config.max_copy_depth:
            raise CopyDepthError(f"Maximum recursive depth reached ({self.config.max_copy_depth})")

        new_game = self.create_blank()
        new_game.state = self.state.model_copy(deep=True)
        new_game.players = [player.clone() for player in self.players]
        new_game.common = self.common.clone()
        new_game.action_list = list(self.action_list)
        new_game.next_ignore = copy.deepcopy(self.next_ignore)
        new_game.rewind_depth = self.rewind_depth
        new_game.copy_depth = self.copy_depth + 1
        return new_game

    def handle_action(self, action: Action, catchup: bool = False) -> PerformAction | None:
        """
        Apply one action to the game.

        Args:
            action: The action to apply
            catchup: Whether we are replaying history (never decide in that case)

        Returns:
            The command to send if this action starts our turn, otherwise None
        """
        self.action_list.append(action)

        if isinstance(action, ClueAction):
            self.interpret_clue(action)
        elif isinstance(action, PlayAction):
            self.interpret_play(action)
        elif isinstance(action, DiscardAction):
            self.interpret_discard(action)
        elif isinstance(action, TurnAction):
            return self._handle_turn(action, catchup)
        elif isinstance(action, GameOverAction):
            logger.info("game over (condition %d), score %d", action.end_condition, self.state.score)
        elif isinstance(action, IdentifyAction):
            self._handle_identify(action)
        elif isinstance(action, IgnoreAction):
            while len(self.next_ignore) <= action.conn_index:
                self.next_ignore.append([])
            self.next_ignore[action.conn_index].append(action.order)
        elif isinstance(action, FinesseAction):
            for order in action.touched:
                for player in self.all_players:
                    player.thoughts[order].finessed = True
            team_elim(self)
        else:
            on_draw(self, action)
        return None

    def _handle_turn(self, action: TurnAction, catchup: bool) -> PerformAction | None:
        state = self.state
        state.turn_count = action.num
        state.current_player_index = action.current_player_index

        for order in state.all_orders():
            state.deck[order].newly_clued = False
            for player in self.all_players:
                player.thoughts[order].newly_clued = False

        self.update_turn(action)

        if catchup or action.current_player_index != state.our_player_index:
            return None
        self.last_command = self.take_action()
        return self.last_command

    def _handle_identify(self, action: IdentifyAction) -> None:
        state = self.state
        identity = Identity(suit_index=action.suit_index, rank=action.rank)
        logger.info("identifying order %d as %s", action.order, log_card(identity, state.variant))

        if action.player_index == state.our_player_index:
            state.deck[action.order].suit_index = identity.suit_index
            state.deck[action.order].rank = identity.rank
            card = self.me.thoughts[action.order]
            card.suit_index, card.rank = identity.suit_index, identity.rank
            card.possible = IdentitySet.create(state.variant.num_suits, [identity])
            card.inferred = card.possible

        for player in self.all_players:
            card = player.thoughts[action.order]
            card.rewinded = True
            if action.infer:
                card.inferred = card.possible.intersect(identity)

    def rewind(self, action_index: int, override: Action | None = None) -> bool:
        """
        Rebuild every belief by replaying the log with an extra action inserted.

        Args:
            action_index: Position in the log to insert the override at
            override: Corrective action to insert, if any

        Returns:
            False if the same override was already applied, otherwise True
        """
        if self.rewind_depth >= self.config.max_rewind_depth:
            raise RewindDepthError(f"Rewind depth went too deep ({self.rewind_depth})")
        if action_index < 0 or action_index > len(self.action_list):
            raise ValueError(f"Attempted to rewind to an invalid action index {action_index}")
        if override is not None and override in self.action_list:
            logger.error("already rewinded with %s, not rewinding again", override)
            return False

        logger.info("rewinding to action %d (depth %d)", action_index, self.rewind_depth + 1)
        history = list(self.action_list)

        new_game = self.create_blank()
        new_game.rewind_depth = self.rewind_depth + 1
        new_game.copy_depth = self.copy_depth

        for action in history[:action_index]:
            new_game.handle_action(action, catchup=True)
        if override is not None:
            new_game.handle_action(override, catchup=True)
        for action in history[action_index:]:
            new_game.handle_action(action, catchup=True)

        self.state = new_game.state
        self.players = new_game.players
        self.common = new_game.common
        self.action_list = new_game.action_list
        self.next_ignore = new_game.next_ignore
        logger.info("finished rewinding to action %d", action_index)
        return True

    def simulate_clue(self, action: ClueAction) -> "Game":
        """Copy of the game with the clue interpreted (no turn passes)."""
        hypo_game = self.minimal_copy()
        hypo_game.handle_action(action, catchup=True)
        return hypo_game

    # Convention hooks
    def interpret_clue(self, action: ClueAction) -> None:
        raise NotImplementedError

    def interpret_play(self, action: PlayAction) -> None:
        raise NotImplementedError

    def interpret_discard(self, action: DiscardAction) -> None:
        raise NotImplementedError

    def update_turn(self, action: TurnAction) -> None:
        raise NotImplementedError

    def take_action(self) -> PerformAction:
        raise NotImplementedError
