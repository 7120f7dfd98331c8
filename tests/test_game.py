"""Tests for the game container: copying, rewinding, logging and configuration."""

import logging

import pytest
from pydantic import TypeAdapter

from helpers import discard, expand, order_of, play, setup_game
from src.conventions import get_convention
from src.conventions.hgroup import HGroup
from src.hanabi import BotConfig, CopyDepthError, RewindDepthError
from src.hanabi.identity_set import IdentitySet
from src.hanabi.log import collect_logs, flush_logs, log_hand
from src.hanabi.models import Action, ClueAction, DrawAction, IdentifyAction, TurnAction

ALICE, BOB, CATHY = 0, 1, 2

HANDS = [
    ["xx", "xx", "xx", "xx", "xx"],
    ["g4", "y3", "b2", "r1", "p4"],
    ["g2", "b3", "y4", "p1", "r4"],
]


def snapshot(game):
    return (
        list(game.state.play_stacks),
        [list(hand) for hand in game.state.hands],
        {order: card.inferred for order, card in game.common.thoughts.items()},
        len(game.action_list),
    )


class TestMinimalCopy:
    """Tests for hypothetical copies."""

    def test_copy_is_independent(self):
        game = setup_game(HANDS)
        hypo = game.minimal_copy()
        hypo.state.play_stacks[0] = 3
        hypo.common.thoughts[order_of(game, BOB, 1)].clued = True

        assert game.state.play_stacks[0] == 0
        assert not game.common.thoughts[order_of(game, BOB, 1)].clued
        assert hypo.copy_depth == game.copy_depth + 1

    def test_copy_depth_limit(self):
        game = setup_game(HANDS)
        game.copy_depth = 3
        with pytest.raises(CopyDepthError):
            game.minimal_copy()


class TestRewind:
    """Tests for replaying the log with corrections."""

    def test_rewind_without_override_is_deterministic(self):
        game = setup_game(HANDS)
        play(game, BOB, order_of(game, BOB, 4), "r1")
        game.handle_action(DrawAction(player_index=BOB, order=15, suit_index=3, rank=4), catchup=True)
        game.handle_action(TurnAction(num=1, current_player_index=CATHY), catchup=True)
        before = snapshot(game)

        assert game.rewind(3)

        assert snapshot(game) == before
        assert game.state.play_stacks[0] == 1

    def test_identify_own_card(self):
        game = setup_game(HANDS)
        order = order_of(game, ALICE, 5)
        identify = IdentifyAction(order=order, player_index=ALICE, suit_index=0, rank=1)

        assert game.rewind(game.state.deck[order].drawn_index + 1, identify)

        card = game.me.thoughts[order]
        assert card.possible == IdentitySet.create(5, [expand("r1")])
        assert card.rewinded
        assert game.common.thoughts[order].rewinded
        assert game.state.deck[order].identity() == expand("r1")

    def test_same_override_only_once(self):
        game = setup_game(HANDS)
        order = order_of(game, ALICE, 5)
        identify = IdentifyAction(order=order, player_index=ALICE, suit_index=0, rank=1)
        assert game.rewind(1, identify)
        assert not game.rewind(1, identify)

    def test_rewind_depth_limit(self):
        game = setup_game(HANDS)
        game.rewind_depth = 3
        with pytest.raises(RewindDepthError):
            game.rewind(1)

    def test_invalid_index(self):
        game = setup_game(HANDS)
        with pytest.raises(ValueError):
            game.rewind(len(game.action_list) + 1)

    def test_bomb_rewinds_with_identity(self):
        """Our misplayed card is identified from the moment it was drawn."""
        game = setup_game(HANDS)
        order = order_of(game, ALICE, 1)

        discard(game, ALICE, order, "b3", failed=True)

        assert game.state.strikes == 1
        assert game.state.discard_stacks[3][2] == 1
        identifies = [a for a in game.action_list if isinstance(a, IdentifyAction)]
        assert [(a.order, a.suit_index, a.rank) for a in identifies] == [(order, 3, 3)]
        assert game.action_list.index(identifies[0]) == game.state.deck[order].drawn_index + 1


class TestLogCollection:
    """Tests for buffering logs from hypothetical simulations."""

    def test_collected_logs_held_back(self, caplog):
        logger = logging.getLogger("src.hanabi.game")
        with collect_logs() as records:
            logger.warning("hypothetical")
        assert len(records) == 1
        assert "hypothetical" not in caplog.text

        flush_logs(records)
        assert "hypothetical" in caplog.text

    def test_log_hand(self):
        """Visible cards by name, unknown ones by what they could be."""
        game = setup_game(HANDS)
        assert log_hand(game.state.hands[BOB], game.me, game.state.variant) == "g4 y3 b2 r1 p4"
        ours = log_hand(game.state.hands[ALICE], game.common, game.state.variant)
        assert ours.startswith("xx(r1,r2,")


class TestConfiguration:
    """Tests for configuration and lookups."""

    def test_defaults(self):
        config = BotConfig()
        assert config.max_copy_depth == 3
        assert config.max_rewind_depth == 3

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HANABI_BOT_MAX_REWIND_DEPTH", "5")
        monkeypatch.setenv("HANABI_BOT_TABLE_ID", "42")
        config = BotConfig.from_env()
        assert config.max_rewind_depth == 5
        assert config.table_id == 42

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("HANABI_BOT_TABLE_ID", "42")
        assert BotConfig.from_env(table_id=7).table_id == 7

    def test_get_convention(self):
        assert get_convention("HGroup") is HGroup
        with pytest.raises(ValueError):
            get_convention("Referential Sieve")


class TestActionParsing:
    """Tests for reading actions in wire format."""

    def test_clue_from_wire(self):
        action = TypeAdapter(Action).validate_python(
            {"type": "clue", "giver": 0, "target": 1, "list": [3, 4], "clue": {"type": 0, "value": 1}}
        )
        assert isinstance(action, ClueAction)
        assert action.touched == [3, 4]

    def test_draw_from_wire(self):
        action = TypeAdapter(Action).validate_python(
            {"type": "draw", "player_index": 1, "order": 7, "suit_index": 2, "rank": 3}
        )
        assert isinstance(action, DrawAction)
        assert action.order == 7
