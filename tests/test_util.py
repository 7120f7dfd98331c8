"""Tests for board predicates and card values."""

import pytest

from helpers import expand, order_of, setup_game
from src.hanabi.identity_set import IdentitySet
from src.hanabi.util import (
    base_count,
    card_value,
    get_pace,
    is_basic_trash,
    is_critical,
    is_saved,
    is_trash,
    playable_away,
    unique2,
    unknown_card_value,
    visible_find,
)


HANDS = [
    ["xx", "xx", "xx", "xx", "xx"],
    ["g4", "y3", "r2", "b2", "p4"],
    ["g2", "b3", "y4", "p1", "r5"],
]


class TestCriticality:
    """Tests for critical and trash predicates."""

    def test_one_of_three_left_is_critical(self):
        """Two of three rank-1 copies discarded leaves the last one critical."""
        game = setup_game(HANDS, discarded=["r1", "r1"])
        assert is_critical(game.state, expand("r1"))

    def test_one_discarded_is_not_critical(self):
        game = setup_game(HANDS, discarded=["r1"])
        assert not is_critical(game.state, expand("r1"))

    def test_fives_are_always_critical(self):
        game = setup_game(HANDS)
        assert is_critical(game.state, expand("b5"))

    def test_played_card_is_basic_trash(self):
        """A rank already on the stack is trash and -1 plays away."""
        game = setup_game(HANDS, play_stacks=[3, 0, 0, 0, 0])
        assert is_basic_trash(game.state, expand("r2"))
        assert playable_away(game.state, expand("r2")) == -1

    def test_playable_away(self):
        game = setup_game(HANDS, play_stacks=[3, 0, 0, 0, 0])
        assert playable_away(game.state, expand("r4")) == 0
        assert playable_away(game.state, expand("r5")) == 1
        assert playable_away(game.state, expand("y3")) == 2

    def test_above_max_rank_is_basic_trash(self):
        """Once every copy of a rank is discarded, higher ranks are unreachable."""
        game = setup_game(HANDS, discarded=["y3", "y3"])
        game.state.max_ranks[1] = 2
        assert is_basic_trash(game.state, expand("y4"))

    def test_base_count(self):
        game = setup_game(HANDS, play_stacks=[1, 0, 0, 0, 0], discarded=["r1"])
        assert base_count(game.state, expand("r1")) == 2
        assert base_count(game.state, expand("r2")) == 0


class TestPace:
    """Tests for pace."""

    def test_pace(self):
        """score + cards left + players - max score."""
        game = setup_game(HANDS, play_stacks=[2, 2, 2, 2, 2])
        game.state.cards_left = 20
        assert get_pace(game.state) == 10 + 20 + 3 - 25


class TestVisibility:
    """Tests for finding and valuing visible cards."""

    def test_visible_find_sees_other_hands(self):
        game = setup_game(HANDS)
        assert visible_find(game.state, game.me, expand("r2")) == [order_of(game, 1, 3)]

    def test_symmetric_hands_match_by_possibilities(self):
        """Cards in a symmetric hand only match once their possibilities pin them down."""
        game = setup_game(HANDS)
        assert visible_find(game.state, game.common, expand("r2"), symmetric=[1]) == []

    def test_saved_duplicate_is_trash(self):
        game = setup_game(HANDS)
        order = order_of(game, 1, 3)
        game.me.thoughts[order].clued = True
        assert is_saved(game.state, game.me, expand("r2"))
        assert is_trash(game.state, game.me, expand("r2"))
        # The clued card itself isn't a duplicate of itself
        assert not is_saved(game.state, game.me, expand("r2"), order)

    def test_unique2(self):
        """A 2 with only one visible copy is worth saving."""
        game = setup_game(HANDS)
        assert unique2(game.state, game.me, expand("r2"))

    def test_visible_pair_of_twos_is_not_unique(self):
        game = setup_game([HANDS[0], HANDS[1], ["g2", "b3", "y4", "b2", "r5"]])
        assert not unique2(game.state, game.me, expand("b2"))

    @pytest.mark.parametrize(
        "short,expected",
        [
            ("r5", 5),  # critical
            ("r2", 4),  # unique 2
            ("y3", 2),  # rank 3 on an empty stack
            ("g4", 0),  # two copies visible
        ],
    )
    def test_card_value(self, short, expected):
        game = setup_game([HANDS[0], HANDS[1], ["g4", "b3", "y4", "p1", "r5"]])
        assert card_value(game.state, game.me, expand(short)) == expected

    def test_unknown_card_value_averages_possibilities(self):
        """A card that is y5 or the already played r1 is worth half a 5."""
        game = setup_game(HANDS, play_stacks=[1, 0, 0, 0, 0])
        order = order_of(game, 0, 1)
        game.me.thoughts[order].possible = IdentitySet.create(5, [expand("r1"), expand("y5")])
        assert unknown_card_value(game.state, game.me, order) == pytest.approx(2.5)
