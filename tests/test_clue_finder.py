"""Tests for focus, clue evaluation and choosing an action."""

import pytest

from helpers import discard, give_clue, next_turn, order_of, play, setup_game
from src.conventions.hgroup import clue_safe, determine_clue, determine_focus, find_chop, find_clue_value
from src.hanabi.models import ActionType, BaseClue, CardRef, Clue, ClueAction, ClueResult, ClueType

ALICE, BOB, CATHY = 0, 1, 2


class TestChopAndFocus:
    """Tests for chop and focus rules."""

    HANDS = [
        ["xx", "xx", "xx", "xx", "xx"],
        ["g4", "y3", "b2", "r1", "p4"],
        ["g2", "b3", "y4", "p1", "r4"],
    ]

    def test_chop_is_rightmost_unclued(self):
        game = setup_game(self.HANDS)
        hand = game.state.hands[BOB]
        assert find_chop(hand, game.common) == 4
        game.common.thoughts[hand[4]].clued = True
        assert find_chop(hand, game.common) == 3

    def test_no_chop_when_all_saved(self):
        game = setup_game(self.HANDS)
        hand = game.state.hands[BOB]
        for order in hand:
            game.common.thoughts[order].clued = True
        assert find_chop(hand, game.common) == -1

    def test_chop_focus(self):
        game = setup_game(self.HANDS)
        hand = game.state.hands[BOB]
        assert determine_focus(hand, game.common, [hand[1], hand[4]], before_clue=True) == (hand[4], True)

    def test_leftmost_new_card_focus(self):
        """Without chop, the leftmost card not previously clued is focused."""
        game = setup_game(self.HANDS)
        hand = game.state.hands[BOB]
        game.common.thoughts[hand[0]].clued = True
        assert determine_focus(hand, game.common, [hand[0], hand[2]], before_clue=True) == (hand[2], False)

    def test_reclue_focuses_leftmost(self):
        game = setup_game(self.HANDS)
        hand = game.state.hands[BOB]
        for order in hand[:2]:
            game.common.thoughts[order].clued = True
        assert determine_focus(hand, game.common, hand[:2], before_clue=True) == (hand[0], False)

    def test_touching_nothing(self):
        game = setup_game(self.HANDS)
        with pytest.raises(ValueError):
            determine_focus(game.state.hands[BOB], game.common, [])


class TestClueValue:
    """Tests for scoring clue results."""

    def test_value_formula(self):
        result = ClueResult(
            new_touched=2, playables=[CardRef(player_index=BOB, order=6)], bad_touch=1, elim=3, remainder=1,
        )
        assert find_clue_value(result) == pytest.approx(-0.06)

    def test_nothing_new(self):
        assert find_clue_value(ClueResult()) == 0


class TestDetermineClue:
    """Tests for finding the best clue for a card."""

    def test_play_clue_prefers_colour_on_tie(self):
        """Red and 1 both get r1 played; colour comes first."""
        game = setup_game(TestChopAndFocus.HANDS)
        r1 = order_of(game, BOB, 4)

        choice = determine_clue(game, BOB, r1)

        assert (choice.type, choice.value, choice.target) == (ClueType.COLOUR, 0, BOB)
        assert choice.result.playables == [CardRef(player_index=BOB, order=r1)]
        assert choice.result.new_touched == 1

    def test_misread_clues_rejected(self):
        """Blue would make b2 look like b1, and a 2 clue focuses nothing playable."""
        game = setup_game(TestChopAndFocus.HANDS)
        choice = determine_clue(game, BOB, order_of(game, BOB, 3))
        assert choice is None or choice.type == ClueType.RANK


class TestClueSafe:
    """Tests for whether a clue leaves a critical card on chop."""

    HANDS = [
        ["xx", "xx", "xx", "xx", "xx"],
        ["g4", "y3", "b2", "g3", "r5"],
        ["g2", "b3", "y4", "p1", "r4"],
    ]

    def test_critical_chop_unsafe(self):
        game = setup_game(self.HANDS)
        assert not clue_safe(game, Clue(type=ClueType.RANK, value=4, target=BOB))

    def test_saving_the_chop_is_safe(self):
        game = setup_game(self.HANDS)
        assert clue_safe(game, Clue(type=ClueType.RANK, value=5, target=BOB))


class TestTakeAction:
    """Tests for choosing what to do on our turn."""

    def test_save_critical_chop(self):
        game = setup_game(TestClueSafe.HANDS)
        command = next_turn(game, 0, ALICE, decide=True)
        assert (command.type, command.target, command.value) == (ActionType.RANK, BOB, 5)
        assert game.last_command == command

    def test_play_clued_card(self):
        """After Bob clues our slot 1 as a 1, we play it."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b2", "g3", "p4"],
            ["g2", "b3", "y4", "p1", "r4"],
        ], starting=BOB)
        slot1 = order_of(game, ALICE, 1)
        give_clue(game, BOB, ALICE, ClueType.RANK, 1, touched=[slot1])

        command = next_turn(game, 1, ALICE, decide=True)

        assert (command.type, command.target) == (ActionType.PLAY, slot1)

    def test_discard_chop(self):
        """Nothing to play or clue, so we discard chop."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b2", "g3", "p4"],
            ["g2", "b3", "y4", "p3", "r4"],
        ], clue_tokens=5)
        command = next_turn(game, 0, ALICE, decide=True)
        assert (command.type, command.target) == (ActionType.DISCARD, order_of(game, ALICE, 5))

    def test_stall_at_max_clues(self):
        """At 8 clues we can't discard, so some clue is given."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b2", "g3", "p4"],
            ["g2", "b3", "y4", "p3", "r4"],
        ])
        command = next_turn(game, 0, ALICE, decide=True)
        assert command.type in (ActionType.COLOUR, ActionType.RANK)
        assert command.target in (BOB, CATHY)

    def test_play_clue_instead_of_save(self):
        """Getting Bob to play r1 keeps him off his r5 chop for now."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "r1", "g3", "r5"],
            ["g2", "b3", "y4", "p3", "r4"],
        ])
        command = next_turn(game, 0, ALICE, decide=True)
        assert (command.type, command.target, command.value) == (ActionType.RANK, BOB, 1)

    def test_tempo_clue_in_two_player(self):
        """Bob's saved 2 became playable, so re-clueing it gets it played."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b4", "p3", "r2"],
        ], clue_tokens=5)
        r2 = order_of(game, BOB, 5)
        give_clue(game, ALICE, BOB, ClueType.RANK, 2)
        next_turn(game, 1, BOB)
        discard(game, BOB, order_of(game, BOB, 4), "p3")
        next_turn(game, 2, ALICE)
        play(game, ALICE, order_of(game, ALICE, 5), "r1")
        next_turn(game, 3, BOB)
        discard(game, BOB, order_of(game, BOB, 3), "b4")
        assert r2 not in game.common.thinks_playables(game.state, BOB)

        command = next_turn(game, 4, ALICE, decide=True)

        assert command.type in (ActionType.COLOUR, ActionType.RANK)
        assert command.target == BOB
        clue_type = ClueType.COLOUR if command.type == ActionType.COLOUR else ClueType.RANK
        assert r2 in game.state.clue_touched(BOB, Clue(type=clue_type, value=command.value, target=BOB))

    def test_locked_hand_discards_with_no_clues(self):
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b2", "g3", "p4"],
            ["g2", "b3", "y4", "p3", "r4"],
        ], clue_tokens=0)
        for order in game.state.hands[ALICE]:
            for player in game.all_players:
                player.thoughts[order].clued = True
        assert game.me.thinks_locked(game.state, ALICE)

        command = next_turn(game, 0, ALICE, decide=True)

        assert command.type == ActionType.DISCARD
        assert command.target in game.state.hands[ALICE]

    def test_locked_hand_stalls_with_clues(self):
        """Rather than discard a saved card, any clue is given."""
        game = setup_game([
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "b2", "g3", "p4"],
            ["g2", "b3", "y4", "p3", "r4"],
        ], clue_tokens=3)
        for order in game.state.hands[ALICE]:
            for player in game.all_players:
                player.thoughts[order].clued = True

        command = next_turn(game, 0, ALICE, decide=True)

        assert command.type in (ActionType.COLOUR, ActionType.RANK)


class TestCluedFocusNeverReset:
    """Chosen clues are understood, so the focused card always keeps an inference."""

    @pytest.mark.parametrize("hands", [
        TestChopAndFocus.HANDS,
        TestClueSafe.HANDS,
        [
            ["xx", "xx", "xx", "xx", "xx"],
            ["g4", "y3", "r2", "b2", "p4"],
            ["r1", "b3", "y4", "p1", "g4"],
        ],
    ])
    def test_determined_clues(self, hands):
        game = setup_game(hands)
        checked = 0
        for target in (BOB, CATHY):
            for order in game.state.hands[target]:
                choice = determine_clue(game, target, order, save=True)
                if choice is None:
                    continue
                clue = choice.to_clue()
                action = ClueAction(
                    giver=ALICE, target=target, touched=game.state.clue_touched(target, clue),
                    clue=BaseClue(type=clue.type, value=clue.value),
                )
                hypo = game.simulate_clue(action)
                assert not hypo.common.thoughts[order].reset, (target, order, clue)
                checked += 1
        assert checked > 0
