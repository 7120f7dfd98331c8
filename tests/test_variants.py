"""Tests for variant rules."""

import pytest

from src.hanabi.models import BaseClue, ClueType, Identity
from src.hanabi.variants import Variant, direct_clues, get_variant, variant_from_dict


def colour(value: int) -> BaseClue:
    return BaseClue(type=ClueType.COLOUR, value=value)


def rank(value: int) -> BaseClue:
    return BaseClue(type=ClueType.RANK, value=value)


class TestNoVariant:
    """Tests for the standard five-suit game."""

    def test_deck_size(self):
        assert get_variant("No Variant").total_cards() == 50

    def test_short_forms(self):
        assert get_variant("No Variant").short_forms == ["r", "y", "g", "b", "p"]

    def test_card_touched(self):
        variant = get_variant("No Variant")
        r3 = Identity(suit_index=0, rank=3)
        assert variant.card_touched(r3, colour(0))
        assert variant.card_touched(r3, rank(3))
        assert not variant.card_touched(r3, colour(1))
        assert not variant.card_touched(r3, rank(2))

    def test_touched_ids(self):
        variant = get_variant("No Variant")
        assert len(variant.touched_ids(rank(5))) == 5
        assert len(variant.touched_ids(colour(2))) == 5

    def test_direct_clues_colour_first(self):
        """Colour clues come before rank clues."""
        variant = get_variant("No Variant")
        clues = direct_clues(variant, 1, Identity(suit_index=3, rank=2))
        assert [(c.type, c.value) for c in clues] == [(ClueType.COLOUR, 3), (ClueType.RANK, 2)]
        assert all(c.target == 1 for c in clues)

    def test_direct_clues_exclusions(self):
        variant = get_variant("No Variant")
        clues = direct_clues(variant, 1, Identity(suit_index=3, rank=2), exclude_colour=True)
        assert [(c.type, c.value) for c in clues] == [(ClueType.RANK, 2)]


class TestSpecialSuits:
    """Tests for suits with unusual clue rules."""

    def test_rainbow_touched_by_every_colour(self):
        variant = get_variant("Rainbow (5 Suits)")
        m2 = Identity(suit_index=4, rank=2)
        assert all(variant.card_touched(m2, colour(i)) for i in range(4))
        assert not variant.is_cluable(colour(4))

    def test_white_touched_by_no_colour(self):
        variant = get_variant("White (6 Suits)")
        w1 = Identity(suit_index=5, rank=1)
        assert not any(variant.card_touched(w1, colour(i)) for i in range(5))
        assert variant.card_touched(w1, rank(1))

    def test_brown_touched_by_no_rank(self):
        variant = get_variant("Brown (6 Suits)")
        n4 = Identity(suit_index=5, rank=4)
        assert not variant.card_touched(n4, rank(4))
        assert variant.card_touched(n4, colour(5))
        assert variant.short_forms[5] == "n"

    def test_pink_touched_by_every_rank(self):
        variant = get_variant("Pink (6 Suits)")
        i3 = Identity(suit_index=5, rank=3)
        assert all(variant.card_touched(i3, rank(r)) for r in range(1, 6))

    def test_omni_touched_by_everything(self):
        variant = get_variant("Omni (5 Suits)")
        o1 = Identity(suit_index=4, rank=1)
        assert variant.card_touched(o1, colour(0))
        assert variant.card_touched(o1, rank(5))
        assert variant.omni_suits() == [4]

    def test_black_is_one_of_each(self):
        """Dark suits have a single copy of every rank."""
        variant = get_variant("Black (6 Suits)")
        assert variant.is_dark(5)
        assert variant.card_count(Identity(suit_index=5, rank=1)) == 1
        assert variant.short_forms[5] == "k"
        assert variant.total_cards() == 55


class TestVariantLookup:
    """Tests for building and finding variants."""

    def test_unknown_variant(self):
        with pytest.raises(ValueError):
            get_variant("Not A Variant")

    def test_too_many_suits(self):
        with pytest.raises(ValueError):
            Variant(id=99, name="Too Many", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Teal", "Black"])

    def test_from_dict(self):
        variant = variant_from_dict({"id": 7, "name": "Custom", "suits": ["Red", "Blue", "Rainbow"]})
        assert variant.num_suits == 3
        assert variant.rainbowish_suits() == [2]
