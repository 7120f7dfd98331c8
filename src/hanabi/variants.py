"""Variant rules: which clues touch which cards, and how many copies exist."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .identity_set import IdentitySet
from .models import MAX_RANK, BaseClue, Clue, ClueType, Identity


WHITISH = re.compile(r"White|Gray|Light|Null")
RAINBOWISH = re.compile(r"Rainbow|Omni")
BROWNISH = re.compile(r"Brown|Muddy|Cocoa|Null")
PINKISH = re.compile(r"Pink|Omni")
DARK = re.compile(r"Black|Dark|Gray|Cocoa")

# Default copies per rank
CARD_COUNTS: list[int] = [3, 2, 2, 2, 1]

MAX_SUITS = 6

# Abbreviations that don't follow the first-letter rule
SPECIAL_SHORT_FORMS = {"Black": "k", "Pink": "i", "Brown": "n"}


class Variant(BaseModel):
    """Rules of a variant, validated on construction."""

    model_config = ConfigDict(frozen=True)

    id: int = 0
    name: str
    suits: list[str]
    special_rank: int | None = None
    special_rank_all_clue_colors: bool = False
    special_rank_all_clue_ranks: bool = False
    special_rank_no_clue_colors: bool = False
    special_rank_no_clue_ranks: bool = False
    special_rank_deceptive: bool = False
    chimneys: bool = False
    funnels: bool = False
    critical_rank: int | None = None
    clue_ranks: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])

    @model_validator(mode="after")
    def _check_rules(self) -> "Variant":
        if not self.suits:
            raise ValueError(f"Variant {self.name!r} has no suits")
        if len(self.suits) > MAX_SUITS:
            raise ValueError(f"Variant {self.name!r} has {len(self.suits)} suits (max {MAX_SUITS})")
        for rank in self.clue_ranks:
            if not 1 <= rank <= MAX_RANK:
                raise ValueError(f"Variant {self.name!r} has unsupported clue rank {rank}")
        for rank in (self.special_rank, self.critical_rank):
            if rank is not None and not 1 <= rank <= MAX_RANK:
                raise ValueError(f"Variant {self.name!r} has unsupported special rank {rank}")
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "Variant":
        return self

    @property
    def num_suits(self) -> int:
        return len(self.suits)

    @property
    def short_forms(self) -> list[str]:
        """One-letter abbreviations for each suit, unique within the variant."""
        abbreviations: list[str] = []
        for suit in self.suits:
            abbreviation = SPECIAL_SHORT_FORMS.get(suit, suit[0].lower())
            if abbreviation in abbreviations:
                abbreviation = next(c for c in suit.lower() if c.isalpha() and c not in abbreviations)
            abbreviations.append(abbreviation)
        return abbreviations

    def all_identities(self) -> list[Identity]:
        return [
            Identity(suit_index=suit_index, rank=rank)
            for suit_index in range(self.num_suits)
            for rank in range(1, MAX_RANK + 1)
        ]

    def all_ids(self) -> IdentitySet:
        return IdentitySet(self.num_suits)

    def card_touched(self, identity: Identity, clue: BaseClue) -> bool:
        """Returns whether a card with this identity would be touched by the clue."""
        suit = self.suits[identity.suit_index]
        rank = identity.rank

        if suit in ("Null", "Dark Null"):
            return False
        if suit in ("Omni", "Dark Omni"):
            return True

        if clue.type == ClueType.COLOUR:
            if WHITISH.search(suit):
                return False
            if RAINBOWISH.search(suit):
                return True
            if suit in ("Prism", "Dark Prism"):
                colourless = sum(
                    1 for s in self.suits
                    if RAINBOWISH.search(s) or WHITISH.search(s) or "Prism" in s
                )
                return (rank - 1) % (self.num_suits - colourless) == clue.value

            if rank == self.special_rank:
                if self.special_rank_all_clue_colors:
                    return True
                if self.special_rank_no_clue_colors:
                    return False

            return identity.suit_index == clue.value

        if BROWNISH.search(suit):
            return False
        if PINKISH.search(suit):
            return True

        if rank == self.special_rank:
            if self.special_rank_all_clue_ranks:
                return True
            if self.special_rank_no_clue_ranks:
                return False
            if self.special_rank_deceptive:
                return (identity.suit_index % 4) + (2 if self.special_rank == 1 else 1) == clue.value

        if self.chimneys:
            return rank >= clue.value
        if self.funnels:
            return rank <= clue.value

        return rank == clue.value

    def touched_ids(self, clue: BaseClue) -> IdentitySet:
        """All identities the clue would touch."""
        return IdentitySet.create(self.num_suits, [i for i in self.all_identities() if self.card_touched(i, clue)])

    def is_cluable(self, clue: BaseClue) -> bool:
        """Returns whether the clue can be given at all (e.g. white cannot be clued)."""
        if clue.type == ClueType.COLOUR:
            if not 0 <= clue.value < self.num_suits:
                return False
            suit = self.suits[clue.value]
            return not (WHITISH.search(suit) or RAINBOWISH.search(suit))
        return clue.value in self.clue_ranks

    def card_count(self, identity: Identity) -> int:
        """Total number of copies of an identity in the deck."""
        if DARK.search(self.suits[identity.suit_index]):
            return 1
        if self.critical_rank == identity.rank:
            return 1
        return CARD_COUNTS[identity.rank - 1]

    def total_cards(self) -> int:
        return sum(self.card_count(i) for i in self.all_identities())

    def is_dark(self, suit_index: int) -> bool:
        return bool(DARK.search(self.suits[suit_index]))

    def rainbowish_suits(self) -> list[int]:
        """Suits touched by every colour clue."""
        return [i for i, suit in enumerate(self.suits) if RAINBOWISH.search(suit)]

    def omni_suits(self) -> list[int]:
        """Suits touched by every clue."""
        return [i for i, suit in enumerate(self.suits) if suit in ("Omni", "Dark Omni")]


def direct_clues(
    variant: Variant,
    target: int,
    identity: Identity,
    exclude_colour: bool = False,
    exclude_rank: bool = False,
) -> list[Clue]:
    """List every legal clue that would touch a card of this identity.

    Colour clues come before rank clues, each in ascending value.
    """
    clues: list[Clue] = []

    if not exclude_colour:
        for suit_index in range(variant.num_suits):
            clue = Clue(type=ClueType.COLOUR, value=suit_index, target=target)
            if variant.is_cluable(clue) and variant.card_touched(identity, clue):
                clues.append(clue)

    if not exclude_rank:
        for rank in range(1, MAX_RANK + 1):
            clue = Clue(type=ClueType.RANK, value=rank, target=target)
            if variant.is_cluable(clue) and variant.card_touched(identity, clue):
                clues.append(clue)

    return clues


VARIANTS: dict[str, Variant] = {
    v.name: v
    for v in [
        Variant(id=0, name="No Variant", suits=["Red", "Yellow", "Green", "Blue", "Purple"]),
        Variant(id=1, name="6 Suits", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Teal"]),
        Variant(id=2, name="Black (6 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Black"]),
        Variant(id=3, name="Black (5 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Black"]),
        Variant(id=4, name="Rainbow (6 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Rainbow"]),
        Variant(id=5, name="Rainbow (5 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Rainbow"]),
        Variant(id=6, name="Pink (6 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Pink"]),
        Variant(id=7, name="White (6 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Purple", "White"]),
        Variant(id=8, name="Brown (6 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Purple", "Brown"]),
        Variant(id=9, name="Omni (5 Suits)", suits=["Red", "Yellow", "Green", "Blue", "Omni"]),
    ]
}


def get_variant(name: str) -> Variant:
    """Look up a built-in variant by name."""
    if name not in VARIANTS:
        raise ValueError(f"Unsupported variant: {name!r}")
    return VARIANTS[name]


def variant_from_dict(data: dict[str, Any]) -> Variant:
    """Build a variant from a hanab.live-style variants.json entry."""
    return Variant(
        id=data.get("id", 0),
        name=data["name"],
        suits=data["suits"],
        special_rank=data.get("specialRank"),
        special_rank_all_clue_colors=data.get("specialRankAllClueColors", False),
        special_rank_all_clue_ranks=data.get("specialRankAllClueRanks", False),
        special_rank_no_clue_colors=data.get("specialRankNoClueColors", False),
        special_rank_no_clue_ranks=data.get("specialRankNoClueRanks", False),
        special_rank_deceptive=data.get("specialRankDeceptive", False),
        chimneys=data.get("chimneys", False),
        funnels=data.get("funnels", False),
        critical_rank=data.get("criticalRank"),
        clue_ranks=data.get("clueRanks", [1, 2, 3, 4, 5]),
    )
