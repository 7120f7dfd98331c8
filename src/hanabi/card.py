"""Ground-truth cards and per-perspective card beliefs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .identity_set import IdentitySet
from .models import BaseClue, Identity


class ActualCard(BaseModel):
    """A card as it exists in the game. Suit and rank are -1 while hidden from us."""

    order: int
    suit_index: int = -1
    rank: int = -1
    owner: int
    drawn_index: int = -1
    clued: bool = False
    newly_clued: bool = False
    clues: list[BaseClue] = Field(default_factory=list)

    def identity(self) -> Identity | None:
        if self.suit_index == -1 or self.rank == -1:
            return None
        return Identity(suit_index=self.suit_index, rank=self.rank)

    def matches(self, identity: Identity, assume: bool = False) -> bool:
        """Whether this card is the identity. Unknown cards match only if `assume`."""
        own = self.identity()
        if own is None:
            return assume
        return own == identity


class Card(BaseModel):
    """One perspective's belief about a card.

    `suit_index`/`rank` hold the card's identity if this perspective can see it.
    `possible` holds every identity not yet ruled out, and `inferred` the
    narrower set implied by conventions.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    order: int
    suit_index: int = -1
    rank: int = -1
    possible: IdentitySet
    inferred: IdentitySet
    drawn_index: int = -1

    clued: bool = False
    newly_clued: bool = False
    finessed: bool = False
    chop_moved: bool = False
    reset: bool = False
    rewinded: bool = False
    clues: list[BaseClue] = Field(default_factory=list)

    @property
    def saved(self) -> bool:
        """Committed by convention to be kept (clued, finessed or chop moved)."""
        return self.clued or self.finessed or self.chop_moved

    @property
    def possibilities(self) -> IdentitySet:
        """The inferred identities that are still possible, or all possible ones if none are."""
        narrowed = self.possible.intersect(self.inferred)
        return narrowed if narrowed else self.possible

    def raw(self) -> Identity | None:
        if self.suit_index == -1 or self.rank == -1:
            return None
        return Identity(suit_index=self.suit_index, rank=self.rank)

    def identity(self, infer: bool = False, symmetric: bool = False) -> Identity | None:
        """The card's identity if known.

        With `symmetric`, visible identity is ignored and only what can be deduced
        from possibilities counts. With `infer`, a single inference counts too.
        """
        if not symmetric and self.raw() is not None:
            return self.raw()
        if len(self.possible) == 1:
            return next(iter(self.possible))
        if infer and len(self.inferred) == 1:
            return next(iter(self.inferred))
        return None

    def matches(self, identity: Identity, infer: bool = False, symmetric: bool = False, assume: bool = False) -> bool:
        own = self.identity(infer=infer, symmetric=symmetric)
        if own is None:
            return assume
        return own == identity

    def matches_inferences(self) -> bool:
        """Whether the card's identity (if known) is among its inferences."""
        own = self.identity()
        return own is None or len(self.possible) == 1 or self.inferred.has(own)

    def intersect(self, field: str, identities) -> None:
        setattr(self, field, getattr(self, field).intersect(identities))

    def subtract(self, field: str, identities) -> None:
        setattr(self, field, getattr(self, field).subtract(identities))

    def clone(self) -> "Card":
        return self.model_copy(deep=True)
