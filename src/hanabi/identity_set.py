"""Immutable sets of card identities, stored as a bitmask."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator

from .models import MAX_RANK, Identity


def _bit(identity: Identity) -> int:
    return 1 << (identity.suit_index * MAX_RANK + identity.rank - 1)


class IdentitySet:
    """A set of identities scoped to a variant with a fixed number of suits.

    Every operation returns a new set, so instances can be shared freely
    between cards, perspectives and cloned games.
    """

    __slots__ = ("num_suits", "value")

    def __init__(self, num_suits: int, value: int | None = None):
        self.num_suits = num_suits
        full = (1 << (num_suits * MAX_RANK)) - 1
        self.value = full if value is None else value & full

    @classmethod
    def create(cls, num_suits: int, identities: Iterable[Identity] | None = None) -> "IdentitySet":
        """Create the full set, or the set of the given identities."""
        if identities is None:
            return cls(num_suits)
        value = 0
        for identity in identities:
            value |= _bit(identity)
        return cls(num_suits, value)

    def _coerce(self, other: "IdentitySet | Identity | Iterable[Identity]") -> int:
        if isinstance(other, IdentitySet):
            return other.value
        if isinstance(other, Identity):
            return _bit(other)
        value = 0
        for identity in other:
            value |= _bit(identity)
        return value

    def intersect(self, other: "IdentitySet | Identity | Iterable[Identity]") -> "IdentitySet":
        return IdentitySet(self.num_suits, self.value & self._coerce(other))

    def subtract(self, other: "IdentitySet | Identity | Iterable[Identity]") -> "IdentitySet":
        return IdentitySet(self.num_suits, self.value & ~self._coerce(other))

    def union(self, other: "IdentitySet | Identity | Iterable[Identity]") -> "IdentitySet":
        return IdentitySet(self.num_suits, self.value | self._coerce(other))

    def complement(self) -> "IdentitySet":
        return IdentitySet(self.num_suits, ~self.value)

    def filter(self, predicate: Callable[[Identity], bool]) -> "IdentitySet":
        return IdentitySet.create(self.num_suits, [i for i in self if predicate(i)])

    def has(self, identity: Identity) -> bool:
        return bool(self.value & _bit(identity))

    def every(self, predicate: Callable[[Identity], bool]) -> bool:
        return all(predicate(i) for i in self)

    def some(self, predicate: Callable[[Identity], bool]) -> bool:
        return any(predicate(i) for i in self)

    @property
    def array(self) -> list[Identity]:
        return list(self)

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, Identity) and self.has(identity)

    def __iter__(self) -> Iterator[Identity]:
        value = self.value
        index = 0
        while value:
            if value & 1:
                yield Identity(suit_index=index // MAX_RANK, rank=index % MAX_RANK + 1)
            value >>= 1
            index += 1

    def __len__(self) -> int:
        return bin(self.value).count("1")

    def __bool__(self) -> bool:
        return self.value != 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentitySet):
            return NotImplemented
        return self.num_suits == other.num_suits and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.num_suits, self.value))

    def __copy__(self) -> "IdentitySet":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "IdentitySet":
        return self

    def __repr__(self) -> str:
        return f"IdentitySet({[str(i) for i in self]})"
