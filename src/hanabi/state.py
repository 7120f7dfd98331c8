"""Authoritative, convention-independent game state."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .card import ActualCard
from .models import MAX_CLUES, MAX_RANK, BaseClue, Identity
from .variants import Variant


class State(BaseModel):
    """Facts every player agrees on: stacks, tokens, hands and the deck seen so far.

    Hands hold card orders, newest (leftmost) first.
    """

    player_names: list[str]
    our_player_index: int
    variant: Variant

    play_stacks: list[int]
    discard_stacks: list[list[int]]
    max_ranks: list[int]
    hands: list[list[int]]
    deck: dict[int, ActualCard] = Field(default_factory=dict)

    clue_tokens: int = MAX_CLUES
    strikes: int = 0
    turn_count: int = 0
    current_player_index: int = 0
    cards_left: int = 0
    early_game: bool = True

    @classmethod
    def create(cls, player_names: list[str], our_player_index: int, variant: Variant) -> "State":
        num_suits = variant.num_suits
        return cls(
            player_names=list(player_names),
            our_player_index=our_player_index,
            variant=variant,
            play_stacks=[0] * num_suits,
            discard_stacks=[[0] * MAX_RANK for _ in range(num_suits)],
            max_ranks=[MAX_RANK] * num_suits,
            hands=[[] for _ in player_names],
            cards_left=variant.total_cards(),
        )

    @property
    def num_players(self) -> int:
        return len(self.player_names)

    @property
    def score(self) -> int:
        return sum(self.play_stacks)

    @property
    def max_score(self) -> int:
        return sum(self.max_ranks)

    def all_orders(self) -> list[int]:
        return [order for hand in self.hands for order in hand]

    def holder_of(self, order: int) -> int:
        """Index of the player holding the card, or -1 if it left play."""
        for player_index, hand in enumerate(self.hands):
            if order in hand:
                return player_index
        return -1

    def is_playable(self, identity: Identity) -> bool:
        return identity.rank == self.play_stacks[identity.suit_index] + 1

    def clue_touched(self, target: int, clue: BaseClue) -> list[int]:
        """Orders in the target's hand touched by the clue, using the cards we can see."""
        touched = []
        for order in self.hands[target]:
            identity = self.deck[order].identity()
            if identity is not None and self.variant.card_touched(identity, clue):
                touched.append(order)
        return touched
