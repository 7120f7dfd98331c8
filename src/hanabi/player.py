"""A single perspective's beliefs about every card in the game."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from .card import Card
from .identity_set import IdentitySet
from .log import log_card, log_cards
from .models import Identity, Link, WaitingConnection
from .state import State
from .util import is_basic_trash, is_critical, unknown_identities

logger = logging.getLogger(__name__)


class Player(BaseModel):
    """Beliefs held by one player, or by common knowledge when `player_index` is -1.

    Every perspective has the same shape; the common perspective differs only
    in reasoning symmetrically (it never uses identities that only we can see).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    player_index: int
    all_possible: IdentitySet
    all_inferred: IdentitySet
    hypo_stacks: list[int]
    thoughts: dict[int, Card] = Field(default_factory=dict)
    links: list[Link] = Field(default_factory=list)
    unknown_plays: set[int] = Field(default_factory=set)
    waiting_connections: list[WaitingConnection] = Field(default_factory=list)
    # Orders that had an identity removed by good touch, keyed by (suit_index, rank)
    elims: dict[tuple[int, int], list[int]] = Field(default_factory=dict)

    @classmethod
    def create(cls, player_index: int, num_suits: int) -> "Player":
        return cls(
            player_index=player_index,
            all_possible=IdentitySet(num_suits),
            all_inferred=IdentitySet(num_suits),
            hypo_stacks=[0] * num_suits,
        )

    @property
    def is_common(self) -> bool:
        return self.player_index == -1

    @property
    def hypo_score(self) -> int:
        return sum(self.hypo_stacks) + len(self.unknown_plays)

    def clone(self) -> "Player":
        return self.model_copy(deep=True)

    def sees(self, state: State, order: int) -> bool:
        """Whether this perspective may use the card's visible identity."""
        return not self.is_common and order not in state.hands[self.player_index]

    def known_identity(self, state: State, order: int, infer: bool = False) -> Identity | None:
        return self.thoughts[order].identity(infer=infer, symmetric=not self.sees(state, order))

    def linked_orders(self, state: State) -> set[int]:
        """Orders of cards this player is unsure about (at least one is bad touched)."""
        orders: set[int] = set()
        for link in self.links:
            unknown = sum(unknown_identities(state, self, identity) for identity in link.identities)
            if len(link.orders) > unknown:
                orders.update(link.orders)
        return orders

    def thinks_playables(self, state: State, player_index: int) -> list[int]:
        """Orders in the given hand that this player believes are playable."""
        linked = self.linked_orders(state)
        playables = []
        for order in state.hands[player_index]:
            card = self.thoughts[order]
            if order in linked:
                continue
            possibilities = card.possibilities
            # Chop moved cards can ignore trash identities
            all_playable = possibilities.every(
                lambda p: (card.chop_moved and is_basic_trash(state, p)) or state.is_playable(p)
            )
            if all_playable and possibilities.some(state.is_playable) and card.matches_inferences():
                playables.append(order)
        return playables

    def thinks_trash(self, state: State, player_index: int) -> list[int]:
        """Orders in the given hand that this player believes are trash."""
        linked = {order for link in self.links for order in link.orders}

        def visible_elsewhere(identity: Identity, order: int) -> bool:
            if order in linked:
                return False
            for other in state.all_orders():
                card = self.thoughts[other]
                if other != order and card.matches(identity, infer=True) and (card.clued or card.finessed):
                    return True
            return False

        trash = []
        for order in state.hands[player_index]:
            possibilities = self.thoughts[order].possibilities
            if possibilities.every(lambda p: is_basic_trash(state, p) or visible_elsewhere(p, order)):
                logger.debug(
                    "order %d is trash, poss %s", order, log_cards(possibilities, state.variant)
                )
                trash.append(order)
        return trash

    def thinks_loaded(self, state: State, player_index: int) -> bool:
        """Whether this player thinks the given player has a known playable or trash."""
        return bool(self.thinks_playables(state, player_index) or self.thinks_trash(state, player_index))

    def thinks_locked(self, state: State, player_index: int) -> bool:
        """Whether every card in the hand is saved and none is playable or trash."""
        hand = state.hands[player_index]
        return all(self.thoughts[order].saved for order in hand) and not self.thinks_loaded(state, player_index)

    def locked_discard(self, state: State, player_index: int) -> int:
        """Best card to discard from a locked hand. Ties go to the leftmost card."""
        hand = state.hands[player_index]

        def crit_percent(order: int) -> float:
            poss = self.thoughts[order].possibilities
            return sum(1 for p in poss if is_critical(state, p)) / max(len(poss), 1)

        least = min(crit_percent(order) for order in hand)
        candidates = [order for order in hand if crit_percent(order) == least]

        def distance(identity: Identity) -> int:
            crit_distance = (identity.rank * 5 if least == 1 else 0) + identity.rank - self.hypo_stacks[identity.suit_index]
            return 5 if crit_distance < 0 else crit_distance

        best_order, best_distance = candidates[0], -1
        for order in candidates:
            total = sum(distance(p) for p in self.thoughts[order].possibilities)
            if total > best_distance:
                best_order, best_distance = order, total
        return best_order

    def _fake_connection(self, state: State, order: int) -> bool:
        """Whether the card only takes part in waiting connections that will be proven false."""
        def part_of(wc: WaitingConnection) -> bool:
            return any(conn.order == order for conn in wc.connections[wc.conn_index:])

        def true_wc(wc: WaitingConnection) -> bool:
            return state.deck[wc.focused_order].matches(wc.inference, assume=True)

        in_fake = any(part_of(wc) and not true_wc(wc) for wc in self.waiting_connections)
        in_real = any(part_of(wc) and true_wc(wc) for wc in self.waiting_connections)
        return in_fake and not in_real

    def update_hypo_stacks(self, state: State) -> None:
        """Compute how far the stacks could go if every committed card were played.

        Playable cards whose identity this player doesn't know go into
        `unknown_plays` instead of advancing a stack.
        """
        hypo_stacks = list(state.play_stacks)
        unknown_plays: set[int] = set()
        claimed: list[Identity] = []
        linked = self.linked_orders(state)

        def delayed_playable(identities) -> bool:
            remaining = [i for i in identities if i not in claimed]
            return bool(remaining) and all(hypo_stacks[i.suit_index] + 1 == i.rank for i in remaining)

        found_new_playable = True
        while found_new_playable:
            found_new_playable = False

            for order in state.all_orders():
                card = self.thoughts[order]
                identity = self.known_identity(state, order, infer=True)

                if not card.saved or order in linked or (identity is not None and identity in claimed):
                    continue

                # Ignore inferences from waiting connections that will be proven wrong
                fake_wcs = [
                    wc for wc in self.waiting_connections
                    if wc.focused_order == order
                    and (wc.fake or not state.deck[order].matches(wc.inference, assume=True))
                ]
                diff = card.clone()
                diff.subtract("inferred", [wc.inference for wc in fake_wcs])

                raw = card.raw()
                finesse_playable = diff.finessed and raw is not None and delayed_playable([raw])
                if not diff.matches_inferences() or not (
                    delayed_playable(diff.possible) or delayed_playable(diff.inferred) or finesse_playable
                ):
                    continue

                if self.is_common:
                    actual = state.deck[order].identity()
                    if identity is not None and actual is not None and identity != actual:
                        logger.warning(
                            "not advancing hypo stacks with order %d: inferred %s but is %s",
                            order, log_card(identity, state.variant), log_card(actual, state.variant),
                        )
                        continue
                    if actual is not None and any(
                        state.deck[other].matches(actual) for other in unknown_plays
                    ):
                        logger.warning(
                            "order %d would duplicate an unknown play of %s",
                            order, log_card(actual, state.variant),
                        )
                        continue
                    if self._fake_connection(state, order):
                        continue

                if identity is None:
                    # Playable, but the player doesn't know what it is so stacks aren't updated
                    if order in unknown_plays:
                        continue
                    unknown_plays.add(order)

                    promised_link = next(
                        (link for link in self.links if link.promised and order in link.orders), None
                    )
                    if promised_link is not None and all(o in unknown_plays for o in promised_link.orders):
                        promised = promised_link.identities[0]
                        if promised.rank != hypo_stacks[promised.suit_index] + 1:
                            logger.warning(
                                "tried to add %s onto hypo stacks, but they were at %d",
                                log_card(promised, state.variant), hypo_stacks[promised.suit_index],
                            )
                        else:
                            hypo_stacks[promised.suit_index] = promised.rank
                            claimed.append(promised)
                            found_new_playable = True
                    continue

                if identity.rank != hypo_stacks[identity.suit_index] + 1:
                    # e.g. a duplicated 1 whose other possibilities were all eliminated by good touch
                    logger.warning(
                        "tried to add new playable card %s (order %d), hypo stacks at %d",
                        log_card(identity, state.variant), order, hypo_stacks[identity.suit_index],
                    )
                    continue

                hypo_stacks[identity.suit_index] = identity.rank
                claimed.append(identity)
                found_new_playable = True

        self.hypo_stacks = hypo_stacks
        self.unknown_plays = unknown_plays
