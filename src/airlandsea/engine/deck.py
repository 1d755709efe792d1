from __future__ import annotations

import random
from typing import Sequence, TypeVar

from .types import Card

T = TypeVar("T")

_CATALOGUE: tuple[Card, ...] = (
    Card(id=1, theater="air", strength=1, name="Air Drop"),
    Card(id=2, theater="air", strength=2, name="Air Superiority"),
    Card(id=3, theater="air", strength=3, name="Aerodrome"),
    Card(id=4, theater="air", strength=4, name="Maneuver"),
    Card(id=5, theater="air", strength=5, name="Transport"),
    Card(id=6, theater="air", strength=6, name="Heavy Bombers"),
    Card(id=7, theater="land", strength=1, name="Ambush"),
    Card(id=8, theater="land", strength=2, name="Reconnaissance"),
    Card(id=9, theater="land", strength=3, name="Support"),
    Card(id=10, theater="land", strength=4, name="Reinforce"),
    Card(id=11, theater="land", strength=5, name="Armor"),
    Card(id=12, theater="land", strength=6, name="Heavy Tanks"),
    Card(id=13, theater="sea", strength=1, name="Disrupt"),
    Card(id=14, theater="sea", strength=2, name="Naval Superiority"),
    Card(id=15, theater="sea", strength=3, name="Redeploy"),
    Card(id=16, theater="sea", strength=4, name="Escalation"),
    Card(id=17, theater="sea", strength=5, name="Containment"),
    Card(id=18, theater="sea", strength=6, name="Blockade"),
)


def all_cards() -> list[Card]:
    """The full 18-card catalogue, ordered by id."""
    return list(_CATALOGUE)


def card_by_id(card_id: int) -> Card:
    for card in _CATALOGUE:
        if card.id == card_id:
            return card
    raise KeyError(card_id)


def shuffle(rng: random.Random, cards: Sequence[T]) -> list[T]:
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


def deal(deck: Sequence[T], hand_size: int = 6) -> tuple[list[T], list[T], list[T]]:
    """Split a shuffled deck into two hands and the undealt remainder."""
    if len(deck) < hand_size * 2:
        raise ValueError(f"Need at least {hand_size * 2} cards to deal, got {len(deck)}.")
    return (
        list(deck[:hand_size]),
        list(deck[hand_size : hand_size * 2]),
        list(deck[hand_size * 2 :]),
    )
