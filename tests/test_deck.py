from __future__ import annotations

import random

import pytest

from airlandsea.engine.deck import all_cards, card_by_id, deal, shuffle


def test_catalogue_is_three_theaters_of_six() -> None:
    cards = all_cards()
    assert [c.id for c in cards] == list(range(1, 19))
    for theater in ("air", "land", "sea"):
        strengths = sorted(c.strength for c in cards if c.theater == theater)
        assert strengths == [1, 2, 3, 4, 5, 6]
    assert card_by_id(18).name == "Blockade"


def test_all_cards_returns_fresh_list() -> None:
    cards = all_cards()
    cards.pop()
    assert len(all_cards()) == 18


def test_shuffle_is_a_permutation() -> None:
    cards = all_cards()
    shuffled = shuffle(random.Random(99), cards)
    assert len(shuffled) == 18
    assert sorted(shuffled, key=lambda c: c.id) == cards
    # input left untouched
    assert cards == all_cards()


def test_shuffle_is_deterministic_per_seed() -> None:
    a = shuffle(random.Random(5), all_cards())
    b = shuffle(random.Random(5), all_cards())
    assert a == b


def test_deal_splits_six_six_rest() -> None:
    deck = shuffle(random.Random(1), all_cards())
    h1, h2, rest = deal(deck)
    assert h1 == deck[:6]
    assert h2 == deck[6:12]
    assert rest == deck[12:]


def test_deal_requires_two_hands_worth() -> None:
    with pytest.raises(ValueError):
        deal(all_cards()[:11])
