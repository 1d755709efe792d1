from __future__ import annotations

import random

import pytest

from airlandsea.engine.actions import (
    ManipulateCardAction,
    NextBattleAction,
    PlayCardAction,
    SubmitScoresAction,
    WithdrawAction,
)
from airlandsea.engine.deck import all_cards
from airlandsea.engine.errors import InvalidActionError
from airlandsea.engine.match import new_match, play_card, withdraw
from airlandsea.engine.serialize import action_to_dict, snapshot
from airlandsea.paths import get_paths
from airlandsea.services.commands import CommandError, action_from_dict
from airlandsea.services.content import ContentError, ContentService


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_published_catalogue_matches_engine() -> None:
    assert sorted(_content().load_catalogue(), key=lambda c: c.id) == all_cards()


def test_snapshots_validate_for_every_view() -> None:
    content = _content()
    state = new_match("m1", [("p1", "Alice"), ("p2", "Bob")], random.Random(2))
    me = state.player(state.current_player_id)
    play_card(state, me.id, me.hand[0].id, "sea", face_up=False)
    withdraw(state, me.id)

    content.validate_snapshot(snapshot(state))
    content.validate_snapshot(snapshot(state, viewer_id="p1"))
    content.validate_snapshot(snapshot(state, viewer_id="p2"))


def test_snapshot_validation_catches_bad_phase() -> None:
    state = new_match("m1", [("p1", "Alice"), ("p2", "Bob")], random.Random(2))
    snap = snapshot(state)
    snap["phase"] = "halftime"
    with pytest.raises(ContentError):
        _content().validate_snapshot(snap)


def test_viewer_snapshot_hides_opponent_secrets() -> None:
    state = new_match("m1", [("p1", "Alice"), ("p2", "Bob")], random.Random(2))
    me = state.player(state.current_player_id)
    them = state.opponent(me.id)
    play_card(state, me.id, me.hand[0].id, "air", face_up=False)

    mine = snapshot(state, viewer_id=me.id)
    theirs = snapshot(state, viewer_id=them.id)

    assert mine["theaters"]["air"]["cards"][0]["card"] is not None  # type: ignore[index]
    assert theirs["theaters"]["air"]["cards"][0]["card"] is None  # type: ignore[index]
    players = {p["id"]: p for p in theirs["players"]}  # type: ignore[union-attr]
    assert players[me.id]["hand"] is None
    assert players[me.id]["hand_count"] == 5
    assert players[them.id]["hand"] is not None
    assert theirs["deck"] is None
    assert theirs["deck_count"] == 6


def test_action_payloads_decode() -> None:
    actions = [
        PlayCardAction(player_id="p1", card_id=4, theater="land", face_up=False),
        ManipulateCardAction(player_id="p2", theater="sea", action="return"),
        ManipulateCardAction(player_id="p2", theater="air", action="flip", card_id=3),
        SubmitScoresAction(player_id="p1", scores={"air": 0, "land": 7}),
        WithdrawAction(player_id="p2"),
        NextBattleAction(),
    ]
    for a in actions:
        assert action_from_dict(action_to_dict(a)) == a


def test_play_card_defaults_face_up() -> None:
    a = action_from_dict({"type": "play_card", "player_id": "p1", "card_id": 9, "theater": "land"})
    assert a == PlayCardAction(player_id="p1", card_id=9, theater="land", face_up=True)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"type": "teleport", "player_id": "p1"},
        {"type": "play_card", "player_id": "p1", "card_id": 19, "theater": "air"},
        {"type": "play_card", "player_id": "p1", "card_id": 2, "theater": "space"},
        {"type": "manipulate_card", "player_id": "p1", "theater": "air", "action": "burn"},
        {"type": "update_scores", "player_id": "p1", "scores": {"air": -2}},
        {"type": "end_turn"},
        {"type": "next_game", "player_id": "p1"},
    ],
)
def test_bad_action_payloads_rejected(payload: dict[str, object]) -> None:
    with pytest.raises(CommandError) as exc:
        action_from_dict(payload)
    assert isinstance(exc.value, InvalidActionError)
    assert exc.value.kind == "invalid_action"
