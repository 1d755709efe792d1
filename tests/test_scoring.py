from __future__ import annotations

import random

import pytest

from airlandsea.engine.errors import InvalidActionError, InvalidStateError, NotFoundError
from airlandsea.engine.match import (
    MatchState,
    destroy_card,
    end_turn,
    new_match,
    play_card,
    update_theater_scores,
    withdraw,
    withdrawal_victory_points,
)


def _new_state(seed: int = 1) -> MatchState:
    return new_match("m1", [("p1", "Alice"), ("p2", "Bob")], random.Random(seed))


def _to_scoring(state: MatchState) -> None:
    while state.phase == "playing":
        ps = state.player(state.current_player_id)
        if ps.hand:
            card = ps.hand[0]
            play_card(state, ps.id, card.id, card.theater, face_up=True)
            if state.phase != "playing":
                break
        end_turn(state, ps.id)


def _discard_down_to(state: MatchState, player_id: str, remaining: int) -> None:
    ps = state.player(player_id)
    while len(ps.hand) > remaining:
        destroy_card(state, player_id, ps.hand[0].id)


@pytest.mark.parametrize(
    "went_first,cards,vp",
    [
        (True, 6, 2),
        (True, 4, 2),
        (True, 3, 3),
        (True, 2, 3),
        (True, 1, 4),
        (True, 0, 6),
        (False, 6, 2),
        (False, 5, 2),
        (False, 4, 3),
        (False, 3, 3),
        (False, 2, 4),
        (False, 1, 6),
        (False, 0, 6),
    ],
)
def test_withdrawal_payout_table(went_first: bool, cards: int, vp: int) -> None:
    assert withdrawal_victory_points(went_first, cards) == vp


@pytest.mark.parametrize("remaining,vp", [(4, 2), (1, 4)])
def test_first_player_withdraws(remaining: int, vp: int) -> None:
    state = _new_state()
    first = state.first_player_id
    opponent = state.opponent(first)
    _discard_down_to(state, first, remaining)

    withdraw(state, first)

    assert state.phase == "scoring"
    assert state.withdrew_player_id == first
    assert opponent.score == vp
    assert state.player(first).score == 0


@pytest.mark.parametrize("remaining,vp", [(0, 6), (5, 2)])
def test_second_player_withdraws(remaining: int, vp: int) -> None:
    state = _new_state()
    first = state.first_player_id
    end_turn(state, first)
    second = state.current_player_id
    _discard_down_to(state, second, remaining)

    withdraw(state, second)

    assert state.player(first).score == vp
    assert state.phase == "scoring"


def test_withdraw_outside_playing_is_invalid_state() -> None:
    state = _new_state()
    withdraw(state, state.current_player_id)
    with pytest.raises(InvalidStateError):
        withdraw(state, state.current_player_id)

    state.phase = "game_over"
    with pytest.raises(InvalidStateError):
        withdraw(state, state.current_player_id)


def test_withdraw_by_stranger_is_not_found() -> None:
    state = _new_state()
    with pytest.raises(NotFoundError):
        withdraw(state, "p3")
    assert state.phase == "playing"


def test_withdrawal_reaching_threshold_ends_match() -> None:
    state = _new_state()
    first = state.first_player_id
    opponent = state.opponent(first)
    opponent.score = 10

    withdraw(state, first)  # six cards left: +2

    assert opponent.score == 12
    assert state.phase == "game_over"
    assert state.winner() is opponent


def test_scores_rejected_while_playing() -> None:
    state = _new_state()
    with pytest.raises(InvalidStateError):
        update_theater_scores(state, "p1", {"air": 3})


def test_scores_ignored_after_withdrawal() -> None:
    state = _new_state()
    withdraw(state, state.current_player_id)
    scores = [p.score for p in state.players]

    update_theater_scores(state, "p1", {"air": 9, "land": 9, "sea": 9})
    update_theater_scores(state, "p2", {"air": 0, "land": 0, "sea": 0})

    assert state.theater_scores is None
    assert [p.score for p in state.players] == scores


def test_majority_split_awards_nothing() -> None:
    state = _new_state()
    _to_scoring(state)

    update_theater_scores(state, "p1", {"air": 5, "land": 2, "sea": 6})
    assert not state.battle_resolved
    update_theater_scores(state, "p2", {"air": 3, "land": 4, "sea": 6})

    assert state.battle_resolved
    assert [p.score for p in state.players] == [0, 0]
    assert state.phase == "scoring"
    assert any(e["type"] == "BATTLE_DRAWN" for e in state.event_log)


def test_majority_winner_gets_six() -> None:
    state = _new_state()
    _to_scoring(state)

    update_theater_scores(state, "p2", {"air": 4, "land": 7, "sea": 1})
    update_theater_scores(state, "p1", {"air": 5, "land": 2, "sea": 0})

    assert state.players[0].score == 0
    assert state.players[1].score == 6
    assert state.phase == "scoring"


def test_one_sided_submission_does_not_settle_battle() -> None:
    state = _new_state()
    _to_scoring(state)
    update_theater_scores(state, "p1", {"air": 8, "land": 8, "sea": 8})
    assert not state.battle_resolved
    assert state.players[0].score == 0


def test_zero_zero_theater_counts_as_submitted() -> None:
    state = _new_state()
    _to_scoring(state)

    update_theater_scores(state, "p1", {"air": 0, "land": 3, "sea": 4})
    update_theater_scores(state, "p2", {"air": 0, "land": 1, "sea": 2})

    assert state.battle_resolved
    assert state.players[0].score == 6


def test_partial_submissions_accumulate_per_theater() -> None:
    state = _new_state()
    _to_scoring(state)

    update_theater_scores(state, "p1", {"air": 4})
    update_theater_scores(state, "p2", {"air": 1, "land": 2})
    assert state.theater_scores is not None
    assert "sea" not in state.theater_scores
    update_theater_scores(state, "p1", {"land": 6, "sea": 1})
    assert not state.battle_resolved
    update_theater_scores(state, "p2", {"sea": 3})

    assert state.battle_resolved
    assert state.players[0].score == 6


def test_resubmission_after_resolution_is_ignored() -> None:
    state = _new_state()
    _to_scoring(state)
    update_theater_scores(state, "p1", {"air": 5, "land": 5, "sea": 5})
    update_theater_scores(state, "p2", {"air": 1, "land": 1, "sea": 1})
    assert state.players[0].score == 6

    update_theater_scores(state, "p1", {"air": 5, "land": 5, "sea": 5})
    assert state.players[0].score == 6


def test_invalid_score_payload_rejected_without_change() -> None:
    state = _new_state()
    _to_scoring(state)
    with pytest.raises(InvalidActionError):
        update_theater_scores(state, "p1", {"air": 3, "space": 1})  # type: ignore[dict-item]
    with pytest.raises(InvalidActionError):
        update_theater_scores(state, "p1", {"air": -1})
    assert state.theater_scores == {}


def test_battle_win_reaching_threshold_ends_match() -> None:
    state = _new_state()
    _to_scoring(state)
    state.players[0].score = 6

    update_theater_scores(state, "p1", {"air": 5, "land": 5, "sea": 0})
    update_theater_scores(state, "p2", {"air": 1, "land": 1, "sea": 9})

    assert state.players[0].score == 12
    assert state.phase == "game_over"
    assert state.winner() is state.players[0]
    assert state.event_log[-1] == {"type": "MATCH_ENDED", "winner": "p1"}


@pytest.mark.parametrize("total", [True, False, 2.5, "4"])
def test_non_integer_totals_rejected(total: object) -> None:
    state = _new_state()
    _to_scoring(state)
    with pytest.raises(InvalidActionError):
        update_theater_scores(state, "p1", {"air": total})  # type: ignore[dict-item]
    assert state.theater_scores == {}
