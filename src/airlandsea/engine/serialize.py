from __future__ import annotations


from .actions import (
    Action,
    DestroyCardAction,
    DrawCardAction,
    EndTurnAction,
    ManipulateCardAction,
    NextBattleAction,
    NextGameAction,
    PlayCardAction,
    SubmitScoresAction,
    WithdrawAction,
)
from .match import MatchState, PlayerState
from .types import THEATERS, Card, PlayedCard, TheaterScore


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {
            "type": "play_card",
            "player_id": a.player_id,
            "card_id": a.card_id,
            "theater": a.theater,
            "face_up": a.face_up,
        }
    if isinstance(a, EndTurnAction):
        return {"type": "end_turn", "player_id": a.player_id}
    if isinstance(a, DrawCardAction):
        return {"type": "draw_card", "player_id": a.player_id}
    if isinstance(a, ManipulateCardAction):
        d: dict[str, object] = {
            "type": "manipulate_card",
            "player_id": a.player_id,
            "theater": a.theater,
            "action": a.action,
        }
        if a.card_id is not None:
            d["card_id"] = a.card_id
        return d
    if isinstance(a, DestroyCardAction):
        return {"type": "destroy_card", "player_id": a.player_id, "card_id": a.card_id}
    if isinstance(a, WithdrawAction):
        return {"type": "withdraw", "player_id": a.player_id}
    if isinstance(a, SubmitScoresAction):
        return {"type": "update_scores", "player_id": a.player_id, "scores": dict(a.scores)}
    if isinstance(a, NextBattleAction):
        return {"type": "next_battle"}
    if isinstance(a, NextGameAction):
        return {"type": "next_game"}
    # should be unreachable
    return {"type": "unknown"}


def _card_to_dict(c: Card) -> dict[str, object]:
    return {"id": c.id, "theater": c.theater, "strength": c.strength, "name": c.name}


def _played_to_dict(pc: PlayedCard, hidden: bool) -> dict[str, object]:
    return {
        "card": None if hidden else _card_to_dict(pc.card),
        "face_up": pc.face_up,
        "owner_id": pc.owner_id,
    }


def _player_to_dict(p: PlayerState, hide_hand: bool) -> dict[str, object]:
    return {
        "id": p.id,
        "name": p.name,
        "hand": None if hide_hand else [_card_to_dict(c) for c in p.hand],
        "hand_count": len(p.hand),
        "score": p.score,
    }


def _score_to_dict(s: TheaterScore) -> dict[str, object]:
    return {
        "player1_total": s.player1_total,
        "player2_total": s.player2_total,
        "player1_submitted": s.player1_submitted,
        "player2_submitted": s.player2_submitted,
    }


def snapshot(state: MatchState, viewer_id: str | None = None) -> dict[str, object]:
    """Return a JSON-serializable snapshot of the match.

    With `viewer_id`, information that player could not see at the table
    is withheld: the opponent's hand, the deck order, and the identity of
    the opponent's face-down cards.
    """
    if viewer_id is not None:
        state.seat(viewer_id)
    redact = viewer_id is not None

    theaters: dict[str, object] = {}
    for t in THEATERS:
        zone = state.theaters[t]
        theaters[t] = {
            "type": t,
            "cards": [
                _played_to_dict(pc, hidden=redact and not pc.face_up and pc.owner_id != viewer_id)
                for pc in zone.cards
            ],
        }

    scores: dict[str, object] | None = None
    if state.theater_scores is not None:
        scores = {t: _score_to_dict(s) for t, s in state.theater_scores.items()}

    return {
        "id": state.id,
        "room_id": state.room_id,
        "players": [_player_to_dict(p, hide_hand=redact and p.id != viewer_id) for p in state.players],
        "deck": None if redact else [_card_to_dict(c) for c in state.deck],
        "deck_count": len(state.deck),
        "trash": [_card_to_dict(c) for c in state.trash],
        "theater_order": list(state.theater_order),
        "theaters": theaters,
        "current_player_id": state.current_player_id,
        "phase": state.phase,
        "battle_number": state.battle_number,
        "first_player_id": state.first_player_id,
        "withdrew_player_id": state.withdrew_player_id,
        "theater_scores": scores,
        "battle_resolved": state.battle_resolved,
    }
