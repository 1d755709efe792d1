from __future__ import annotations

from pathlib import Path
from typing import Mapping

from airlandsea.engine.actions import (
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
from airlandsea.engine.errors import InvalidActionError
from airlandsea.paths import get_paths

from .content import validate_json


class CommandError(InvalidActionError):
    """An inbound action payload that does not decode to a legal action shape."""


def _action_schema() -> Path:
    return get_paths().schema_dir / "action.schema.json"


def action_from_dict(raw: Mapping[str, object]) -> Action:
    """Decode an inbound action payload (as produced by `action_to_dict`)."""
    validate_json(dict(raw), _action_schema(), context="action", error=CommandError)

    t = raw["type"]
    pid = raw.get("player_id")
    if t == "play_card":
        return PlayCardAction(
            player_id=str(pid),
            card_id=int(raw["card_id"]),  # type: ignore[call-overload]
            theater=raw["theater"],  # type: ignore[arg-type]
            face_up=bool(raw.get("face_up", True)),
        )
    if t == "end_turn":
        return EndTurnAction(player_id=str(pid))
    if t == "draw_card":
        return DrawCardAction(player_id=str(pid))
    if t == "manipulate_card":
        card_id = raw.get("card_id")
        return ManipulateCardAction(
            player_id=str(pid),
            theater=raw["theater"],  # type: ignore[arg-type]
            action=raw["action"],  # type: ignore[arg-type]
            card_id=int(card_id) if card_id is not None else None,  # type: ignore[call-overload]
        )
    if t == "destroy_card":
        return DestroyCardAction(player_id=str(pid), card_id=int(raw["card_id"]))  # type: ignore[call-overload]
    if t == "withdraw":
        return WithdrawAction(player_id=str(pid))
    if t == "update_scores":
        scores = raw["scores"]
        assert isinstance(scores, Mapping)
        return SubmitScoresAction(player_id=str(pid), scores={k: int(v) for k, v in scores.items()})
    if t == "next_battle":
        return NextBattleAction()
    if t == "next_game":
        return NextGameAction()
    raise CommandError(f"Unknown action type: {t}")
