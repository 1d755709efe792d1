from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .types import ManipulateKind, Theater


@dataclass(frozen=True)
class PlayCardAction:
    player_id: str
    card_id: int
    theater: Theater
    face_up: bool = True


@dataclass(frozen=True)
class EndTurnAction:
    player_id: str


@dataclass(frozen=True)
class DrawCardAction:
    player_id: str


@dataclass(frozen=True)
class ManipulateCardAction:
    player_id: str
    theater: Theater
    action: ManipulateKind
    card_id: int | None = None


@dataclass(frozen=True)
class DestroyCardAction:
    player_id: str
    card_id: int


@dataclass(frozen=True)
class WithdrawAction:
    player_id: str


@dataclass(frozen=True)
class SubmitScoresAction:
    player_id: str
    scores: Mapping[Theater, int] = field(default_factory=dict)


@dataclass(frozen=True)
class NextBattleAction:
    pass


@dataclass(frozen=True)
class NextGameAction:
    pass


Action = (
    PlayCardAction
    | EndTurnAction
    | DrawCardAction
    | ManipulateCardAction
    | DestroyCardAction
    | WithdrawAction
    | SubmitScoresAction
    | NextBattleAction
    | NextGameAction
)
