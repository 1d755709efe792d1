"""Headless rules engine for Air, Land & Sea matches.

IMPORTANT: This package must do no I/O and hold no locks.
"""

from .actions import (
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
from .deck import all_cards, deal, shuffle
from .errors import MatchError
from .match import MatchConfig, MatchState, apply_action, new_match, replay, step
from .types import Card, Phase, PlayedCard, Theater

__all__ = [
    "Card",
    "DestroyCardAction",
    "DrawCardAction",
    "EndTurnAction",
    "ManipulateCardAction",
    "MatchConfig",
    "MatchError",
    "MatchState",
    "NextBattleAction",
    "NextGameAction",
    "Phase",
    "PlayCardAction",
    "PlayedCard",
    "SubmitScoresAction",
    "Theater",
    "WithdrawAction",
    "all_cards",
    "apply_action",
    "deal",
    "new_match",
    "replay",
    "shuffle",
    "step",
]
