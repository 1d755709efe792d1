from __future__ import annotations

import random
from dataclasses import dataclass

from .actions import (
    Action,
    DestroyCardAction,
    DrawCardAction,
    EndTurnAction,
    ManipulateCardAction,
    NextBattleAction,
    PlayCardAction,
    SubmitScoresAction,
    WithdrawAction,
)
from .match import MatchState
from .types import MANIPULATE_KINDS, THEATERS, Theater

FACE_DOWN_STRENGTH = 2


@dataclass(frozen=True)
class AISpec:
    """Weights for the random self-play bot.

    Higher `play_weight` means battles end sooner; non-zero
    `withdraw_weight` exercises the withdrawal payout path.
    """

    play_weight: float = 6.0
    end_turn_weight: float = 3.0
    draw_weight: float = 0.5
    destroy_weight: float = 0.5
    manipulate_weight: float = 0.5
    withdraw_weight: float = 0.1


def theater_total(state: MatchState, theater: Theater, player_id: str) -> int:
    total = 0
    for pc in state.theaters[theater].cards:
        if pc.owner_id != player_id:
            continue
        total += pc.card.strength if pc.face_up else FACE_DOWN_STRENGTH
    return total


def _pending_scorer(state: MatchState) -> str | None:
    scores = state.theater_scores or {}
    for seat, p in enumerate(state.players):
        for t in THEATERS:
            entry = scores.get(t)
            submitted = entry is not None and (entry.player1_submitted if seat == 0 else entry.player2_submitted)
            if not submitted:
                return p.id
    return None


def _playing_action(state: MatchState, rng: random.Random, spec: AISpec) -> Action:
    pid = state.current_player_id
    ps = state.player(pid)
    options: list[tuple[float, Action]] = [(spec.end_turn_weight, EndTurnAction(player_id=pid))]

    if ps.hand:
        card = rng.choice(ps.hand)
        theater = card.theater if rng.random() < 0.7 else rng.choice(THEATERS)
        face_up = theater == card.theater and rng.random() < 0.8
        options.append(
            (spec.play_weight, PlayCardAction(player_id=pid, card_id=card.id, theater=theater, face_up=face_up))
        )
        options.append((spec.destroy_weight, DestroyCardAction(player_id=pid, card_id=rng.choice(ps.hand).id)))
    if state.deck:
        options.append((spec.draw_weight, DrawCardAction(player_id=pid)))
    occupied = [t for t in THEATERS if state.theaters[t].cards]
    if occupied:
        options.append(
            (
                spec.manipulate_weight,
                ManipulateCardAction(player_id=pid, theater=rng.choice(occupied), action=rng.choice(MANIPULATE_KINDS)),
            )
        )
    options.append((spec.withdraw_weight, WithdrawAction(player_id=pid)))

    weights = [w for w, _ in options]
    return rng.choices([a for _, a in options], weights=weights, k=1)[0]


def choose_action(state: MatchState, rng: random.Random, spec: AISpec | None = None) -> Action | None:
    """Pick a legal action for whoever needs to act next.

    Returns None once the match is over.
    """
    spec = spec or AISpec()
    if state.phase == "playing":
        return _playing_action(state, rng, spec)
    if state.phase == "scoring":
        if state.withdrew_player_id is not None or state.battle_resolved:
            return NextBattleAction()
        scorer = _pending_scorer(state)
        if scorer is None:
            return NextBattleAction()
        totals = {t: theater_total(state, t, scorer) for t in THEATERS}
        return SubmitScoresAction(player_id=scorer, scores=totals)
    return None
