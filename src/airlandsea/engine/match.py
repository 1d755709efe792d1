from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

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
from .deck import all_cards, deal, shuffle
from .errors import (
    CardNotInHandError,
    DeckEmptyError,
    EmptyTheaterError,
    InvalidActionError,
    InvalidStateError,
    MatchError,
    MatchOverError,
    NotFoundError,
    NotTopOfStackError,
    NotYourTurnError,
)
from .types import (
    MANIPULATE_KINDS,
    THEATERS,
    Card,
    ManipulateKind,
    Phase,
    PlayedCard,
    Theater,
    TheaterScore,
    TheaterZone,
)

Event = dict[str, object]


@dataclass(frozen=True)
class MatchConfig:
    hand_size: int = 6
    victory_threshold: int = 12
    battle_victory_points: int = 6


@dataclass
class PlayerState:
    id: str
    name: str
    hand: list[Card] = field(default_factory=list)
    score: int = 0

    def hand_index(self, card_id: int) -> int | None:
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i
        return None


def _empty_theaters() -> dict[Theater, TheaterZone]:
    return {t: TheaterZone(type=t, cards=[]) for t in THEATERS}


@dataclass
class MatchState:
    id: str
    players: tuple[PlayerState, PlayerState]
    current_player_id: str
    first_player_id: str
    room_id: str | None = None
    seed: int | None = None
    config: MatchConfig = field(default_factory=MatchConfig)
    deck: list[Card] = field(default_factory=list)
    trash: list[Card] = field(default_factory=list)
    theater_order: list[Theater] = field(default_factory=lambda: list(THEATERS))
    theaters: dict[Theater, TheaterZone] = field(default_factory=_empty_theaters)
    phase: Phase = "playing"
    battle_number: int = 1
    withdrew_player_id: str | None = None
    theater_scores: dict[Theater, TheaterScore] | None = None
    battle_resolved: bool = False
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def seat(self, player_id: str) -> int:
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        raise NotFoundError(f"Player {player_id!r} is not in match {self.id}.")

    def player(self, player_id: str) -> PlayerState:
        return self.players[self.seat(player_id)]

    def opponent(self, player_id: str) -> PlayerState:
        return self.players[1 - self.seat(player_id)]

    def winner(self) -> PlayerState | None:
        if self.phase != "game_over":
            return None
        p1, p2 = self.players
        if p1.score == p2.score:
            return None
        return p1 if p1.score > p2.score else p2


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    error_kind: str | None = None


def card_locations(state: MatchState) -> dict[int, str]:
    """Map every card id to the container currently holding it.

    Raises AssertionError when a card is held twice or missing, which
    would mean a rule moved a card incorrectly.
    """
    seen: dict[int, str] = {}

    def put(cards: Iterable[Card], where: str) -> None:
        for c in cards:
            if c.id in seen:
                raise AssertionError(f"card {c.id} in both {seen[c.id]} and {where}")
            seen[c.id] = where

    for p in state.players:
        put(p.hand, f"hand:{p.id}")
    for t, zone in state.theaters.items():
        put((pc.card for pc in zone.cards), f"theater:{t}")
    put(state.deck, "deck")
    put(state.trash, "trash")
    missing = {c.id for c in all_cards()} - set(seen)
    if missing:
        raise AssertionError(f"cards missing: {sorted(missing)}")
    return seen


def withdrawal_victory_points(went_first: bool, cards_remaining: int) -> int:
    """VP the opponent receives when a player withdraws.

    The second player's table is shifted by one card since they have
    always played one card fewer at the same point of a battle.
    """
    if went_first:
        if cards_remaining >= 4:
            return 2
        if cards_remaining >= 2:
            return 3
        if cards_remaining == 1:
            return 4
        return 6
    if cards_remaining >= 5:
        return 2
    if cards_remaining >= 3:
        return 3
    if cards_remaining == 2:
        return 4
    return 6


def _require_phase(state: MatchState, phase: Phase, message: str) -> None:
    if state.phase != phase:
        raise InvalidStateError(message)


def _require_turn(state: MatchState, player_id: str) -> None:
    if state.current_player_id != player_id:
        raise NotYourTurnError("Not your turn.")


def _require_playing_turn(state: MatchState, player_id: str) -> None:
    _require_phase(state, "playing", "Match is not in the playing phase.")
    _require_turn(state, player_id)


def _zone(state: MatchState, theater: str) -> TheaterZone:
    zone = state.theaters.get(theater)  # type: ignore[call-overload]
    if zone is None:
        raise InvalidActionError(f"Unknown theater: {theater!r}")
    return zone


def _take_from_hand(player: PlayerState, card_id: int) -> int:
    idx = player.hand_index(card_id)
    if idx is None:
        raise CardNotInHandError(f"Card {card_id} is not in your hand.")
    return idx


def _end_battle_if_hands_empty(state: MatchState) -> None:
    if all(not p.hand for p in state.players):
        state.phase = "scoring"
        state.theater_scores = {}
        state.event_log.append({"type": "BATTLE_ENDED", "reason": "hands_empty"})


def _check_match_over(state: MatchState) -> None:
    threshold = state.config.victory_threshold
    if any(p.score >= threshold for p in state.players):
        state.phase = "game_over"
        winner = state.winner()
        state.event_log.append(
            {"type": "MATCH_ENDED", "winner": winner.id if winner is not None else None}
        )


def _award(state: MatchState, player: PlayerState, vp: int, reason: str) -> None:
    player.score += vp
    state.event_log.append({"type": "VP_AWARDED", "player": player.id, "amount": vp, "reason": reason})


def play_card(
    state: MatchState, player_id: str, card_id: int, theater: Theater, face_up: bool
) -> None:
    _require_playing_turn(state, player_id)
    zone = _zone(state, theater)
    ps = state.player(player_id)
    idx = _take_from_hand(ps, card_id)

    card = ps.hand.pop(idx)
    zone.cards.append(PlayedCard(card=card, face_up=face_up, owner_id=player_id))
    state.event_log.append(
        {"type": "CARD_PLAYED", "player": player_id, "card_id": card_id, "theater": theater, "face_up": face_up}
    )
    _end_battle_if_hands_empty(state)


def end_turn(state: MatchState, player_id: str) -> None:
    _require_playing_turn(state, player_id)
    state.current_player_id = state.opponent(player_id).id
    state.event_log.append({"type": "TURN_ENDED", "player": player_id})


def draw_card(state: MatchState, player_id: str) -> None:
    _require_playing_turn(state, player_id)
    if not state.deck:
        raise DeckEmptyError("No cards left in the deck.")
    card = state.deck.pop(0)
    state.player(player_id).hand.append(card)
    state.event_log.append({"type": "CARD_DRAWN", "player": player_id, "card_id": card.id})


def _resolve_target(zone: TheaterZone, card_id: int | None) -> int:
    if card_id is None:
        return len(zone.cards) - 1

    for i in range(len(zone.cards) - 1, -1, -1):
        if zone.cards[i].card.id == card_id:
            break
    else:
        raise NotTopOfStackError(f"Card {card_id} is not in the {zone.type} theater.")

    owner = zone.cards[i].owner_id
    if any(pc.owner_id == owner for pc in zone.cards[i + 1 :]):
        raise NotTopOfStackError("Card is not the top of that player's stack.")
    return i


def manipulate_card(
    state: MatchState,
    player_id: str,
    theater: Theater,
    action: ManipulateKind,
    card_id: int | None = None,
) -> None:
    _require_playing_turn(state, player_id)
    if action not in MANIPULATE_KINDS:
        raise InvalidActionError(f"Invalid action: {action!r}")
    zone = _zone(state, theater)
    if not zone.cards:
        raise EmptyTheaterError(f"No cards in the {theater} theater.")
    idx = _resolve_target(zone, card_id)

    target = zone.cards[idx]
    if action == "flip":
        target.face_up = not target.face_up
    elif action == "destroy":
        zone.cards.pop(idx)
        state.trash.append(target.card)
    else:
        zone.cards.pop(idx)
        state.player(target.owner_id).hand.append(target.card)

    state.event_log.append(
        {
            "type": "CARD_MANIPULATED",
            "player": player_id,
            "action": action,
            "theater": theater,
            "card_id": target.card.id,
            "owner": target.owner_id,
        }
    )


def destroy_card(state: MatchState, player_id: str, card_id: int) -> None:
    _require_playing_turn(state, player_id)
    ps = state.player(player_id)
    idx = _take_from_hand(ps, card_id)

    state.trash.append(ps.hand.pop(idx))
    state.event_log.append({"type": "CARD_DESTROYED", "player": player_id, "card_id": card_id})
    _end_battle_if_hands_empty(state)


def withdraw(state: MatchState, player_id: str) -> None:
    _require_phase(state, "playing", "Cannot withdraw in the current phase.")
    withdrawer = state.player(player_id)
    opponent = state.opponent(player_id)
    went_first = player_id == state.first_player_id
    vp = withdrawal_victory_points(went_first, len(withdrawer.hand))

    state.withdrew_player_id = player_id
    state.phase = "scoring"
    state.event_log.append(
        {"type": "BATTLE_ENDED", "reason": "withdrawal", "player": player_id, "cards_remaining": len(withdrawer.hand)}
    )
    _award(state, opponent, vp, "withdrawal")
    _check_match_over(state)


def update_theater_scores(state: MatchState, player_id: str, scores: Mapping[Theater, int]) -> None:
    _require_phase(state, "scoring", "Match is not in the scoring phase.")
    seat = state.seat(player_id)
    if state.withdrew_player_id is not None or state.battle_resolved:
        return
    for theater, total in scores.items():
        _zone(state, theater)
        if not isinstance(total, int) or isinstance(total, bool) or total < 0:
            raise InvalidActionError(f"Invalid total for {theater}: {total!r}")

    if state.theater_scores is None:
        state.theater_scores = {}
    for theater, total in scores.items():
        state.theater_scores.setdefault(theater, TheaterScore()).record(seat, total)
    state.event_log.append({"type": "SCORES_SUBMITTED", "player": player_id, "scores": dict(scores)})

    if all(t in state.theater_scores and state.theater_scores[t].is_complete() for t in THEATERS):
        _resolve_battle(state)


def _resolve_battle(state: MatchState) -> None:
    assert state.theater_scores is not None
    wins = [0, 0]
    for t in THEATERS:
        seat = state.theater_scores[t].winner_seat()
        if seat is not None:
            wins[seat] += 1

    state.battle_resolved = True
    if wins[0] >= 2:
        _award(state, state.players[0], state.config.battle_victory_points, "battle")
    elif wins[1] >= 2:
        _award(state, state.players[1], state.config.battle_victory_points, "battle")
    else:
        state.event_log.append({"type": "BATTLE_DRAWN", "wins": list(wins)})
    _check_match_over(state)


def rotate_theater_order(order: Sequence[Theater]) -> list[Theater]:
    if not order:
        return list(THEATERS)
    return [order[-1], *order[:-1]]


def _deal_battle(state: MatchState, rng: random.Random) -> None:
    hand1, hand2, rest = deal(shuffle(rng, all_cards()), state.config.hand_size)
    state.players[0].hand = hand1
    state.players[1].hand = hand2
    state.deck = rest
    state.trash = []
    state.theaters = _empty_theaters()
    state.withdrew_player_id = None
    state.theater_scores = None
    state.battle_resolved = False
    state.current_player_id = state.first_player_id
    state.phase = "playing"


def _alternate_first_player(state: MatchState) -> None:
    state.first_player_id = state.opponent(state.first_player_id).id


def start_next_battle(state: MatchState, rng: random.Random) -> None:
    if state.phase == "game_over":
        raise MatchOverError("Match is over.")
    _require_phase(state, "scoring", "Battle is not finished.")

    state.theater_order = rotate_theater_order(state.theater_order)
    _alternate_first_player(state)
    _deal_battle(state, rng)
    state.battle_number += 1
    state.event_log.append(
        {"type": "BATTLE_STARTED", "battle": state.battle_number, "first_player": state.first_player_id}
    )


def start_next_game(state: MatchState, rng: random.Random) -> None:
    _require_phase(state, "game_over", "Match is not over.")

    for p in state.players:
        p.score = 0
    state.theater_order = list(THEATERS)
    _alternate_first_player(state)
    _deal_battle(state, rng)
    state.battle_number = 1
    state.event_log.append({"type": "MATCH_STARTED", "first_player": state.first_player_id})


def apply_action(state: MatchState, action: Action, rng: random.Random) -> None:
    """Apply one action, raising a MatchError subclass if it is illegal.

    Legality is checked in full before anything is mutated, so a rejected
    action leaves `state` exactly as it was.
    """
    if isinstance(action, PlayCardAction):
        play_card(state, action.player_id, action.card_id, action.theater, action.face_up)
    elif isinstance(action, EndTurnAction):
        end_turn(state, action.player_id)
    elif isinstance(action, DrawCardAction):
        draw_card(state, action.player_id)
    elif isinstance(action, ManipulateCardAction):
        manipulate_card(state, action.player_id, action.theater, action.action, action.card_id)
    elif isinstance(action, DestroyCardAction):
        destroy_card(state, action.player_id, action.card_id)
    elif isinstance(action, WithdrawAction):
        withdraw(state, action.player_id)
    elif isinstance(action, SubmitScoresAction):
        update_theater_scores(state, action.player_id, action.scores)
    elif isinstance(action, NextBattleAction):
        start_next_battle(state, rng)
    elif isinstance(action, NextGameAction):
        start_next_game(state, rng)
    else:
        raise InvalidActionError("Unknown action.")
    state.action_log.append(action)


def step(state: MatchState, action: Action, rng: random.Random) -> StepResult:
    """Apply a single action, reporting failure instead of raising."""
    before = len(state.event_log)
    try:
        apply_action(state, action, rng)
    except MatchError as e:
        return StepResult(ok=False, events=[], error=str(e), error_kind=e.kind)
    return StepResult(ok=True, events=state.event_log[before:])


def new_match(
    match_id: str,
    players: Sequence[tuple[str, str]],
    rng: random.Random,
    config: MatchConfig | None = None,
    room_id: str | None = None,
    seed: int | None = None,
) -> MatchState:
    """Start battle 1 for two paired participants given as (id, name).

    `seed` is only recorded; pass it when `rng` is `random.Random(seed)` so
    the match can later be rebuilt with `replay`.
    """
    cfg = config or MatchConfig()
    if len(players) != 2:
        raise ValueError("A match needs exactly two players.")
    (id1, name1), (id2, name2) = players
    if id1 == id2:
        raise ValueError("Players must have distinct ids.")

    first = id1 if rng.randrange(2) == 0 else id2
    state = MatchState(
        id=match_id,
        room_id=room_id,
        seed=seed,
        config=cfg,
        players=(PlayerState(id=id1, name=name1), PlayerState(id=id2, name=name2)),
        current_player_id=first,
        first_player_id=first,
    )
    _deal_battle(state, rng)
    state.event_log.append({"type": "MATCH_STARTED", "first_player": first})
    return state


def replay(
    match_id: str,
    players: Sequence[tuple[str, str]],
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
    room_id: str | None = None,
) -> MatchState:
    rng = random.Random(seed)
    state = new_match(match_id, players, rng, config=config, room_id=room_id, seed=seed)
    for a in actions:
        step(state, a, rng)
    return state
