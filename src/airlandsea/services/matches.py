from __future__ import annotations

import random
import uuid
from typing import Mapping, Sequence

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
from airlandsea.engine.errors import MatchError, NotFoundError
from airlandsea.engine.match import MatchConfig, MatchState, apply_action, new_match
from airlandsea.engine.serialize import action_to_dict
from airlandsea.engine.types import ManipulateKind, Theater
from airlandsea.logging_utils import get_logger

from .commands import CommandError, action_from_dict
from .store import KeyedStore
from .telemetry import TelemetryService

log = get_logger("services.matches")


class MatchService:
    """Runs each operation atomically against one stored match.

    The store's per-key lock is held from load to store, so two calls
    for the same match never interleave.
    """

    def __init__(
        self,
        store: KeyedStore[MatchState],
        rng: random.Random,
        config: MatchConfig | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self._store = store
        self._rng = rng
        self.config = config or MatchConfig()
        self._telemetry = telemetry
        self._rngs: dict[str, random.Random] = {}

    def _emit(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self._telemetry is not None:
            self._telemetry.log(event_type, payload)

    def create_match(self, players: Sequence[tuple[str, str]], room_id: str | None = None) -> MatchState:
        match_id = str(uuid.uuid4())
        # per-match RNG; `state.seed` rebuilds it for `replay`
        seed = self._rng.getrandbits(63)
        rng = random.Random(seed)
        with self._store.locked(match_id):
            state = new_match(match_id, players, rng, config=self.config, room_id=room_id, seed=seed)
            self._rngs[match_id] = rng
            self._store.store(match_id, state)
        log.info(f"Match {match_id} created, first player {state.first_player_id}")
        self._emit("match_created", {"match_id": match_id, "room_id": room_id, "first_player": state.first_player_id})
        return state

    def get_match(self, match_id: str) -> MatchState:
        state = self._store.load(match_id)
        if state is None:
            raise NotFoundError("Game not found.")
        return state

    def _reject(self, match_id: str, action: Mapping[str, object], error: MatchError) -> None:
        log.info(f"Match {match_id}: rejected {action.get('type')} ({error.kind}): {error}")
        self._emit("action_rejected", {"match_id": match_id, "action": dict(action), "error": error.kind})

    def apply(self, match_id: str, action: Action) -> MatchState:
        with self._store.locked(match_id):
            state = self._store.load(match_id)
            if state is None:
                raise NotFoundError("Game not found.")
            phase_before = state.phase
            try:
                apply_action(state, action, self._rngs.get(match_id, self._rng))
            except MatchError as e:
                self._reject(match_id, action_to_dict(action), e)
                raise
            self._store.store(match_id, state)
            phase_after = state.phase
            battle_number = state.battle_number

        log.debug(f"Match {match_id}: applied {type(action).__name__}")
        self._emit("action_applied", {"match_id": match_id, "action": action_to_dict(action), "phase": phase_after})
        if phase_after != phase_before:
            log.info(f"Match {match_id}: {phase_before} -> {phase_after} (battle {battle_number})")
        return state

    def dispatch(self, match_id: str, payload: Mapping[str, object]) -> MatchState:
        """Decode a raw action payload and apply it.

        Malformed payloads raise `CommandError`, an `InvalidActionError`.
        """
        try:
            action = action_from_dict(payload)
        except CommandError as e:
            self._reject(match_id, payload, e)
            raise
        return self.apply(match_id, action)

    # -------- Player actions --------
    def play_card(
        self, match_id: str, player_id: str, card_id: int, theater: Theater, face_up: bool = True
    ) -> MatchState:
        return self.apply(
            match_id, PlayCardAction(player_id=player_id, card_id=card_id, theater=theater, face_up=face_up)
        )

    def end_turn(self, match_id: str, player_id: str) -> MatchState:
        return self.apply(match_id, EndTurnAction(player_id=player_id))

    def draw_card(self, match_id: str, player_id: str) -> MatchState:
        return self.apply(match_id, DrawCardAction(player_id=player_id))

    def manipulate_card(
        self,
        match_id: str,
        player_id: str,
        theater: Theater,
        action: ManipulateKind,
        card_id: int | None = None,
    ) -> MatchState:
        return self.apply(
            match_id, ManipulateCardAction(player_id=player_id, theater=theater, action=action, card_id=card_id)
        )

    def destroy_card(self, match_id: str, player_id: str, card_id: int) -> MatchState:
        return self.apply(match_id, DestroyCardAction(player_id=player_id, card_id=card_id))

    def withdraw(self, match_id: str, player_id: str) -> MatchState:
        return self.apply(match_id, WithdrawAction(player_id=player_id))

    def update_theater_scores(self, match_id: str, player_id: str, scores: Mapping[Theater, int]) -> MatchState:
        return self.apply(match_id, SubmitScoresAction(player_id=player_id, scores=dict(scores)))

    # -------- Lifecycle --------
    def start_next_battle(self, match_id: str) -> MatchState:
        return self.apply(match_id, NextBattleAction())

    def start_next_game(self, match_id: str) -> MatchState:
        return self.apply(match_id, NextGameAction())
