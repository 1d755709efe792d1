from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from typing import Literal

from airlandsea.engine.errors import InvalidStateError, NotFoundError
from airlandsea.engine.match import MatchState
from airlandsea.logging_utils import get_logger

from .matches import MatchService
from .store import KeyedStore
from .telemetry import TelemetryService

log = get_logger("services.rooms")

RoomStatus = Literal["waiting", "full", "playing"]

ROOM_CODE_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
ROOM_CODE_LEN = 6


@dataclass
class Seat:
    id: str
    name: str


@dataclass
class Room:
    id: str
    player1: Seat | None = None
    player2: Seat | None = None
    match_id: str | None = None
    status: RoomStatus = "waiting"

    def to_dict(self) -> dict[str, object]:
        def seat(s: Seat | None) -> dict[str, object] | None:
            return None if s is None else {"id": s.id, "name": s.name}

        return {
            "id": self.id,
            "player1": seat(self.player1),
            "player2": seat(self.player2),
            "match_id": self.match_id,
            "status": self.status,
        }


class RoomService:
    """Pairs two players into a room and starts their match."""

    def __init__(
        self,
        store: KeyedStore[Room],
        matches: MatchService,
        rng: random.Random,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self._store = store
        self._matches = matches
        self._rng = rng
        self._telemetry = telemetry

    def _generate_code(self) -> str:
        return "".join(self._rng.choice(ROOM_CODE_CHARSET) for _ in range(ROOM_CODE_LEN))

    def create_room(self, player_name: str) -> Room:
        while True:
            code = self._generate_code()
            with self._store.locked(code):
                if self._store.contains(code):
                    continue
                room = Room(id=code, player1=Seat(id=str(uuid.uuid4()), name=player_name))
                self._store.store(code, room)
                break
        log.info(f"Room {code} created by {player_name!r}")
        if self._telemetry is not None:
            self._telemetry.log("room_created", {"room_id": code})
        return room

    def join_room(self, room_id: str, player_name: str) -> tuple[Room, MatchState]:
        with self._store.locked(room_id):
            room = self._store.load(room_id)
            if room is None:
                raise NotFoundError("Room not found.")
            if room.status != "waiting" or room.player1 is None:
                raise InvalidStateError("Room is not available.")

            room.player2 = Seat(id=str(uuid.uuid4()), name=player_name)
            room.status = "full"
            match = self._matches.create_match(
                [(room.player1.id, room.player1.name), (room.player2.id, room.player2.name)],
                room_id=room.id,
            )
            room.match_id = match.id
            room.status = "playing"
            self._store.store(room_id, room)

        log.info(f"Room {room_id} full, match {match.id} started")
        if self._telemetry is not None:
            self._telemetry.log("room_joined", {"room_id": room_id, "match_id": match.id})
        return room, match

    def get_room(self, room_id: str) -> Room:
        room = self._store.load(room_id)
        if room is None:
            raise NotFoundError("Room not found.")
        return room
