from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from airlandsea.engine.match import MatchConfig, MatchState
from airlandsea.paths import Paths, get_paths
from airlandsea.services.content import ContentService
from airlandsea.services.matches import MatchService
from airlandsea.services.rooms import Room, RoomService
from airlandsea.services.store import InMemoryStore
from airlandsea.services.telemetry import TelemetryService


@dataclass
class GameContext:
    paths: Paths
    content: ContentService
    matches: MatchService
    rooms: RoomService
    rng: random.Random
    telemetry: Optional[TelemetryService] = None


def create_context(
    seed: int | None = None,
    telemetry_path: Path | None = None,
    config: MatchConfig | None = None,
) -> GameContext:
    """Wire stores and services for one process.

    A `seed` makes every shuffle, coin flip and room code reproducible.
    """
    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    content.validate_all()

    rng = random.Random(seed) if seed is not None else random.Random()
    telemetry = TelemetryService(telemetry_path) if telemetry_path is not None else None

    matches = MatchService(InMemoryStore[MatchState](), rng, config=config, telemetry=telemetry)
    rooms = RoomService(InMemoryStore[Room](), matches, rng, telemetry=telemetry)
    return GameContext(
        paths=paths,
        content=content,
        matches=matches,
        rooms=rooms,
        rng=rng,
        telemetry=telemetry,
    )
