from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from airlandsea.engine.deck import all_cards
from airlandsea.engine.types import Card


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


@lru_cache(maxsize=None)
def _validator(schema_path: Path) -> Draft202012Validator:
    schema = _load_json(schema_path)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_json(instance: object, schema_path: Path, *, context: str, error: type[RuntimeError] = ContentError) -> None:
    validator = _validator(schema_path)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise error("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def schema_path(self, name: str) -> Path:
        return self._schema_dir / f"{name}.schema.json"

    def load_catalogue(self) -> list[Card]:
        """Load the published card list, schema-checked, in file order."""
        path = self._data_dir / "cards.json"
        raw = _load_json(path)
        validate_json(raw, self.schema_path("cards"), context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("cards.json must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: list[Card] = []
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            cards.append(
                Card(
                    id=_require_int(item, "id"),
                    theater=_require_str(item, "theater"),  # type: ignore[arg-type]
                    strength=_require_int(item, "strength"),
                    name=_require_str(item, "name"),
                )
            )
        return cards

    def check_catalogue(self) -> None:
        published = sorted(self.load_catalogue(), key=lambda c: c.id)
        if published != all_cards():
            raise ContentError("cards.json does not match the engine catalogue")

    def validate_snapshot(self, snap: Mapping[str, object]) -> None:
        validate_json(dict(snap), self.schema_path("snapshot"), context="match snapshot")

    def validate_all(self) -> None:
        # Schemas are checked when their validators are built.
        for name in ("action", "cards", "snapshot"):
            _validator(self.schema_path(name))
        self.check_catalogue()
