from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path

    @property
    def telemetry_file(self) -> Path:
        return self.userdata_dir / "telemetry.jsonl"


def get_paths() -> Paths:
    """Locate packaged data and the writable userdata dir.

    `AIRLANDSEA_USERDATA` overrides where telemetry and other output lands.
    """
    package_dir = Path(__file__).resolve().parent
    repo_root = package_dir.parent.parent
    data_dir = package_dir / "data"
    userdata = os.environ.get("AIRLANDSEA_USERDATA")
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        userdata_dir=Path(userdata) if userdata else repo_root / "userdata",
    )
