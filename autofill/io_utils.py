"""Run directories and JSON artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import secrets
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT_DIR / "data"


@dataclass(slots=True)
class RunPaths:
    """Directories belonging to a single CLI invocation."""

    run_id: str
    command: str
    base_dir: Path

    def build_path(self, filename: str) -> Path:
        path = self.base_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        return path


def generate_run_id() -> str:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    suffix = secrets.token_hex(2)
    return f"{timestamp}-{suffix}"


def prepare_run_directories(
    run_id: str, command: str, data_dir: Path = DATA_DIR
) -> RunPaths:
    base_dir = data_dir / run_id
    base_dir.mkdir(parents=True, exist_ok=True)
    return RunPaths(run_id=run_id, command=command, base_dir=base_dir)


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
    return path
