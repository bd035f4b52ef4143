from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


class ShufflerConfig(BaseModel):
    """
    Process-level configuration (where things live on disk).

    Notes:
    - Operator-facing options (intervals, seed, ...) live in the settings
      file, not here. See `shuffler.settings`.
    - Everything is relative to `root_dir` unless given as absolute paths.
    """
    root_dir: str = Field(default_factory=lambda: os.getenv("SHUFFLER_ROOT", "."))

    workloads_dir: str = Field(default_factory=lambda: os.getenv("SHUFFLER_WORKLOADS_DIR", "CurrentROMs"))
    saves_dir: str = Field(default_factory=lambda: os.getenv("SHUFFLER_SAVES_DIR", "Savestates"))
    stats_dir: str = Field(default_factory=lambda: os.getenv("SHUFFLER_STATS_DIR", "Stats"))
    settings_file: str = Field(default_factory=lambda: os.getenv("SHUFFLER_SETTINGS_FILE", "settings.txt"))

    # BizHawk can't pick a core for .bin files, so they are skipped by default
    disallowed_extensions: List[str] = Field(
        default_factory=lambda: _env_list("SHUFFLER_DISALLOWED_EXTENSIONS", ".bin")
    )
    # None keeps the reject-and-retry selection unbounded
    select_max_attempts: Optional[int] = Field(
        default_factory=lambda: _env_optional_int("SHUFFLER_SELECT_MAX_ATTEMPTS")
    )

    def _resolve(self, part: str) -> Path:
        p = Path(part)
        return p if p.is_absolute() else Path(self.root_dir) / p

    @property
    def workloads_path(self) -> Path:
        return self._resolve(self.workloads_dir)

    @property
    def saves_path(self) -> Path:
        return self._resolve(self.saves_dir)

    @property
    def stats_path(self) -> Path:
        return self._resolve(self.stats_dir)

    @property
    def workload_stats_path(self) -> Path:
        return self.stats_path / "Rom"

    @property
    def session_path(self) -> Path:
        return self.stats_path / "SessionStats.txt"

    @property
    def settings_path(self) -> Path:
        return self._resolve(self.settings_file)

    @property
    def events_path(self) -> Path:
        return self.stats_path / "events.jsonl"


DEFAULT_CONFIG = ShufflerConfig()
