from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from shuffler.config import ShufflerConfig
from shuffler.store import kvstore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def cfg(tmp_path: Path) -> ShufflerConfig:
    return ShufflerConfig(
        root_dir=str(tmp_path),
        workloads_dir="CurrentROMs",
        saves_dir="Savestates",
        stats_dir="Stats",
        settings_file="settings.txt",
        disallowed_extensions=[".bin"],
        select_max_attempts=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_pool(cfg: ShufflerConfig, *names: str) -> None:
    cfg.workloads_path.mkdir(parents=True, exist_ok=True)
    for name in names:
        (cfg.workloads_path / name).write_bytes(b"\x00")


def write_settings(cfg: ShufflerConfig, **values: Any) -> Dict[str, Any]:
    kvstore.save(cfg.settings_path, values)
    return values
