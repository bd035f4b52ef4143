"""
Host emulator collaborator.

The engine never runs a ROM itself. Everything it needs from the emulator
goes through `Host`; `SimulatedHost` is an in-process stand-in used by the
CLI and the tests.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .store import kvstore

logger = logging.getLogger(__name__)


class Host(Protocol):
    def current_tick(self) -> int: ...

    def advance_one_tick(self) -> None: ...

    def has_workload(self) -> bool: ...

    def activate_workload(self, path: Path) -> None: ...

    def save_resumable_state(self, path: Path) -> None: ...

    def load_resumable_state(self, path: Path) -> None: ...

    def current_workload_display_name(self) -> str: ...

    def current_platform_id(self) -> str: ...

    def sound_enabled(self) -> bool: ...

    def set_sound_enabled(self, enabled: bool) -> None: ...

    def sleep_ms(self, ms: int) -> None: ...

    def draw_countdown(self, text: str, color: str) -> None: ...


def list_pool(directory: Path, disallowed_extensions: Iterable[str] = (".bin",)) -> List[str]:
    """
    Filenames in DIRECTORY that the host can load, sorted.

    Rebuilt on every call so ROMs added or removed between swaps are seen.
    """
    directory = Path(directory)
    if not directory.exists():
        logger.warning("Missing path, creating it: %s", directory)
        directory.mkdir(parents=True, exist_ok=True)

    blocked = {ext.lower() for ext in disallowed_extensions}
    pool: List[str] = []
    for entry in sorted(directory.iterdir()):
        if not entry.is_file():
            continue
        if entry.suffix.lower() in blocked:
            logger.warning("Skipping ROM as it's a %s, consider renaming: %s", entry.suffix, entry.name)
            continue
        logger.debug("Found: %s", entry.name)
        pool.append(entry.name)

    logger.debug("Found %d ROMs.", len(pool))
    return pool


PLATFORMS = {
    ".nes": "NES",
    ".sfc": "SNES",
    ".smc": "SNES",
    ".gb": "GB",
    ".gbc": "GBC",
    ".gba": "GBA",
    ".md": "GEN",
    ".gen": "GEN",
    ".sms": "SMS",
    ".n64": "N64",
    ".z64": "N64",
}


class SimulatedHost:
    """
    Minimal emulator stand-in.

    - tick counter resets to 0 whenever a workload is activated
    - display name is the ROM filename without extension
    - resumable state is the tick count, stored as a `KEY: VALUE` file
    """

    def __init__(self, realtime: bool = False):
        self.realtime = realtime
        self.tick = 0
        self.path: Optional[Path] = None
        self.sound = True
        self.slept_ms: List[int] = []
        self.banner: Optional[str] = None
        self.restored: Optional[Dict[str, Any]] = None

    def current_tick(self) -> int:
        return self.tick

    def advance_one_tick(self) -> None:
        self.tick += 1
        self.banner = None  # overlays last one frame

    def has_workload(self) -> bool:
        return self.path is not None

    def activate_workload(self, path: Path) -> None:
        self.path = Path(path)
        self.tick = 0
        self.restored = None

    def save_resumable_state(self, path: Path) -> None:
        kvstore.save(path, {"tick": self.tick})

    def load_resumable_state(self, path: Path) -> None:
        # missing savestate is normal for a ROM's first play
        self.restored = kvstore.load(path)

    def current_workload_display_name(self) -> str:
        return self.path.stem if self.path else "Null"

    def current_platform_id(self) -> str:
        if self.path is None:
            return ""
        return PLATFORMS.get(self.path.suffix.lower(), "UNKNOWN")

    def sound_enabled(self) -> bool:
        return self.sound

    def set_sound_enabled(self, enabled: bool) -> None:
        self.sound = enabled

    def sleep_ms(self, ms: int) -> None:
        self.slept_ms.append(ms)
        if self.realtime:
            time.sleep(ms / 1000)

    def draw_countdown(self, text: str, color: str) -> None:
        self.banner = text
