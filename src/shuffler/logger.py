from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler


@dataclass
class EventLogger:
    """
    Structured event logger (JSON Lines).

    - fixed fields (ts, stage, event)
    - meta dict reserved for structured diagnostics
    - one event per line (append-only)
    """
    log_path: Path

    def log(self, stage: str, event: str, meta: Optional[Dict[str, Any]] = None) -> None:
        record = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime()),
            "stage": stage,
            "event": event,
            "meta": meta or {},
        }
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")


def level_for(log_level: int) -> int:
    """
    Map the operator's `logLevel` setting onto a logging level.

    The setting counts up from 0 (everything) to 4 (warnings only).
    """
    if log_level <= 1:
        return logging.DEBUG
    if log_level <= 3:
        return logging.INFO
    if log_level == 4:
        return logging.WARNING
    return logging.ERROR


def setup_logging(log_level: int = 0) -> None:
    logging.basicConfig(
        level=level_for(log_level),
        format="%(message)s",
        datefmt="%X",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )
