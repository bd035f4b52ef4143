from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, List, Mapping, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

R = TypeVar("R", bound="Record")


class SeedMode(IntEnum):
    UNSEEDED = 0
    SEEDED = 1


FRESH_SESSION = 1


class Record(BaseModel):
    """
    Base for anything persisted as `KEY: VALUE` lines.

    Python attributes are snake_case, file keys are camelCase. Unknown keys
    are dropped so a record file can't grow the schema. ROM names made of
    digits ("1942") load back as numbers, hence the str coercion.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
        coerce_numbers_to_str=True,
    )

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def overlay(self: R, data: Mapping[str, Any]) -> Tuple[R, List[str]]:
        """
        Return a copy with every known key from DATA applied.

        Keys outside the schema are ignored. A value that doesn't validate
        for its field is skipped and its key reported back.
        """
        merged = self.to_record()
        rejected: List[str] = []
        for key, value in data.items():
            if key not in merged:
                continue
            try:
                type(self).model_validate({**merged, key: value})
            except ValidationError:
                rejected.append(key)
                continue
            merged[key] = value
        return type(self).model_validate(merged), rejected


# ---------- Operator settings ----------
class Settings(Record):
    min_swap_interval: float = 5
    max_swap_interval: float = 5
    show_countdown: bool = False
    seed: int = 0
    seed_mode: SeedMode = SeedMode.UNSEEDED
    ticks_per_second: int = 60
    pause_delay_ms: int = 500  # -1 disables the pause
    log_level: int = 0


# ---------- Session ----------
class SessionState(Record):
    session_kind: int = FRESH_SESSION

    current_workload_name: str = ""
    current_workload_file: str = ""
    current_platform_id: str = ""
    last_workload_name: str = ""
    last_workload_file: str = ""

    swap_deadline_ticks: int = 0
    seed_chain_value: int = 0

    total_swap_count: int = 0
    total_activation_count: int = 0
    total_tick_count: int = 0
    total_play_time_seconds: int = 0

    # mirrors of the current workload's stats, flushed at swap time
    tick_count: int = 0
    play_time_seconds: int = 0
    swap_count: int = 0
    activation_count: int = 0

    @property
    def is_fresh(self) -> bool:
        return self.session_kind <= FRESH_SESSION


# ---------- Per-workload stats ----------
class WorkloadStats(Record):
    swap_count: int = 0
    activation_count: int = 1
    tick_count: int = 0
    play_time_seconds: int = 0
    workload_name: str = ""
    platform_id: str = ""


class RunCounters(BaseModel):
    """What the outgoing run contributed, measured at swap time."""
    ticks: int = 0
    elapsed_seconds: int = 0
