"""
End-to-end swap sequencing against the simulated host.
"""

import pytest

from conftest import make_pool, write_settings
from shuffler.engine import OrchestratorState
from shuffler.errors import NoWorkloadsError
from shuffler.host import SimulatedHost, list_pool
from shuffler.runner import open_session, read_stats
from shuffler.session_store import load_session, load_workload_stats, savestate_file


def start(cfg, clock, host=None):
    host = host or SimulatedHost()
    return open_session(cfg, host, clock=clock, configure_logging=False), host


def run_until_swaps(orch, host, swaps, limit=100_000):
    """Tick until the session has SWAPS swaps; returns the ROM picked at each."""
    picks = []
    for _ in range(limit):
        before = orch.session.total_swap_count
        orch.tick()
        if orch.session.total_swap_count != before:
            picks.append(orch.session.current_workload_file)
            if orch.session.total_swap_count >= swaps:
                return picks
        host.advance_one_tick()
    raise AssertionError("swap never happened")


def seeded_settings(cfg, **extra):
    values = dict(minSwapInterval=1, maxSwapInterval=3, ticksPerSecond=60, seedMode=1, seed=2024, pauseDelayMs=-1)
    values.update(extra)
    return write_settings(cfg, **values)


def test_first_swap_scenario(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes", "c.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)

    orch, host = start(cfg, clock)
    first = orch.session.current_workload_file
    assert first in {"a.nes", "b.nes", "c.nes"}
    assert orch.session.swap_deadline_ticks == 60

    orch.run(max_ticks=60)
    assert orch.session.total_swap_count == 0
    assert host.current_tick() == 60

    orch.tick()

    assert orch.state == OrchestratorState.IDLE
    assert orch.session.current_workload_file != first
    assert load_workload_stats(cfg, first).swap_count == 1
    assert load_workload_stats(cfg, first).tick_count == 60
    assert orch.session.total_swap_count == 1
    assert orch.session.swap_deadline_ticks == 60
    assert host.current_tick() == 0

    persisted = load_session(cfg)
    assert persisted.total_swap_count == 1
    assert persisted.last_workload_file == first
    assert persisted.current_workload_file == orch.session.current_workload_file
    assert savestate_file(cfg, first).exists()


def test_seeded_sessions_are_reproducible(cfg, clock, tmp_path):
    other = cfg.model_copy(update={"root_dir": str(tmp_path / "replay")})
    for c in (cfg, other):
        make_pool(c, "a.nes", "b.nes", "c.nes", "d.nes")
        seeded_settings(c)

    orch_a, host_a = start(cfg, clock)
    orch_b, host_b = start(other, clock)
    assert orch_a.session.current_workload_file == orch_b.session.current_workload_file

    chain_a, chain_b = [], []
    picks_a, picks_b = [], []
    for _ in range(8):
        picks_a += run_until_swaps(orch_a, host_a, orch_a.session.total_swap_count + 1)
        picks_b += run_until_swaps(orch_b, host_b, orch_b.session.total_swap_count + 1)
        chain_a.append(orch_a.session.seed_chain_value)
        chain_b.append(orch_b.session.seed_chain_value)
        host_a.advance_one_tick()
        host_b.advance_one_tick()

    assert picks_a == picks_b
    assert chain_a == chain_b
    assert all(x != y for x, y in zip(picks_a, picks_a[1:]))


def test_restart_after_swap_replays_same_run(cfg, clock, tmp_path):
    other = cfg.model_copy(update={"root_dir": str(tmp_path / "restarted")})
    for c in (cfg, other):
        make_pool(c, "a.nes", "b.nes", "c.nes", "d.nes")
        seeded_settings(c)

    # uninterrupted
    orch, host = start(cfg, clock)
    picks = run_until_swaps(orch, host, 1)
    deadline_after_first = orch.session.swap_deadline_ticks
    host.advance_one_tick()
    picks += run_until_swaps(orch, host, 3)

    # killed right after the first swap, then started again
    orch_r, host_r = start(other, clock)
    picks_r = run_until_swaps(orch_r, host_r, 1)
    orch_r, host_r = start(other, clock)
    assert orch_r.session.current_workload_file == picks_r[0]
    assert orch_r.session.swap_deadline_ticks == deadline_after_first
    picks_r += run_until_swaps(orch_r, host_r, 3)

    assert picks_r == picks


def test_counters_are_monotonic(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes", "c.nes")
    seeded_settings(cfg)

    orch, host = start(cfg, clock)
    seen_totals = []
    for n in range(1, 11):
        run_until_swaps(orch, host, n)
        seen_totals.append(orch.session.total_tick_count)
        host.advance_one_tick()

    session, workloads = read_stats(cfg)
    assert session.total_swap_count == 10
    assert all(session.total_swap_count >= w.swap_count for w in workloads.values())
    assert sum(w.swap_count for w in workloads.values()) == 10
    assert seen_totals == sorted(seen_totals)


def test_single_rom_pool_skips_swap_without_changes(cfg, clock):
    make_pool(cfg, "only.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)

    orch, host = start(cfg, clock)
    assert orch.session.current_workload_file == "only.nes"
    orch.run(max_ticks=60)
    before = orch.session.model_dump()

    assert orch.swap() is False
    orch.tick()

    assert orch.session.model_dump() == before
    assert orch.state == OrchestratorState.IDLE
    assert not cfg.session_path.exists()


def test_empty_pool_is_fatal_at_start(cfg, clock):
    seeded_settings(cfg)
    with pytest.raises(NoWorkloadsError):
        start(cfg, clock)


def test_empty_pool_is_fatal_at_swap(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)
    orch, host = start(cfg, clock)

    for rom in list(cfg.workloads_path.iterdir()):
        rom.unlink()
    orch.run(max_ticks=60)
    with pytest.raises(NoWorkloadsError):
        orch.tick()
    assert orch.state == OrchestratorState.IDLE


def test_pool_is_rescanned_each_swap(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg)

    orch, host = start(cfg, clock)
    first = orch.session.current_workload_file
    second = run_until_swaps(orch, host, 1)[0]
    assert second != first

    (cfg.workloads_path / first).unlink()
    make_pool(cfg, "c.nes")
    host.advance_one_tick()
    assert run_until_swaps(orch, host, 2) == ["c.nes"]


def test_play_time_uses_clock(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)

    orch, host = start(cfg, clock)
    first = orch.session.current_workload_file
    orch.run(max_ticks=60)
    clock.now += 7.9
    orch.tick()

    assert load_workload_stats(cfg, first).play_time_seconds == 7
    assert orch.session.total_play_time_seconds == 7


def test_pause_applies_after_swap_only(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1, pauseDelayMs=250)

    orch, host = start(cfg, clock)
    assert host.slept_ms == []

    orch.run(max_ticks=61)
    assert host.slept_ms == [250]
    assert host.sound_enabled() is True


def test_countdown_banner_drawn_near_deadline(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg, minSwapInterval=5, maxSwapInterval=5, showCountdown=True)

    orch, host = start(cfg, clock)
    assert orch.session.swap_deadline_ticks == 300

    orch.run(max_ticks=100)
    orch.tick()
    assert host.banner is None

    orch.run(max_ticks=141)
    assert host.current_tick() == 241
    orch.tick()
    assert host.banner == "!.!.!.ONE.!.!.!"


def test_resumes_persisted_rom_on_restart(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes", "c.nes")
    seeded_settings(cfg)

    orch, host = start(cfg, clock)
    current = run_until_swaps(orch, host, 1)[0]

    orch2, host2 = start(cfg, clock)
    assert orch2.session.current_workload_file == current
    assert host2.current_workload_display_name() == current.rsplit(".", 1)[0]
    assert orch2.session.total_swap_count == 1


def test_list_pool_filters_bin_and_dirs(cfg):
    make_pool(cfg, "b.nes", "a.smc", "sonic.bin", "SONIC2.BIN")
    (cfg.workloads_path / "subdir").mkdir()
    assert list_pool(cfg.workloads_path, cfg.disallowed_extensions) == ["a.smc", "b.nes"]


def test_list_pool_creates_missing_dir(cfg):
    assert list_pool(cfg.workloads_path) == []
    assert cfg.workloads_path.is_dir()


def test_first_swap_with_rom_already_loaded(cfg, clock):
    make_pool(cfg, "a.nes", "b.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)

    host = SimulatedHost()
    host.activate_workload(cfg.workloads_path / "a.nes")
    orch, host = start(cfg, clock, host)
    assert orch.session.current_workload_file == ""

    orch.run(max_ticks=61)

    persisted = load_session(cfg)
    assert persisted.total_swap_count == 1
    assert persisted.last_workload_name == ""
    assert persisted.current_workload_file in {"a.nes", "b.nes"}


def test_single_rom_pool_logs_skip_once(cfg, clock):
    make_pool(cfg, "only.nes")
    seeded_settings(cfg, minSwapInterval=1, maxSwapInterval=1)

    orch, host = start(cfg, clock)
    lines_before = len(cfg.events_path.read_text(encoding="utf-8").splitlines())
    orch.run(max_ticks=660)

    lines = cfg.events_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) - lines_before == 1
    assert '"swap_skipped"' in lines[-1]

    # a second ROM ends the skipping
    make_pool(cfg, "second.nes")
    orch.tick()
    assert orch.session.total_swap_count == 1
