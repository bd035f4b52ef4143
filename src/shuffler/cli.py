from __future__ import annotations

# ---- Environment bootstrap (MUST be first) ----
from dotenv import load_dotenv

# Load .env once at process start
load_dotenv()

# ---- CLI imports ----
from typing import Optional

import typer

from .config import ShufflerConfig
from .errors import ShufflerError
from .host import SimulatedHost
from .runner import effective_settings, open_session, read_stats
from .utils.ui import print_header, print_settings, print_stats


app = typer.Typer(add_completion=False, help="ROM shuffler")


@app.command()
def run(
    ticks: int = typer.Option(3600, help="Frames to simulate before stopping"),
    realtime: bool = typer.Option(False, help="Actually sleep for the post-swap pause"),
    root: Optional[str] = typer.Option(None, help="Persistence root (defaults to SHUFFLER_ROOT)"),
):
    """
    Run a session against the simulated host.
    """
    cfg = ShufflerConfig(root_dir=root) if root else ShufflerConfig()
    host = SimulatedHost(realtime=realtime)
    try:
        orchestrator = open_session(cfg, host)
        orchestrator.run(max_ticks=ticks)
    except ShufflerError as e:
        typer.echo(f"[ERR] {e}", err=True)
        raise typer.Exit(code=1)

    session = orchestrator.session
    typer.echo(f"[OK] current={session.current_workload_file} swaps={session.total_swap_count}")
    typer.echo(f"[OK] next swap at frame {session.swap_deadline_ticks}")


@app.command()
def stats(
    root: Optional[str] = typer.Option(None, help="Persistence root (defaults to SHUFFLER_ROOT)"),
):
    """
    Show session and per-ROM statistics.
    """
    cfg = ShufflerConfig(root_dir=root) if root else ShufflerConfig()
    session, workloads = read_stats(cfg)
    print_stats(session, workloads)


@app.command()
def settings(
    root: Optional[str] = typer.Option(None, help="Persistence root (defaults to SHUFFLER_ROOT)"),
):
    """
    Show the effective settings (file overrides on top of defaults).
    """
    cfg = ShufflerConfig(root_dir=root) if root else ShufflerConfig()
    print_header("Settings", str(cfg.settings_path))
    print_settings(effective_settings(cfg))


if __name__ == "__main__":
    app()
