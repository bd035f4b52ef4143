"""
Console output and the on-screen countdown.
File: src/shuffler/utils/ui.py
"""

from typing import Dict, Optional, Tuple

from rich.console import Console
from rich.table import Table

from ..schemas import SessionState, Settings, WorkloadStats

console = Console()

COUNTDOWN_SECONDS = 3


def countdown_banner(tick: int, deadline: int, ticks_per_second: int) -> Optional[Tuple[str, str]]:
    """
    Text and colour to overlay in the last seconds before a swap, else None.
    """
    remaining = deadline - tick
    if remaining > ticks_per_second * COUNTDOWN_SECONDS:
        return None
    if remaining <= ticks_per_second * 1:
        return "!.!.!.ONE.!.!.!", "red"
    if remaining <= ticks_per_second * 2:
        return "!.!...TWO...!.!", "yellow"
    return "!....THREE....!", "lime"


def print_header(title: str, subtitle: str = ""):
    """Prints a styled header."""
    console.rule(f"[bold blue]{title}")
    if subtitle:
        console.print(f"[dim]{subtitle}[/dim]", justify="center")
    console.print()


def print_settings(settings: Settings) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value", justify="right")
    for key, value in settings.to_record().items():
        table.add_row(key, str(value))
    console.print(table)


def print_stats(session: SessionState, workloads: Dict[str, WorkloadStats]) -> None:
    print_header("Session", f"current: {session.current_workload_name or '-'} ({session.current_platform_id or '-'})")
    console.print(f"Swaps: [bold]{session.total_swap_count}[/bold]")
    console.print(f"Plays: [bold]{session.total_activation_count}[/bold]")
    console.print(f"Frames: [bold]{session.total_tick_count}[/bold]")
    console.print(f"Play time: [bold]{session.total_play_time_seconds}s[/bold]\n")

    if not workloads:
        console.print("[dim]No ROM stats yet.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ROM")
    table.add_column("Console")
    table.add_column("Swaps", justify="right")
    table.add_column("Plays", justify="right")
    table.add_column("Frames", justify="right")
    table.add_column("Time (s)", justify="right")
    for filename, stats in sorted(workloads.items()):
        table.add_row(
            stats.workload_name or filename,
            stats.platform_id,
            str(stats.swap_count),
            str(stats.activation_count),
            str(stats.tick_count),
            str(stats.play_time_seconds),
        )
    console.print(table)
