"""
Rich-based terminal rendering of a tournament snapshot.

Rounds are drawn as match tables, followed by the action gates and the
end-of-tournament report.  Final standings get their own table.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gotourney.tournaments.base import Match, Round, StandingRow, Tournament
from gotourney.tournaments.rules import (
    EndReport,
    all_rounds_flagged_completed,
    can_delete_round,
    can_generate_next_round,
    can_start_tournament,
    is_round_complete,
)

console = Console(legacy_windows=False)


def display_tournament(tournament: Tournament, report: EndReport) -> None:
    """Render the whole snapshot: header, every round, gates, end report."""
    _header(tournament)
    if not tournament.rounds:
        console.print("\n  [dim]No rounds yet.[/]")
    for index, round_ in enumerate(tournament.rounds):
        _round_table(tournament, index, round_)
    _gates(tournament)
    display_end_report(report)


def display_end_report(report: EndReport) -> None:
    lines: list[str] = []
    for i, cond in enumerate(report.conditions, 1):
        mark = "[green]✓[/]" if cond.passed else "[red]✗[/]"
        lines.append(f"{mark} [bold]{i}. {cond.label}[/]")
        lines.append(f"    [dim]{cond.detail}[/]")
        if cond.hint:
            lines.append(f"    [yellow]→ {cond.hint}[/]")
    verdict = (
        "[bold green]The tournament can be ended.[/]"
        if report.can_end
        else "[bold red]The tournament cannot be ended yet.[/]"
    )
    lines.append("")
    lines.append(verdict)
    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold] End-of-tournament check [/]",
            border_style="green" if report.can_end else "red",
            expand=False,
        )
    )


def display_standings(tournament_name: str, standings: list[StandingRow]) -> None:
    table = Table(
        title=f"{tournament_name} — Final Results",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Player", min_width=20)
    table.add_column("Rank", style="dim", width=5)
    table.add_column("Score", justify="right", width=6)
    table.add_column("Game Pts", justify="right", width=8)
    table.add_column("W", justify="center", width=4)
    table.add_column("L", justify="center", width=4)

    for row in sorted(standings, key=lambda r: r.rank):
        style = "bold yellow" if row.rank == 1 else ""
        table.add_row(
            str(row.rank),
            row.player.display_name,
            row.player.rank or "-",
            f"{row.score:g}",
            f"{row.game_points:+g}" if row.game_points else "0",
            str(row.wins),
            str(row.losses),
            style=style,
        )

    console.print()
    console.print(table)
    console.print()


# --------------------------------------------------------------------------- #
# Display functions                                                            #
# --------------------------------------------------------------------------- #

def _header(tournament: Tournament) -> None:
    dates = ""
    if tournament.start_date and tournament.end_date:
        dates = (
            f"  •  {tournament.start_date:%Y-%m-%d} → {tournament.end_date:%Y-%m-%d}"
        )
    console.print()
    console.print(
        Panel(
            f"[bold]{tournament.name}[/]\n\n"
            f"[dim]Format: {tournament.format.replace('ELIMINATION', ' ELIMINATION').title()}  •  "
            f"Status: {tournament.status.title()}  •  "
            f"Players: {len(tournament.players)}{dates}[/]",
            title="[bold green] Go Tournament [/]",
            border_style="green",
            expand=False,
        )
    )


def _round_table(tournament: Tournament, index: int, round_: Round) -> None:
    complete = is_round_complete(round_)
    suffix = "[green]complete[/]" if complete else "[yellow]in progress[/]"
    if can_delete_round(tournament, index):
        suffix += "  [dim](deletable)[/]"
    console.print()
    console.rule(f"[bold]Round {round_.number}[/]  {suffix}", style="bright_blue")

    table = Table(show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("Match", style="dim", width=10)
    table.add_column("Player 1", min_width=18)
    table.add_column("Rank", style="dim", width=5)
    table.add_column("", width=3, justify="center")
    table.add_column("Player 2", min_width=18)
    table.add_column("Rank", style="dim", width=5)
    table.add_column("Winner", min_width=18)

    for match in round_.matches:
        table.add_row(
            match.id,
            _slot(match, 1),
            match.player1.rank if match.player1 else "-",
            "vs",
            _slot(match, 2),
            match.player2.rank if match.player2 else "-",
            _winner_cell(match),
        )
    console.print(table)


def _slot(match: Match, position: int) -> str:
    player = match.player1 if position == 1 else match.player2
    if player is None:
        return "[dim]Bye[/]"
    if match.winner_id == player.id:
        return f"[bold green]{player.display_name}[/]"
    return f"[bold]{player.display_name}[/]"


def _winner_cell(match: Match) -> str:
    winner = match.winner
    if winner is not None:
        return f"[green]✓[/] {winner.display_name}"
    return "[dim]-[/]"


def _gates(tournament: Tournament) -> None:
    def flag(ok: bool) -> str:
        return "[green]yes[/]" if ok else "[dim]no[/]"

    console.print()
    console.print(
        f"  Start tournament: {flag(can_start_tournament(tournament))}   "
        f"Generate next round: {flag(can_generate_next_round(tournament))}   "
        f"End action shown: {flag(all_rounds_flagged_completed(tournament))}"
    )
