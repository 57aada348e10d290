"""
Interactive prompts for the terminal front end.

Only actions whose gate currently passes are offered, mirroring the buttons
the web page enables.  Result entry picks the match and winner by number, so
an id outside the match can only arrive through a stale snapshot.
"""

from __future__ import annotations

from typing import Literal

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from gotourney.tournaments.base import Match, Tournament
from gotourney.tournaments.rules import (
    all_rounds_flagged_completed,
    can_delete_round,
    can_generate_next_round,
    can_start_tournament,
)

console = Console(legacy_windows=False)

Action = Literal["start", "record", "generate", "delete", "end", "refresh", "quit"]


def available_actions(tournament: Tournament) -> list[Action]:
    """Actions worth offering for this snapshot, in menu order."""
    actions: list[Action] = []
    if can_start_tournament(tournament):
        actions.append("start")
    current = tournament.current_round
    if tournament.is_ongoing and current is not None and any(
        not m.is_decided for m in current.matches
    ):
        actions.append("record")
    if can_generate_next_round(tournament):
        actions.append("generate")
    if tournament.rounds and can_delete_round(tournament, len(tournament.rounds) - 1):
        actions.append("delete")
    if all_rounds_flagged_completed(tournament):
        actions.append("end")
    actions.extend(["refresh", "quit"])
    return actions


def select_action(tournament: Tournament) -> Action:
    actions = available_actions(tournament)
    console.print()
    choice = Prompt.ask(
        "[bold]Action[/]",
        choices=list(actions),
        default="refresh",
    )
    return choice  # type: ignore[return-value]


def select_match(tournament: Tournament) -> Match | None:
    """Pick an undecided match of the current round. None when there is none."""
    current = tournament.current_round
    pending = [m for m in current.matches if not m.is_decided] if current else []
    if not pending:
        console.print("  [dim]No matches are waiting for a result.[/]")
        return None

    table = Table(show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Player 1", min_width=18)
    table.add_column("", width=3, justify="center")
    table.add_column("Player 2", min_width=18)
    for i, match in enumerate(pending, 1):
        table.add_row(
            str(i),
            match.player1.display_name if match.player1 else "Bye",
            "vs",
            match.player2.display_name if match.player2 else "Bye",
        )
    console.print()
    console.print(table)

    idx = IntPrompt.ask(
        "  Match",
        choices=[str(i) for i in range(1, len(pending) + 1)],
        show_choices=False,
    )
    return pending[idx - 1]


def select_winner(match: Match) -> str:
    """Return the chosen winner id, or "" when the match has nobody to pick."""
    participants = match.participants
    if not participants:
        return ""
    for i, player in enumerate(participants, 1):
        console.print(f"  [bold]{i}[/]  {player.display_name} [dim]({player.rank or '-'})[/]")
    idx = IntPrompt.ask(
        "  Winner",
        choices=[str(i) for i in range(1, len(participants) + 1)],
        show_choices=False,
    )
    return participants[idx - 1].id
