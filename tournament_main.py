"""
GoTourney — terminal entry point.

Usage:
    uv run python tournament_main.py [tournament_id]

Wires together:
    config → session → API client → desk → snapshot display → action prompts

Every action re-fetches the snapshot before it is drawn again.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from rich.prompt import Prompt

from gotourney.auth_store import load_session
from gotourney.cli.display import console, display_end_report, display_standings, display_tournament
from gotourney.cli.prompts import select_action, select_match, select_winner
from gotourney.client import TournamentClient
from gotourney.config import load_config
from gotourney.desk import TournamentDesk
from gotourney.errors import RequestFailed, TournamentError
from gotourney.tournaments.base import Tournament
from gotourney.tournaments.rules import evaluate_end


async def _main(tournament_id: str | None) -> None:
    config_path = Path("config.yaml")
    try:
        config = load_config(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    session = load_session(config.session_path)
    client = TournamentClient(config.api.base_url, session, timeout=config.api.timeout)
    desk = TournamentDesk(client, min_rounds=config.rules.min_rounds)

    if not tournament_id:
        tournament_id = Prompt.ask("[bold]Tournament id[/]").strip()

    try:
        tournament = await desk.snapshot(tournament_id)
    except TournamentError as exc:
        console.print(f"[red]Could not load tournament:[/] {exc}")
        sys.exit(1)

    while True:
        display_tournament(tournament, evaluate_end(tournament, config.rules.min_rounds))
        action = select_action(tournament)
        if action == "quit":
            return
        try:
            tournament = await _apply(desk, tournament, action)
        except RequestFailed as exc:
            # Server state presumed unchanged; keep the last good snapshot
            console.print(f"[red]Request failed:[/] {exc}")
        except TournamentError as exc:
            console.print(f"[yellow]{exc}[/]")


async def _apply(desk: TournamentDesk, tournament: Tournament, action: str) -> Tournament:
    match action:
        case "record":
            selected = select_match(tournament)
            if selected is None:
                return tournament
            winner_id = select_winner(selected)
            return await desk.validate_and_record(tournament.id, selected, winner_id)
        case "start" | "generate":
            return await desk.generate_next_round(tournament.id)
        case "delete":
            current = tournament.current_round
            if current is None:
                return tournament
            return await desk.delete_round(tournament.id, current.number)
        case "end":
            outcome = await desk.end_tournament(tournament.id)
            if outcome.standings is None:
                display_end_report(outcome.report)
                return tournament
            display_standings(tournament.name, outcome.standings)
            sys.exit(0)
        case _:
            return await desk.snapshot(tournament.id)


def main() -> None:
    tournament_id = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        asyncio.run(_main(tournament_id))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")


if __name__ == "__main__":
    main()
