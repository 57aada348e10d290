"""
Tournament desk — the caller side of every tournament action.

Sequences each user action the same way:

    validate locally  →  one REST mutation  →  re-fetch the snapshot

Local validation failures never reach the network.  A failed mutation
propagates unchanged and triggers no refresh, so the caller's last snapshot is
still the best known state.  A second mutation on a tournament while one is
in flight is refused with ActionInFlight instead of being queued.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from gotourney.client import TournamentClient
from gotourney.errors import ActionInFlight, MissingMatch, MissingWinner
from gotourney.tournaments.base import Match, Player, StandingRow, Tournament
from gotourney.tournaments.rules import MIN_ROUNDS, EndReport, evaluate_end, validate_winner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndOutcome:
    """What ending a tournament produced: the check, and standings if it passed."""

    report: EndReport
    standings: list[StandingRow] | None = None


class TournamentDesk:
    def __init__(self, client: TournamentClient, min_rounds: int = MIN_ROUNDS) -> None:
        self.client = client
        self.min_rounds = min_rounds
        self._in_flight: set[str] = set()

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def snapshot(self, tournament_id: str) -> Tournament:
        return await self.client.fetch_tournament(tournament_id)

    def is_busy(self, tournament_id: str) -> bool:
        return tournament_id in self._in_flight

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    async def validate_and_record(
        self,
        tournament_id: str,
        match: Match | None,
        winner_id: str | None,
    ) -> Tournament:
        """
        Record ``winner_id`` as the winner of ``match`` and return the refreshed
        snapshot.  The match passed in is never updated locally.

        Raises:
            MissingMatch, MissingWinner, InvalidWinner: before any request.
            RequestFailed: the PUT (or the refresh) failed.
        """
        validate_winner(match, winner_id)
        if match is None:
            raise MissingMatch()
        if not winner_id:
            raise MissingWinner()
        async with self._mutation(tournament_id):
            await self.client.record_result(tournament_id, match.id, winner_id)
            logger.info(
                "Recorded result [tournament=%s match=%s winner=%s]",
                tournament_id, match.id, winner_id,
            )
            return await self.client.fetch_tournament(tournament_id)

    async def record_result(
        self,
        tournament_id: str,
        match_id: str,
        winner_id: str | None,
    ) -> Tournament:
        """Look the match up in a fresh snapshot, then validate_and_record()."""
        tournament = await self.client.fetch_tournament(tournament_id)
        match = tournament.find_match(match_id)
        if match is None:
            raise MissingMatch(match_id)
        return await self.validate_and_record(tournament_id, match, winner_id)

    async def generate_next_round(self, tournament_id: str) -> Tournament:
        async with self._mutation(tournament_id):
            await self.client.generate_round(tournament_id)
            logger.info("Generated next round [tournament=%s]", tournament_id)
            return await self.client.fetch_tournament(tournament_id)

    async def delete_round(self, tournament_id: str, round_number: int) -> Tournament:
        async with self._mutation(tournament_id):
            await self.client.delete_round(tournament_id, round_number)
            logger.info("Deleted round %d [tournament=%s]", round_number, tournament_id)
            return await self.client.fetch_tournament(tournament_id)

    async def add_player(
        self,
        tournament_id: str,
        player_id: str | None = None,
        name: str | None = None,
        rank: str | None = None,
    ) -> Tournament:
        """
        Enrol an existing player by id, or create one from name and rank first.
        """
        if not player_id and not (name and rank):
            raise ValueError("Either player_id or both name and rank must be provided")
        async with self._mutation(tournament_id):
            if not player_id:
                player: Player = await self.client.create_player(name or "", rank or "")
                logger.info("Created player %s (%s) as %s", player.name, player.rank, player.id)
                player_id = player.id
            await self.client.add_player(tournament_id, player_id)
            logger.info("Added player %s [tournament=%s]", player_id, tournament_id)
            return await self.client.fetch_tournament(tournament_id)

    async def end_tournament(self, tournament_id: str) -> EndOutcome:
        """
        Re-check the end conditions on a fresh snapshot; only when they pass,
        fetch the final standings.
        """
        tournament = await self.client.fetch_tournament(tournament_id)
        report = evaluate_end(tournament, self.min_rounds)
        if not report.can_end:
            logger.info("End refused [tournament=%s]\n%s", tournament_id, report.summary())
            return EndOutcome(report=report)
        standings = await self.client.fetch_results(tournament_id)
        logger.info("Tournament ended [tournament=%s players=%d]", tournament_id, len(standings))
        return EndOutcome(report=report, standings=standings)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    @asynccontextmanager
    async def _mutation(self, tournament_id: str) -> AsyncIterator[None]:
        if tournament_id in self._in_flight:
            raise ActionInFlight(tournament_id)
        self._in_flight.add(tournament_id)
        try:
            yield
        finally:
            self._in_flight.discard(tournament_id)
