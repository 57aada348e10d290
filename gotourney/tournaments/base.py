"""
Tournament snapshot model — players, matches, rounds and standings.

A snapshot is a point-in-time, read-only view of one tournament as returned by
the REST API.  Every type here is a frozen dataclass, so the rules in
rules.py and any consumer (web view, CLI display, tests) can share a snapshot
without copying it.  Fresh state always comes from re-fetching, never from
patching a snapshot in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

TournamentFormat = Literal[
    "ROUNDROBIN",
    "SINGLEELIMINATION",
    "DOUBLEELIMINATION",
    "SWISS",
    "MCMAHON",
]
# UPCOMING = not started, COMPLETED = ended.  Transitions only move forward.
TournamentStatus = Literal["UPCOMING", "ONGOING", "COMPLETED"]

TOURNAMENT_FORMATS: tuple[str, ...] = (
    "ROUNDROBIN",
    "SINGLEELIMINATION",
    "DOUBLEELIMINATION",
    "SWISS",
    "MCMAHON",
)
TOURNAMENT_STATUSES: tuple[str, ...] = ("UPCOMING", "ONGOING", "COMPLETED")


@dataclass(frozen=True)
class Player:
    """A Go player as known to the tournament service."""

    id: str
    name: str = ""
    rank: str = ""              # free-form grade, e.g. "5d", "2k"
    score: float = 0.0          # tournament score, updated server-side
    rating: float | None = None
    wins: int = 0
    losses: int = 0
    draws: int = 0

    @property
    def display_name(self) -> str:
        # Unpopulated references only carry the id
        return self.name or self.id

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.draws


@dataclass(frozen=True)
class Match:
    """
    One pairing inside a round.

    Either player slot may be None: a bye, or an opponent not yet determined.
    winner_id, when set, is the id of player1 or player2.
    """

    id: str
    player1: Player | None = None
    player2: Player | None = None
    winner_id: str | None = None
    score: tuple[float, float] | None = None  # (player1, player2)

    @property
    def participants(self) -> tuple[Player, ...]:
        return tuple(p for p in (self.player1, self.player2) if p is not None)

    @property
    def is_decided(self) -> bool:
        return bool(self.winner_id)

    @property
    def is_bye(self) -> bool:
        return len(self.participants) < 2

    @property
    def winner(self) -> Player | None:
        for player in self.participants:
            if player.id == self.winner_id:
                return player
        return None


@dataclass(frozen=True)
class Round:
    number: int                      # 1-based
    matches: tuple[Match, ...] = ()  # display order only
    completed: bool = False          # stored flag, may lag behind match results

    def find_match(self, match_id: str) -> Match | None:
        return next((m for m in self.matches if m.id == match_id), None)


@dataclass(frozen=True)
class Tournament:
    id: str
    name: str
    format: TournamentFormat
    status: TournamentStatus
    rounds: tuple[Round, ...] = ()
    players: tuple[Player, ...] = ()
    description: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def current_round(self) -> Round | None:
        """The last round by position, or None before round 1 exists."""
        return self.rounds[-1] if self.rounds else None

    @property
    def is_ongoing(self) -> bool:
        return self.status == "ONGOING"

    def find_match(self, match_id: str) -> Match | None:
        for round_ in self.rounds:
            match = round_.find_match(match_id)
            if match is not None:
                return match
        return None


@dataclass(frozen=True)
class StandingRow:
    """One line of the final results table."""

    rank: int
    player: Player
    score: float = 0.0
    game_points: float = 0.0
    wins: int = 0
    losses: int = 0
