"""
Tournament package.

base.py holds the snapshot model, parsing.py turns API payloads into it, and
rules.py holds the pure gates the UI consults before offering an action.
"""

from __future__ import annotations

from gotourney.tournaments.base import (
    TOURNAMENT_FORMATS,
    TOURNAMENT_STATUSES,
    Match,
    Player,
    Round,
    StandingRow,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)
from gotourney.tournaments.parsing import (
    parse_player,
    parse_players,
    parse_standings,
    parse_tournament,
    parse_tournaments,
)
from gotourney.tournaments.rules import (
    MIN_ROUNDS,
    EndCondition,
    EndReport,
    all_rounds_flagged_completed,
    can_delete_round,
    can_generate_next_round,
    can_start_tournament,
    current_round,
    evaluate_end,
    is_round_complete,
    validate_winner,
)

__all__ = [
    # Model
    "Match",
    "Player",
    "Round",
    "StandingRow",
    "Tournament",
    "TournamentFormat",
    "TournamentStatus",
    "TOURNAMENT_FORMATS",
    "TOURNAMENT_STATUSES",
    # Parsing
    "parse_player",
    "parse_players",
    "parse_standings",
    "parse_tournament",
    "parse_tournaments",
    # Rules
    "MIN_ROUNDS",
    "EndCondition",
    "EndReport",
    "all_rounds_flagged_completed",
    "can_delete_round",
    "can_generate_next_round",
    "can_start_tournament",
    "current_round",
    "evaluate_end",
    "is_round_complete",
    "validate_winner",
]
