"""
Round-progression and completion rules.

Every function here is a pure read over a Tournament snapshot: no I/O, no
caching, no mutation.  Callers use them to decide which actions to offer
(record a result, generate a round, delete a round, end the tournament).
The REST API stays the authority on whether a mutation is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass

from gotourney.errors import InvalidWinner, MissingMatch, MissingWinner
from gotourney.tournaments.base import Match, Round, Tournament

MIN_ROUNDS = 4


def current_round(tournament: Tournament) -> Round | None:
    return tournament.current_round


def is_round_complete(round_: Round | None) -> bool:
    """
    True iff the round has at least one match and every match has a winner.

    Recomputed from the matches; the stored ``completed`` flag is ignored
    because it can be stale right after a result was submitted.
    """
    if round_ is None or not round_.matches:
        return False
    return all(match.is_decided for match in round_.matches)


def validate_winner(match: Match | None, winner_id: str | None) -> None:
    """
    Check that ``winner_id`` may be recorded as the winner of ``match``.

    Raises:
        MissingMatch: no match selected.
        MissingWinner: winner id absent or empty.
        InvalidWinner: winner is not one of the match's present players.
    """
    if match is None:
        raise MissingMatch()
    if not winner_id:
        raise MissingWinner()
    valid_ids = tuple(p.id for p in match.participants)
    if winner_id not in valid_ids:
        raise InvalidWinner(winner_id, valid_ids)


def can_generate_next_round(tournament: Tournament) -> bool:
    return tournament.is_ongoing and is_round_complete(tournament.current_round)


def can_start_tournament(tournament: Tournament) -> bool:
    """Round 1 can be generated: no rounds yet and the tournament has not ended."""
    return tournament.status != "COMPLETED" and not tournament.rounds


def can_delete_round(tournament: Tournament, round_index: int) -> bool:
    """Only the last round, by position, of an ongoing tournament is deletable."""
    return tournament.is_ongoing and 0 <= round_index == len(tournament.rounds) - 1


def all_rounds_flagged_completed(tournament: Tournament) -> bool:
    """
    Legacy visibility check for the "End Tournament" action.

    Trusts the stored ``completed`` flags and has no minimum-round policy, so
    it can disagree with evaluate_end() in both directions (see DESIGN.md).
    """
    return bool(tournament.rounds) and all(r.completed for r in tournament.rounds)


# --------------------------------------------------------------------------- #
# End-of-tournament evaluation                                                 #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class EndCondition:
    label: str
    passed: bool
    detail: str
    hint: str = ""   # what to do about it; empty when passed


@dataclass(frozen=True)
class EndReport:
    can_end: bool
    conditions: tuple[EndCondition, ...]

    def summary(self) -> str:
        """Plain-text rendering suitable for a notification or a log line."""
        lines = ["Tournament end check:"]
        for i, cond in enumerate(self.conditions, 1):
            mark = "PASS" if cond.passed else "FAIL"
            lines.append(f"{i}. {cond.label}: {mark}")
            lines.append(f"   - {cond.detail}")
            if cond.hint:
                lines.append(f"   - {cond.hint}")
        if self.can_end:
            lines.append("Conclusion: the tournament can be ended.")
        else:
            lines.append("Conclusion: the tournament cannot be ended yet; meet every condition above.")
        return "\n".join(lines)


def evaluate_end(tournament: Tournament, min_rounds: int = MIN_ROUNDS) -> EndReport:
    """
    Decide whether the tournament may be ended, and explain why.

    Both conditions are always evaluated so the report lists every failure,
    not just the first one.
    """
    conditions = (
        _min_rounds_condition(tournament, min_rounds),
        _current_round_condition(tournament),
    )
    return EndReport(
        can_end=all(c.passed for c in conditions),
        conditions=conditions,
    )


def _min_rounds_condition(tournament: Tournament, min_rounds: int) -> EndCondition:
    played = len(tournament.rounds)
    if played >= min_rounds:
        return EndCondition(
            label="Minimum rounds",
            passed=True,
            detail=f"{played} round(s) played, at least {min_rounds} required",
        )
    short = min_rounds - played
    return EndCondition(
        label="Minimum rounds",
        passed=False,
        detail=(
            f"{played} round(s) played, at least {min_rounds} required; "
            f"need {short} more round{'s' if short != 1 else ''}"
        ),
        hint="Generate the next round once the current one is complete",
    )


def _current_round_condition(tournament: Tournament) -> EndCondition:
    label = "Current round complete"
    round_ = tournament.current_round
    if round_ is None:
        return EndCondition(
            label=label,
            passed=False,
            detail="No rounds have been played",
            hint="Generate the first round",
        )
    if is_round_complete(round_):
        return EndCondition(
            label=label,
            passed=True,
            detail=f"All {len(round_.matches)} match(es) in round {round_.number} have a result",
        )
    pending = sum(1 for m in round_.matches if not m.is_decided)
    if not round_.matches:
        detail = f"Round {round_.number} has no matches"
    else:
        detail = f"{pending} of {len(round_.matches)} match(es) in round {round_.number} still need a result"
    return EndCondition(
        label=label,
        passed=False,
        detail=detail,
        hint="Record the remaining results in the current round",
    )
