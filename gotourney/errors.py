"""
Error kinds raised by the rules, the API client and the desk.

Local validation errors (MissingMatch, MissingWinner, InvalidWinner) are
detected before any network call and never reach the server.  Every external
failure, whether transport or server-side rejection, surfaces as RequestFailed.
"""

from __future__ import annotations


class TournamentError(Exception):
    """Base class for every error this package raises on purpose."""

    kind = "TournamentError"


class MissingMatch(TournamentError):
    kind = "MissingMatch"

    def __init__(self, match_id: str | None = None) -> None:
        self.match_id = match_id
        if match_id:
            super().__init__(f"Match not found: {match_id}")
        else:
            super().__init__("A match must be selected before recording a result")


class MissingWinner(TournamentError):
    kind = "MissingWinner"

    def __init__(self) -> None:
        super().__init__("A winner must be selected")


class InvalidWinner(TournamentError):
    kind = "InvalidWinner"

    def __init__(self, winner_id: str, valid_ids: tuple[str, ...]) -> None:
        self.winner_id = winner_id
        self.valid_ids = valid_ids
        super().__init__(
            f"Player {winner_id!r} is not a participant of this match "
            f"(valid: {', '.join(valid_ids) or 'none'})"
        )


class RequestFailed(TournamentError):
    """Raised when a call to the tournament REST API does not succeed."""

    kind = "RequestFailed"

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status = status
        self.cause = cause
        prefix = f"{method} {url}" + (f" [{status}]" if status is not None else "")
        super().__init__(f"{prefix}: {message}")


class MalformedResponse(TournamentError):
    """Raised when an API payload does not have the shape the model expects."""

    kind = "MalformedResponse"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Malformed response at '{field}': {message}")


class ActionInFlight(TournamentError):
    kind = "ActionInFlight"

    def __init__(self, tournament_id: str) -> None:
        self.tournament_id = tournament_id
        super().__init__(
            f"Another change to tournament {tournament_id} is still in progress"
        )
