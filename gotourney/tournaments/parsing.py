"""
Boundary parsing: JSON payloads from the tournament REST API → snapshot model.

The API returns document-store shapes (``_id`` keys, camelCase fields) and is
loose about population: a player reference may be a full object or a bare id,
depending on the endpoint.  Everything is checked here so that the rest of the
package only ever sees well-formed dataclasses; anything else raises
MalformedResponse naming the offending field.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from gotourney.errors import MalformedResponse
from gotourney.tournaments.base import (
    TOURNAMENT_FORMATS,
    TOURNAMENT_STATUSES,
    Match,
    Player,
    Round,
    StandingRow,
    Tournament,
)


def parse_tournament(data: object, path: str = "tournament") -> Tournament:
    obj = _expect_dict(data, path)
    players = tuple(
        _player_ref(p, f"{path}.players[{i}]")
        for i, p in enumerate(_expect_list(obj.get("players", []), f"{path}.players"))
    )
    rounds = tuple(
        _parse_round(r, f"{path}.rounds[{i}]")
        for i, r in enumerate(_expect_list(obj.get("rounds", []), f"{path}.rounds"))
    )
    return Tournament(
        id=_id(obj, path),
        name=_string(obj, "name", path),
        format=_choice(obj, "format", TOURNAMENT_FORMATS, path),  # type: ignore[arg-type]
        status=_choice(obj, "status", TOURNAMENT_STATUSES, path),  # type: ignore[arg-type]
        rounds=rounds,
        players=tuple(p for p in players if p is not None),
        description=_string(obj, "description", path, default=""),
        start_date=_date(obj, "startDate", path),
        end_date=_date(obj, "endDate", path),
    )


def parse_tournaments(data: object) -> list[Tournament]:
    return [
        parse_tournament(t, f"tournaments[{i}]")
        for i, t in enumerate(_expect_list(data, "tournaments"))
    ]


def parse_player(data: object, path: str = "player") -> Player:
    obj = _expect_dict(data, path)
    return Player(
        id=_id(obj, path),
        name=_string(obj, "name", path, default=""),
        rank=_string(obj, "rank", path, default=""),
        score=_number(obj, "score", path, default=0.0),
        rating=_number(obj, "rating", path, default=None),
        wins=_integer(obj, "wins", path, default=0),
        losses=_integer(obj, "losses", path, default=0),
        draws=_integer(obj, "draws", path, default=0),
    )


def parse_players(data: object) -> list[Player]:
    return [parse_player(p, f"players[{i}]") for i, p in enumerate(_expect_list(data, "players"))]


def parse_standings(data: object) -> list[StandingRow]:
    """
    Parse the results table.  Accepts either a bare list of rows or the
    ``{"results": [...]}`` envelope the results endpoint wraps it in.
    """
    if isinstance(data, dict):
        if "results" not in data:
            raise MalformedResponse("results", "missing results list")
        data = data["results"]
    rows: list[StandingRow] = []
    for i, raw in enumerate(_expect_list(data, "results")):
        path = f"results[{i}]"
        obj = _expect_dict(raw, path)
        player = _player_ref(obj.get("player"), f"{path}.player")
        if player is None:
            raise MalformedResponse(f"{path}.player", "missing player reference")
        rows.append(
            StandingRow(
                rank=_integer(obj, "rank", path),
                player=player,
                score=_number(obj, "score", path, default=0.0),
                game_points=_number(obj, "gamePoints", path, default=0.0),
                wins=_integer(obj, "wins", path),
                losses=_integer(obj, "losses", path),
            )
        )
    return rows


# --------------------------------------------------------------------------- #
# Internal helpers                                                             #
# --------------------------------------------------------------------------- #

_REQUIRED = object()


def _parse_round(data: object, path: str) -> Round:
    obj = _expect_dict(data, path)
    number = _integer(obj, "roundNumber", path)
    if number < 1:
        raise MalformedResponse(f"{path}.roundNumber", f"expected a positive integer, got {number!r}")
    completed = obj.get("completed", False)
    if not isinstance(completed, bool):
        raise MalformedResponse(f"{path}.completed", f"expected a boolean, got {completed!r}")
    matches = tuple(
        _parse_match(m, f"{path}.matches[{i}]")
        for i, m in enumerate(_expect_list(obj.get("matches", []), f"{path}.matches"))
    )
    return Round(number=number, matches=matches, completed=completed)


def _parse_match(data: object, path: str) -> Match:
    obj = _expect_dict(data, path)
    player1 = _player_ref(obj.get("player1"), f"{path}.player1")
    player2 = _player_ref(obj.get("player2"), f"{path}.player2")
    winner = _player_ref(obj.get("winner"), f"{path}.winner")
    seated = [p.id for p in (player1, player2) if p is not None]
    if winner is not None and winner.id not in seated:
        raise MalformedResponse(
            f"{path}.winner", f"winner {winner.id!r} is not player1 or player2 of this match"
        )
    return Match(
        id=_id(obj, path),
        player1=player1,
        player2=player2,
        winner_id=winner.id if winner is not None else None,
        score=_score_pair(obj, path),
    )


def _player_ref(data: object, path: str) -> Player | None:
    """A player reference: populated object, bare id string, or absent."""
    if data is None or data == "":
        return None
    if isinstance(data, str):
        return Player(id=data)
    return parse_player(data, path)


def _score_pair(obj: dict[str, Any], path: str) -> tuple[float, float] | None:
    score = obj.get("score")
    if isinstance(score, dict):
        p1 = _number(score, "player1", f"{path}.score", default=None)
        p2 = _number(score, "player2", f"{path}.score", default=None)
    elif score is None:
        p1 = _number(obj, "player1Score", path, default=None)
        p2 = _number(obj, "player2Score", path, default=None)
    else:
        raise MalformedResponse(f"{path}.score", f"expected an object, got {type(score).__name__}")
    if p1 is None and p2 is None:
        return None
    return (p1 or 0.0, p2 or 0.0)


def _expect_dict(data: object, path: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise MalformedResponse(path, f"expected an object, got {type(data).__name__}")
    return data


def _expect_list(data: object, path: str) -> list[Any]:
    if not isinstance(data, list):
        raise MalformedResponse(path, f"expected a list, got {type(data).__name__}")
    return data


def _id(obj: dict[str, Any], path: str) -> str:
    value = obj.get("_id", obj.get("id"))
    if not isinstance(value, str) or not value:
        raise MalformedResponse(f"{path}._id", f"expected a non-empty id string, got {value!r}")
    return value


def _string(obj: dict[str, Any], key: str, path: str, default: object = _REQUIRED) -> str:
    value = obj.get(key)
    if value is None:
        if default is _REQUIRED:
            raise MalformedResponse(f"{path}.{key}", "missing required field")
        return default  # type: ignore[return-value]
    if not isinstance(value, str):
        raise MalformedResponse(f"{path}.{key}", f"expected a string, got {type(value).__name__}")
    return value


def _number(obj: dict[str, Any], key: str, path: str, default: object = _REQUIRED) -> Any:
    value = obj.get(key)
    if value is None:
        if default is _REQUIRED:
            raise MalformedResponse(f"{path}.{key}", "missing required field")
        return default
    # bool is an int subclass; a flag in a numeric slot is a shape error
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedResponse(f"{path}.{key}", f"expected a number, got {value!r}")
    return value


def _integer(obj: dict[str, Any], key: str, path: str, default: object = _REQUIRED) -> Any:
    value = _number(obj, key, path, default)
    if value is None:
        return value
    if value != int(value):
        raise MalformedResponse(f"{path}.{key}", f"expected an integer, got {value!r}")
    return int(value)


def _choice(obj: dict[str, Any], key: str, choices: tuple[str, ...], path: str) -> str:
    value = _string(obj, key, path).upper()
    if value not in choices:
        raise MalformedResponse(f"{path}.{key}", f"expected one of {choices}, got {value!r}")
    return value


def _date(obj: dict[str, Any], key: str, path: str) -> datetime | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedResponse(f"{path}.{key}", f"expected an ISO date string, got {value!r}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedResponse(f"{path}.{key}", f"invalid ISO date {value!r}") from exc
