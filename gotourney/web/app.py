"""
FastAPI application — the backend the tournament page talks to.

Exposes:
  GET    /api/config                                   UI-relevant config
  GET    /api/session                                  Current login state
  POST   /api/session/login | /api/session/logout      Session lifecycle
  POST   /api/session/register                         Create an account and log in
  GET    /api/tournaments | POST /api/tournaments      Tournament list / create
  GET    /api/tournaments/{id}                         Snapshot + action gates
  POST   /api/tournaments/{id}/matches/{mid}/result    Record a winner
  POST   /api/tournaments/{id}/rounds                  Generate next round
  DELETE /api/tournaments/{id}/rounds/{n}              Delete the last round
  POST   /api/tournaments/{id}/end                     End check + standings
  POST   /api/tournaments/{id}/players                 Enrol a player
  GET    /api/players | POST /api/players              Player registry
  DELETE /api/players/{id}                             Remove a player

Every mutation goes through TournamentDesk, which refuses duplicate
submissions and returns the re-fetched snapshot.

Only the JSON API is served here; the browser page is built and hosted
separately and proxies /api to this server.
"""

from __future__ import annotations

import dataclasses
import logging
import logging.handlers

from fastapi import FastAPI, HTTPException

from gotourney.auth_store import load_session, save_session
from gotourney.client import TournamentClient
from gotourney.config import Config, load_config
from gotourney.desk import TournamentDesk
from gotourney.errors import (
    ActionInFlight,
    InvalidWinner,
    MalformedResponse,
    MissingMatch,
    MissingWinner,
    RequestFailed,
    TournamentError,
)
from gotourney.tournaments.base import TOURNAMENT_FORMATS, Tournament
from gotourney.tournaments.rules import (
    EndReport,
    all_rounds_flagged_completed,
    can_delete_round,
    can_generate_next_round,
    can_start_tournament,
    evaluate_end,
)

try:
    config = load_config()
except FileNotFoundError:
    config = Config()

# --------------------------------------------------------------------------- #
# Logging                                                                      #
# --------------------------------------------------------------------------- #

_LOG_FILE = config.log_dir_path / "gotourney.log"
_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=config.logging.level,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    handlers=[
        logging.StreamHandler(),                                   # server console
        logging.handlers.RotatingFileHandler(
            _LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
            encoding="utf-8",
        ),
    ],
)
logger = logging.getLogger("gotourney")

session = load_session(config.session_path)
client = TournamentClient(config.api.base_url, session, timeout=config.api.timeout)
desk = TournamentDesk(client, min_rounds=config.rules.min_rounds)

app = FastAPI(title="GoTourney")


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _http_error(exc: TournamentError) -> HTTPException:
    """Map a package error onto the status the page should see."""
    match exc:
        case MissingMatch(match_id=match_id) if match_id:
            status = 404
        case MissingMatch() | MissingWinner() | InvalidWinner():
            status = 400
        case ActionInFlight():
            status = 409
        case RequestFailed(status=404):
            status = 404
        case RequestFailed() | MalformedResponse():
            status = 502
        case _:
            status = 500
    if status >= 500:
        logger.error("%s: %s", exc.kind, exc)
    return HTTPException(status_code=status, detail={"kind": exc.kind, "message": str(exc)})


def _tournament_view(tournament: Tournament) -> dict:
    """Snapshot plus every gate the page needs to enable or hide its actions."""
    report = evaluate_end(tournament, config.rules.min_rounds)
    return {
        "tournament": dataclasses.asdict(tournament),
        "actions": {
            "busy": desk.is_busy(tournament.id),
            "can_start_tournament": can_start_tournament(tournament),
            "can_generate_next_round": can_generate_next_round(tournament),
            "show_end_action": all_rounds_flagged_completed(tournament),
            "can_delete_round": [
                can_delete_round(tournament, i) for i in range(len(tournament.rounds))
            ],
            "end_report": _report_view(report),
        },
    }


def _report_view(report: EndReport) -> dict:
    return {**dataclasses.asdict(report), "summary": report.summary()}


def _required(payload: dict, key: str) -> str:
    value = str(payload.get(key, "") or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail=f"{key} is required")
    return value


# --------------------------------------------------------------------------- #
# REST                                                                         #
# --------------------------------------------------------------------------- #

@app.get("/api/config")
def get_config():
    return {
        "api_base_url": config.api.base_url,
        "min_rounds": config.rules.min_rounds,
    }


@app.get("/api/session")
def get_session():
    return {"authenticated": session.is_authenticated, "email": session.email}


@app.post("/api/session/login")
async def login(payload: dict):
    email = _required(payload, "email")
    password = _required(payload, "password")
    try:
        await client.login(email, password)
    except RequestFailed as exc:
        if exc.status == 401:
            raise HTTPException(status_code=401, detail="Invalid email or password") from exc
        raise _http_error(exc) from exc
    except TournamentError as exc:
        raise _http_error(exc) from exc
    save_session(session, config.session_path)
    return {"authenticated": True, "email": session.email}


@app.post("/api/session/register")
async def register(payload: dict):
    name = _required(payload, "name")
    email = _required(payload, "email")
    password = _required(payload, "password")
    try:
        await client.register(name, email, password)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    save_session(session, config.session_path)
    return {"authenticated": True, "email": session.email}


@app.post("/api/session/logout")
def logout():
    client.logout()
    save_session(session, config.session_path)
    return {"authenticated": False}


@app.get("/api/tournaments")
async def list_tournaments():
    try:
        tournaments = await client.list_tournaments()
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return [
        {
            "id": t.id,
            "name": t.name,
            "format": t.format,
            "status": t.status,
            "rounds": len(t.rounds),
            "players": len(t.players),
        }
        for t in tournaments
    ]


@app.post("/api/tournaments")
async def create_tournament(payload: dict):
    name = _required(payload, "name")
    fmt = _required(payload, "format").upper()
    if fmt not in TOURNAMENT_FORMATS:
        raise HTTPException(
            status_code=400, detail=f"format must be one of {', '.join(TOURNAMENT_FORMATS)}"
        )
    start_date = _required(payload, "startDate")
    end_date = _required(payload, "endDate")
    description = str(payload.get("description", "") or "").strip()
    try:
        tournament = await client.create_tournament(name, fmt, start_date, end_date, description)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    logger.info("Created tournament %s (%s) as %s", tournament.name, fmt, tournament.id)
    return _tournament_view(tournament)


@app.get("/api/tournaments/{tournament_id}")
async def get_tournament(tournament_id: str):
    try:
        tournament = await desk.snapshot(tournament_id)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _tournament_view(tournament)


@app.post("/api/tournaments/{tournament_id}/matches/{match_id}/result")
async def record_result(tournament_id: str, match_id: str, payload: dict):
    winner_id = str(payload.get("winnerId", "") or "").strip()
    try:
        tournament = await desk.record_result(tournament_id, match_id, winner_id)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _tournament_view(tournament)


@app.post("/api/tournaments/{tournament_id}/rounds")
async def generate_round(tournament_id: str):
    try:
        tournament = await desk.generate_next_round(tournament_id)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _tournament_view(tournament)


@app.delete("/api/tournaments/{tournament_id}/rounds/{round_number}")
async def delete_round(tournament_id: str, round_number: int):
    try:
        tournament = await desk.delete_round(tournament_id, round_number)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _tournament_view(tournament)


@app.post("/api/tournaments/{tournament_id}/end")
async def end_tournament(tournament_id: str):
    try:
        outcome = await desk.end_tournament(tournament_id)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    if not outcome.report.can_end:
        raise HTTPException(status_code=409, detail=_report_view(outcome.report))
    return {
        "end_report": _report_view(outcome.report),
        "standings": [dataclasses.asdict(row) for row in outcome.standings or []],
    }


@app.post("/api/tournaments/{tournament_id}/players")
async def add_player(tournament_id: str, payload: dict):
    player_id = str(payload.get("playerId", "") or "").strip() or None
    name = str(payload.get("name", "") or "").strip() or None
    rank = str(payload.get("rank", "") or "").strip() or None
    try:
        tournament = await desk.add_player(tournament_id, player_id=player_id, name=name, rank=rank)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _tournament_view(tournament)


@app.get("/api/players")
async def list_players():
    try:
        players = await client.list_players()
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return [dataclasses.asdict(p) for p in players]


@app.post("/api/players")
async def create_player(payload: dict):
    name = _required(payload, "name")
    rank = _required(payload, "rank")
    try:
        player = await client.create_player(name, rank)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return dataclasses.asdict(player)


@app.delete("/api/players/{player_id}")
async def delete_player(player_id: str):
    try:
        await client.delete_player(player_id)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return {"deleted": player_id}
