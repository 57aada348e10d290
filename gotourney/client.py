"""
Async client for the tournament REST API.

Every call is a single request with no retry.  Transport errors, timeouts,
non-2xx statuses and undecodable bodies all raise RequestFailed; payloads that
decode but do not match the snapshot model raise MalformedResponse.

Requests go through stdlib urllib on a worker thread (asyncio.to_thread), the
same way the rest of the app talks to HTTP services, so no extra deps.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request

from gotourney.auth_store import Session
from gotourney.errors import MalformedResponse, RequestFailed
from gotourney.tournaments.base import Player, StandingRow, Tournament
from gotourney.tournaments.parsing import (
    parse_player,
    parse_players,
    parse_standings,
    parse_tournament,
    parse_tournaments,
)

logger = logging.getLogger(__name__)


class TournamentClient:
    """Thin typed wrapper over the tournament REST endpoints."""

    def __init__(self, base_url: str, session: Session, timeout: float = 15) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout

    # ------------------------------------------------------------------ #
    # Tournaments                                                          #
    # ------------------------------------------------------------------ #

    async def list_tournaments(self) -> list[Tournament]:
        return parse_tournaments(await self._request("GET", "/tournaments"))

    async def fetch_tournament(self, tournament_id: str) -> Tournament:
        return parse_tournament(await self._request("GET", f"/tournaments/{_q(tournament_id)}"))

    async def create_tournament(
        self,
        name: str,
        format: str,
        start_date: str,
        end_date: str,
        description: str = "",
    ) -> Tournament:
        data = await self._request(
            "POST",
            "/tournaments",
            {
                "name": name,
                "format": format,
                "startDate": start_date,
                "endDate": end_date,
                "description": description,
            },
        )
        return parse_tournament(data)

    async def record_result(self, tournament_id: str, match_id: str, winner_id: str) -> None:
        await self._request(
            "PUT",
            f"/tournaments/{_q(tournament_id)}/matches/{_q(match_id)}/result",
            {"winnerId": winner_id},
        )

    async def generate_round(self, tournament_id: str) -> None:
        await self._request("POST", f"/tournaments/{_q(tournament_id)}/rounds")

    async def delete_round(self, tournament_id: str, round_number: int) -> None:
        await self._request("DELETE", f"/tournaments/{_q(tournament_id)}/rounds/{int(round_number)}")

    async def add_player(self, tournament_id: str, player_id: str) -> None:
        await self._request(
            "POST",
            f"/tournaments/{_q(tournament_id)}/addPlayer",
            {"playerId": player_id},
        )

    async def fetch_results(self, tournament_id: str) -> list[StandingRow]:
        return parse_standings(await self._request("GET", f"/tournaments/{_q(tournament_id)}/results"))

    # ------------------------------------------------------------------ #
    # Players                                                              #
    # ------------------------------------------------------------------ #

    async def list_players(self) -> list[Player]:
        return parse_players(await self._request("GET", "/tournaments/players"))

    async def create_player(self, name: str, rank: str) -> Player:
        return parse_player(
            await self._request("POST", "/tournaments/players", {"name": name, "rank": rank})
        )

    async def delete_player(self, player_id: str) -> None:
        await self._request("DELETE", f"/tournaments/players/{_q(player_id)}")

    # ------------------------------------------------------------------ #
    # Auth                                                                 #
    # ------------------------------------------------------------------ #

    async def login(self, email: str, password: str) -> Session:
        data = await self._request("POST", "/auth/login", {"email": email, "password": password})
        self.session.login(_token(data), email=email)
        logger.info("Logged in as %s", email)
        return self.session

    async def register(self, name: str, email: str, password: str) -> Session:
        data = await self._request(
            "POST",
            "/auth/register",
            {"name": name, "email": email, "password": password},
        )
        self.session.login(_token(data), email=email)
        logger.info("Registered and logged in as %s", email)
        return self.session

    def logout(self) -> None:
        self.session.logout()

    # ------------------------------------------------------------------ #
    # Transport                                                            #
    # ------------------------------------------------------------------ #

    async def _request(self, method: str, path: str, payload: dict | None = None) -> object:
        url = self.base_url + path
        token = self.session.token

        def _do() -> object:
            headers: dict[str, str] = {
                "Accept": "application/json",
                "User-Agent": "GoTourney/1.0",
            }
            if token:
                headers["Authorization"] = f"Bearer {token}"
            encoded: bytes | None = None
            if payload is not None:
                encoded = json.dumps(payload).encode("utf-8")
                headers["Content-Type"] = "application/json"
            req = urllib.request.Request(url, data=encoded, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
            return json.loads(body) if body else None

        logger.debug("%s %s", method, url)
        try:
            return await asyncio.to_thread(_do)
        except urllib.error.HTTPError as exc:
            message = _server_message(exc.read()) or str(exc.reason)
            if exc.code == 401:
                # Token invalid or expired: drop it so the caller re-authenticates
                self.session.logout()
            logger.warning("%s %s failed with HTTP %d: %s", method, url, exc.code, message)
            raise RequestFailed(method, url, message, status=exc.code, cause=exc) from exc
        except (OSError, ValueError) as exc:
            # URLError, socket timeouts, and JSON/Unicode decode errors
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RequestFailed(method, url, str(exc), cause=exc) from exc


def _q(segment: str) -> str:
    return urllib.parse.quote(str(segment), safe="")


def _token(data: object) -> str:
    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token:
        raise MalformedResponse("token", "auth response carries no token")
    return token


def _server_message(body: bytes) -> str:
    """Pull ``{"message": ...}`` out of an error body, if there is one."""
    try:
        data = json.loads(body)
    except ValueError:
        return body[:200].decode("utf-8", errors="replace").strip()
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return ""
