"""Tests for the terminal loop's action dispatch."""

import unittest
from unittest.mock import AsyncMock

import tournament_main
from gotourney.desk import TournamentDesk
from gotourney.tournaments.base import Match, Player, Round, Tournament

BLACK = Player(id="p1", name="Cho Chikun", rank="9d")
WHITE = Player(id="p2", name="Kobayashi Koichi", rank="9d")


def make_tournament(n_rounds: int, status: str = "ONGOING") -> Tournament:
    rounds = tuple(
        Round(number=n, matches=(Match(id=f"m{n}", player1=BLACK, player2=WHITE, winner_id="p1"),),
              completed=True)
        for n in range(1, n_rounds + 1)
    )
    return Tournament(id="t1", name="Kisei", format="SWISS", status=status,  # type: ignore[arg-type]
                      rounds=rounds, players=(BLACK, WHITE))


class ApplyActionTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.desk = AsyncMock(spec=TournamentDesk)

    async def test_start_generates_first_round(self) -> None:
        fresh = make_tournament(1)
        self.desk.generate_next_round.return_value = fresh
        result = await tournament_main._apply(self.desk, make_tournament(0, "UPCOMING"), "start")
        self.desk.generate_next_round.assert_awaited_once_with("t1")
        self.assertIs(result, fresh)

    async def test_delete_removes_current_round(self) -> None:
        self.desk.delete_round.return_value = make_tournament(2)
        await tournament_main._apply(self.desk, make_tournament(3), "delete")
        self.desk.delete_round.assert_awaited_once_with("t1", 3)

    async def test_delete_without_rounds_is_a_no_op(self) -> None:
        tournament = make_tournament(0)
        result = await tournament_main._apply(self.desk, tournament, "delete")
        self.assertIs(result, tournament)
        self.desk.delete_round.assert_not_awaited()

    async def test_refresh_refetches(self) -> None:
        self.desk.snapshot.return_value = make_tournament(1)
        await tournament_main._apply(self.desk, make_tournament(1), "refresh")
        self.desk.snapshot.assert_awaited_once_with("t1")
