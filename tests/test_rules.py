"""
Tests for the round-progression rules — round completion, result validation,
round generation/deletion gates and the end-of-tournament report.
"""

from __future__ import annotations

import pytest

from gotourney.errors import InvalidWinner, MissingMatch, MissingWinner
from gotourney.tournaments import (
    MIN_ROUNDS,
    Match,
    Player,
    Round,
    Tournament,
    all_rounds_flagged_completed,
    can_delete_round,
    can_generate_next_round,
    can_start_tournament,
    current_round,
    evaluate_end,
    is_round_complete,
    validate_winner,
)


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

HONINBO = Player(id="p1", name="Honinbo Shusaku", rank="9d")
GO_SEIGEN = Player(id="p2", name="Go Seigen", rank="9d")
CHO_CHIKUN = Player(id="p3", name="Cho Chikun", rank="9d")
LEE_SEDOL = Player(id="p4", name="Lee Sedol", rank="9d")


def make_match(mid: str, p1=HONINBO, p2=GO_SEIGEN, winner: str | None = None) -> Match:
    return Match(id=mid, player1=p1, player2=p2, winner_id=winner)


def make_round(number: int, decided: int, undecided: int = 0, completed: bool | None = None) -> Round:
    matches = [make_match(f"r{number}-d{i}", winner="p1") for i in range(decided)]
    matches += [make_match(f"r{number}-u{i}") for i in range(undecided)]
    return Round(
        number=number,
        matches=tuple(matches),
        completed=(undecided == 0) if completed is None else completed,
    )


def make_tournament(rounds: list[Round], status: str = "ONGOING") -> Tournament:
    return Tournament(
        id="t1",
        name="Kisei Cup",
        format="SWISS",
        status=status,  # type: ignore[arg-type]
        rounds=tuple(rounds),
        players=(HONINBO, GO_SEIGEN, CHO_CHIKUN, LEE_SEDOL),
    )


def full_rounds(n: int) -> list[Round]:
    return [make_round(i, decided=2) for i in range(1, n + 1)]


# --------------------------------------------------------------------------- #
# Round completion                                                             #
# --------------------------------------------------------------------------- #

class TestRoundCompletion:
    def test_all_decided_is_complete(self):
        assert is_round_complete(make_round(1, decided=2))

    def test_one_undecided_is_incomplete(self):
        assert not is_round_complete(make_round(1, decided=1, undecided=1))

    def test_empty_round_is_incomplete(self):
        assert not is_round_complete(Round(number=1, matches=()))

    def test_missing_round_is_incomplete(self):
        assert not is_round_complete(None)

    def test_stored_flag_is_ignored(self):
        stale_true = make_round(1, decided=1, undecided=1, completed=True)
        stale_false = make_round(1, decided=2, completed=False)
        assert not is_round_complete(stale_true)
        assert is_round_complete(stale_false)

    def test_empty_winner_string_counts_as_undecided(self):
        round_ = Round(number=1, matches=(make_match("m1", winner=""),))
        assert not is_round_complete(round_)

    def test_current_round_is_last_by_position(self):
        rounds = full_rounds(3)
        assert current_round(make_tournament(rounds)) is rounds[-1]
        assert current_round(make_tournament([])) is None


# --------------------------------------------------------------------------- #
# Result validation                                                            #
# --------------------------------------------------------------------------- #

class TestValidateWinner:
    def test_no_match_selected(self):
        with pytest.raises(MissingMatch):
            validate_winner(None, "p1")

    @pytest.mark.parametrize("winner", [None, ""])
    def test_missing_winner(self, winner):
        with pytest.raises(MissingWinner):
            validate_winner(make_match("m1"), winner)

    def test_either_participant_is_valid(self):
        match = make_match("m1")
        validate_winner(match, "p1")
        validate_winner(match, "p2")

    def test_other_tournament_player_is_invalid(self):
        # p3 is enrolled in the tournament but not in this match
        with pytest.raises(InvalidWinner) as info:
            validate_winner(make_match("m1"), "p3")
        assert info.value.valid_ids == ("p1", "p2")

    def test_bye_accepts_only_the_present_player(self):
        bye = make_match("m1", p2=None)
        validate_winner(bye, "p1")
        with pytest.raises(InvalidWinner):
            validate_winner(bye, "p2")

    def test_empty_match_rejects_everyone(self):
        empty = make_match("m1", p1=None, p2=None)
        with pytest.raises(InvalidWinner) as info:
            validate_winner(empty, "p1")
        assert info.value.valid_ids == ()

    def test_missing_match_checked_before_winner(self):
        with pytest.raises(MissingMatch):
            validate_winner(None, "")


# --------------------------------------------------------------------------- #
# Round generation and deletion gates                                          #
# --------------------------------------------------------------------------- #

class TestGenerateNextRound:
    def test_ongoing_with_complete_round(self):
        assert can_generate_next_round(make_tournament(full_rounds(2)))

    def test_incomplete_current_round(self):
        rounds = full_rounds(1) + [make_round(2, decided=1, undecided=1)]
        assert not can_generate_next_round(make_tournament(rounds))

    def test_no_rounds(self):
        assert not can_generate_next_round(make_tournament([]))

    @pytest.mark.parametrize("status", ["UPCOMING", "COMPLETED"])
    def test_not_ongoing_regardless_of_completion(self, status):
        assert not can_generate_next_round(make_tournament(full_rounds(2), status=status))

    def test_only_current_round_matters(self):
        rounds = [make_round(1, decided=1, undecided=1), make_round(2, decided=2)]
        assert can_generate_next_round(make_tournament(rounds))


class TestStartTournament:
    @pytest.mark.parametrize("status", ["UPCOMING", "ONGOING"])
    def test_no_rounds_can_start(self, status):
        assert can_start_tournament(make_tournament([], status=status))

    def test_ended_tournament_cannot_start(self):
        assert not can_start_tournament(make_tournament([], status="COMPLETED"))

    def test_existing_rounds_cannot_start(self):
        assert not can_start_tournament(make_tournament(full_rounds(1)))


class TestDeleteRound:
    def test_only_last_round_is_deletable(self):
        tournament = make_tournament(full_rounds(3))
        assert [can_delete_round(tournament, i) for i in range(3)] == [False, False, True]

    def test_out_of_range_index(self):
        tournament = make_tournament(full_rounds(2))
        assert not can_delete_round(tournament, 2)
        assert not can_delete_round(tournament, -1)

    @pytest.mark.parametrize("status", ["UPCOMING", "COMPLETED"])
    def test_not_ongoing(self, status):
        tournament = make_tournament(full_rounds(2), status=status)
        assert not can_delete_round(tournament, 1)

    def test_no_rounds(self):
        assert not can_delete_round(make_tournament([]), 0)
        assert not can_delete_round(make_tournament([]), -1)


# --------------------------------------------------------------------------- #
# End-of-tournament evaluation                                                 #
# --------------------------------------------------------------------------- #

class TestEvaluateEnd:
    def test_min_rounds_policy_constant(self):
        assert MIN_ROUNDS == 4

    def test_three_complete_rounds_need_one_more(self):
        report = evaluate_end(make_tournament(full_rounds(3)))
        assert not report.can_end
        rounds_cond, current_cond = report.conditions
        assert not rounds_cond.passed
        assert "need 1 more round" in rounds_cond.detail
        assert rounds_cond.hint
        assert current_cond.passed

    def test_four_rounds_with_undecided_match(self):
        rounds = full_rounds(3) + [make_round(4, decided=1, undecided=1)]
        report = evaluate_end(make_tournament(rounds))
        assert not report.can_end
        rounds_cond, current_cond = report.conditions
        assert rounds_cond.passed
        assert not current_cond.passed
        assert "1 of 2" in current_cond.detail

    def test_four_decided_rounds_can_end(self):
        report = evaluate_end(make_tournament(full_rounds(4)))
        assert report.can_end
        assert all(c.passed for c in report.conditions)
        assert all(c.hint == "" for c in report.conditions)

    def test_both_conditions_reported_when_both_fail(self):
        rounds = [make_round(1, decided=0, undecided=2)]
        report = evaluate_end(make_tournament(rounds))
        assert [c.passed for c in report.conditions] == [False, False]
        assert "need 3 more rounds" in report.conditions[0].detail

    def test_no_rounds(self):
        report = evaluate_end(make_tournament([]))
        assert not report.can_end
        assert report.conditions[1].detail == "No rounds have been played"

    def test_condition_order_and_labels(self):
        report = evaluate_end(make_tournament(full_rounds(4)))
        assert [c.label for c in report.conditions] == ["Minimum rounds", "Current round complete"]

    def test_custom_min_rounds(self):
        assert evaluate_end(make_tournament(full_rounds(2)), min_rounds=2).can_end

    def test_summary_lists_every_condition(self):
        report = evaluate_end(make_tournament(full_rounds(3)))
        text = report.summary()
        assert "1. Minimum rounds: FAIL" in text
        assert "2. Current round complete: PASS" in text
        assert "cannot be ended" in text


class TestLegacyEndVisibility:
    def test_all_flags_set(self):
        assert all_rounds_flagged_completed(make_tournament(full_rounds(2)))

    def test_no_rounds(self):
        assert not all_rounds_flagged_completed(make_tournament([]))

    def test_disagrees_with_policy_check_below_min_rounds(self):
        # Legacy check shows the button; the four-round policy still refuses.
        tournament = make_tournament(full_rounds(2))
        assert all_rounds_flagged_completed(tournament)
        assert not evaluate_end(tournament).can_end

    def test_disagrees_with_policy_check_on_stale_flag(self):
        # Results all recorded, but the stored flag on round 4 was not updated yet.
        rounds = full_rounds(3) + [make_round(4, decided=2, completed=False)]
        tournament = make_tournament(rounds)
        assert not all_rounds_flagged_completed(tournament)
        assert evaluate_end(tournament).can_end


class TestIdempotence:
    def test_repeated_evaluation_is_identical(self):
        rounds = full_rounds(3) + [make_round(4, decided=1, undecided=1)]
        tournament = make_tournament(rounds)
        assert evaluate_end(tournament) == evaluate_end(tournament)
        assert can_generate_next_round(tournament) == can_generate_next_round(tournament)
        assert is_round_complete(rounds[-1]) == is_round_complete(rounds[-1])
        assert can_delete_round(tournament, 3) == can_delete_round(tournament, 3)

    def test_snapshot_is_not_mutated(self):
        tournament = make_tournament(full_rounds(4))
        before = repr(tournament)
        evaluate_end(tournament)
        can_generate_next_round(tournament)
        all_rounds_flagged_completed(tournament)
        assert repr(tournament) == before
