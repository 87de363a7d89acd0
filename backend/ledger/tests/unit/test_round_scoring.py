import logging

import pytest

from ledger.logic.exceptions import UmaTableTooShortError
from ledger.logic.scoring import calculate_final_score, calculate_round_scores
from ledger.logic.types import TobiInfo


class TestCalculateFinalScore:
    def test_first_place(self):
        assert calculate_final_score(40, 1, 30, (30, 10, -10, -30)) == 40

    def test_last_place(self):
        assert calculate_final_score(10, 4, 30, (30, 10, -10, -30)) == -50


class TestCalculateRoundScores:
    def test_standard_round(self):
        assert calculate_round_scores([30000, 20000, 30000, 20000]) == [50, -20, 10, -40]

    def test_four_way_tie_gives_oka_to_first_seat(self):
        assert calculate_round_scores([25000, 25000, 25000, 25000]) == [45, 5, -15, -35]

    def test_scores_are_rounded_first(self):
        assert calculate_round_scores([35600, 24400, 20000, 20000]) == [56, 4, -20, -40]

    def test_sitting_out_seat_scores_zero(self):
        assert calculate_round_scores([None, 40000, 30000, 20000, 10000]) == [0, 60, 10, -20, -50]

    def test_no_active_seats(self):
        assert calculate_round_scores([None, None, None, None]) == [0, 0, 0, 0]

    def test_no_oka_when_return_equals_start(self):
        scores = calculate_round_scores(
            [40000, 30000, 20000, 10000],
            return_points=25,
            uma=(20, 10, -10, -20),
            start_points=25,
        )
        assert scores == [35, 15, -15, -35]

    def test_three_player_round(self):
        scores = calculate_round_scores([40000, 25000, 10000], return_points=30, uma=(30, 0, -30), start_points=25)
        assert scores == [55, -5, -50]

    def test_sums_to_zero_for_conventional_totals(self):
        assert sum(calculate_round_scores([38200, 31700, 18500, 11600])) == 0

    def test_tobi_moves_penalty_from_victim_to_attacker(self):
        scores = calculate_round_scores(
            [45000, 30000, 26000, -1000],
            tobi=TobiInfo(victim=3, attacker=0),
        )
        assert scores == [75, 10, -14, -71]

    def test_without_tobi(self):
        assert calculate_round_scores([45000, 30000, 26000, -1000]) == [65, 10, -14, -61]

    def test_custom_tobi_penalty(self):
        scores = calculate_round_scores(
            [45000, 30000, 26000, -1000],
            tobi_penalty=20,
            tobi=TobiInfo(victim=3, attacker=0),
        )
        assert scores == [85, 10, -14, -81]

    def test_tobi_ignored_when_attacker_sat_out(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ledger.logic.scoring"):
            scores = calculate_round_scores(
                [None, 46000, 30000, 25000, -1000],
                tobi=TobiInfo(victim=4, attacker=0),
            )

        assert scores == [0, 66, 10, -15, -61]
        assert "tobi skipped" in caplog.text

    def test_uma_table_too_short_raises(self):
        with pytest.raises(UmaTableTooShortError) as exc_info:
            calculate_round_scores([30000, 30000, 20000, 20000], uma=(30, 0, -30))

        assert exc_info.value.active_seats == 4
        assert exc_info.value.uma_length == 3

    def test_longer_uma_table_uses_leading_entries(self):
        scores = calculate_round_scores([40000, 25000, 10000], uma=(30, 10, -10, -30))
        # 40-30+30+15, 25-30+10, 10-30-10
        assert scores == [55, 5, -30]

    def test_does_not_mutate_input(self):
        raw = [None, 40000, 30000, 20000, 10000]
        calculate_round_scores(raw)
        assert raw == [None, 40000, 30000, 20000, 10000]
