"""Session aggregation: summing round scores and converting them to money."""

from collections.abc import Sequence

from ledger.logic.exceptions import RoundShapeError
from ledger.logic.scoring import (
    DEFAULT_RETURN_POINTS,
    DEFAULT_START_POINTS,
    DEFAULT_TOBI_PENALTY,
    DEFAULT_UMA,
    calculate_round_scores,
)
from ledger.logic.types import Money, RoundData

DEFAULT_RATE = 100
DEFAULT_MEMBER_COUNT = 4


def calculate_totals(
    rounds: Sequence[RoundData],
    return_points: int = DEFAULT_RETURN_POINTS,
    uma: Sequence[int] = DEFAULT_UMA,
    tobi_penalty: int = DEFAULT_TOBI_PENALTY,
    start_points: int = DEFAULT_START_POINTS,
    *,
    member_count: int = DEFAULT_MEMBER_COUNT,
) -> list[int]:
    """
    Sum the final scores of every round, seat by seat.

    The width comes from the first round; ``member_count`` only sizes the
    all-zero result of an empty session. Raises RoundShapeError when a
    later round is wider or narrower than the first.
    """
    if not rounds:
        return [0] * member_count

    width = len(rounds[0].scores)
    totals = [0] * width
    for index, round_data in enumerate(rounds):
        if len(round_data.scores) != width:
            raise RoundShapeError(round_index=index, expected=width, actual=len(round_data.scores))
        scores = calculate_round_scores(
            round_data.scores,
            return_points,
            uma,
            tobi_penalty,
            round_data.tobi,
            start_points,
        )
        for seat, score in enumerate(scores):
            totals[seat] += score
    return totals


def calculate_money(totals: Sequence[int], rate_per_point: Money = DEFAULT_RATE) -> list[Money]:
    """Convert point totals to money. A rate of 0 is a no-stakes session."""
    return [total * rate_per_point for total in totals]
