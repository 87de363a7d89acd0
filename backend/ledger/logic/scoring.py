"""
Per-round final scoring: return-point difference, uma, oka and tobi.

All values are in 1,000-point units. Seats whose raw score is ``None`` sat
out the round (five-player rotation) and always score 0.
"""

from collections.abc import Sequence

import structlog

from ledger.logic.exceptions import UmaTableTooShortError
from ledger.logic.rounding import get_ranks, round_score
from ledger.logic.types import TobiInfo

logger = structlog.get_logger()

DEFAULT_RETURN_POINTS = 30
DEFAULT_START_POINTS = 25
DEFAULT_TOBI_PENALTY = 10
DEFAULT_UMA: tuple[int, ...] = (30, 10, -10, -30)


def calculate_final_score(
    rounded_score: int,
    rank: int,
    return_points: int = DEFAULT_RETURN_POINTS,
    uma: Sequence[int] = DEFAULT_UMA,
) -> int:
    """Difference from the return line plus the uma for ``rank``."""
    return rounded_score - return_points + uma[rank - 1]


def calculate_round_scores(
    raw_scores: Sequence[int | None],
    return_points: int = DEFAULT_RETURN_POINTS,
    uma: Sequence[int] = DEFAULT_UMA,
    tobi_penalty: int = DEFAULT_TOBI_PENALTY,
    tobi: TobiInfo | None = None,
    start_points: int = DEFAULT_START_POINTS,
) -> list[int]:
    """
    Calculate the final score of every seat for one round.

    Steps:
    1. Drop seats that sat out, keeping seat order
    2. Round each raw score to 1,000-point units (五捨六入)
    3. Rank the rounded scores, earlier seat wins ties
    4. Subtract the return line and add uma by rank
    5. Add oka, (return - start) * active seats, to 1st place
    6. Move the tobi penalty from victim to attacker when both played
    7. Expand back to one entry per seat, 0 for seats that sat out

    With conventional raw totals (100,000 per four active seats) and a
    zero-sum uma table the result sums to zero.

    Raises UmaTableTooShortError when the uma table cannot cover every
    active seat.
    """
    active_seats = [seat for seat, score in enumerate(raw_scores) if score is not None]
    finals = [0] * len(raw_scores)
    if not active_seats:
        return finals

    if len(uma) < len(active_seats):
        raise UmaTableTooShortError(active_seats=len(active_seats), uma_length=len(uma))

    rounded = [round_score(raw_scores[seat]) for seat in active_seats]  # type: ignore[arg-type]
    ranks = get_ranks(rounded)
    active_uma = uma[: len(active_seats)]
    active_finals = [
        calculate_final_score(score, rank, return_points, active_uma)
        for score, rank in zip(rounded, ranks, strict=True)
    ]

    oka = (return_points - start_points) * len(active_seats)
    if oka != 0:
        active_finals[ranks.index(1)] += oka

    if tobi is not None:
        if tobi.victim in active_seats and tobi.attacker in active_seats:
            active_finals[active_seats.index(tobi.victim)] -= tobi_penalty
            active_finals[active_seats.index(tobi.attacker)] += tobi_penalty
        else:
            logger.debug(
                "tobi skipped: seat did not play the round",
                victim=tobi.victim,
                attacker=tobi.attacker,
                active_seats=active_seats,
            )

    for active_index, seat in enumerate(active_seats):
        finals[seat] = active_finals[active_index]
    return finals
