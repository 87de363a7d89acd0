"""
Point normalization and placement ranking.
"""

from collections.abc import Sequence

POINT_UNIT = 1000

# hundreds digit at or above which a score rounds away from zero (五捨六入)
ROUND_UP_DIGIT = 6


def round_score(raw: int) -> int:
    """
    Convert a raw point total to 1,000-point units using goshashonyu (五捨六入).

    A hundreds digit of 0-5 truncates toward zero, 6-9 rounds away from zero.
    Negative totals are rounded by magnitude and negated, so the rule is
    symmetric: 23600 -> 24, -23600 -> -24, 23599 -> 23, -23599 -> -23.
    """
    if raw < 0:
        return -round_score(-raw)

    quotient, remainder = divmod(raw, POINT_UNIT)
    if remainder // 100 >= ROUND_UP_DIGIT:
        return quotient + 1
    return quotient


def get_ranks(scores: Sequence[int]) -> list[int]:
    """
    Return the 1-based placement of each score, in input order.

    Higher scores place better. Equal scores are ranked by input position:
    the earlier entry takes the better placement.
    """
    order = sorted(range(len(scores)), key=lambda i: -scores[i])
    ranks = [0] * len(scores)
    for place, index in enumerate(order, start=1):
        ranks[index] = place
    return ranks


def active_ranks(raw_scores: Sequence[int | None]) -> list[int | None]:
    """Placement of every seat that played a round; ``None`` for seats that sat out."""
    active = [i for i, s in enumerate(raw_scores) if s is not None]
    ranks = get_ranks([round_score(raw_scores[i]) for i in active])  # type: ignore[arg-type]

    result: list[int | None] = [None] * len(raw_scores)
    for index, rank in zip(active, ranks, strict=True):
        result[index] = rank
    return result
