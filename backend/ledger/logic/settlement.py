"""
Reduce signed member balances to a list of pairwise transfers.
"""

from collections.abc import Sequence

import structlog

from ledger.logic.types import Money, Settlement

logger = structlog.get_logger()


def _max_index(values: Sequence[Money]) -> int:
    best = 0
    for i, value in enumerate(values):
        if value > values[best]:
            best = i
    return best


def _min_index(values: Sequence[Money]) -> int:
    best = 0
    for i, value in enumerate(values):
        if value < values[best]:
            best = i
    return best


def calculate_settlements(members: Sequence[str], balances: Sequence[Money]) -> list[Settlement]:
    """
    Greedy debt simplification.

    Repeatedly pair the largest creditor with the largest debtor (lowest
    index on ties) and transfer the smaller of the two magnitudes, until
    no positive or no negative balance remains. Each transfer zeroes at
    least one member, so there are at most ``len(members) - 1`` transfers.
    The result is not guaranteed to be the minimum possible count.
    """
    settlements: list[Settlement] = []
    if not balances:
        return settlements

    remaining = list(balances)
    while True:
        creditor = _max_index(remaining)
        debtor = _min_index(remaining)
        if remaining[creditor] <= 0 or remaining[debtor] >= 0:
            break

        amount = min(remaining[creditor], -remaining[debtor])
        settlements.append(Settlement(from_member=members[debtor], to=members[creditor], amount=amount))
        remaining[creditor] -= amount
        remaining[debtor] += amount

    if any(remaining):
        # balances that do not sum to zero leave a one-sided residue
        logger.debug("settlement residue", residue=sum(remaining))
    return settlements
