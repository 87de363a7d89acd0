"""
Signed per-member balances from side sources: chips and expenses.

Every vector is aligned with the member list (index ``i`` is member ``i``)
so it can be summed element-wise with the mahjong balance vector.
"""

from collections.abc import Sequence

import structlog

from ledger.logic.enums import ExpenseType
from ledger.logic.types import Expense, Money

logger = structlog.get_logger()


def split_evenly(amount: int, parts: int) -> list[int]:
    """
    Split ``amount`` into ``parts`` integer shares that add up to ``amount``.

    The remainder goes one unit at a time to the leading shares:
    100 over 3 parts is [34, 33, 33].
    """
    base, remainder = divmod(amount, parts)
    return [base + (1 if i < remainder else 0) for i in range(parts)]


def calculate_expense_balances(members: Sequence[str], expenses: Sequence[Expense]) -> list[int]:
    """
    Net expense position of every member.

    The payer is credited the full amount, and the amount is debited from
    the targets: the listed members for an individual expense, everyone for
    a shared one. An individual expense without listed members is treated
    as shared. Expenses paid by an unknown member are skipped; unknown
    targets are skipped individually.
    """
    balances = [0] * len(members)
    if not members:
        return balances

    index_of = {name: i for i, name in reversed(list(enumerate(members)))}

    for expense in expenses:
        payer = index_of.get(expense.paid_by)
        if payer is None:
            logger.warning("expense skipped: payer not in session", expense_id=expense.id, paid_by=expense.paid_by)
            continue

        if expense.type == ExpenseType.INDIVIDUAL and expense.for_members:
            targets: Sequence[str] = expense.for_members
        else:
            targets = members

        balances[payer] += expense.amount
        for target, share in zip(targets, split_evenly(expense.amount, len(targets)), strict=True):
            target_index = index_of.get(target)
            if target_index is None:
                logger.warning("expense share skipped: member not in session", expense_id=expense.id, member=target)
                continue
            balances[target_index] -= share

    return balances


def calculate_chip_balances(chip_counts: Sequence[int], start_chips: int, price_per_chip: Money) -> list[Money]:
    """Chips won or lost against the starting stack, priced per chip."""
    return [(count - start_chips) * price_per_chip for count in chip_counts]
