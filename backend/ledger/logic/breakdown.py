"""
Full settlement of one session.

Combines the three independent balance sources (mahjong score, chips,
expenses) member by member and reduces the result to transfers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from ledger.logic.balances import calculate_chip_balances, calculate_expense_balances
from ledger.logic.enums import ExpenseType
from ledger.logic.settlement import calculate_settlements
from ledger.logic.totals import calculate_money, calculate_totals
from ledger.logic.types import Money, RoundData, Settlement

if TYPE_CHECKING:
    from shared.dal.models import Session

logger = structlog.get_logger()


class SessionBreakdown(BaseModel):
    """Every balance vector of a session, in member order, plus the transfers."""

    model_config = ConfigDict(frozen=True)

    members: tuple[str, ...]
    mahjong_balances: tuple[Money, ...]
    chip_balances: tuple[Money, ...]
    expense_balances: tuple[int, ...]
    final_balances: tuple[Money, ...]
    mahjong_settlements: tuple[Settlement, ...]
    final_settlements: tuple[Settlement, ...]
    shared_expense_total: int


def _scored_rounds(session: Session) -> list[RoundData]:
    if session.settings.tobi:
        return list(session.rounds)
    return [RoundData(scores=r.scores) for r in session.rounds]


def session_mahjong_balances(session: Session) -> list[Money]:
    """Money won or lost at the table, per member."""
    if not session.rounds:
        return [0] * len(session.members)

    settings = session.settings
    totals = calculate_totals(
        _scored_rounds(session),
        settings.return_points,
        settings.uma,
        settings.tobi_penalty,
        settings.start_points,
        member_count=len(session.members),
    )
    return calculate_money(totals, settings.rate)


def session_chip_balances(session: Session) -> list[Money]:
    """Money won or lost on chips, or zeros when chips are not in play or not yet counted."""
    if not session.chip_config.enabled or not session.chip_counts:
        return [0] * len(session.members)
    return calculate_chip_balances(
        session.chip_counts,
        session.chip_config.start_chips,
        session.chip_config.price_per_chip,
    )


def _sum_balances(*vectors: list[Money]) -> list[Money]:
    return [sum(values) for values in zip(*vectors, strict=True)]


def session_final_balances(session: Session) -> list[Money]:
    """Mahjong, chip and expense balances summed per member."""
    return _sum_balances(
        session_mahjong_balances(session),
        session_chip_balances(session),
        calculate_expense_balances(session.members, session.expenses),
    )


def settle_session(session: Session) -> SessionBreakdown:
    """Compute every balance of a session and the transfers that clear them."""
    mahjong = session_mahjong_balances(session)
    chips = session_chip_balances(session)
    expenses = calculate_expense_balances(session.members, session.expenses)
    final = _sum_balances(mahjong, chips, expenses)

    mahjong_settlements = calculate_settlements(session.members, mahjong)
    final_settlements = calculate_settlements(session.members, final)

    logger.info(
        "session settled",
        session_id=session.id,
        rounds=len(session.rounds),
        transfers=len(final_settlements),
    )

    return SessionBreakdown(
        members=session.members,
        mahjong_balances=tuple(mahjong),
        chip_balances=tuple(chips),
        expense_balances=tuple(expenses),
        final_balances=tuple(final),
        mahjong_settlements=tuple(mahjong_settlements),
        final_settlements=tuple(final_settlements),
        shared_expense_total=sum(e.amount for e in session.expenses if e.type == ExpenseType.SHARED),
    )
