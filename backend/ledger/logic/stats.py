"""
Per-member statistics across many sessions.

Balances are the final session balances (mahjong + chips + expenses).
Ranks only count games the member actually played; games spent sitting
out in a five-member rotation are ignored.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ledger.logic.breakdown import session_final_balances
from ledger.logic.rounding import active_ranks

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shared.dal.models import Group, Session

UNKNOWN_GROUP_NAME = "Unknown group"
TRACKED_RANKS = 4


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _round_half_up_tenths(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def _average(total: int, count: int) -> float:
    return total / count if count > 0 else 0.0


class _RankTally:
    """Running rank sum and per-place counts for one member."""

    def __init__(self) -> None:
        self.rank_sum = 0
        self.rank_count = 0
        self.rank_counts = [0] * TRACKED_RANKS

    def add(self, rank: int) -> None:
        self.rank_sum += rank
        self.rank_count += 1
        if 1 <= rank <= TRACKED_RANKS:
            self.rank_counts[rank - 1] += 1

    @property
    def average(self) -> float:
        return _average(self.rank_sum, self.rank_count)


class OverviewStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_sessions: int
    total_rounds: int
    total_balance: int
    avg_rank: float
    first_place: int
    second_place: int
    third_place: int
    fourth_place: int
    tobi: int
    tobi_rate: float  # percent of played games, one decimal


class MonthlyStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str  # "YYYY/MM"
    sessions: int
    balance: int


class OpponentStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    sessions: int
    balance: int
    avg_rank: float


class MemberStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    balance: int
    avg_rank: float
    rank_counts: tuple[int, int, int, int]


class MemberBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    balance: int


class SessionHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str  # "M/D"
    members: tuple[MemberBalance, ...]


class GroupStat(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    sessions: int
    balance: int
    avg_rank: float
    rank_counts: tuple[int, int, int, int]
    member_ranking: tuple[MemberStat, ...]
    session_history: tuple[SessionHistoryEntry, ...]


def all_member_names(sessions: Iterable[Session]) -> list[str]:
    """Every member name that appears in any session, sorted."""
    return sorted({name for session in sessions for name in session.members})


def _sessions_of(sessions: Iterable[Session], name: str) -> list[Session]:
    return [s for s in sessions if name in s.members]


def calc_overview(sessions: Sequence[Session], name: str) -> OverviewStats:
    """Lifetime totals for ``name``. Tobi only counts in sessions played with tobi."""
    total_balance: float = 0
    tally = _RankTally()
    tobi_count = 0

    my_sessions = _sessions_of(sessions, name)
    for session in my_sessions:
        seat = session.members.index(name)
        total_balance += session_final_balances(session)[seat]

        for round_data in session.rounds:
            rank = active_ranks(round_data.scores)[seat]
            if rank is not None:
                tally.add(rank)
            if session.settings.tobi and round_data.tobi is not None and round_data.tobi.victim == seat:
                tobi_count += 1

    return OverviewStats(
        total_sessions=len(my_sessions),
        total_rounds=tally.rank_count,
        total_balance=_round_half_up(total_balance),
        avg_rank=tally.average,
        first_place=tally.rank_counts[0],
        second_place=tally.rank_counts[1],
        third_place=tally.rank_counts[2],
        fourth_place=tally.rank_counts[3],
        tobi=tobi_count,
        tobi_rate=_round_half_up_tenths(tobi_count / tally.rank_count * 100) if tally.rank_count > 0 else 0.0,
    )


def calc_monthly(sessions: Sequence[Session], name: str) -> list[MonthlyStat]:
    """Session count and balance per calendar month, newest month first."""
    months: dict[str, tuple[int, float]] = {}
    for session in _sessions_of(sessions, name):
        seat = session.members.index(name)
        month = f"{session.date.year:04d}/{session.date.month:02d}"
        count, balance = months.get(month, (0, 0))
        months[month] = (count + 1, balance + session_final_balances(session)[seat])

    return [
        MonthlyStat(month=month, sessions=count, balance=_round_half_up(balance))
        for month, (count, balance) in sorted(months.items(), reverse=True)
    ]


def calc_opponents(sessions: Sequence[Session], name: str) -> list[OpponentStat]:
    """
    ``name``'s own results in sessions shared with each other member.

    The balance and average rank are those of ``name``, grouped by who else
    was at the table, in first-seen order.
    """
    session_ids: dict[str, set[str]] = {}
    balances: dict[str, float] = {}
    tallies: dict[str, _RankTally] = {}

    for session in _sessions_of(sessions, name):
        seat = session.members.index(name)
        my_balance = session_final_balances(session)[seat]
        my_ranks = [r for r in (active_ranks(rd.scores)[seat] for rd in session.rounds) if r is not None]

        for opponent in session.members:
            if opponent == name:
                continue
            session_ids.setdefault(opponent, set()).add(session.id)
            balances[opponent] = balances.get(opponent, 0) + my_balance
            tally = tallies.setdefault(opponent, _RankTally())
            for rank in my_ranks:
                tally.add(rank)

    return [
        OpponentStat(
            name=opponent,
            sessions=len(ids),
            balance=_round_half_up(balances[opponent]),
            avg_rank=tallies[opponent].average,
        )
        for opponent, ids in session_ids.items()
    ]


def _short_date(session: Session) -> str:
    return f"{session.date.month}/{session.date.day}"


def calc_groups(sessions: Sequence[Session], groups: Sequence[Group], name: str) -> list[GroupStat]:
    """Per-group results for ``name`` with a ranking of every group member."""
    group_by_id = {g.id: g for g in groups}

    sessions_by_group: dict[str, list[Session]] = {}
    for session in _sessions_of(sessions, name):
        sessions_by_group.setdefault(session.group_id, []).append(session)

    result: list[GroupStat] = []
    for group_id, group_sessions in sessions_by_group.items():
        group = group_by_id.get(group_id)

        member_balances: dict[str, float] = {}
        member_tallies: dict[str, _RankTally] = {}
        for session in group_sessions:
            for member in session.members:
                member_balances.setdefault(member, 0)
                member_tallies.setdefault(member, _RankTally())

        my_balance: float = 0
        my_tally = _RankTally()
        history: list[SessionHistoryEntry] = []

        for session in sorted(group_sessions, key=lambda s: s.date):
            balances = session_final_balances(session)
            seat = session.members.index(name)
            my_balance += balances[seat]

            history.append(
                SessionHistoryEntry(
                    date=_short_date(session),
                    members=tuple(
                        MemberBalance(name=member, balance=_round_half_up(balance))
                        for member, balance in zip(session.members, balances, strict=True)
                    ),
                ),
            )

            for member, balance in zip(session.members, balances, strict=True):
                member_balances[member] += balance

            for round_data in session.rounds:
                ranks = active_ranks(round_data.scores)
                if ranks[seat] is not None:
                    my_tally.add(ranks[seat])
                for member, rank in zip(session.members, ranks, strict=True):
                    if rank is not None:
                        member_tallies[member].add(rank)

        ranking = sorted(
            (
                MemberStat(
                    name=member,
                    balance=_round_half_up(balance),
                    avg_rank=member_tallies[member].average,
                    rank_counts=tuple(member_tallies[member].rank_counts),
                )
                for member, balance in member_balances.items()
            ),
            key=lambda stat: stat.balance,
            reverse=True,
        )

        result.append(
            GroupStat(
                name=group.name if group is not None else UNKNOWN_GROUP_NAME,
                sessions=len(group_sessions),
                balance=_round_half_up(my_balance),
                avg_rank=my_tally.average,
                rank_counts=tuple(my_tally.rank_counts),
                member_ranking=tuple(ranking),
                session_history=tuple(history),
            ),
        )

    return result
