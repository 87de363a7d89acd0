"""Persistence models for the data access layer."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from ledger.logic.enums import SessionStatus
from ledger.logic.settings import ChipConfig, SessionSettings
from ledger.logic.types import Expense, RoundData


class Group(BaseModel, frozen=True):
    """A circle of players that meets for sessions."""

    id: str
    name: str
    members: tuple[str, ...] = ()
    created_at: datetime


class Round(RoundData, frozen=True):
    """One recorded game of a session."""

    id: str


class Session(BaseModel, frozen=True):
    """Record of one evening of play, in member order.

    Member order is significant: every per-seat list (round scores, chip
    counts) and every computed balance vector is indexed by it.
    """

    id: str
    group_id: str
    date: date
    members: tuple[str, ...]
    settings: SessionSettings = Field(default_factory=SessionSettings)
    chip_config: ChipConfig = Field(default_factory=ChipConfig)
    rounds: tuple[Round, ...] = ()
    chip_counts: tuple[int, ...] = ()
    expenses: tuple[Expense, ...] = ()
    status: SessionStatus = SessionStatus.ACTIVE
