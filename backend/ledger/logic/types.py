"""
Pydantic models for engine inputs and outputs.

All models are frozen: the engine reads them and returns new values,
it never mutates what the caller passed in.
"""

from pydantic import BaseModel, ConfigDict, Field

from ledger.logic.enums import ExpenseType

Money = int | float


class TobiInfo(BaseModel):
    """A bankruptcy event: ``victim`` went below zero, ``attacker`` collects the penalty."""

    model_config = ConfigDict(frozen=True)

    victim: int
    attacker: int


class RoundData(BaseModel):
    """Raw per-seat point totals for one game. ``None`` marks a seat that sat out."""

    model_config = ConfigDict(frozen=True)

    scores: tuple[int | None, ...]
    tobi: TobiInfo | None = None


class Expense(BaseModel):
    """A bill paid by one member and split between several."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    amount: int = Field(gt=0)
    paid_by: str
    type: ExpenseType = ExpenseType.SHARED
    # only consulted for INDIVIDUAL expenses
    for_members: tuple[str, ...] = ()


class Settlement(BaseModel):
    """A single directed transfer: ``from_member`` pays ``to``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_member: str = Field(alias="from")
    to: str
    amount: Money
