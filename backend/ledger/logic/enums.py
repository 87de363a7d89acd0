"""
String enum definitions for session ledger concepts.
"""

from enum import Enum


class ExpenseType(str, Enum):
    """How an expense is split between members."""

    SHARED = "shared"  # everyone in the session
    INDIVIDUAL = "individual"  # only the listed members


class SessionStatus(str, Enum):
    """Lifecycle of a session record."""

    ACTIVE = "active"
    SETTLED = "settled"


class RatePreset(str, Enum):
    """Named stakes, in currency units per 1,000 points."""

    NO_RATE = "norate"
    TENGO = "tengo"
    TENPIN = "tenpin"
    TEN2 = "ten2"
    TEN5 = "ten5"

    @property
    def rate(self) -> int:
        return _RATES[self]


_RATES = {
    RatePreset.NO_RATE: 0,
    RatePreset.TENGO: 50,
    RatePreset.TENPIN: 100,
    RatePreset.TEN2: 200,
    RatePreset.TEN5: 500,
}


class UmaPreset(str, Enum):
    """Named uma spreads (second-place gap, first-place gap)."""

    NONE = "none"
    GOTTO = "5-10"
    ONE_TWO = "10-20"
    ONE_THREE = "10-30"
    TWO_THREE = "20-30"
