"""Session rule settings and the named presets they are built from."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from ledger.logic.enums import RatePreset, UmaPreset
from ledger.logic.exceptions import UnsupportedSettingsError
from ledger.logic.rounding import POINT_UNIT
from ledger.logic.scoring import (
    DEFAULT_RETURN_POINTS,
    DEFAULT_START_POINTS,
    DEFAULT_TOBI_PENALTY,
    DEFAULT_UMA,
)
from ledger.logic.totals import DEFAULT_RATE
from ledger.logic.types import Money

# a five-member session rotates one seat out every game
ROTATION_MEMBER_COUNT = 5
TABLE_SEATS = 4

_UMA_TABLES: dict[int, dict[UmaPreset, tuple[int, ...]]] = {
    4: {
        UmaPreset.NONE: (0, 0, 0, 0),
        UmaPreset.GOTTO: (10, 5, -5, -10),
        UmaPreset.ONE_TWO: (20, 10, -10, -20),
        UmaPreset.ONE_THREE: (30, 10, -10, -30),
        UmaPreset.TWO_THREE: (30, 20, -20, -30),
    },
    3: {
        UmaPreset.NONE: (0, 0, 0),
        UmaPreset.GOTTO: (10, 0, -10),
        UmaPreset.ONE_TWO: (20, 0, -20),
        UmaPreset.ONE_THREE: (30, 0, -30),
        UmaPreset.TWO_THREE: (30, -10, -20),
    },
}


class SessionSettings(BaseModel):
    """
    Scoring rules for one session.

    Points are in 1,000-point units; ``rate`` is money per unit.
    """

    model_config = ConfigDict(frozen=True)

    rate: Money = DEFAULT_RATE
    uma: tuple[int, ...] = DEFAULT_UMA
    start_points: int = DEFAULT_START_POINTS
    return_points: int = DEFAULT_RETURN_POINTS
    tobi: bool = True
    tobi_penalty: int = DEFAULT_TOBI_PENALTY


class ChipConfig(BaseModel):
    """Side-bet chips traded during a session."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    start_chips: int = Field(default=20, ge=0)
    price_per_chip: Money = Field(default=100, ge=0)


def active_seat_count(member_count: int) -> int:
    """Seats that play each game: a five-member session plays four at a time."""
    if member_count == ROTATION_MEMBER_COUNT:
        return TABLE_SEATS
    return member_count


def uma_table(preset: UmaPreset, seat_count: int) -> tuple[int, ...]:
    """Ordered uma table (1st place first) for a preset and seat count."""
    tables = _UMA_TABLES.get(seat_count)
    if tables is None:
        raise UnsupportedSettingsError(f"no uma table for {seat_count} seats (only 3 or 4)")
    return tables[preset]


def build_session_settings(
    *,
    rate: RatePreset = RatePreset.TENPIN,
    uma: UmaPreset | Sequence[int] = UmaPreset.ONE_THREE,
    start_points: int = 25000,
    return_points: int = 30000,
    tobi: bool = True,
    tobi_penalty: int = DEFAULT_TOBI_PENALTY,
    seat_count: int = TABLE_SEATS,
) -> SessionSettings:
    """
    Build settings from presets and raw starting/return points.

    ``start_points``/``return_points`` are raw totals (e.g. 25000) and are
    converted to 1,000-point units. ``uma`` is a preset or an explicit
    ordered table.
    """
    table = uma_table(uma, seat_count) if isinstance(uma, UmaPreset) else tuple(uma)
    settings = SessionSettings(
        rate=rate.rate,
        uma=table,
        start_points=start_points // POINT_UNIT,
        return_points=return_points // POINT_UNIT,
        tobi=tobi,
        tobi_penalty=tobi_penalty,
    )
    validate_settings(settings, seat_count)
    return settings


def validate_settings(settings: SessionSettings, active_seats: int) -> None:
    """Validate that settings can score a round with ``active_seats`` players.

    Raises UnsupportedSettingsError listing every problem found.
    """
    errors: list[str] = []

    if len(settings.uma) < active_seats:
        errors.append(f"uma has {len(settings.uma)} entries, need at least {active_seats}")

    if settings.rate < 0:
        errors.append(f"rate={settings.rate} must not be negative")

    if settings.return_points < settings.start_points:
        errors.append(
            f"return_points={settings.return_points} is below start_points={settings.start_points}",
        )

    if settings.tobi_penalty < 0:
        errors.append(f"tobi_penalty={settings.tobi_penalty} must not be negative")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
