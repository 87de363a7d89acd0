"""Ledger configuration via environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ledger.logic.enums import RatePreset, UmaPreset
from ledger.logic.settings import SessionSettings, build_session_settings
from shared.validators import IntListEnvSettingsSource, parse_int_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class LedgerSettings(BaseSettings):
    model_config = {"env_prefix": "LEDGER_"}

    data_file: str = Field(default="backend/data/sessions.json", min_length=1)

    # stderr always; log_file additionally receives every record (appended)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_file: Path | None = None

    # Default rules for ad-hoc scoring (the `round` command).
    rate: RatePreset = RatePreset.TENPIN
    uma: UmaPreset = UmaPreset.ONE_THREE
    # Explicit table, e.g. LEDGER_UMA_TABLE="40,10,-20,-30"; overrides `uma`.
    uma_table: tuple[int, ...] | None = None
    start_points: int = Field(default=25000, ge=0)
    return_points: int = Field(default=30000, ge=0)
    tobi: bool = True
    tobi_penalty: int = Field(default=10, ge=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_log_format(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @field_validator("uma_table", mode="before")
    @classmethod
    def validate_uma_table(cls, v: str | list[int] | None) -> list[int] | None:
        if v is None:
            return None
        return parse_int_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, IntListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings

    def session_settings(self, seat_count: int) -> SessionSettings:
        """Session rules for a table of ``seat_count`` active seats.

        Raises UnsupportedSettingsError when the rules cannot score such a table.
        """
        return build_session_settings(
            rate=self.rate,
            uma=self.uma_table if self.uma_table is not None else self.uma,
            start_points=self.start_points,
            return_points=self.return_points,
            tobi=self.tobi,
            tobi_penalty=self.tobi_penalty,
            seat_count=seat_count,
        )
