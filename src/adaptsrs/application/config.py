from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from adaptsrs.domain import constants as c
from adaptsrs.domain.parameters import EngineParameters


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/adaptsrs/config.toml",
        Path.home() / ".adaptsrs.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for adaptsrs.
    Supports loading from:
    1. Config file (~/.config/adaptsrs/config.toml)
    2. Environment variables (ADAPTSRS_*)
    3. Manual overrides (CLI flags, API requests)
    """

    model_config = SettingsConfigDict(
        env_prefix="ADAPTSRS_",
        extra="ignore",
    )

    # Paths
    collection_path: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/adaptsrs/collection.yaml"
    )
    verbose: int = 1

    # Forgetting model
    max_risk: float = Field(default=c.DEFAULT_MAX_RISK, gt=0.0, lt=1.0)
    short_term_half_life_minutes: float = Field(default=c.SHORT_TERM_HALF_LIFE_MINUTES, gt=0.0)

    # Fatigue
    fatigue_threshold: float = Field(default=c.FATIGUE_THRESHOLD, ge=0.0, le=1.0)
    fatigue_impact: float = Field(default=c.FATIGUE_IMPACT, ge=0.0, le=1.0)

    # Stage upgrade boundaries (days of stability)
    retention_threshold_days: float = c.RETENTION_THRESHOLD_DAYS
    consolidation_threshold_days: float = c.CONSOLIDATION_THRESHOLD_DAYS
    fixation_threshold_days: float = c.FIXATION_THRESHOLD_DAYS

    # Acquisition steps (minutes)
    acquisition_again_minutes: float = c.ACQUISITION_AGAIN_MINUTES
    acquisition_hard_minutes: float = c.ACQUISITION_HARD_MINUTES
    acquisition_base_minutes: float = c.ACQUISITION_BASE_MINUTES

    # Sessions and health
    critical_risk: float = Field(default=c.CRITICAL_RISK, ge=0.0, le=1.0)
    session_limit: int = Field(default=c.DEFAULT_SESSION_LIMIT, ge=1)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    def engine_parameters(self) -> EngineParameters:
        return EngineParameters(
            max_risk=self.max_risk,
            short_term_half_life_minutes=self.short_term_half_life_minutes,
            fatigue_threshold=self.fatigue_threshold,
            fatigue_impact=self.fatigue_impact,
            retention_threshold_days=self.retention_threshold_days,
            consolidation_threshold_days=self.consolidation_threshold_days,
            fixation_threshold_days=self.fixation_threshold_days,
            acquisition_again_minutes=self.acquisition_again_minutes,
            acquisition_hard_minutes=self.acquisition_hard_minutes,
            acquisition_base_minutes=self.acquisition_base_minutes,
            critical_risk=self.critical_risk,
        )


def resolve_config(overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/adaptsrs/config.toml (if exists)
    3. Environment variables (ADAPTSRS_*)
    4. overrides (CLI flags / API request), None values ignored
    """
    clean = {k: v for k, v in (overrides or {}).items() if v is not None}
    return AppConfig(**clean)
