from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from kairos.domain.constants import PREFERRED_REVIEW_HOUR


class AppConfig(BaseSettings):
    """
    Configuration model for kairos.
    Supports loading from:
    1. Environment variables (KAIROS_*)
    2. Config file (~/.config/kairos/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="KAIROS_",
        extra="ignore",
    )

    # Paths
    deck_path: Path = Field(default_factory=lambda: Path.home() / ".config/kairos/deck.json")

    # Scheduling
    preferred_review_hour: int = PREFERRED_REVIEW_HOUR

    # Output
    verbose: int = 1

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

        # Home is looked up at call time so tests can redirect it
        toml_file = None
        for f in [Path.home() / ".config/kairos/config.toml", Path.home() / ".kairos.toml"]:
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: CLI overrides, then env, then the TOML file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_path", mode="before")
    @classmethod
    def resolve_deck_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("preferred_review_hour")
    @classmethod
    def check_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("preferred_review_hour must be between 0 and 23")
        return v


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/kairos/config.toml (if exists)
    3. Environment variables (KAIROS_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
