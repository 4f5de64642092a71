from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from esp_trainer.domain.constants import (
    DB_FILENAME,
    DEFAULT_HEATMAP_MIN_POINTS,
    DEFAULT_WINDOW_SIZE,
    PREFERENCES_FILENAME,
)


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/esp-trainer/config.toml",
        Path.home() / ".esp-trainer.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for the ESP trainer.
    Supports loading from:
    1. Environment variables (ESP_*)
    2. Config file (~/.config/esp-trainer/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="ESP_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/esp-trainer"
    )
    db_path: Path | None = None
    preferences_path: Path | None = None

    # Statistics
    window_size: int = Field(default=DEFAULT_WINDOW_SIZE, ge=1)
    heatmap_min_points: int = Field(default=DEFAULT_HEATMAP_MIN_POINTS, ge=1)
    retention_days: int | None = Field(default=None, ge=1)

    verbose: int = 0

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

        # First existing config file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority: CLI overrides, then env, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", "db_path", "preferences_path", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/esp-trainer/config.toml (if exists)
    3. Environment variables (ESP_*)
    4. cli_overrides (passed from Typer)

    Storage paths not set explicitly are placed under data_dir.
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.db_path is None:
        config.db_path = config.data_dir / DB_FILENAME
    if config.preferences_path is None:
        config.preferences_path = config.data_dir / PREFERENCES_FILENAME

    return config
