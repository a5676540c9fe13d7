from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from versemem.domain.constants import DEFAULT_MAX_SESSION_SIZE, DEFAULT_TRANSLATION


class AppConfig(BaseSettings):
    """
    Configuration model for versemem.
    Supports loading from:
    1. Environment variables (VERSEMEM_*)
    2. Config file (~/.config/versemem/config.toml)
    3. Manual overrides (CLI / API)
    """

    model_config = SettingsConfigDict(
        env_prefix="VERSEMEM_",
        extra="ignore",
    )

    # Storage
    backend: Literal["sqlite", "memory"] = "sqlite"
    db_path: Path = Field(default_factory=lambda: Path.home() / ".local/share/versemem/verses.db")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/versemem/logs")

    # Identity and calendar
    user_id: str = "local"
    timezone: str = "UTC"

    # Items
    default_translation: str = DEFAULT_TRANSLATION

    # Practice
    max_session_size: int = DEFAULT_MAX_SESSION_SIZE
    session_order: Literal["due", "hardest", "shuffle"] = "due"

    # Server
    host: str = "127.0.0.1"
    port: int = 8777

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

        # First existing file wins
        toml_file = next((f for f in config_file_candidates() if f.exists()), None)

        # Earlier sources take priority
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("db_path", "log_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("max_session_size")
    @classmethod
    def check_session_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_session_size must be >= 0 (0 means unlimited)")
        return v


def config_file_candidates() -> list[Path]:
    # Resolved lazily so a patched HOME is honoured.
    home = Path.home()
    return [home / ".config/versemem/config.toml", home / ".versemem.toml"]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/versemem/config.toml (if exists)
    3. Environment variables (VERSEMEM_*)
    4. cli_overrides (passed from Typer or the HTTP layer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
