import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

_CONFIG_PATH = os.getenv("STORAGEKIT_CONFIG", "storagekit.toml")
_ENV_PATH = os.getenv("STORAGEKIT_ENV", ".env")


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logs_dir: Optional[Path] = None  # file logging is disabled when unset
    stderr: bool = False  # attach a stderr handler on import


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STORAGEKIT_",
        env_nested_delimiter="__",
        toml_file=_CONFIG_PATH,
        env_file=_ENV_PATH,
        extra="ignore",
    )

    app_name: str = "storagekit"
    app_data_path: Optional[Path] = None
    temp_path: Optional[Path] = None

    copy_chunk_size: int = Field(default=1024 * 1024, gt=0)  # 1 MiB
    text_encoding: str = "utf-8"

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Source order: init args > OS env > .env > storagekit.toml > secrets
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()
