"""Settings loaded from CRITPATH_* environment variables or a .env file."""
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CRITPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Logging level"
    )
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    data_path: Optional[Path] = Field(
        default=None, description="Scenario file loaded when --data is not given"
    )
    date_format: str = Field(default="%Y-%m-%d", description="strftime format for printed dates")


settings = Settings()
