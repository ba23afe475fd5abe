"""
Application configuration.

Settings are read from environment variables prefixed with INKKEY_ (and an
optional .env file). Nested sections use a double underscore, e.g.
INKKEY_PRESS__PLATE_WIDTH_MM=1030 or INKKEY_SYSTEM__LOG_LEVEL=DEBUG.
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import APIConstants, InkConstants, PressConstants


class SystemSettings(BaseModel):
    """Logging and runtime mode"""

    log_level: str = "INFO"
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {value}")
        return value


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = APIConstants.DEFAULT_HOST
    port: int = Field(APIConstants.DEFAULT_PORT, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = ["*"]


class ProcessingSettings(BaseModel):
    """Pipeline tuning"""

    process_width: int = Field(
        InkConstants.PROCESS_WIDTH,
        ge=InkConstants.MIN_PROCESS_WIDTH,
        le=InkConstants.MAX_PROCESS_WIDTH,
    )
    alpha_threshold: int = Field(InkConstants.ALPHA_THRESHOLD, ge=0, le=255)
    band_rows: int = Field(InkConstants.DEFAULT_BAND_ROWS, ge=1)
    max_upload_mb: int = Field(APIConstants.DEFAULT_MAX_UPLOAD_MB, ge=1)
    preview_width: int = Field(640, ge=32)
    max_num_keys: int = Field(PressConstants.MAX_NUM_KEYS, ge=PressConstants.MIN_NUM_KEYS)
    max_plate_width_px: int = Field(
        InkConstants.MAX_PLATE_WIDTH_PX, ge=InkConstants.MIN_PROCESS_WIDTH
    )


class PressSettings(BaseModel):
    """Defaults for options a request leaves out"""

    default_num_keys: int = Field(PressConstants.DEFAULT_NUM_KEYS, ge=PressConstants.MIN_NUM_KEYS)
    default_black_generation: float = Field(PressConstants.DEFAULT_BLACK_GENERATION, ge=0, le=1)
    plate_width_mm: float = Field(PressConstants.PLATE_WIDTH_MM, gt=0)
    default_print_width_in: float = Field(PressConstants.DEFAULT_PRINT_WIDTH_IN, gt=0)

    def option_defaults(self) -> Dict[str, Any]:
        """Defaults keyed like ProcessingOptions fields."""
        return {
            "num_keys": self.default_num_keys,
            "black_generation": self.default_black_generation,
            "rotation": 0,
            "plate_width": self.plate_width_mm,
            "image_width": self.default_print_width_in * PressConstants.MM_PER_INCH,
        }


class Settings(BaseSettings):
    """Root settings object"""

    model_config = SettingsConfigDict(
        env_prefix="INKKEY_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    system: SystemSettings = SystemSettings()
    api: APISettings = APISettings()
    processing: ProcessingSettings = ProcessingSettings()
    press: PressSettings = PressSettings()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
