"""Runtime settings for OCR access, parsing thresholds and report storage."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Settings read from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: Literal["dev", "staging", "prod"] = Field(default="dev")
    project_name: str = Field(default="Financial Report OCR")
    version: str = Field(default="0.1.0")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_json: bool = Field(default=True, description="Render log events as JSON; console format otherwise.")

    ocr_api_key: str | None = Field(default=None, min_length=1)
    ocr_endpoint: str = Field(default="https://api.ocr.space/parse/image")
    ocr_language: str = Field(default="eng")
    ocr_engine: Literal[1, 2] = Field(default=2)

    ocr_request_timeout: float = Field(default=12.0, gt=0)
    ocr_image_timeout: float = Field(default=15.0, gt=0)

    fallback_magnitude_floor: float = Field(default=100.0, ge=0)

    report_catalog_path: str | None = None
    period_table_path: str | None = None
    report_store_path: str | None = None

    @model_validator(mode="after")
    def _check_timeouts(self) -> "AppSettings":
        if self.ocr_image_timeout < self.ocr_request_timeout:
            raise ValueError("ocr_image_timeout must not be shorter than ocr_request_timeout")
        return self


@lru_cache
def get_settings() -> AppSettings:
    """Return the process-wide settings instance."""

    return AppSettings()
