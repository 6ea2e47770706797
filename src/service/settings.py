from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # DVLA Vehicle Enquiry Service
    dvla_api_key: str = Field(default="", alias="DVLA_API_KEY")
    dvla_base_url: str = Field(
        default="https://driver-vehicle-licensing.api.gov.uk/vehicle-enquiry/v1",
        alias="DVLA_BASE_URL",
    )
    dvla_timeout_seconds: float = Field(default=5.0, alias="DVLA_TIMEOUT_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")
