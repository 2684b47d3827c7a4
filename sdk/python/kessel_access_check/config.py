"""Access check configuration.

``AccessCheckConfig`` is the resolved, immutable value the engine receives.
``AccessCheckSettings`` loads the same values from ``KESSEL_*`` environment
variables for applications that prefer environment-driven setup.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_API_PATH = "/api/kessel/v1beta2"


class BulkCheckConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    bulk_request_limit: Optional[int] = None

    @property
    def effective_limit(self) -> Optional[int]:
        """The chunk size, or None when bulk requests are never split."""
        if self.bulk_request_limit is None or self.bulk_request_limit <= 0:
            return None
        return self.bulk_request_limit


class AccessCheckConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str
    api_path: str = DEFAULT_API_PATH
    bulk_check_config: BulkCheckConfig = Field(default_factory=BulkCheckConfig)

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        if not value:
            logger.warning("AccessCheckConfig: base_url is empty, requests will use relative URLs")
        return value.rstrip("/")

    @field_validator("api_path")
    @classmethod
    def _check_api_path(cls, value: str) -> str:
        if not value:
            logger.warning("AccessCheckConfig: api_path is empty")
        return value

    def endpoint(self, name: str) -> str:
        return f"{self.base_url}{self.api_path}/{name}"


class AccessCheckSettings(BaseSettings):
    """Settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="KESSEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default="http://localhost:8000", description="Authorization service base URL")
    api_path: str = Field(default=DEFAULT_API_PATH, description="Path prefix of the check endpoints")
    bulk_request_limit: Optional[int] = Field(
        default=None,
        description="Max items per bulk request; unset, zero or negative means unlimited",
    )
    rbac_base_url: str = Field(default="http://localhost:8000", description="RBAC service base URL")
    log_level: str = Field(default="WARNING", description="Logging level for the kessel_access_check logger")

    def to_config(self) -> AccessCheckConfig:
        return AccessCheckConfig(
            base_url=self.base_url,
            api_path=self.api_path,
            bulk_check_config=BulkCheckConfig(bulk_request_limit=self.bulk_request_limit),
        )

    def configure_logging(self) -> None:
        logging.getLogger("kessel_access_check").setLevel(self.log_level.upper())


@lru_cache
def get_settings() -> AccessCheckSettings:
    """Get cached settings instance."""
    return AccessCheckSettings()
