"""
Configuration - Environment-driven settings.

Variables:
    ULTIMATE_ENV              development | production (default development)
    ULTIMATE_LOG_LEVEL        logging level name (default INFO)
    ALLOWED_ORIGINS           comma separated CORS origins (default *)
    ULTIMATE_SESSION_MAX_AGE  idle seconds before a session is dropped
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    session_max_age: int = 3600

    @property
    def strict_contracts(self) -> bool:
        """Contract violations raise outside production."""
        return self.env != "production"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            env=os.getenv("ULTIMATE_ENV", "development"),
            log_level=os.getenv("ULTIMATE_LOG_LEVEL", "INFO").upper(),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
            session_max_age=int(os.getenv("ULTIMATE_SESSION_MAX_AGE", "3600")),
        )


def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings | None = None):
    """Configure root logging for an entry point."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
