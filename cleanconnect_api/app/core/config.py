"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the API starts in a
development setup without any configuration.  In a production
deployment ``JWT_SECRET`` must be overridden.
"""

import os
import re
from dataclasses import dataclass
from typing import List


def _parse_duration_minutes(value: str, default: int) -> int:
    """Convert a duration such as ``30d``, ``12h``, ``45m`` or ``3600`` to minutes.

    Bare numbers are interpreted as seconds.  Unparseable values fall
    back to ``default``.
    """
    match = re.fullmatch(r"\s*(\d+)\s*([dhms]?)\s*", value or "")
    if not match:
        return default
    amount, unit = int(match.group(1)), match.group(2)
    if unit == "d":
        return amount * 24 * 60
    if unit == "h":
        return amount * 60
    if unit == "m":
        return amount
    return max(amount // 60, 1)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "CleanConnect API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Token signing.  ``JWT_EXPIRE`` accepts the duration strings used by
    # the mobile backend (``30d``) and wins over ``JWT_EXPIRE_MINUTES``.
    secret_key: str = os.getenv("JWT_SECRET", "change_me")
    algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = _parse_duration_minutes(
        os.getenv("JWT_EXPIRE", ""),
        int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 30))),
    )

    # Path to the SQLite database.  Relative paths are resolved against
    # the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "cleanconnect.db")

    # Comma‑separated list of allowed CORS origins.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # When enabled, job status changes must follow ``ALLOWED_TRANSITIONS``
    # in ``services.job_service``.  Disabled by default: providers may
    # move a job to any status.
    strict_job_transitions: bool = os.getenv("STRICT_JOB_TRANSITIONS", "false").lower() in {"1", "true", "yes"}

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
