"""Runtime settings read from the environment."""

import logging
import os

from pydantic import BaseModel

from http_manager.transport import DEFAULT_TIMEOUT

TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    timeout: float = DEFAULT_TIMEOUT
    teams_enabled: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from HTTP_MANAGER_* variables.

        Raises ValueError naming the variable when a value cannot be used.
        """
        raw_timeout = os.getenv("HTTP_MANAGER_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"HTTP_MANAGER_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from None

        log_level = os.getenv("HTTP_MANAGER_LOG_LEVEL", "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"HTTP_MANAGER_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            timeout=timeout,
            teams_enabled=os.getenv("HTTP_MANAGER_TEAMS_ENABLED", "").strip().lower() in TRUTHY,
            log_level=log_level,
        )
