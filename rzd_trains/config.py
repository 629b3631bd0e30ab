from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

from .version import __version__


APP_USER_AGENT = f"rzd-trains {__version__}"
RZD_REFERER = "rzd.ru"

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_POLL_INTERVAL_SECONDS = 1.5
DEFAULT_POLL_ATTEMPTS = 3


@dataclass(slots=True)
class ClientSettings:
    """Headers and timeouts sent with every request to the service."""

    user_agent: str = APP_USER_AGENT
    referer: str = RZD_REFERER
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS

    def default_headers(self) -> Dict[str, str]:
        # RZD rejects requests that lack either of these.
        return {"User-Agent": self.user_agent, "Referer": self.referer}


@dataclass(slots=True)
class PollingPolicy:
    """How long to wait before each poll for a prepared answer, and how many polls to make."""

    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_attempts: int = DEFAULT_POLL_ATTEMPTS

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative.")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

    @classmethod
    def from_env(cls) -> "PollingPolicy":
        interval = os.getenv("RZD_POLL_INTERVAL_SECONDS")
        attempts = os.getenv("RZD_POLL_ATTEMPTS")
        return cls(
            interval_seconds=float(interval) if interval else DEFAULT_POLL_INTERVAL_SECONDS,
            max_attempts=int(attempts) if attempts else DEFAULT_POLL_ATTEMPTS,
        )
