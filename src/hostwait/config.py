"""Environment-driven configuration for the wait command."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass

LOG_FORMATS = ("text", "json")


def _get_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


@dataclass
class WaitConfig:
    """Settings for a wait run, sourced from ``WAIT*`` environment variables."""

    targets: str = ""
    timeout: int = 15
    retry_interval: int = 1
    log_format: str = "text"

    def __post_init__(self) -> None:
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format {self.log_format!r}; expected one of {', '.join(LOG_FORMATS)}")

    @classmethod
    def from_env(cls) -> "WaitConfig":
        """Create a configuration instance from process environment variables."""

        return cls(
            targets=os.getenv("WAIT", "").strip(),
            timeout=_get_int("WAIT_TIMEOUT", 15),
            retry_interval=_get_int("WAIT_RETRY_INTERVAL", 1),
            log_format=os.getenv("WAIT_LOG_FORMAT", "text").strip().lower() or "text",
        )

    def merged(self, **overrides: object) -> "WaitConfig":
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)
