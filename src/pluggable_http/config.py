"""Client-wide settings shared by every transport."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .logger import LOG_LEVEL_PRIORITY, BoundLogger, LogLevel, create_logger

DEFAULT_TIMEOUT_MS = 80_000

TIMEOUT_ENV_VAR = "PLUGGABLE_HTTP_TIMEOUT_MS"
LOG_LEVEL_ENV_VAR = "PLUGGABLE_HTTP_LOG_LEVEL"


@dataclass
class TransportOptions:
    """Settings applied to every request a client issues.

    ``default_timeout_ms`` is only used when a request does not carry its own
    timeout. It can also come from the environment:

    - ``PLUGGABLE_HTTP_TIMEOUT_MS``: default timeout in milliseconds
    - ``PLUGGABLE_HTTP_LOG_LEVEL``: one of trace, debug, info, warn, error
    """

    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: LogLevel = "info"
    logger: object | None = None

    def __post_init__(self) -> None:
        if self.default_timeout_ms <= 0:
            raise ValueError(
                f"default_timeout_ms must be positive, got {self.default_timeout_ms}"
            )
        if self.log_level not in LOG_LEVEL_PRIORITY:
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "TransportOptions":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        raw_timeout = env.get(TIMEOUT_ENV_VAR)
        if raw_timeout:
            try:
                values["default_timeout_ms"] = int(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"{TIMEOUT_ENV_VAR} must be an integer, got {raw_timeout!r}") from exc

        raw_level = env.get(LOG_LEVEL_ENV_VAR)
        if raw_level:
            values["log_level"] = raw_level.strip().lower()

        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def build_logger(self) -> BoundLogger:
        return create_logger(logger=self.logger, level=self.log_level)


__all__ = ["DEFAULT_TIMEOUT_MS", "TransportOptions"]
