from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

ENV_HOST = "CHESSTWIST_HOST"
ENV_PORT = "CHESSTWIST_PORT"
ENV_LOG_LEVEL = "CHESSTWIST_LOG_LEVEL"


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the HTTP session service.

    Attributes:
        host (str): Interface to bind.
        port (int): TCP port, 1..65535.
        log_level (str): Lower-case level name, one of ``LOG_LEVELS``.

    Raises:
        ValueError: If ``port`` or ``log_level`` is out of range.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from ``CHESSTWIST_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        raw_port = env.get(ENV_PORT)
        try:
            port = int(raw_port) if raw_port else defaults.port
        except ValueError as e:
            raise ValueError(f"invalid {ENV_PORT}: {raw_port!r}") from e
        return cls(
            host=env.get(ENV_HOST) or defaults.host,
            port=port,
            log_level=(env.get(ENV_LOG_LEVEL) or defaults.log_level).lower(),
        )

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper())
