"""
Server settings, read from the environment.

A .env file at the working directory (or any parent) is loaded first, so
values can live there instead of being exported by hand.

    GRAPHFLOW_HOST          bind address           (default 0.0.0.0)
    GRAPHFLOW_PORT          bind port              (default 3001)
    GRAPHFLOW_LOG_LEVEL     root logging level     (default INFO)
    GRAPHFLOW_CORS_ORIGINS  comma separated list   (default *)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

LOG_FORMAT = "[%(asctime)s]:%(name)s:(%(levelname)s) - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        env = os.environ if environ is None else environ

        port_text = env.get("GRAPHFLOW_PORT", "3001")
        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"GRAPHFLOW_PORT must be an integer, got '{port_text}'") from None

        log_level = env.get("GRAPHFLOW_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown GRAPHFLOW_LOG_LEVEL '{log_level}'")

        origins = [o.strip() for o in env.get("GRAPHFLOW_CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            host=env.get("GRAPHFLOW_HOST", "0.0.0.0"),
            port=port,
            log_level=log_level,
            cors_origins=origins or ["*"],
        )


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    return Settings.from_env()


def configure_logging(level: str) -> None:
    # Configure logging ONCE at the entry point
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
