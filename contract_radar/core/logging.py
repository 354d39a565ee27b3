from __future__ import annotations

import logging
import sys
from typing import Optional

from contract_radar.core.config import settings

# third-party loggers that would otherwise log every outgoing request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None) -> None:
    """
    key=value lines on stdout for the pipeline and the API surface.

    Safe to call more than once (reload, tests).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )

    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(component: str) -> logging.Logger:
    """Logger handed to a pipeline component, e.g. get_logger("sorter")."""
    return logging.getLogger(f"contract_radar.{component}")
