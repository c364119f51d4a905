"""Logging configuration for dropkit.

Structured logging via loguru. The library is silent by default; call
``setup_logging`` to route its records to stderr and/or a rotating file.

Example:
    from dropkit.observability.logging import LogConfig, setup_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", console=True))
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger

logger.disable("dropkit")

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "TRACE"]

# Bound ids rendered as ``label#id``.
_RESOURCE_IDS = (("droplet_id", "droplet"), ("image_id", "image"))


def _format_context(record: Any) -> str:
    """Render bound context as ``[digitalocean/events event#7(node-running) droplet#42]``."""
    extra = record["extra"]
    scope = "/".join(str(extra[k]) for k in ("provider", "component") if k in extra)
    parts = [scope] if scope else []
    if "event_id" in extra:
        kind = f"({extra['kind']})" if "kind" in extra else ""
        parts.append(f"event#{extra['event_id']}{kind}")
    parts += [f"{label}#{extra[key]}" for key, label in _RESOURCE_IDS if key in extra]
    if "key_name" in extra:
        parts.append(f"key:{extra['key_name']}")
    return f" [{' '.join(parts)}]" if parts else ""


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <7}</level>"
    "<cyan>{extra[_ctx]}</cyan> "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD[T]HH:mm:ss.SSSZZ} {level: <7}{extra[_ctx]} {message} ({name}:{line})"



@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration.

    Attributes:
        level: Minimum log level (TRACE, DEBUG, INFO, WARNING, ERROR).
        file: Path to log file. ``None`` disables file output.
        console: Whether to log to stderr.
        rotation: File rotation policy (e.g., "50 MB", "1 day").
        retention: Number of old log files to keep.
    """

    level: LogLevel = "INFO"
    file: str | None = ".dropkit/dropkit.log"
    console: bool = False
    rotation: str = "50 MB"
    retention: int = 10


def setup_logging(config: LogConfig) -> list[int]:
    """Enable dropkit logging and return handler IDs for cleanup."""
    logger.enable("dropkit")
    logger.configure(patcher=lambda r: r["extra"].update(_ctx=_format_context(r)))

    handler_ids: list[int] = []

    if config.console:
        hid = logger.add(
            sys.stderr,
            level=config.level,
            format=CONSOLE_FORMAT,
            colorize=True,
            filter="dropkit",
        )
        handler_ids.append(hid)

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        hid = logger.add(
            config.file,
            level=config.level,
            format=FILE_FORMAT,
            filter="dropkit",
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            diagnose=False,
            enqueue=False,
        )
        handler_ids.append(hid)

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging again."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("dropkit")
