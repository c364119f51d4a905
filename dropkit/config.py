"""TOML-based provider and logging configuration.

Loads ~/.dropkit/defaults.toml (global) and dropkit.toml (project),
merges them, and resolves the ``[digitalocean]`` and ``[logging]`` tables.

Example ``dropkit.toml``::

    [digitalocean]
    client_id = "..."
    api_key = "..."

    [digitalocean.timeouts]
    node_running = 600

    [logging]
    level = "DEBUG"
    console = true
"""

from __future__ import annotations

import dataclasses
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dropkit.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from dropkit.observability.logging import LogConfig
    from dropkit.providers.digitalocean.config import DigitalOcean

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".dropkit" / "defaults.toml"
PROJECT_CONFIG_NAME = "dropkit.toml"


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("digitalocean", {})
    merged.setdefault("logging", {})
    return merged


def _build[T](cls: type[T], section: str, raw: RawConfig) -> T:
    known = {f.name for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in [{section}]: {', '.join(unknown)}. Valid: {', '.join(sorted(known))}"
        )
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [{section}]: {e}") from e


def resolve_provider(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> DigitalOcean:
    from dropkit.providers.digitalocean.config import DigitalOcean, Polling, Timeouts

    raw = dict(load_config(project_dir=project_dir, global_path=global_path)["digitalocean"])

    if (timeouts := raw.pop("timeouts", None)) is not None:
        raw["timeouts"] = _build(Timeouts, "digitalocean.timeouts", timeouts)
    if (polling := raw.pop("polling", None)) is not None:
        raw["polling"] = _build(Polling, "digitalocean.polling", polling)

    return _build(DigitalOcean, "digitalocean", raw)


def resolve_logging(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> LogConfig:
    from dropkit.observability.logging import LogConfig

    raw = load_config(project_dir=project_dir, global_path=global_path)["logging"]
    return _build(LogConfig, "logging", raw)


__all__ = [
    "GLOBAL_CONFIG_PATH",
    "PROJECT_CONFIG_NAME",
    "load_config",
    "resolve_logging",
    "resolve_provider",
]
