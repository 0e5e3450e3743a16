"""Runtime settings for the CLI and the HTTP service.

Settings come from `configs/<env>.toml` and can be overridden one by one
through `FASTVITERBI_*` environment variables. A profile looks like::

    log_level = "INFO"

    [decode]
    log_level = "WARNING"
    max_layers = 10000
    max_candidates = 64

    [api]
    host = "127.0.0.1"
    port = 8000
    workers = 1
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class DecodeLimits:
    """Upper bounds on the trellis a single decode request may build."""

    max_layers: int = 10_000
    max_candidates: int = 64


@dataclass(frozen=True)
class AppConfig:
    """Resolved settings for one environment profile."""

    env: str
    log_level: str = "INFO"
    decode_log_level: str = "WARNING"
    limits: DecodeLimits = DecodeLimits()
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    workers: int = 1

    def configure_logging(self, *, root: bool = True) -> None:
        """Apply log levels; `root=False` leaves handler setup to the host server."""
        if root:
            logging.basicConfig(
                level=self.log_level,
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )
        logging.getLogger("fastviterbi.decode").setLevel(self.decode_log_level)


@dataclass(frozen=True)
class _Setting:
    field: str
    section: str | None
    key: str
    kind: str  # "level", "text" or "count"

    @property
    def env_name(self) -> str:
        parts = [self.section, self.key] if self.section else [self.key]
        return "FASTVITERBI_" + "_".join(parts).upper()

    @property
    def location(self) -> str:
        return f"{self.section}.{self.key}" if self.section else self.key


_SETTINGS = (
    _Setting("log_level", None, "log_level", "level"),
    _Setting("decode_log_level", "decode", "log_level", "level"),
    _Setting("max_layers", "decode", "max_layers", "count"),
    _Setting("max_candidates", "decode", "max_candidates", "count"),
    _Setting("api_host", "api", "host", "text"),
    _Setting("api_port", "api", "port", "count"),
    _Setting("workers", "api", "workers", "count"),
)


def load_config(env_name: str | None = None, config_dir: Path | None = None) -> AppConfig:
    """Resolve settings for `env_name` (default `$FASTVITERBI_ENV` or `dev`)."""
    env = env_name or os.getenv("FASTVITERBI_ENV", "dev")
    profile_path = (config_dir or _default_config_dir()) / f"{env}.toml"
    profile = _read_profile(profile_path)

    values: dict[str, Any] = {}
    for setting in _SETTINGS:
        raw = os.getenv(setting.env_name)
        if raw is not None:
            values[setting.field] = _convert(setting, raw, setting.env_name)
            continue
        table = profile.get(setting.section, {}) if setting.section else profile
        if setting.key in table:
            source = f"{profile_path.name}: {setting.location}"
            values[setting.field] = _convert(setting, table[setting.key], source)

    limit_fields = {"max_layers", "max_candidates"}
    limits = DecodeLimits(**{key: values.pop(key) for key in limit_fields & values.keys()})
    return AppConfig(env=env, limits=limits, **values)


def _default_config_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "configs"


def _read_profile(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _convert(setting: _Setting, raw: object, source: str) -> str | int:
    if setting.kind == "count":
        if isinstance(raw, str):
            try:
                raw = int(raw)
            except ValueError as exc:
                raise ValueError(f"{source} must be an integer, got {raw!r}") from exc
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValueError(f"{source} must be an integer, got type {type(raw).__name__}")
        if raw <= 0:
            raise ValueError(f"{source} must be positive, got {raw}")
        return raw

    if not isinstance(raw, str):
        raise ValueError(f"{source} must be a string, got type {type(raw).__name__}")
    if setting.kind == "level":
        level = raw.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"{source} must be one of {', '.join(_LOG_LEVELS)}, got {raw!r}")
        return level
    return raw
