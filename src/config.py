"""Settings resolved once at startup from the environment (+ optional .env).

The store location is derived from HOME and handed to the components that
need it; nothing here is mutated after startup.

Decisions:
- Priority for every key: real environment > ``<data_dir>/.env`` > default.
- Palette values must be ``#rrggbb``; anything else falls back to default.
- NO_COLOR disables color; FORCE_COLOR forces it; otherwise auto-detect.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

ENV_PREFIX = "TASKMAN"
DATA_DIR_SUFFIX = Path(".local") / "taskmanager"
TASKS_FILENAME = "tasks.txt"
DOTENV_FILENAME = ".env"

# Default palette
HEX_PRIMARY_DEFAULT = "#476EAE"
HEX_ID_DEFAULT = "#48B3AF"
HEX_PENDING_DEFAULT = "#F6FF99"
HEX_DONE_DEFAULT = "#A7E399"

PALETTE_DEFAULTS: Dict[str, str] = {
    "primary": HEX_PRIMARY_DEFAULT,
    "id": HEX_ID_DEFAULT,
    "pending": HEX_PENDING_DEFAULT,
    "done": HEX_DONE_DEFAULT,
}

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """The environment does not allow locating or creating the task store."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _is_hex_color(value: str) -> bool:
    h = value.strip().lstrip("#")
    return len(h) == 6 and all(c in "0123456789abcdefABCDEF" for c in h)


def _normalize_hex(value: str) -> str:
    return "#" + value.strip().lstrip("#")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    tasks_file: Path
    log_level: str = "WARNING"
    # True = force, False = disable, None = auto-detect from the terminal
    color: Optional[bool] = None
    truecolor: bool = False
    palette: Mapping[str, str] = field(default_factory=lambda: dict(PALETTE_DEFAULTS))

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        home_raw = env.get("HOME")
        if not home_raw:
            raise ConfigError("HOME environment variable not set. Cannot determine task file path.")
        home = Path(home_raw)
        data_dir = home / DATA_DIR_SUFFIX

        file_values: Dict[str, str] = {}
        dotenv_path = data_dir / DOTENV_FILENAME
        if dotenv_path.is_file():
            file_values = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}

        def lookup(name: str) -> Optional[str]:
            value = env.get(name)
            if value is None or value.strip() == "":
                value = file_values.get(name)
            return value

        palette = dict(PALETTE_DEFAULTS)
        for key in palette:
            raw = lookup(_k(key.upper()))
            if raw and _is_hex_color(raw):
                palette[key] = _normalize_hex(raw)

        if env.get("NO_COLOR") is not None:
            color: Optional[bool] = False
        elif (env.get("FORCE_COLOR") or "").strip().lower() in _TRUTHY:
            color = True
        else:
            color = None
        colorterm = (env.get("COLORTERM") or "").lower()

        log_level = (lookup(_k("LOG_LEVEL")) or "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "WARNING"

        return Settings(
            data_dir=data_dir,
            tasks_file=data_dir / TASKS_FILENAME,
            log_level=log_level,
            color=color,
            truecolor=any(tok in colorterm for tok in ("truecolor", "24bit")),
            palette=palette,
        )


def ensure_data_dir(settings: Settings) -> Path:
    """Create the data directory (owner-only) if it does not exist yet."""
    try:
        settings.data_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Error creating task directory {settings.data_dir}: {exc}") from exc
    return settings.data_dir
