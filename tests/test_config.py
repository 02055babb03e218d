# tests/test_config.py

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from config import (
    HEX_DONE_DEFAULT,
    HEX_PRIMARY_DEFAULT,
    ConfigError,
    Settings,
    ensure_data_dir,
)


def test_paths_derive_from_home(tmp_path: Path) -> None:
    s = Settings.from_env({"HOME": str(tmp_path)})
    assert s.data_dir == tmp_path / ".local" / "taskmanager"
    assert s.tasks_file == tmp_path / ".local" / "taskmanager" / "tasks.txt"
    assert s.log_level == "WARNING"
    assert s.color is None
    assert s.palette["primary"] == HEX_PRIMARY_DEFAULT


@pytest.mark.parametrize("environ", [{}, {"HOME": ""}])
def test_missing_home_raises(environ) -> None:
    with pytest.raises(ConfigError, match="HOME"):
        Settings.from_env(environ)


def test_palette_priority_env_over_dotenv(tmp_path: Path) -> None:
    data_dir = tmp_path / ".local" / "taskmanager"
    data_dir.mkdir(parents=True)
    (data_dir / ".env").write_text(
        "TASKMAN_DONE=#112233\nTASKMAN_PRIMARY=#445566\nTASKMAN_ID=nothex\nTASKMAN_LOG_LEVEL=debug\n"
    )

    s = Settings.from_env({"HOME": str(tmp_path), "TASKMAN_PRIMARY": "abcdef"})

    assert s.palette["done"] == "#112233"
    assert s.palette["primary"] == "#abcdef"
    assert s.palette["id"] != "nothex"
    assert s.log_level == "DEBUG"


def test_invalid_palette_value_falls_back(tmp_path: Path) -> None:
    s = Settings.from_env({"HOME": str(tmp_path), "TASKMAN_DONE": "#12345"})
    assert s.palette["done"] == HEX_DONE_DEFAULT


def test_unknown_log_level_falls_back(tmp_path: Path) -> None:
    s = Settings.from_env({"HOME": str(tmp_path), "TASKMAN_LOG_LEVEL": "chatty"})
    assert s.log_level == "WARNING"


@pytest.mark.parametrize(
    "extra, expected",
    [
        ({"NO_COLOR": ""}, False),
        ({"NO_COLOR": "1", "FORCE_COLOR": "1"}, False),
        ({"FORCE_COLOR": "yes"}, True),
        ({"FORCE_COLOR": "0"}, None),
    ],
)
def test_color_mode(tmp_path: Path, extra, expected) -> None:
    s = Settings.from_env({"HOME": str(tmp_path), **extra})
    assert s.color is expected


def test_truecolor_detection(tmp_path: Path) -> None:
    assert Settings.from_env({"HOME": str(tmp_path), "COLORTERM": "truecolor"}).truecolor
    assert not Settings.from_env({"HOME": str(tmp_path), "COLORTERM": ""}).truecolor


def test_ensure_data_dir_creates_owner_only(tmp_path: Path) -> None:
    s = Settings.from_env({"HOME": str(tmp_path)})
    path = ensure_data_dir(s)
    assert path.is_dir()
    assert stat.S_IMODE(path.stat().st_mode) == 0o700
    # second call is a no-op
    assert ensure_data_dir(s) == path


def test_ensure_data_dir_failure(tmp_path: Path) -> None:
    (tmp_path / ".local").write_text("")
    s = Settings.from_env({"HOME": str(tmp_path)})
    with pytest.raises(ConfigError):
        ensure_data_dir(s)
