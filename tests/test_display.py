# tests/test_display.py

from __future__ import annotations

from display import render_tasks, summary, wrap_words
from models import Task
from theme import Theme, _rgb_to_256


def plain() -> Theme:
    return Theme(color=False)


def test_render_table_layout() -> None:
    tasks = [Task(1, "buy milk"), Task(12, "file taxes", completed=True)]

    lines = render_tasks(tasks, plain(), term_width=60)

    assert lines[0].split() == ["ID", "STATUS", "DESCRIPTION"]
    assert set(lines[1]) == {"-"}
    assert lines[2] == "1    [PENDING]  buy milk"
    assert lines[3] == "12   [DONE]     file taxes"
    assert lines[-1] == lines[1]


def test_long_descriptions_wrap_under_column() -> None:
    words = " ".join(["word"] * 12)
    lines = render_tasks([Task(1, words)], plain(), term_width=40)
    rows = lines[2:-1]

    assert len(rows) > 1
    assert all(len(r) <= 40 for r in rows)
    assert all(r.startswith(" " * 16) for r in rows[1:])
    assert " ".join(r.strip() for r in rows).endswith(words)


def test_wide_ids_widen_column() -> None:
    lines = render_tasks([Task(123456, "x")], plain(), term_width=80)
    assert lines[2].startswith("123456 [PENDING]")


def test_wrap_words() -> None:
    assert wrap_words("a bb ccc", 4) == ["a bb", "ccc"]
    assert wrap_words("unbreakableword", 5) == ["unbreakableword"]
    assert wrap_words("", 10) == [""]


def test_summary() -> None:
    assert summary([Task(1, "a")]) == "1 task: 0 done, 1 pending"
    assert summary([Task(1, "a"), Task(2, "b", completed=True)]) == "2 tasks: 1 done, 1 pending"


def test_theme_styles_only_when_enabled() -> None:
    assert plain().style("x", "id", bold=True) == "x"
    styled = Theme(color=True).style("x", "done")
    assert styled.startswith("\x1b[") and "x" in styled


def test_theme_color_depth() -> None:
    assert _rgb_to_256(0, 0, 0) == 16
    assert _rgb_to_256(255, 255, 255) == 231
    truecolor = Theme({"done": "#A7E399"}, truecolor=True, color=True)
    assert "38;2;167;227;153" in truecolor.style("x", "done")
    assert "38;5;" in Theme(truecolor=False, color=True).style("x", "done")


def test_wrap_keeps_inner_whitespace() -> None:
    assert wrap_words("a  b\tc", 20) == ["a  b\tc"]
    lines = render_tasks([Task(1, "two  spaces")], plain(), term_width=60)
    assert lines[2].endswith("two  spaces")
