"""Rendering of task listings: column sizing, wrapping and coloring.

Columns are ID, STATUS and DESCRIPTION. The description column takes the
remaining terminal width and wraps on word boundaries; continuation lines
are indented under it. Padding is applied before styling so ANSI codes do
not affect alignment.
"""
from typing import Iterable, List, Optional, Sequence
import shutil

from models import Task
from theme import Theme

ID_WIDTH = 4
STATUS_WIDTH = 10
MIN_DESC_WIDTH = 20
SEP = " "
STATUS_LABELS = {False: "[PENDING]", True: "[DONE]"}


def render_tasks(tasks: Iterable[Task], theme: Theme, term_width: Optional[int] = None) -> List[str]:
    """Return the printable lines (header, rule, rows, rule) for ``tasks``."""
    tasks = list(tasks)
    if term_width is None:
        term_width = shutil.get_terminal_size((80, 24)).columns
    id_w = max([ID_WIDTH] + [len(str(t.id)) for t in tasks])
    fixed = id_w + STATUS_WIDTH + 2 * len(SEP)
    desc_w = max(MIN_DESC_WIDTH, term_width - fixed)

    header = SEP.join([f"{'ID':<{id_w}}", f"{'STATUS':<{STATUS_WIDTH}}", "DESCRIPTION"])
    rule = theme.style('-' * (fixed + desc_w), 'primary')
    lines = [theme.style(header, 'primary', bold=True), rule]
    for task in tasks:
        lines.extend(_render_row(task, theme, id_w, desc_w))
    lines.append(rule)
    return lines


def _render_row(task: Task, theme: Theme, id_w: int, desc_w: int) -> List[str]:
    status_key = theme.status_key(task.completed)
    id_cell = theme.style(f"{task.id:<{id_w}}", 'id', bold=True)
    status_cell = theme.style(f"{STATUS_LABELS[task.completed]:<{STATUS_WIDTH}}", status_key)
    wrapped = wrap_words(task.description, desc_w)
    rows = [SEP.join([id_cell, status_cell, wrapped[0]])]
    indent = ' ' * (id_w + STATUS_WIDTH + 2 * len(SEP))
    rows.extend(indent + part for part in wrapped[1:])
    return rows


def wrap_words(text: str, width: int) -> List[str]:
    """Greedy word wrap; a word longer than ``width`` gets a line to itself.

    Splits on single spaces only, so runs of spaces and tabs inside a line
    are shown as stored.
    """
    lines: List[str] = []
    current: Optional[str] = None
    limit = max(1, width)
    for w in text.split(' '):
        candidate = w if current is None else current + ' ' + w
        if not current or len(candidate) <= limit:
            current = candidate
        else:
            lines.append(current)
            current = w
    if current:
        lines.append(current)
    return lines or ['']


def summary(tasks: Sequence[Task]) -> str:
    done = sum(1 for t in tasks if t.completed)
    noun = 'task' if len(tasks) == 1 else 'tasks'
    return f"{len(tasks)} {noun}: {done} done, {len(tasks) - done} pending"
