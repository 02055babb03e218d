"""Persistence for the task list: a flat file with one record per line.

Line format is ``id,status,description`` terminated by ``\\n`` where status
is ``0`` (pending) or ``1`` (completed). Decoding splits on the first two
commas only, so the description keeps any commas of its own.

Mutations (status change, delete) stream every line into a temporary file
next to the store and swap it in with ``os.replace``. Lines that do not
decode are never surfaced by ``list_tasks`` and are copied through verbatim.
"""
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Callable, Iterator, Optional

from models import Task, validate_description

logger = logging.getLogger(__name__)

# Text settings shared by every open: only "\n" ends a line, nothing is
# translated, and undecodable bytes survive a read/write cycle.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_NEWLINE = "\n"

LEADING_ID_RE = re.compile(r"(\d+),")
RECORD_RE = re.compile(r"(\d+),([01]),(.+)")

# Returns the replacement task, or None to drop the record.
Transform = Callable[[Task], Optional[Task]]


class StoreError(Exception):
    """The store file could not be opened, written or replaced."""


def encode_task(task: Task) -> str:
    return f"{task.id},{1 if task.completed else 0},{task.description}\n"


def decode_line(line: str) -> Optional[Task]:
    """Decode one raw line (terminator included); None when malformed."""
    m = RECORD_RE.fullmatch(line[:-1] if line.endswith("\n") else line)
    if not m:
        return None
    return Task(id=int(m.group(1)), description=m.group(3), completed=m.group(2) == "1")


def leading_id(line: str) -> Optional[int]:
    """Parse just the leading ``<digits>,`` field of a line."""
    m = LEADING_ID_RE.match(line)
    return int(m.group(1)) if m else None


class TaskStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def _open(self, mode: str):
        return open(self.path, mode, encoding=_ENCODING, errors=_ERRORS, newline=_NEWLINE)

    def exists(self) -> bool:
        return self.path.exists()

    def _ends_with_newline(self) -> bool:
        """True for a missing or empty file, else whether the last byte is \\n."""
        try:
            with open(self.path, "rb") as f:
                if f.seek(0, os.SEEK_END) == 0:
                    return True
                f.seek(-1, os.SEEK_END)
                return f.read(1) == b"\n"
        except FileNotFoundError:
            return True

    # -------------------- queries --------------------
    def next_id(self) -> int:
        """Highest id found at the start of any line, plus one.

        Rescans the whole file on every call; fine at personal scale.
        """
        max_id = 0
        try:
            with self._open("r") as f:
                for line in f:
                    tid = leading_id(line)
                    if tid is not None and tid > max_id:
                        max_id = tid
        except FileNotFoundError:
            return 1
        except OSError as exc:
            raise StoreError(f"Cannot read task file {self.path}: {exc}") from exc
        return max_id + 1

    def list_tasks(self) -> Iterator[Task]:
        """Yield well-formed records in file order; re-reads on each call.

        A missing file is an empty store.
        """
        try:
            f = self._open("r")
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StoreError(f"Cannot read task file {self.path}: {exc}") from exc
        with f:
            for lineno, line in enumerate(f, start=1):
                task = decode_line(line)
                if task is None:
                    logger.debug("Skipping malformed line %d in %s", lineno, self.path)
                    continue
                yield task

    # -------------------- mutations --------------------
    def add(self, description: str) -> Task:
        """Append a new pending task and return it."""
        validate_description(description)
        task = Task(id=self.next_id(), description=description)
        try:
            # terminate an unterminated last line instead of appending onto it
            prefix = "" if self._ends_with_newline() else "\n"
            with self._open("a") as f:
                f.write(prefix + encode_task(task))
        except OSError as exc:
            raise StoreError(f"Cannot open task file {self.path} for writing: {exc}") from exc
        logger.debug("Appended task id=%s to %s", task.id, self.path)
        return task

    def set_status(self, task_id: int, completed: bool) -> bool:
        """Mark one task completed/pending. Returns False if the id is absent."""
        def _mark(task: Task) -> Task:
            return Task(id=task.id, description=task.description, completed=completed)
        return self._rewrite(task_id, _mark)

    def delete(self, task_id: int) -> bool:
        """Remove one task. Returns False if the id is absent."""
        return self._rewrite(task_id, lambda task: None)

    def _rewrite(self, task_id: int, transform: Transform) -> bool:
        """Copy the store into a temp file applying ``transform`` to ``task_id``.

        Every other line, malformed ones included, is copied unchanged. The
        temp file replaces the store even when the id is not found.
        """
        try:
            src = self._open("r")
        except FileNotFoundError:
            logger.debug("No task file at %s; nothing to rewrite", self.path)
            return False
        except OSError as exc:
            raise StoreError(f"Cannot read task file {self.path}: {exc}") from exc

        found = False
        tmp_path: Optional[str] = None
        try:
            with src:
                fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tasks_", suffix=".tmp")
                with os.fdopen(fd, "w", encoding=_ENCODING, errors=_ERRORS, newline=_NEWLINE) as dst:
                    for line in src:
                        task = decode_line(line)
                        if task is None or task.id != task_id:
                            dst.write(line)
                            continue
                        found = True
                        replacement = transform(task)
                        if replacement is not None:
                            dst.write(encode_task(replacement))
                    dst.flush()
                    os.fsync(dst.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except FileNotFoundError:
                    pass
            raise StoreError(f"Cannot rewrite task file {self.path}: {exc}") from exc
        logger.debug("Rewrote %s (task id=%s found=%s)", self.path, task_id, found)
        return found
