"""Data models for the task tracker.

Exposes the Task dataclass plus the description rules the store enforces.
Status is a plain boolean on the model; the on-disk form is "0"/"1".
"""
from __future__ import annotations
from dataclasses import dataclass

MAX_DESCRIPTION_BYTES = 256


class InvalidDescription(ValueError):
    """Description cannot be stored as a single record line."""


@dataclass
class Task:
    """A single task record.

    Fields:
        id: Positive integer, unique among the records in the store.
        description: Single-line free text (commas allowed, newlines not).
        completed: True once marked done, False while pending.
    """
    id: int
    description: str
    completed: bool = False

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description!r}, completed={self.completed})"


def validate_description(description: str) -> str:
    """Return the description unchanged or raise InvalidDescription.

    Empty text, line breaks and anything whose UTF-8 form exceeds
    MAX_DESCRIPTION_BYTES are rejected; nothing is truncated or escaped.
    """
    if not description or not description.strip():
        raise InvalidDescription("Description required.")
    if "\n" in description or "\r" in description:
        raise InvalidDescription("Description must be a single line.")
    size = len(description.encode("utf-8", "surrogateescape"))
    if size > MAX_DESCRIPTION_BYTES:
        raise InvalidDescription(
            f"Description is {size} bytes; the limit is {MAX_DESCRIPTION_BYTES}."
        )
    return description
