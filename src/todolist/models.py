"""Data models for the todo list.

Exposes the Task dataclass. Timestamps are naive local datetimes in memory
and ISO 8601 strings on disk; an unset completion time is None / null.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from todolist.errors import DecodeError


@dataclass
class Task:
    """A single todo entry.

    Fields:
        task: Short, single-line description.
        done: Completion flag.
        created_at: When the task was added; never changes afterwards.
        completed_at: When the task was last marked done (None until then).
    """
    task: str
    done: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def complete(self, when: Optional[datetime] = None) -> None:
        self.done = True
        self.completed_at = when or datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'task': self.task,
            'done': self.done,
            'created_at': self.created_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        """Build a Task from one decoded JSON object.

        Raises DecodeError when the object does not have the expected shape.
        """
        if not isinstance(raw, Mapping):
            raise DecodeError(f'expected an object per task, got {type(raw).__name__}')
        text = raw.get('task')
        if not isinstance(text, str):
            raise DecodeError('task entry is missing its "task" text')
        done = raw.get('done', False)
        if not isinstance(done, bool):
            raise DecodeError(f'"done" must be true or false, got {done!r}')
        created_at = _parse_time(raw.get('created_at'), 'created_at')
        return cls(
            task=text,
            done=done,
            created_at=created_at or datetime.now(),
            completed_at=_parse_time(raw.get('completed_at'), 'completed_at'),
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(task={self.task!r}, done={self.done})"


def _parse_time(value: Any, name: str) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise DecodeError(f'"{name}" must be an ISO timestamp, got {value!r}')
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise DecodeError(f'"{name}" is not an ISO timestamp: {value!r}') from exc
