"""Todo list logic: holds the ordered tasks, positional mutation, and rendering.

Tasks are addressed by their 1-based position in the list. Positions are not
stable: deleting a task shifts every later task one place up.
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence
import logging
import re

from todolist.errors import AlreadyEmptyError, InvalidIndexError
from todolist.models import Task
from todolist.storage import Storage, TODO_FILE, PathLike
from todolist.theme import PLAIN, Theme

log = logging.getLogger(__name__)

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
UNSET_MARK = "…"
DONE_MARK = "✓"
PENDING_MARK = "━"

# box drawing: outer double frame, inner single rules
TOP = ("╔", "═", "╤", "╗")
MID = ("╟", "─", "┼", "╢")
BOTTOM = ("╚", "═", "╧", "╝")
OUTER_V = "║"
INNER_V = "│"


def format_timestamp(ts: Optional[datetime], now: datetime) -> str:
    """Short human form of a timestamp relative to ``now``.

    None -> placeholder, same calendar day -> "Today - HH:MM",
    anything else -> "D Mon - HH:MM".
    """
    if ts is None:
        return UNSET_MARK
    if ts.date() == now.date():
        return f"Today - {ts:%H:%M}"
    return f"{ts.day} {ts:%b} - {ts:%H:%M}"


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


class TodoList:
    def __init__(self, entries: Optional[Iterable[Mapping[str, Any]]] = None):
        self.tasks: List[Task] = []
        if entries:
            self._load_from_entries(entries)

    # -------------------- loading / storing --------------------
    def _load_from_entries(self, entries: Iterable[Mapping[str, Any]]) -> None:
        self.tasks = [Task.from_dict(raw) for raw in entries]

    @classmethod
    def load(cls, path: PathLike = TODO_FILE) -> TodoList:
        """Hydrate a list from ``path``; missing or empty file gives an empty list."""
        return cls(Storage.load_tasks(path))

    def store(self, path: PathLike = TODO_FILE) -> None:
        Storage.save_tasks(self.get_tasks(), path)

    def get_tasks(self) -> List[Dict[str, Any]]:
        return [task.to_dict() for task in self.tasks]

    # -------------------- sequence protocol --------------------
    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __getitem__(self, idx: int) -> Task:
        return self.tasks[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TodoList):
            return NotImplemented
        return self.tasks == other.tasks

    # -------------------- index handling --------------------
    def _resolve(self, index: int) -> int:
        """Validate a 1-based index and return the 0-based position."""
        if index < 1 or index > len(self.tasks):
            raise InvalidIndexError(index, len(self.tasks))
        return index - 1

    def check_index(self, index: int) -> None:
        """Raise InvalidIndexError unless 1 <= index <= len(self)."""
        self._resolve(index)

    # -------------------- task operations --------------------
    def add(self, text: str) -> Task:
        task = Task(task=text)
        self.tasks.append(task)
        log.debug('added task %d: %r', len(self.tasks), text)
        return task

    def complete(self, index: int) -> Task:
        """Mark task ``index`` done. Completing twice refreshes completed_at."""
        task = self.tasks[self._resolve(index)]
        task.complete()
        log.debug('completed task %d', index)
        return task

    def edit(self, index: int, text: str) -> Task:
        task = self.tasks[self._resolve(index)]
        task.task = text
        log.debug('edited task %d: %r', index, text)
        return task

    def delete(self, index: int) -> Task:
        task = self.tasks.pop(self._resolve(index))
        log.debug('deleted task %d', index)
        return task

    def delete_all(self) -> int:
        if not self.tasks:
            raise AlreadyEmptyError()
        removed = len(self.tasks)
        self.tasks.clear()
        log.debug('deleted all %d task(s)', removed)
        return removed

    # -------------------- queries --------------------
    def count_pending(self) -> int:
        return sum(1 for t in self.tasks if not t.done)

    def count_completed(self) -> int:
        return sum(1 for t in self.tasks if t.done)

    def filter_completed(self) -> TodoList:
        return self._subset(t for t in self.tasks if t.done)

    def filter_pending(self) -> TodoList:
        return self._subset(t for t in self.tasks if not t.done)

    def view(self, name: str) -> TodoList:
        if name == 'all':
            return self
        if name == 'done':
            return self.filter_completed()
        if name == 'pending':
            return self.filter_pending()
        raise ValueError(f'unknown view: {name}')

    @classmethod
    def _subset(cls, tasks: Iterable[Task]) -> TodoList:
        subset = cls()
        subset.tasks = list(tasks)
        return subset

    # -------------------- display --------------------
    def render(self, now: Optional[datetime] = None, show_index: bool = True,
               theme: Theme = PLAIN) -> str:
        """Render the tasks as a box-drawn table, rows in list order."""
        now = now or datetime.now()
        headers = ["Task", "Status", "Created At", "Completed At"]
        if show_index:
            headers.insert(0, "#")
        rows = [self._row(pos, task, now, show_index, theme)
                for pos, task in enumerate(self.tasks, start=1)]
        widths = self._compute_column_widths(headers, rows)
        return "\n".join(self._draw(headers, rows, widths, theme))

    def report(self, view: str = 'all', now: Optional[datetime] = None,
               theme: Theme = PLAIN) -> str:
        """Full listing: timestamp header, table, and pending/completed footer.

        Filtered views drop the index column since positions inside a
        subset do not match the positions commands expect.
        """
        now = now or datetime.now()
        subset = self.view(view)
        lines = ["", f"{now:%a, %d %b %Y %H:%M:%S}", ""]
        if not subset.tasks:
            lines.append(theme.muted("(empty)"))
        lines.append(subset.render(now=now, show_index=(view == 'all'), theme=theme))
        lines.append("")
        lines.append("\t" + theme.warn(f"pending: {self.count_pending()}")
                     + "\t\t" + theme.ok(f"completed: {self.count_completed()}"))
        lines.append("")
        return "\n".join(lines)

    # ---- rows ----
    @staticmethod
    def _row(pos: int, task: Task, now: datetime, show_index: bool, theme: Theme) -> List[str]:
        if task.done:
            text = theme.ok(f"{DONE_MARK} {task.task}")
            status = theme.ok("COMPLETED")
        else:
            text = theme.todo(f"{PENDING_MARK} {task.task}")
            status = theme.warn("PENDING")
        row = [
            text,
            status,
            format_timestamp(task.created_at, now),
            format_timestamp(task.completed_at, now),
        ]
        if show_index:
            row.insert(0, str(pos))
        return row

    # ---- width calculation ----
    @staticmethod
    def _compute_column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[int]:
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], visible_len(cell))
        return widths

    # ---- rendering ----
    @staticmethod
    def _pad(cell: str, width: int, center: bool = False) -> str:
        pad = width - visible_len(cell)
        if pad <= 0:
            return cell
        if center:
            left = pad // 2
            return ' ' * left + cell + ' ' * (pad - left)
        return cell + ' ' * pad

    def _draw(self, headers: Sequence[str], rows: Sequence[Sequence[str]],
              widths: Sequence[int], theme: Theme) -> List[str]:
        def rule(parts) -> str:
            left, fill, cross, right = parts
            return theme.frame(left + cross.join(fill * (w + 2) for w in widths) + right)

        def line(cells: Sequence[str], center: bool = False) -> str:
            padded = [' ' + self._pad(c, w, center) + ' ' for c, w in zip(cells, widths)]
            return (theme.frame(OUTER_V) + theme.frame(INNER_V).join(padded)
                    + theme.frame(OUTER_V))

        out = [rule(TOP), line([theme.header(h) for h in headers], center=True), rule(MID)]
        out.extend(line(row) for row in rows)
        out.append(rule(BOTTOM))
        return out

    def __str__(self) -> str:
        return f'Pending: {self.count_pending()} tasks, Completed: {self.count_completed()} tasks'
