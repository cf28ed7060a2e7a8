"""Persistence helpers (load/save) for the todo list.

The file holds a single JSON array, one object per task:
``{"task": ..., "done": ..., "created_at": ..., "completed_at": ...}``.
No envelope and no version field.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from todolist.errors import DecodeError, EncodeError

log = logging.getLogger(__name__)

TODO_FILE = Path('.todo.json')
FILE_MODE = 0o644

TaskEntry = Dict[str, Any]
PathLike = Union[str, os.PathLike]


class Storage:
    @staticmethod
    def load_tasks(path: PathLike = TODO_FILE) -> List[TaskEntry]:
        """Load raw task entries from disk.

        Missing file -> empty list. Zero-byte file -> empty list.
        Anything else that is not a JSON array raises DecodeError.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            log.debug('no todo file at %s, starting empty', path)
            return []
        if not data.strip():
            log.debug('todo file %s is empty, starting empty', path)
            return []
        try:
            entries = json.loads(data)
        except ValueError as exc:
            raise DecodeError(f'{path}: {exc}') from exc
        if not isinstance(entries, list):
            raise DecodeError(f'{path}: expected a JSON array of tasks, got {type(entries).__name__}')
        log.debug('loaded %d task(s) from %s', len(entries), path)
        return entries

    @staticmethod
    def save_tasks(entries: List[TaskEntry], path: PathLike = TODO_FILE) -> None:
        """Persist task entries to disk (pretty-printed), replacing the file in one step."""
        path = Path(path)
        try:
            payload = (json.dumps(entries, indent=4, ensure_ascii=False) + '\n').encode('utf-8')
        except (TypeError, ValueError) as exc:
            raise EncodeError(f'cannot encode tasks: {exc}') from exc
        _atomic_write(path, payload)
        log.debug('stored %d task(s) to %s', len(entries), path)


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data to a sibling temp file, then rename it over path.

    The temp file is removed if anything fails before the rename lands.
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=dir_path, prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as tf:
            tf.write(data)
        os.chmod(temp_name, FILE_MODE)
        os.replace(temp_name, path)
    except BaseException:
        os.unlink(temp_name)
        raise
