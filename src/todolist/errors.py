"""Exceptions raised by the todo list core.

Everything derives from TodoError so the CLI can report failures at a
single boundary. Filesystem failures are left as plain OSError.
"""


class TodoError(Exception):
    """Base class for todo list failures."""


class InvalidIndexError(TodoError, IndexError):
    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        if length:
            msg = f'invalid index {index} (expected 1..{length})'
        else:
            msg = f'invalid index {index} (no tasks)'
        super().__init__(msg)


class AlreadyEmptyError(TodoError):
    def __init__(self) -> None:
        super().__init__('todo list is already empty')


class DecodeError(TodoError, ValueError):
    """Persisted file exists but does not hold a task list."""


class EncodeError(TodoError, ValueError):
    """Task list could not be serialized."""


class EmptyInputError(TodoError, ValueError):
    def __init__(self) -> None:
        super().__init__('empty todo is not allowed')
