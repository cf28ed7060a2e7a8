"""Command-line todo list with JSON persistence."""
from todolist.errors import (
    TodoError,
    InvalidIndexError,
    AlreadyEmptyError,
    DecodeError,
    EncodeError,
    EmptyInputError,
)
from todolist.models import Task
from todolist.todos import TodoList

__version__ = "0.1.0"

__all__ = [
    'Task', 'TodoList', 'TodoError', 'InvalidIndexError', 'AlreadyEmptyError',
    'DecodeError', 'EncodeError', 'EmptyInputError',
]
