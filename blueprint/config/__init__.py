from .loader import DEFAULT_PATH, load_tasklist, normalise_line_endings, resolve_path
from .types import (
    ConfigError,
    ErrorHandler,
    ErrorPolicy,
    InvalidTaskError,
    NoTaskSpecError,
    Task,
    TaskList,
    TooManyPathsError,
    ValidationError,
)

__all__ = [
    "DEFAULT_PATH",
    "load_tasklist",
    "normalise_line_endings",
    "resolve_path",
    "ConfigError",
    "ErrorHandler",
    "ErrorPolicy",
    "InvalidTaskError",
    "NoTaskSpecError",
    "Task",
    "TaskList",
    "TooManyPathsError",
    "ValidationError",
]
