"""External process tasks with per-task environment overrides and tolerated exit codes."""

from .task import (
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    MKDIR_EXISTS,
    RM_MISSING,
    RUSTUP_ALREADY_INSTALLED,
    Task,
    TaskFailedError,
    TaskResult,
)

__all__ = [
    "EXIT_NOT_EXECUTABLE",
    "EXIT_NOT_FOUND",
    "MKDIR_EXISTS",
    "RM_MISSING",
    "RUSTUP_ALREADY_INSTALLED",
    "Task",
    "TaskFailedError",
    "TaskResult",
]
