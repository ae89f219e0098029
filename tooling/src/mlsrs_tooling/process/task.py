"""External process invocation: Task (what to run) and TaskResult (how it ended).

A Task is an immutable description of one external tool call. ``Task.run``
overlays the Task's environment overrides on the inherited environment, spawns
the process with the caller's stdin/stdout/stderr, blocks until it exits, and
classifies the exit status against the accepted exit codes. Exit code 0 is
always accepted. There is no timeout.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

log = logging.getLogger(__name__)

# Non-zero exit codes that mean "desired state already holds".
RUSTUP_ALREADY_INSTALLED = 1
RM_MISSING = 1
MKDIR_EXISTS = 1

# Shell conventions for processes that never started.
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


class TaskFailedError(RuntimeError):
    """A Task exited with a status outside its accepted exit codes."""

    def __init__(self, path: Path, exit_code: int) -> None:
        self.path = path
        self.exit_code = exit_code
        super().__init__(f"{path} failed with exit code {exit_code}")


@dataclass(frozen=True)
class TaskResult:
    path: Path
    exit_code: int
    ok: bool
    reason: str = ""

    def check(self) -> TaskResult:
        """Return self on success; raise TaskFailedError otherwise."""
        if not self.ok:
            raise TaskFailedError(self.path, self.exit_code)
        return self

    def __str__(self) -> str:
        if self.ok:
            return f"{self.path} exited with code {self.exit_code}"
        msg = f"{self.path} failed with exit code {self.exit_code}"
        return f"{msg} ({self.reason})" if self.reason else msg


def _freeze_env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in (env or {}).items()})


@dataclass(frozen=True)
class Task:
    """One external tool invocation.

    path: absolute path to the executable.
    arguments: argv after the executable.
    env: overrides applied on top of os.environ (override wins).
    accepted_exit_codes: non-zero codes treated as success, in addition to 0.
    cwd: working directory for the process (default: inherit).
    """

    path: Path
    arguments: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    accepted_exit_codes: frozenset[int] = frozenset({0})
    cwd: Path | None = None

    def __post_init__(self) -> None:
        path = Path(self.path)
        if not path.is_absolute():
            msg = f"Task executable must be an absolute path: {self.path}"
            raise ValueError(msg)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "arguments", tuple(str(a) for a in self.arguments))
        object.__setattr__(self, "env", _freeze_env(self.env))
        object.__setattr__(self, "accepted_exit_codes", frozenset({0, *self.accepted_exit_codes}))
        if self.cwd is not None:
            object.__setattr__(self, "cwd", Path(self.cwd))

    @property
    def argv(self) -> list[str]:
        return [str(self.path), *self.arguments]

    def effective_env(self) -> dict[str, str]:
        """Inherited environment with this Task's overrides applied."""
        env = dict(os.environ)
        env.update(self.env)
        return env

    def describe(self) -> str:
        """Shell-style rendering of the command, for dry runs and logs."""
        parts = [f"{k}={shlex.quote(v)}" for k, v in sorted(self.env.items())]
        parts.append(shlex.join(self.argv))
        cmd = " ".join(parts)
        if self.cwd is not None:
            return f"(cd {shlex.quote(str(self.cwd))} && {cmd})"
        return cmd

    def run(self, allow_exit_codes: Iterable[int] = ()) -> TaskResult:
        """Spawn a fresh process, wait for it, and classify its exit status."""
        accepted = self.accepted_exit_codes | frozenset(allow_exit_codes)
        log.debug("Running %s", self.describe())
        try:
            r = subprocess.run(
                self.argv,
                env=self.effective_env(),
                cwd=str(self.cwd) if self.cwd is not None else None,
            )
            code = r.returncode
        except OSError as e:
            code, reason = self._spawn_failure(e)
            log.error("Could not start %s: %s", self.path, reason)
            return TaskResult(self.path, code, code in accepted, reason)
        ok = code in accepted
        if ok and code != 0:
            log.debug("%s exited with tolerated code %d", self.path, code)
        return TaskResult(path=self.path, exit_code=code, ok=ok)

    def _spawn_failure(self, e: OSError) -> tuple[int, str]:
        """Exit code and cause for a process that never started."""
        if self.cwd is not None and not self.cwd.is_dir():
            return EXIT_NOT_FOUND, f"working directory missing or not a directory: {self.cwd}"
        if isinstance(e, FileNotFoundError):
            return EXIT_NOT_FOUND, "executable not found"
        return EXIT_NOT_EXECUTABLE, f"cannot execute: {e.strerror or e}"
