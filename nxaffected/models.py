"""Data models used throughout nxaffected."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from nxaffected import process

# ---------------------------------------------------------------------------
# Command wrapper
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandWrapper:
    """A program bound to a fixed prefix of arguments.

    Calling the wrapper appends the extra arguments, runs the program to
    completion and returns its stdout as a list of lines.
    """

    program: str
    args: tuple[str, ...] = ()
    cwd: str | None = None

    def __call__(self, extra_args: list[str] | tuple[str, ...] = ()) -> list[str]:
        return process.run_lines(self.program, [*self.args, *extra_args], cwd=self.cwd)

    def __str__(self) -> str:
        return " ".join([self.program, *self.args])


class CommandBuilder:
    """Fluent builder that freezes into a ``CommandWrapper``."""

    def __init__(self) -> None:
        self._command: str | None = None
        self._args: list[str] = []
        self._cwd: str | None = None

    def with_command(self, command: str) -> CommandBuilder:
        self._command = command
        return self

    def with_args(self, *args: str) -> CommandBuilder:
        self._args.extend(args)
        return self

    def with_cwd(self, cwd: str | None) -> CommandBuilder:
        self._cwd = cwd
        return self

    def build(self) -> CommandWrapper:
        if not self._command:
            raise ValueError("CommandBuilder.build() called without a command")
        return CommandWrapper(program=self._command, args=tuple(self._args), cwd=self._cwd)


# ---------------------------------------------------------------------------
# Package manager descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManagerDescriptor:
    """One detection candidate: a manager, its lock file, and its nx factory."""

    name: str
    lock_file: str
    factory: Callable[[str | None], CommandWrapper] = field(compare=False)


# ---------------------------------------------------------------------------
# Affected result (reports)
# ---------------------------------------------------------------------------


@dataclass
class AffectedResult:
    """Outcome of one ``nxaffected affected`` run."""

    package_manager: str
    base: str | None = None  # None means every app was considered
    apps: list[str] = field(default_factory=list)
