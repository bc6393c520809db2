"""Subprocess wrapper — the single mock seam for running external programs."""

from __future__ import annotations

import subprocess

import structlog

from nxaffected.errors import CommandError

log = structlog.get_logger("nxaffected.process")


def run_lines(
    program: str,
    args: list[str],
    cwd: str | None = None,
) -> list[str]:
    """Run *program* with *args*, wait for it, and return stdout split into lines.

    Raises ``CommandError`` if the program cannot be started or exits
    non-zero.
    """
    log.debug("running command", program=program, args=args, cwd=cwd)
    try:
        proc = subprocess.run(
            [program, *args],
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
        )
    except OSError as exc:
        raise CommandError(program, args) from exc

    if proc.returncode != 0:
        raise CommandError(program, args, proc.returncode, proc.stderr or "")

    return proc.stdout.splitlines()
