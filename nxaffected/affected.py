"""Affected-apps extraction — run ``nx affected:apps`` and parse its output.

The runner output is framed differently by every package manager. A typical
yarn run looks like::

    yarn run v1.22.19
    $ nx affected:apps --plain --all
    app-one app-two
    Done in 1.21s.

The parser looks for the echoed ``nx ... affected:apps`` banner and the
``Done in`` footer. When exactly one line sits between them, or the footer
is missing, that line alone is the payload. Otherwise every non-empty line
is kept and tokenised.
"""

from __future__ import annotations

from typing import Callable, Sequence

import structlog

log = structlog.get_logger("nxaffected.affected")

NxRunner = Callable[[list[str]], Sequence[str]]


def build_affected_args(base_sha: str | None) -> list[str]:
    """Return the ``nx`` arguments for *base_sha*, or for every app when empty."""
    args = ["affected:apps", "--plain"]
    if base_sha:
        args += [f"--base={base_sha}", "--head=HEAD"]
    else:
        args.append("--all")
    return args


def _find(lines: list[str], predicate: Callable[[str], bool]) -> int:
    for i, line in enumerate(lines):
        if predicate(line):
            return i
    return -1


def parse_affected_output(raw_lines: Sequence[str]) -> list[str]:
    """Turn raw runner output into the list of affected app names."""
    lines = [line.strip() for line in raw_lines]
    lines = [line for line in lines if line]
    for line in lines:
        log.debug("output line", line=line)

    i_start = _find(lines, lambda line: "nx" in line and "affected:apps" in line)
    i_end = _find(lines, lambda line: line.startswith("Done in"))
    log.debug("output landmarks", i_start=i_start, i_end=i_end)

    if i_start != -1 and (i_end == i_start + 2 or i_end == -1):
        # banner may be the last line, leaving no payload at all
        lines = lines[i_start + 1 : i_start + 2]

    return " ".join(lines).split()


def get_affected_apps(base_sha: str | None, nx: NxRunner) -> list[str]:
    """Ask *nx* for the apps affected since *base_sha* and return their names.

    Failures raised by *nx* propagate unchanged.
    """
    output = nx(build_affected_args(base_sha))
    log.debug("nx output", content=list(output))
    return parse_affected_output(output)
