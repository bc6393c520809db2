"""Error taxonomy surfaced to the CLI and the CI layer."""

from __future__ import annotations


class NxAffectedError(Exception):
    """Base class for every user-facing failure."""


class ManifestLoadError(NxAffectedError):
    """The project manifest could not be read or parsed."""


class MissingNxScriptError(NxAffectedError):
    """The manifest parsed but declares no ``nx`` script."""


class PackageManagerNotFoundError(NxAffectedError):
    """No supported lock file was found."""


class CommandError(NxAffectedError):
    """A subprocess could not be started or exited with a non-zero status."""

    def __init__(
        self,
        program: str,
        args: list[str],
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.program = program
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        cmdline = " ".join([program, *args])
        if returncode is None:
            msg = f"Failed to start '{cmdline}'"
        else:
            msg = f"'{cmdline}' exited with status {returncode}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)
