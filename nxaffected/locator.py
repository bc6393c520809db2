"""Package-manager detection — lock-file probing in fixed priority order."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from nxaffected.errors import PackageManagerNotFoundError
from nxaffected.manifest import MANIFEST_FILENAME, assert_has_nx_script
from nxaffected.models import CommandBuilder, CommandWrapper, ManagerDescriptor

log = structlog.get_logger("nxaffected.locator")


def _npm(cwd: str | None) -> CommandWrapper:
    return CommandBuilder().with_command("npm").with_args("run", "nx", "--").with_cwd(cwd).build()


def _yarn(cwd: str | None) -> CommandWrapper:
    return CommandBuilder().with_command("yarn").with_args("nx").with_cwd(cwd).build()


def _pnpm(cwd: str | None) -> CommandWrapper:
    return CommandBuilder().with_command("pnpm").with_args("run", "nx", "--").with_cwd(cwd).build()


# Order matters: the first lock file found wins.
PACKAGE_MANAGERS: tuple[ManagerDescriptor, ...] = (
    ManagerDescriptor("npm", "package-lock.json", _npm),
    ManagerDescriptor("yarn", "yarn.lock", _yarn),
    ManagerDescriptor("pnpm", "pnpm-lock.yaml", _pnpm),
)


def _lock_file_exists(path: Path) -> bool:
    """Stat *path*; any error counts as absent."""
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def detect_package_manager(
    cwd: str | Path = ".",
    candidates: tuple[ManagerDescriptor, ...] = PACKAGE_MANAGERS,
) -> ManagerDescriptor | None:
    """Return the first candidate whose lock file exists under *cwd*, else ``None``."""
    root = Path(cwd)
    for descriptor in candidates:
        if _lock_file_exists(root / descriptor.lock_file):
            return descriptor
        log.debug("lock file not found", manager=descriptor.name, lock_file=descriptor.lock_file)
    return None


def locate_nx(
    cwd: str | Path = ".",
    manifest_path: str | Path | None = None,
) -> CommandWrapper:
    """Check the manifest, detect the package manager, and return an nx runner.

    Raises ``ManifestLoadError`` / ``MissingNxScriptError`` before any lock
    file is probed, and ``PackageManagerNotFoundError`` when no supported
    lock file exists.
    """
    root = Path(cwd)
    assert_has_nx_script(manifest_path if manifest_path is not None else root / MANIFEST_FILENAME)

    descriptor = detect_package_manager(root)
    if descriptor is None:
        raise PackageManagerNotFoundError(
            "Failed to detect your package manager, are you using npm, yarn or pnpm?"
        )

    log.info("using package manager", manager=descriptor.name)
    return descriptor.factory(str(root))
