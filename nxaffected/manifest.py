"""Manifest checks — ``package.json`` loading and the ``nx`` script gate."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from nxaffected.errors import ManifestLoadError, MissingNxScriptError

log = structlog.get_logger("nxaffected.manifest")

MANIFEST_FILENAME = "package.json"
NX_SCRIPT = "nx"


def read_manifest(path: str | Path = MANIFEST_FILENAME) -> dict[str, str]:
    """Return the ``scripts`` mapping declared in the manifest at *path*.

    Non-string script values are dropped. Raises ``OSError`` or
    ``ValueError`` if the file cannot be read or is not a JSON object.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a JSON object")

    scripts = raw.get("scripts")
    if not isinstance(scripts, dict):
        return {}
    return {k: v for k, v in scripts.items() if isinstance(v, str)}


def assert_has_nx_script(path: str | Path = MANIFEST_FILENAME) -> None:
    """Fail unless the manifest at *path* declares a string ``nx`` script."""
    try:
        scripts = read_manifest(path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        raise ManifestLoadError(
            "Failed to load the 'package.json' file, "
            "did you setup your project correctly?"
        ) from exc

    log.info("found manifest", path=str(path))

    if NX_SCRIPT not in scripts:
        raise MissingNxScriptError(
            "Failed to locate the 'nx' script in package.json, "
            "did you setup your project with Nx's CLI?"
        )

    log.info("found nx script", command=scripts[NX_SCRIPT])
