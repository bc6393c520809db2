"""Report rendering — text, JSON, and GitHub Actions step outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import nxaffected
from nxaffected.models import AffectedResult


def render_text(result: AffectedResult) -> str:
    """One app per line; empty string when nothing is affected."""
    return "\n".join(result.apps)


def render_json(result: AffectedResult) -> str:
    """Produce stable JSON output."""
    doc: dict[str, Any] = {
        "tool": "nxaffected",
        "version": nxaffected.__version__,
        "package_manager": result.package_manager,
        "base": result.base,
        "apps": list(result.apps),
    }
    return json.dumps(doc, indent=2, ensure_ascii=False)


def write_github_output(result: AffectedResult, path: str | Path) -> None:
    """Append ``apps`` and ``apps_json`` step outputs to the file at *path*."""
    with open(Path(path), "a", encoding="utf-8") as f:
        f.write(f"apps={' '.join(result.apps)}\n")
        f.write(f"apps_json={json.dumps(result.apps)}\n")
