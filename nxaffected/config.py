"""Unified configuration loader for nxaffected.

Configuration is resolved in priority order: **project > user > defaults**.

1. **Project-level** — ``.nxaffected.yml`` in (or above) the working directory.
2. **User-level** — ``~/.nxaffected/config.yml``.
3. **Built-in defaults** — ``manifest: package.json``, ``format: text``, etc.

Both files share the same format::

    affected:
      base: ""            # empty means every app (--all)
      manifest: package.json
      format: text        # text | json
    logging:
      level: INFO
      format: console     # console | json

Project-level values override user-level values.  CLI flags override both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_FILENAME = ".nxaffected.yml"
USER_CONFIG_DIR = Path.home() / ".nxaffected"
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yml"

_SECTIONS = ("affected", "logging")

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS = ("console", "json")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class AffectedConfig:
    """``affected`` sub-configuration."""

    base: str = ""
    manifest: str = "package.json"
    format: str = "text"


@dataclass
class LoggingConfig:
    """``logging`` sub-configuration."""

    level: str = "INFO"
    format: str = "console"


@dataclass
class NxAffectedConfig:
    """Top-level configuration container."""

    affected: AffectedConfig = field(default_factory=AffectedConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Where the effective config was loaded from (None = defaults only).
    project_config_path: str | None = None
    user_config_path: str | None = None


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    project_path: str | None = None,
    config_path: str | Path | None = None,
) -> NxAffectedConfig:
    """Load merged configuration (project > user > defaults).

    Parameters
    ----------
    project_path:
        Directory to search for ``.nxaffected.yml``.  When *None*, only
        the user-level file (and defaults) are considered.
    config_path:
        Explicit config file path.  When given, *only* this file is
        loaded (no project/user search).
    """
    if config_path is not None:
        raw = _load_yaml(Path(config_path))
        cfg = _raw_to_config(raw)
        cfg.project_config_path = str(config_path) if raw else None
        return cfg

    user_raw = _load_yaml(USER_CONFIG_PATH)
    user_source = str(USER_CONFIG_PATH) if user_raw else None

    project_raw: dict | None = None
    project_source: str | None = None
    if project_path is not None:
        found = _find_project_config(project_path)
        if found is not None:
            project_raw = _load_yaml(found)
            project_source = str(found) if project_raw else None

    cfg = _raw_to_config(_merge_raw(project_raw, user_raw))
    cfg.project_config_path = project_source
    cfg.user_config_path = user_source
    return cfg


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _find_project_config(project_path: str) -> Path | None:
    """Search for ``.nxaffected.yml`` in *project_path* and ancestors."""
    p = Path(project_path).resolve()
    candidates = [p / CONFIG_FILENAME]
    if not (p / ".git").exists():
        for parent in p.parents:
            candidates.append(parent / CONFIG_FILENAME)
            if (parent / ".git").exists():
                break
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> dict | None:
    """Load a YAML file, returning *None* on missing/invalid files."""
    path = path.expanduser()
    if not path.is_file():
        return None
    try:
        raw = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError):
        return None
    return raw if isinstance(raw, dict) else None


def _merge_raw(project: dict | None, user: dict | None) -> dict:
    """Merge project and user raw dicts section by section (project wins)."""
    base: dict = {}
    for source in (user, project):
        if not source:
            continue
        for key in _SECTIONS:
            section = source.get(key)
            if isinstance(section, dict):
                base.setdefault(key, {}).update(section)
    return base


def _section(raw: dict | None, key: str) -> dict:
    section = (raw or {}).get(key, {})
    return section if isinstance(section, dict) else {}


def _raw_to_config(raw: dict | None) -> NxAffectedConfig:
    """Convert a raw YAML dict to an ``NxAffectedConfig``."""
    affected_raw = _section(raw, "affected")
    logging_raw = _section(raw, "logging")

    return NxAffectedConfig(
        affected=AffectedConfig(
            base=str(affected_raw.get("base") or ""),
            manifest=str(affected_raw.get("manifest") or "package.json"),
            format=normalize_choice(affected_raw.get("format"), OUTPUT_FORMATS, "text"),
        ),
        logging=LoggingConfig(
            level=normalize_choice(logging_raw.get("level"), LOG_LEVELS, "INFO"),
            format=normalize_choice(logging_raw.get("format"), LOG_FORMATS, "console"),
        ),
    )


def normalize_choice(val: object, allowed: tuple[str, ...], default: str) -> str:
    """Match *val* case-insensitively against *allowed*; unknown or empty gives *default*."""
    if val is None:
        return default
    text = str(val).strip()
    for option in allowed:
        if text.lower() == option.lower():
            return option
    return default
