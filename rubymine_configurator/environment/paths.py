"""Locate the IDE's per-user configuration directory across platforms."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from rubymine_configurator.environment.models import DetectionError

logger = logging.getLogger(__name__)


def _newest_by_mtime(dirs: list[Path]) -> Path | None:
    if not dirs:
        return None
    return max(dirs, key=lambda p: p.stat().st_mtime)


def _last_by_name(dirs: list[Path]) -> Path | None:
    return sorted(dirs)[-1] if dirs else None


def _children(base: Path, prefix: str, *, ignore_case: bool = False) -> list[Path]:
    if not base.is_dir():
        return []
    if ignore_case:
        prefix = prefix.lower()
        return [p for p in base.iterdir() if p.name.lower().startswith(prefix)]
    return [p for p in base.iterdir() if p.name.startswith(prefix)]


def find_config_dir(
    product: str = "RubyMine",
    platform: str | None = None,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the most recent ``<product>*`` configuration directory.

    macOS prefers ``~/Library/Application Support/JetBrains`` (newest by
    mtime, versioned dirs only) over ``~/Library/Preferences``. Windows uses
    ``%APPDATA%/JetBrains``. Everything else uses ``$XDG_CONFIG_HOME`` (or
    ``~/.config``) ``/JetBrains``, then the legacy ``~/.<product>*`` dirs.
    """
    platform = platform or sys.platform
    home = home or Path.home()
    environ = os.environ if environ is None else environ

    found: Path | None = None
    if platform == "darwin":
        jetbrains = home / "Library" / "Application Support" / "JetBrains"
        versioned = [
            p for p in _children(jetbrains, product, ignore_case=True)
            if any(c.isdigit() for c in p.name)
        ]
        found = _newest_by_mtime(versioned)
        if found is None:
            found = _last_by_name(_children(home / "Library" / "Preferences", product))
    elif platform in ("win32", "cygwin"):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise DetectionError("APPDATA environment variable not found")
        found = _last_by_name(_children(Path(appdata) / "JetBrains", product))
    else:
        config_home = Path(environ.get("XDG_CONFIG_HOME") or home / ".config")
        found = _last_by_name(_children(config_home / "JetBrains", product))
        if found is None:
            found = _last_by_name(_children(home, f".{product}"))

    if found is None:
        raise DetectionError(f"No {product} configuration directory found")
    logger.debug("using %s configuration directory %s", product, found)
    return found


def options_file(config_dir: Path, name: str) -> Path:
    return config_dir / "options" / name
