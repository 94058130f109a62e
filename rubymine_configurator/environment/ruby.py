"""Ruby and shadowenv discovery via subprocesses and well-known paths."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable

from rubymine_configurator.environment.models import DetectionError, RubyEnvironment

logger = logging.getLogger(__name__)

Runner = Callable[[list[str]], str]

_EXEC_QUOTED = re.compile(r'exec\s+"([^"]+)"')
_EXEC_BARE = re.compile(r"exec\s+(\S+)")


def run_command(args: list[str]) -> str:
    """Run *args* and return stripped stdout (empty when the command fails)."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=30)
    except FileNotFoundError as e:
        raise DetectionError(f"Failed to execute '{' '.join(args)}'") from e
    except subprocess.TimeoutExpired as e:
        raise DetectionError(f"'{' '.join(args)}' timed out") from e
    if result.returncode != 0:
        logger.debug("%s exited %d: %s", args[0], result.returncode, result.stderr[:200])
    return result.stdout.strip()


def discover_interpreter_path(wrapper_path: str) -> str:
    """Follow a shim script to the Ruby binary it execs; fall back to the shim itself."""
    path = Path(wrapper_path)
    if path.is_file():
        content = path.read_bytes().decode("utf-8", errors="replace")
        for pattern in (_EXEC_QUOTED, _EXEC_BARE):
            match = pattern.search(content)
            if match:
                return match.group(1)
    return wrapper_path


def detect_ruby(runner: Runner = run_command) -> RubyEnvironment:
    """Resolve the active Ruby: wrapper path, real interpreter path and version.

    Raises DetectionError when ruby is not on PATH or reports no version.
    """
    wrapper = runner(["which", "ruby"])
    if not wrapper:
        raise DetectionError("Could not find ruby in PATH")

    interpreter = discover_interpreter_path(wrapper)

    version = runner(["ruby", "-e", "puts RUBY_VERSION"])
    if not version:
        raise DetectionError("Could not determine Ruby version")

    logger.debug("ruby %s at %s (wrapper %s)", version, interpreter, wrapper)
    return RubyEnvironment(wrapper_path=wrapper, interpreter_path=interpreter, version=version)


def shadowenv_candidates(home: Path) -> list[Path]:
    return [
        home / ".dev" / "userprofile" / "bin" / "shadowenv",
        home / ".local" / "bin" / "shadowenv",
        Path("/usr/local/bin/shadowenv"),
        Path("/opt/dev/bin/shadowenv"),
    ]


def find_shadowenv(runner: Runner = run_command, home: Path | None = None) -> str:
    """Locate the shadowenv executable: PATH first, then common install dirs."""
    try:
        found = runner(["which", "shadowenv"])
    except DetectionError:
        found = ""
    if found:
        return found

    for candidate in shadowenv_candidates(home or Path.home()):
        if candidate.exists():
            return str(candidate)

    logger.warning("shadowenv not found, using bare command name")
    return "shadowenv"
