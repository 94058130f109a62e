"""ConfigFileWriter: backs up and replaces IDE configuration files on disk."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class WriteResult(BaseModel):
    path: Path
    backup_path: Path | None = None


def read_existing(path: Path) -> str | None:
    """Return the text of *path*, or None when it does not exist."""
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def backup_path_for(path: Path, timestamp: datetime) -> Path:
    """``jdk.table.xml`` -> ``jdk.table.backup.20240601_101500.xml``"""
    stamp = timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.stem}.backup.{stamp}{path.suffix}")


def _stage(path: Path, text: str) -> Path:
    """Write *text* to a uniquely named temp file beside *path* and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(text)
    except OSError:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


class ConfigFileWriter:
    """Writes final document text, snapshotting any previous file first.

    Replacements are staged in temporary siblings and moved into place, so
    readers never observe a half-written file. No cross-process locking is
    done: concurrent runs against the same file race.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    def write(self, path: Path, text: str) -> WriteResult:
        return self.write_all([(path, text)])[0]

    def write_all(self, files: list[tuple[Path, str]]) -> list[WriteResult]:
        """Replace every file in *files* together.

        All replacements are staged before any target is touched, so a
        failure while staging leaves every target as it was. If moving one
        into place fails, targets already replaced are restored from their
        backups (or removed when they did not exist before).
        """
        staged: list[tuple[Path, Path]] = []
        try:
            for path, text in files:
                staged.append((path, _stage(path, text)))

            results = [WriteResult(path=path, backup_path=self._backup(path)) for path, _ in staged]

            replaced: list[WriteResult] = []
            try:
                for (path, tmp), result in zip(staged, results):
                    os.replace(tmp, path)
                    replaced.append(result)
                    logger.info("wrote %s", path)
            except OSError:
                self._restore(replaced)
                raise
            return results
        finally:
            for _, tmp in staged:
                tmp.unlink(missing_ok=True)

    def _backup(self, path: Path) -> Path | None:
        if not path.exists():
            return None
        backup = backup_path_for(path, self._clock())
        shutil.copy2(path, backup)
        logger.info("backed up %s to %s", path, backup)
        return backup

    def _restore(self, replaced: list[WriteResult]) -> None:
        for result in replaced:
            if result.backup_path is None:
                result.path.unlink(missing_ok=True)
            else:
                shutil.copy2(result.backup_path, result.path)
            logger.warning("rolled back %s", result.path)
