"""Output subsystem: backs up and writes IDE configuration files."""

from rubymine_configurator.output.writer import (
    ConfigFileWriter,
    WriteResult,
    backup_path_for,
    read_existing,
)

__all__ = [
    "ConfigFileWriter",
    "WriteResult",
    "backup_path_for",
    "read_existing",
]
