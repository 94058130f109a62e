"""Environment collaborators: Ruby discovery, IDE config paths, database credentials."""

from rubymine_configurator.environment.credentials import load_credentials
from rubymine_configurator.environment.models import (
    DatabaseCredentials,
    DetectionError,
    RubyEnvironment,
)
from rubymine_configurator.environment.paths import find_config_dir, options_file
from rubymine_configurator.environment.ruby import (
    detect_ruby,
    discover_interpreter_path,
    find_shadowenv,
    run_command,
)

__all__ = [
    "DatabaseCredentials",
    "DetectionError",
    "RubyEnvironment",
    "detect_ruby",
    "discover_interpreter_path",
    "find_config_dir",
    "find_shadowenv",
    "load_credentials",
    "options_file",
    "run_command",
]
