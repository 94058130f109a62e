"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ConfiguratorConfig

CONFIG_FILENAME = "rubymine-configurator.yaml"
USER_CONFIG_DIR = ".rubymine-configurator"

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def config_search_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest precedence first.

    An explicit ``--config`` path, then ``./rubymine-configurator.yaml`` in
    the project, then ``~/.rubymine-configurator/config.yaml``.
    """
    paths = [Path(cli_path)] if cli_path else []
    paths.append(Path.cwd() / CONFIG_FILENAME)
    paths.append(Path.home() / USER_CONFIG_DIR / "config.yaml")
    return paths


def _read_settings(path: Path) -> dict | None:
    """Parsed and env-expanded mapping from *path*; None for an empty file."""
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}")
    return _expand_env_vars(raw)


def load_config(cli_path: str | None = None) -> ConfiguratorConfig:
    """Load the first non-empty config file from ``config_search_paths``, or defaults."""
    for path in config_search_paths(cli_path):
        if not path.exists():
            continue
        settings = _read_settings(path)
        if settings is None:
            continue
        try:
            return ConfiguratorConfig(**settings)
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
    return ConfiguratorConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings; unset variables expand to ''."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `rubymine-configurator config init`
DEFAULT_CONFIG_TEMPLATE = """\
# rubymine-configurator.yaml

# IDE
ide:
  product: "RubyMine"          # prefix of the per-version config directory
  # config_dir: "~/.config/JetBrains/RubyMine2024.1"

# Interpreter (options/jdk.table.xml)
interpreter:
  runtime: "Ruby"
  scope: "shadowenv"           # name: "Ruby <version> (<scope>/<project>) <date>"
  # marker: "managed"
  # shadowenv_path: "/opt/dev/bin/shadowenv"

# Test run configurations (.idea/workspace.xml)
test_args:
  workspace_file: ".idea/workspace.xml"
  include_paths: [lib, test, spec, test/support]

# Data source (.idea/dataSources.xml + dataSources.local.xml)
datasource:
  driver: "mysql"              # mysql | postgresql
  # name: "app@localhost"
  # database: "app_development"
  schemas: [development, test] # qualified as <project>_<schema>
  host_env: "DB_HOST"
  port_env: "DB_PORT"
  user_env: "DB_USER"
  default_host: "127.0.0.1"
  default_user: "root"

# Logging
log_level: "info"              # debug | info | warn | error
"""
