"""Database connection facts from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping

from rubymine_configurator.config.models import DataSourceConfig
from rubymine_configurator.environment.models import DatabaseCredentials
from rubymine_configurator.payloads import DRIVERS


def load_credentials(
    config: DataSourceConfig, environ: Mapping[str, str] | None = None
) -> DatabaseCredentials:
    """Read host/port/user from the configured env vars, falling back to config defaults.

    Passwords are never read; the IDE keeps them in its own secret storage.
    """
    environ = os.environ if environ is None else environ
    port = environ.get(config.port_env) or config.default_port or DRIVERS[config.driver].default_port
    return DatabaseCredentials(
        host=environ.get(config.host_env) or config.default_host,
        port=port,
        user=environ.get(config.user_env) or config.default_user,
    )
