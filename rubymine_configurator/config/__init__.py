from .loader import load_config
from .models import (
    ConfiguratorConfig,
    DataSourceConfig,
    IDEConfig,
    InterpreterConfig,
    RubyArgsConfig,
)

__all__ = [
    "ConfiguratorConfig",
    "DataSourceConfig",
    "IDEConfig",
    "InterpreterConfig",
    "RubyArgsConfig",
    "load_config",
]
