"""rubymine-configurator: idempotent patches for RubyMine XML configuration."""

__version__ = "0.1.0"
