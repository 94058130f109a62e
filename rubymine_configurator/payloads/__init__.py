"""Payload builders: construct the entries and patches written into IDE files."""

from rubymine_configurator.payloads.datasource import (
    DATA_SOURCES,
    DATA_SOURCES_LOCAL,
    DRIVERS,
    build_data_source,
    recover_uuid,
)
from rubymine_configurator.payloads.interpreter import JDK_TABLE, build_interpreter
from rubymine_configurator.payloads.models import (
    AttributePatch,
    DataSourceFacts,
    DataSourcePair,
    Entry,
    InterpreterFacts,
    MissingRequiredFact,
    RubyArgsFacts,
)
from rubymine_configurator.payloads.ruby_args import RUN_MANAGER, build_ruby_args_patch

__all__ = [
    "AttributePatch",
    "DATA_SOURCES",
    "DATA_SOURCES_LOCAL",
    "DRIVERS",
    "DataSourceFacts",
    "DataSourcePair",
    "Entry",
    "InterpreterFacts",
    "JDK_TABLE",
    "MissingRequiredFact",
    "RUN_MANAGER",
    "RubyArgsFacts",
    "build_data_source",
    "build_interpreter",
    "build_ruby_args_patch",
    "recover_uuid",
]
