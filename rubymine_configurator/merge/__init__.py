"""Merge engine: idempotent upserts of entries into IDE XML documents."""

from rubymine_configurator.merge.engine import load, patch_attribute, upsert_entry, upsert_into
from rubymine_configurator.merge.models import DataSourceMerge, MergeResult
from rubymine_configurator.merge.operations import (
    patch_ruby_args,
    upsert_data_source,
    upsert_interpreter,
)

__all__ = [
    "DataSourceMerge",
    "MergeResult",
    "load",
    "patch_attribute",
    "patch_ruby_args",
    "upsert_data_source",
    "upsert_entry",
    "upsert_interpreter",
    "upsert_into",
]
