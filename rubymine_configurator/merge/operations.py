"""The three upserts this tool performs, wired from payload builders to the engine."""

from __future__ import annotations

import uuid as uuid_lib
from typing import Callable

from rubymine_configurator.document import serialize
from rubymine_configurator.identity import data_source_identity, interpreter_identity
from rubymine_configurator.merge.engine import load, patch_attribute, upsert_entry, upsert_into
from rubymine_configurator.merge.models import DataSourceMerge, MergeResult
from rubymine_configurator.payloads import (
    DATA_SOURCES,
    DATA_SOURCES_LOCAL,
    JDK_TABLE,
    RUN_MANAGER,
    DataSourceFacts,
    InterpreterFacts,
    RubyArgsFacts,
    build_data_source,
    build_interpreter,
    build_ruby_args_patch,
    recover_uuid,
)


def _mint_uuid() -> str:
    return str(uuid_lib.uuid4())


def upsert_interpreter(old_text: str | None, facts: InterpreterFacts) -> MergeResult:
    """Insert or replace the interpreter entry for *facts* in jdk.table.xml text."""
    entry = build_interpreter(facts)
    return upsert_entry(old_text, JDK_TABLE, entry, interpreter_identity)


def patch_ruby_args(old_text: str, facts: RubyArgsFacts) -> MergeResult:
    """Point the first RUBY_ARGS run setting in workspace.xml text at the include paths."""
    return patch_attribute(old_text, RUN_MANAGER, build_ruby_args_patch(facts))


def upsert_data_source(
    old_descriptor: str | None,
    old_local: str | None,
    facts: DataSourceFacts,
    mint: Callable[[], str] = _mint_uuid,
) -> DataSourceMerge:
    """Upsert one data source into dataSources.xml and dataSources.local.xml text.

    The uuid is taken from ``facts.previous_uuid``, else recovered from the
    prior documents by data source name, else minted with *mint*. Both
    documents are parsed before anything is built, so a malformed file
    aborts the whole operation.
    """
    descriptor_doc, descriptor_created = load(old_descriptor, DATA_SOURCES)
    local_doc, local_created = load(old_local, DATA_SOURCES_LOCAL)

    previous = facts.previous_uuid
    if not previous and facts.name:
        previous = recover_uuid(
            [
                None if descriptor_created else descriptor_doc,
                None if local_created else local_doc,
            ],
            facts.name,
        )
    uuid = previous or mint()
    pair = build_data_source(facts, uuid)

    results = []
    for document, created, spec, entry in (
        (descriptor_doc, descriptor_created, DATA_SOURCES, pair.descriptor),
        (local_doc, local_created, DATA_SOURCES_LOCAL, pair.local),
    ):
        removed, container_created = upsert_into(document, spec, entry, data_source_identity)
        results.append(
            MergeResult(
                text=serialize(document),
                changed=True,
                created=created,
                container_created=container_created,
                removed=removed,
            )
        )

    return DataSourceMerge(
        descriptor=results[0],
        local=results[1],
        uuid=uuid,
        reused_uuid=bool(previous),
    )
