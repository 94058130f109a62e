"""Merge engine: parse-or-create, locate, dedupe, insert/patch, serialize.

Every function here is a pure transform from old document text to new
document text. Nothing reads the filesystem or the process environment;
callers own all I/O, backups and locking.
"""

from __future__ import annotations

import copy
import logging

from rubymine_configurator.document import (
    ContainerSpec,
    Document,
    ensure_container,
    locate,
    parse,
    serialize,
    skeleton,
)
from rubymine_configurator.identity import IdentityPredicate, remove_colliding
from rubymine_configurator.merge.models import MergeResult
from rubymine_configurator.payloads.models import AttributePatch, Entry

logger = logging.getLogger(__name__)


def load(old_text: str | None, container: ContainerSpec) -> tuple[Document, bool]:
    """Parse *old_text*, or synthesize a skeleton for *container* when it is None.

    Returns ``(document, created)``. MalformedDocument propagates.
    """
    if old_text is None:
        document, _ = skeleton(container)
        return document, True
    return parse(old_text), False


def upsert_into(
    document: Document,
    container: ContainerSpec,
    entry: Entry,
    predicate: IdentityPredicate,
) -> tuple[int, bool]:
    """Replace entries sharing *entry*'s identity with a copy of *entry*, appended last.

    Returns ``(removed, container_created)``.
    """
    target, container_created = ensure_container(document, container)
    removed = remove_colliding(target, entry.tag, entry.identity_key, predicate)
    # the document owns a copy; built entries are never mutated
    target.append(copy.deepcopy(entry.element))
    logger.debug(
        "upserted <%s> %r into %s (removed %d)",
        entry.tag, entry.identity_key, container.value, removed,
    )
    return removed, container_created


def upsert_entry(
    old_text: str | None,
    container: ContainerSpec,
    entry: Entry,
    predicate: IdentityPredicate,
) -> MergeResult:
    """Upsert *entry* into the *container* of the document given as *old_text*."""
    document, created = load(old_text, container)
    removed, container_created = upsert_into(document, container, entry, predicate)
    return MergeResult(
        text=serialize(document),
        changed=True,
        created=created,
        container_created=container_created,
        removed=removed,
    )


def patch_attribute(old_text: str, container: ContainerSpec, patch: AttributePatch) -> MergeResult:
    """Overwrite one attribute on the first element in *container* selected by *patch*.

    Never creates elements. When no element matches, or the value is already
    current, the original text is returned untouched with ``changed=False``.
    """
    document = parse(old_text)
    target = locate(document, container)
    if target is None:
        logger.debug("no %s container, nothing to patch", container.value)
        return MergeResult(text=old_text, changed=False, matched=False)

    for element in target.iter():
        if element is target or element.get(patch.match_attribute) != patch.match_value:
            continue
        if element.get(patch.value_attribute) == patch.value:
            return MergeResult(text=old_text, changed=False)
        # set() keeps the position of an existing attribute, so siblings stay in order
        element.set(patch.value_attribute, patch.value)
        return MergeResult(text=serialize(document), changed=True)

    logger.debug("no element with %s=%r", patch.match_attribute, patch.match_value)
    return MergeResult(text=old_text, changed=False, matched=False)
