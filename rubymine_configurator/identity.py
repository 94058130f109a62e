"""Identity predicates: decide whether an existing entry is the one being upserted.

Generated interpreter names follow the convention

    "{runtime} {version} ({scope}/{leaf})[ + {marker}] {date}"

and the identity key is ``"{scope}/{leaf}"``. The version and date change
between runs, so they are not part of the key. Keep all knowledge of the
convention in this module.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

IdentityPredicate = Callable[[ET.Element, str], bool]

_NAME_PATTERN = re.compile(
    r"^(?P<runtime>\S+) (?P<version>\S+) \((?P<scope>[^/()]+)/(?P<leaf>.+)\)"
    r"(?: \+ (?P<marker>.+?))? (?P<date>\d{4}-\d{2}-\d{2})$"
)


class InterpreterName(BaseModel):
    """Display name of a generated interpreter entry."""

    runtime: str = "Ruby"
    version: str
    scope: str
    leaf: str
    marker: str | None = None
    date: str

    @property
    def identity_key(self) -> str:
        return f"{self.scope}/{self.leaf}"

    def format(self) -> str:
        head = f"{self.runtime} {self.version} ({self.scope}/{self.leaf})"
        if self.marker:
            head = f"{head} + {self.marker}"
        return f"{head} {self.date}"

    @classmethod
    def parse(cls, text: str) -> InterpreterName | None:
        """Parse a display name back into its parts; None if it does not follow the convention."""
        match = _NAME_PATTERN.match(text.strip())
        if match is None:
            return None
        return cls(**match.groupdict())


def interpreter_identity(entry: ET.Element, key: str) -> bool:
    """True when the ``<name value=...>`` child of *entry* carries identity *key*.

    Entries without a parseable name never match.
    """
    name = entry.find("name")
    if name is None:
        return False
    parsed = InterpreterName.parse(name.get("value", ""))
    if parsed is None:
        logger.debug("keeping entry with unrecognised name %r", name.get("value"))
        return False
    return parsed.identity_key == key


def data_source_identity(entry: ET.Element, key: str) -> bool:
    """True when the ``name`` attribute of a data-source entry equals *key*."""
    name = entry.get("name")
    return bool(name) and name == key


def remove_colliding(
    container: ET.Element, entry_tag: str, key: str, predicate: IdentityPredicate
) -> int:
    """Remove every direct child tagged *entry_tag* whose identity matches *key*.

    Non-matching children keep their relative order. Returns the number removed.
    """
    doomed = [
        child for child in container
        if child.tag == entry_tag and predicate(child, key)
    ]
    for child in doomed:
        container.remove(child)
    return len(doomed)
