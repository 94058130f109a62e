"""Document subsystem: parse, locate and serialize IDE XML configuration files."""

from rubymine_configurator.document.locator import (
    ContainerSpec,
    ensure_container,
    locate,
    skeleton,
)
from rubymine_configurator.document.model import (
    Document,
    MalformedDocument,
    canonical,
    parse,
    serialize,
    synthesize,
)

__all__ = [
    "ContainerSpec",
    "Document",
    "MalformedDocument",
    "canonical",
    "ensure_container",
    "locate",
    "parse",
    "serialize",
    "skeleton",
    "synthesize",
]
