"""Locate (or create) the container element that holds upserted entries."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from pydantic import BaseModel, ConfigDict

from rubymine_configurator.document.model import Document, synthesize

logger = logging.getLogger(__name__)


class ContainerSpec(BaseModel):
    """Identifies a container by tag plus one attribute value.

    ``root_tag``/``root_attributes`` describe the skeleton document built
    when no prior file exists; ``extra_attributes`` are written on a freshly
    created container only.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    tag: str = "component"
    attribute: str = "name"
    root_tag: str = "application"
    root_attributes: dict[str, str] = {}
    extra_attributes: dict[str, str] = {}

    def matches(self, element: ET.Element) -> bool:
        return element.tag == self.tag and element.get(self.attribute) == self.value

    def new_attributes(self) -> dict[str, str]:
        return {self.attribute: self.value, **self.extra_attributes}


def locate(document: Document, spec: ContainerSpec) -> ET.Element | None:
    """Return the first element matching *spec* in document order, or None."""
    for element in document.root.iter(spec.tag):
        if spec.matches(element):
            return element
    return None


def ensure_container(document: Document, spec: ContainerSpec) -> tuple[ET.Element, bool]:
    """Locate the container, appending a new one to the root when absent.

    Returns ``(container, created)``.
    """
    container = locate(document, spec)
    if container is not None:
        return container, False
    logger.debug("no %s[%s=%r], creating it", spec.tag, spec.attribute, spec.value)
    return ET.SubElement(document.root, spec.tag, spec.new_attributes()), True


def skeleton(spec: ContainerSpec) -> tuple[Document, ET.Element]:
    """Synthesize a minimal document holding exactly one empty container."""
    document = synthesize(spec.root_tag, spec.root_attributes)
    container = ET.SubElement(document.root, spec.tag, spec.new_attributes())
    return document, container
