"""Ruby SDK ("jdk") entry for the IDE's global jdk.table.xml."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from rubymine_configurator.document import ContainerSpec
from rubymine_configurator.payloads.models import Entry, InterpreterFacts, require

JDK_TABLE = ContainerSpec(value="ProjectJdkTable")
ENTRY_TAG = "jdk"
SDK_TYPE = "RUBY_SDK"


def shadowenv_command(shadowenv_path: str, working_dir: str) -> list[str]:
    """Option list that makes the IDE run Ruby through ``shadowenv exec``."""
    return [shadowenv_path, "exec", "--dir", working_dir, "--"]


def gems_bin_dir(ruby_path: str) -> str:
    return str(Path(ruby_path).parent)


def build_interpreter(facts: InterpreterFacts) -> Entry:
    """Build the ``<jdk>`` subtree for *facts*.

    Raises MissingRequiredFact if any fact is absent.
    """
    require(facts, "interpreter", "name", "ruby_version", "ruby_path", "shadowenv_path", "working_dir")

    jdk = ET.Element(ENTRY_TAG, {"version": "2"})
    ET.SubElement(jdk, "name", {"value": facts.name.format()})
    ET.SubElement(jdk, "type", {"value": SDK_TYPE})
    ET.SubElement(jdk, "version", {"value": facts.ruby_version})
    ET.SubElement(jdk, "homePath", {"value": facts.ruby_path})

    roots = ET.SubElement(jdk, "roots")
    for kind in ("classPath", "sourcePath"):
        ET.SubElement(ET.SubElement(roots, kind), "root", {"type": "composite"})

    additional = ET.SubElement(
        jdk,
        "additional",
        {"version": "1", "GEMS_BIN_DIR_PATH": gems_bin_dir(facts.ruby_path)},
    )
    manager = ET.SubElement(additional, "VERSION_MANAGER", {"ID": "system"})
    options = ET.SubElement(ET.SubElement(manager, "custom-configurator"), "list")
    for value in shadowenv_command(facts.shadowenv_path, facts.working_dir):
        ET.SubElement(options, "option", {"value": value})

    return Entry(element=jdk, identity_key=facts.name.identity_key)
