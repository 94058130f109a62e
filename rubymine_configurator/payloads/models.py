"""Models shared by the payload builders."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from rubymine_configurator.identity import InterpreterName


class MissingRequiredFact(Exception):
    """A fact required by a payload shape was not supplied."""

    def __init__(self, shape: str, fact: str) -> None:
        self.shape = shape
        self.fact = fact
        super().__init__(f"{shape} payload requires '{fact}' but it was not provided")


@dataclass(frozen=True)
class Entry:
    """A freshly built subtree plus the identity key it is de-duplicated by."""

    element: ET.Element
    identity_key: str

    @property
    def tag(self) -> str:
        return self.element.tag


class AttributePatch(BaseModel):
    """Overwrite ``value_attribute`` on the element where ``match_attribute == match_value``."""

    match_attribute: str
    match_value: str
    value_attribute: str
    value: str


class InterpreterFacts(BaseModel):
    name: InterpreterName | None = None
    ruby_version: str | None = None
    ruby_path: str | None = None
    shadowenv_path: str | None = None
    working_dir: str | None = None


class RubyArgsFacts(BaseModel):
    working_dir: str | None = None
    include_paths: list[str] = ["lib", "test", "spec", "test/support"]


class DataSourceFacts(BaseModel):
    name: str | None = None
    driver: Literal["mysql", "postgresql"] = "mysql"
    host: str | None = None
    port: str | None = None
    user: str | None = None
    database: str | None = None
    schemas: list[str] = []
    previous_uuid: str | None = None


@dataclass(frozen=True)
class DataSourcePair:
    """Connection descriptor and local (secrets/schema) descriptor sharing one uuid."""

    descriptor: Entry
    local: Entry
    uuid: str


def require(facts: BaseModel, shape: str, *names: str) -> None:
    """Raise MissingRequiredFact for the first of *names* that is unset, blank or empty."""
    for name in names:
        value = getattr(facts, name)
        if value is None or (isinstance(value, str) and not value.strip()) or value == []:
            raise MissingRequiredFact(shape, name)
