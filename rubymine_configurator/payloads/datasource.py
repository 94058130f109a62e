"""Database data source descriptors for .idea/dataSources.xml and dataSources.local.xml.

The two files describe one data source and are linked by its ``uuid``. The
uuid must survive re-runs, otherwise the IDE forgets stored credentials and
introspection caches.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable

from pydantic import BaseModel

from rubymine_configurator.document import ContainerSpec, Document
from rubymine_configurator.payloads.models import DataSourceFacts, DataSourcePair, Entry, require

logger = logging.getLogger(__name__)

ENTRY_TAG = "data-source"

DATA_SOURCES = ContainerSpec(
    value="DataSourceManagerImpl",
    root_tag="project",
    root_attributes={"version": "4"},
    extra_attributes={"format": "xml", "multifile-model": "true"},
)
DATA_SOURCES_LOCAL = ContainerSpec(
    value="dataSourceStorageLocal",
    root_tag="project",
    root_attributes={"version": "4"},
)


class DatabaseDriver(BaseModel):
    ref: str
    jdbc_driver: str
    url_scheme: str
    dbms: str
    default_port: str


DRIVERS: dict[str, DatabaseDriver] = {
    "mysql": DatabaseDriver(
        ref="mysql.8",
        jdbc_driver="com.mysql.cj.jdbc.Driver",
        url_scheme="mysql",
        dbms="MYSQL",
        default_port="3306",
    ),
    "postgresql": DatabaseDriver(
        ref="postgresql",
        jdbc_driver="org.postgresql.Driver",
        url_scheme="postgresql",
        dbms="POSTGRES",
        default_port="5432",
    ),
}


def jdbc_url(facts: DataSourceFacts) -> str:
    driver = DRIVERS[facts.driver]
    url = f"jdbc:{driver.url_scheme}://{facts.host}:{facts.port}"
    if facts.database:
        url = f"{url}/{facts.database}"
    return url


def recover_uuid(documents: Iterable[Document | None], name: str) -> str | None:
    """Find the uuid of the data source called *name* in the first document that has one."""
    for document in documents:
        if document is None:
            continue
        for element in document.root.iter(ENTRY_TAG):
            uuid = element.get("uuid")
            if element.get("name") == name and uuid:
                logger.debug("reusing uuid %s for data source %r", uuid, name)
                return uuid
    return None


def _build_descriptor(facts: DataSourceFacts, uuid: str) -> ET.Element:
    driver = DRIVERS[facts.driver]
    element = ET.Element(ENTRY_TAG, {"source": "LOCAL", "name": facts.name, "uuid": uuid})
    ET.SubElement(element, "driver-ref").text = driver.ref
    ET.SubElement(element, "synchronize").text = "true"
    ET.SubElement(element, "jdbc-driver").text = driver.jdbc_driver
    ET.SubElement(element, "jdbc-url").text = jdbc_url(facts)
    ET.SubElement(element, "working-dir").text = "$ProjectFileDir$"
    return element


def _build_local(facts: DataSourceFacts, uuid: str) -> ET.Element:
    driver = DRIVERS[facts.driver]
    element = ET.Element(ENTRY_TAG, {"name": facts.name, "uuid": uuid})
    ET.SubElement(
        element,
        "database-info",
        {
            "product": "",
            "version": "",
            "jdbc-version": "",
            "driver-name": "",
            "driver-version": "",
            "dbms": driver.dbms,
            "exact-version": "0",
        },
    )
    ET.SubElement(element, "secret-storage").text = "master_key"
    ET.SubElement(element, "user-name").text = facts.user
    scope = ET.SubElement(ET.SubElement(element, "schema-mapping"), "introspection-scope")
    for schema in facts.schemas:
        ET.SubElement(scope, "node", {"kind": "schema", "qname": schema})
    return element


def build_data_source(facts: DataSourceFacts, uuid: str) -> DataSourcePair:
    """Build both descriptors for *facts* sharing *uuid*."""
    require(facts, "datasource", "name", "host", "port", "user", "schemas")
    if not uuid:
        raise ValueError("data source uuid must not be empty")
    return DataSourcePair(
        descriptor=Entry(element=_build_descriptor(facts, uuid), identity_key=facts.name),
        local=Entry(element=_build_local(facts, uuid), identity_key=facts.name),
        uuid=uuid,
    )
