"""Pydantic models for merge results."""

from __future__ import annotations

from pydantic import BaseModel


class MergeResult(BaseModel):
    """Outcome of a single merge into one document."""

    text: str
    changed: bool
    created: bool = False  # skeleton path: there was no prior document
    container_created: bool = False
    removed: int = 0
    matched: bool = True  # attribute patches only: a target element was found


class DataSourceMerge(BaseModel):
    """Outcome of upserting a data source into both of its documents."""

    descriptor: MergeResult
    local: MergeResult
    uuid: str
    reused_uuid: bool
