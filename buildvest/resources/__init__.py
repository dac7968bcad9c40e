"""Validated CRUD over the builders and projects collections."""

from buildvest.resources.repository import (
    BUILDERS,
    PROJECTS,
    RESOURCE_KINDS,
    ResourceKind,
    ResourceRepository,
)

__all__ = ["BUILDERS", "PROJECTS", "RESOURCE_KINDS", "ResourceKind", "ResourceRepository"]
