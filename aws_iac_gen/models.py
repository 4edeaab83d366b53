"""Data models for resource scans and generated templates."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, FrozenSet, Mapping, Optional


COMPLETE = "COMPLETE"
FAILED = "FAILED"
EXPIRED = "EXPIRED"

SCAN_FAILURE_STATUSES: FrozenSet[str] = frozenset({FAILED, EXPIRED})
# Generated templates are never reported as EXPIRED.
TEMPLATE_FAILURE_STATUSES: FrozenSet[str] = frozenset({FAILED})


@dataclass(frozen=True)
class ScanHandle:
    """A resource scan as last observed."""

    scan_id: str
    status: str
    start_time: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return self.status == COMPLETE

    def display_row(self) -> tuple[str, str, str]:
        """Return the short id, status and start time shown when picking a scan."""

        started = self.start_time.isoformat() if self.start_time else "—"
        return (self.scan_id[-8:], self.status, started)


@dataclass(frozen=True)
class TemplateHandle:
    """A generated template job as last observed."""

    template_id: str
    status: str


@dataclass(frozen=True)
class ScannedResource:
    """A single resource discovered by a scan.

    ``managed_by_stack`` is ``None`` once the ownership flag has been stripped;
    stripped resources serialise without the ``ManagedByStack`` key.
    """

    resource_type: str
    resource_identifier: Dict[str, str] = field(default_factory=dict)
    managed_by_stack: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScannedResource":
        managed = data.get("ManagedByStack")
        return cls(
            resource_type=data.get("ResourceType") or "",
            resource_identifier=dict(data.get("ResourceIdentifier") or {}),
            managed_by_stack=None if managed is None else bool(managed),
        )

    def stripped(self) -> "ScannedResource":
        """Return a copy without the stack ownership flag."""

        return replace(self, managed_by_stack=None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "ResourceType": self.resource_type,
            "ResourceIdentifier": dict(self.resource_identifier),
        }
        if self.managed_by_stack is not None:
            data["ManagedByStack"] = self.managed_by_stack
        return data

    def to_definition(self) -> Dict[str, Any]:
        """Return the ``ResourceDefinition`` used by CreateGeneratedTemplate."""

        return {
            "ResourceType": self.resource_type,
            "ResourceIdentifier": dict(self.resource_identifier),
        }


__all__ = [
    "COMPLETE",
    "EXPIRED",
    "FAILED",
    "SCAN_FAILURE_STATUSES",
    "ScanHandle",
    "ScannedResource",
    "TEMPLATE_FAILURE_STATUSES",
    "TemplateHandle",
]
