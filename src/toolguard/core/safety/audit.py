"""In-memory audit trail of permission decisions.

Every completed PermissionManager decision produces exactly one entry.
The log is append-only: entries are never reordered, edited, or pruned.

Provides:
- AuditEntry: Immutable record of one decision
- AuditLog: Ordered, append-only sequence of AuditEntry records
"""

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from toolguard.core.safety.permissions import (
    Permission,
    PermissionMode,
    PermissionRequest,
)


class AuditEntry(BaseModel):
    """Immutable record of a single permission decision.

    Attributes:
        timestamp: When the decision was made (UTC)
        permission: Permission category that was requested
        resource: Resource named in the request
        operation: Operation named in the request
        granted: Outcome of the decision
        mode: Manager mode active at decision time
        tool_name: Tool that made the request
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    permission: Permission
    resource: str
    operation: str
    granted: bool
    mode: PermissionMode
    tool_name: str = ""

    @classmethod
    def from_request(
        cls, request: PermissionRequest, granted: bool, mode: PermissionMode
    ) -> "AuditEntry":
        return cls(
            permission=request.permission,
            resource=request.resource,
            operation=request.operation,
            granted=granted,
            mode=mode,
            tool_name=request.tool_name,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to a JSON-serializable dict.

        Returns:
            Dictionary with enum values and ISO 8601 timestamp
        """
        return self.model_dump(mode="json")


class AuditLog:
    """Append-only ordered sequence of audit entries.

    Owned by a PermissionManager, which appends under its lock.
    """

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def entries(self) -> list[AuditEntry]:
        """Return a new list holding every entry in order.

        Entries are frozen, so changes to the returned list never reach
        the log.
        """
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(self.entries())
