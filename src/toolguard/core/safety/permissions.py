"""Permission categories, policy modes, and request types.

Provides:
- Permission: Coarse capability categories, including the ALL wildcard
- PermissionMode: Policy mode of a PermissionManager
- PermissionRequest: A single request for permission from a tool
- GrantSet: Set of standing grants with wildcard-aware lookup
- PromptHandler: Signature of the injected interactive approval callable
"""

from collections.abc import Awaitable, Callable, Iterable, Iterator
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from toolguard.core.safety.risk import RiskLevel


class Permission(str, Enum):
    """Capability category that is granted or denied as a unit."""

    READ = "read"  # File reading
    WRITE = "write"  # File writing/modification
    EXECUTE = "execute"  # Command execution
    NETWORK = "network"  # Network access
    EXTERNAL_TOOL = "external_tool"  # External (MCP/plugin) tool execution
    ALL = "*"  # Wildcard


class PermissionMode(str, Enum):
    """How a PermissionManager decides requests.

    INTERACTIVE: Standing grants, then the prompt handler, else deny
    YOLO: Grant everything
    AUTO_APPROVE: Grant LOW risk outright, otherwise behave as INTERACTIVE
    DENY: Deny everything
    """

    INTERACTIVE = "interactive"
    YOLO = "yolo"
    AUTO_APPROVE = "auto"
    DENY = "deny"


class PermissionRequest(BaseModel):
    """A request for permission made by a tool before it acts.

    Attributes:
        permission: Permission category being requested
        resource: Resource being accessed (file path, command, URL)
        operation: Human-readable description of the operation
        reason: Why the permission is needed
        risk: Assessed risk of the operation
        tool_name: Tool requesting permission
        requested_at: When the request was created (UTC)
    """

    permission: Permission
    resource: str
    operation: str
    reason: str = ""
    risk: RiskLevel = RiskLevel.LOW
    tool_name: str = ""
    requested_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Receives the caller's context dict and the request; returns True to grant.
# Raising (or being cancelled) aborts the decision.
PromptHandler = Callable[[dict[str, Any], PermissionRequest], Awaitable[bool]]


class GrantSet:
    """Permissions granted for the remaining lifetime of a manager.

    Holding Permission.ALL allows every category.
    """

    def __init__(self, permissions: Iterable[Permission] = ()):
        self._permissions: set[Permission] = set(permissions)

    def add(self, permission: Permission) -> None:
        self._permissions.add(permission)

    def discard(self, permission: Permission) -> None:
        self._permissions.discard(permission)

    def clear(self) -> None:
        self._permissions.clear()

    def allows(self, permission: Permission) -> bool:
        """Return True if permission or the wildcard has been granted."""
        return permission in self._permissions or Permission.ALL in self._permissions

    def snapshot(self) -> frozenset[Permission]:
        return frozenset(self._permissions)

    def __contains__(self, permission: object) -> bool:
        return permission in self._permissions

    def __len__(self) -> int:
        return len(self._permissions)

    def __iter__(self) -> Iterator[Permission]:
        return iter(self.snapshot())
