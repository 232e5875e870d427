"""Authorization engine, risk classification, and sandbox policy for tool execution."""

from .approval import (
    console_prompt_handler,
    execute_tool_with_permission,
    permission_for_tool,
    resource_from_arguments,
)
from .audit import AuditEntry, AuditLog
from .errors import (
    NotInAllowedPathsError,
    PathTraversalError,
    SandboxDeniedError,
    SandboxViolation,
    SystemDirectoryError,
)
from .manager import PermissionManager
from .permissions import GrantSet, Permission, PermissionMode, PermissionRequest, PromptHandler
from .risk import RiskLevel, assess_risk, get_risk_description
from .sandbox import PathPrefixList, SandboxValidator, validate_resource

__all__ = [
    "AuditEntry",
    "AuditLog",
    "GrantSet",
    "NotInAllowedPathsError",
    "PathPrefixList",
    "PathTraversalError",
    "Permission",
    "PermissionManager",
    "PermissionMode",
    "PermissionRequest",
    "PromptHandler",
    "RiskLevel",
    "SandboxDeniedError",
    "SandboxValidator",
    "SandboxViolation",
    "SystemDirectoryError",
    "assess_risk",
    "console_prompt_handler",
    "execute_tool_with_permission",
    "get_risk_description",
    "permission_for_tool",
    "resource_from_arguments",
    "validate_resource",
]
