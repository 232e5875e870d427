"""Check-before-act workflow for tool execution.

Validates filesystem paths for file tools, maps a tool call onto a
PermissionRequest, asks the PermissionManager, and only then runs the
tool. Also provides the console prompt handler a terminal front-end
injects into the manager.

Provides:
- permission_for_tool: Map a tool category/name to a Permission
- resource_from_arguments: Pick the resource string out of tool arguments
- console_prompt_handler: Interactive approval on stdin/stdout
- execute_tool_with_permission: Full check-before-act workflow
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from toolguard.core.safety.errors import SandboxViolation
from toolguard.core.safety.manager import PermissionManager
from toolguard.core.safety.permissions import Permission, PermissionRequest
from toolguard.core.safety.risk import assess_risk, get_risk_description
from toolguard.core.safety.sandbox import SandboxValidator, validate_resource

logger = structlog.get_logger()

READ_ONLY_FILE_TOOLS = frozenset({"read", "glob", "grep"})

# Argument keys checked, in order, for the resource a tool is touching
RESOURCE_ARGUMENT_KEYS: tuple[str, ...] = ("file_path", "path", "pattern", "command", "url")


def permission_for_tool(category: str, tool_name: str) -> Permission:
    """Determine which permission a tool needs.

    Args:
        category: Tool category ("file", "exec", "web", "mcp", "external", ...)
        tool_name: Tool name, optionally namespaced (e.g., "core.read")

    Returns:
        Permission for the tool. Unknown categories need WRITE.
    """
    if category == "file":
        short_name = tool_name.rsplit(".", 1)[-1]
        if short_name in READ_ONLY_FILE_TOOLS:
            return Permission.READ
        return Permission.WRITE
    if category == "exec":
        return Permission.EXECUTE
    if category == "web":
        return Permission.NETWORK
    if category in ("mcp", "external"):
        return Permission.EXTERNAL_TOOL
    return Permission.WRITE


def resource_from_arguments(arguments: dict[str, Any]) -> str:
    """Extract the resource being accessed from tool arguments."""
    for key in RESOURCE_ARGUMENT_KEYS:
        if key in arguments:
            return str(arguments[key])
    return ""


async def console_prompt_handler(
    context: dict[str, Any], request: PermissionRequest
) -> bool:
    """Ask the user on the console whether to grant a permission.

    Displays the request and its risk, then reads a decision. Anything
    other than an explicit approval denies.

    Args:
        context: Caller context (description is shown if present)
        request: Permission request to approve or deny

    Returns:
        True if the user approved
    """
    print(f"\nPERMISSION REQUIRED - {request.risk.value.upper()}")
    print(f"Tool: {request.tool_name or 'unknown'}")
    print(f"Permission: {request.permission.value}")
    print(f"Operation: {request.operation}")
    print(f"Resource: {request.resource}")
    print(f"Risk: {get_risk_description(request.risk)}")
    if request.reason:
        print(f"Reason: {request.reason}")
    if context:
        print(f"Context: {context.get('description', 'N/A')}")
    print("\nOptions: [A]pprove, [D]eny")

    response = await asyncio.to_thread(input, "Decision: ")
    return response.strip().upper() == "A"


async def execute_tool_with_permission(
    manager: PermissionManager,
    tool_name: str,
    category: str,
    tool_input: dict[str, Any],
    execute_fn: Callable[[dict[str, Any]], Awaitable[Any]],
    context: dict[str, Any] | None = None,
    sandbox: SandboxValidator | None = None,
) -> Any:
    """Execute a tool only after it has been authorized.

    Workflow:
    1. For file tools, validate the resource and the sandbox policy
    2. Build a PermissionRequest and assess its risk
    3. Ask the manager (prompt handler failures propagate)
    4. Execute the tool if everything passed

    Risk is assessed from the permission and tool name rather than the
    recorded operation text, so a plain read stays LOW.

    Args:
        manager: Permission manager deciding the request
        tool_name: Name of the tool
        category: Tool category, see permission_for_tool
        tool_input: Tool arguments
        execute_fn: Actual tool execution function (async callable)
        context: Caller context passed through to the prompt handler
        sandbox: Optional sandbox validator for file tools

    Returns:
        Tool execution result, or error dict if denied or rejected
    """
    resource = resource_from_arguments(tool_input)
    permission = permission_for_tool(category, tool_name)
    log = logger.bind(tool=tool_name, permission=permission.value)

    # Rejected paths must never reach the prompt or leave a grant behind.
    if category == "file" and resource:
        try:
            validate_resource(resource)
            if sandbox is not None:
                sandbox.validate_path(resource)
        except SandboxViolation as e:
            log.warning("tool_path_rejected", path=e.path, reason=e.reason)
            return {"error": e.reason, "tool": tool_name}

    request = PermissionRequest(
        permission=permission,
        resource=resource,
        operation=f"execute {tool_name}",
        reason="Tool execution requested by agent",
        risk=assess_risk(f"{permission.value} {tool_name}", resource),
        tool_name=tool_name,
    )

    granted = await manager.check(request, context)
    if not granted:
        log.info("tool_permission_denied", resource=resource)
        return {"error": f"Permission denied for tool {tool_name}", "tool": tool_name}

    log.debug("tool_executing", resource=resource)
    return await execute_fn(tool_input)
