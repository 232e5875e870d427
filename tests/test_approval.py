"""Tests for the check-before-act tool execution workflow.

Covers permission mapping for tool categories, resource extraction from
tool arguments, the console prompt handler, and execute_tool_with_permission
with mocked tool functions.
"""

from unittest.mock import AsyncMock, patch

import pytest

from toolguard.core.safety import (
    Permission,
    PermissionManager,
    PermissionMode,
    PermissionRequest,
    RiskLevel,
    SandboxValidator,
    console_prompt_handler,
    execute_tool_with_permission,
    permission_for_tool,
    resource_from_arguments,
)


# permission_for_tool


@pytest.mark.parametrize(
    "category,tool_name,expected",
    [
        ("file", "core.read", Permission.READ),
        ("file", "core.glob", Permission.READ),
        ("file", "grep", Permission.READ),
        ("file", "core.write", Permission.WRITE),
        ("file", "core.edit", Permission.WRITE),
        ("exec", "bash", Permission.EXECUTE),
        ("web", "fetch", Permission.NETWORK),
        ("mcp", "github.create_issue", Permission.EXTERNAL_TOOL),
        ("external", "plugin", Permission.EXTERNAL_TOOL),
        ("custom", "anything", Permission.WRITE),
    ],
)
def test_permission_for_tool(category, tool_name, expected):
    """Test that tool categories map to the expected permission."""
    assert permission_for_tool(category, tool_name) == expected


# resource_from_arguments


def test_resource_from_arguments_uses_key_priority():
    """Test that file_path wins over later keys."""
    arguments = {"command": "ls", "path": "/tmp", "file_path": "/tmp/a.txt"}

    assert resource_from_arguments(arguments) == "/tmp/a.txt"


def test_resource_from_arguments_stringifies_values():
    """Test that non-string values are converted to strings."""
    assert resource_from_arguments({"url": "https://example.com"}) == "https://example.com"
    assert resource_from_arguments({"pattern": 42}) == "42"


def test_resource_from_arguments_missing():
    """Test that an empty string is returned when no resource key exists."""
    assert resource_from_arguments({"content": "hello"}) == ""


# console_prompt_handler


@pytest.mark.asyncio
@pytest.mark.parametrize("answer,expected", [("a", True), ("A\n", True), ("d", False), ("yes", False), ("", False)])
async def test_console_prompt_handler(answer, expected, capsys):
    """Test that only an explicit approval grants."""
    request = PermissionRequest(
        permission=Permission.EXECUTE,
        resource="git push",
        operation="execute command",
        reason="publish branch",
        risk=RiskLevel.MEDIUM,
        tool_name="bash",
    )

    with patch("builtins.input", return_value=answer):
        granted = await console_prompt_handler({"description": "release"}, request)

    assert granted is expected
    output = capsys.readouterr().out
    assert "PERMISSION REQUIRED - MEDIUM" in output
    assert "Tool: bash" in output
    assert "Reason: publish branch" in output
    assert "Context: release" in output


# execute_tool_with_permission


@pytest.mark.asyncio
async def test_execute_tool_runs_when_granted():
    """Test that a granted tool runs and its result is returned."""
    manager = PermissionManager(PermissionMode.YOLO)
    execute_fn = AsyncMock(return_value={"content": "hello"})
    tool_input = {"file_path": "notes/todo.txt"}

    result = await execute_tool_with_permission(
        manager, "core.read", "file", tool_input, execute_fn
    )

    assert result == {"content": "hello"}
    execute_fn.assert_awaited_once_with(tool_input)
    entry = manager.get_audit_log()[0]
    assert entry.permission == Permission.READ
    assert entry.resource == "notes/todo.txt"
    assert entry.operation == "execute core.read"
    assert entry.tool_name == "core.read"


@pytest.mark.asyncio
async def test_execute_tool_denied_does_not_run():
    """Test that a denied tool returns an error dict without executing."""
    manager = PermissionManager(PermissionMode.DENY)
    execute_fn = AsyncMock()

    result = await execute_tool_with_permission(
        manager, "bash", "exec", {"command": "ls"}, execute_fn
    )

    assert result == {"error": "Permission denied for tool bash", "tool": "bash"}
    execute_fn.assert_not_called()


@pytest.mark.asyncio
async def test_execute_tool_prompts_with_assessed_risk_and_context():
    """Test that the handler sees the assessed risk and the caller's context."""
    handler = AsyncMock(return_value=True)
    manager = PermissionManager(PermissionMode.INTERACTIVE, handler)
    execute_fn = AsyncMock(return_value={"exit_code": 0})
    context = {"session_id": "sess-1"}

    await execute_tool_with_permission(
        manager, "bash", "exec", {"command": "sudo reboot"}, execute_fn, context=context
    )

    passed_context, request = handler.await_args.args
    assert passed_context == context
    assert request.permission == Permission.EXECUTE
    assert request.risk == RiskLevel.HIGH
    assert request.resource == "sudo reboot"


@pytest.mark.asyncio
async def test_execute_tool_handler_failure_propagates():
    """Test that a prompt handler failure aborts the tool with the original error."""
    handler = AsyncMock(side_effect=ConnectionError("ui disconnected"))
    manager = PermissionManager(PermissionMode.INTERACTIVE, handler)
    execute_fn = AsyncMock()

    with pytest.raises(ConnectionError):
        await execute_tool_with_permission(
            manager, "core.write", "file", {"file_path": "a.txt"}, execute_fn
        )

    execute_fn.assert_not_called()
    assert manager.get_audit_log() == []


@pytest.mark.asyncio
async def test_execute_tool_rejects_traversal_for_file_tools():
    """Test that file tools are stopped by resource validation after approval."""
    manager = PermissionManager(PermissionMode.YOLO)
    execute_fn = AsyncMock()

    result = await execute_tool_with_permission(
        manager, "core.read", "file", {"file_path": "../../etc/passwd"}, execute_fn
    )

    assert "path traversal detected" in result["error"]
    assert result["tool"] == "core.read"
    execute_fn.assert_not_called()


@pytest.mark.asyncio
async def test_execute_tool_applies_sandbox_for_file_tools():
    """Test that the sandbox policy is enforced for file tools."""
    manager = PermissionManager(PermissionMode.YOLO)
    sandbox = SandboxValidator(allowed_paths=["/workspace"])
    execute_fn = AsyncMock(return_value="ok")

    rejected = await execute_tool_with_permission(
        manager, "core.write", "file", {"file_path": "/tmp/x"}, execute_fn, sandbox=sandbox
    )
    accepted = await execute_tool_with_permission(
        manager, "core.write", "file", {"file_path": "/workspace/x"}, execute_fn, sandbox=sandbox
    )

    assert "not in allowed sandbox paths" in rejected["error"]
    assert accepted == "ok"
    execute_fn.assert_awaited_once_with({"file_path": "/workspace/x"})


@pytest.mark.asyncio
async def test_execute_tool_skips_path_checks_for_non_file_tools():
    """Test that command strings are not treated as paths."""
    manager = PermissionManager(PermissionMode.YOLO)
    sandbox = SandboxValidator(denied_paths=["cd"])
    execute_fn = AsyncMock(return_value="done")

    result = await execute_tool_with_permission(
        manager, "bash", "exec", {"command": "cd .. && ls"}, execute_fn, sandbox=sandbox
    )

    assert result == "done"


@pytest.mark.asyncio
async def test_execute_tool_auto_approves_plain_read():
    """Test that auto mode runs a read tool without asking."""
    handler = AsyncMock(return_value=False)
    manager = PermissionManager(PermissionMode.AUTO_APPROVE, handler)
    execute_fn = AsyncMock(return_value={"content": "hello"})

    result = await execute_tool_with_permission(
        manager, "core.read", "file", {"file_path": "notes.txt"}, execute_fn
    )

    assert result == {"content": "hello"}
    handler.assert_not_called()
    entry = manager.get_audit_log()[0]
    assert entry.operation == "execute core.read"
    assert entry.mode == PermissionMode.AUTO_APPROVE
    assert entry.granted is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tool_name,category,tool_input,expected",
    [
        ("core.read", "file", {"file_path": "notes.txt"}, RiskLevel.LOW),
        ("core.write", "file", {"file_path": "notes.txt"}, RiskLevel.MEDIUM),
        ("bash", "exec", {"command": "ls"}, RiskLevel.MEDIUM),
        ("core.edit", "file", {"file_path": "drop_tables.sql"}, RiskLevel.HIGH),
    ],
)
async def test_execute_tool_assesses_risk_from_permission(tool_name, category, tool_input, expected):
    """Test that risk follows the permission and resource, not the audit wording."""
    handler = AsyncMock(return_value=True)
    manager = PermissionManager(PermissionMode.INTERACTIVE, handler)

    await execute_tool_with_permission(
        manager, tool_name, category, tool_input, AsyncMock()
    )

    _, request = handler.await_args.args
    assert request.risk == expected


@pytest.mark.asyncio
async def test_execute_tool_rejects_path_before_prompting():
    """Test that a rejected path is never prompted for and leaves no grant."""
    handler = AsyncMock(return_value=True)
    manager = PermissionManager(PermissionMode.INTERACTIVE, handler)
    sandbox = SandboxValidator(allowed_paths=["/workspace"])
    execute_fn = AsyncMock()

    traversal = await execute_tool_with_permission(
        manager, "core.write", "file", {"file_path": "../../etc/passwd"}, execute_fn
    )
    outside = await execute_tool_with_permission(
        manager, "core.write", "file", {"file_path": "/tmp/x"}, execute_fn, sandbox=sandbox
    )

    assert "path traversal detected" in traversal["error"]
    assert "not in allowed sandbox paths" in outside["error"]
    handler.assert_not_called()
    execute_fn.assert_not_called()
    assert manager.grants == frozenset()
    assert manager.get_audit_log() == []
