"""Permission decision engine for tool execution.

The PermissionManager decides whether a tool may perform an operation,
based on its policy mode, the standing grants, and an optional injected
prompt handler. Every completed decision is appended to an audit log.

A single asyncio.Lock serializes all decisions and grant changes. The lock
is held while the prompt handler is awaited, so a slow approval holds up
every other check on the same manager. Prompt handlers must honor
cancellation; the engine imposes no timeout unless prompt_timeout is set.

Provides:
- PermissionManager: Mode-dispatched authorization engine
"""

import asyncio
from typing import Any

import structlog

from toolguard.core.safety.audit import AuditEntry, AuditLog
from toolguard.core.safety.permissions import (
    GrantSet,
    Permission,
    PermissionMode,
    PermissionRequest,
    PromptHandler,
)
from toolguard.core.safety.risk import RiskLevel

logger = structlog.get_logger()


class PermissionManager:
    """Authorize tool operations according to a policy mode.

    Modes:
    - YOLO: grant every request
    - DENY: deny every request
    - AUTO_APPROVE: grant LOW risk requests outright, otherwise as INTERACTIVE
    - INTERACTIVE: grant if a standing grant covers the permission, else ask
      the prompt handler (remembering approvals), else deny

    Denial is reported as False, not as an exception. An exception from the
    prompt handler propagates unchanged and leaves no audit entry, since no
    decision was reached.

    Example:
        >>> async def approve(context, request):
        ...     return True
        >>> manager = PermissionManager(PermissionMode.INTERACTIVE, approve)
        >>> request = PermissionRequest(
        ...     permission=Permission.WRITE,
        ...     resource="/tmp/out.txt",
        ...     operation="write file",
        ... )
        >>> await manager.check(request)
        True
    """

    def __init__(
        self,
        mode: PermissionMode = PermissionMode.INTERACTIVE,
        prompt_handler: PromptHandler | None = None,
        *,
        prompt_timeout: float | None = None,
    ):
        """Initialize permission manager.

        Args:
            mode: Initial policy mode
            prompt_handler: Awaitable approval callable, or None when no
                interactive approval is available
            prompt_timeout: Optional limit in seconds on a single prompt;
                expiry raises asyncio.TimeoutError like any other handler failure
        """
        self._mode = PermissionMode(mode)
        self._prompt_handler = prompt_handler
        self._prompt_timeout = prompt_timeout
        self._grants = GrantSet()
        self._audit_log = AuditLog()
        self._lock = asyncio.Lock()

    @property
    def mode(self) -> PermissionMode:
        return self._mode

    @property
    def grants(self) -> frozenset[Permission]:
        """Snapshot of the standing grants."""
        return self._grants.snapshot()

    async def set_mode(self, mode: PermissionMode) -> None:
        """Switch policy mode between requests."""
        async with self._lock:
            self._mode = PermissionMode(mode)
            logger.info("permission_mode_changed", mode=self._mode.value)

    async def check(
        self,
        request: PermissionRequest,
        context: dict[str, Any] | None = None,
    ) -> bool:
        """Decide whether a request is permitted.

        Args:
            request: The permission request
            context: Caller context passed through to the prompt handler
                (session_id, description, ...)

        Returns:
            True if granted, False if denied

        Raises:
            Exception: Whatever the prompt handler raised, including
                asyncio.CancelledError and asyncio.TimeoutError
        """
        async with self._lock:
            mode = self._mode

            if mode is PermissionMode.YOLO:
                return self._record(request, True, reason="yolo")

            if mode is PermissionMode.DENY:
                return self._record(request, False, reason="deny_mode")

            if mode is PermissionMode.AUTO_APPROVE and request.risk is RiskLevel.LOW:
                return self._record(request, True, reason="auto_approved_low_risk")

            if mode in (PermissionMode.INTERACTIVE, PermissionMode.AUTO_APPROVE):
                return await self._check_interactive(request, context or {})

            return self._record(request, False, reason="unknown_mode")

    async def _check_interactive(
        self, request: PermissionRequest, context: dict[str, Any]
    ) -> bool:
        if self._grants.allows(request.permission):
            return self._record(request, True, reason="standing_grant")

        if self._prompt_handler is None:
            return self._record(request, False, reason="no_prompt_handler")

        log = logger.bind(
            permission=request.permission.value,
            tool=request.tool_name,
            risk=request.risk.value,
        )
        log.debug("prompting_for_permission", resource=request.resource)

        try:
            prompt = self._prompt_handler(context, request)
            if self._prompt_timeout is not None:
                granted = await asyncio.wait_for(prompt, timeout=self._prompt_timeout)
            else:
                granted = await prompt
        except BaseException as e:
            log.warning("prompt_handler_failed", error=repr(e))
            raise

        if granted:
            self._grants.add(request.permission)
        return self._record(request, bool(granted), reason="prompted")

    def _record(self, request: PermissionRequest, granted: bool, reason: str) -> bool:
        """Append the audit entry for a completed decision. Caller holds the lock."""
        self._audit_log.append(AuditEntry.from_request(request, granted, self._mode))
        logger.debug(
            "permission_decision",
            permission=request.permission.value,
            resource=request.resource,
            tool=request.tool_name,
            mode=self._mode.value,
            granted=granted,
            path=reason,
        )
        return granted

    async def grant(self, permission: Permission) -> None:
        """Grant a permission for the rest of the manager's lifetime."""
        async with self._lock:
            self._grants.add(permission)

    async def revoke(self, permission: Permission) -> None:
        """Revoke a single permission. Revoking a missing grant is a no-op."""
        async with self._lock:
            self._grants.discard(permission)

    async def grant_all(self) -> None:
        """Grant the wildcard permission."""
        async with self._lock:
            self._grants.add(Permission.ALL)

    async def revoke_all(self) -> None:
        """Clear every standing grant, not just the wildcard."""
        async with self._lock:
            self._grants.clear()

    def get_audit_log(self) -> list[AuditEntry]:
        """Return an independent copy of the audit log, oldest first."""
        return self._audit_log.entries()
