"""Security configuration for the permission manager and sandbox.

Loads settings from environment variables using Pydantic models.
Provides sensible defaults for all settings while allowing override
via environment.

Provides:
- SecurityConfig: Pydantic model with all security settings
- load_config: Factory function to create SecurityConfig instance
- build_permission_manager: Construct a PermissionManager from config
- build_sandbox_validator: Construct a SandboxValidator from config
"""

import os

import structlog
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat

from toolguard.core.safety.manager import PermissionManager
from toolguard.core.safety.permissions import Permission, PermissionMode, PromptHandler
from toolguard.core.safety.sandbox import SandboxValidator

logger = structlog.get_logger()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_paths(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [p for p in value.split(os.pathsep) if p]


class SecurityConfig(BaseModel):
    """Security settings loaded from environment.

    All settings have sensible defaults. Override via environment variables.
    Environment values are validated like constructor arguments, so a bad
    value raises ValidationError.

    Attributes:
        mode: Permission mode (TOOLGUARD_PERMISSION_MODE: interactive/yolo/auto/deny)
        sandbox: Whether to enforce sandbox path prefixes (TOOLGUARD_SANDBOX)
        allowed_paths: Allowed path prefixes (TOOLGUARD_ALLOWED_PATHS, os.pathsep separated)
        denied_paths: Denied path prefixes (TOOLGUARD_DENIED_PATHS, os.pathsep separated)
        auto_approve_read: Start with READ granted (TOOLGUARD_AUTO_APPROVE_READ)
        auto_approve_write: Start with WRITE granted (TOOLGUARD_AUTO_APPROVE_WRITE)
        auto_approve_exec: Start with EXECUTE granted (TOOLGUARD_AUTO_APPROVE_EXEC)
        auto_approve_network: Start with NETWORK granted (TOOLGUARD_AUTO_APPROVE_NETWORK)
        prompt_timeout: Seconds before a pending prompt fails (TOOLGUARD_PROMPT_TIMEOUT)
    """

    model_config = ConfigDict(validate_default=True)

    mode: PermissionMode = Field(
        default_factory=lambda: os.getenv(
            "TOOLGUARD_PERMISSION_MODE", PermissionMode.INTERACTIVE.value
        )
    )

    # Sandbox
    sandbox: bool = Field(default_factory=lambda: _env_bool("TOOLGUARD_SANDBOX"))
    allowed_paths: list[str] = Field(
        default_factory=lambda: _env_paths("TOOLGUARD_ALLOWED_PATHS")
    )
    denied_paths: list[str] = Field(
        default_factory=lambda: _env_paths("TOOLGUARD_DENIED_PATHS")
    )

    # Standing grants
    auto_approve_read: bool = Field(
        default_factory=lambda: _env_bool("TOOLGUARD_AUTO_APPROVE_READ")
    )
    auto_approve_write: bool = Field(
        default_factory=lambda: _env_bool("TOOLGUARD_AUTO_APPROVE_WRITE")
    )
    auto_approve_exec: bool = Field(
        default_factory=lambda: _env_bool("TOOLGUARD_AUTO_APPROVE_EXEC")
    )
    auto_approve_network: bool = Field(
        default_factory=lambda: _env_bool("TOOLGUARD_AUTO_APPROVE_NETWORK")
    )

    prompt_timeout: PositiveFloat | None = Field(
        default_factory=lambda: os.getenv("TOOLGUARD_PROMPT_TIMEOUT") or None
    )

    def standing_grants(self) -> list[Permission]:
        """Permissions whose auto-approve flag is set."""
        flags = [
            (self.auto_approve_read, Permission.READ),
            (self.auto_approve_write, Permission.WRITE),
            (self.auto_approve_exec, Permission.EXECUTE),
            (self.auto_approve_network, Permission.NETWORK),
        ]
        return [permission for enabled, permission in flags if enabled]


def load_config() -> SecurityConfig:
    """Load configuration from environment.

    Returns:
        Populated SecurityConfig instance
    """
    return SecurityConfig()


async def build_permission_manager(
    config: SecurityConfig,
    prompt_handler: PromptHandler | None = None,
) -> PermissionManager:
    """Create a PermissionManager from configuration.

    Permissions with an auto-approve flag are granted up front.

    Args:
        config: Security configuration
        prompt_handler: Interactive approval callable, or None

    Returns:
        Configured PermissionManager
    """
    manager = PermissionManager(
        config.mode,
        prompt_handler,
        prompt_timeout=config.prompt_timeout,
    )
    for permission in config.standing_grants():
        await manager.grant(permission)

    logger.info(
        "permission_manager_configured",
        mode=config.mode.value,
        grants=sorted(p.value for p in manager.grants),
        interactive=prompt_handler is not None,
    )
    return manager


def build_sandbox_validator(config: SecurityConfig) -> SandboxValidator:
    """Create a SandboxValidator from configuration.

    Returns an unrestricted validator when the sandbox is disabled.

    Args:
        config: Security configuration

    Returns:
        SandboxValidator holding the configured prefixes
    """
    if not config.sandbox:
        return SandboxValidator()

    logger.info(
        "sandbox_configured",
        allowed=config.allowed_paths,
        denied=config.denied_paths,
    )
    return SandboxValidator(
        allowed_paths=config.allowed_paths,
        denied_paths=config.denied_paths,
    )
