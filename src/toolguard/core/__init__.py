"""Core toolguard functionality.

Provides:
- Security configuration loaded from the environment
- Structured logging setup
- The safety package (permission manager, risk, sandbox, audit)
"""

from .config import SecurityConfig, build_permission_manager, build_sandbox_validator, load_config
from .logging_config import configure_logging

__all__ = [
    "SecurityConfig",
    "build_permission_manager",
    "build_sandbox_validator",
    "configure_logging",
    "load_config",
]
