"""Exceptions raised by the sandbox path policy.

Denial of a permission is not an error: PermissionManager.check returns
False for that. These exceptions cover the path checks that tools run
before touching the filesystem.

Provides:
- SandboxViolation: Base class carrying the offending path and a reason
- PathTraversalError: Resource contains a ".." traversal marker
- SystemDirectoryError: Resource points into /etc/ or /sys/
- SandboxDeniedError: Path matches a denied sandbox prefix
- NotInAllowedPathsError: Path matches none of the allowed prefixes
"""


class SandboxViolation(Exception):
    """Raised when a path is rejected by the sandbox policy."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason or f"Path rejected by sandbox policy: {path}"
        super().__init__(self.reason)


class PathTraversalError(SandboxViolation):
    """Raised when a resource contains a path traversal marker."""

    def __init__(self, path: str):
        super().__init__(path, f"path traversal detected: {path}")


class SystemDirectoryError(SandboxViolation):
    """Raised when a resource points into a protected system directory."""

    def __init__(self, path: str):
        super().__init__(path, f"access to system directories not allowed: {path}")


class SandboxDeniedError(SandboxViolation):
    """Raised when a path starts with a denied prefix."""

    def __init__(self, path: str, prefix: str):
        self.prefix = prefix
        super().__init__(path, f"path denied by sandbox: {path}")


class NotInAllowedPathsError(SandboxViolation):
    """Raised when allowed prefixes are configured and none match."""

    def __init__(self, path: str):
        super().__init__(path, f"path not in allowed sandbox paths: {path}")
