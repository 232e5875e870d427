"""Path-based sandbox enforcement.

Path-consuming tools call these checks before touching the filesystem.
Prefix matching is plain string matching on the path as given; callers
that want normalized paths must normalize before validating.

The validator holds no lock. Configure it once at startup, before
concurrent validate_path calls begin: concurrent reads are safe,
concurrent writes are not.

Provides:
- PathPrefixList: Ordered list of path prefixes with first-match lookup
- SandboxValidator: Deny-before-allow path prefix policy
- validate_resource: Stateless traversal and system-directory check
"""

from collections.abc import Iterable, Iterator

from toolguard.core.safety.errors import (
    NotInAllowedPathsError,
    PathTraversalError,
    SandboxDeniedError,
    SystemDirectoryError,
)

SYSTEM_DIRECTORY_PREFIXES: tuple[str, ...] = ("/etc/", "/sys/")


class PathPrefixList:
    """Ordered sequence of path prefixes.

    Prefixes are kept in insertion order and first_match returns the
    earliest one that matches.
    """

    def __init__(self, prefixes: Iterable[str] = ()):
        self._prefixes: list[str] = list(prefixes)

    def add(self, prefix: str) -> None:
        self._prefixes.append(prefix)

    def first_match(self, path: str) -> str | None:
        """Return the first prefix that path starts with, or None."""
        for prefix in self._prefixes:
            if path.startswith(prefix):
                return prefix
        return None

    def __len__(self) -> int:
        return len(self._prefixes)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._prefixes))

    def __repr__(self) -> str:
        return f"PathPrefixList({self._prefixes!r})"


class SandboxValidator:
    """Enforce a deny-before-allow path prefix policy.

    With no prefixes configured every path is accepted. Denied prefixes
    always win over allowed ones. Once at least one allowed prefix is
    configured, paths outside all of them are rejected.

    Example:
        >>> sandbox = SandboxValidator(allowed_paths=["/home"], denied_paths=["/etc"])
        >>> sandbox.validate_path("/home/user/notes.txt")
        >>> sandbox.validate_path("/tmp/x")
        Traceback (most recent call last):
        ...
        toolguard.core.safety.errors.NotInAllowedPathsError: path not in allowed sandbox paths: /tmp/x
    """

    def __init__(
        self,
        allowed_paths: Iterable[str] = (),
        denied_paths: Iterable[str] = (),
    ):
        """Initialize sandbox validator.

        Args:
            allowed_paths: Path prefixes tools may touch (empty = everything)
            denied_paths: Path prefixes tools may never touch
        """
        self._allowed = PathPrefixList(allowed_paths)
        self._denied = PathPrefixList(denied_paths)

    @property
    def allowed_paths(self) -> tuple[str, ...]:
        return tuple(self._allowed)

    @property
    def denied_paths(self) -> tuple[str, ...]:
        return tuple(self._denied)

    def add_allowed_path(self, path: str) -> None:
        """Add an allowed path prefix."""
        self._allowed.add(path)

    def add_denied_path(self, path: str) -> None:
        """Add a denied path prefix."""
        self._denied.add(path)

    def validate_path(self, path: str) -> None:
        """Check whether a path is reachable inside the sandbox.

        Args:
            path: Path the tool is about to access

        Raises:
            SandboxDeniedError: Path starts with a denied prefix
            NotInAllowedPathsError: Allowed prefixes exist and none match
        """
        denied = self._denied.first_match(path)
        if denied is not None:
            raise SandboxDeniedError(path, denied)

        if self._allowed and self._allowed.first_match(path) is None:
            raise NotInAllowedPathsError(path)


def validate_resource(resource: str) -> None:
    """Validate that a resource path is safe to access.

    Independent of any SandboxValidator state.

    Args:
        resource: File path or other resource string

    Raises:
        PathTraversalError: Resource contains ".." anywhere
        SystemDirectoryError: Resource starts with /etc/ or /sys/
    """
    if ".." in resource:
        raise PathTraversalError(resource)

    if resource.startswith(SYSTEM_DIRECTORY_PREFIXES):
        raise SystemDirectoryError(resource)
