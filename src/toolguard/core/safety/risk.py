"""Risk classification for tool operations.

Classifies an (operation, resource) pair into a coarse risk tier using
case-insensitive substring heuristics. The classifier is a pure function
with no shared state, so it can be called from any task or thread.

Provides:
- RiskLevel: Ordered enum of risk tiers (LOW < MEDIUM < HIGH)
- assess_risk: Classify an operation/resource pair
- get_risk_description: Human-readable risk level description
"""

from enum import Enum

HIGH_RISK_PATTERNS: tuple[str, ...] = (
    "rm -rf",
    "delete",
    "drop",
    "truncate",
    "format",
    "sudo",
    "chmod 777",
    "system",
    "eval",
)

# Only ever matched against the operation, never the resource.
MEDIUM_RISK_PATTERNS: tuple[str, ...] = (
    "write",
    "modify",
    "execute",
    "chmod",
    "chown",
    "git push",
)


class RiskLevel(str, Enum):
    """Risk tier of an operation.

    LOW: Read-only or otherwise harmless operation
    MEDIUM: Operation that modifies state or runs code
    HIGH: Destructive or privilege-escalating operation
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


def assess_risk(operation: str, resource: str = "") -> RiskLevel:
    """Assess the risk level of an operation on a resource.

    Both strings are lowercased. Any high-risk pattern in either the
    operation or the resource yields HIGH. Otherwise any medium-risk
    pattern in the operation alone yields MEDIUM. Everything else is LOW.

    Args:
        operation: Human-readable operation (e.g., "write file", "rm -rf /")
        resource: Target of the operation (file path, command, URL)

    Returns:
        RiskLevel for the pair

    Example:
        >>> assess_risk("rm -rf /", "/")
        <RiskLevel.HIGH: 'high'>
        >>> assess_risk("write file", "/tmp/x")
        <RiskLevel.MEDIUM: 'medium'>
    """
    operation = operation.lower()
    resource = resource.lower()

    for pattern in HIGH_RISK_PATTERNS:
        if pattern in operation or pattern in resource:
            return RiskLevel.HIGH

    for pattern in MEDIUM_RISK_PATTERNS:
        if pattern in operation:
            return RiskLevel.MEDIUM

    return RiskLevel.LOW


def get_risk_description(risk_level: RiskLevel) -> str:
    """Get human-readable description of a risk level.

    Used in approval prompts to help users understand the
    implications of approving an operation.

    Args:
        risk_level: The risk level to describe

    Returns:
        Human-readable description string
    """
    descriptions = {
        RiskLevel.LOW: "Read-only or harmless operation",
        RiskLevel.MEDIUM: "Modifies files or runs code (usually reversible)",
        RiskLevel.HIGH: "Destructive or privileged operation (may be irreversible)",
    }
    return descriptions.get(risk_level, "Unknown risk level")
