"""toolguard - permission checks, risk classification and sandboxing for agent tools."""

__version__ = "0.1.0"
