"""Command-line interface for toolguard."""
