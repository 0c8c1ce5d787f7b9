"""
Centralized version management for the Kaspa wallet CLI.

This is the single source of truth for the project version.
"""

from __future__ import annotations

# Format: MAJOR.MINOR.PATCH (Semantic Versioning)
__version__ = "0.1.0"


def get_version() -> str:
    """Return the current version string."""
    return __version__


def get_banner() -> str:
    """Return the greeting printed when an interactive session starts."""
    return f"Kaspa Cli Wallet v{get_version()} (type 'help' for list of commands)"
