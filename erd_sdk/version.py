"""
Version helpers for the erd-sdk Python package.

The static ``__version__`` is bumped on release. When the package is installed
the distribution metadata is authoritative; in a source checkout we fall back
to the static string.
"""

from __future__ import annotations

from importlib import metadata

# Bump this when publishing
__version__ = "0.4.0"

_DIST_NAME = "erd-sdk"


def installed_version() -> str:
    """Version recorded in the installed distribution, or ``__version__``."""
    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return __version__


def user_agent() -> str:
    """Default HTTP User-Agent, e.g. ``erd-sdk-py/0.4.0``."""
    return f"erd-sdk-py/{__version__}"


__all__ = ["__version__", "installed_version", "user_agent"]
