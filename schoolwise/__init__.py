"""Top-level package for the SchoolWise report client.

Exposes the version string and the configuration entry points commonly
used by scripts and tests.
"""

from ._version import VERSION
from .config import AppConfig

__all__ = ["VERSION", "AppConfig"]
