"""Directory defaults for the SchoolWise client.

Every location can be overridden through environment variables so that the
packaged app and the test-suite can point the client somewhere else without
touching code.
"""
import logging
import os
from pathlib import Path
from typing import Optional

from ..utils.common import validate_directory_path

logger = logging.getLogger(__name__)


def user_data_dir() -> Path:
    """Per-user folder for logs when running from an installed package."""
    return Path.home() / ".schoolwise"


def find_project_root(start: Optional[Path] = None) -> Path:
    """
    Locate the project root by walking up from ``start`` (this file by default).

    The project root is the first parent that holds both the ``schoolwise``
    package and ``pyproject.toml``, i.e. a source checkout. An installed
    package has no such parent and gets ``user_data_dir()`` instead.
    """
    env_root = os.environ.get("SCHOOLWISE_RUNTIME_ROOT")
    if env_root:
        candidate = validate_directory_path(env_root)
        if candidate:
            logger.info(f"Project root resolved from environment: {candidate}")
            return candidate

    current_dir = Path(start or Path(__file__).parent).resolve()
    for parent in [current_dir] + list(current_dir.parents):
        if (parent / "schoolwise").is_dir() and (parent / "pyproject.toml").is_file():
            return parent

    logger.debug(f"No source checkout above {current_dir}, using {user_data_dir()}")
    return user_data_dir()


def default_downloads_dir() -> Path:
    """Return the user's download folder (``SCHOOLWISE_DOWNLOAD_DIR`` wins)."""
    env_dir = os.environ.get("SCHOOLWISE_DOWNLOAD_DIR")
    if env_dir:
        return Path(env_dir).expanduser()

    downloads = Path.home() / "Downloads"
    if downloads.is_dir():
        return downloads
    return Path.home()


def default_logs_dir() -> Path:
    env_dir = os.environ.get("SCHOOLWISE_LOGS_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return PROJECT_ROOT / "logs"


PROJECT_ROOT = find_project_root()
LOGS_DIR = default_logs_dir()
DOWNLOADS_DIR = default_downloads_dir()
