"""Configuration module for the SchoolWise client."""

from .app_config import AppConfig
from .directory_config import DOWNLOADS_DIR, LOGS_DIR, PROJECT_ROOT

__all__ = [
    "AppConfig",
    "DOWNLOADS_DIR",
    "LOGS_DIR",
    "PROJECT_ROOT",
]
