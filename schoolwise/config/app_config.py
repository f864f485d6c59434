"""Application configuration data class."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .directory_config import DOWNLOADS_DIR

DEFAULT_SERVER_URL = "https://iqac-back.onrender.com"
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_REPORT_TIMEOUT = 300.0


def _float_from_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class AppConfig:
    """Application configuration settings."""
    # Backend base URL, no trailing slash
    server_url: str = DEFAULT_SERVER_URL
    # Where generated reports are saved
    download_dir: Optional[str] = None

    # Client-side timeouts in seconds
    read_timeout: float = DEFAULT_READ_TIMEOUT
    report_timeout: float = DEFAULT_REPORT_TIMEOUT

    verbose: bool = False
    extra_headers: dict = field(default_factory=dict)

    def __post_init__(self):
        self.server_url = (self.server_url or DEFAULT_SERVER_URL).rstrip("/")
        if self.download_dir:
            self.download_dir = str(Path(self.download_dir).expanduser().resolve())
        else:
            self.download_dir = str(DOWNLOADS_DIR)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> "AppConfig":
        """
        Build a configuration from ``SCHOOLWISE_*`` environment variables.

        Keyword overrides (for example values parsed from the command line)
        take precedence when they are not ``None``.
        """
        env = os.environ if env is None else env
        values = {
            "server_url": env.get("SCHOOLWISE_SERVER_URL") or DEFAULT_SERVER_URL,
            "download_dir": env.get("SCHOOLWISE_DOWNLOAD_DIR") or None,
            "read_timeout": _float_from_env(env, "SCHOOLWISE_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            "report_timeout": _float_from_env(env, "SCHOOLWISE_REPORT_TIMEOUT", DEFAULT_REPORT_TIMEOUT),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
