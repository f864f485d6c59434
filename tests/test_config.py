"""
Unit tests for application configuration.
"""
from dataclasses import fields
from pathlib import Path

import pytest

from schoolwise.config.app_config import DEFAULT_SERVER_URL, AppConfig
from schoolwise.config.directory_config import DOWNLOADS_DIR, find_project_root, user_data_dir
from schoolwise.main import parse_args


class TestAppConfig:

    def test_defaults(self):
        config = AppConfig()
        assert config.server_url == DEFAULT_SERVER_URL
        assert config.download_dir == str(DOWNLOADS_DIR)
        assert config.read_timeout == 30.0
        assert config.report_timeout == 300.0

    def test_trailing_slash_removed(self):
        assert AppConfig(server_url="http://localhost:5000/").server_url == "http://localhost:5000"

    def test_download_dir_is_resolved(self, tmp_path):
        config = AppConfig(download_dir=str(tmp_path / "x" / ".." / "reports"))
        assert config.download_dir == str((tmp_path / "reports").resolve())


class TestFromEnv:

    def test_reads_environment(self, tmp_path):
        env = {
            "SCHOOLWISE_SERVER_URL": "http://10.0.0.5:8080/",
            "SCHOOLWISE_DOWNLOAD_DIR": str(tmp_path),
            "SCHOOLWISE_READ_TIMEOUT": "5",
            "SCHOOLWISE_REPORT_TIMEOUT": "120.5",
        }
        config = AppConfig.from_env(env)
        assert config.server_url == "http://10.0.0.5:8080"
        assert Path(config.download_dir) == tmp_path.resolve()
        assert config.read_timeout == 5.0
        assert config.report_timeout == 120.5

    def test_overrides_win_unless_none(self):
        config = AppConfig.from_env(
            {"SCHOOLWISE_SERVER_URL": "http://env"}, server_url="http://cli", download_dir=None
        )
        assert config.server_url == "http://cli"
        assert config.download_dir == str(DOWNLOADS_DIR)

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_bad_timeout_rejected(self, raw):
        with pytest.raises(ValueError, match="SCHOOLWISE_READ_TIMEOUT"):
            AppConfig.from_env({"SCHOOLWISE_READ_TIMEOUT": raw})


class TestCommandLine:

    def test_defaults(self):
        args = parse_args([])
        assert args.server_url is None
        assert args.no_browser is False

    def test_flags(self):
        args = parse_args(["--server-url", "http://localhost:5000", "--port", "8550", "--no-browser", "-v"])
        assert args.server_url == "http://localhost:5000"
        assert args.port == 8550
        assert args.no_browser is True
        assert args.verbose is True


def test_config_fields():
    assert [f.name for f in fields(AppConfig)] == [
        "server_url", "download_dir", "read_timeout", "report_timeout", "verbose", "extra_headers",
    ]


class TestProjectRoot:

    def test_source_checkout_is_detected(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SCHOOLWISE_RUNTIME_ROOT", raising=False)
        package = tmp_path / "checkout" / "schoolwise" / "config"
        package.mkdir(parents=True)
        (tmp_path / "checkout" / "pyproject.toml").write_text("[project]\n")

        assert find_project_root(package) == (tmp_path / "checkout").resolve()

    def test_installed_package_uses_user_folder(self, tmp_path, monkeypatch):
        """site-packages holds the package but no pyproject.toml."""
        monkeypatch.delenv("SCHOOLWISE_RUNTIME_ROOT", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        package = tmp_path / "venv" / "site-packages" / "schoolwise" / "config"
        package.mkdir(parents=True)

        assert find_project_root(package) == tmp_path / "home" / ".schoolwise"
        assert user_data_dir() == tmp_path / "home" / ".schoolwise"

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCHOOLWISE_RUNTIME_ROOT", str(tmp_path / "runtime"))
        assert find_project_root(tmp_path) == (tmp_path / "runtime").resolve()
