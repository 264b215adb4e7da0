"""Unit tests for Settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from gytmdl_web.config import Settings
from gytmdl_web.core import ConfigError


class TestSettingsFromEnv:
    """Tests for Settings.from_env()."""

    def test_defaults(self) -> None:
        settings = Settings.from_env(environ={})
        assert settings.port == 3000
        assert settings.password == ""
        assert settings.auth_enabled is False
        assert settings.output_dir == Path("./Music")
        assert settings.downloader == "gytmdl"
        assert settings.ui_dir is None
        assert settings.log_level == "INFO"
        assert settings.attach_grace == 30.0

    def test_reads_environment(self) -> None:
        settings = Settings.from_env(
            environ={
                "PORT": "8080",
                "PASSWORD": "secret",
                "OUTPUT_DIR": "/srv/music",
                "GYTMDL_COMMAND": "/opt/gytmdl",
                "POLL_INTERVAL": "0.5",
                "ATTACH_GRACE": "2",
                "LOG_LEVEL": "debug",
            }
        )
        assert settings.port == 8080
        assert settings.auth_enabled is True
        assert settings.output_dir == Path("/srv/music")
        assert settings.downloader == "/opt/gytmdl"
        assert settings.poll_interval == 0.5
        assert settings.attach_grace == 2.0
        assert settings.log_level == "DEBUG"

    def test_blank_values_ignored(self) -> None:
        settings = Settings.from_env(environ={"PORT": "  ", "PASSWORD": ""})
        assert settings.port == 3000
        assert settings.password == ""

    def test_overrides_win(self) -> None:
        settings = Settings.from_env(environ={"PORT": "8080"}, port=9000, password=None)
        assert settings.port == 9000
        assert settings.password == ""

    @pytest.mark.parametrize(
        ("env", "name"),
        [
            ({"PORT": "abc"}, "PORT"),
            ({"PORT": "70000"}, "PORT"),
            ({"POLL_INTERVAL": "0"}, "POLL_INTERVAL"),
            ({"ATTACH_GRACE": "-1"}, "ATTACH_GRACE"),
            ({"LOG_LEVEL": "chatty"}, "LOG_LEVEL"),
        ],
    )
    def test_invalid_values(self, env: dict[str, str], name: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            Settings.from_env(environ=env)
        assert exc_info.value.name == name

    def test_loads_env_file(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a .env file feeds the process environment."""
        # Registers GYTMDL_COMMAND for removal at teardown
        monkeypatch.setenv("GYTMDL_COMMAND", "placeholder")
        monkeypatch.delenv("GYTMDL_COMMAND")
        env_file = temp_dir / ".env"
        env_file.write_text("GYTMDL_COMMAND=from-dotenv\n")

        settings = Settings.from_env(env_file=env_file)

        assert settings.downloader == "from-dotenv"

    def test_missing_env_file(self, temp_dir: Path) -> None:
        settings = Settings.from_env(env_file=temp_dir / "absent.env")
        assert isinstance(settings, Settings)
