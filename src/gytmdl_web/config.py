"""Runtime settings loaded from the environment and an optional .env file."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from gytmdl_web.core import ConfigError
from gytmdl_web.download import DEFAULT_COMMAND
from gytmdl_web.tasks import DEFAULT_ATTACH_GRACE, DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

# Environment variable for each settings field
ENV_VARS = {
    "host": "HOST",
    "port": "PORT",
    "password": "PASSWORD",
    "output_dir": "OUTPUT_DIR",
    "downloader": "GYTMDL_COMMAND",
    "ui_dir": "UI_DIR",
    "poll_interval": "POLL_INTERVAL",
    "attach_grace": "ATTACH_GRACE",
    "log_level": "LOG_LEVEL",
}


class Settings(BaseModel):
    """Service configuration.

    An empty password disables the credential check entirely.
    """

    host: str = "0.0.0.0"  # nosec B104
    port: int = Field(default=3000, ge=1, le=65535)
    password: str = ""
    output_dir: Path = Path("./Music")
    downloader: str = DEFAULT_COMMAND
    ui_dir: Path | None = None
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    attach_grace: float = Field(default=DEFAULT_ATTACH_GRACE, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def auth_enabled(self) -> bool:
        return bool(self.password)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        env_file: Path | None = None,
        **overrides: object,
    ) -> Settings:
        """Build settings from environment variables.

        When ``environ`` is None the process environment is used, after
        loading ``env_file`` (default ``./.env``) into it if the file exists.
        Keyword overrides that are not None win over the environment.

        Raises:
            ConfigError: If a value fails validation.
        """
        if environ is None:
            env_path = env_file or Path(".env")
            if env_path.is_file():
                load_dotenv(dotenv_path=env_path)
            else:
                logger.warning("Cannot load %s file", env_path)
            environ = os.environ

        values: dict[str, object] = {}
        for name, var in ENV_VARS.items():
            raw = environ.get(var, "").strip()
            if raw:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            error = e.errors()[0]
            name = str(error["loc"][0]) if error["loc"] else "settings"
            raise ConfigError(ENV_VARS.get(name, name), error["msg"]) from e
