"""Persistent client configuration (swagger URL and base URL) stored as YAML."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError

from swagger_tui.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SWAGGER_TUI_CONFIG"


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "swagger-tui" / "config.yaml"


def validate_url(url: str) -> str | None:
    """Return None for a usable URL, else a message describing the problem."""
    url = url.strip()
    if not url:
        return "URL cannot be empty"
    if not url.startswith(("http://", "https://")):
        return "URL must start with http:// or https://"
    return None


class ServerConfig(BaseModel):
    swagger_url: str | None = None
    base_url: str | None = None


class Config(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)

    _path: Path | None = PrivateAttr(default=None)

    @property
    def path(self) -> Path | None:
        return self._path

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load the config file; a missing file yields the defaults."""
        path = path or default_config_path()
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            config = cls()
        else:
            try:
                raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Cannot read {path}: {e}") from e
            if not isinstance(raw, dict):
                raise ConfigError(f"Invalid config in {path}: expected a mapping")
            try:
                config = cls.model_validate(raw)
            except ValidationError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e
            logger.debug("Loaded config from %s", path)
        config._path = path
        return config

    def save(self) -> Path:
        path = self._path or default_config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                yaml.safe_dump(self.model_dump(), sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigError(f"Cannot write {path}: {e}") from e
        self._path = path
        logger.info("Saved config to %s", path)
        return path

    def set_urls(self, swagger_url: str, base_url: str | None = None) -> Path:
        """Store a confirmed URL submission and write it to disk."""
        self.server.swagger_url = swagger_url
        if base_url:
            self.server.base_url = base_url
        return self.save()
