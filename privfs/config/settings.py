"""
Configuration settings for the application.
"""

import os
import shlex
from typing import Optional

from dotenv import load_dotenv

from privfs.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.shell_command: list[str] = self._get_shell_command("PRIVFS_SHELL", "su")
        self.command_timeout: Optional[float] = self._get_timeout(
            "PRIVFS_COMMAND_TIMEOUT"
        )
        self.home_directory: str = self._get_absolute_path("PRIVFS_HOME", "/")
        self.log_level: str = self._get_env("PRIVFS_LOG_LEVEL", "INFO").upper()

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key, default)

    def _get_shell_command(self, key: str, default: str) -> list[str]:
        """Split the shell command line the privileged session is spawned with."""
        argv = shlex.split(self._get_env(key, default))
        if not argv:
            raise ConfigurationError(f"Environment variable {key} must not be empty")
        return argv

    def _get_timeout(self, key: str) -> Optional[float]:
        """Get an optional positive number of seconds; empty means no timeout."""
        value = self._get_env(key, "").strip()
        if not value:
            return None
        try:
            timeout = float(value)
        except ValueError:
            raise ConfigurationError(f"{key} must be a number of seconds, got '{value}'")
        if timeout <= 0:
            raise ConfigurationError(f"{key} must be positive, got '{value}'")
        return timeout

    def _get_absolute_path(self, key: str, default: str) -> str:
        value = self._get_env(key, default)
        if not value.startswith("/"):
            raise ConfigurationError(f"{key} must be an absolute path, got '{value}'")
        return value


# Global settings instance
settings = Settings()
