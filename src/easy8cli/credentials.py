"""Environment-based API key discovery for easy8cli.

The config file and ``EASY8_API_KEY`` are consulted first by
:func:`easy8cli.config.load_config`. When neither provides a key this module
looks at ``.env`` files and a few alternative variable names.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from .logging import get_logger


@dataclass
class CredentialsConfig:
    """Where to look for the API key."""

    load_dotenv: bool = True
    dotenv_path: str | None = None
    api_key_var: str = "EASY8_API_KEY"
    alternatives: tuple[str, ...] = ("REDMINE_API_KEY", "EASY_API_KEY")
    dotenv_locations: tuple[str, ...] = field(default=(".env", ".env.local"))


class CredentialsLocator:
    """Finds the API key in the environment or a ``.env`` file."""

    def __init__(self, config: CredentialsConfig | None = None):
        self.config = config or CredentialsConfig()
        self.logger = get_logger()

    def _dotenv_files(self) -> list[Path]:
        if self.config.dotenv_path:
            return [Path(self.config.dotenv_path)]
        return [Path(location) for location in self.config.dotenv_locations]

    def from_environment(self) -> str | None:
        for var in (self.config.api_key_var, *self.config.alternatives):
            value = os.getenv(var)
            if value:
                self.logger.debug(f"Found API key in {var}")
                return value
        return None

    def from_dotenv(self) -> str | None:
        if not self.config.load_dotenv:
            return None
        for env_file in self._dotenv_files():
            if not env_file.is_file():
                continue
            values = dotenv_values(env_file)
            for var in (self.config.api_key_var, *self.config.alternatives):
                value = values.get(var)
                if value:
                    self.logger.debug(f"Found API key in {env_file}")
                    return value
        return None

    def find_api_key(self) -> str | None:
        return self.from_environment() or self.from_dotenv()


def find_api_key(config: CredentialsConfig | None = None) -> str | None:
    """Convenience wrapper around :class:`CredentialsLocator`."""
    return CredentialsLocator(config).find_api_key()


__all__ = ["CredentialsConfig", "CredentialsLocator", "find_api_key"]
