"""
Base configuration management for poolwatch.
"""

import os
import logging
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

from ..errors import ConfigError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class BaseConfig:
    """Base configuration class with environment variable management."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        """Initialize configuration after dataclass creation."""
        self._validate_config()

    def setup_logging(self, level: Optional[str] = None):
        """Setup logging configuration."""
        level_name = (level or self.LOG_LEVEL).upper()
        if not isinstance(getattr(logging, level_name, None), int):
            raise ConfigError(f"Invalid log level: {level_name}")
        logging.basicConfig(level=getattr(logging, level_name), format=LOG_FORMAT)

    def _validate_config(self):
        """Validate configuration values."""
        if self.ENVIRONMENT not in ["local", "dev", "staging", "production"]:
            raise ConfigError(f"Invalid environment: {self.ENVIRONMENT}")

    @staticmethod
    def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        """
        Read an environment variable (after ``.env`` has been loaded).

        Raises:
            ConfigError: If ``required`` and the variable is unset
        """
        value = os.getenv(key, default)
        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")
        return value

    @staticmethod
    def _get_env_as(key: str, convert: Callable[[str], Any], kind: str, default: Any, required: bool) -> Any:
        value = BaseConfig.get_env(key, None if default is None else str(default), required)
        try:
            return convert(value)
        except (ValueError, TypeError):
            raise ConfigError(f"Environment variable '{key}' must be {kind}, got: {value}")

    @staticmethod
    def get_env_int(key: str, default: Optional[int] = None, required: bool = False) -> int:
        return BaseConfig._get_env_as(key, int, "an integer", default, required)

    @staticmethod
    def get_env_float(key: str, default: Optional[float] = None, required: bool = False) -> float:
        return BaseConfig._get_env_as(key, float, "a number", default, required)

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        """true/1/yes/on (any case) are True; anything else set is False."""
        value = BaseConfig.get_env(key)
        if value is None:
            return default
        return value.strip().lower() in ("true", "1", "yes", "on")

    def to_dict(self) -> Dict[str, Any]:
        """Dataclass fields as a dictionary."""
        return {name: getattr(self, name) for name in self.__dataclass_fields__ if not name.startswith("_")}
