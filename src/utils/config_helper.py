"""
Configuration helper for managing environment variables across different environments
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from src.utils.logger import setup_logger

ENVIRONMENTS = ('local', 'staging', 'production')
TRUTHY_VALUES = ('1', 'true', 'yes', 'on')


class ConfigHelper:
    """
    Helper class for managing configuration across different environments.
    Supports: local, staging, production
    """

    def __init__(self, env: Optional[str] = None):
        """
        Initialize configuration helper.

        Args:
            env: Environment name ('local', 'staging', 'production').
                 If None, will be detected from ENV environment variable or default to 'local'
        """
        self.logger = setup_logger(name="config_helper")
        self.project_root = Path(__file__).parent.parent.parent

        self.env = (env or os.getenv('ENV', 'local')).lower()

        if self.env not in ENVIRONMENTS:
            self.logger.warning(f"Unknown environment '{self.env}', defaulting to 'local'")
            self.env = 'local'

        self._load_env_files()

        self.logger.debug(f"Configuration initialized for environment: {self.env}")

    def _load_env_files(self):
        """Load environment variables from .env files in priority order."""
        if os.getenv('SKIP_ENV_LOAD'):
            self.logger.debug("Skipping .env file loading (SKIP_ENV_LOAD set)")
            return

        # Priority order: .env.{env}, .env.local, .env
        env_files = [
            self.project_root / f'.env.{self.env}',
            self.project_root / '.env.local',
            self.project_root / '.env'
        ]

        # Variables already set win, so the highest priority file goes first
        for env_file in env_files:
            if env_file.exists():
                self.logger.debug(f"Loading environment file: {env_file}")
                load_dotenv(env_file, override=False)

    def get(self, key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not found
            required: If True, raise error if variable is not set

        Returns:
            Environment variable value or default

        Raises:
            ValueError: If required=True and variable is not set
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ValueError(f"Required environment variable '{key}' is not set")

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean flag ('1', 'true', 'yes', 'on' are truthy)."""
        value = self.get(key)
        if value is None:
            return default
        return value.strip().lower() in TRUTHY_VALUES

    def get_request_timeout(self) -> float:
        """Get HTTP request timeout in seconds."""
        return float(self.get('REQUEST_TIMEOUT', '30'))

    def get_max_workers(self) -> int:
        """Get number of worker threads used to query providers."""
        return max(1, int(self.get('MAX_WORKERS', '4')))

    def get_user_agent(self) -> str:
        """Get User-Agent header sent to the providers."""
        return self.get('USER_AGENT', 'CEP-Resolver/1.0')

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.get('LOG_LEVEL', 'INFO').upper()

    def get_log_enabled(self) -> bool:
        """Whether CEP lookups emit diagnostic messages by default."""
        return self.get_bool('CEP_LOG', default=False)

    def get_output_path(self) -> Optional[Path]:
        """Get default path for exported addresses (None if not configured)."""
        path_str = self.get('OUTPUT_PATH')
        if not path_str:
            return None
        if Path(path_str).is_absolute():
            return Path(path_str)
        return self.project_root / path_str

    def get_environment(self) -> str:
        """Get current environment name."""
        return self.env


# Global config instance
_config: Optional[ConfigHelper] = None
_config_env: Optional[str] = None


def get_config(env: Optional[str] = None, force_reload: bool = False) -> ConfigHelper:
    """
    Get global configuration instance (singleton).

    Args:
        env: Environment name (only used on first call or if force_reload=True)
        force_reload: Force reload of configuration even if already initialized

    Returns:
        ConfigHelper instance
    """
    global _config, _config_env

    if force_reload or _config is None or (env and _config_env != env):
        _config = ConfigHelper(env=env)
        _config_env = env or os.getenv('ENV', 'local').lower()

    return _config
