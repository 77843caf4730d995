"""
Runtime settings loader with priority: CLI > env > defaults
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import (
    DEFAULT_REGISTRY_PATH,
    DEFAULT_SSHD_CONFIG_PATH,
    DEFAULT_SSHD_SERVICE,
    DEFAULT_ACCOUNT_SHELL,
    ENV_PREFIX,
)


@dataclass
class Settings:
    """Effective settings for one invocation"""
    registry_path: Path = Path(DEFAULT_REGISTRY_PATH)
    identity: Optional[Path] = None
    sshd_config: Path = Path(DEFAULT_SSHD_CONFIG_PATH)
    sshd_service: str = DEFAULT_SSHD_SERVICE
    shell: str = DEFAULT_ACCOUNT_SHELL


class ConfigLoader:
    """Settings loader with priority support"""

    # Environment variable suffix -> settings key
    ENV_MAPPINGS = {
        "CONFIG": "registry_path",
        "IDENTITY": "identity",
        "SSHD_CONFIG": "sshd_config",
        "SSHD_SERVICE": "sshd_service",
        "SHELL": "shell",
    }

    PATH_KEYS = ("registry_path", "identity", "sshd_config")

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix

    def load_env(self) -> Dict[str, Any]:
        """Load settings from environment variables"""
        config = {}

        for suffix, key in self.ENV_MAPPINGS.items():
            value = os.getenv(f"{self._env_prefix}{suffix}")
            if value:
                config[key] = value

        return config

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result = {}

        for config in configs:
            for key, value in config.items():
                if value is not None:
                    result[key] = value

        return result

    def load(
        self,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Settings:
        """
        Load settings with priority: CLI > env > defaults

        Args:
            cli_overrides: CLI parameter overrides (None means not given)
            use_env: Whether to load from environment variables

        Returns:
            Settings
        """
        configs = []

        if use_env:
            configs.append(self.load_env())

        if cli_overrides:
            configs.append(cli_overrides)

        merged = self.merge_configs(*configs)

        for key in self.PATH_KEYS:
            if key in merged:
                merged[key] = Path(merged[key]).expanduser()

        return Settings(**merged)
