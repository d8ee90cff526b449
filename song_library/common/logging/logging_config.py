"""Centralized logging configuration management."""

import os
import yaml
from pathlib import Path
from typing import Dict, Optional


class LoggingConfig:
    """Centralized logging configuration for all components."""

    _instance: Optional['LoggingConfig'] = None

    def __init__(self, config_path: Optional[str] = None):
        """Initialize logging configuration.

        Args:
            config_path: Path to logging-config.yaml (default: searched upwards
                from this package, then LOGGING_CONFIG env var)
        """
        if config_path is None:
            config_path = os.getenv("LOGGING_CONFIG")
        if config_path is None:
            current = Path(__file__).parent
            for _ in range(5):
                config_file = current / "logging-config.yaml"
                if config_file.exists():
                    config_path = str(config_file)
                    break
                current = current.parent

        self._config: Dict
        if config_path and Path(config_path).exists():
            with open(config_path) as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {
                'default_level': 'INFO',
                'components': {},
                'frameworks': {},
            }

    @classmethod
    def get_instance(cls) -> 'LoggingConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance (tests)."""
        cls._instance = None

    def get_level(self, component: str = 'default') -> str:
        """Get log level for a component.

        Args:
            component: Component name (api, worker, etc)

        Returns:
            Log level string (DEBUG, INFO, WARNING, ERROR)
        """
        env_var = f"LOG_LEVEL_{component.upper().replace('-', '_')}"
        if env_level := os.getenv(env_var):
            return env_level.upper()

        if component == 'default' and (env_level := os.getenv('LOG_LEVEL')):
            return env_level.upper()

        if component in self._config.get('components', {}):
            comp_cfg = self._config['components'][component]
            if isinstance(comp_cfg, dict) and 'level' in comp_cfg:
                return comp_cfg['level'].upper()
            elif isinstance(comp_cfg, str):
                return comp_cfg.upper()

        return self._config.get('default_level', 'INFO').upper()

    def get_json_format(self, component: str = 'default') -> bool:
        """Get JSON format flag for a component."""
        env_var = f"LOG_JSON_FORMAT_{component.upper().replace('-', '_')}"
        if env_json := os.getenv(env_var):
            return env_json.lower() in ('true', '1', 'yes')

        if component == 'default' and (env_json := os.getenv('LOG_JSON_FORMAT')):
            return env_json.lower() in ('true', '1', 'yes')

        if component in self._config.get('components', {}):
            comp_cfg = self._config['components'][component]
            if isinstance(comp_cfg, dict):
                return comp_cfg.get('json_format', True)

        return True

    def get_framework_levels(self) -> Dict[str, str]:
        """Get configured levels for third-party loggers (uvicorn, sqlalchemy, ...)."""
        return {
            name: str(level).upper()
            for name, level in (self._config.get('frameworks') or {}).items()
        }


def get_logging_config() -> LoggingConfig:
    """Get singleton logging configuration instance."""
    return LoggingConfig.get_instance()
