import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import yaml

from .formatters import ColoredFormatter, TimezoneFormatter

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Logger:
    """System logger for the project"""

    def __init__(self):
        # Project root: PROJECT_ROOT env var or four levels above this folder
        env_root = os.environ.get('PROJECT_ROOT')
        if env_root and Path(env_root).exists():
            self.project_root = Path(env_root)
        else:
            self.project_root = Path(__file__).resolve().parents[4]

        # Path to global settings.yaml
        self.settings_path = self.project_root / 'config' / 'settings.yaml'
        self._config = None
        self._loggers = {}

    def _load_global_logger_settings(self) -> dict:
        """Read the logger section from config/settings.yaml"""
        if not self.settings_path.exists():
            return {}
        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
            return config.get('logger', {}) if config else {}
        except (OSError, yaml.YAMLError):
            return {}

    def _load_logging_config(self) -> dict:
        """Load logging config (local config.yaml, overridden by settings.yaml)"""
        if self._config is not None:
            return self._config

        config_path = os.path.join(os.path.dirname(__file__), 'config.yaml')

        if not os.path.exists(config_path):
            local_config = {}
        else:
            try:
                with open(config_path, 'r', encoding='utf-8') as file:
                    config = yaml.safe_load(file)
                local_config = config.get('settings', {}) if config else {}
            except (OSError, yaml.YAMLError):
                local_config = {}

        def _default(key, fallback):
            return local_config.get(key, {}).get('default', fallback)

        resolved = {
            'level': _default('level', 'INFO'),
            'file_enabled': _default('file_enabled', True),
            'file_path': _default('file_path', 'logs/localization.log'),
            'max_file_size_mb': _default('max_file_size_mb', 10),
            'backup_count': _default('backup_count', 5),
            'console_enabled': _default('console_enabled', False),
            'colored': _default('colored', True),
            'timezone': _default('timezone', 'UTC'),
        }

        # Global overrides from settings.yaml
        global_settings = self._load_global_logger_settings()
        overrides = {
            'console_logging_enabled': 'console_enabled',
            'file_logging_enabled': 'file_enabled',
            'level': 'level',
            'timezone': 'timezone',
        }
        for global_key, local_key in overrides.items():
            value = global_settings.get(global_key)
            if value is not None:
                resolved[local_key] = value

        self._config = resolved
        return resolved

    def setup_logger(self, name: str = "logger") -> logging.Logger:
        """Configure a named logger"""
        config = self._load_logging_config()
        level = str(config.get('level', 'INFO')).upper()
        file_path = config.get('file_path', 'logs/localization.log')
        if not os.path.isabs(file_path):
            file_path = os.path.join(self.project_root, file_path)

        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)  # Always DEBUG, filtering happens on handlers

        # Drop handlers from a previous setup of the same name
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        if config.get('file_enabled', True):
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=config.get('max_file_size_mb', 10) * 1024 * 1024,
                backupCount=config.get('backup_count', 5),
                encoding='utf-8'
            )
            file_handler.setFormatter(
                TimezoneFormatter(LOG_FORMAT, datefmt=DATE_FORMAT, timezone=config.get('timezone', 'UTC'))
            )
            file_handler.setLevel(getattr(logging, level, logging.INFO))
            logger.addHandler(file_handler)

        if config.get('console_enabled', False):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ColoredFormatter(
                LOG_FORMAT,
                datefmt=DATE_FORMAT,
                use_colors=config.get('colored', True),
                smart_format=True,
                timezone=config.get('timezone', 'UTC'),
            ))
            console_handler.setLevel(getattr(logging, level, logging.INFO))
            logger.addHandler(console_handler)

        return logger

    def get_logger(self, name: str) -> logging.Logger:
        """Get a configured logger for a module"""
        if name not in self._loggers:
            self._loggers[name] = self.setup_logger(name)
        return self._loggers[name]

    # Compatibility with logging.Logger (for use through DI)
    def info(self, message: str):
        self.get_logger("logger").info(message)

    def debug(self, message: str):
        self.get_logger("logger").debug(message)

    def warning(self, message: str):
        self.get_logger("logger").warning(message)

    def error(self, message: str):
        self.get_logger("logger").error(message)

    def critical(self, message: str):
        self.get_logger("logger").critical(message)
