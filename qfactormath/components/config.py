"""
Configuration management for qfactormath.

This module provides functionality for managing configuration,
including loading from environment variables, files and default values.
"""

import os
import json
import logging
import threading
from typing import Any, Dict, Optional
from copy import deepcopy

import yaml

from qfactormath.errors import ValidationError
from qfactormath.math.stats import THRESHOLD_LEVELS
from qfactormath.math.distinguishing import UNIQUENESS_MODES

# Set up logging
logger = logging.getLogger(__name__)

LOG_LEVELS = ('debug', 'info', 'warn', 'warning', 'error', 'critical')


def to_float(value: Any) -> Optional[float]:
    """
    Convert a value to a float.

    Args:
        value: Value to convert

    Returns:
        Float value, or None if conversion failed
    """
    if value is None:
        return None

    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge u into d."""
    for k, v in u.items():
        if isinstance(v, dict) and k in d and isinstance(d[k], dict):
            d[k] = deep_update(d[k], v)
        else:
            d[k] = v
    return d


def read_config_file(filepath: str) -> Dict[str, Any]:
    """
    Read a JSON or YAML configuration/input document.

    Args:
        filepath: Path ending in .json, .yaml or .yml

    Returns:
        Parsed document
    """
    if not (filepath.endswith('.json') or filepath.endswith('.yaml') or filepath.endswith('.yml')):
        raise ValidationError(f"Unsupported file format: {filepath}")

    try:
        with open(filepath, 'r') as f:
            if filepath.endswith('.json'):
                document = json.load(f)
            else:
                document = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValidationError(f"Cannot read {filepath}: {e}") from e
    except (ValueError, yaml.YAMLError) as e:
        raise ValidationError(f"Malformed document {filepath}: {e}") from e

    if not isinstance(document, dict):
        raise ValidationError(f"Expected a mapping at the top of {filepath}, got {type(document).__name__}")

    return document


class Config:
    """
    Configuration for factor interpretation runs.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            overrides: Optional configuration overrides
        """
        self._lock = threading.RLock()
        self._config = {}
        self._initialized = False

        # Load configuration
        self.load_config(overrides)

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Load configuration from all sources.

        Args:
            overrides: Optional configuration overrides
        """
        with self._lock:
            # Start with default configuration
            config = self._get_defaults()

            # Apply environment variables
            config = self._apply_env_vars(config)

            # Apply overrides
            if overrides:
                config = deep_update(deepcopy(config), overrides)

            # Store configuration
            self._config = config
            self._initialized = True

            logger.info("Configuration loaded")

    def _get_defaults(self) -> Dict[str, Any]:
        """
        Get default configuration values.

        Returns:
            Default configuration
        """
        return {
            # Relationship graph
            'interaction': {
                'filter-threshold': 0.3,     # minimum |r| for an edge
                'significant-loading': 0.4   # cutoff for shared/conflicting counts
            },

            # Distinguishing statements
            'distinguishing': {
                'threshold-level': 'moderate',  # strict | moderate | inclusive
                'uniqueness': 'exclusive'       # exclusive | unopposed
            },

            # Logging
            'logging': {
                'level': 'warn'
            }
        }

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variables to configuration.

        Args:
            config: Current configuration

        Returns:
            Updated configuration
        """
        # Make a copy
        config = deepcopy(config)

        # Relationship graph
        if 'QFM_FILTER_THRESHOLD' in os.environ:
            config['interaction']['filter-threshold'] = to_float(os.environ['QFM_FILTER_THRESHOLD'])
        if 'QFM_SIGNIFICANT_LOADING' in os.environ:
            config['interaction']['significant-loading'] = to_float(os.environ['QFM_SIGNIFICANT_LOADING'])

        # Distinguishing statements
        config['distinguishing']['threshold-level'] = os.environ.get(
            'QFM_THRESHOLD_LEVEL', config['distinguishing']['threshold-level']).lower()
        config['distinguishing']['uniqueness'] = os.environ.get(
            'QFM_UNIQUENESS', config['distinguishing']['uniqueness']).lower()

        # Logging
        config['logging']['level'] = os.environ.get('LOG_LEVEL', config['logging']['level']).lower()

        return config

    def validate(self) -> 'Config':
        """
        Check every value before a computation uses it.

        Returns:
            self
        """
        filter_threshold = to_float(self.get('interaction.filter-threshold'))
        if filter_threshold is None or not 0.0 <= filter_threshold <= 1.0:
            raise ValidationError(
                f"interaction.filter-threshold must lie in [0, 1], got {self.get('interaction.filter-threshold')!r}"
            )

        significant = to_float(self.get('interaction.significant-loading'))
        if significant is None or significant < 0.0:
            raise ValidationError(
                f"interaction.significant-loading must be non-negative, got {self.get('interaction.significant-loading')!r}"
            )

        level = self.get('distinguishing.threshold-level')
        if level not in THRESHOLD_LEVELS:
            raise ValidationError(
                f"distinguishing.threshold-level must be one of {', '.join(THRESHOLD_LEVELS)}, got {level!r}"
            )

        uniqueness = self.get('distinguishing.uniqueness')
        if uniqueness not in UNIQUENESS_MODES:
            raise ValidationError(
                f"distinguishing.uniqueness must be one of {', '.join(UNIQUENESS_MODES)}, got {uniqueness!r}"
            )

        log_level = str(self.get('logging.level', 'warn')).lower()
        if log_level not in LOG_LEVELS:
            raise ValidationError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        return self

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            path: Configuration path (dot-separated)
            default: Default value if not found

        Returns:
            Configuration value, or default if not found
        """
        if not self._initialized:
            self.load_config()

        # Split path into components
        components = path.split('.')

        # Start with full configuration
        value = self._config

        # Traverse path
        for component in components:
            if isinstance(value, dict) and component in value:
                value = value[component]
            else:
                return default

        return value

    @property
    def filter_threshold(self) -> float:
        return float(self.get('interaction.filter-threshold'))

    @property
    def significant_loading(self) -> float:
        return float(self.get('interaction.significant-loading'))

    @property
    def threshold_level(self) -> str:
        return self.get('distinguishing.threshold-level')

    @property
    def uniqueness(self) -> str:
        return self.get('distinguishing.uniqueness')

    @property
    def log_level(self) -> str:
        """Logging level name as the logging module spells it."""
        return str(self.get('logging.level', 'warn')).upper()

    def load_from_file(self, filepath: str) -> None:
        """
        Load configuration from a file.

        Args:
            filepath: Path to load configuration from
        """
        self.load_config(read_config_file(filepath))


class ConfigManager:
    """
    Singleton manager for configuration.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Get the configuration instance.

        Args:
            overrides: Optional configuration overrides

        Returns:
            Config instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Config(overrides)
            elif overrides:
                cls._instance.load_config(overrides)

            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the shared instance so the next call reloads from scratch."""
        with cls._lock:
            cls._instance = None
