#!/usr/bin/env python3

"""
Configuration management for the gene dataset pipeline.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError

# Kinds of sequence data a dataset may hold
CODE_TYPES = ('simple', 'extended', 'complete')


@dataclass
class PipelineConfig:
    """Centralized configuration for the gene dataset pipeline."""

    # Data description
    code_type: str = 'simple'

    # Export settings
    exporter: str = 'nfa'
    line_width: int = 60

    # Performance settings
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True

    # Advanced settings
    write_log_file: bool = False
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'PipelineConfig':
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from environment variables."""
        config = cls()

        env_mappings = {
            'GENEDS_CODE_TYPE': ('code_type', str),
            'GENEDS_EXPORTER': ('exporter', str),
            'GENEDS_LINE_WIDTH': ('line_width', int),
            'GENEDS_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'GENEDS_DEBUG_MODE': ('debug_mode', lambda x: x.lower() in ('true', '1', 'yes')),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.code_type not in CODE_TYPES:
            raise ConfigurationError(f"code_type must be one of {', '.join(CODE_TYPES)}")

        if self.line_width < 1:
            raise ConfigurationError("line_width must be >= 1")

        if not self.exporter:
            raise ConfigurationError("exporter cannot be empty")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> PipelineConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        PipelineConfig: Loaded configuration
    """
    defaults = PipelineConfig()
    config = PipelineConfig()

    overrides = []
    if use_env:
        overrides.append(PipelineConfig.from_env())
    if config_path:
        overrides.append(PipelineConfig.from_file(config_path))

    # Later sources win; only values differing from the defaults are applied
    for source in overrides:
        for field_name in PipelineConfig.__dataclass_fields__:
            value = getattr(source, field_name)
            if value != getattr(defaults, field_name):
                setattr(config, field_name, value)

    return config
