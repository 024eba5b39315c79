"""
Configuration management for the Module Troubleshooter.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .exceptions import ConfigurationError
from .logging_config import get_logger

logger = get_logger('config')

OUTPUT_FORMATS = ('text', 'json', 'markdown')


@dataclass
class DiagnosisConfig:
    """Configuration for the diagnosers."""
    include_dependency_chain: bool = True  # Report requirements blocked by an inactive provider
    include_state_hints: bool = True       # Deadlock hint for starting/stopping modules
    diagnose_services: bool = True


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    default_format: str = "text"
    pretty_print: bool = True
    include_metadata: bool = True
    use_colors: Optional[bool] = None  # Auto-detect when None
    detailed: bool = False


@dataclass
class TrackingConfig:
    """
    Configuration for the service origin tracker.

    Applies to trackers an embedding host builds with
    ``ServiceOriginTracker(config.tracking)`` and attaches to its live service
    registry. The command line reads static snapshots, which carry no service
    events, so it creates no tracker and ignores this section.
    """
    # Stack entries starting with these prefixes are framework internals
    skip_prefixes: List[str] = field(default_factory=lambda: [
        'module_troubleshooter.tracking.',
        'org.apache.felix.framework.',
    ])
    # Stack entries starting with a key are reported under the short label
    collapse_prefixes: Dict[str, str] = field(default_factory=lambda: {
        'org.apache.felix.scr.': 'scr',
    })
    max_log_entries: int = 10000


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    log_file: Optional[str] = None
    verbose: bool = False


@dataclass
class Config:
    """Main configuration class."""
    diagnosis: DiagnosisConfig = field(default_factory=DiagnosisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Config object with loaded settings

    Raises:
        ConfigurationError: If configuration file is invalid
    """
    config = Config()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration file: {e}")

        if config_data:
            if not isinstance(config_data, dict):
                raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
            _update_config_from_dict(config, config_data)
            logger.info(f"Loaded configuration from {config_path}")

    elif config_path:
        logger.warning(f"Configuration file not found: {config_path}")

    _validate_config(config)
    return config


def _update_section(section, section_data: Dict, section_name: str) -> None:
    """Copy known keys of one configuration section onto its dataclass."""
    if not isinstance(section_data, dict):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping")

    for key, value in section_data.items():
        if hasattr(section, key):
            setattr(section, key, value)
        else:
            logger.warning(f"Ignoring unknown configuration key '{section_name}.{key}'")


def _update_config_from_dict(config: Config, config_data: Dict) -> None:
    """
    Update configuration object from dictionary data.

    Args:
        config: Config object to update
        config_data: Dictionary with configuration data
    """
    if 'diagnosis' in config_data:
        _update_section(config.diagnosis, config_data['diagnosis'], 'diagnosis')

    if 'output' in config_data:
        _update_section(config.output, config_data['output'], 'output')

    if 'tracking' in config_data:
        _update_section(config.tracking, config_data['tracking'], 'tracking')

    if 'logging' in config_data:
        _update_section(config.logging, config_data['logging'], 'logging')


def _validate_config(config: Config) -> None:
    """Reject settings the tool cannot act on."""
    if config.output.default_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Unsupported output format '{config.output.default_format}', "
            f"expected one of: {', '.join(OUTPUT_FORMATS)}"
        )
    if not isinstance(config.tracking.collapse_prefixes, dict):
        raise ConfigurationError("tracking.collapse_prefixes must be a mapping of prefix to label")
    if config.tracking.max_log_entries < 0:
        raise ConfigurationError("tracking.max_log_entries must not be negative")


def get_default_config_path() -> Optional[str]:
    """
    Get the default configuration file path.

    Returns:
        Path to default config file if it exists, None otherwise
    """
    possible_paths = [
        'module_troubleshooter.yaml',
        'module_troubleshooter.yml',
        os.path.expanduser('~/.module_troubleshooter.yaml'),
        os.path.expanduser('~/.module_troubleshooter.yml'),
    ]

    for path in possible_paths:
        if os.path.exists(path):
            return path

    return None
