"""Handles loading configuration from YAML files."""

import copy
import yaml
import os
import logging
from typing import Optional
from .exceptions import ConfigurationError
from .subtitle_formatter import WRITE_ERROR_POLICIES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'sample_rate': 16000,
    'chunk_size': 4096,           # bytes per read from the file decoder
    'frames_per_buffer': 4096,    # frames per read from the microphone
    'max_words_per_cue': 6,
    'max_cue_duration': 4.0,
    'on_write_error': 'raise',
    'ffmpeg_path': None,
    'vosk_log_level': -1,
    'show_progress': True,
    'log_dir': 'logs',
    'log_file': 'vosksrt.log',
}

_POSITIVE_INTS = ('sample_rate', 'chunk_size', 'frames_per_buffer', 'max_words_per_cue')

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: Optional[str] = None) -> dict:
        """
        Loads configuration from the specified YAML file path, merged over DEFAULT_CONFIG.

        Args:
            config_path: The path to the YAML configuration file. None returns the defaults.

        Returns:
            A dictionary containing the effective configuration settings.

        Raises:
            ConfigurationError: If the file is missing, cannot be parsed as YAML,
                              or holds invalid values.
        """
        config = copy.deepcopy(DEFAULT_CONFIG)
        if config_path is None:
            logger.debug("No configuration file given; using defaults.")
            return config

        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            loaded = {} # empty file
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        for key, value in loaded.items():
            if key not in DEFAULT_CONFIG:
                logger.warning(f"Ignoring unknown configuration key '{key}' in {config_path}")
                continue
            config[key] = value

        validate_config(config)
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config


def validate_config(config: dict) -> None:
    """
    Checks types and ranges of the settings the pipeline depends on.

    Raises:
        ConfigurationError: On the first invalid value found.
    """
    for key in _POSITIVE_INTS:
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"'{key}' must be a positive integer, got {value!r}")
    if config['chunk_size'] % 2:
        raise ConfigurationError(f"'chunk_size' must be a whole number of 16-bit samples, got {config['chunk_size']}")

    duration = config.get('max_cue_duration')
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration <= 0:
        raise ConfigurationError(f"'max_cue_duration' must be a positive number, got {duration!r}")

    if config.get('on_write_error') not in WRITE_ERROR_POLICIES:
        raise ConfigurationError(f"'on_write_error' must be one of {WRITE_ERROR_POLICIES}, got {config.get('on_write_error')!r}")

    if not isinstance(config.get('vosk_log_level'), int) or isinstance(config.get('vosk_log_level'), bool):
        raise ConfigurationError(f"'vosk_log_level' must be an integer, got {config.get('vosk_log_level')!r}")

    ffmpeg_path = config.get('ffmpeg_path')
    if ffmpeg_path is not None and not isinstance(ffmpeg_path, str):
        raise ConfigurationError(f"'ffmpeg_path' must be a string, got {ffmpeg_path!r}")
