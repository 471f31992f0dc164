"""Logging configuration utilities for configmap."""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER_NAME = "configmap.console"


def setup_logging(
    config_path: Optional[str] = None,
    default_level: int = logging.INFO,
    env_key: str = "CONFIGMAP_LOG_CFG",
) -> None:
    """Setup logging configuration.

    Args:
        config_path: Path to a YAML logging configuration file
        default_level: Default logging level if config file is not found
        env_key: Environment variable key for config path override
    """
    if config_path is None:
        config_path = os.getenv(env_key)

    if config_path and Path(config_path).exists():
        try:
            with open(config_path, encoding="utf-8") as config_file:
                config = yaml.safe_load(config_file)
            logging.config.dictConfig(config)
            return
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            _setup_default_logging(default_level)
            logging.getLogger(__name__).warning(
                f"Error loading logging configuration from {config_path}: {e}. "
                "Using default logging configuration"
            )
            return

    _setup_default_logging(default_level)
    if config_path:
        logging.getLogger(__name__).warning(
            f"Logging config file {config_path} not found. Using default configuration."
        )


def _setup_default_logging(level: int) -> None:
    """Setup default logging with a console handler on stderr.

    Args:
        level: Logging level
    """
    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace the handler installed by an earlier setup
    for handler in list(root_logger.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
