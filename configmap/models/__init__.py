"""Configuration models and schemas."""

from .schemas import (
    CONFIG_COMMAND_LINE,
    CONFIG_LOCATION,
    CONFIG_URL,
    DEFAULT_CONFIG_DIR_NAME,
    SUPPORTED_SUFFIXES,
    ConfigSources,
    OverrideRecord,
    SourcePriority,
)

__all__ = [
    "CONFIG_COMMAND_LINE",
    "CONFIG_LOCATION",
    "CONFIG_URL",
    "DEFAULT_CONFIG_DIR_NAME",
    "SUPPORTED_SUFFIXES",
    "ConfigSources",
    "OverrideRecord",
    "SourcePriority",
]
