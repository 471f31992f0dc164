"""Layered XML/JSON configuration loading."""

from .loader import (
    FileLoader,
    LoadFailure,
    OverrideResolver,
    SourceEnumerator,
    shorten_name,
)
from .manager import ConfigMapLoader
from .models import ConfigSources, SourcePriority

__all__ = [
    "ConfigMapLoader",
    "ConfigSources",
    "FileLoader",
    "LoadFailure",
    "OverrideResolver",
    "SourceEnumerator",
    "SourcePriority",
    "shorten_name",
]
