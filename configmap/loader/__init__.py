"""Configuration loader package.

This package provides the flatteners, source discovery, file loader and
override resolver used to build layered configuration mappings.
"""

from .file import FileLoader, shorten_name
from .flatten import (
    ConfigurationError,
    JsonFlattener,
    LoadFailure,
    MalformedDocumentError,
    MissingSourceError,
    XmlFlattener,
)
from .merger import OverrideResolver
from .sources import SourceEnumerator

__all__ = [
    "ConfigurationError",
    "FileLoader",
    "JsonFlattener",
    "LoadFailure",
    "MalformedDocumentError",
    "MissingSourceError",
    "OverrideResolver",
    "SourceEnumerator",
    "XmlFlattener",
    "shorten_name",
]
