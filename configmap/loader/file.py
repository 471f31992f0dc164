"""File-based configuration loader.

Dispatches each configuration file (or URL) to the XML or JSON flattener
based on its extension and turns load failures into empty contributions.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union
from urllib.parse import urlparse

from .flatten import JsonFlattener, LoadFailure, XmlFlattener

logger = logging.getLogger(__name__)


class ConfigFormat(Enum):
    """Supported configuration file formats."""

    XML = "xml"
    JSON = "json"


def shorten_name(path: Optional[Union[str, Path]]) -> Optional[str]:
    """Strip the leading path components from a file path or URL.

    Args:
        path: File path or URL

    Returns:
        The final path segment, or None for an empty input
    """
    if path is None:
        return None

    name = str(path)
    if not name:
        return None

    separators = {"/", os.sep}
    cut = max(name.rfind(separator) for separator in separators)
    if cut < 0:
        return name
    return name[cut + 1 :]


class FileLoader:
    """Configuration file loader for XML and JSON documents.

    Supports:
    - Local files, file:// URLs and http(s):// URLs
    - Extension based format detection
    - Loading several files into one mapping
    """

    def __init__(self, timeout: float = 10.0):
        """Initialize the file loader.

        Args:
            timeout: Request timeout in seconds for remote documents
        """
        self.timeout = timeout
        self._flatteners = {
            ConfigFormat.XML: XmlFlattener(timeout=timeout),
            ConfigFormat.JSON: JsonFlattener(timeout=timeout),
        }

    def load_key_values(self, file_name: Optional[Union[str, Path]]) -> dict[str, str]:
        """Load the key-values of one XML or JSON file.

        Args:
            file_name: File path or URL

        Returns:
            Flat mapping; empty for unsupported extensions or failed loads
        """
        if not file_name:
            return {}

        format = self.detect_format(file_name)
        if format is None:
            logger.debug(f"Skipping unsupported config file: {file_name}")
            return {}

        try:
            config = self._flatteners[format].flatten(file_name)
        except LoadFailure as e:
            logger.warning(f"Could not load configuration from {file_name}: {e}")
            return {}

        logger.info(f"Loaded {len(config)} key-values from {file_name} ({format.value})")
        return config

    def load_from_xml_file(self, file_name: Union[str, Path]) -> dict[str, str]:
        """Flatten an XML file.

        Raises:
            LoadFailure: If the file is missing or malformed
        """
        logger.info(f"Loading XML config from {file_name}")
        return self._flatteners[ConfigFormat.XML].flatten(file_name)

    def load_from_json_file(self, file_name: Union[str, Path]) -> dict[str, str]:
        """Flatten a JSON file.

        Raises:
            LoadFailure: If the file is missing or malformed
        """
        logger.info(f"Loading JSON config from {file_name}")
        return self._flatteners[ConfigFormat.JSON].flatten(file_name)

    def load_multiple(self, file_names: Iterable[Union[str, Path]]) -> dict[str, str]:
        """Load several files into one mapping.

        Later files silently overwrite colliding keys of earlier ones.

        Args:
            file_names: File paths or URLs in load order

        Returns:
            Union of every file's key-values
        """
        config: dict[str, str] = {}
        for file_name in file_names:
            config.update(self.load_key_values(file_name))
        return config

    @staticmethod
    def detect_format(file_name: Union[str, Path]) -> Optional[ConfigFormat]:
        """Detect the configuration format from a path or URL extension.

        Returns:
            Detected format, or None if unsupported
        """
        name = str(file_name)
        parsed = urlparse(name)
        if parsed.scheme in ("http", "https", "file"):
            name = parsed.path

        suffix = Path(name).suffix.lower()
        format_map = {
            ".xml": ConfigFormat.XML,
            ".json": ConfigFormat.JSON,
        }
        return format_map.get(suffix)
