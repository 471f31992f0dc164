"""Flatteners for XML and JSON configuration documents.

Both formats share one document layout, optionally wrapped in a root
element (or top-level key) named ``config``::

    <config>
      <keyValueProperties>
        <timeout>30</timeout>
      </keyValueProperties>
      <xmlStructure>
        <db><host>localhost</host></db>
      </xmlStructure>
    </config>

Key join policy:
- ``keyValueProperties`` children map directly: ``timeout = "30"``
- Nested keys are the element (or field) names below the structure block
  joined with ``.``: ``db.host = "localhost"``
- XML attributes are stored as ``<path>.@<attribute>``
- Repeated XML siblings and JSON array items are indexed: ``servers.server[0]``
- Values are always strings; JSON scalars keep their JSON text (``"true"``,
  ``"null"``, ``"42"``)
"""

import json
import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

logger = logging.getLogger(__name__)

KEY_VALUE_BLOCK = "keyValueProperties"
STRUCTURE_BLOCK = "xmlStructure"
JSON_STRUCTURE_BLOCK = "jsonStructure"
ROOT_ELEMENT = "config"

KEY_SEPARATOR = "."


class ConfigurationError(Exception):
    """Base exception for configuration errors."""

    pass


class LoadFailure(ConfigurationError):
    """Exception raised when a document contributes no configuration."""

    pass


class MissingSourceError(LoadFailure):
    """Exception raised when a referenced file or URL cannot be read."""

    pass


class MalformedDocumentError(LoadFailure):
    """Exception raised when a document does not parse into a known form."""

    pass


def read_document(source: Union[str, Path], timeout: float = 10.0) -> bytes:
    """Read a configuration document from a path, file URL, or HTTP(S) URL.

    The raw bytes are returned so the XML and JSON parsers can honor a
    byte-order mark or a declared encoding themselves.

    Args:
        source: Local path, ``file://`` URL, or ``http(s)://`` URL
        timeout: Request timeout in seconds for remote documents

    Returns:
        Document content

    Raises:
        MissingSourceError: If the document does not exist or cannot be fetched
    """
    location = str(source)
    parsed = urlparse(location)

    if parsed.scheme in ("http", "https"):
        try:
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise MissingSourceError(f"Failed to fetch {location}: {e}")
        return response.content

    if parsed.scheme == "file":
        path = Path(url2pathname(parsed.path))
    else:
        path = Path(location)

    if not path.is_file():
        raise MissingSourceError(f"Configuration file not found: {path}")

    try:
        return path.read_bytes()
    except OSError as e:
        raise MissingSourceError(f"Failed to read file {path}: {e}")


def _join(prefix: str, name: str) -> str:
    return f"{prefix}{KEY_SEPARATOR}{name}" if prefix else name


class BaseFlattener(ABC):
    """Common reading logic shared by the format specific flatteners."""

    def __init__(self, timeout: float = 10.0):
        """Initialize the flattener.

        Args:
            timeout: Request timeout for remote documents
        """
        self.timeout = timeout

    def flatten(self, source: Union[str, Path]) -> dict[str, str]:
        """Read and flatten a document.

        Args:
            source: Local path or URL of the document

        Returns:
            Flat mapping of joined key paths to string values

        Raises:
            LoadFailure: If the document is absent, malformed, or of unknown form
        """
        content = read_document(source, timeout=self.timeout)
        return self.flatten_text(content, origin=str(source))

    @abstractmethod
    def flatten_text(
        self, text: Union[str, bytes], origin: str = "<string>"
    ) -> dict[str, str]:
        """Flatten an already read document (text or raw bytes)."""
        pass


class XmlFlattener(BaseFlattener):
    """Flattens ``keyValueProperties`` and ``xmlStructure`` XML blocks."""

    def flatten_text(
        self, text: Union[str, bytes], origin: str = "<string>"
    ) -> dict[str, str]:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedDocumentError(f"Invalid XML in {origin}: {e}")

        blocks = self._find_blocks(root)
        if not blocks:
            raise MalformedDocumentError(
                f"No {KEY_VALUE_BLOCK} or {STRUCTURE_BLOCK} block in {origin}"
            )

        result: dict[str, str] = {}
        for block in blocks:
            if self._local_name(block) == KEY_VALUE_BLOCK:
                self._flatten_key_values(block, origin, result)
            else:
                for path, child in self._child_paths("", list(block)):
                    self._flatten_element(child, path, result)

        logger.debug(f"Flattened {len(result)} XML key-values from {origin}")
        return result

    def _find_blocks(self, root: ET.Element) -> list[ET.Element]:
        known = (KEY_VALUE_BLOCK, STRUCTURE_BLOCK)
        if self._local_name(root) in known:
            return [root]
        return [child for child in root if self._local_name(child) in known]

    def _flatten_key_values(
        self, block: ET.Element, origin: str, result: dict[str, str]
    ) -> None:
        for child in block:
            name = self._local_name(child)
            if len(child):
                raise MalformedDocumentError(
                    f"Nested element '{name}' in {KEY_VALUE_BLOCK} of {origin}"
                )
            result[name] = (child.text or "").strip()

    def _flatten_element(
        self, element: ET.Element, path: str, result: dict[str, str]
    ) -> None:
        for attribute, value in sorted(element.attrib.items()):
            result[f"{path}{KEY_SEPARATOR}@{self._local_name(attribute)}"] = value

        children = list(element)
        text = (element.text or "").strip()

        if not children:
            result[path] = text
            return

        # Mixed content keeps its text under the element's own path
        if text:
            result[path] = text

        for child_path, child in self._child_paths(path, children):
            self._flatten_element(child, child_path, result)

    def _child_paths(
        self, prefix: str, children: list[ET.Element]
    ) -> list[tuple[str, ET.Element]]:
        counts = Counter(self._local_name(child) for child in children)
        seen: Counter = Counter()
        paths = []

        for child in children:
            name = self._local_name(child)
            if counts[name] > 1:
                segment = f"{name}[{seen[name]}]"
                seen[name] += 1
            else:
                segment = name
            paths.append((_join(prefix, segment), child))

        return paths

    @staticmethod
    def _local_name(element_or_name: Union[ET.Element, str]) -> str:
        name = (
            element_or_name
            if isinstance(element_or_name, str)
            else element_or_name.tag
        )
        # Drop any "{namespace}" prefix
        return name.rsplit("}", 1)[-1]


class JsonFlattener(BaseFlattener):
    """Flattens ``keyValueProperties`` and nested structure JSON blocks."""

    structure_keys = (STRUCTURE_BLOCK, JSON_STRUCTURE_BLOCK)

    def flatten_text(
        self, text: Union[str, bytes], origin: str = "<string>"
    ) -> dict[str, str]:
        try:
            document = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedDocumentError(f"Invalid JSON in {origin}: {e}")

        if not isinstance(document, dict):
            raise MalformedDocumentError(
                f"Top-level JSON must be an object in {origin}, "
                f"got: {type(document).__name__}"
            )

        if not self._has_blocks(document) and isinstance(
            document.get(ROOT_ELEMENT), dict
        ):
            document = document[ROOT_ELEMENT]

        if not self._has_blocks(document):
            raise MalformedDocumentError(
                f"No {KEY_VALUE_BLOCK} or {STRUCTURE_BLOCK} block in {origin}"
            )

        result: dict[str, str] = {}

        if KEY_VALUE_BLOCK in document:
            self._flatten_key_values(document[KEY_VALUE_BLOCK], origin, result)

        for key in self.structure_keys:
            if key not in document:
                continue
            structure = document[key]
            if not isinstance(structure, dict):
                raise MalformedDocumentError(f"'{key}' must be an object in {origin}")
            self._flatten_value(structure, "", result)

        logger.debug(f"Flattened {len(result)} JSON key-values from {origin}")
        return result

    def _has_blocks(self, document: dict[str, Any]) -> bool:
        return KEY_VALUE_BLOCK in document or any(
            key in document for key in self.structure_keys
        )

    def _flatten_key_values(
        self, block: Any, origin: str, result: dict[str, str]
    ) -> None:
        if not isinstance(block, dict):
            raise MalformedDocumentError(
                f"'{KEY_VALUE_BLOCK}' must be an object in {origin}"
            )

        for key, value in block.items():
            if isinstance(value, (dict, list)):
                raise MalformedDocumentError(
                    f"Nested value '{key}' in {KEY_VALUE_BLOCK} of {origin}"
                )
            result[key] = self._to_string(value)

    def _flatten_value(self, value: Any, path: str, result: dict[str, str]) -> None:
        if isinstance(value, dict):
            for key, child in value.items():
                self._flatten_value(child, _join(path, str(key)), result)
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._flatten_value(item, f"{path}[{index}]", result)
        else:
            result[path] = self._to_string(value)

    @staticmethod
    def _to_string(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value)
