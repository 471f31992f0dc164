"""Tests for the file configuration loader.

Tests extension dispatch, failure handling and short name extraction.
"""

import json
import os
import tempfile
from unittest.mock import Mock, patch

import pytest

from configmap.loader.file import ConfigFormat, FileLoader, shorten_name
from configmap.loader.flatten import LoadFailure

from .conftest import write_json, write_xml


class TestShortenName:
    """Test cases for shorten_name."""

    def test_strips_path(self):
        assert shorten_name("/a/b/c.xml") == "c.xml"

    def test_no_separator(self):
        assert shorten_name("c.xml") == "c.xml"

    def test_none(self):
        assert shorten_name(None) is None

    def test_empty(self):
        assert shorten_name("") is None

    def test_url(self):
        assert shorten_name("http://example.com/configs/remote.json") == "remote.json"


class TestFileLoader:
    """Test cases for FileLoader class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = FileLoader()

    def test_init_defaults(self):
        """Test FileLoader initialization with default values."""
        assert self.loader.timeout == 10.0

    def test_detect_format(self):
        """Test format detection from extensions and URLs."""
        assert self.loader.detect_format("app.xml") == ConfigFormat.XML
        assert self.loader.detect_format("APP.JSON") == ConfigFormat.JSON
        assert (
            self.loader.detect_format("http://example.com/app.json?rev=2")
            == ConfigFormat.JSON
        )
        assert self.loader.detect_format("app.txt") is None
        assert self.loader.detect_format("xml") is None

    def test_load_xml(self, tmp_path):
        """Test loading an XML file."""
        path = write_xml(tmp_path / "app.xml", {"x": "1", "y": "2"})
        assert self.loader.load_key_values(str(path)) == {"x": "1", "y": "2"}

    def test_load_json(self, tmp_path):
        """Test loading a JSON file."""
        path = write_json(tmp_path / "app.json", {"x": 1})
        assert self.loader.load_key_values(path) == {"x": "1"}

    def test_load_unsupported_extension(self):
        """Test a .txt file yields an empty mapping, not a failure."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False) as f:
            f.write("x=1")
            temp_path = f.name

        try:
            assert self.loader.load_key_values(temp_path) == {}
        finally:
            os.unlink(temp_path)

    def test_load_empty_reference(self):
        """Test None and empty references yield empty mappings."""
        assert self.loader.load_key_values(None) == {}
        assert self.loader.load_key_values("") == {}

    def test_load_missing_file(self, tmp_path):
        """Test a missing file contributes nothing."""
        assert self.loader.load_key_values(tmp_path / "missing.xml") == {}

    def test_load_malformed_file(self, tmp_path):
        """Test a malformed file contributes nothing."""
        path = tmp_path / "broken.json"
        path.write_text('{"unknown": true}')
        assert self.loader.load_key_values(path) == {}

    def test_load_from_xml_file_raises(self, tmp_path):
        """Test the direct XML loader propagates failures."""
        with pytest.raises(LoadFailure):
            self.loader.load_from_xml_file(tmp_path / "missing.xml")

    def test_load_from_json_file_raises(self, tmp_path):
        """Test the direct JSON loader propagates failures."""
        path = tmp_path / "bad.json"
        path.write_text("not json")
        with pytest.raises(LoadFailure):
            self.loader.load_from_json_file(path)

    def test_load_multiple_later_wins(self, tmp_path):
        """Test later files overwrite earlier colliding keys."""
        first = write_xml(tmp_path / "a.xml", {"x": "1", "y": "2"})
        second = write_json(tmp_path / "b.json", {"x": "3"})

        result = self.loader.load_multiple([first, second, tmp_path / "missing.xml"])

        assert result == {"x": "3", "y": "2"}

    @patch("configmap.loader.flatten.requests.get")
    def test_load_remote_json(self, mock_get):
        """Test loading a JSON document from a URL."""
        response = Mock()
        response.content = json.dumps({"keyValueProperties": {"remote": "yes"}}).encode()
        mock_get.return_value = response

        result = self.loader.load_key_values("https://example.com/app.json")

        assert result == {"remote": "yes"}
        mock_get.assert_called_once_with("https://example.com/app.json", timeout=10.0)

    def test_load_json_with_bom(self, tmp_path):
        """Test a JSON file saved with a UTF-8 BOM still loads."""
        path = tmp_path / "bom.json"
        path.write_bytes(b'\xef\xbb\xbf{"keyValueProperties": {"a": "1"}}')

        assert self.loader.load_key_values(path) == {"a": "1"}
