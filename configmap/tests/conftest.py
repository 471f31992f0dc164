"""Shared fixtures for configmap tests."""

import json
from pathlib import Path

import pytest


def write_xml(path: Path, key_values: dict, nested: str = "") -> Path:
    """Write a config document with a keyValueProperties block."""
    entries = "".join(f"<{k}>{v}</{k}>" for k, v in key_values.items())
    structure = f"<xmlStructure>{nested}</xmlStructure>" if nested else ""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"<config><keyValueProperties>{entries}</keyValueProperties>{structure}</config>",
        encoding="utf-8",
    )
    return path


def write_json(path: Path, key_values: dict) -> Path:
    """Write a JSON config document with a keyValueProperties block."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"keyValueProperties": key_values}), encoding="utf-8")
    return path


@pytest.fixture()
def code_root(tmp_path):
    """Create an application root with a default config directory."""
    root = tmp_path / "app"
    (root / "config").mkdir(parents=True)
    return root


@pytest.fixture()
def override_dir(tmp_path):
    """Create an empty override directory."""
    directory = tmp_path / "overrides"
    directory.mkdir()
    return directory
