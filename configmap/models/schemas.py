"""Configuration source models.

This module defines the data used to drive a configuration load:
- The fixed priority order of the four source tiers
- An immutable snapshot of the discovery inputs (code root, URLs,
  override directory and command line overrides)
- Override records kept for diagnostics
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Discovery Property Names
# =============================================================================

CONFIG_LOCATION = "CONFIG_LOCATION"
CONFIG_URL = "CONFIG_URL"
CONFIG_COMMAND_LINE = "CONFIG_COMMAND_LINE"

DEFAULT_CONFIG_DIR_NAME = "config"
SUPPORTED_SUFFIXES = (".xml", ".json")


# =============================================================================
# Data Classes for Override Tracking
# =============================================================================


class SourcePriority(int, Enum):
    """Configuration source tiers in order of precedence (lowest to highest)."""

    CLASSPATH = 1
    URL = 2
    OVERRIDE_DIRECTORY = 3
    COMMAND_LINE = 4


@dataclass
class OverrideRecord:
    """A single key replaced while applying overrides."""

    key: str
    old_value: str
    new_value: str
    source: SourcePriority
    timestamp: float
    file_name: Optional[str] = None  # Set for per-file (named) merges


# =============================================================================
# Discovery Inputs
# =============================================================================


class ConfigSources(BaseModel):
    """Snapshot of the inputs used to discover configuration sources.

    Built once per caller from a property mapping (usually the process
    environment). Loaders only ever read this object, so repeated or
    concurrent loads never touch process-wide state.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    code_root: Path = Field(
        default_factory=Path.cwd,
        description="Root searched for 'config' directories",
    )
    url_sources: list[str] = Field(
        default_factory=list, description="File paths or URLs of remote configs"
    )
    override_location: Optional[Path] = Field(
        default=None, description="Directory holding override config files"
    )
    command_line_overrides: dict[str, str] = Field(
        default_factory=dict, description="Literal key-value overrides"
    )

    @classmethod
    def from_properties(
        cls, properties: Mapping[str, str], code_root: Optional[Path] = None
    ) -> "ConfigSources":
        """Extract the discovery inputs from a property mapping.

        Args:
            properties: Property or environment mapping
            code_root: Root searched for default configs (current directory if None)

        Returns:
            Immutable sources snapshot
        """
        # Sort by key so URL tiers merge in a stable order
        items = sorted((str(k), str(v)) for k, v in properties.items())

        url_sources = [value for key, value in items if key.startswith(CONFIG_URL)]
        command_line = {
            key: value for key, value in items if key.startswith(CONFIG_COMMAND_LINE)
        }

        location = properties.get(CONFIG_LOCATION)
        override_location = Path(location) if location else None

        return cls(
            code_root=Path(code_root) if code_root is not None else Path.cwd(),
            url_sources=url_sources,
            override_location=override_location,
            command_line_overrides=command_line,
        )

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        code_root: Optional[Path] = None,
    ) -> "ConfigSources":
        """Take a read-only snapshot of the process environment."""
        if environ is None:
            environ = dict(os.environ)
        return cls.from_properties(environ, code_root=code_root)
