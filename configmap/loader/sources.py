"""Configuration source discovery.

Finds the files and literal overrides for each of the four source tiers
from a ``ConfigSources`` snapshot. Missing inputs are never an error: every
enumerator returns an empty sequence when nothing is found.
"""

import logging
import os
from pathlib import Path

from ..models.schemas import DEFAULT_CONFIG_DIR_NAME, SUPPORTED_SUFFIXES, ConfigSources

logger = logging.getLogger(__name__)


def is_supported_file(path: Path) -> bool:
    """Check whether a path names an XML or JSON config file."""
    return path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES


class SourceEnumerator:
    """Enumerates configuration sources in a deterministic order.

    Files within a tier are ordered lexicographically by path, URL sources by
    their property key, so later entries win any in-tier key collision in a
    repeatable way.
    """

    def __init__(
        self,
        sources: ConfigSources,
        config_dir_name: str = DEFAULT_CONFIG_DIR_NAME,
        excluded_marker: str = "test",
    ):
        """Initialize the enumerator.

        Args:
            sources: Discovery inputs snapshot
            config_dir_name: Directory name searched under the code root
            excluded_marker: Directories whose relative path contains this are skipped
        """
        self.sources = sources
        self.config_dir_name = config_dir_name
        self.excluded_marker = excluded_marker

    def enumerate_classpath_default(self) -> list[str]:
        """Find every config file in ``config`` directories under the code root.

        Returns:
            Sorted list of file paths
        """
        root = Path(self.sources.code_root)
        if not root.is_dir():
            logger.warning(f"Code root is not a directory: {root}")
            return []

        found = set()
        for dirpath, dirnames, _ in os.walk(root):
            dirnames.sort()
            directory = Path(dirpath)
            if directory.name != self.config_dir_name:
                continue

            if self._is_excluded(root, directory):
                logger.debug(f"Skipping excluded config directory: {directory}")
                continue

            for candidate in directory.rglob("*"):
                if is_supported_file(candidate) and not self._is_excluded(
                    root, candidate.parent
                ):
                    found.add(str(candidate.resolve()))

        files = sorted(found)
        logger.debug(f"Found {len(files)} default config file(s) under {root}")
        return files

    def _is_excluded(self, root: Path, directory: Path) -> bool:
        if not self.excluded_marker:
            return False
        # Only the part below the code root counts
        relative = directory.relative_to(root).as_posix()
        return self.excluded_marker in relative

    def enumerate_url_sources(self) -> list[str]:
        """Return the configured file or remote URL sources."""
        return list(self.sources.url_sources)

    def enumerate_override_directory(self) -> list[str]:
        """List the config files directly inside the override directory.

        Returns:
            Sorted list of file paths (empty if the location is unset or missing)
        """
        location = self.sources.override_location
        if location is None:
            logger.debug("No override config location set, skipping override tier")
            return []

        directory = Path(location)
        if not directory.is_dir():
            logger.warning(f"Override config location is not a directory: {directory}")
            return []

        files = sorted(
            str(candidate) for candidate in directory.iterdir() if is_supported_file(candidate)
        )
        logger.debug(f"Found {len(files)} override config file(s) in {directory}")
        return files

    def enumerate_command_line_overrides(self) -> dict[str, str]:
        """Return the literal command line key-value overrides."""
        return dict(self.sources.command_line_overrides)
