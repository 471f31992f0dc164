"""Layered configuration loading.

Merges the four source tiers in their fixed priority order::

    classpath default < url < override directory < command line
"""

import logging
from typing import Optional

from .loader.file import FileLoader, shorten_name
from .loader.merger import OverrideResolver
from .loader.sources import SourceEnumerator
from .models.schemas import ConfigSources, SourcePriority

logger = logging.getLogger(__name__)


class ConfigMapLoader:
    """Loads flat or per-file configuration from every source tier.

    Nothing is cached: each load re-enumerates and re-reads all sources.
    """

    def __init__(
        self,
        sources: Optional[ConfigSources] = None,
        file_loader: Optional[FileLoader] = None,
        resolver: Optional[OverrideResolver] = None,
    ):
        """Initialize the loader.

        Args:
            sources: Discovery inputs (snapshot of the environment if None)
            file_loader: Loader used for individual files
            resolver: Resolver used to apply override tiers
        """
        self.sources = sources if sources is not None else ConfigSources.from_environment()
        self.file_loader = file_loader or FileLoader()
        self.resolver = resolver or OverrideResolver()
        self._enumerator = SourceEnumerator(self.sources)

    def load(self, named: bool = False):
        """Load the flat mapping, or the per-file mapping when ``named``."""
        return self.load_named() if named else self.load_flat()

    def load_flat(self) -> dict[str, str]:
        """Merge every tier into one flat mapping.

        Returns:
            Final value of every key across all tiers
        """
        self.resolver.clear_history()
        logger.info("Loading config files from default 'config' location(s)")
        config = self.file_loader.load_multiple(
            self._enumerator.enumerate_classpath_default()
        )
        logger.info(f"Loaded {len(config)} default config key-values")

        url_files = self._enumerator.enumerate_url_sources()
        if url_files:
            url_config = self.file_loader.load_multiple(url_files)
            logger.info(f"Loaded {len(url_config)} key-values from URL location(s)")
            self.resolver.apply_overrides(config, url_config, SourcePriority.URL)

        override_files = self._enumerator.enumerate_override_directory()
        if override_files:
            override_config = self.file_loader.load_multiple(override_files)
            logger.info(f"Loaded {len(override_config)} override key-values")
            self.resolver.apply_overrides(
                config, override_config, SourcePriority.OVERRIDE_DIRECTORY
            )

        command_line = self._enumerator.enumerate_command_line_overrides()
        if command_line:
            logger.info(f"Applying {len(command_line)} command line override(s)")
            self.resolver.apply_overrides(
                config, command_line, SourcePriority.COMMAND_LINE
            )

        return config

    def load_named(self) -> dict[str, dict[str, str]]:
        """Load one mapping per source file, keyed by short file name.

        All file mappings are built first; the override directory files and
        command line overrides are then applied to every file mapping, each
        only replacing keys that file already declares.

        Returns:
            Mapping of file name to that file's overridden key-values
        """
        self.resolver.clear_history()
        named: dict[str, dict[str, str]] = {}

        tiers = [
            (SourcePriority.CLASSPATH, self._enumerator.enumerate_classpath_default()),
            (SourcePriority.URL, self._enumerator.enumerate_url_sources()),
        ]
        override_files = self._enumerator.enumerate_override_directory()
        tiers.append((SourcePriority.OVERRIDE_DIRECTORY, override_files))

        override_configs = []
        for source, files in tiers:
            for file_name in files:
                file_config = self.file_loader.load_key_values(file_name)
                if not file_config:
                    continue

                short_name = shorten_name(file_name)
                if short_name in named:
                    logger.warning(
                        f"Config file name '{short_name}' from {source.name} "
                        f"replaces an earlier file of the same name"
                    )
                named[short_name] = file_config

                if source is SourcePriority.OVERRIDE_DIRECTORY:
                    override_configs.append(dict(file_config))

        for override_config in override_configs:
            logger.info("Updating all file maps from override config location")
            self.resolver.apply_overrides_to_all(
                named, override_config, SourcePriority.OVERRIDE_DIRECTORY
            )

        command_line = self._enumerator.enumerate_command_line_overrides()
        if command_line:
            logger.info("Updating all file maps from command line overrides")
            self.resolver.apply_overrides_to_all(
                named, command_line, SourcePriority.COMMAND_LINE
            )

        return named
