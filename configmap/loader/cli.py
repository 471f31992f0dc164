"""Command line front end for the configuration loader.

Turns ``-D KEY=VALUE`` style properties, ``--location`` and ``--url``
arguments into a ``ConfigSources`` snapshot and prints the merged
configuration as JSON or YAML.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml

from ..manager import ConfigMapLoader
from ..models.schemas import CONFIG_LOCATION, CONFIG_URL, ConfigSources
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Exception raised for CLI argument errors."""

    pass


def parse_property(text: str) -> tuple[str, str]:
    """Split a ``KEY=VALUE`` property definition.

    Raises:
        CLIError: If the definition has no '=' or an empty key
    """
    key, separator, value = text.partition("=")
    key = key.strip()
    if not separator or not key:
        raise CLIError(f"Invalid property definition '{text}', expected KEY=VALUE")
    return key, value


class CLILoader:
    """Builds configuration sources from command line arguments."""

    def __init__(self, prog_name: str = "configmap"):
        self.prog_name = prog_name
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=self.prog_name,
            description="Load and merge layered XML/JSON configuration",
            epilog=(
                "Sources are merged in order: 'config' directories under the root, "
                f"{CONFIG_URL}* URLs, the {CONFIG_LOCATION} directory, then "
                "command line overrides."
            ),
        )
        parser.add_argument(
            "--root",
            type=Path,
            default=None,
            help="Code root searched for 'config' directories (default: cwd)",
        )
        parser.add_argument(
            "--location", default=None, help=f"Override directory ({CONFIG_LOCATION})"
        )
        parser.add_argument(
            "--url",
            action="append",
            default=[],
            help="Config file or URL to load (repeatable)",
        )
        parser.add_argument(
            "-D",
            dest="properties",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help="Set a discovery property or command line override (repeatable)",
        )
        parser.add_argument(
            "--no-env",
            action="store_true",
            help="Ignore properties from the process environment",
        )
        parser.add_argument(
            "--named",
            action="store_true",
            help="Print one mapping per source file instead of a flat mapping",
        )
        parser.add_argument(
            "--format", choices=["json", "yaml"], default="json", help="Output format"
        )
        parser.add_argument(
            "--require",
            action="store_true",
            help="Exit with status 1 when no configuration was loaded",
        )
        parser.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging level",
        )
        parser.add_argument(
            "--logging-config", default=None, help="YAML logging configuration file"
        )
        return parser

    def parse(self, args: Optional[list[str]] = None) -> argparse.Namespace:
        """Parse arguments (``sys.argv`` if None)."""
        return self.parser.parse_args(args)

    def build_sources(
        self, parsed: argparse.Namespace, environ: Optional[dict[str, str]] = None
    ) -> ConfigSources:
        """Build the discovery snapshot from parsed arguments.

        Command line values take precedence over environment properties.

        Raises:
            CLIError: If a property definition is invalid
        """
        properties: dict[str, str] = {}
        if not parsed.no_env:
            properties.update(os.environ if environ is None else environ)

        for definition in parsed.properties:
            key, value = parse_property(definition)
            properties[key] = value

        if parsed.location:
            properties[CONFIG_LOCATION] = parsed.location

        for index, url in enumerate(parsed.url):
            properties[f"{CONFIG_URL}.cli.{index:04d}"] = url

        return ConfigSources.from_properties(properties, code_root=parsed.root)

    def render(self, config: dict, output_format: str) -> str:
        if output_format == "yaml":
            return yaml.safe_dump(config, default_flow_style=False, sort_keys=True)
        return json.dumps(config, indent=2, sort_keys=True)


def main(args: Optional[list[str]] = None) -> int:
    """Run the command line front end.

    Returns:
        Process exit status
    """
    cli = CLILoader()
    parsed = cli.parse(args)

    setup_logging(
        config_path=parsed.logging_config,
        default_level=getattr(logging, parsed.log_level),
    )

    try:
        sources = cli.build_sources(parsed)
    except CLIError as e:
        cli.parser.error(str(e))

    config = ConfigMapLoader(sources=sources).load(named=parsed.named)

    if parsed.require and not config:
        logger.error("No configuration was loaded from any source")
        return 1

    sys.stdout.write(cli.render(config, parsed.format))
    sys.stdout.write("\n")
    return 0
