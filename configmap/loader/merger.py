"""Override resolution for flat and per-file configuration mappings.

Applies a higher priority mapping onto a lower priority one, logging and
recording every key whose value gets replaced.
"""

import copy
import logging
import time
from typing import Optional

from ..models.schemas import OverrideRecord, SourcePriority

logger = logging.getLogger(__name__)


class OverrideResolver:
    """Applies overrides to configuration mappings.

    Supports:
    - Flat overrides (every overriding key is set)
    - Per-file overrides that only refine keys a file already declares
    - A history of replaced values for diagnostics
    """

    def __init__(self):
        """Initialize the resolver with an empty override history."""
        self._override_history: list[OverrideRecord] = []

    def apply_overrides(
        self,
        target: dict[str, str],
        overrides: dict[str, str],
        source: SourcePriority = SourcePriority.COMMAND_LINE,
    ) -> None:
        """Apply every override onto the target mapping in place.

        Args:
            target: Mapping to update
            overrides: Higher priority key-values
            source: Tier the overrides come from
        """
        for key, value in overrides.items():
            if key in target:
                self._record(key, target[key], value, source)
                logger.info(f"Overriding {key}: '{target[key]}' with '{value}'")
            target[key] = value

    def apply_overrides_to_all(
        self,
        named: dict[str, dict[str, str]],
        overrides: dict[str, str],
        source: SourcePriority = SourcePriority.COMMAND_LINE,
    ) -> None:
        """Apply overrides to every per-file mapping in place.

        Only keys a file mapping already holds are replaced; overrides never
        add keys to a file that did not declare them.

        Args:
            named: Mappings keyed by source file name
            overrides: Higher priority key-values
            source: Tier the overrides come from
        """
        for file_name, file_config in named.items():
            for key, value in overrides.items():
                if key not in file_config:
                    continue
                old_value = file_config[key]
                file_config[key] = value
                self._record(key, old_value, value, source, file_name)
                logger.info(
                    f"Replaced {file_name}:{key} '{old_value}' with '{value}'"
                )

    def get_override_history(self) -> list[OverrideRecord]:
        """Get the replacements recorded since the last clear.

        Returns:
            List of override records
        """
        return copy.deepcopy(self._override_history)

    def clear_history(self):
        """Clear the override history."""
        self._override_history.clear()

    def _record(
        self,
        key: str,
        old_value: str,
        new_value: str,
        source: SourcePriority,
        file_name: Optional[str] = None,
    ) -> None:
        self._override_history.append(
            OverrideRecord(
                key=key,
                old_value=old_value,
                new_value=new_value,
                source=source,
                timestamp=time.time(),
                file_name=file_name,
            )
        )
