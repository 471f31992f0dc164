"""Tests for the override resolver.

Tests flat overrides, per-file containment and the override history.
"""

import copy

from configmap.loader.merger import OverrideResolver
from configmap.models.schemas import SourcePriority


class TestSourcePriority:
    """Test cases for SourcePriority enum."""

    def test_priority_order(self):
        """Test source tiers are ordered lowest to highest."""
        assert (
            SourcePriority.CLASSPATH
            < SourcePriority.URL
            < SourcePriority.OVERRIDE_DIRECTORY
            < SourcePriority.COMMAND_LINE
        )


class TestOverrideResolver:
    """Test cases for OverrideResolver class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = OverrideResolver()

    def test_apply_overrides(self):
        """Test every overriding key is set and other keys are kept."""
        target = {"a": "1", "b": "2"}
        overrides = {"b": "20", "c": "30"}

        self.resolver.apply_overrides(target, overrides)

        assert target == {"a": "1", "b": "20", "c": "30"}

    def test_apply_overrides_postconditions(self):
        """Test overriding values win and untouched keys are unchanged."""
        target = {"k1": "x", "k2": "y", "k3": "z"}
        original = dict(target)
        overrides = {"k2": "new", "k4": "added"}

        self.resolver.apply_overrides(target, overrides)

        for key, value in overrides.items():
            assert target[key] == value
        for key in set(original) - set(overrides):
            assert target[key] == original[key]

    def test_apply_overrides_idempotent(self):
        """Test applying the same overrides twice equals applying once."""
        once = {"a": "1", "b": "2"}
        twice = copy.deepcopy(once)
        overrides = {"a": "9", "c": "3"}

        self.resolver.apply_overrides(once, overrides)
        self.resolver.apply_overrides(twice, overrides)
        self.resolver.apply_overrides(twice, overrides)

        assert once == twice

    def test_apply_overrides_records_replacements(self):
        """Test only replaced keys are recorded."""
        target = {"a": "1"}

        self.resolver.apply_overrides(
            target, {"a": "2", "b": "3"}, SourcePriority.OVERRIDE_DIRECTORY
        )
        history = self.resolver.get_override_history()

        assert len(history) == 1
        assert history[0].key == "a"
        assert history[0].old_value == "1"
        assert history[0].new_value == "2"
        assert history[0].source == SourcePriority.OVERRIDE_DIRECTORY
        assert history[0].file_name is None

    def test_apply_overrides_to_all_containment(self):
        """Test per-file overrides never inject new keys."""
        named = {"A.xml": {"x": "1", "y": "2"}, "C.xml": {"z": "3"}}

        self.resolver.apply_overrides_to_all(named, {"x": "9", "w": "0"})

        assert named == {"A.xml": {"x": "9", "y": "2"}, "C.xml": {"z": "3"}}

    def test_apply_overrides_to_all_every_file(self):
        """Test the override reaches every file declaring the key."""
        named = {"A.xml": {"x": "1"}, "B.json": {"x": "2", "y": "3"}}

        self.resolver.apply_overrides_to_all(
            named, {"x": "9"}, SourcePriority.COMMAND_LINE
        )

        assert named["A.xml"]["x"] == "9"
        assert named["B.json"] == {"x": "9", "y": "3"}
        history = self.resolver.get_override_history()
        assert {record.file_name for record in history} == {"A.xml", "B.json"}

    def test_history_is_a_copy(self):
        """Test callers cannot mutate the recorded history."""
        self.resolver.apply_overrides({"a": "1"}, {"a": "2"})

        history = self.resolver.get_override_history()
        history.clear()

        assert len(self.resolver.get_override_history()) == 1

    def test_clear_history(self):
        """Test clearing the override history."""
        self.resolver.apply_overrides({"a": "1"}, {"a": "2"})
        self.resolver.clear_history()

        assert self.resolver.get_override_history() == []
