"""
Tests for the layered config store
"""
import json

import pytest

from keel.core.config_store import ConfigNode, load, load_file, merge
from keel.core.errors import ConfigLoadError, ConfigMergeError


BASE = {
    "app": {"name": "keel", "debug": False},
    "database": {"host": "localhost", "port": 3306, "options": {"persistent": True}},
    "hosts": ["a", "b"],
}

OVERRIDE = {
    "app": {"debug": True},
    "database": {"host": "db.internal", "options": {"timeout": 5}},
    "hosts": ["c"],
    "extra": {"enabled": True},
}


class TestMerge:
    """Deep union semantics"""

    def test_override_leaf_replaces_base_leaf(self):
        config = merge(BASE, OVERRIDE)
        assert config.app.debug is True
        assert config.database.host == "db.internal"

    def test_keys_missing_from_override_are_kept(self):
        config = merge(BASE, OVERRIDE)
        assert config.app.name == "keel"
        assert config.database.port == 3306
        assert config.database.options.persistent is True
        assert config.database.options.timeout == 5

    def test_new_keys_are_added(self):
        assert merge(BASE, OVERRIDE).extra.enabled is True

    def test_sequences_are_replaced_wholesale(self):
        assert merge(BASE, OVERRIDE).hosts == ("c",)

    def test_merge_is_idempotent_under_repeated_override(self):
        once = merge(BASE, OVERRIDE)
        twice = merge(once, OVERRIDE)
        assert once == twice
        assert once.to_dict() == twice.to_dict()

    def test_empty_override_is_identity(self):
        assert merge(BASE, {}).to_dict() == BASE

    def test_map_against_scalar_is_a_merge_error(self):
        with pytest.raises(ConfigMergeError) as exc_info:
            merge(BASE, {"database": {"options": "fast"}})
        assert exc_info.value.path == "database.options"
        assert exc_info.value.base_kind == "map"
        assert exc_info.value.override_kind == "scalar"

    def test_scalar_against_map_is_a_merge_error(self):
        with pytest.raises(ConfigMergeError):
            merge(BASE, {"app": {"name": {"first": "k"}}})

    def test_inputs_are_not_mutated(self):
        base = json.loads(json.dumps(BASE))
        merge(base, OVERRIDE)
        assert base == BASE

    def test_node_merge_method(self):
        assert ConfigNode(BASE).merge(OVERRIDE) == merge(BASE, OVERRIDE)


class TestConfigNode:
    """Read-only tree access"""

    def test_item_and_attribute_access(self):
        config = ConfigNode(BASE)
        assert config["database"]["port"] == config.database.port == 3306

    def test_nested_values_are_frozen(self):
        config = ConfigNode(BASE)
        assert isinstance(config.database, ConfigNode)
        assert isinstance(config.hosts, tuple)

    def test_assignment_is_rejected(self):
        config = ConfigNode(BASE)
        with pytest.raises(AttributeError):
            config.app = {}
        with pytest.raises(TypeError):
            config["app"] = {}

    def test_missing_attribute(self):
        with pytest.raises(AttributeError):
            ConfigNode(BASE).nothing

    def test_dotted_path(self):
        config = ConfigNode(BASE)
        assert config.path("database.options.persistent") is True
        assert config.path("database.missing.key", "fallback") == "fallback"
        assert config.path("app.name.first") is None

    def test_to_dict_round_trips_plain_data(self):
        assert ConfigNode(BASE).to_dict() == BASE


class TestLoad:
    """Reading config sources from disk"""

    def test_load_merges_both_files(self, tmp_path):
        base_path = tmp_path / "config.json"
        local_path = tmp_path / "config.local.json"
        base_path.write_text(json.dumps(BASE))
        local_path.write_text(json.dumps(OVERRIDE))

        config = load(base_path, local_path)
        assert config == merge(BASE, OVERRIDE)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigLoadError) as exc_info:
            load_file(tmp_path / "nope.json")
        assert "file not found" in str(exc_info.value)

    def test_missing_override_fails_the_load(self, tmp_path):
        base_path = tmp_path / "config.json"
        base_path.write_text(json.dumps(BASE))
        with pytest.raises(ConfigLoadError):
            load(base_path, tmp_path / "config.local.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigLoadError) as exc_info:
            load_file(path)
        assert exc_info.value.path == str(path)

    def test_invalid_utf8(self, tmp_path):
        base_path = tmp_path / "config.json"
        local_path = tmp_path / "config.local.json"
        base_path.write_bytes(b'{"a": "\xff\xfe"}')
        local_path.write_text("{}")
        with pytest.raises(ConfigLoadError) as exc_info:
            load(base_path, local_path)
        assert "UTF-8" in exc_info.value.reason

    def test_deeply_nested_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"a": ' + "[" * 100000 + "]" * 100000 + "}")
        with pytest.raises(ConfigLoadError):
            load_file(path)

    def test_top_level_must_be_an_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ConfigLoadError):
            load_file(path)

    def test_conflicting_files_raise_merge_error(self, tmp_path):
        base_path = tmp_path / "config.json"
        local_path = tmp_path / "config.local.json"
        base_path.write_text(json.dumps({"cache": {"adapter": "memory"}}))
        local_path.write_text(json.dumps({"cache": "memory"}))
        with pytest.raises(ConfigMergeError):
            load(base_path, local_path)
