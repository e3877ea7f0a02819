"""
Shared fixtures for Keel tests
"""
import json
import os
import sys

import pytest

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(TESTS_DIR)

# Project root for `keel`, tests dir for the `demo_controllers` package
sys.path.insert(0, PROJECT_ROOT)
sys.path.insert(0, TESTS_DIR)

from keel.core.bootstrap import clear_cache


def base_config():
    """Config tree used by most tests (all in-memory adapters)"""
    return {
        "app": {"name": "keel-test", "debug": False},
        "paths": {
            "base_uri": "/",
            "asset_uri": "/static/",
            "views_dir": os.path.join(PROJECT_ROOT, "views"),
        },
        "loader": {"namespaces": {"demo": "demo_controllers"}},
        "routes": [
            {"method": "GET", "pattern": "/", "controller": "index", "action": "index"},
            {"method": "GET", "pattern": "/items/{item_id}", "controller": "items", "action": "show", "namespace": "demo"},
        ],
        "dispatcher": {
            "default_namespace": "controllers",
            "error_handler": {"namespace": "controllers", "controller": "error"},
        },
        "database": {"adapter": "sqlite", "dbname": ":memory:"},
        "profiling": {"query": False},
        "cache": {"adapter": "memory", "prefix": "test_", "lifetime": 60},
        "session": {"adapter": "memory", "name": "keel_session", "lifetime": 0},
        "cookies": {"use_encryption": False},
    }


@pytest.fixture
def write_config(tmp_path):
    """Write base and local config files, returns their paths"""
    def write(base=None, local=None):
        etc = tmp_path / "etc"
        etc.mkdir(exist_ok=True)
        base_path = etc / "config.json"
        local_path = etc / "config.local.json"
        base_path.write_text(json.dumps(base if base is not None else base_config()))
        local_path.write_text(json.dumps(local if local is not None else {}))
        return str(base_path), str(local_path)
    return write


@pytest.fixture
def config_paths(write_config):
    return write_config()


@pytest.fixture(autouse=True)
def reset_default_container():
    """Every test starts without a default container or cached containers"""
    clear_cache()
    yield
    clear_cache()
