"""Shared fixtures for the icon toolkit test suite."""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from icon_toolkit.config import ConfigManager

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user config overrides at an empty directory and reload config."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("ICON_TOOLKIT_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def basic_icon_set_data():
    """Icon set with a plain alias, a variation, a broken alias and a long chain."""
    return {
        "prefix": "foo",
        "icons": {
            "bar": {
                "body": '<g id="bar" />',
                # Default values
                "width": 16,
                "height": 16,
            },
            "baz": {
                "body": '<g id="baz" />',
                "width": 24,
                "height": 24,
            },
        },
        "aliases": {
            "alias1": {"parent": "bar"},
            "variation1": {"parent": "baz", "hFlip": True},
            "invalid": {"parent": "missing"},
            "alias2": {"parent": "alias1"},
            "alias3": {"parent": "alias2"},
            "alias4": {"parent": "alias3"},
            "alias5": {"parent": "alias4"},
            "alias6": {"parent": "alias5"},
            "alias7": {"parent": "alias6"},
        },
    }


@pytest.fixture
def hidden_icon_set_data():
    """Icon set with a hidden icon, characters and categories."""
    return {
        "prefix": "foo",
        "icons": {
            "bar": {
                "body": '<g id="bar" />',
                "width": 16,
                "height": 16,
            },
            "baz": {
                "body": '<g id="baz" />',
                "width": 24,
                "height": 24,
                "hidden": True,
            },
        },
        "aliases": {
            "alias1": {"parent": "bar"},
            "variation1": {"parent": "baz", "hFlip": True},
            "invalid": {"parent": "missing"},
        },
        "chars": {
            "f00": "bar",
            "f01": "baz",
            "f02": "alias1",
            "f03": "variation1",
        },
        "categories": {
            "To Rename": ["baz"],
            "Other": ["bar", "variation1", "no-such-icon"],
            "Empty": ["no-such-icon"],
        },
    }
