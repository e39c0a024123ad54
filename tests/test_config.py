"""Tests for tlbuild.json loading."""

import json

import pytest

from teal_build.config import BuildConfig, load_config
from teal_build.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "tlbuild.json")
    assert config == BuildConfig()
    assert config.include == ["**/*.tl"]
    assert config.build_dir is None


def test_load_values(tmp_path):
    path = tmp_path / "tlbuild.json"
    path.write_text(json.dumps({
        "source_dir": "src",
        "build_dir": "build",
        "exclude": ["spec/**"],
        "include_dir": ["types"],
    }))
    config = load_config(path)
    assert config.source_dir == "src"
    assert config.build_dir == "build"
    assert config.exclude == ["spec/**"]
    assert config.search_dirs() == ["types", "src"]


def test_search_dirs_deduplicated():
    config = BuildConfig(source_dir="./src", include_dir=["src", "types/"])
    assert config.search_dirs() == ["src", "types"]


def test_malformed_json(tmp_path):
    path = tmp_path / "tlbuild.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(path)


def test_not_an_object(tmp_path):
    path = tmp_path / "tlbuild.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(path)


def test_invalid_field(tmp_path):
    path = tmp_path / "tlbuild.json"
    path.write_text(json.dumps({"include": "*.tl"}))
    with pytest.raises(ConfigError, match="Invalid"):
        load_config(path)
