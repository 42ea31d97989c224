"""
Test editor configuration.
"""

from pathlib import Path

import pytest

from editor.config import EditorConfig


def test_defaults():
    config = EditorConfig()
    assert config.levels_dir == Path("game/levels")
    assert config.level_extension == ".level"
    assert config.thumbnail_extension == ".png"
    assert config.metadata_extension == ".json"


def test_dict_round_trip(tmp_path):
    config = EditorConfig(levels_dir=tmp_path, thumbnail_cell_size=24)

    data = config.to_dict()
    assert data["levels_dir"] == str(tmp_path)

    loaded = EditorConfig.from_dict(data)
    assert loaded == config


def test_from_dict_fills_missing_keys():
    config = EditorConfig.from_dict({"levels_dir": "custom"})
    assert config.levels_dir == Path("custom")
    assert config.level_extension == ".level"


def test_levels_dir_string_is_converted():
    assert EditorConfig(levels_dir="somewhere").levels_dir == Path("somewhere")


def test_invalid_thumbnail_size():
    with pytest.raises(ValueError):
        EditorConfig(thumbnail_cell_size=0)
