"""
Test level file storage.
"""

import json
import logging
from unittest.mock import patch

import pygame
import pytest

from editor.errors import LevelLoadError, LevelWriteError
from editor.level_store import LevelFileStore, LevelKind, LevelMetadata
from framework.bubbles import BubbleGridModel, BubbleType


def test_paths_are_keyed_by_name_and_kind(store, editor_config):
    base = editor_config.levels_dir
    assert store.path_for("Level1", LevelKind.DATA) == base / "Level1.level"
    assert store.path_for("Level1", LevelKind.THUMBNAIL) == base / "Level1.png"
    assert store.path_for("Level1", LevelKind.METADATA) == base / "Level1.json"


def test_invalid_names_have_no_path(store):
    with pytest.raises(ValueError):
        store.path_for("../outside", LevelKind.DATA)


def test_store_creates_levels_dir(editor_config):
    assert not editor_config.levels_dir.exists()
    LevelFileStore(editor_config)
    assert editor_config.levels_dir.is_dir()


def test_save_and_load(store, grid):
    assert not store.exists("Level1")

    assert store.save("Level1", grid)
    assert store.exists("Level1")

    loaded = store.load("Level1")
    assert loaded.cells == grid.cells
    assert loaded.loaded_file_name == "Level1"


def test_save_overwrites_existing_level(store, grid):
    store.save("Level1", grid)
    grid.set(2, 2, BubbleType.BOMB)
    store.save("Level1", grid)

    assert store.load("Level1").get(2, 2) is BubbleType.BOMB
    assert not list(store.levels_dir.glob("*.tmp"))


def test_write_failure_raises_and_save_reports_false(store, grid, caplog):
    # A directory where the level file should go makes the write fail
    store.path_for("Level1", LevelKind.DATA).mkdir()

    with pytest.raises(LevelWriteError) as excinfo:
        store.write_level("Level1", grid)
    assert excinfo.value.name == "Level1"

    with caplog.at_level(logging.ERROR, logger="editor.level_store"):
        assert store.save("Level1", grid) is False
    assert "Level1" in caplog.text


def test_exists_ignores_directories(store):
    store.path_for("Level1", LevelKind.DATA).mkdir()
    assert not store.exists("Level1")


def test_load_missing_or_corrupt_level(store):
    assert store.load("Nothing") is None

    store.path_for("Broken", LevelKind.DATA).write_text("{not json", encoding="utf-8")
    with pytest.raises(LevelLoadError):
        store.read_level("Broken")
    assert store.load("Broken") is None


def test_save_thumbnail_uses_pygame(store, fake_image):
    store.save_thumbnail("Level1", fake_image)

    pygame.image.save.assert_called_once_with(
        fake_image, str(store.path_for("Level1", LevelKind.THUMBNAIL))
    )


def test_save_thumbnail_failure_is_swallowed(store, fake_image, caplog):
    pygame.image.save.side_effect = pygame.error("cannot encode")

    with caplog.at_level(logging.WARNING, logger="editor.level_store"):
        store.save_thumbnail("Level1", fake_image)

    assert "thumbnail" in caplog.text


def test_save_thumbnail_without_image(store):
    store.save_thumbnail("Level1", None)
    pygame.image.save.assert_not_called()


def test_side_files_with_invalid_name_are_skipped(store, fake_image, caplog):
    with caplog.at_level(logging.WARNING, logger="editor.level_store"):
        store.save_thumbnail("my level", fake_image)
        store.save_metadata("my level")

    pygame.image.save.assert_not_called()
    assert "Failed to save thumbnail for 'my level'" in caplog.text
    assert "Failed to save metadata for 'my level'" in caplog.text


def test_metadata_is_fresh_on_save(store):
    store.save_metadata("Level1")

    path = store.path_for("Level1", LevelKind.METADATA)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["name"] == "Level1"
    assert data["high_score"] == 0
    assert data["saved_at"]

    metadata = store.load_metadata("Level1")
    assert metadata.name == "Level1"


def test_metadata_failure_is_swallowed(store, caplog):
    store.path_for("Level1", LevelKind.METADATA).mkdir()

    with caplog.at_level(logging.WARNING, logger="editor.level_store"):
        store.save_metadata("Level1")

    assert "metadata" in caplog.text


def test_unreadable_metadata(store):
    assert store.load_metadata("Level1") is None

    store.path_for("Level1", LevelKind.METADATA).write_text("[]", encoding="utf-8")
    assert store.load_metadata("Level1") is None


def test_record_high_score_keeps_maximum(store):
    store.save_metadata("Level1")

    assert store.record_high_score("Level1", 500)
    assert not store.record_high_score("Level1", 200)
    assert store.load_metadata("Level1").high_score == 500


def test_list_levels(store, grid):
    store.save("Beta", grid)
    store.save("Alpha", grid)
    store.save_metadata("Alpha")
    (store.levels_dir / "not a level.level").write_text("{}", encoding="utf-8")

    assert store.list_levels() == ["Alpha", "Beta"]


def test_delete_removes_all_files(store, grid):
    store.save("Level1", grid)
    store.save_metadata("Level1")
    store.path_for("Level1", LevelKind.THUMBNAIL).write_bytes(b"png")
    assert store.thumbnail_path("Level1") is not None

    assert store.delete("Level1")

    for kind in LevelKind:
        assert not store.path_for("Level1", kind).exists()
    assert store.thumbnail_path("Level1") is None
    assert store.delete("Level1")


def test_metadata_from_dict_defaults():
    metadata = LevelMetadata.from_dict({"name": "Level1"})
    assert metadata.high_score == 0
    assert metadata.saved_at == ""
