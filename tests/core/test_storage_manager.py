#!/usr/bin/env python3
"""
Storage Manager Tests
=====================

Covers the in-memory and JSON file backends, including corrupt files.
"""

import json

from merge2048.environment.game_manager import Direction, GameManager
from merge2048.models.game_config import GameConfig
from merge2048.models.storage_manager import (
    BEST_SCORE_FILE,
    GAME_STATE_FILE,
    JsonFileStorageManager,
    MemoryStorageManager,
)
from tests.utilities.test_utils import ScriptedRandom, count_tiles, snapshot_from_rows


class TestMemoryStorageManager:

    def test_save_load_clear(self):
        storage = MemoryStorageManager()
        snapshot = snapshot_from_rows([[2, 0], [0, 0]])

        assert storage.load() is None
        storage.save(snapshot)
        assert storage.load() == snapshot

        storage.clear()
        assert storage.load() is None

    def test_stored_snapshot_is_a_copy(self):
        storage = MemoryStorageManager()
        snapshot = snapshot_from_rows([[2, 0], [0, 0]])
        storage.save(snapshot)

        snapshot["score"] = 999
        loaded = storage.load()
        loaded["won"] = True

        assert storage.load()["score"] == 0
        assert storage.load()["won"] is False

    def test_best_score(self):
        storage = MemoryStorageManager(best_score=10)
        assert storage.get_best_score() == 10
        storage.set_best_score(32)
        assert storage.get_best_score() == 32


class TestJsonFileStorageManager:

    def test_round_trip_on_disk(self, tmp_path):
        storage = JsonFileStorageManager(tmp_path / "state")
        snapshot = snapshot_from_rows([[2, 4], [0, 8]], score=4)

        assert storage.load() is None
        storage.save(snapshot)

        assert (tmp_path / "state" / GAME_STATE_FILE).exists()
        assert JsonFileStorageManager(tmp_path / "state").load() == snapshot

        storage.clear()
        assert storage.load() is None
        storage.clear()  # clearing twice is harmless

    def test_best_score_file(self, tmp_path):
        storage = JsonFileStorageManager(tmp_path)
        assert storage.get_best_score() == 0

        storage.set_best_score(128)

        assert json.loads((tmp_path / BEST_SCORE_FILE).read_text()) == {"best_score": 128}
        assert storage.get_best_score() == 128

    def test_corrupt_files_read_as_absent(self, tmp_path):
        (tmp_path / GAME_STATE_FILE).write_text("{not json")
        (tmp_path / BEST_SCORE_FILE).write_text('{"best_score": "high"}')
        storage = JsonFileStorageManager(tmp_path)

        assert storage.load() is None
        assert storage.get_best_score() == 0

    def test_undecodable_files_read_as_absent(self, tmp_path):
        (tmp_path / GAME_STATE_FILE).write_bytes(b'{"grid": "\xff\xfe"}')
        (tmp_path / BEST_SCORE_FILE).write_bytes(b'\xff\xfe')
        storage = JsonFileStorageManager(tmp_path)

        assert storage.load() is None
        assert storage.get_best_score() == 0

        game = GameManager(GameConfig(size=4), storage=storage, rng=ScriptedRandom())

        assert game.score == 0
        assert count_tiles(game.grid.to_rows()) == 2
        assert storage.load() == game.serialize()

    def test_game_resumes_from_disk(self, tmp_path):
        config = GameConfig(size=4, state_dir=str(tmp_path))
        first = GameManager(config, storage=JsonFileStorageManager(config.state_dir), rng=ScriptedRandom())
        first.move(Direction.RIGHT)

        second = GameManager(config, storage=JsonFileStorageManager(config.state_dir), rng=ScriptedRandom())

        assert second.serialize() == first.serialize()

    def test_corrupt_state_file_starts_fresh_game(self, tmp_path):
        (tmp_path / GAME_STATE_FILE).write_text('{"grid": 1}')
        storage = JsonFileStorageManager(tmp_path)

        game = GameManager(GameConfig(size=4), storage=storage, rng=ScriptedRandom())

        assert game.score == 0
        assert storage.load() == game.serialize()
