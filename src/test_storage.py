"""Tests for board and score persistence."""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from storage import BOARD_KEY, SCORE_KEY, JsonFileStore, MemoryStore, load_game, save_game

N = None


class JsonFileStoreTests(unittest.TestCase):

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "nested", "store.json")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_missing_file_is_empty(self) -> None:
        self.assertIsNone(JsonFileStore(self.path).get(BOARD_KEY))

    def test_values_survive_a_new_instance(self) -> None:
        JsonFileStore(self.path).set("answer", "42")
        self.assertEqual(JsonFileStore(self.path).get("answer"), "42")
        with open(self.path, encoding="utf-8") as fh:
            self.assertEqual(json.load(fh), {"answer": "42"})

    def test_delete(self) -> None:
        store = JsonFileStore(self.path)
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        store.delete("missing")
        self.assertIsNone(store.get("a"))
        self.assertEqual(store.get("b"), "2")

    def test_corrupt_file_is_treated_as_empty(self) -> None:
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write("{not json")
        store = JsonFileStore(self.path)
        with self.assertLogs("storage", level="WARNING"):
            self.assertIsNone(store.get(BOARD_KEY))
        store.set(SCORE_KEY, "8")
        self.assertEqual(store.get(SCORE_KEY), "8")


class SaveLoadTests(unittest.TestCase):

    def test_save_writes_board_and_score_in_one_replacement(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonFileStore(os.path.join(tmpdir, "store.json"))
            save_game(store, [[2, N]], 4)
            with patch.object(JsonFileStore, "_write_all", autospec=True,
                              side_effect=JsonFileStore._write_all) as mocked_write:
                save_game(store, [[4, N]], 8)
            mocked_write.assert_called_once()
            self.assertEqual(load_game(store), ([[4, N]], 8))

    def test_round_trip_keeps_empty_cells(self) -> None:
        store = MemoryStore()
        save_game(store, [[2, N], [N, 4]], 36)
        self.assertEqual(store.get(BOARD_KEY), "[[2, null], [null, 4]]")
        self.assertEqual(load_game(store), ([[2, N], [N, 4]], 36))

    def test_nothing_saved(self) -> None:
        self.assertEqual(load_game(MemoryStore()), (None, None))

    def test_unusable_board_is_dropped(self) -> None:
        for raw in ("{oops", '"text"', "[[2, 4], [2]]", "[[2, 0]]", "[[2, true]]", "[]"):
            store = MemoryStore()
            store.set(BOARD_KEY, raw)
            store.set(SCORE_KEY, "10")
            with self.assertLogs("storage", level="WARNING"):
                board, score = load_game(store)
            self.assertIsNone(board, raw)
            self.assertEqual(score, 10)

    def test_unusable_score_is_dropped(self) -> None:
        for raw in ("ten", "-4"):
            store = MemoryStore()
            store.set(SCORE_KEY, raw)
            with self.assertLogs("storage", level="WARNING"):
                self.assertEqual(load_game(store), (None, None))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
