"""Tests for the stateless FastAPI endpoints."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

import api
from game_rules import GameProgressState

N = None


class NewGameEndpointTests(unittest.TestCase):

    def setUp(self) -> None:
        self.client = TestClient(api.app)

    def test_new_game_has_two_tiles(self) -> None:
        response = self.client.post("/game/new", json={"size": 3, "win_tile": 64})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["board_size"], 3)
        self.assertEqual(payload["score"], 0)
        self.assertEqual(payload["win_tile"], 64)
        self.assertEqual(payload["progress"], GameProgressState.IN_PROGRESS.value)
        self.assertEqual(len(payload["board"]), 3)
        tiles = [cell for row in payload["board"] for cell in row if cell is not None]
        self.assertEqual(len(tiles), 2)

    def test_new_game_rejects_tiny_board(self) -> None:
        response = self.client.post("/game/new", json={"size": 1})
        self.assertEqual(response.status_code, 422)


class MoveEndpointTests(unittest.TestCase):

    def setUp(self) -> None:
        self.client = TestClient(api.app)

    def test_effective_move_adds_tile_and_score(self) -> None:
        with patch("game_rules.add_random_tile", side_effect=lambda grid: grid) as mocked_add:
            response = self.client.post("/game/move", json={
                "board": [[2, N, 2, 4], [N, N, N, N], [N, N, N, N], [N, N, N, N]],
                "score": 10,
                "direction": "left",
                "win_tile": 128,
            })

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["move_was_effective"])
        self.assertEqual(payload["gained"], 4)
        self.assertEqual(payload["score"], 14)
        self.assertEqual(payload["board"][0], [4, 4, N, N])
        self.assertIsNone(payload["message"])
        mocked_add.assert_called_once()

    def test_ineffective_move_keeps_board(self) -> None:
        board = [[2, N], [N, N]]
        response = self.client.post("/game/move", json={
            "board": board, "score": 6, "direction": "up", "win_tile": 128,
        })
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertFalse(payload["move_was_effective"])
        self.assertEqual(payload["board"], board)
        self.assertEqual(payload["score"], 6)
        self.assertEqual(payload["gained"], 0)
        self.assertIn("not effective", payload["message"])

    def test_reaching_win_tile_reports_win(self) -> None:
        with patch("game_rules.add_random_tile", side_effect=lambda grid: grid):
            response = self.client.post("/game/move", json={
                "board": [[64, 64], [N, N]], "score": 0, "direction": "right", "win_tile": 128,
            })
        payload = response.json()
        self.assertEqual(payload["board"], [[N, 128], [N, N]])
        self.assertEqual(payload["progress"], GameProgressState.GAME_WON.value)
        self.assertEqual(payload["message"], "Congratulations! You won!")

    def test_ragged_board_is_bad_request(self) -> None:
        response = self.client.post("/game/move", json={
            "board": [[2, 2], [2]], "score": 0, "direction": "left", "win_tile": 128,
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid board structure", response.json()["detail"])

    def test_zero_or_negative_cells_are_rejected(self) -> None:
        for board in ([[0, 0, 2, 2]], [[2, -2], [N, N]]):
            with patch("game_rules.add_random_tile", side_effect=lambda grid: grid) as mocked_add:
                response = self.client.post("/game/move", json={
                    "board": board, "score": 0, "direction": "left", "win_tile": 128,
                })
            self.assertEqual(response.status_code, 422, board)
            mocked_add.assert_not_called()

    def test_unknown_direction_is_rejected(self) -> None:
        response = self.client.post("/game/move", json={
            "board": [[2, 2]], "score": 0, "direction": "diagonal", "win_tile": 128,
        })
        self.assertEqual(response.status_code, 422)


class ValidMovesEndpointTests(unittest.TestCase):

    def setUp(self) -> None:
        self.client = TestClient(api.app)

    def test_lists_effective_directions(self) -> None:
        response = self.client.post("/game/valid-moves", json={"board": [[2, N], [N, N]]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"directions": ["down", "right"]})

    def test_ragged_board_is_bad_request(self) -> None:
        response = self.client.post("/game/valid-moves", json={"board": [[2], [2, 2]]})
        self.assertEqual(response.status_code, 400)

    def test_zero_cell_is_rejected(self) -> None:
        response = self.client.post("/game/valid-moves", json={"board": [[0, 2], [N, N]]})
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
