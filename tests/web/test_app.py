"""Tests for the FastAPI web application."""

from __future__ import annotations

import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from shogi_engine.engine.config import AIConfig
from shogi_engine.engine.minimax import MinimaxSearch
from shogi_engine.game.moves import Move, generate_legal_moves
from shogi_engine.web import app as web_app


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(web_app, "AI_CONFIG", AIConfig.instant())
    return TestClient(web_app.app)


def _new_game(client: TestClient, **body: str) -> dict:
    res = client.post("/api/new-game", json=body)
    assert res.status_code == 200
    return res.json()


class TestNewGame:
    def test_human_first(self, client: TestClient) -> None:
        data = _new_game(client, difficulty="beginner", player_side="first")
        state = data["state"]
        assert data["ai_move"] is None
        assert state["current_turn"] == "first"
        assert state["human_side"] == "first"
        assert len(state["legal_moves"]) == 30
        assert len(state["squares"]) == 9
        assert state["squares"][8][4] == {"type": "king", "owner": "first", "promoted": False}
        assert state["hands"] == {"first": {}, "second": {}}
        assert not state["is_over"]

    def test_human_second_ai_moves_first(self, client: TestClient) -> None:
        data = _new_game(client, difficulty="beginner", player_side="second")
        assert data["ai_move"] is not None
        assert data["state"]["current_turn"] == "second"

    def test_invalid_side(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={"player_side": "third"})
        assert res.status_code == 400

    def test_invalid_difficulty(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={"difficulty": "grandmaster"})
        assert res.status_code == 422


class TestMakeMove:
    def test_valid_move(self, client: TestClient) -> None:
        data = _new_game(client)
        move = data["state"]["legal_moves"][0]
        res = client.post("/api/move", json={"game_id": data["game_id"], "move": move})
        assert res.status_code == 200
        body = res.json()
        assert body["player_move"]["notation"] == move["notation"]
        assert body["ai_move"] is not None
        assert body["state"]["current_turn"] == "first"

    def test_invalid_move(self, client: TestClient) -> None:
        data = _new_game(client)
        bogus = {"from_row": 6, "from_col": 0, "to_row": 3, "to_col": 0}
        res = client.post("/api/move", json={"game_id": data["game_id"], "move": bogus})
        assert res.status_code == 400

    def test_game_not_found(self, client: TestClient) -> None:
        move = {"from_row": 6, "from_col": 0, "to_row": 5, "to_col": 0}
        res = client.post("/api/move", json={"game_id": "nonexistent", "move": move})
        assert res.status_code == 404

    def test_move_after_resign(self, client: TestClient) -> None:
        data = _new_game(client)
        game_id = data["game_id"]
        move = data["state"]["legal_moves"][0]
        assert client.post(f"/api/resign/{game_id}").status_code == 200
        res = client.post("/api/move", json={"game_id": game_id, "move": move})
        assert res.status_code == 400


class TestQueries:
    def test_get_state(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.get(f"/api/state/{data['game_id']}")
        assert res.status_code == 200
        assert res.json()["current_turn"] == "first"

    def test_get_nonexistent_game(self, client: TestClient) -> None:
        assert client.get("/api/state/nonexistent").status_code == 404

    def test_movable(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.get(f"/api/movable/{data['game_id']}", params={"row": 6, "col": 2})
        assert res.status_code == 200
        assert res.json()["cells"] == [[5, 2]]

    def test_movable_out_of_board(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.get(f"/api/movable/{data['game_id']}", params={"row": 9, "col": 0})
        assert res.status_code == 400

    def test_droppable_empty_hand(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.get(f"/api/droppable/{data['game_id']}", params={"piece_type": "gold"})
        assert res.status_code == 200
        assert res.json()["cells"] == []

    def test_droppable_unknown_piece(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.get(f"/api/droppable/{data['game_id']}", params={"piece_type": "queen"})
        assert res.status_code == 400


class TestResign:
    def test_resign(self, client: TestClient) -> None:
        data = _new_game(client)
        res = client.post(f"/api/resign/{data['game_id']}")
        assert res.status_code == 200
        state = res.json()["state"]
        assert state["is_over"]
        assert state["resigned"]
        assert state["winner"] == "second"
        assert state["legal_moves"] == []

    def test_resign_twice(self, client: TestClient) -> None:
        data = _new_game(client)
        client.post(f"/api/resign/{data['game_id']}")
        assert client.post(f"/api/resign/{data['game_id']}").status_code == 400

    def test_resign_while_ai_is_thinking(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Resigning mid-search hands the win to the AI and drops its late move."""

        def slow_search(self: MinimaxSearch, force_move: bool = False) -> Move:
            time.sleep(0.3)
            return generate_legal_moves(self.board, self.ai_player)[0]

        monkeypatch.setattr(web_app, "AI_CONFIG", AIConfig.instant())
        monkeypatch.setattr(MinimaxSearch, "find_best_move", slow_search)

        async def run() -> tuple[dict, dict]:
            data = await web_app.new_game(web_app.NewGameRequest(player_side="first"))
            game_id = data["game_id"]
            payload = web_app.MovePayload.model_validate(data["state"]["legal_moves"][0])
            move_task = asyncio.create_task(
                web_app.make_move(web_app.MoveRequest(game_id=game_id, move=payload))
            )
            await asyncio.sleep(0.1)
            resigned = await web_app.resign(game_id)
            return await move_task, resigned

        moved, resigned = asyncio.run(run())
        assert resigned["state"]["winner"] == "second"
        assert moved["ai_move"] is None
        assert moved["state"]["winner"] == "second"
        assert moved["state"]["current_turn"] == "second"
