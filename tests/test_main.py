"""
Tests for main.py - the Flask routes the game engine talks to.
"""

import os
import sys

import pytest

# Add repo root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from battlesnake import SnakeHandler
from main import create_battlesnake_server


@pytest.fixture
def handler():
    return SnakeHandler()


@pytest.fixture
def client(handler):
    app = create_battlesnake_server(handler)
    app.config["TESTING"] = True
    return app.test_client()


def test_info(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.get_json()
    assert data["apiversion"] == "1"
    assert data["color"] == "#ff00ff"


def test_health(client):
    assert client.get("/health").get_json() == {"status": "healthy"}


def test_ping(client):
    response = client.post("/ping", json={})
    assert response.status_code == 200
    assert response.get_json() == {}


def test_start_with_empty_snapshot(client):
    data = client.post("/start", json={}).get_json()
    assert data == {"color": "#ff00ff", "headType": "beluga", "tailType": "bolt"}


def test_move_with_empty_snapshot(client):
    assert client.post("/move", json={}).get_json() == {"move": "right"}


def test_move_without_body(client):
    response = client.post("/move", data="not json", content_type="text/plain")
    assert response.status_code == 200
    assert response.get_json() == {"move": "right"}


def test_move_toward_food(client):
    game_state = {
        "turn": 4,
        "board": {"width": 10, "height": 10, "food": [{"x": 3, "y": 5}]},
        "you": {"body": [{"x": 5, "y": 5}, {"x": 5, "y": 6}, {"x": 5, "y": 7}]},
    }
    assert client.post("/move", json=game_state).get_json() == {"move": "left"}


def test_end_with_empty_snapshot(client):
    assert client.post("/end", json={}).get_json() == {}


def test_game_lifecycle_tracks_session(client, handler):
    game_state = {
        "game": {"id": "game-1"},
        "turn": 0,
        "board": {"width": 10, "height": 10, "food": []},
        "you": {"body": [{"x": 2, "y": 2}, {"x": 2, "y": 3}]},
    }
    client.post("/start", json=game_state)
    assert handler.get_session("game-1").head == (2, 2)

    assert client.post("/move", json=game_state).get_json() == {"move": "up"}
    assert handler.get_session("game-1").body == [(2, 1), (2, 2)]

    client.post("/end", json=game_state)
    assert handler.get_session("game-1") is None


def test_errors_answer_with_empty_json(handler):
    class BrokenHandler(SnakeHandler):
        def move(self, game_state):
            raise ValueError("bad state")

    app = create_battlesnake_server(BrokenHandler())
    client = app.test_client()
    response = client.post("/move", json={})
    assert response.status_code == 200
    assert response.get_json() == {}
