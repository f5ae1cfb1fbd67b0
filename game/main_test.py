from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from game.main import GREETING, app
from game.repositories.player import PlayerRepository
from game.services.deck import CHARACTERS


@pytest.fixture
def client():
    # No context manager: the lifespan (and its Redis connection) is not started.
    return TestClient(app)


def test_root_greeting(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == GREETING
    assert response.headers["content-type"].startswith("text/plain")


def test_cors_allows_any_origin(client):
    response = client.get("/", headers={"Origin": "http://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client):
    response = client.options(
        "/store-username",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert response.status_code == 200
    assert "POST" in response.headers["access-control-allow-methods"]


@pytest.mark.parametrize("alive, expected", [(True, "ok"), (False, "fail")])
def test_health(client, alive, expected):
    repo = AsyncMock(spec=PlayerRepository)
    repo.ping.return_value = alive
    app.state.player_repository = repo
    response = client.get("/health")
    assert response.json() == {"status": expected}


def test_lifespan_wires_routes_and_closes_redis():
    redis_client = AsyncMock()
    with patch("game.main.redis.Redis", return_value=redis_client) as redis_cls:
        with TestClient(app) as client:
            response = client.post(
                "/store-username",
                json={"name": "alice"},
                headers={"Origin": "http://example.com"},
            )
            assert response.status_code == 400
            assert "error" in response.json()
            assert response.headers["access-control-allow-origin"] == "*"

            cards = client.get("/get-random-cards").json()["cards"]
            assert len(cards) == 5
            assert set(cards) <= set(CHARACTERS)

            redis_client.aclose.assert_not_awaited()

    assert redis_cls.call_args.kwargs["decode_responses"] is True
    redis_client.hset.assert_not_awaited()
    redis_client.aclose.assert_awaited_once()
