import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from game.middlewares.logging import LoggingMiddleware, decode_body


class LogCaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def log_handler():
    handler = LogCaptureHandler()
    logger = logging.getLogger("game_service")
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)


@pytest.fixture
def app():
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)

    @app.post("/echo")
    async def echo(payload: dict):
        return JSONResponse({"received": payload})

    return app


def test_decode_body():
    assert decode_body(b"") is None
    assert decode_body(b'{"a": 1}') == {"a": 1}
    assert decode_body(b"plain") == "plain"


def test_middleware_logs_request_as_json(app, log_handler):
    client = TestClient(app)
    response = client.post("/echo", json={"player": "alice"})

    assert response.status_code == 200
    assert response.json() == {"received": {"player": "alice"}}
    request_id = response.headers["X-Request-ID"]
    assert len(request_id) == 36

    assert len(log_handler.records) == 1
    log_json = json.loads(log_handler.records[0].getMessage())
    assert log_json["request_id"] == request_id
    assert log_json["method"] == "POST"
    assert log_json["path"] == "/echo"
    assert log_json["status_code"] == 200
    assert log_json["request_body"] == {"player": "alice"}
    assert log_json["response_body"] == {"received": {"player": "alice"}}
    assert "duration_ms" in log_json
