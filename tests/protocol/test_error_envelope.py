from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from chesstwist.config import ServerConfig
from chesstwist.engine.errors import PreconditionError
from chesstwist.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app(ServerConfig())

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"] == r.headers["x-request-id"]


def test_engine_precondition_maps_to_bad_request() -> None:
    app: FastAPI = create_app(ServerConfig())

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise PreconditionError("no pawn to promote")

    r = TestClient(app).get("/boom")
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "no pawn to promote"


def test_unknown_route_uses_envelope() -> None:
    r = TestClient(create_app(ServerConfig())).get("/nope")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_validation_error_lists_fields() -> None:
    client = TestClient(create_app(ServerConfig()))
    game_id = client.post("/api/games").json()["game_id"]
    r = client.post(
        f"/api/games/{game_id}/move",
        json={"from_square": {"file": 4, "rank": 1}, "to_square": {"file": 4, "rank": 9}},
    )
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("to_square.rank") for fe in err["field_errors"])
