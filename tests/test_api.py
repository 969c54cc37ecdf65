import pytest
from fastapi.testclient import TestClient

from conftest import FakeRequestor
from swertres.errors import MalformedResponse, ServiceUnavailable
from swertres.main import app
from swertres.predictor import DisabledRequestor
from swertres.state import LottoSession


@pytest.fixture
def session():
    s = LottoSession(FakeRequestor())
    app.state.session = s
    return s


@pytest.fixture
def client(session):
    return TestClient(app)


def add(client, *lines):
    for line in lines:
        assert client.post("/api/draws", json={"text": line}).status_code == 200


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True, "ai_enabled": True, "model": "fake-model"}


def test_games(client):
    games = client.get("/api/games").json()
    assert [g["id"] for g in games] == ["3d"]
    assert games[0]["label"] == "3 Digit Lotto (Swertres) (3 digits, 0-9 each)"


def test_initial_state(client):
    state = client.get("/api/state").json()
    assert state["game"]["id"] == "3d"
    assert state["draws"] == [] and state["frequency"] == [] and state["hot_digits"] == []
    assert state["prediction"] is None
    assert state["min_draws_for_ai"] == 3


def test_add_draw_and_frequency(client):
    r = client.post("/api/draws", json={"text": "1,2,3"})
    assert r.status_code == 200
    r = client.post("/api/draws", json={"text": "1 2 3"})
    r = client.post("/api/draws", json={"text": "4-5-6"})
    state = r.json()
    assert state["draws"] == [[4, 5, 6], [1, 2, 3], [1, 2, 3]]
    first = state["frequency"][0]
    assert first["value"] == 1 and first["count"] == 2
    assert first["percentage"] == pytest.approx(22.22, abs=0.01)
    assert state["hot_digits"] == [1, 2, 3]


def test_add_bad_draw(client):
    r = client.post("/api/draws", json={"text": "0,9,10"})
    assert r.status_code == 400
    assert "between 0 and 9" in r.json()["error"]
    assert client.get("/api/state").json()["draws"] == []


def test_upload_csv(client):
    files = {"file": ("draws.csv", b"1,2,3\n\n4 5 6\r\n7-8-9\n", "text/csv")}
    r = client.post("/api/draws/upload", files=files)
    assert r.status_code == 200
    assert r.json()["draws"] == [[7, 8, 9], [4, 5, 6], [1, 2, 3]]


def test_upload_csv_with_errors(client):
    body = "\n".join(["1,2,3"] + ["1,2"] * 7).encode()
    r = client.post("/api/draws/upload", files={"file": ("draws.csv", body, "text/csv")})
    assert r.status_code == 400
    data = r.json()
    assert data["error"].endswith("...and 2 more errors.")
    assert [l["line"] for l in data["lines"]] == [2, 3, 4, 5, 6, 7, 8]
    assert client.get("/api/state").json()["draws"] == []


def test_upload_not_utf8(client):
    r = client.post("/api/draws/upload", files={"file": ("draws.csv", b"\xff\xfe\x00", "text/csv")})
    assert r.status_code == 400
    assert r.json()["error"] == "Could not read file content."


def test_bulk_paste(client):
    r = client.post("/api/draws/bulk", json={"text": "1,2,3\n4,5,6"})
    assert r.json()["draws"] == [[4, 5, 6], [1, 2, 3]]


def test_sample(client):
    r = client.post("/api/draws/sample")
    assert r.status_code == 200
    assert len(r.json()["draws"]) == 30


def test_remove_and_clear(client):
    add(client, "1,2,3", "4,5,6")
    assert client.delete("/api/draws/1").json()["draws"] == [[4, 5, 6]]
    assert client.delete("/api/draws/5").status_code == 404
    assert client.delete("/api/draws").json()["draws"] == []


def test_switch_game(client):
    add(client, "1,2,3")
    r = client.post("/api/game", json={"game_id": "3d"})
    assert r.json()["draws"] == []
    assert client.post("/api/game", json={"game_id": "pick9"}).status_code == 404


def test_predict(client, session):
    add(client, "1,2,3", "4,5,6", "7,8,9")
    r = client.post("/api/predict")
    assert r.status_code == 200
    assert r.json() == {"predicted_numbers": [1, 2, 3], "analysis_summary": "hot streak"}
    assert client.get("/api/state").json()["prediction"]["predicted_numbers"] == [1, 2, 3]
    assert session.requestor.calls[0][1] == [(1, 2, 3), (4, 5, 6), (7, 8, 9)]


def test_predict_needs_three_draws(client):
    add(client, "1,2,3")
    r = client.post("/api/predict")
    assert r.status_code == 400
    assert "at least 3" in r.json()["error"]


def test_predict_bad_response(client, session):
    session.requestor = FakeRequestor(error=MalformedResponse("Failed to parse AI response as JSON"))
    add(client, "1,2,3", "4,5,6", "7,8,9")
    r = client.post("/api/predict")
    assert r.status_code == 502
    assert client.get("/api/state").json()["ai_error"] == "Failed to parse AI response as JSON"


def test_predict_disabled(client, session):
    session.requestor = DisabledRequestor()
    add(client, "1,2,3", "4,5,6", "7,8,9")
    assert client.get("/api/state").json()["ai_enabled"] is False
    r = client.post("/api/predict")
    assert r.status_code == 503
    assert "API_KEY" in r.json()["error"]


def test_predict_stale(client, session):
    add(client, "1,2,3", "4,5,6", "7,8,9")
    session.requestor = FakeRequestor(during=session.clear)
    assert client.post("/api/predict").status_code == 409
    assert client.get("/api/state").json()["prediction"] is None


def test_index_and_favicon(client):
    assert "SWERTRES Predict" in client.get("/").text
    assert client.get("/favicon.ico").headers["content-type"].startswith("image/svg+xml")


def test_service_unavailable_status():
    assert ServiceUnavailable("x").status_code == 503


@pytest.mark.parametrize("method, path, body", [
    ("post", "/api/draws", {}),
    ("post", "/api/draws", {"text": 123}),
    ("post", "/api/game", {"gameId": "3d"}),
])
def test_bad_request_body_uses_error_shape(client, method, path, body):
    r = getattr(client, method)(path, json=body)
    assert r.status_code == 400
    data = r.json()
    assert "detail" not in data
    assert data["error"].startswith("Invalid request.")
    assert client.get("/api/state").json()["draws"] == []


def test_missing_field_is_named(client):
    r = client.post("/api/draws", json={})
    assert "text" in r.json()["error"]


def test_no_cross_origin_headers(client):
    r = client.get("/api/state", headers={"Origin": "https://elsewhere.example"})
    assert "access-control-allow-origin" not in r.headers
    assert "access-control-allow-credentials" not in r.headers


def test_predict_stale_reports_discarded_result(client, session):
    add(client, "1,2,3", "4,5,6", "7,8,9")
    session.requestor = FakeRequestor(during=session.clear)
    r = client.post("/api/predict")
    assert r.json() == {"error": "Draws changed while the AI prediction was running; the result was discarded."}


def test_page_shows_stale_prediction_notice(client):
    page = client.get("/").text
    assert "e.status === 409" in page
    assert '$("ai-error").textContent = stale' in page
