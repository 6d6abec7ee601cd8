import pytest
from kanatype.engine import Trainer
from kanatype.models import Phrase
from kanatype_web.web import app as flask_app


@pytest.fixture
def client():
    import kanatype_web.web as webmod
    webmod._trainer = Trainer([Phrase("愛", "あい")])
    yield flask_app.test_client()
    webmod._trainer.reset()
    webmod._trainer = None


@pytest.mark.e2e
def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json()["ok"] is True


@pytest.mark.e2e
def test_session_and_keys(client):
    r = client.post("/api/session", json={"displayText": "元気", "phoneticText": "げんき"})
    assert r.status_code == 200
    state = r.get_json()
    assert state["romaji"] == "gennki"
    assert state["percent_complete"] == 0

    r = client.post("/api/key", json={"key": "g"})
    data = r.get_json()
    assert data["accepted"] is True and data["status"] == "in_progress"
    assert data["state"]["input_buffer"] == "g"

    r = client.post("/api/key", json={"key": "x"})
    assert r.get_json()["status"] == "no_match"

    for k in "ennki":
        data = client.post("/api/key", json={"key": k}).get_json()
    assert data["status"] == "all_completed"
    assert data["state"]["completed"] is True

    stats = client.get("/api/stats").get_json()
    assert stats["phrases"] == 1
    assert stats["miss_keys"] == 1
    for key in ("kpm", "rank", "accuracy", "score", "policy"):
        assert key in stats


@pytest.mark.e2e
def test_errors_are_json(client):
    assert client.post("/api/key", json={"key": "a"}).status_code == 409
    assert client.get("/api/state").status_code == 409

    r = client.post("/api/session", json={"displayText": "x"})
    assert r.status_code == 400
    assert "error" in r.get_json()

    client.post("/api/session", json={"phoneticText": "あ"})
    assert client.post("/api/key", json={"key": "Enter"}).status_code == 400
    assert client.get("/api/stats?policy=median").status_code == 400


@pytest.mark.e2e
def test_next_walks_the_queue(client):
    r = client.post("/api/next")
    assert r.get_json()["display_text"] == "愛"
    for k in "ai":
        client.post("/api/key", json={"key": k})
    r = client.post("/api/next")
    data = r.get_json()
    assert data["done"] is True
    assert data["summary"]["phrases"] == 1


@pytest.mark.e2e
def test_non_object_bodies_are_rejected(client):
    client.post("/api/session", json={"phoneticText": "あ"})
    for body in (["a"], "a", 5):
        r = client.post("/api/key", json=body)
        assert r.status_code == 400
        assert "error" in r.get_json()
    assert client.post("/api/session", json=["あ"]).status_code == 400
    assert client.get("/api/state").get_json()["input_buffer"] == ""


@pytest.mark.e2e
def test_main_loads_one_category(monkeypatch):
    import kanatype_web.web as webmod
    queued = []
    monkeypatch.setattr(flask_app, "run", lambda **kw: queued.append(webmod._trainer.remaining))
    try:
        assert webmod.main(["--difficulty", "all", "--category", "sentences"]) == 0
    finally:
        webmod._trainer = None
    assert queued == [12]
