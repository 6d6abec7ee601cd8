from __future__ import annotations
import argparse
import threading
from flask import Flask, request, jsonify
from kanatype.engine import Trainer
from kanatype.session import ConstructionError
from kanatype import config as CFG

app = Flask(__name__)
_trainer: Trainer | None = None
# the engine does no locking; requests are serialized here
_lock = threading.Lock()


def _error(msg: str, status: int):
    return jsonify({"error": msg}), status


def _result_json(result) -> dict:
    return {"accepted": result.accepted, "status": result.status.value}


# ---------- API ----------
@app.get("/api/health")
def api_health():
    return jsonify({"ok": True, "ready": _trainer is not None})


@app.post("/api/session")
def api_session():
    if _trainer is None:
        return _error("trainer not initialized", 503)
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return _error("expected a JSON object", 400)
    with _lock:
        try:
            _trainer.start(body)
        except ConstructionError as e:
            return _error(str(e), 400)
        return jsonify(_trainer.state())


@app.post("/api/next")
def api_next():
    if _trainer is None:
        return _error("trainer not initialized", 503)
    with _lock:
        session = _trainer.next_phrase()
        if session is None:
            return jsonify({"done": True, "summary": _trainer.summary()})
        return jsonify(_trainer.state())


@app.post("/api/key")
def api_key():
    if _trainer is None:
        return _error("trainer not initialized", 503)
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return _error("expected a JSON object", 400)
    with _lock:
        if _trainer.session is None:
            return _error("no active phrase", 409)
        result = _trainer.press(body.get("key"))
        if result is None:
            return _error("key must be a single printable character", 400)
        return jsonify({**_result_json(result), "state": _trainer.state()})


@app.get("/api/state")
def api_state():
    if _trainer is None:
        return _error("trainer not initialized", 503)
    with _lock:
        if _trainer.session is None:
            return _error("no active phrase", 409)
        return jsonify(_trainer.state())


@app.get("/api/stats")
def api_stats():
    if _trainer is None:
        return _error("trainer not initialized", 503)
    policy = request.args.get("policy", None, type=str)
    with _lock:
        try:
            return jsonify(_trainer.summary(policy))
        except ValueError as e:
            return _error(str(e), 400)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the typing trainer JSON API on Flask")
    ap.add_argument("--roots", nargs="+", default=[])
    ap.add_argument("--difficulty", choices=["easy", "normal", "hard", "all"])
    ap.add_argument("--category")
    ap.add_argument("--count", type=int)
    ap.add_argument("--shuffle", action="store_true")
    ap.add_argument("--policy", choices=["aggregate", "averaged"], default=CFG.THROUGHPUT_POLICY)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _trainer
    _trainer = Trainer(policy=args.policy)
    _trainer.load(
        roots=args.roots or None, difficulty=args.difficulty, category=args.category, count=args.count,
        shuffle=args.shuffle, verbose=args.verbose,
    )

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _trainer.reset()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
