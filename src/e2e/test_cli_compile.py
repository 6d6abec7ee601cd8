import json

import pytest

from kanatype.__main__ import main


def test_compile_json(capsys):
    assert main(["--compile", "あった", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["romaji"] == "atta"
    assert [u["candidates"] for u in out["units"]] == [["a"], ["t"], ["ta"]]


def test_compile_table(capsys):
    assert main(["--compile", "カンジ"]) == 0
    out = capsys.readouterr().out
    assert "romaji: kannji" in out
    assert "nn / xn / n" in out


def test_play_finishes_queue(capsys, monkeypatch):
    lines = iter(["egao"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))
    assert main(["--play", "--difficulty", "easy", "--count", "1"]) == 0
    out = capsys.readouterr().out
    assert "phrases=1" in out
    assert "rank=" in out


def test_play_with_category(capsys, monkeypatch):
    lines = iter(["kyoumoitinitiganbarou", "egaodesugosou"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))
    args = ["--play", "--difficulty", "normal", "--category", "sentences", "--count", "2", "--json"]
    assert main(args) == 0
    out = capsys.readouterr().out
    summary = json.loads(out[out.index("{"):])
    assert summary["phrases"] == 2
    assert summary["miss_keys"] == 0


def test_play_unknown_category_is_an_error(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _prompt="": "")
    with pytest.raises(ValueError):
        main(["--play", "--category", "weather"])
