import pytest

from kanatype.models import Status
from kanatype.session import create_session, process_key
from kanatype.loader import builtin_phrases


def _feed(session, keys):
    return [process_key(session, k).status for k in keys]


def _snapshot(s):
    return (s.current_unit_index, s.committed_length, s.input_buffer, s.completed)


def test_nasal_before_vowel_needs_long_form():
    s = create_session({"phoneticText": "あんい"})
    assert _feed(s, "ani") == [Status.UNIT_COMPLETED, Status.IN_PROGRESS, Status.NO_MATCH]
    assert s.input_buffer == "n"

    s = create_session({"phoneticText": "あんい"})
    assert _feed(s, "anni")[-1] is Status.ALL_COMPLETED


def test_consonant_doubling_keys():
    s = create_session({"phoneticText": "あった"})
    assert len(s.units) == 3
    assert _feed(s, "atta") == [
        Status.UNIT_COMPLETED, Status.UNIT_COMPLETED, Status.IN_PROGRESS, Status.ALL_COMPLETED,
    ]


def test_boundary_recovery_commits_short_nasal():
    s = create_session({"phoneticText": "かんじ"})
    assert _feed(s, "kan") == [Status.IN_PROGRESS, Status.UNIT_COMPLETED, Status.IN_PROGRESS]
    r = process_key(s, "j")
    assert r.accepted and r.status is Status.IN_PROGRESS
    assert s.current_unit_index == 2
    assert s.input_buffer == "j"
    assert process_key(s, "i").status is Status.ALL_COMPLETED


def test_boundary_recovery_can_commit_next_unit_immediately():
    s = create_session({"phoneticText": "んっか"})
    # "n" held, "k" closes ん and completes the doubling unit in one go
    assert _feed(s, "nk") == [Status.IN_PROGRESS, Status.UNIT_COMPLETED]
    assert s.current_unit_index == 2
    assert _feed(s, "ka")[-1] is Status.ALL_COMPLETED


@pytest.mark.parametrize("keys", ["kannji", "kaxnji", "kanji", "kanzi"])
def test_all_nasal_spellings_before_consonant(keys):
    s = create_session({"phoneticText": "かんじ"})
    statuses = _feed(s, keys)
    assert Status.NO_MATCH not in statuses
    assert statuses[-1] is Status.ALL_COMPLETED


def test_phrase_final_short_nasal_completes():
    s = create_session({"phoneticText": "かん"})
    assert _feed(s, "kan")[-1] is Status.ALL_COMPLETED
    assert s.completed


@pytest.mark.parametrize("keys", ["shika", "sika", "cika", "shica"])
def test_alternative_spellings_accepted(keys):
    s = create_session({"phoneticText": "しか"})
    assert _feed(s, keys)[-1] is Status.ALL_COMPLETED


def test_committed_length_follows_display_spelling():
    s = create_session({"phoneticText": "しか"})
    _feed(s, "si")
    assert s.committed_length == 3
    assert s.committed_length == s.units[1].display_offset


def test_rejection_leaves_state_untouched():
    s = create_session({"phoneticText": "きょうも"})
    _feed(s, "ky")
    before = _snapshot(s)
    for bad in "zqa1":
        r = process_key(s, bad)
        assert not r.accepted and r.status is Status.NO_MATCH
        assert _snapshot(s) == before
    assert process_key(s, "o").status is Status.UNIT_COMPLETED


def test_already_completed_is_a_distinct_noop():
    s = create_session({"phoneticText": "あ"})
    assert process_key(s, "a").status is Status.ALL_COMPLETED
    before = _snapshot(s)
    r = process_key(s, "a")
    assert not r.accepted and r.status is Status.ALREADY_COMPLETED
    assert _snapshot(s) == before
    assert s.current_unit_index == len(s.units) and s.input_buffer == ""


def test_index_and_committed_length_never_decrease():
    s = create_session({"phoneticText": "いっぽずつぜんしんしよう"})
    last = (0, 0)
    for k in "ixppozxutuzenshinnnsiyyou":
        process_key(s, k)
        now = (s.current_unit_index, s.committed_length)
        assert now[0] >= last[0] and now[1] >= last[1]
        last = now


def _round_trip_phrases():
    return [p for p in builtin_phrases("all").phrases if not p.phonetic_text.endswith("ん")]


@pytest.mark.parametrize("phrase", _round_trip_phrases(), ids=lambda p: p.phonetic_text)
def test_round_trip_preferred_spellings(phrase):
    s = create_session(phrase)
    for n, unit in enumerate(s.units):
        spelling = unit.candidates[0]
        for k in spelling[:-1]:
            assert process_key(s, k).status is Status.IN_PROGRESS
        last = process_key(s, spelling[-1]).status
        expected = Status.ALL_COMPLETED if n == len(s.units) - 1 else Status.UNIT_COMPLETED
        assert last is expected
    assert s.completed
    assert s.committed_length == len(s.display_string)
