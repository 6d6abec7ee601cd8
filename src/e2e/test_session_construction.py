from types import SimpleNamespace

import pytest

from kanatype.models import Phrase
from kanatype.normalize import normalize_key, to_hiragana
from kanatype.session import ConstructionError, create_session


def test_mapping_phrase_builds_session():
    s = create_session({"displayText": "元気", "phoneticText": "げんき"})
    assert s.source_phrase.display_text == "元気"
    assert s.normalized_phonetic == "げんき"
    assert s.display_string == "gennki"
    assert (s.current_unit_index, s.input_buffer, s.committed_length, s.completed) == (0, "", 0, False)


def test_other_phrase_shapes():
    assert create_session(Phrase("愛", "あい")).display_string == "ai"
    assert create_session({"display_text": "夢", "phonetic_text": "ゆめ"}).display_string == "yume"
    ns = SimpleNamespace(displayText="光", phoneticText="ひかり")
    assert create_session(ns).source_phrase.display_text == "光"


def test_display_text_defaults_to_reading():
    s = create_session({"phoneticText": "ねこ"})
    assert s.source_phrase.display_text == "ねこ"


def test_katakana_and_half_width_are_folded():
    assert create_session({"phoneticText": "ゲンキ"}).normalized_phonetic == "げんき"
    assert create_session({"phoneticText": "ｹﾞﾝｷ"}).normalized_phonetic == "げんき"
    assert to_hiragana("  ペース  です ") == "ぺーす です"


@pytest.mark.parametrize("bad", [
    {},
    {"displayText": "x"},
    {"phoneticText": ""},
    {"phoneticText": "   "},
    {"phoneticText": 123},
    {"phoneticText": None},
    {"phoneticText": "あ", "displayText": 5},
    object(),
])
def test_bad_phrase_data_raises(bad):
    with pytest.raises(ConstructionError):
        create_session(bad)


def test_construction_error_is_a_value_error():
    assert issubclass(ConstructionError, ValueError)


def test_each_phrase_gets_a_fresh_session():
    a = create_session({"phoneticText": "あ"})
    b = create_session({"phoneticText": "あ"})
    assert a is not b
    assert a.units is not b.units


@pytest.mark.parametrize("raw, key", [
    ("a", "a"), ("A", "a"), ("Ａ", "a"), ("１", "1"), ("-", "-"), ("　", " "),
    ("Shift", None), ("Enter", None), ("\n", None), ("\x1b", None), ("", None), (None, None),
])
def test_normalize_key(raw, key):
    assert normalize_key(raw) == key
