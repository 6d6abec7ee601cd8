from __future__ import annotations
import unicodedata

# Katakana block that maps 1:1 onto hiragana by a fixed code point offset
_KATAKANA_FIRST = 0x30A1   # ァ
_KATAKANA_LAST = 0x30F6    # ヶ
_KANA_OFFSET = 0x60


def _fold_kana(ch: str) -> str:
    cp = ord(ch)
    if _KATAKANA_FIRST <= cp <= _KATAKANA_LAST:
        return chr(cp - _KANA_OFFSET)
    return ch


def to_hiragana(text: str) -> str:
    """
    Normalize a reading to the single script the compiler consumes:
      * NFKC folds half-width katakana and full-width latin/digits
      * katakana is shifted onto hiragana (the long vowel mark ー is kept)
      * latin is lower-cased, whitespace runs collapse to one space, ends trimmed
    """
    text = unicodedata.normalize("NFKC", text)
    out_chars: list[str] = []
    last_was_space = False
    for ch in text:
        if ch.isspace():
            last_was_space = True
            continue
        if last_was_space and out_chars:
            out_chars.append(" ")
        last_was_space = False
        out_chars.append(_fold_kana(ch).lower())
    return "".join(out_chars)


def transliterate(ch: str) -> str:
    """Generic single-character spelling for anything the pattern table lacks."""
    decomposed = unicodedata.normalize("NFKD", ch)
    folded = "".join(c for c in decomposed if unicodedata.category(c) != "Mn").lower()
    return folded or ch


def normalize_key(raw: object) -> str | None:
    """
    Turn a raw key value into the single character the matcher expects.
    Returns None for anything a caller should drop: key names ("Shift",
    "Enter"), control characters and non-strings.
    """
    if not isinstance(raw, str):
        return None
    key = unicodedata.normalize("NFKC", raw)
    if len(key) != 1:
        return None
    if unicodedata.category(key).startswith("C"):
        return None
    return key.lower()
