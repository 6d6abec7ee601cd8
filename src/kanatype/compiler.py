from __future__ import annotations
from typing import List, Tuple

from . import config as CFG
from .models import CompiledUnit
from .normalize import transliterate
from .table import lookup


def _read_unit(text: str, i: int) -> Tuple[str, Tuple[str, ...], int]:
    """
    Read one typing unit starting at text[i].
    Returns (source kana, candidate spellings, number of characters consumed).
    """
    ch = text[i]
    nxt = text[i + 1] if i + 1 < len(text) else None

    # /* ~~~ small tsu: double the next unit's leading consonant ~~~ */
    if ch == CFG.DOUBLING_MARKER and nxt is not None:
        lead = _preferred_at(text, i + 1)[:1]
        if lead and lead in CFG.DOUBLING_CONSONANTS:
            return ch, (lead,), 1
        return ch, (CFG.DOUBLING_FALLBACK,), 1

    # /* ~~~ nasal mora: drop the bare "n" where it would merge with the next vowel ~~~ */
    if ch == CFG.NASAL_MORA:
        if nxt is None:
            return ch, CFG.NASAL_LONG + (CFG.NASAL_SHORT,), 1
        onset = _preferred_at(text, i + 1)[:1]
        if onset and onset in CFG.NASAL_LONG_ONLY_ONSETS:
            return ch, CFG.NASAL_LONG, 1
        return ch, CFG.NASAL_LONG + (CFG.NASAL_SHORT,), 1

    if nxt is not None and nxt in CFG.SMALL_VOWEL_MARKERS:
        pair = lookup(ch + nxt)
        if pair:
            return ch + nxt, pair, 2

    if ch.isspace():
        return ch, (" ",), 1

    return ch, lookup(ch) or (transliterate(ch),), 1


def _preferred_at(text: str, i: int) -> str:
    return _read_unit(text, i)[1][0]


def compile_units(phonetic: str) -> Tuple[List[CompiledUnit], str]:
    """
    Compile a hiragana reading into typing units.

    Returns (units, display_string) where display_string is the concatenation
    of every unit's preferred spelling and each unit's display_offset points at
    its own spelling inside it.
    """
    units: List[CompiledUnit] = []
    display_parts: List[str] = []
    offset = 0
    i = 0
    while i < len(phonetic):
        source, candidates, consumed = _read_unit(phonetic, i)
        units.append(CompiledUnit(source=source, candidates=candidates, display_offset=offset))
        display_parts.append(candidates[0])
        offset += len(candidates[0])
        i += consumed
    return units, "".join(display_parts)


def romanize(phonetic: str) -> str:
    """Convenience: the display spelling of a hiragana reading."""
    return compile_units(phonetic)[1]
