from __future__ import annotations
from typing import Set

from .models import DisplayInfo, Session


def is_completed(session: Session) -> bool:
    return session.completed


def percent_complete(session: Session) -> int:
    """floor(index / units * 100); exactly 100 only once the phrase is done."""
    if session.completed:
        return 100
    if not session.units:
        return 0
    return (session.current_unit_index * 100) // len(session.units)


def expected_next_key(session: Session) -> str | None:
    """The key to highlight next, following the first spelling that still fits."""
    unit = session.active_unit
    if session.completed or unit is None:
        return None
    buf = session.input_buffer
    if not buf:
        return unit.preferred[0]
    for cand in unit.candidates:
        if len(cand) > len(buf) and cand.startswith(buf):
            return cand[len(buf)]
    return None


def next_possible_keys(session: Session) -> Set[str]:
    """Every key that would be accepted as an extension of the current buffer."""
    unit = session.active_unit
    if session.completed or unit is None:
        return set()
    buf = session.input_buffer
    return {c[len(buf)] for c in unit.candidates if len(c) > len(buf) and c.startswith(buf)}


def display_info(session: Session) -> DisplayInfo:
    unit = session.active_unit
    offset = unit.display_offset if unit is not None else len(session.display_string)
    return DisplayInfo(
        committed_length=session.committed_length,
        buffer_length=len(session.input_buffer),
        active_unit_display_offset=offset,
        percent_complete=percent_complete(session),
    )


def remaining_display(session: Session) -> str:
    """Display text still to type: rest of the active unit, then every later unit."""
    unit = session.active_unit
    if session.completed or unit is None:
        return ""
    buf = session.input_buffer
    head = unit.preferred[len(buf):] if unit.preferred.startswith(buf) else ""
    if not head:
        for cand in unit.candidates:
            if cand.startswith(buf):
                head = cand[len(buf):]
                break
    tail = session.display_string[unit.display_offset + len(unit.preferred):]
    return head + tail
