from __future__ import annotations
from typing import Any, Mapping

from .compiler import compile_units
from .models import KeyResult, Phrase, Session, Status
from .normalize import to_hiragana


class ConstructionError(ValueError):
    """Phrase data cannot be turned into a typing session."""


def _field(phrase: Any, *names: str) -> Any:
    if isinstance(phrase, Mapping):
        for name in names:
            if name in phrase:
                return phrase[name]
        return None
    for name in names:
        if hasattr(phrase, name):
            return getattr(phrase, name)
    return None


def _as_phrase(phrase: Any) -> Phrase:
    if isinstance(phrase, Phrase):
        phonetic, display = phrase.phonetic_text, phrase.display_text
    else:
        phonetic = _field(phrase, "phonetic_text", "phoneticText", "kanaText")
        display = _field(phrase, "display_text", "displayText")

    if phonetic is None:
        raise ConstructionError("phrase has no phonetic text")
    if not isinstance(phonetic, str):
        raise ConstructionError(f"phonetic text must be a string, got {type(phonetic).__name__}")
    if display is not None and not isinstance(display, str):
        raise ConstructionError(f"display text must be a string, got {type(display).__name__}")

    if isinstance(phrase, Phrase):
        return phrase
    return Phrase(
        display_text=display if display else phonetic,
        phonetic_text=phonetic,
        difficulty=_field(phrase, "difficulty") or "easy",
        category=_field(phrase, "category") or "general",
    )


def create_session(phrase: Any) -> Session:
    """
    Build a fresh Session for one phrase.

    `phrase` may be a Phrase, a mapping ({"displayText", "phoneticText"} or the
    snake_case keys) or any object with those attributes. Raises
    ConstructionError if the reading is missing, not a string, or empty.
    """
    source = _as_phrase(phrase)
    normalized = to_hiragana(source.phonetic_text)
    if not normalized:
        raise ConstructionError("phonetic text is empty")

    units, display = compile_units(normalized)
    return Session(
        source_phrase=source,
        normalized_phonetic=normalized,
        units=units,
        display_string=display,
    )


# ------------- matching -------------

def _commit(session: Session) -> Status:
    """Close the active unit and move on. Bookkeeping follows the display spelling."""
    unit = session.units[session.current_unit_index]
    session.committed_length += len(unit.preferred)
    session.current_unit_index += 1
    session.input_buffer = ""
    if session.current_unit_index == len(session.units):
        session.completed = True
        return Status.ALL_COMPLETED
    return Status.UNIT_COMPLETED


def _extend(session: Session, key: str) -> Status | None:
    """Exact / prefix match of buffer+key against the active unit; None if neither."""
    unit = session.units[session.current_unit_index]
    tentative = session.input_buffer + key
    longer = any(len(c) > len(tentative) and c.startswith(tentative) for c in unit.candidates)

    if tentative in unit.candidates:
        # "n" while "nn" is still possible: hold it and let the next key decide
        if not (longer and session.next_unit is not None):
            return _commit(session)

    if longer:
        session.input_buffer = tentative
        return Status.IN_PROGRESS
    return None


def _reaches(candidates, key: str) -> bool:
    return any(c.startswith(key) for c in candidates)


def process_key(session: Session, key: str) -> KeyResult:
    """
    Feed one normalized key into the session.

    Rejected keys (NO_MATCH) and calls on a finished session
    (ALREADY_COMPLETED) leave the session untouched.
    """
    if session.completed:
        return KeyResult(False, Status.ALREADY_COMPLETED)

    status = _extend(session, key)
    if status is not None:
        return KeyResult(True, status)

    # /* ~~~ boundary recovery: the buffer already spells the active unit and key starts the next one ~~~ */
    shorter = session.input_buffer
    unit = session.active_unit
    nxt = session.next_unit
    if shorter and unit is not None and shorter in unit.candidates \
            and nxt is not None and _reaches(nxt.candidates, key):
        _commit(session)
        # single level only: the re-evaluation never recovers again
        status = _extend(session, key)
        if status is not None:
            return KeyResult(True, status)

    return KeyResult(False, Status.NO_MATCH)
