"""Public API for the kana typing engine."""
from __future__ import annotations

from .compiler import compile_units, romanize
from .engine import Trainer
from .models import CompiledUnit, DisplayInfo, KeyResult, Phrase, PhraseStats, Session, Status
from .normalize import normalize_key, to_hiragana
from .progress import (
    display_info,
    expected_next_key,
    is_completed,
    next_possible_keys,
    percent_complete,
    remaining_display,
)
from .session import ConstructionError, create_session, process_key
from .throughput import RankTable, aggregate_metric, averaged_metric, keys_per_minute, rank_for, session_metric

__all__ = [
    "CompiledUnit", "ConstructionError", "DisplayInfo", "KeyResult", "Phrase", "PhraseStats",
    "RankTable", "Session", "Status", "Trainer",
    "aggregate_metric", "averaged_metric", "compile_units", "create_session", "display_info",
    "expected_next_key", "is_completed", "keys_per_minute", "next_possible_keys", "normalize_key",
    "percent_complete", "process_key", "rank_for", "remaining_display", "romanize",
    "session_metric", "to_hiragana",
]
