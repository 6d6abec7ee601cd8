from __future__ import annotations
import bisect
import math
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from . import config as CFG
from .models import PhraseStats


def keys_per_minute(correct_keys: int, elapsed_seconds: float) -> int:
    """Correct keystrokes per minute, floored. 0 when no time has elapsed."""
    if elapsed_seconds <= 0 or correct_keys <= 0:
        return 0
    return math.floor(correct_keys * 60 / elapsed_seconds)


def phrase_metric(stats: PhraseStats) -> int:
    return keys_per_minute(stats.correct_keys, stats.elapsed_seconds)


def aggregate_metric(stats: Iterable[PhraseStats]) -> int:
    """Total correct keys over total elapsed time across completed phrases."""
    stats = list(stats)
    keys = sum(s.correct_keys for s in stats)
    seconds = sum(s.elapsed_seconds for s in stats)
    return keys_per_minute(keys, seconds)


def averaged_metric(stats: Iterable[PhraseStats]) -> int:
    """Arithmetic mean of each phrase's own metric, floored."""
    values = [phrase_metric(s) for s in stats]
    if not values:
        return 0
    return sum(values) // len(values)


POLICIES: Dict[str, Callable[[Iterable[PhraseStats]], int]] = {
    "aggregate": aggregate_metric,
    "averaged": averaged_metric,
}


def session_metric(stats: Iterable[PhraseStats], policy: str | None = None) -> int:
    policy = policy or CFG.THROUGHPUT_POLICY
    try:
        fn = POLICIES[policy]
    except KeyError:
        raise ValueError(f"Unknown throughput policy: {policy!r} (expected one of {sorted(POLICIES)})") from None
    return fn(stats)


class RankTable:
    """
    Monotonic step function from a metric to a label.

    thresholds: (lower_bound, label) pairs; the label of the highest bound
    that the metric reaches wins. Values below the first bound get the first
    label.
    """

    def __init__(self, thresholds: Optional[Sequence[Tuple[int, str]]] = None) -> None:
        if thresholds is None:
            thresholds = CFG.RANK_THRESHOLDS
        if not thresholds:
            raise ValueError("RankTable needs at least one threshold")
        ordered = sorted(thresholds, key=lambda t: t[0])
        bounds = [b for b, _ in ordered]
        if len(set(bounds)) != len(bounds):
            raise ValueError("RankTable thresholds must be distinct")
        self._bounds: List[int] = bounds
        self._labels: List[str] = [label for _, label in ordered]

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def rank_for(self, metric: float) -> str:
        i = bisect.bisect_right(self._bounds, metric) - 1
        return self._labels[max(i, 0)]


def rank_for(metric: float, table: RankTable | None = None) -> str:
    return (table or RankTable()).rank_for(metric)


def accuracy(correct_keys: int, miss_keys: int) -> float:
    """Percentage of correct keystrokes, one decimal; 100 when nothing was typed."""
    total = correct_keys + miss_keys
    if total <= 0:
        return 100.0
    return round(correct_keys * 100 / total, 1)


def score(metric: int, correct_keys: int, miss_keys: int) -> int:
    """metric * SCORE_MULTIPLIER, scaled by (1 - miss_rate * MISS_PENALTY)."""
    total = correct_keys + miss_keys
    miss_rate = miss_keys / total if total > 0 else 0.0
    factor = 1.0 - miss_rate * CFG.MISS_PENALTY
    return max(0, int(metric * CFG.SCORE_MULTIPLIER * factor))
