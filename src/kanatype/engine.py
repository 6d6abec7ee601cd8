# kanatype/engine.py
from __future__ import annotations

import os
import time
import logging
import random
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional

from . import config as CFG
from .loader import builtin_phrases, limited, load_phrases, randomized
from .models import KeyResult, Phrase, PhraseStats, Session, Status
from .normalize import normalize_key
from .progress import display_info, expected_next_key, percent_complete
from .session import create_session, process_key
from .throughput import RankTable, accuracy, phrase_metric, score, session_metric

log = logging.getLogger(__name__)


class Trainer:
    """
    Caller-side orchestration around the matching engine:
      - a queue of phrases (built-in sets or phrase files),
      - one live Session at a time, replaced on every new phrase,
      - clock samples at phrase start and at each keystroke,
      - per-phrase stats recorded on ALL_COMPLETED and fed to the estimator.

    Public API (used by CLI/Flask):
      * load(...):        fill the phrase queue
      * start(phrase):    begin a phrase (or the next queued one)
      * press(key):       feed a raw key; returns KeyResult or None if dropped
      * summary(policy):  metric, rank, accuracy and score over finished phrases
      * reset():          forget everything except policy and rank table
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        phrases: Optional[Iterable[Phrase]] = None,
        *,
        policy: Optional[str] = None,
        ranks: Optional[RankTable] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.policy = policy or CFG.THROUGHPUT_POLICY
        self.ranks = ranks or RankTable()
        self._clock = clock
        self._queue: Deque[Phrase] = deque(phrases or [])
        self.session: Optional[Session] = None
        self.history: List[PhraseStats] = []
        # display texts of recently started phrases, skipped by shuffled loads
        self.recent: Deque[str] = deque(maxlen=CFG.RECENT_MEMORY)
        self._reset_phrase_counters()

    def _reset_phrase_counters(self) -> None:
        self.started_at: float = 0.0
        self.last_key_at: float = 0.0
        self.correct_keys = 0
        self.miss_keys = 0
        self.combo = 0
        self.max_combo = 0

    # /* ~~~ Fill the phrase queue from built-in sets or phrase files ~~~ */
    def load(
        self,
        *,
        roots: Optional[Iterable[str]] = None,
        difficulty: Optional[str] = None,
        category: Optional[str] = None,
        count: Optional[int] = None,
        shuffle: bool = False,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> int:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["KANATYPE_VERBOSE"] = "1"

        if roots:
            roots = list(roots)
            log.info("Loading phrases from %s", roots)
            phrase_set = load_phrases(roots, difficulty=difficulty, category=category)
        else:
            phrase_set = builtin_phrases(difficulty, category)

        if shuffle:
            items = randomized(phrase_set, count, random.Random(seed), exclude=self.recent)
        else:
            items = limited(phrase_set.phrases, count)

        if not items:
            raise ValueError("load(): no phrases found")

        self._queue.extend(items)
        log.info("Trainer load() complete: queued=%d", len(self._queue))
        return len(items)

    @property
    def remaining(self) -> int:
        return len(self._queue)

    # /* ~~~ Start a phrase: a brand-new Session, fresh counters, clock sampled ~~~ */
    def start(self, phrase: Optional[object] = None) -> Session:
        if phrase is None:
            if not self._queue:
                raise RuntimeError("No phrases queued. Call load() or pass a phrase.")
            phrase = self._queue.popleft()

        session = create_session(phrase)   # ConstructionError propagates, old session kept
        self.session = session
        self.recent.append(session.source_phrase.display_text)
        self._reset_phrase_counters()
        self.started_at = self._clock()
        self.last_key_at = self.started_at
        log.info("Phrase started: %s (%d units)", session.source_phrase.display_text, len(session.units))
        return session

    def next_phrase(self) -> Optional[Session]:
        """Start the next queued phrase; None once the queue is empty."""
        if not self._queue:
            return None
        return self.start()

    def reset(self) -> None:
        self.session = None
        self._queue.clear()
        self.recent.clear()
        self.history.clear()
        self._reset_phrase_counters()
        log.info("Trainer reset complete")

    # ------------- input -------------

    def press(self, raw_key: object) -> Optional[KeyResult]:
        if self.session is None:
            raise RuntimeError("No active phrase. Call start() first.")
        key = normalize_key(raw_key)
        if key is None:
            return None

        result = process_key(self.session, key)
        if result.status is Status.ALREADY_COMPLETED:
            return result

        self.last_key_at = self._clock()
        if result.accepted:
            self.correct_keys += 1
            self.combo += 1
            self.max_combo = max(self.max_combo, self.combo)
        else:
            self.miss_keys += 1
            self.combo = 0
            log.debug("Miss on %r, expected %r", key, expected_next_key(self.session))

        if result.status is Status.ALL_COMPLETED:
            stats = self.current_stats()
            self.history.append(stats)
            log.info("Phrase finished: keys=%d misses=%d kpm=%d",
                     stats.correct_keys, stats.miss_keys, phrase_metric(stats))
        return result

    def type_text(self, keys: str) -> List[KeyResult]:
        """Feed each character of `keys` in order; dropped keys are skipped."""
        results: List[KeyResult] = []
        for ch in keys:
            r = self.press(ch)
            if r is not None:
                results.append(r)
        return results

    # ------------- queries -------------

    def current_stats(self) -> PhraseStats:
        if self.session is None:
            raise RuntimeError("No active phrase. Call start() first.")
        return PhraseStats(
            correct_keys=self.correct_keys,
            miss_keys=self.miss_keys,
            elapsed_seconds=max(0.0, self.last_key_at - self.started_at),
            display_text=self.session.source_phrase.display_text,
        )

    def state(self) -> dict:
        """Read-only snapshot of the live session for a rendering layer."""
        if self.session is None:
            raise RuntimeError("No active phrase. Call start() first.")
        s = self.session
        info = display_info(s)
        return {
            "display_text": s.source_phrase.display_text,
            "phonetic_text": s.normalized_phonetic,
            "romaji": s.display_string,
            "unit_index": s.current_unit_index,
            "unit_count": len(s.units),
            "input_buffer": s.input_buffer,
            "committed_length": info.committed_length,
            "buffer_length": info.buffer_length,
            "active_unit_display_offset": info.active_unit_display_offset,
            "percent_complete": percent_complete(s),
            "expected_next_key": expected_next_key(s),
            "completed": s.completed,
            "combo": self.combo,
        }

    def summary(self, policy: Optional[str] = None) -> dict:
        policy = policy or self.policy
        correct = sum(s.correct_keys for s in self.history)
        miss = sum(s.miss_keys for s in self.history)
        metric = session_metric(self.history, policy)
        return {
            "policy": policy,
            "phrases": len(self.history),
            "correct_keys": correct,
            "miss_keys": miss,
            "accuracy": accuracy(correct, miss),
            "kpm": metric,
            "rank": self.ranks.rank_for(metric),
            "score": score(metric, correct, miss),
        }
