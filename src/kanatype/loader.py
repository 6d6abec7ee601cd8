from __future__ import annotations
import logging
import os
import random
from typing import Iterable, List, Optional

from . import config as CFG
from .models import Phrase, PhraseSet

log = logging.getLogger(__name__)

# Progress logging (set KANATYPE_VERBOSE=1 to enable)
VERBOSE = os.environ.get("KANATYPE_VERBOSE") == "1"
PROGRESS_EVERY_FILES = 100

DIFFICULTIES = ("easy", "normal", "hard")

_EASY = [
    ("笑顔", "えがお"), ("希望", "きぼう"), ("元気", "げんき"), ("勇気", "ゆうき"),
    ("光", "ひかり"), ("前進", "ぜんしん"), ("努力", "どりょく"), ("感謝", "かんしゃ"),
    ("挑戦", "ちょうせん"), ("安心", "あんしん"), ("友情", "ゆうじょう"), ("忍耐", "にんたい"),
]
_NORMAL = [
    ("今日も一日頑張ろう", "きょうもいちにちがんばろう"),
    ("笑顔で過ごそう", "えがおですごそう"),
    ("夢に向かって進もう", "ゆめにむかってすすもう"),
    ("失敗は成功のもと", "しっぱいはせいこうのもと"),
    ("一歩ずつ前進しよう", "いっぽずつぜんしんしよう"),
    ("自分のペースで進もう", "じぶんのぺーすですすもう"),
    ("変化を楽しもう", "へんかをたのしもう"),
]
_HARD = [
    ("思い立ったが吉日", "おもいたったがきちじつ"),
    ("雨降って地固まる", "あめふってじかたまる"),
    ("新しい挑戦を恐れずに", "あたらしいちょうせんをおそれずに"),
    ("自分の可能性を信じて", "じぶんのかのうせいをしんじて"),
    ("心の声に耳を傾けよう", "こころのこえにみみをかたむけよう"),
]

BUILTIN: dict[str, List[Phrase]] = {
    "easy": [Phrase(d, k, "easy", "positive") for d, k in _EASY],
    "normal": [Phrase(d, k, "normal", "sentences") for d, k in _NORMAL],
    "hard": [Phrase(d, k, "hard", "sentences") for d, k in _HARD],
}


def _wanted(actual: str, category: Optional[str]) -> bool:
    return category in (None, "all") or actual == category


def builtin_phrases(difficulty: Optional[str] = None, category: Optional[str] = None) -> PhraseSet:
    """Built-in phrases for one difficulty, or all of them for None / "all"; optionally one category."""
    if difficulty in (None, "all"):
        pool = [p for d in DIFFICULTIES for p in BUILTIN[d]]
    else:
        try:
            pool = list(BUILTIN[difficulty])
        except KeyError:
            raise ValueError(f"Unknown difficulty: {difficulty!r} (expected one of {DIFFICULTIES + ('all',)})") from None
    return PhraseSet([p for p in pool if _wanted(p.category, category)])


def _iter_phrase_files(roots: Iterable[str]) -> Iterable[str]:
    """Yield phrase file paths recursively under each root."""
    for root in roots:
        for dirpath, _, filenames in os.walk(os.path.abspath(root)):
            for fn in sorted(filenames):
                if fn.lower().endswith(CFG.PHRASE_GLOB):
                    yield os.path.join(dirpath, fn)


def parse_line(raw: str, *, difficulty: str, category: str) -> Phrase | None:
    """
    One phrase per line: "display<TAB>reading", or just the reading.
    Blank lines and lines starting with "#" give None.
    """
    line = raw.strip(" \r\n")
    if not line or line.startswith("#"):
        return None
    if "\t" in line:
        display, _, reading = line.partition("\t")
        display, reading = display.strip(), reading.strip()
    else:
        display = reading = line
    if not reading:
        return None
    return Phrase(display_text=display or reading, phonetic_text=reading,
                  difficulty=difficulty, category=category)


def load_phrases(roots: List[str], difficulty: Optional[str] = None,
                 category: Optional[str] = None) -> PhraseSet:
    """
    Scan roots for phrase files and build a PhraseSet.
    The file's base name is used as category; difficulty defaults to
    config.DEFAULT_DIFFICULTY. With `category`, only files of that name are read.
    """
    roots = list(roots)
    if not roots:
        raise ValueError("load_phrases(): at least one root folder is required")

    difficulty = difficulty or CFG.DEFAULT_DIFFICULTY
    phrases: List[Phrase] = []

    file_count = 0
    for path in _iter_phrase_files(roots):
        file_category = os.path.splitext(os.path.basename(path))[0]
        if not _wanted(file_category, category):
            continue
        try:
            with open(path, "r", encoding=CFG.ENCODING, errors="ignore") as f:
                raw_lines = [ln.rstrip("\r\n") for ln in f]
        except OSError as e:
            log.warning("Skipping unreadable phrase file %s: %s", path, e)
            continue

        for raw in raw_lines:
            p = parse_line(raw, difficulty=difficulty, category=file_category)
            if p is not None:
                phrases.append(p)

        file_count += 1
        if VERBOSE and file_count % PROGRESS_EVERY_FILES == 0:
            log.info("[scanned] files=%d phrases=%d", file_count, len(phrases))

    log.info("Loaded %d phrases from %d files", len(phrases), file_count)
    return PhraseSet(phrases=phrases)


def randomized(phrases: PhraseSet, count: Optional[int] = None,
               rng: Optional[random.Random] = None,
               exclude: Iterable[str] = ()) -> List[Phrase]:
    """
    Shuffled copy of the set, cut to `count` when it is smaller than the set.
    Phrases whose display text is in `exclude` are left out unless that would
    leave nothing.
    """
    rng = rng or random.Random()
    skip = set(exclude)
    shuffled = [p for p in phrases.phrases if p.display_text not in skip] or list(phrases.phrases)
    rng.shuffle(shuffled)
    return limited(shuffled, count)


def limited(phrases: List[Phrase], count: Optional[int]) -> List[Phrase]:
    """First `count` phrases; the whole list when count is unset, below 1 or too large."""
    if count and 0 < count < len(phrases):
        return phrases[:count]
    return list(phrases)
