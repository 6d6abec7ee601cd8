from __future__ import annotations

# Small kana that combine with the preceding character into one typing unit
SMALL_VOWEL_MARKERS: str = "ゃゅょぁぃぅぇぉ"

# Consonant doubling marker and the unit used when the next sound is not a consonant
DOUBLING_MARKER: str = "っ"
DOUBLING_FALLBACK: str = "xtu"
DOUBLING_CONSONANTS: str = "bcdfghjklmpqrstvwxyz"

# Nasal mora spellings, long form first
NASAL_MORA: str = "ん"
NASAL_LONG: tuple[str, ...] = ("nn", "xn")
NASAL_SHORT: str = "n"

# /* ~~~ next-unit onsets that would merge with a bare "n" ~~~ */
NASAL_LONG_ONLY_ONSETS: str = "aiueoyn"

# Throughput policy used by Trainer.summary(): "aggregate" or "averaged"
THROUGHPUT_POLICY: str = "aggregate"

# Rank thresholds (keys per minute, label), ascending
RANK_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (0, "F"),
    (50, "F+"),
    (100, "E"),
    (150, "E+"),
    (200, "D"),
    (250, "D+"),
    (300, "C"),
    (350, "C+"),
    (400, "B"),
    (450, "B+"),
    (500, "A"),
    (550, "A+"),
    (600, "S"),
    (650, "S+"),
    (700, "SS"),
    (750, "SS+"),
    (800, "SSS"),
    (850, "SSS+"),
    (900, "LEGEND"),
    (950, "DIVINE"),
    (1000, "GOD"),
)

# Score: metric * SCORE_MULTIPLIER, scaled down by up to MISS_PENALTY for misses
SCORE_MULTIPLIER: int = 10
MISS_PENALTY: float = 0.5

# Phrase files
ENCODING: str = "utf-8"
PHRASE_GLOB: str = ".txt"
DEFAULT_DIFFICULTY: str = "easy"

# Shuffled loads skip phrases started this recently (display texts remembered)
RECENT_MEMORY: int = 15
