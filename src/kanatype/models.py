from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import List, Tuple


class Status(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    UNIT_COMPLETED = "unit_completed"
    ALL_COMPLETED = "all_completed"
    NO_MATCH = "no_match"
    ALREADY_COMPLETED = "already_completed"


@dataclass(frozen=True)
class Phrase:
    display_text: str
    phonetic_text: str        # kana reading to type
    difficulty: str = "easy"
    category: str = "general"


@dataclass(frozen=True)
class CompiledUnit:
    source: str                   # kana this unit was compiled from
    candidates: Tuple[str, ...]   # accepted spellings, preferred first
    display_offset: int           # start of candidates[0] in the display string

    @property
    def preferred(self) -> str:
        return self.candidates[0]


@dataclass
class Session:
    source_phrase: Phrase
    normalized_phonetic: str
    units: List[CompiledUnit]
    display_string: str
    current_unit_index: int = 0
    input_buffer: str = ""
    committed_length: int = 0
    completed: bool = False

    @property
    def active_unit(self) -> CompiledUnit | None:
        if self.current_unit_index < len(self.units):
            return self.units[self.current_unit_index]
        return None

    @property
    def next_unit(self) -> CompiledUnit | None:
        i = self.current_unit_index + 1
        return self.units[i] if i < len(self.units) else None


@dataclass(frozen=True)
class KeyResult:
    accepted: bool
    status: Status


@dataclass(frozen=True)
class DisplayInfo:
    committed_length: int
    buffer_length: int
    active_unit_display_offset: int
    percent_complete: int


@dataclass(frozen=True)
class PhraseStats:
    correct_keys: int
    miss_keys: int
    elapsed_seconds: float
    display_text: str = ""

    @property
    def total_keys(self) -> int:
        return self.correct_keys + self.miss_keys


@dataclass
class PhraseSet:
    phrases: List[Phrase] = field(default_factory=list)
