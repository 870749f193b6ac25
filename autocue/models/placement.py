"""Cue placement configuration: reference strategy, count and interval per direction."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ReferenceStrategy(str, Enum):
    """Which existing hot cue new cues are measured from."""
    FIRST_HOT_CUE = "firstHotCue"
    LAST_HOT_CUE = "lastHotCue"
    SPECIFIC_HOT_CUE = "specificHotCue"
    INTRO = "intro"  # alias of FIRST_HOT_CUE
    OUTRO = "outro"  # alias of LAST_HOT_CUE


class CueKind(str, Enum):
    MEMORY = "memory"
    HOT = "hot"


@dataclass(frozen=True)
class DirectionConfig:
    """Placement rule for one side of the reference point."""
    reference: ReferenceStrategy
    cue_letter: str = "A"  # only used by SPECIFIC_HOT_CUE
    count: int = 0
    interval_bars: float = 8
    cue_kind: Optional[CueKind] = None  # None = use PlacementConfig.cue_kind

    def __post_init__(self) -> None:
        # Accept plain strings from callers (API bodies, tests)
        object.__setattr__(self, "reference", ReferenceStrategy(self.reference))
        if self.cue_kind is not None:
            object.__setattr__(self, "cue_kind", CueKind(self.cue_kind))
        letter = (self.cue_letter or "").strip().upper()
        if len(letter) != 1 or not letter.isalpha():
            raise ValueError(f"cue_letter must be a single letter, got {self.cue_letter!r}")
        object.__setattr__(self, "cue_letter", letter)
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")
        if not self.interval_bars > 0:
            raise ValueError(f"interval_bars must be > 0, got {self.interval_bars}")


def _default_before() -> DirectionConfig:
    return DirectionConfig(ReferenceStrategy.FIRST_HOT_CUE, "A", count=2, interval_bars=8)


def _default_after() -> DirectionConfig:
    return DirectionConfig(ReferenceStrategy.LAST_HOT_CUE, "H", count=4, interval_bars=16)


@dataclass(frozen=True)
class PlacementConfig:
    """Where and how many cues to add before and after the reference points."""
    before: DirectionConfig = field(default_factory=_default_before)
    after: DirectionConfig = field(default_factory=_default_after)
    cue_kind: CueKind = CueKind.MEMORY

    def __post_init__(self) -> None:
        object.__setattr__(self, "cue_kind", CueKind(self.cue_kind))

    def kind_for(self, direction: DirectionConfig) -> CueKind:
        """Cue kind for a direction: its own override, else the global kind."""
        return direction.cue_kind if direction.cue_kind is not None else self.cue_kind
