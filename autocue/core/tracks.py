"""Typed reads of TRACK and POSITION_MARK attributes (all stored as strings)."""
import math
from typing import List, Optional, Sequence

from autocue.core.document import Node

MEMORY_SLOT = -1


def to_float(value: Optional[str], default: float = math.nan) -> float:
    """Parse an attribute as float; default when missing or not a number."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def track_bpm(track: Node) -> float:
    """First TEMPO marker's Bpm, falling back to the track's AverageBpm."""
    bpm = math.nan
    tempo = track.find("TEMPO")
    if tempo is not None:
        bpm = to_float(tempo.attrs.get("Bpm"))
    if not is_positive(bpm):
        bpm = to_float(track.attrs.get("AverageBpm"))
    return bpm


def track_duration(track: Node) -> float:
    return to_float(track.attrs.get("TotalTime"))


def mark_start(mark: Node) -> float:
    return to_float(mark.attrs.get("Start"), 0.0)


def mark_slot(mark: Node) -> int:
    """Hot-cue slot (0 = A) or -1 for memory cues and unreadable Num values."""
    try:
        return int(mark.attrs.get("Num", MEMORY_SLOT))
    except ValueError:
        return MEMORY_SLOT


def hot_cues(marks: Sequence[Node]) -> List[Node]:
    """Marks occupying a hot-cue slot, ascending by start time."""
    return sorted((m for m in marks if mark_slot(m) >= 0), key=mark_start)
