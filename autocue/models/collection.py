"""Read-only track and playlist projections for browsing."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CueSummary:
    """One existing cue as shown in a track listing."""
    type: str  # "hot" | "memory"
    slot: int
    letter: Optional[str]  # A-H for hot cues
    name: str
    start: float
    end: Optional[float]
    time_formatted: str


@dataclass
class TrackSummary:
    id: str
    name: str
    artist: str
    album: str
    location: str
    total_time: float
    bpm: float
    key: str
    hot_cues: List[CueSummary] = field(default_factory=list)
    memory_cues: List[CueSummary] = field(default_factory=list)


@dataclass
class PlaylistSummary:
    """Flattened playlist node: path joins parent folder names with ' / '."""
    id: str
    name: str
    path: str
    track_ids: List[str] = field(default_factory=list)
