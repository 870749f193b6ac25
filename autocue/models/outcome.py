"""Per-track processing outcomes and batch result."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class TrackOutcome:
    """What happened to one selected track."""
    track_id: str
    name: str
    status: str  # "processed" | "skipped"
    reason: Optional[str] = None
    added: List[Dict[str, str]] = field(default_factory=list)  # attrs of inserted marks

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"


@dataclass
class ProcessResult:
    """Output of one parse -> process -> build run."""
    xml: str
    outcomes: List[TrackOutcome] = field(default_factory=list)
    missing_ids: List[str] = field(default_factory=list)
    encoding: str = "utf-8"  # of the source document; used when writing bytes

    def to_bytes(self) -> bytes:
        return self.xml.encode(self.encoding, errors="xmlcharrefreplace")

    @property
    def processed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.skipped)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def added_count(self) -> int:
        return sum(len(o.added) for o in self.outcomes)
