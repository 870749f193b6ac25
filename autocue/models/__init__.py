"""Data models for placement config, palette, projections and outcomes."""
from autocue.models.collection import CueSummary, PlaylistSummary, TrackSummary
from autocue.models.outcome import ProcessResult, TrackOutcome
from autocue.models.palette import DEFAULT_PALETTE, CuePalette
from autocue.models.placement import (
    CueKind,
    DirectionConfig,
    PlacementConfig,
    ReferenceStrategy,
)

__all__ = [
    "CueKind",
    "CuePalette",
    "CueSummary",
    "DEFAULT_PALETTE",
    "DirectionConfig",
    "PlacementConfig",
    "PlaylistSummary",
    "ProcessResult",
    "ReferenceStrategy",
    "TrackOutcome",
    "TrackSummary",
]
