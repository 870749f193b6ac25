"""Run cue placement on the loaded collection and fetch the result."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from autocue.api.state import AppState, get_state
from autocue.core.errors import AutocueError
from autocue.core.pipeline import process_collection, write_output
from autocue.models.outcome import TrackOutcome
from autocue.models.placement import (
    CueKind,
    DirectionConfig,
    PlacementConfig,
    ReferenceStrategy,
)

router = APIRouter()


class DirectionBody(BaseModel):
    reference: ReferenceStrategy
    cue_letter: str = Field("A", pattern="^[A-Ha-h]$")
    count: int = Field(0, ge=0)
    interval_bars: float = Field(8, gt=0)
    cue_kind: Optional[CueKind] = None

    def to_config(self) -> DirectionConfig:
        return DirectionConfig(
            reference=self.reference,
            cue_letter=self.cue_letter,
            count=self.count,
            interval_bars=self.interval_bars,
            cue_kind=self.cue_kind,
        )


def _default_before() -> DirectionBody:
    return DirectionBody(reference=ReferenceStrategy.FIRST_HOT_CUE, cue_letter="A", count=2, interval_bars=8)


def _default_after() -> DirectionBody:
    return DirectionBody(reference=ReferenceStrategy.LAST_HOT_CUE, cue_letter="H", count=4, interval_bars=16)


class PlacementBody(BaseModel):
    before: DirectionBody = Field(default_factory=_default_before)
    after: DirectionBody = Field(default_factory=_default_after)
    cue_kind: CueKind = CueKind.MEMORY

    def to_config(self) -> PlacementConfig:
        return PlacementConfig(
            before=self.before.to_config(),
            after=self.after.to_config(),
            cue_kind=self.cue_kind,
        )


class ProcessBody(BaseModel):
    track_ids: List[str]
    config: PlacementBody = Field(default_factory=PlacementBody)
    output_path: Optional[str] = None


def _outcome_to_dict(o: TrackOutcome) -> dict:
    return {
        "track_id": o.track_id,
        "name": o.name,
        "status": o.status,
        "reason": o.reason,
        "added": o.added,
    }


@router.post("/process")
def process_cues(
    body: ProcessBody,
    state: AppState = Depends(get_state),
):
    """Add cues to the selected tracks. Optionally write the new collection to output_path."""
    if not body.track_ids:
        raise HTTPException(status_code=400, detail="Select at least one track")
    content = state.get_content()
    if content is None:
        raise HTTPException(status_code=409, detail="No collection loaded")

    try:
        result = process_collection(
            content, body.config.to_config(), body.track_ids, engine=state.engine
        )
    except AutocueError as e:
        raise HTTPException(status_code=400, detail=f"Error processing collection: {e}")
    state.set_result(result)

    output_path = None
    if body.output_path:
        try:
            output_path = str(write_output(result, body.output_path))
        except OSError as e:
            raise HTTPException(status_code=500, detail=f"Error writing file: {e}")

    return {
        "processed": result.processed_count,
        "skipped": result.skipped_count,
        "added": result.added_count,
        "missing_ids": result.missing_ids,
        "outcomes": [_outcome_to_dict(o) for o in result.outcomes],
        "output_path": output_path,
    }


@router.get("/result")
def get_result(state: AppState = Depends(get_state)):
    """Last processed collection as XML."""
    result = state.get_result()
    if result is None:
        raise HTTPException(status_code=404, detail="Nothing processed yet")
    return Response(
        content=result.to_bytes(),
        media_type=f"application/xml; charset={result.encoding}",
    )
