"""Load a Rekordbox collection and browse its tracks and playlists."""
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from autocue.api.state import AppState, get_state
from autocue.core.collection import extract_playlists, extract_tracks
from autocue.core.document import Document
from autocue.core.errors import AutocueError

router = APIRouter()


class LoadCollectionBody(BaseModel):
    """Either a path to an exported collection XML or its content."""
    path: Optional[str] = None
    content: Optional[str] = None


def _require_document(state: AppState) -> Document:
    document = state.get_document()
    if document is None:
        raise HTTPException(status_code=409, detail="No collection loaded")
    return document


@router.post("/load")
def load_collection(
    body: LoadCollectionBody,
    state: AppState = Depends(get_state),
):
    """Load and validate a collection; later requests work on it."""
    if not body.path and body.content is None:
        raise HTTPException(status_code=400, detail="Provide path or content")

    path = None
    if body.path:
        path = Path(body.path).expanduser()
        try:
            content = path.read_bytes()
        except OSError as e:
            raise HTTPException(status_code=400, detail=f"Error loading collection: {e}")
    else:
        content = body.content

    try:
        document = state.load(content, path)
    except AutocueError as e:
        raise HTTPException(status_code=400, detail=f"Error loading collection: {e}")

    return {
        "path": str(path) if path else None,
        "track_count": len(extract_tracks(document)),
        "playlist_count": len(extract_playlists(document)),
    }


@router.get("/tracks")
def list_tracks(state: AppState = Depends(get_state)):
    """All tracks with their existing hot and memory cues."""
    document = _require_document(state)
    return [asdict(t) for t in extract_tracks(document)]


@router.get("/playlists")
def list_playlists(state: AppState = Depends(get_state)):
    """Playlists flattened out of their folders."""
    document = _require_document(state)
    return [asdict(p) for p in extract_playlists(document)]
