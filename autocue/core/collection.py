"""Read-only track and playlist listings for browsing a loaded collection."""
from typing import List, Optional

from autocue.core.cue_engine import collection_node
from autocue.core.document import Document, Node
from autocue.core.tracks import MEMORY_SLOT, mark_slot, mark_start, to_float
from autocue.models.collection import CueSummary, PlaylistSummary, TrackSummary
from autocue.models.palette import DEFAULT_PALETTE

PLAYLIST_NODE_TYPE = "1"  # "0" is a folder


def format_timestamp(seconds: float) -> str:
    """Seconds -> MM:SS.mmm (minutes are not wrapped into hours)."""
    total_ms = int(round(max(0.0, seconds) * 1000))
    minutes, rest = divmod(total_ms, 60_000)
    secs, ms = divmod(rest, 1000)
    return f"{minutes:02d}:{secs:02d}.{ms:03d}"


def _cue_summary(mark: Node, type_: str) -> CueSummary:
    start = mark_start(mark)
    slot = mark_slot(mark)
    end = to_float(mark.attrs.get("End"), None)
    return CueSummary(
        type=type_,
        slot=slot,
        letter=DEFAULT_PALETTE.letter_for_slot(slot),
        name=mark.attrs.get("Name", ""),
        start=start,
        end=end,
        time_formatted=format_timestamp(start),
    )


def summarize_track(track: Node) -> TrackSummary:
    attrs = track.attrs
    hot: List[CueSummary] = []
    memory: List[CueSummary] = []
    for mark in track.findall("POSITION_MARK"):
        slot = mark_slot(mark)
        if slot >= 0:
            hot.append(_cue_summary(mark, "hot"))
        elif slot == MEMORY_SLOT:
            memory.append(_cue_summary(mark, "memory"))
    return TrackSummary(
        id=attrs.get("TrackID", ""),
        name=attrs.get("Name", ""),
        artist=attrs.get("Artist", ""),
        album=attrs.get("Album", ""),
        location=attrs.get("Location", ""),
        total_time=to_float(attrs.get("TotalTime"), 0.0),
        bpm=to_float(attrs.get("AverageBpm"), 0.0),
        key=attrs.get("Tonality", ""),
        hot_cues=hot,
        memory_cues=memory,
    )


def extract_tracks(document: Document) -> List[TrackSummary]:
    """One summary per COLLECTION/TRACK. Raises FormatError without a collection."""
    return [summarize_track(t) for t in collection_node(document).findall("TRACK")]


def extract_playlists(document: Document) -> List[PlaylistSummary]:
    """Flatten nested PLAYLISTS/NODE folders into playlists with their folder path."""
    playlists: List[PlaylistSummary] = []
    section = document.root.find("PLAYLISTS")
    if section is None:
        return playlists

    def visit(node: Node, parent_path: Optional[str]) -> None:
        name = node.attrs.get("Name") or "Unnamed"
        path = f"{parent_path} / {name}" if parent_path else name
        if node.attrs.get("Type") == PLAYLIST_NODE_TYPE:
            playlists.append(
                PlaylistSummary(
                    id=f"playlist-{len(playlists)}",
                    name=name,
                    path=path,
                    track_ids=[t.attrs.get("Key", "") for t in node.findall("TRACK")],
                )
            )
        for child in node.findall("NODE"):
            visit(child, path)

    for node in section.findall("NODE"):
        visit(node, None)
    return playlists
