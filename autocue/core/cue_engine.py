"""Cue placement: add memory/hot cues before and after a reference hot cue, bar-aligned.

Per selected track the engine reads tempo and duration, resolves the before
and after reference cues, walks outwards from them in steps of
`interval_bars` bars, and keeps every candidate that stays inside the track
and clear of other cues. Tracks that cannot be processed are skipped and
reported, never raised. After all tracks, one playlist referencing the
selected ids is appended to PLAYLISTS.
"""
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Set

from autocue.config import (
    BEATS_PER_BAR,
    MIN_CUE_DISTANCE_SEC,
    MIN_CUE_START_SEC,
    PLAYLIST_NAME,
)
from autocue.core.document import Document, Node
from autocue.core.errors import FormatError
from autocue.core.tracks import (
    MEMORY_SLOT,
    hot_cues,
    is_positive,
    mark_slot,
    mark_start,
    track_bpm,
    track_duration,
)
from autocue.models.outcome import TrackOutcome
from autocue.models.palette import DEFAULT_PALETTE, CuePalette
from autocue.models.placement import CueKind, PlacementConfig, ReferenceStrategy

logger = logging.getLogger(__name__)

MARK_TYPE_CUE = "0"
FOLDER_NODE_TYPE = "0"


def bar_seconds(bpm: float) -> float:
    """Duration of one bar in seconds (fixed 4/4)."""
    return (60.0 / bpm) * BEATS_PER_BAR


def collection_node(document: Document) -> Node:
    """Return the COLLECTION node or raise FormatError."""
    root = document.root
    collection = root.find("COLLECTION") if root.tag == "DJ_PLAYLISTS" else None
    if collection is None:
        raise FormatError("Invalid Rekordbox XML format")
    return collection


def normalize_mark(mark: Node) -> Node:
    """Rekordbox cue form: Type 0, Name present, Start with three decimals."""
    if not mark.attrs.get("Name"):
        mark.attrs["Name"] = ""
    mark.attrs["Type"] = MARK_TYPE_CUE
    start = mark.attrs.get("Start")
    if start:
        try:
            mark.attrs["Start"] = f"{float(start):.3f}"
        except ValueError:
            logger.debug("Leaving unreadable Start %r as is", start)
    return mark


def _root_folder(playlists: Node) -> Optional[Node]:
    for node in playlists.findall("NODE"):
        if node.attrs.get("Type") == FOLDER_NODE_TYPE and node.attrs.get("Name") == "ROOT":
            return node
    return None


class _Placement:
    """Marks on one track while new cues are being placed: times and slots already taken."""

    def __init__(self, marks: Sequence[Node], slot_count: int) -> None:
        self.times: List[float] = [mark_start(m) for m in marks]
        self.slots: Set[int] = {s for s in (mark_slot(m) for m in marks) if s >= 0}
        self.slot_count = slot_count

    def is_clear(self, time: float, min_distance: float) -> bool:
        return all(abs(t - time) >= min_distance for t in self.times)

    def take_slot(self) -> int:
        """Lowest free hot-cue slot, or MEMORY_SLOT when all are used."""
        for slot in range(self.slot_count):
            if slot not in self.slots:
                self.slots.add(slot)
                return slot
        return MEMORY_SLOT


class CuePlacementEngine:
    """Adds auto cues to selected tracks of a parsed Rekordbox collection."""

    def __init__(
        self,
        palette: CuePalette = DEFAULT_PALETTE,
        playlist_name: str = PLAYLIST_NAME,
        min_distance: float = MIN_CUE_DISTANCE_SEC,
        min_start: float = MIN_CUE_START_SEC,
    ) -> None:
        self.palette = palette
        self.playlist_name = playlist_name
        self.min_distance = min_distance
        self.min_start = min_start

    def process(
        self,
        document: Document,
        config: PlacementConfig,
        track_ids: Iterable[str],
        on_track: Optional[Callable[[TrackOutcome], None]] = None,
    ) -> Document:
        """Add cues to every selected track, then append the processed-tracks playlist.

        Mutates and returns `document`. Raises FormatError when the
        DJ_PLAYLISTS/COLLECTION structure is missing. `on_track` is called
        with each selected track's outcome, in collection order.
        """
        ids = list(track_ids)
        selected = set(ids)
        collection = collection_node(document)

        for track in collection.findall("TRACK"):
            if track.attrs.get("TrackID") not in selected:
                continue
            outcome = self.process_track(track, config)
            if on_track is not None:
                on_track(outcome)

        self.add_playlist(document, ids)
        return document

    def process_track(self, track: Node, config: PlacementConfig) -> TrackOutcome:
        """Place cues on one TRACK node in place and report what happened."""
        track_id = track.attrs.get("TrackID", "")
        name = track.attrs.get("Name", "")

        bpm = track_bpm(track)
        duration = track_duration(track)
        if not is_positive(bpm) or not is_positive(duration):
            return self._skip(track_id, name, "invalid BPM or duration")

        marks = track.findall("POSITION_MARK")
        before_ref = self.find_reference_point(
            marks, config.before.reference, config.before.cue_letter
        )
        after_ref = self.find_reference_point(
            marks, config.after.reference, config.after.cue_letter
        )
        if before_ref is None or after_ref is None:
            return self._skip(track_id, name, "couldn't find reference points")

        bar = bar_seconds(bpm)
        placement = _Placement(marks, self.palette.slot_count)
        new_marks: List[Node] = []

        before = config.before
        if before.count > 0:
            ref_time = mark_start(before_ref)
            step = before.interval_bars * bar
            kind = config.kind_for(before)
            for i in range(1, before.count + 1):
                time = max(0.0, ref_time - i * step)
                # Effectively at the track start
                if time < self.min_start:
                    continue
                if not placement.is_clear(time, self.min_distance):
                    continue
                new_marks.append(
                    self._place(placement, f"Auto {before.count - i + 1}", time, kind)
                )

        after = config.after
        if after.count > 0:
            ref_time = mark_start(after_ref)
            step = after.interval_bars * bar
            kind = config.kind_for(after)
            for i in range(1, after.count + 1):
                time = ref_time + i * step
                if time >= duration:
                    continue
                if not placement.is_clear(time, self.min_distance):
                    continue
                new_marks.append(self._place(placement, f"Auto {i}", time, kind))

        merged = [normalize_mark(m) for m in marks + new_marks]
        merged.sort(key=mark_start)
        track.replace_children("POSITION_MARK", merged)

        logger.debug("Track %s: added %d cue(s)", name, len(new_marks))
        return TrackOutcome(
            track_id=track_id,
            name=name,
            status="processed",
            added=[dict(m.attrs) for m in new_marks],
        )

    def find_reference_point(
        self,
        marks: Sequence[Node],
        strategy: ReferenceStrategy,
        letter: Optional[str] = None,
    ) -> Optional[Node]:
        """Resolve the hot cue new cues are measured from, or None.

        Intro and outro have no marker of their own in Rekordbox XML and
        resolve to the first and last hot cue.
        """
        cues = hot_cues(marks)
        if not cues:
            return None

        strategy = ReferenceStrategy(strategy)
        if strategy in (ReferenceStrategy.FIRST_HOT_CUE, ReferenceStrategy.INTRO):
            return cues[0]
        if strategy in (ReferenceStrategy.LAST_HOT_CUE, ReferenceStrategy.OUTRO):
            return cues[-1]
        # SPECIFIC_HOT_CUE
        slot = self.palette.slot_for_letter(letter or "")
        if slot is None:
            return None
        for cue in cues:
            if mark_slot(cue) == slot:
                return cue
        return None

    def add_playlist(self, document: Document, track_ids: Sequence[str]) -> Node:
        """Append the processed-tracks playlist, creating PLAYLISTS if needed.

        Rekordbox only lists playlists inside its ROOT folder, so the node
        goes there (bumping the folder's Count) when PLAYLISTS has one, and
        directly into PLAYLISTS otherwise.
        """
        root = document.root
        playlists = root.find("PLAYLISTS")
        if playlists is None:
            playlists = Node("PLAYLISTS")
            index = root.children.index(collection_node(document)) + 1
            root.children.insert(index, playlists)
        parent = _root_folder(playlists) or playlists

        node = Node(
            "NODE",
            {
                "Name": self.playlist_name,
                "Type": "1",
                "KeyType": "0",
                "Entries": str(len(track_ids)),
            },
            [Node("TRACK", {"Key": track_id}) for track_id in track_ids],
        )
        parent.append(node)
        if parent is not playlists and "Count" in parent.attrs:
            parent.attrs["Count"] = str(len(parent.findall("NODE")))
        logger.info("Added playlist %r with %d track(s)", self.playlist_name, len(track_ids))
        return node

    def _place(self, placement: _Placement, name: str, time: float, kind: CueKind) -> Node:
        slot = placement.take_slot() if kind == CueKind.HOT else MEMORY_SLOT
        placement.times.append(time)
        attrs = {
            "Name": name,
            "Type": MARK_TYPE_CUE,
            "Start": f"{time:.3f}",
            "Num": str(slot),
        }
        color = self.palette.color_for_slot(slot)
        if color is not None:
            attrs["Red"] = str(color[0])
            attrs["Green"] = str(color[1])
            attrs["Blue"] = str(color[2])
        return Node("POSITION_MARK", attrs)

    @staticmethod
    def _skip(track_id: str, name: str, reason: str) -> TrackOutcome:
        logger.warning("Skipping track %s - %s", name or track_id, reason)
        return TrackOutcome(track_id=track_id, name=name, status="skipped", reason=reason)


def process(
    document: Document,
    config: PlacementConfig,
    track_ids: Iterable[str],
    on_track: Optional[Callable[[TrackOutcome], None]] = None,
) -> Document:
    """Run the default engine over `document`. See CuePlacementEngine.process."""
    return CuePlacementEngine().process(document, config, track_ids, on_track=on_track)
