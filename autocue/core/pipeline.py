"""Whole-run helper: parse collection text, place cues, build the new text."""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from autocue.config import OUTPUT_NAME
from autocue.core.cue_engine import CuePlacementEngine, collection_node
from autocue.core.document import build, parse
from autocue.models.outcome import ProcessResult, TrackOutcome
from autocue.models.placement import PlacementConfig

logger = logging.getLogger(__name__)


def process_collection(
    content: Union[str, bytes],
    config: PlacementConfig,
    track_ids: Iterable[str],
    engine: Optional[CuePlacementEngine] = None,
) -> ProcessResult:
    """Parse, process and rebuild a collection. ParseError/FormatError propagate."""
    engine = engine or CuePlacementEngine()
    ids = list(track_ids)
    document = parse(content)

    known = {t.attrs.get("TrackID") for t in collection_node(document).findall("TRACK")}
    outcomes: List[TrackOutcome] = []
    engine.process(document, config, ids, on_track=outcomes.append)

    result = ProcessResult(
        xml=build(document),
        outcomes=outcomes,
        missing_ids=[i for i in ids if i not in known],
        encoding=document.encoding,
    )
    logger.info(
        "Processed %d track(s): %d skipped, %d cue(s) added, %d id(s) not in collection",
        result.processed_count,
        result.skipped_count,
        result.added_count,
        len(result.missing_ids),
    )
    return result


def write_output(result: ProcessResult, path: Union[str, Path]) -> Path:
    """Write the processed collection in its source encoding.

    A directory gets the default output name.
    """
    target = Path(path).expanduser()
    if target.is_dir():
        target = target / OUTPUT_NAME
    target.write_bytes(result.to_bytes())
    logger.info("Wrote %s", target)
    return target
