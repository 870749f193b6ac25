"""Core: XML document adapter, cue placement engine, collection listings."""
from autocue.core.cue_engine import CuePlacementEngine
from autocue.core.document import Document, Node, build, parse
from autocue.core.errors import AutocueError, FormatError, ParseError
from autocue.core.pipeline import process_collection

__all__ = [
    "AutocueError",
    "CuePlacementEngine",
    "Document",
    "FormatError",
    "Node",
    "ParseError",
    "build",
    "parse",
    "process_collection",
]
