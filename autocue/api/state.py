"""Shared application state (injected into routes): loaded collection and last output."""
import threading
from pathlib import Path
from typing import Optional, Union

from autocue.core.document import Document, parse
from autocue.core.cue_engine import CuePlacementEngine, collection_node
from autocue.models.outcome import ProcessResult


class AppState:
    def __init__(self) -> None:
        self.engine = CuePlacementEngine()
        self._lock = threading.Lock()
        self._content: Optional[Union[str, bytes]] = None
        self._path: Optional[Path] = None
        self._result: Optional[ProcessResult] = None

    def load(self, content: Union[str, bytes], path: Optional[Path] = None) -> Document:
        """Validate and keep a collection. Raises ParseError/FormatError; state unchanged then."""
        document = parse(content)
        collection_node(document)
        with self._lock:
            self._content = content
            self._path = path
            self._result = None
        return document

    def get_content(self) -> Optional[Union[str, bytes]]:
        with self._lock:
            return self._content

    def get_document(self) -> Optional[Document]:
        """Fresh parse of the loaded collection, or None when nothing is loaded."""
        content = self.get_content()
        return parse(content) if content is not None else None

    @property
    def path(self) -> Optional[Path]:
        with self._lock:
            return self._path

    def set_result(self, result: ProcessResult) -> None:
        with self._lock:
            self._result = result

    def get_result(self) -> Optional[ProcessResult]:
        with self._lock:
            return self._result

    def reset(self) -> None:
        with self._lock:
            self._content = None
            self._path = None
            self._result = None


_state = AppState()


def get_state() -> AppState:
    return _state
