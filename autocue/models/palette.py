"""Hot-cue slot letters and default colors (Rekordbox defaults)."""
from dataclasses import dataclass
from typing import Optional, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class CuePalette:
    """Static slot table: slot index -> letter and slot index -> RGB."""
    letters: Tuple[str, ...]
    colors: Tuple[RGB, ...]

    def __post_init__(self) -> None:
        if len(self.letters) != len(self.colors):
            raise ValueError("palette needs one color per slot letter")

    @property
    def slot_count(self) -> int:
        return len(self.letters)

    def slot_for_letter(self, letter: str) -> Optional[int]:
        """Slot number for a hot-cue letter (A=0), or None if out of range."""
        letter = letter.upper()
        if letter not in self.letters:
            return None
        return self.letters.index(letter)

    def letter_for_slot(self, slot: int) -> Optional[str]:
        if 0 <= slot < len(self.letters):
            return self.letters[slot]
        return None

    def color_for_slot(self, slot: int) -> Optional[RGB]:
        if 0 <= slot < len(self.colors):
            return self.colors[slot]
        return None


DEFAULT_PALETTE = CuePalette(
    letters=("A", "B", "C", "D", "E", "F", "G", "H"),
    colors=(
        (255, 55, 111),   # red
        (69, 172, 219),   # blue
        (125, 193, 61),   # green
        (237, 135, 0),    # orange
        (189, 94, 235),   # purple
        (32, 218, 181),   # turquoise
        (255, 204, 0),    # yellow
        (226, 82, 153),   # pink
    ),
)
