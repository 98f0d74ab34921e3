"""
Text style values: anchor, justification and extrusion settings.
"""

import math
from enum import Enum
from typing import Hashable

from datatrees import datatree, dtfield


@datatree(frozen=True)
class Anchor:
    """Pivot point of the text bounding box, as fractions of its size.

    (0, 0) is the bottom-left corner of the box and (1, 1) the top-right.
    The named presets (Anchor.TOP_LEFT etc.) are plain Anchor values.
    """

    x: float = dtfield(default=0.5, doc="Horizontal pivot fraction in [0, 1].")
    y: float = dtfield(default=0.5, doc="Vertical pivot fraction in [0, 1].")

    def __post_init__(self):
        for name in ("x", "y"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Anchor {name} must be in [0, 1], got {value}")
            object.__setattr__(self, name, float(value))

    @classmethod
    def from_name(cls, name: str) -> "Anchor":
        """Returns the preset anchor for a name like 'top-left' or 'Center'."""
        key = name.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return ANCHOR_PRESETS[key]
        except KeyError:
            raise ValueError(
                f"Unknown anchor {name!r}, expected one of {sorted(ANCHOR_PRESETS)}"
            ) from None

    @property
    def name(self) -> str | None:
        """Preset name of this anchor or None for a custom pivot."""
        for key, preset in ANCHOR_PRESETS.items():
            if preset == self:
                return key
        return None


Anchor.TOP_LEFT = Anchor(0.0, 1.0)
Anchor.TOP_CENTER = Anchor(0.5, 1.0)
Anchor.TOP_RIGHT = Anchor(1.0, 1.0)
Anchor.CENTER_LEFT = Anchor(0.0, 0.5)
Anchor.CENTER = Anchor(0.5, 0.5)
Anchor.CENTER_RIGHT = Anchor(1.0, 0.5)
Anchor.BOTTOM_LEFT = Anchor(0.0, 0.0)
Anchor.BOTTOM_CENTER = Anchor(0.5, 0.0)
Anchor.BOTTOM_RIGHT = Anchor(1.0, 0.0)

ANCHOR_PRESETS = {
    "top_left": Anchor.TOP_LEFT,
    "top_center": Anchor.TOP_CENTER,
    "top_right": Anchor.TOP_RIGHT,
    "center_left": Anchor.CENTER_LEFT,
    "center": Anchor.CENTER,
    "center_right": Anchor.CENTER_RIGHT,
    "bottom_left": Anchor.BOTTOM_LEFT,
    "bottom_center": Anchor.BOTTOM_CENTER,
    "bottom_right": Anchor.BOTTOM_RIGHT,
}


class Justify(Enum):
    """Horizontal alignment of each line within a text block."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


MAX_SUBDIVISION = 255


@datatree(frozen=True)
class TextMeshStyle:
    """Extrusion and alignment settings for one text mesh."""

    depth: float = dtfield(default=0.1, doc="Extrusion depth along +Z, in em units.")
    subdivision: int = dtfield(default=20, doc="Line segments per outline curve.")
    anchor: Anchor = dtfield(default=Anchor.CENTER, doc="Pivot of the text bounding box.")
    justify: Justify = dtfield(default=Justify.LEFT, doc="Per line horizontal alignment.")

    def __post_init__(self):
        if not math.isfinite(self.depth) or self.depth < 0:
            raise ValueError(f"Invalid depth: {self.depth}")
        if isinstance(self.subdivision, bool) or not isinstance(self.subdivision, int):
            raise ValueError(f"subdivision must be an int, got {self.subdivision!r}")
        if not 1 <= self.subdivision <= MAX_SUBDIVISION:
            raise ValueError(
                f"subdivision must be in [1, {MAX_SUBDIVISION}], got {self.subdivision}"
            )
        if isinstance(self.justify, str):
            object.__setattr__(self, "justify", Justify(self.justify.lower()))
        if isinstance(self.anchor, str):
            object.__setattr__(self, "anchor", Anchor.from_name(self.anchor))


@datatree(frozen=True)
class TextMesh:
    """A text to lay out, the id of its font asset and its style."""

    text: str = dtfield(default="")
    font: Hashable = dtfield(default=None, doc="Stable id of the font asset.")
    style: TextMeshStyle = dtfield(default=TextMeshStyle())
    per_glyph: bool = dtfield(
        default=False, doc="Emit one placement per glyph instead of a merged mesh."
    )
