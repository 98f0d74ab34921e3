"""
Interface of the glyph outline provider.

A FontInstance is a parsed, read-only font. The layout engine only talks to
fonts through this interface; textmesh.fonttools_provider supplies the
implementation backed by fontTools.
"""

from abc import ABC, abstractmethod

import numpy as np
from datatrees import datatree, dtfield


@datatree(frozen=True)
class FontMetrics:
    """Font wide vertical metrics, in the same unit as advances and depth."""

    ascender: float
    descender: float  # Negative below the baseline.
    line_gap: float = 0.0

    @property
    def line_height(self) -> float:
        """Distance between the baselines of consecutive lines."""
        return self.ascender - self.descender + self.line_gap

    @property
    def space_fallback(self) -> float:
        """Advance used for whitespace characters the font does not map."""
        return 0.25 * (self.ascender - self.descender)


@datatree(frozen=True)
class GlyphMetrics:
    """Advance and 2D outline extents of a single glyph."""

    advance: float
    bounds: tuple[tuple[float, float], tuple[float, float]] | None = None


def _empty_points() -> np.ndarray:
    return np.zeros((0, 3), dtype=np.float32)


@datatree
class GlyphFragment:
    """Geometry of one character with indices local to the fragment."""

    vertices: np.ndarray = dtfield(default_factory=_empty_points)
    normals: np.ndarray = dtfield(default_factory=_empty_points)
    indices: np.ndarray = dtfield(default_factory=lambda: np.zeros((0,), dtype=np.uint32))
    advance: float = 0.0

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float32).reshape(-1, 3)
        self.normals = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        self.indices = np.asarray(self.indices, dtype=np.uint32).reshape(-1)
        if len(self.normals) != len(self.vertices):
            raise ValueError(
                f"Fragment has {len(self.vertices)} vertices but {len(self.normals)} normals"
            )
        if len(self.indices) % 3:
            raise ValueError(f"Fragment index count {len(self.indices)} is not a multiple of 3")
        if len(self.indices) and int(self.indices.max()) >= len(self.vertices):
            raise ValueError("Fragment index out of range")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0


class FontInstance(ABC):
    """A parsed font. Implementations must be immutable once constructed so a
    single instance can be shared by any number of layout passes."""

    data: bytes = b""

    @abstractmethod
    def metrics(self) -> FontMetrics:
        """Returns the font wide ascender, descender and line gap."""

    @abstractmethod
    def has_glyph(self, char: str) -> bool:
        """True if the font maps the character to a glyph."""

    @abstractmethod
    def advance(self, char: str) -> float | None:
        """Horizontal advance of the character or None if it is unmapped."""

    @abstractmethod
    def glyph_metrics(self, char: str) -> GlyphMetrics:
        """Metrics of the character's glyph. Raises GlyphMissing."""

    @abstractmethod
    def outline(self, char: str, subdivisions: int, depth: float) -> GlyphFragment:
        """Extruded geometry of the character.

        Raises GlyphMissing if the font does not map the character and
        OutlineError if the outline cannot be converted.
        """
