"""
Host side driver for text meshes.

Recomputes a text mesh only when its text, font, style or output mode
changed, or when its font asset was (re)loaded. A text whose font has not
loaded yet is deferred, not failed, and retried on the next update. A text
whose font bytes do not parse is emptied until the asset is reloaded. The font
cache is swept against the live asset ids on a separate cadence.
"""

import logging
from enum import Enum
from typing import Hashable, Mapping

from textmesh.asset import FontAssets
from textmesh.assembler import LayoutResult
from textmesh.engine import layout_text
from textmesh.errors import FontNotReady, FontParseError
from textmesh.font_cache import FontInstanceCache
from textmesh.provider import FontInstance
from textmesh.style import TextMesh

log = logging.getLogger(__name__)


class FontStatus(Enum):
    NOT_READY = "not_ready"
    READY = "ready"
    FAILED = "failed"


class TextMeshSystem:
    """Keeps layout results of text meshes up to date."""

    def __init__(self, assets: FontAssets, cache: FontInstanceCache | None = None):
        self.assets = assets
        self.cache = cache if cache is not None else FontInstanceCache()
        self._computed: dict[Hashable, tuple] = {}
        self._generations: dict[Hashable, int] = {}

    def resolve_font(self, font_id: Hashable) -> FontInstance:
        """The parsed font for an asset id.

        Raises:
            FontNotReady: The asset is unknown or still loading.
            FontParseError: The asset's bytes are not a font.
        """
        asset = self.assets.get(font_id)
        if asset is None or not asset.is_loaded:
            raise FontNotReady(font_id)
        if self._generations.get(font_id, asset.generation) != asset.generation:
            log.info(f"Font asset {font_id!r} was reloaded, evicting cached font")
            self.cache.evict(font_id)
        self._generations[font_id] = asset.generation
        return self.cache.get_or_parse(font_id, asset.data)

    def font_status(self, font_id: Hashable) -> FontStatus:
        try:
            self.resolve_font(font_id)
        except FontNotReady:
            return FontStatus.NOT_READY
        except FontParseError:
            return FontStatus.FAILED
        return FontStatus.READY

    def compute(self, text_mesh: TextMesh) -> LayoutResult | None:
        """Runs one layout pass.

        Returns None while the font is still loading. A font whose bytes do
        not parse yields an empty result, so the text stays empty until the
        asset is corrected.
        """
        try:
            font = self.resolve_font(text_mesh.font)
        except FontNotReady:
            log.debug(f"Font {text_mesh.font!r} not loaded, deferring {text_mesh.text!r}")
            return None
        except FontParseError:
            return LayoutResult(per_glyph=text_mesh.per_glyph)
        return layout_text(text_mesh.text, font, text_mesh.style, per_glyph=text_mesh.per_glyph)

    def _key(self, text_mesh: TextMesh) -> tuple:
        asset = self.assets.get(text_mesh.font)
        generation = asset.generation if asset is not None else None
        return (text_mesh.text, text_mesh.font, text_mesh.style, text_mesh.per_glyph, generation)

    def is_dirty(self, key: Hashable, text_mesh: TextMesh) -> bool:
        return self._computed.get(key) != self._key(text_mesh)

    def update(self, meshes: Mapping[Hashable, TextMesh]) -> dict[Hashable, LayoutResult]:
        """Lays out every changed or not yet computed text mesh.

        Returns:
            The new results keyed like meshes. Unchanged and deferred entries
            are not included; entries whose font failed to parse map to an
            empty result.
        """
        results = {}
        for key, text_mesh in meshes.items():
            if not self.is_dirty(key, text_mesh):
                continue
            result = self.compute(text_mesh)
            if result is None:
                continue
            self._computed[key] = self._key(text_mesh)
            results[key] = result
        return results

    def forget(self, key: Hashable) -> None:
        """Drops bookkeeping for a text mesh that no longer exists."""
        self._computed.pop(key, None)

    def cleanup_font_cache(self) -> list[Hashable]:
        """Sweeps cached fonts whose assets are gone."""
        live_ids = self.assets.ids()
        for font_id in [f for f in self._generations if f not in live_ids]:
            del self._generations[font_id]
        return self.cache.sweep(live_ids)
