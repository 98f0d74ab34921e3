"""
Font assets: raw font file bytes registered under stable ids.
"""

import itertools
import logging
import threading
from pathlib import Path
from typing import Hashable

from datatrees import datatree, dtfield

log = logging.getLogger(__name__)

FONT_EXTENSIONS = ("ttf", "otf")


def read_font_file(path: str | Path) -> bytes:
    """Reads a TrueType/OpenType font file.

    Raises:
        ValueError: The file extension is not a supported font extension.
        OSError: The file could not be read.
    """
    path = Path(path)
    extension = path.suffix.lower().lstrip(".")
    if extension not in FONT_EXTENSIONS:
        raise ValueError(f"Unsupported font file '{path}', expected one of {FONT_EXTENSIONS}")
    return path.read_bytes()


@datatree
class FontAsset:
    """A font asset. data is None until the asset has finished loading."""

    id: Hashable
    data: bytes | None = None
    source: str | None = dtfield(default=None, doc="Where the bytes came from, if known.")
    generation: int = dtfield(default=0, doc="Bumped every time data is replaced.")

    @property
    def is_loaded(self) -> bool:
        return self.data is not None


class FontAssets:
    """Registry of font assets. Ids are never reused."""

    def __init__(self):
        self._assets: dict[Hashable, FontAsset] = {}
        self._next_id = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, data: bytes | None = None, source: str | None = None) -> int:
        """Registers an asset, loaded if data is given. Returns its id."""
        with self._lock:
            font_id = next(self._next_id)
            self._assets[font_id] = FontAsset(id=font_id, data=data, source=source)
        return font_id

    def load(self, path: str | Path) -> int:
        """Reads a font file and registers it."""
        data = read_font_file(path)
        font_id = self.add(data, source=str(path))
        log.debug(f"Loaded font asset {font_id} from '{path}' ({len(data)} bytes)")
        return font_id

    def set_data(self, font_id: Hashable, data: bytes) -> FontAsset:
        """Marks an asset loaded, or reloaded with new bytes."""
        with self._lock:
            asset = self._assets[font_id]
            if asset.data is not None:
                asset.generation += 1
            asset.data = data
            return asset

    def remove(self, font_id: Hashable) -> FontAsset | None:
        with self._lock:
            return self._assets.pop(font_id, None)

    def get(self, font_id: Hashable) -> FontAsset | None:
        with self._lock:
            return self._assets.get(font_id)

    def ids(self) -> set[Hashable]:
        with self._lock:
            return set(self._assets)

    def __contains__(self, font_id: Hashable) -> bool:
        return self.get(font_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)
