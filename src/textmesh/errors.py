"""
Exceptions raised by textmesh.

Font level failures (FontNotReady, FontParseError) are reported to the host.
Character level failures (GlyphMissing, OutlineError) are absorbed by the
layout engine and never abort a whole text.
"""


class TextMeshException(Exception):
    """Base exception functionality"""


class FontNotReady(TextMeshException):
    """The font asset has not been resolved to bytes yet."""

    def __init__(self, font_id):
        super().__init__(f"Font asset {font_id!r} is not loaded yet")
        self.font_id = font_id


class FontParseError(TextMeshException):
    """Font bytes are present but could not be parsed."""

    def __init__(self, reason: str, font_id=None):
        if font_id is None:
            message = f"Could not parse font: {reason}"
        else:
            message = f"Could not parse font {font_id!r}: {reason}"
        super().__init__(message)
        self.reason = reason
        self.font_id = font_id

    def with_font_id(self, font_id) -> "FontParseError":
        return FontParseError(self.reason, font_id)


class GlyphMissing(TextMeshException):
    """The character has no glyph in the font."""

    def __init__(self, char: str):
        super().__init__(f"No glyph for character {char!r}")
        self.char = char


class OutlineError(TextMeshException):
    """The glyph exists but its outline could not be turned into geometry."""

    def __init__(self, char: str, reason: str):
        super().__init__(f"Failed to build outline for {char!r}: {reason}")
        self.char = char
        self.reason = reason
