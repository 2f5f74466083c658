from __future__ import annotations


class LyricsError(Exception):
    pass


class LyricFileNotFound(LyricsError):
    """No readable lyric file at the requested path or its fallback."""

    def __init__(self, path, reason="not found"):
        self.path = path
        self.reason = reason
        super().__init__(f"Lyric file {reason}: {path}")


class MalformedTimestamp(LyricsError, ValueError):
    def __init__(self, tag, reason="invalid timestamp"):
        self.tag = tag
        self.reason = reason
        super().__init__(f"{reason}: {tag!r}")


def classify_exception(exc: Exception) -> str:
    if isinstance(exc, (LyricFileNotFound, FileNotFoundError)):
        return "not_found"
    if isinstance(exc, UnicodeError):
        return "decode"
    if isinstance(exc, MalformedTimestamp):
        return "parse"
    if isinstance(exc, OSError):
        return "io"

    text = str(exc).lower()
    if any(k in text for k in ("not found", "no such", "404")):
        return "not_found"
    if any(k in text for k in ("codec", "decode", "encoding")):
        return "decode"
    if any(k in text for k in ("timestamp", "parse", "invalid")):
        return "parse"
    if any(k in text for k in ("permission", "denied", "read error", "i/o")):
        return "io"
    return "unknown"


def user_message(kind: str, context: str = "lyrics") -> str:
    if context == "lyrics":
        mapping = {
            "not_found": "No lyrics available for this track.",
            "empty": "This lyrics file has no timed lines.",
            "decode": "Lyrics file encoding is not supported.",
            "parse": "Lyrics format is not supported.",
            "io": "Lyrics file could not be read.",
            "unknown": "Lyrics unavailable right now.",
        }
        return mapping.get(kind, mapping["unknown"])

    return "Operation failed. Please retry."
