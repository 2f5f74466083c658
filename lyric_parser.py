import re
import logging
from typing import NamedTuple

from app_errors import MalformedTimestamp

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+", re.ASCII)
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class LyricEntry(NamedTuple):
    timestamp_ms: int
    text: str


class LyricTrack:
    """Immutable, time-sorted sequence of lyric entries."""

    __slots__ = ("_entries", "_timestamps", "_skipped")

    def __init__(self, entries=(), skipped=0):
        ordered = sorted(entries, key=lambda e: e.timestamp_ms)
        object.__setattr__(self, "_entries", tuple(ordered))
        object.__setattr__(self, "_timestamps", tuple(e.timestamp_ms for e in ordered))
        object.__setattr__(self, "_skipped", int(skipped))

    def __setattr__(self, name, value):
        raise AttributeError("LyricTrack is immutable")

    @property
    def entries(self):
        return self._entries

    @property
    def timestamps(self):
        return self._timestamps

    @property
    def skipped(self):
        return self._skipped

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def __bool__(self):
        return bool(self._entries)

    def __eq__(self, other):
        if isinstance(other, LyricTrack):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self):
        return hash(self._entries)

    def __repr__(self):
        return f"LyricTrack({len(self._entries)} entries, skipped={self._skipped})"


def _parse_field(value, tag, name):
    if not _DIGITS.fullmatch(value):
        raise MalformedTimestamp(tag, f"non-numeric {name}")
    return int(value)


def _parse_fraction(value, tag, normalize):
    if not _DIGITS.fullmatch(value):
        raise MalformedTimestamp(tag, "non-numeric fraction")
    # Literal mode keeps the raw integer: "04" -> 4 ms.
    if not normalize:
        return int(value)
    return int(value[:3].ljust(3, "0"))


def parse_timestamp(tag, normalize_fraction=False):
    """
    Parse one opening tag like "[01:22.04" (closing bracket already split off)
    into milliseconds.
    """
    if not tag.startswith("["):
        raise MalformedTimestamp(tag, "missing '['")

    minute_part, sep, rest = tag[1:].partition(":")
    if not sep or ":" in rest:
        raise MalformedTimestamp(tag, "expected one ':'")
    second_part, sep, fraction_part = rest.partition(".")
    if not sep or "." in fraction_part:
        raise MalformedTimestamp(tag, "expected one '.'")

    minutes = _parse_field(minute_part, tag, "minutes")
    seconds = _parse_field(second_part, tag, "seconds")
    fraction = _parse_fraction(fraction_part, tag, normalize_fraction)
    return minutes * 60000 + seconds * 1000 + fraction


def parse_line(line, normalize_fraction=False):
    """
    Split one line on ']' into its tags and trailing text.
    Returns (entries, skipped_tag_count).
    """
    segments = line.split("]")
    if len(segments) < 2:
        return [], 0

    text = segments[-1]
    entries = []
    skipped = 0
    for tag in segments[:-1]:
        try:
            ts = parse_timestamp(tag, normalize_fraction)
        except MalformedTimestamp as e:
            logger.debug("Skipping lyric tag: %s", e)
            skipped += 1
            continue
        entries.append(LyricEntry(ts, text))
    return entries, skipped


def parse_lyrics(raw_text, normalize_fraction=False):
    logger.debug("Parsing lyrics text. length=%s", len(raw_text) if raw_text else 0)
    if not raw_text:
        return LyricTrack()

    entries = []
    skipped = 0
    for line in _LINE_BREAK.split(raw_text):
        line_entries, line_skipped = parse_line(line, normalize_fraction)
        entries.extend(line_entries)
        skipped += line_skipped

    # sorted() is stable, so tags sharing a timestamp keep file order.
    track = LyricTrack(entries, skipped=skipped)
    if skipped:
        logger.info("Skipped %s malformed lyric tags", skipped)
    logger.debug("Lyrics parsed. entries=%s", len(track))
    return track
