import os
import logging

from app_errors import LyricFileNotFound
from lyric_parser import parse_lyrics

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "gbk"
DEFAULT_FALLBACK_EXTENSION = ".txt"


def resolve_lyric_path(path, fallback_extension=DEFAULT_FALLBACK_EXTENSION):
    """Return path if it exists, else the same path with the fallback extension."""
    if os.path.isfile(path):
        return path

    root, _ext = os.path.splitext(path)
    fallback = root + fallback_extension
    if fallback != path and os.path.isfile(fallback):
        logger.debug("Lyric file %s missing, using fallback %s", path, fallback)
        return fallback

    raise LyricFileNotFound(path)


def read_lyric_text(path, encoding=DEFAULT_ENCODING):
    try:
        with open(path, "r", encoding=encoding) as f:
            return f.read()
    except FileNotFoundError as e:
        raise LyricFileNotFound(path) from e
    except (UnicodeError, LookupError) as e:
        logger.warning("Failed to decode lyric file %s as %s: %s", path, encoding, e)
        raise LyricFileNotFound(path, "not decodable") from e
    except OSError as e:
        logger.warning("Failed to read lyric file %s: %s", path, e)
        raise LyricFileNotFound(path, "not readable") from e


def load_lyric_file(
    path,
    encoding=DEFAULT_ENCODING,
    fallback_extension=DEFAULT_FALLBACK_EXTENSION,
    normalize_fraction=False,
):
    resolved = resolve_lyric_path(path, fallback_extension)
    text = read_lyric_text(resolved, encoding)
    logger.debug("Read lyric file %s. length=%s", resolved, len(text))
    return parse_lyrics(text, normalize_fraction=normalize_fraction)
