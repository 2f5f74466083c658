from threading import Lock, Thread
import logging

from app_errors import LyricFileNotFound, classify_exception
from lyric_source import DEFAULT_ENCODING, DEFAULT_FALLBACK_EXTENSION, load_lyric_file

logger = logging.getLogger(__name__)


def glib_dispatcher():
    """
    Build a dispatch function that runs callbacks on the GLib main loop, the
    way GTK hosts expect UI updates. Raises ImportError without PyGObject.
    """
    from gi.repository import GLib

    def dispatch(callback, *args):
        def _run():
            callback(*args)
            return False

        GLib.idle_add(_run)

    return dispatch


class LyricLoader:
    """
    Parses lyric files on a background thread and hands the result back
    through `dispatch`. Only the newest request is delivered; older workers
    finish but their results are dropped.
    """

    def __init__(
        self,
        dispatch=None,
        encoding=DEFAULT_ENCODING,
        fallback_extension=DEFAULT_FALLBACK_EXTENSION,
        normalize_fraction=False,
    ):
        self.dispatch = dispatch or glib_dispatcher()
        self.encoding = encoding
        self.fallback_extension = fallback_extension
        self.normalize_fraction = normalize_fraction
        self._request_id = 0
        self._lock = Lock()

    @classmethod
    def from_settings(cls, settings, dispatch=None):
        return cls(
            dispatch=dispatch,
            encoding=settings.get("lyrics_encoding", DEFAULT_ENCODING),
            fallback_extension=settings.get("lyrics_fallback_extension", DEFAULT_FALLBACK_EXTENSION),
            normalize_fraction=bool(settings.get("lyrics_normalize_fraction", False)),
        )

    @property
    def current_request(self):
        return self._request_id

    def _next_request_id(self):
        with self._lock:
            self._request_id += 1
            return self._request_id

    def _is_current(self, request_id):
        return request_id == self._request_id

    def cancel(self):
        self._next_request_id()

    def request(self, path, on_loaded, on_not_found):
        request_id = self._next_request_id()
        logger.debug("Lyric load requested. id=%s path=%s", request_id, path)
        Thread(
            target=self._run,
            args=(request_id, path, on_loaded, on_not_found),
            daemon=True,
        ).start()
        return request_id

    def _deliver(self, request_id, callback, *args):
        def apply():
            if not self._is_current(request_id):
                logger.debug("Dropping stale lyric result. id=%s", request_id)
                return
            callback(*args)

        try:
            self.dispatch(apply)
        except Exception as e:
            logger.exception("Lyric result dispatch failed. id=%s: %s", request_id, e)

    def _run(self, request_id, path, on_loaded, on_not_found):
        try:
            track = load_lyric_file(
                path,
                encoding=self.encoding,
                fallback_extension=self.fallback_extension,
                normalize_fraction=self.normalize_fraction,
            )
        except LyricFileNotFound as e:
            logger.info("No lyrics: %s", e)
            self._deliver(request_id, on_not_found)
            return
        except Exception as e:
            kind = classify_exception(e)
            logger.exception("Lyrics load error [%s]: %s", kind, e)
            self._deliver(request_id, on_not_found)
            return

        logger.debug("Lyrics loaded. id=%s entries=%s", request_id, len(track))
        self._deliver(request_id, on_loaded, track)
