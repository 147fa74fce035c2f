#
# PROJECT: framefit-viewer
# MODULE: framefit_viewer/loader.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-18
#
"""
Background loading of models and fonts.

A ``LoadTask`` fetches and builds geometry on a worker thread.  The render
loop polls it once per frame; the built mesh is only handed over after the
whole job has finished, so the caller never sees partial geometry and all
camera/scene mutation stays on the render thread.
"""

import concurrent.futures
import logging
import threading
from urllib.parse import urlparse
from urllib.request import urlopen

from .errors import LoadCancelled, LoadError
from .mesh import Mesh
from .text import DEFAULT_TEXT, TypefaceFont, build_text_mesh

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
URL_SCHEMES = ('http', 'https', 'file')


def is_url(source) -> bool:
    return urlparse(str(source)).scheme in URL_SCHEMES


def _read_chunks(stream, total, source, cancel_event, chunk_size):
    chunks = []
    loaded = 0
    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise LoadCancelled(f"load of {source} cancelled")
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
        loaded += len(chunk)
        if total:
            logger.debug("%s: %.0f%% loaded", source, loaded / total * 100)
    return b''.join(chunks)


def fetch_bytes(source, cancel_event=None, chunk_size: int = CHUNK_SIZE,
                timeout: float = 30.0) -> bytes:
    """Read a local path or an http(s)/file URL into memory."""
    try:
        if is_url(source):
            with urlopen(str(source), timeout=timeout) as response:
                total = int(response.headers.get('Content-Length') or 0)
                data = _read_chunks(response, total, source, cancel_event, chunk_size)
        else:
            with open(source, 'rb') as f:
                data = _read_chunks(f, 0, source, cancel_event, chunk_size)
    except OSError as e:
        # URLError and HTTPError are OSErrors too
        raise LoadError(f"could not fetch {source}: {e}") from e
    logger.info("Fetched %s (%d bytes)", source, len(data))
    return data


class LoadTask:
    """
    One cancellable background load.

    ``job`` is called on the worker as ``job(cancel_event)`` and returns the
    built object.  ``poll()`` returns that object exactly once, on the first
    call after a successful finish; failures end up in ``error``.
    """

    def __init__(self, description: str, job, executor=None):
        self.description = description
        self.result = None
        self.error = None
        self._cancel_event = threading.Event()
        self._consumed = False
        self._own_executor = executor is None
        if executor is None:
            executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=1, thread_name_prefix='framefit-load')
        self._executor = executor
        self._future = executor.submit(job, self._cancel_event)
        logger.info("Loading %s", description)

    def __repr__(self):
        return f"LoadTask({self.description!r}, {self.status})"

    @property
    def status(self) -> str:
        if self.error is not None:
            return 'cancelled' if isinstance(self.error, LoadCancelled) else 'failed'
        if self.result is not None:
            return 'ready'
        return 'loading'

    def cancel(self):
        """Stop the load; a running fetch gives up at its next chunk."""
        self._cancel_event.set()
        self._future.cancel()

    def poll(self):
        """Return the built object once it is ready, otherwise None."""
        if self._consumed or not self._future.done():
            return None
        self._consumed = True
        if self._own_executor:
            self._executor.shutdown(wait=False)

        if self._future.cancelled():
            self.error = LoadCancelled(f"load of {self.description} cancelled")
            logger.info("%s", self.error)
            return None

        exc = self._future.exception()
        if isinstance(exc, LoadError):
            self.error = exc
            if isinstance(exc, LoadCancelled):
                logger.info("%s", exc)
            else:
                logger.error("Failed to load %s: %s", self.description, exc)
            return None
        if exc is not None:
            raise exc

        self.result = self._future.result()
        logger.info("Loaded %s", self.description)
        return self.result

    def wait(self, timeout=None):
        """Block until the job finishes (or ``timeout`` passes), then poll."""
        concurrent.futures.wait([self._future], timeout=timeout)
        return self.poll()


def load_model(source, executor=None) -> LoadTask:
    """Fetch and parse an OBJ model from a path or URL."""
    def job(cancel_event):
        return Mesh.from_bytes(fetch_bytes(source, cancel_event))
    return LoadTask(f"model {source}", job, executor)


def load_text(text: str = DEFAULT_TEXT, font_source=None, size: float = 5.0,
              depth: float = 0.5, curve_segments: int = 12, executor=None) -> LoadTask:
    """Build text geometry, fetching a typeface JSON font first if given."""
    def job(cancel_event):
        font = None
        if font_source:
            font = TypefaceFont.from_json(fetch_bytes(font_source, cancel_event))
        return build_text_mesh(text, font, size, depth, curve_segments)
    return LoadTask(f"text {text!r}", job, executor)
