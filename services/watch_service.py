import asyncio
import logging
import os

from watchdog.events import (EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED,
                             EVENT_TYPE_MOVED, FileSystemEventHandler)
from watchdog.observers import Observer

from services.live_reload_service import ConnectionPool

logger = logging.getLogger(__name__)

# Opened/closed events fire when we read the file ourselves and must not trigger a reload
CHANGE_EVENT_TYPES = {EVENT_TYPE_MODIFIED, EVENT_TYPE_CREATED, EVENT_TYPE_MOVED, EVENT_TYPE_DELETED}


class PathChangeHandler(FileSystemEventHandler):
    """Forwards change events for a single file out of its parent directory's watch."""

    def __init__(self, path: str, on_change):
        super().__init__()
        self.path = path
        self.on_change = on_change

    def matches(self, event) -> bool:
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return False
        paths = [event.src_path, getattr(event, 'dest_path', '')]
        return any(os.fsdecode(p) == self.path for p in paths if p)

    def on_any_event(self, event):
        if self.matches(event):
            self.on_change(self.path)


class WatchService:
    def __init__(self, pool: ConnectionPool, observer=None, loop: asyncio.AbstractEventLoop = None):
        self.pool = pool
        self.observer = observer if observer is not None else Observer()
        self.watched_paths: set[str] = set()
        self._loop = loop

    def start(self):
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()

    def is_watched(self, path: str) -> bool:
        return os.path.abspath(path) in self.watched_paths

    def watch(self, path: str) -> bool:
        """
        Install a change watch for `path` unless one exists already.
        Must be called from the event loop. Returns True if a new watch was installed.
        """
        path = os.path.abspath(path)
        if path in self.watched_paths:
            return False
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        self.watched_paths.add(path)
        handler = PathChangeHandler(path, self._on_change_threadsafe)
        try:
            self.observer.schedule(handler, os.path.dirname(path), recursive=False)
        except OSError as e:
            # Let a later request retry the watch
            self.watched_paths.discard(path)
            logger.error("Could not watch %s: %s", path, e)
            return False
        logger.debug("Watching %s", path)
        return True

    def _on_change_threadsafe(self, path: str):
        # Called on the observer thread
        try:
            self._loop.call_soon_threadsafe(self.notify_change, path)
        except RuntimeError as e:
            # event loop already closed during shutdown
            logger.debug("Dropped change event for %s: %s", path, e)

    def notify_change(self, path: str):
        logger.info("File changed: %s", path)
        self.pool.invalidate()
