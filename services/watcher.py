"""
Lockfile watcher.

Uses watchdog to monitor the directory holding a lockfile and reports
every new version of the file once it parses.
"""
import os
import time
import logging
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent
)

from core.errors import LockdiffError
from core.file_parser import parse_lockfile_file, ParsedLockfile
from config import settings

logger = logging.getLogger(__name__)


class LockfileHandler(FileSystemEventHandler):
    """
    Handles file system events for a single lockfile.

    npm rewrites the lockfile by renaming a temporary file over it, so moves
    onto the lockfile count as well as creations and modifications.
    """

    def __init__(
        self,
        lockfile_path: str,
        on_change: Callable[[ParsedLockfile], None],
        debounce: Optional[float] = None
    ):
        """
        Initialize handler.

        Args:
            lockfile_path: The lockfile to follow
            on_change: Callback with each new parsed version
            debounce: Seconds to wait before reading a changed file
        """
        self.lockfile_path = os.path.realpath(lockfile_path)
        self.on_change = on_change
        self.debounce = settings.WATCH_DEBOUNCE_SECONDS if debounce is None else debounce
        self._last_key: Optional[str] = None

    def on_created(self, event: FileCreatedEvent):
        self._handle(event, event.src_path)

    def on_modified(self, event: FileModifiedEvent):
        self._handle(event, event.src_path)

    def on_moved(self, event: FileMovedEvent):
        self._handle(event, event.dest_path)

    def _handle(self, event: FileSystemEvent, path):
        if event.is_directory:
            return
        if os.path.realpath(os.fsdecode(path)) != self.lockfile_path:
            return
        if self.debounce:
            time.sleep(self.debounce)
        self.process()

    def process(self) -> bool:
        """
        Parse the lockfile and report it if this version was not seen yet.

        Returns True when the callback was invoked.
        """
        try:
            stat = os.stat(self.lockfile_path)
        except OSError:
            return False

        file_key = f"{stat.st_mtime_ns}:{stat.st_size}"
        if file_key == self._last_key:
            return False

        try:
            parsed = parse_lockfile_file(self.lockfile_path)
        except LockdiffError as e:
            # Usually a half-written file; the next event will pick it up
            logger.warning(f"Skipping unreadable lockfile: {e}")
            return False

        self._last_key = file_key
        logger.info(f"Lockfile changed: {self.lockfile_path}")

        try:
            self.on_change(parsed)
        except Exception as e:
            logger.error(f"Error handling lockfile change {self.lockfile_path}: {e}")
        return True


class LockfileWatcher:
    """
    Watches a lockfile for rewrites.

    Usage:
        watcher = LockfileWatcher("package-lock.json", callback)
        watcher.start()
        # ... later
        watcher.stop()
    """

    def __init__(
        self,
        lockfile_path: str,
        on_change: Callable[[ParsedLockfile], None],
        debounce: Optional[float] = None
    ):
        self.lockfile_path = Path(lockfile_path).absolute()
        self.on_change = on_change
        self.debounce = debounce

        self._observer: Optional[Observer] = None
        self._handler: Optional[LockfileHandler] = None
        self._running = False

    def start(self):
        """Start watching the lockfile's directory."""
        if self._running:
            logger.warning("Watcher already running")
            return

        watch_dir = self.lockfile_path.parent
        if not watch_dir.exists():
            logger.error(f"Watch path does not exist: {watch_dir}")
            raise FileNotFoundError(f"Watch path not found: {watch_dir}")

        logger.info(f"Starting lockfile watcher on: {self.lockfile_path}")

        self._handler = LockfileHandler(str(self.lockfile_path), self.on_change, self.debounce)
        self._observer = Observer()
        self._observer.schedule(self._handler, str(watch_dir), recursive=False)
        self._observer.start()
        self._running = True

    def stop(self):
        """Stop watching."""
        if not self._running:
            return

        logger.info("Stopping lockfile watcher")

        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

        self._handler = None
        self._running = False

    def is_running(self) -> bool:
        return self._running
