"""
Filesystem watcher that notifies reload subscribers.
Uses watchdog for recursive change events.
"""

from pathlib import Path
from typing import Callable, Optional
import logging
import threading
import time

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.utils import BaseThread

from reloadserve.reload.debounce import Debouncer
from reloadserve.reload.registry import SubscriberRegistry

logger = logging.getLogger(__name__)


UPDATE_FRAME = b"data: update\n\n"

# Read-only accesses, including the server reading the files it serves
IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


def watch_path_for(root: Path) -> Path:
    """Directory to watch for root; a single file is watched through its parent."""
    return root.parent if root.is_file() else root


def install_thread_error_logger() -> Callable:
    """
    Route uncaught errors in watchdog's observer and emitter threads to the
    log. Other threads keep the previous hook. Returns the previous hook.
    """
    previous = threading.excepthook

    def hook(args) -> None:
        if isinstance(args.thread, BaseThread):
            logger.error(
                f"Watcher thread {args.thread.name} failed, live reload may be unavailable",
                exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
            )
        else:
            previous(args)

    threading.excepthook = hook
    return previous


class ChangeEventHandler(FileSystemEventHandler):
    """Forwards relevant filesystem events to a debouncer."""

    def __init__(self, debouncer: Debouncer):
        super().__init__()
        self._debouncer = debouncer

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return
        try:
            self._debouncer.trigger()
        except Exception:
            logger.exception(f"Error handling filesystem event: {event!r}")


class ChangeWatcher:
    """
    Watches the served tree and pushes an update frame to every subscriber
    after each debounced burst of changes.
    """

    def __init__(
        self,
        root: Path,
        registry: SubscriberRegistry,
        debounce: float = 0.5,
        observer_factory: Callable[[], BaseObserver] = Observer,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.path = watch_path_for(root)
        self._registry = registry
        self._observer_factory = observer_factory
        self._observer: Optional[BaseObserver] = None
        self._previous_excepthook: Optional[Callable] = None
        self.debouncer = Debouncer(debounce, self.notify, clock=clock)

    def notify(self) -> int:
        """Broadcast an update to all subscribers. Returns how many received it."""
        logger.info("Files changed, reloading")
        delivered = self._registry.broadcast(UPDATE_FRAME)
        logger.debug(f"Update delivered to {delivered} subscriber(s)")
        return delivered

    def start(self) -> None:
        """
        Start watching.

        Raises OSError when the watch cannot be set up, e.g. the path does
        not exist.
        """
        if not self.path.is_dir():
            raise FileNotFoundError(f"Cannot watch {self.path}: not a directory")

        self.debouncer.start()
        self._previous_excepthook = install_thread_error_logger()
        observer = self._observer_factory()
        try:
            observer.schedule(ChangeEventHandler(self.debouncer), str(self.path), recursive=True)
            observer.start()
        except Exception:
            self._restore_excepthook()
            self.debouncer.stop()
            raise
        self._observer = observer
        logger.info(f"Watching {self.path} for changes")

    def stop(self) -> None:
        """Stop the observer and debounce timer."""
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)
        self.debouncer.stop(timeout=5)
        self._restore_excepthook()

    def _restore_excepthook(self) -> None:
        previous, self._previous_excepthook = self._previous_excepthook, None
        if previous is not None:
            threading.excepthook = previous
