"""Live reload module."""

from reloadserve.reload.registry import SubscriberRegistry
from reloadserve.reload.debounce import Debouncer
from reloadserve.reload.watcher import ChangeWatcher, UPDATE_FRAME

__all__ = [
    "SubscriberRegistry",
    "Debouncer",
    "ChangeWatcher",
    "UPDATE_FRAME",
]
