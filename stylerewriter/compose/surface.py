from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, TypeVar

from .focus import resolve
from .page import EditableRegion, HostDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")

SubscribeFn = Callable[[Callable[[], None]], Callable[[], None]]


class SurfaceRegistry(Generic[T]):
    """Single instances of UI resources, keyed by a stable identifier."""

    def __init__(self) -> None:
        self._items: dict[str, T] = {}
        self._lock = threading.Lock()

    def ensure(self, key: str, factory: Callable[[], T]) -> T:
        with self._lock:
            existing = self._items.get(key)
            if existing is not None:
                return existing
            created = factory()
            self._items[key] = created
            return created

    def get(self, key: str) -> T | None:
        with self._lock:
            return self._items.get(key)

    def release(self, key: str) -> bool:
        with self._lock:
            item = self._items.pop(key, None)
        if item is None:
            return False
        close = getattr(item, "close", None)
        if callable(close):
            close()
        return True


class ComposeWatch:
    """Re-resolves the active compose region whenever the host page changes.

    ``subscribe`` is the host's change-notification capability: it takes a
    callback and returns an unsubscribe function.
    """

    def __init__(
        self,
        document: HostDocument,
        subscribe: SubscribeFn,
        on_change: Callable[[EditableRegion | None], None],
    ) -> None:
        self._document = document
        self._on_change = on_change
        self._current = None
        self._cancelled = False
        self._unsubscribe = subscribe(self._handle_mutation)

    @property
    def current(self) -> EditableRegion | None:
        return self._current

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._unsubscribe()

    def __enter__(self) -> "ComposeWatch":
        return self

    def __exit__(self, *_exc) -> None:
        self.cancel()

    def _handle_mutation(self) -> None:
        if self._cancelled:
            return
        try:
            region = resolve(self._document)
        except Exception as exc:
            logger.debug("Compose box lookup failed during page change: %s", exc)
            return
        previous = self._current.element if self._current is not None else None
        current = region.element if region is not None else None
        if previous is current:
            return
        self._current = region
        logger.debug("Active compose region changed")
        self._on_change(region)
