"""
Observable store capability.
Any class can mix in `Store` to get subscribe/unsubscribe/emit_change. Each store
instance owns exactly one event emitter, created on first use.
"""
import logging
from threading import Lock
from typing import Callable, Optional

from Flux.Events.event_emitter import DefaultEventEmitter, EventEmitter, StoreListenerToken

logger = logging.getLogger(__name__)

__all__ = ("Store", "StoreListenerToken")


class Store:
    """Mixin giving instances change subscriptions.

    The emitter is kept in the instance attribute `_event_emitter` and listeners hold a
    weak reference to the store. `Store` itself declares no `__slots__`, so subclasses
    always get `__dict__` and `__weakref__`, including ones that declare their own
    `__slots__` or use `@dataclass(frozen=True)` / `@dataclass(slots=True)`.
    """

    # Subclasses may swap in another EventEmitter implementation (or a zero-arg factory).
    event_emitter_factory: Callable[[], EventEmitter] = DefaultEventEmitter

    _event_emitter_lock: Lock = Lock()

    def _owned_event_emitter(self) -> Optional[EventEmitter]:
        return self.__dict__.get("_event_emitter")

    @property
    def event_emitter(self) -> EventEmitter:
        emitter = self._owned_event_emitter()
        if emitter is None:
            with Store._event_emitter_lock:
                emitter = self._owned_event_emitter()
                if emitter is None:
                    emitter = type(self).event_emitter_factory()
                    # Bypasses frozen dataclass __setattr__.
                    self.__dict__["_event_emitter"] = emitter
                    logger.debug("Created %s for %s", type(emitter).__name__, type(self).__name__)
        return emitter

    def subscribe(self, handler: Callable[[], None]) -> StoreListenerToken:
        return self.event_emitter.subscribe(self, handler)

    def unsubscribe(self, listener_token: Optional[StoreListenerToken]) -> None:
        self.event_emitter.unsubscribe(self, listener_token)

    def unsubscribe_all(self) -> None:
        self.event_emitter.unsubscribe_all(self)

    def emit_change(self) -> None:
        self.event_emitter.emit_change(self)

    def listener_count(self) -> int:
        return self.event_emitter.listener_count(self)

    def dispose(self) -> None:
        """Teardown hook: drop every listener so nothing fires for this store again."""
        emitter = self._owned_event_emitter()
        if emitter is not None:
            emitter.unsubscribe_all(self)
