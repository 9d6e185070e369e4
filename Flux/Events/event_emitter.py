"""
Store change notification registry.
Listeners are kept as (token -> EventListener) and filtered by store identity.
Thread-safe: the mapping is guarded by a lock and handlers are called outside it.
"""
import logging
from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Any, Callable, Deque, Dict, Optional

from Flux.Model.EventListener import EventListener
from Flux.Utility.settings import (
    ERROR_POLICY_LOG,
    get_listener_error_policy,
    normalize_error_policy,
)
from Flux.Utility.tokens import new_listener_token

logger = logging.getLogger(__name__)

StoreListenerToken = str


class EventEmitter(ABC):
    """Registry interface a store forwards its subscribe/unsubscribe/emit calls to."""

    @abstractmethod
    def subscribe(self, store: Any, handler: Callable[[], None]) -> StoreListenerToken:
        """Register `handler` for `store` and return a fresh listener token."""
        pass

    @abstractmethod
    def unsubscribe(self, store: Any, listener_token: Optional[StoreListenerToken]) -> None:
        """Remove the listener registered under `listener_token`; unknown tokens are ignored."""
        pass

    @abstractmethod
    def unsubscribe_all(self, store: Any) -> None:
        """Remove every listener owned by `store`."""
        pass

    @abstractmethod
    def emit_change(self, store: Any) -> None:
        """Invoke every handler subscribed to `store`."""
        pass

    @abstractmethod
    def listener_count(self, store: Any = None) -> int:
        """Number of listeners owned by `store`, or of all listeners when `store` is None."""
        pass


class DefaultEventEmitter(EventEmitter):
    def __init__(self, error_policy: Optional[str] = None):
        self._listeners: Dict[StoreListenerToken, EventListener] = {}
        self._lock = Lock()
        # Tokens whose store has been garbage collected. Weakref callbacks may run
        # while this thread already holds the lock, so they only queue the token.
        self._released: Deque[StoreListenerToken] = deque()
        if error_policy is None:
            self.error_policy = get_listener_error_policy()
        else:
            self.error_policy = normalize_error_policy(error_policy)

    def __len__(self) -> int:
        with self._lock:
            self._prune_released()
            return len(self._listeners)

    def __contains__(self, listener_token: object) -> bool:
        with self._lock:
            self._prune_released()
            return listener_token in self._listeners

    def _prune_released(self) -> None:
        # Caller holds self._lock.
        while self._released:
            self._listeners.pop(self._released.popleft(), None)

    def subscribe(self, store: Any, handler: Callable[[], None]) -> StoreListenerToken:
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        with self._lock:
            self._prune_released()
            token = new_listener_token()
            while token in self._listeners:
                token = new_listener_token()
            released = self._released
            listener = EventListener.create(store, handler, lambda _ref, t=token: released.append(t))
            self._listeners[token] = listener
        logger.debug("Subscribed listener %s to %s", token, type(store).__name__)
        return token

    def unsubscribe(self, store: Any, listener_token: Optional[StoreListenerToken]) -> None:
        # Removal is by key only; the owning store is not checked.
        if listener_token is None:
            return
        with self._lock:
            self._prune_released()
            removed = self._listeners.pop(listener_token, None)
        if removed is not None:
            logger.debug("Unsubscribed listener %s", listener_token)

    def unsubscribe_all(self, store: Any) -> None:
        with self._lock:
            self._prune_released()
            tokens = [token for token, listener in self._listeners.items() if listener.belongs_to(store)]
            for token in tokens:
                del self._listeners[token]
        logger.debug("Unsubscribed %d listener(s) from %s", len(tokens), type(store).__name__)

    def emit_change(self, store: Any) -> None:
        with self._lock:
            self._prune_released()
            handlers = [listener.handler for listener in self._listeners.values() if listener.belongs_to(store)]
        logger.debug("Emitting change from %s to %d listener(s)", type(store).__name__, len(handlers))
        for handler in handlers:
            if self.error_policy != ERROR_POLICY_LOG:
                handler()
                continue
            try:
                handler()
            except Exception:
                logger.exception("Listener %r failed while handling change from %s", handler, type(store).__name__)

    def listener_count(self, store: Any = None) -> int:
        with self._lock:
            self._prune_released()
            if store is None:
                return len(self._listeners)
            return sum(1 for listener in self._listeners.values() if listener.belongs_to(store))

    def clear(self) -> None:
        with self._lock:
            self._released.clear()
            count = len(self._listeners)
            self._listeners.clear()
        if count:
            logger.debug("Discarded %d listener(s)", count)
