"""
Event dispatch for transaction lifecycle notifications.

Two flavours are provided:

- ``EventEmitter`` keeps every listener registered for an event and calls
  them in registration order. ``PendingTransaction`` uses it.
- ``CallbackTable`` keeps a single callback per event. The first callback
  registered for a name stays active; later registrations are ignored.
  ``ExplorerClient`` uses it for its client-wide callbacks.
"""
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

Callback = Callable[[Any], Any]


class TransactionEvent(str, Enum):
    """Lifecycle events emitted for a submitted transaction."""
    TRANSACTION_HASH = "transactionHash"
    RECEIPT = "receipt"
    ERROR = "error"


def _event_key(event: Union[str, TransactionEvent]) -> str:
    # listener dicts are keyed by plain str
    if isinstance(event, Enum):
        return event.value
    return event


class EventEmitter:
    """Multi-listener event emitter."""

    def __init__(self):
        self._listeners: Dict[str, List[Callback]] = {}

    def on(self, event: Union[str, TransactionEvent], callback: Callback) -> "EventEmitter":
        self._listeners.setdefault(_event_key(event), []).append(callback)
        return self

    def listeners(self, event: Union[str, TransactionEvent]) -> List[Callback]:
        return list(self._listeners.get(_event_key(event), []))

    def emit(self, event: Union[str, TransactionEvent], data: Any = None) -> None:
        for callback in self.listeners(event):
            callback(data)


class CallbackTable:
    """
    Single-subscriber-per-event callback table.

    The first callback registered for an event wins; registering another one
    for the same event is a no-op.
    """

    def __init__(self):
        self._callbacks: Dict[str, Callback] = {}

    def on(self, event: Union[str, TransactionEvent], callback: Callback) -> bool:
        """
        Register a callback for an event.

        Returns:
            True if the callback was stored, False if one was already registered
        """
        key = _event_key(event)
        if key in self._callbacks:
            logger.debug(f"Callback for '{key}' already registered, ignoring new one")
            return False
        self._callbacks[key] = callback
        return True

    def get(self, event: Union[str, TransactionEvent]) -> Optional[Callback]:
        return self._callbacks.get(_event_key(event))

    def emit(self, event: Union[str, TransactionEvent], data: Any = None) -> Any:
        """Invoke the registered callback, returning its result (None if absent)."""
        callback = self.get(event)
        if callback is None:
            return None
        return callback(data)

    def __contains__(self, event: Union[str, TransactionEvent]) -> bool:
        return _event_key(event) in self._callbacks
