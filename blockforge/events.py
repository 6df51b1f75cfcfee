import logging
import threading
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """synchronous publish/subscribe hub; listeners run before emit returns"""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event_name: str, listener: Listener) -> None:
        with self._lock:
            self._listeners[event_name].append(listener)

    def off(self, event_name: str, listener: Listener) -> bool:
        with self._lock:
            listeners = self._listeners.get(event_name, [])
            if listener not in listeners:
                return False
            listeners.remove(listener)
            return True

    def listener_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._listeners.get(event_name, []))

    def emit(self, event_name: str, payload: Any) -> int:
        """deliver payload to every listener, returns how many were called"""
        with self._lock:
            listeners = list(self._listeners.get(event_name, []))

        for listener in listeners:
            try:
                listener(payload)
            except Exception as e:
                logger.exception(f"error in {event_name} listener: {e}")
        return len(listeners)
