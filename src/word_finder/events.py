"""
Event bus for dictionary lifecycle notifications.

A small callback registry owned by one DictionaryManager instance.
Listeners receive DictionaryEventData; a failing listener is logged and does
not affect other listeners or the emitter.
"""

import time
from typing import Callable, Optional, Union

from .audit_logger import AuditLogger
from .enums import DictionaryEvent
from .models import DictionaryEventData

EventListener = Callable[[DictionaryEventData], None]


def _event_name(event: Union[DictionaryEvent, str]) -> str:
    if isinstance(event, DictionaryEvent):
        return event.value
    # Raises ValueError for unknown event names
    return DictionaryEvent(event).value


class EventBus:
    """Typed callback registry with explicit unsubscribe."""

    def __init__(
        self,
        logger: Optional[AuditLogger] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._listeners: dict[str, list[EventListener]] = {}
        self._logger = logger
        self._clock = clock

    def subscribe(
        self,
        event: Union[DictionaryEvent, str],
        listener: EventListener,
    ) -> Callable[[], None]:
        """
        Register a listener for an event.

        Args:
            event: The event to listen for
            listener: Callable invoked with DictionaryEventData

        Returns:
            A callable that removes this registration
        """
        name = _event_name(event)
        self._listeners.setdefault(name, []).append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(name, listener)

        return unsubscribe

    def unsubscribe(
        self,
        event: Union[DictionaryEvent, str],
        listener: EventListener,
    ) -> bool:
        """
        Remove a listener registration.

        Returns:
            True if the listener was registered and has been removed
        """
        listeners = self._listeners.get(_event_name(event))
        if not listeners or listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def listener_count(self, event: Union[DictionaryEvent, str]) -> int:
        return len(self._listeners.get(_event_name(event), []))

    def emit(
        self,
        event: DictionaryEvent,
        data: Optional[dict] = None,
    ) -> DictionaryEventData:
        """
        Deliver an event to every listener registered for it.

        Args:
            event: The event being emitted
            data: Optional event payload

        Returns:
            The DictionaryEventData that was delivered
        """
        payload = DictionaryEventData(
            type=event.value,
            timestamp=self._clock(),
            data=dict(data or {}),
        )

        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners.get(event.value, [])):
            try:
                listener(payload)
            except Exception as e:
                if self._logger:
                    self._logger.log_error(
                        "EventBus",
                        "Error in event listener",
                        error=e,
                        additional_data={"event": event.value},
                    )

        return payload
