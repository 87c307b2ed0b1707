"""Display event system for Pitch Quiz components."""

from typing import Dict, List, Callable, Any, Optional
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class DisplayEventType(Enum):
    """Event types emitted by the match engine."""

    TARGET_CHANGED = auto()
    DETECTION_UPDATED = auto()
    RESULT_CHANGED = auto()


class EventEmitter:
    """Event emitter for Pitch Quiz components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and does not stop the others.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        for callback in self._listeners.get(event_type, []):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class DisplayEvents:
    """Event emitter specifically for display events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_target_changed(self, callback: Callable[[str], None]) -> None:
        self._emitter.on(DisplayEventType.TARGET_CHANGED, callback)

    def on_detection_updated(self, callback: Callable[[str], None]) -> None:
        self._emitter.on(DisplayEventType.DETECTION_UPDATED, callback)

    def on_result_changed(self, callback: Callable[[Optional[bool]], None]) -> None:
        self._emitter.on(DisplayEventType.RESULT_CHANGED, callback)

    def connect(self, presentation) -> None:
        """Route every display event to an ``IPresentation``."""
        self.on_target_changed(presentation.target_changed)
        self.on_detection_updated(presentation.detection_updated)
        self.on_result_changed(presentation.result_changed)

    def emit_target_changed(self, letter: str) -> None:
        self._emitter.emit(DisplayEventType.TARGET_CHANGED, letter)

    def emit_detection_updated(self, text: str) -> None:
        self._emitter.emit(DisplayEventType.DETECTION_UPDATED, text)

    def emit_result_changed(self, matched: Optional[bool]) -> None:
        self._emitter.emit(DisplayEventType.RESULT_CHANGED, matched)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
