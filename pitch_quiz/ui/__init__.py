"""Presentation adapters for Pitch Quiz."""

from typing import Callable, List, Optional

from ..logger import get_logger
from ..note_types import NotationConfig, NotationScheme
from ..core.interfaces import IPresentation

logger = get_logger(__name__)


class BasePresentation(IPresentation):
    """Keeps the displayed state and the notation toggles.

    Subclasses decide how the state is drawn. Toggle changes are forwarded to
    listeners registered with :meth:`on_config_changed`.
    """

    def __init__(self, config: Optional[NotationConfig] = None) -> None:
        self._config = config or NotationConfig()
        self._config_listeners: List[Callable[[], None]] = []
        self.target: Optional[str] = None
        self.detection_text = ""
        self.matched: Optional[bool] = None
        self.error: Optional[str] = None

    def notation_config(self) -> NotationConfig:
        return self._config

    def on_config_changed(self, callback: Callable[[], None]) -> None:
        self._config_listeners.append(callback)

    def set_include_accidentals(self, value: bool) -> None:
        if value == self._config.include_accidentals:
            return
        self._config = NotationConfig(include_accidentals=value, scheme=self._config.scheme)
        self._notify_config_changed()

    def set_alternative_notation(self, value: bool) -> None:
        scheme = NotationScheme.ALTERNATIVE if value else NotationScheme.WESTERN
        if scheme is self._config.scheme:
            return
        self._config = NotationConfig(
            include_accidentals=self._config.include_accidentals, scheme=scheme
        )
        self._notify_config_changed()

    def _notify_config_changed(self) -> None:
        logger.debug(f"Notation settings now {self._config}")
        for callback in self._config_listeners:
            callback()

    def target_changed(self, letter: str) -> None:
        self.target = letter

    def detection_updated(self, text: str) -> None:
        self.detection_text = text

    def result_changed(self, matched: Optional[bool]) -> None:
        self.matched = matched

    def show_error(self, message: str) -> None:
        self.error = message


__all__ = ["BasePresentation"]
