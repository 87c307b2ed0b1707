"""Plain terminal presentation."""

import sys
from typing import Optional, TextIO

from . import BasePresentation
from ..logger import get_logger
from ..note_types import NotationConfig

logger = get_logger(__name__)


class ConsolePresentation(BasePresentation):
    """Prints target changes and results as lines of text.

    Detection text is only printed when it changes, so a held note does not
    flood the terminal.
    """

    CHECK_MARK = "✔"
    CROSS_MARK = "✘"

    def __init__(
        self, config: Optional[NotationConfig] = None, stream: Optional[TextIO] = None
    ) -> None:
        super().__init__(config)
        self._stream = stream or sys.stdout

    def _write(self, line: str) -> None:
        print(line, file=self._stream, flush=True)

    def target_changed(self, letter: str) -> None:
        super().target_changed(letter)
        self._write(f"Sing or play: {letter}")

    def detection_updated(self, text: str) -> None:
        if text and text != self.detection_text:
            self._write(f"  {text}")
        super().detection_updated(text)

    def result_changed(self, matched: Optional[bool]) -> None:
        if matched is True:
            self._write(f"  {self.CHECK_MARK} correct!")
        elif matched is False and self.matched is not False:
            self._write(f"  {self.CROSS_MARK} not {self.target}")
        super().result_changed(matched)

    def show_error(self, message: str) -> None:
        super().show_error(message)
        self._write(f"Error: {message}")
