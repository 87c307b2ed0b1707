import time
from typing import Optional

import pygame

from . import BasePresentation
from ..logger import get_logger
from ..note_types import NotationConfig

# Get logger for this module
logger = get_logger(__name__)


class PygameUI(BasePresentation):
    """Pygame-based UI for Pitch Quiz.

    Keys: A toggles accidentals, N toggles alternative (German) notation,
    Escape quits.
    """

    def __init__(self, config: Optional[NotationConfig] = None):
        """Initialize the Pygame UI"""
        super().__init__(config)
        self.screen = None
        self.width = 800
        self.height = 600
        self.bg_color = (20, 20, 30)
        self.text_color = (255, 255, 0)
        self.secondary_color = (180, 255, 180)
        self.error_color = (255, 90, 90)
        self.initialized = False
        self.clock = None

        # Fonts
        self.large_font = None
        self.medium_font = None
        self.small_font = None

        logger.debug("Initializing PygameUI")

    def init_screen(self):
        """Initialize the Pygame screen and resources"""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption("Pitch Quiz")

            self.large_font = pygame.font.SysFont("Arial", 160, bold=True)
            self.medium_font = pygame.font.SysFont("Arial", 36)
            self.small_font = pygame.font.SysFont("Arial", 22)

            self.clock = pygame.time.Clock()
            self.initialized = True
            logger.info("Pygame UI initialized successfully")
            return self.screen

        except pygame.error as e:
            logger.error(f"Failed to initialize Pygame: {e}")
            self.cleanup()
            raise

    def _blit_centered(self, font, text: str, color, y: int) -> None:
        surface = font.render(text, True, color)
        rect = surface.get_rect(center=(self.width // 2, y))
        self.screen.blit(surface, rect)

    def update_display(self) -> None:
        """Redraw target, detection text, result mark and settings"""
        if not self.initialized or not self.screen:
            return

        self.screen.fill(self.bg_color)

        if self.error:
            self._blit_centered(self.medium_font, self.error, self.error_color, self.height // 2)
            pygame.display.flip()
            return

        if self.target:
            self._blit_centered(
                self.medium_font, "Sing or play this note:", (200, 200, 255), 90
            )
            self._blit_centered(self.large_font, self.target, self.text_color, 230)

        if self.matched is True:
            self._blit_centered(self.large_font, "✔", (80, 220, 80), 400)

        if self.detection_text:
            self._blit_centered(
                self.medium_font, self.detection_text, self.secondary_color, 500
            )

        config = self.notation_config()
        settings = (
            f"[A] accidentals: {'on' if config.include_accidentals else 'off'}    "
            f"[N] German notation: {'on' if config.use_alternative_notation else 'off'}"
        )
        self._blit_centered(self.small_font, settings, (150, 150, 150), self.height - 30)

        pygame.display.flip()

    def handle_events(self) -> bool:
        """Process window and keyboard events.

        Returns:
            False when the user asked to quit
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                config = self.notation_config()
                if event.key == pygame.K_a:
                    self.set_include_accidentals(not config.include_accidentals)
                elif event.key == pygame.K_n:
                    self.set_alternative_notation(not config.use_alternative_notation)
        return True

    def run(self, session, duration: Optional[float] = None) -> None:
        """Run the display loop, draining the session queue at 30 fps.

        Args:
            session: A started PracticeSession
            duration: Optional limit in seconds
        """
        if not self.initialized or not self.screen:
            logger.error("Cannot run loop: UI not initialized")
            return

        logger.info("Starting display loop")
        end_time = time.time() + duration if duration else None

        running = True
        while running and session.running:
            running = self.handle_events()
            if end_time is not None and time.time() >= end_time:
                running = False

            session.process_pending()
            self.update_display()
            self.clock.tick(30)

        logger.info("Display loop ended")

    def wait_for_close(self) -> None:
        """Keep showing the current screen (e.g. an error) until the window closes."""
        if not self.initialized:
            return
        self.update_display()
        while self.handle_events():
            self.clock.tick(30)

    def cleanup(self):
        """Clean up Pygame resources"""
        if self.initialized:
            logger.debug("Cleaning up Pygame resources")
            try:
                pygame.quit()
            except pygame.error as e:
                logger.error(f"Error during Pygame cleanup: {e}")
            self.initialized = False
