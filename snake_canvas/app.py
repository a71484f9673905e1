#!/usr/bin/env python3
"""pygame front end for snake_canvas.

This module is the platform layer:
- It owns the window and the real clock, and emits one frame signal per
  display refresh through a FrameSource.
- It translates pygame key events into browser-style key names for the
  session's input mapper.
- It turns clicks on the HUD buttons into start / pause / restart.
- It blits whatever the Pillow renderer produced for the latest state.

Usage:

    snake-canvas

Settings are read from the environment or a local .env file
(SNAKE_BOARD_SIZE, SNAKE_CELL_SIZE, SNAKE_STEP_MS, SNAKE_FPS, SNAKE_SCORE_DB,
SNAKE_DISABLE_STORAGE, SNAKE_LOG_LEVEL). F12 saves a screenshot of the board.
"""

import logging
import time
from typing import Optional

import pygame

from snake_canvas.clock import FrameSource
from snake_canvas.config import Settings, load_settings
from snake_canvas.domain.game_state import GameState
from snake_canvas.services.renderer import BoardRenderer
from snake_canvas.services.score_store import open_score_store
from snake_canvas.session import SnakeSession

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Snake"

PYGAME_KEY_NAMES = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_SPACE: " ",
}


def key_name(event_key: int, unicode: str = "") -> Optional[str]:
    """Return the browser-style name for a pygame key, or the typed character."""
    if event_key in PYGAME_KEY_NAMES:
        return PYGAME_KEY_NAMES[event_key]
    return unicode or None


class SnakeApp:
    """Window, frame pump and event routing around a single SnakeSession"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.renderer = BoardRenderer(settings.board_size, settings.cell_size)
        self.frames = FrameSource()
        self.session = SnakeSession(
            board_size=settings.board_size,
            step_ms=settings.step_ms,
            store=open_score_store(settings),
            render=self.present,
            on_notice=lambda message: logger.info(message),
        )
        self.screen: Optional[pygame.Surface] = None
        self.dirty = False

    def present(self, state: GameState) -> None:
        """Render callback: draw the state into the window surface."""
        if self.screen is None:
            return
        outputs = self.session.status_outputs()
        overlay = outputs.overlay_message if outputs.overlay_visible else None
        img = self.renderer.render_frame(state, overlay)
        surface = pygame.image.frombuffer(img.tobytes(), img.size, "RGB")
        self.screen.blit(surface, (0, 0))
        self.dirty = True

    def handle_event(self, event) -> bool:
        """Route one pygame event. Returns False once the window should close."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key == pygame.K_F12:
                self.screenshot()
                return True
            self.session.handle_key(key_name(event.key, event.unicode))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            action = self.renderer.button_at(*event.pos)
            if action is not None:
                logger.debug("Button %s clicked", action)
                getattr(self.session, action)()
        return True

    def screenshot(self) -> str:
        outputs = self.session.status_outputs()
        overlay = outputs.overlay_message if outputs.overlay_visible else None
        path = f"snake_{int(time.time())}.png"
        return self.renderer.save_frame(self.session.get_current_state(), path, overlay)

    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        self.screen = pygame.display.set_mode((self.renderer.width, self.renderer.height))
        clock = pygame.time.Clock()

        self.session.attach(self.frames)
        self.session.render()
        try:
            running = True
            while running:
                for event in pygame.event.get():
                    if not self.handle_event(event):
                        running = False
                        break

                self.frames.emit(pygame.time.get_ticks())

                if self.dirty:
                    pygame.display.flip()
                    self.dirty = False
                clock.tick(self.settings.fps)
        finally:
            self.session.detach()
            pygame.quit()
            logger.info("Window closed, best score %d", self.session.best_score)


def main() -> None:
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    SnakeApp(settings).run()


if __name__ == "__main__":
    main()
