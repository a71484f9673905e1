"""
Board rendering for snake_canvas.

Each frame is drawn with PIL (Pillow):
1. Board background and grid lines
2. Snake segments (head in its own colour)
3. Apple as a filled circle
4. A HUD strip below the board with score labels and control buttons
5. The game-over overlay when the session asks for it

Rendering only reads the GameState it is given; it never mutates the session.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from snake_canvas.domain.constants import CELL_SIZE
from snake_canvas.domain.game_state import GameState

logger = logging.getLogger(__name__)

HUD_HEIGHT = 64
BUTTON_WIDTH = 88
BUTTON_HEIGHT = 28
BUTTON_GAP = 8
# Room kept on the left of the HUD for the score and best-score labels
LABEL_COLUMN = 128
MIN_HUD_WIDTH = LABEL_COLUMN + 3 * BUTTON_WIDTH + 4 * BUTTON_GAP


class ColorScheme:
    """Palette of the browser version of the game"""

    SNAKE = "#22d3ee"
    HEAD = "#34d399"
    APPLE = "#f97316"
    BOARD = "#0b1220"
    GRID = "#111827"

    # UI
    HUD_BACKGROUND = "#020617"
    HUD_TEXT = "#e5e7eb"
    BUTTON = "#1f2937"
    BUTTON_TEXT = "#f9fafb"
    OVERLAY = (2, 6, 23, 190)
    OVERLAY_TEXT = "#fde68a"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


@dataclass(frozen=True)
class Button:
    """A clickable control drawn in the HUD strip."""

    action: str
    label: str
    box: Tuple[int, int, int, int]  # left, top, right, bottom

    def contains(self, x: int, y: int) -> bool:
        left, top, right, bottom = self.box
        return left <= x < right and top <= y < bottom


class BoardRenderer:
    """Draw GameState snapshots onto Pillow images"""

    def __init__(self, board_size: int, cell_size: int = CELL_SIZE, hud: bool = True):
        self.board_size = board_size
        self.cell_size = cell_size
        self.canvas_px = board_size * cell_size
        self.hud_height = HUD_HEIGHT if hud else 0
        # Narrow boards get a HUD wider than the board so every button fits
        self.width = max(self.canvas_px, MIN_HUD_WIDTH) if hud else self.canvas_px
        self.height = self.canvas_px + self.hud_height
        self.buttons = self._layout_buttons() if hud else []

        # DejaVu ships with most Linux distros; Pillow's bitmap font otherwise
        try:
            self.font = ImageFont.truetype("DejaVuSans.ttf", 16)
            self.font_large = ImageFont.truetype("DejaVuSans-Bold.ttf", 24)
        except OSError:
            self.font = ImageFont.load_default()
            self.font_large = ImageFont.load_default()

    def _layout_buttons(self) -> List[Button]:
        labels = [("start", "Start"), ("pause", "Pause"), ("restart", "Restart")]
        top = self.canvas_px + (self.hud_height - BUTTON_HEIGHT) // 2
        right = self.width - BUTTON_GAP
        buttons = []
        for action, label in reversed(labels):
            left = right - BUTTON_WIDTH
            buttons.append(Button(action, label, (left, top, right, top + BUTTON_HEIGHT)))
            right = left - BUTTON_GAP
        return list(reversed(buttons))

    def button_at(self, x: int, y: int) -> Optional[str]:
        """Return the action of the button under (x, y), if any."""
        for button in self.buttons:
            if button.contains(x, y):
                return button.action
        return None

    # ----------------------------------------------------------------- board
    def render_board(self, state: GameState) -> Image.Image:
        """Render just the board: background, grid, snake and apple."""
        img = Image.new('RGB', (self.canvas_px, self.canvas_px), hex_to_rgb(ColorScheme.BOARD))
        draw = ImageDraw.Draw(img)
        self._draw_grid(draw)
        self._draw_snake(draw, state.snake_positions)
        self._draw_apple(draw, state.apple)
        return img

    def _draw_grid(self, draw: ImageDraw.ImageDraw):
        """Stroke one vertical and one horizontal line per cell boundary"""
        grid_color = hex_to_rgb(ColorScheme.GRID)
        for i in range(self.board_size):
            offset = i * self.cell_size
            draw.line([offset, 0, offset, self.canvas_px], fill=grid_color, width=1)
            draw.line([0, offset, self.canvas_px, offset], fill=grid_color, width=1)

    def _draw_snake(self, draw: ImageDraw.ImageDraw, positions: List[Tuple[int, int]]):
        for index, (x, y) in enumerate(positions):
            color = ColorScheme.HEAD if index == 0 else ColorScheme.SNAKE
            self._draw_cell(draw, x, y, hex_to_rgb(color), padding=1)

    def _draw_cell(
        self,
        draw: ImageDraw.ImageDraw,
        x: int,
        y: int,
        color: Tuple[int, int, int],
        padding: int = 1
    ):
        """Fill a cell, inset by ``padding`` pixels on every side"""
        left = x * self.cell_size + padding
        top = y * self.cell_size + padding
        size = self.cell_size - 2 * padding
        # Pillow boxes are inclusive of the bottom-right corner
        draw.rectangle([left, top, left + size - 1, top + size - 1], fill=color)

    def _draw_apple(self, draw: ImageDraw.ImageDraw, apple: Optional[Tuple[int, int]]):
        if apple is None:
            return
        ax, ay = apple
        center_x = ax * self.cell_size + self.cell_size / 2
        center_y = ay * self.cell_size + self.cell_size / 2
        radius = max(1, self.cell_size / 2 - 4)
        draw.ellipse(
            [center_x - radius, center_y - radius, center_x + radius, center_y + radius],
            fill=hex_to_rgb(ColorScheme.APPLE)
        )

    # ----------------------------------------------------------------- frame
    def render_frame(
        self,
        state: GameState,
        overlay_message: Optional[str] = None
    ) -> Image.Image:
        """Render the board plus HUD, with the overlay when a message is given"""
        img = Image.new('RGB', (self.width, self.height), hex_to_rgb(ColorScheme.HUD_BACKGROUND))
        img.paste(self.render_board(state), (0, 0))

        if self.hud_height:
            self._draw_hud(ImageDraw.Draw(img), state)

        if overlay_message:
            img = self._draw_overlay(img, overlay_message)

        return img

    def _draw_hud(self, draw: ImageDraw.ImageDraw, state: GameState):
        text_y = self.canvas_px + 10
        draw.text((10, text_y), f"Score: {state.score}",
                  fill=hex_to_rgb(ColorScheme.HUD_TEXT), font=self.font)
        draw.text((10, text_y + 24), f"Best: {state.best_score}",
                  fill=hex_to_rgb(ColorScheme.HUD_TEXT), font=self.font)

        for button in self.buttons:
            draw.rectangle(list(button.box), fill=hex_to_rgb(ColorScheme.BUTTON))
            bbox = draw.textbbox((0, 0), button.label, font=self.font)
            text_width = bbox[2] - bbox[0]
            text_height = bbox[3] - bbox[1]
            left, top, right, bottom = button.box
            draw.text(
                (left + (right - left - text_width) // 2, top + (bottom - top - text_height) // 2),
                button.label,
                fill=hex_to_rgb(ColorScheme.BUTTON_TEXT),
                font=self.font
            )

    def _draw_overlay(self, img: Image.Image, message: str) -> Image.Image:
        """Dim the board and centre the message on it"""
        layer = Image.new('RGBA', img.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.rectangle([0, 0, self.canvas_px, self.canvas_px], fill=ColorScheme.OVERLAY)

        bbox = draw.textbbox((0, 0), message, font=self.font_large)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            ((self.canvas_px - text_width) // 2, (self.canvas_px - text_height) // 2),
            message,
            fill=hex_to_rgb(ColorScheme.OVERLAY_TEXT),
            font=self.font_large
        )
        return Image.alpha_composite(img.convert('RGBA'), layer).convert('RGB')

    def save_frame(self, state: GameState, path: str, overlay_message: Optional[str] = None) -> str:
        """Write a single rendered frame to ``path`` (format from the extension)."""
        self.render_frame(state, overlay_message).save(path)
        logger.info("Saved frame for tick %d to %s", state.tick, path)
        return path
