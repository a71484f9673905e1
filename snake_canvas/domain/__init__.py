"""
Domain entities for the snake_canvas game engine.

This module contains the core game entities that are independent of
infrastructure concerns (drawing, storage, windowing, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES,
    IDLE, RUNNING, PAUSED, GAME_OVER, WON,
    BOARD_SIZE, CELL_SIZE, STEP_MS, APPLE_REWARD,
)
from .grid import Cell, Grid
from .collision import is_collision
from .apples import spawn_apple
from .snake import Snake, MoveResult
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITES',
    'IDLE', 'RUNNING', 'PAUSED', 'GAME_OVER', 'WON',
    'BOARD_SIZE', 'CELL_SIZE', 'STEP_MS', 'APPLE_REWARD',
    'Cell', 'Grid',
    'is_collision',
    'spawn_apple',
    'Snake', 'MoveResult',
    'GameState',
]
