"""
Game constants for snake_canvas.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Screen coordinates: (0, 0) is the top-left cell, y grows downwards
DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}
OPPOSITES = {UP: DOWN, DOWN: UP, LEFT: RIGHT, RIGHT: LEFT}

# Session statuses
IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
GAME_OVER = "game_over"
WON = "won"
SESSION_STATUSES = {IDLE, RUNNING, PAUSED, GAME_OVER, WON}

# Game settings
CELL_SIZE = 24
BOARD_SIZE = 20
STEP_MS = 140
APPLE_REWARD = 10
START_DIRECTION = RIGHT
START_SNAKE = [(6, 10), (5, 10), (4, 10)]

# Persisted best score key
BEST_SCORE_KEY = "snake-best"
