"""
snake_canvas - a single-player grid snake game.

The session and domain packages hold the game rules; services draw frames and
persist the best score; app wires everything to a pygame window.
"""

from .session import SnakeSession, StatusOutputs

__all__ = ['SnakeSession', 'StatusOutputs']
