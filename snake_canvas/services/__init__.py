"""
Infrastructure services for snake_canvas: frame rendering and score storage.
"""
