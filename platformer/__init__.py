"""Platformer game logic: action state machine, player physics, geometry, camera, mouse tracking, sprite quads and sprite animation."""

__version__ = "0.1.0"
__all__ = ["action", "camera", "geometry", "mouse", "player", "sprite", "sprite_anim"]