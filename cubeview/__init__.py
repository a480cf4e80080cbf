"""A raycasting first-person explorer for .cub maps: map parsing, ray casting, rendering and a pygame front end."""

__version__ = "0.1.0"