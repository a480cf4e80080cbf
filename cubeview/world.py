"""The game world: map, player and doors, with collision handling."""

from __future__ import annotations

from typing import Optional

from .door import Door, DoorState
from .grid import (
    MAP_CELL_SIZE,
    MAP_DOOR,
    MAP_PLAYER,
    MAP_PLAYER_SIZE,
    MAP_SPACE,
    MAP_WALL,
    GameMap,
    MapError,
)
from .image import Sprite
from .player import Player


def _cell_index(value: float) -> int:
    """Truncate a pixel coordinate and divide it by the cell size toward zero."""
    value = int(value)
    quotient = abs(value) // MAP_CELL_SIZE
    return quotient if value >= 0 else -quotient


class World:
    """The map together with the player and every door on it."""

    def __init__(self, game_map: GameMap, door_sprite: Sprite, wand_sprite: Sprite) -> None:
        self.game_map = game_map
        self.player = self._spawn_player(wand_sprite)
        self.doors = [
            Door(x=col * MAP_CELL_SIZE, y=row * MAP_CELL_SIZE, sprite=door_sprite)
            for row, line in enumerate(game_map.grid)
            for col, cell in enumerate(line)
            if cell == MAP_DOOR
        ]
        self._door_index = {
            (door.y // MAP_CELL_SIZE, door.x // MAP_CELL_SIZE): door
            for door in self.doors
        }

    def _spawn_player(self, wand_sprite: Sprite) -> Player:
        for row, line in enumerate(self.game_map.grid):
            for col, cell in enumerate(line):
                if cell in MAP_PLAYER:
                    return Player.spawn(row, col, cell, wand_sprite)
        raise MapError("map holds no player")

    def cell(self, row: int, col: int) -> str:
        """Return the grid character at (row, col); missing cells read as space."""
        line = self.game_map.grid[row]
        return line[col] if col < len(line) else MAP_SPACE

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.game_map.width and 0 <= y < self.game_map.height

    def get_door(self, row: int, col: int) -> Optional[Door]:
        """Return the door on a grid cell, or None."""
        return self._door_index.get((row, col))

    def is_door(self, x: float, y: float) -> bool:
        """Tell whether the pixel (x, y) lies on a door cell."""
        x, y = int(x), int(y)
        if not self._in_bounds(x, y):
            return False
        return self.cell(_cell_index(y), _cell_index(x)) == MAP_DOOR

    def is_valid_position(self, x: float, y: float) -> bool:
        """Tell whether the pixel (x, y) can be stood on."""
        x, y = int(x), int(y)
        if not self._in_bounds(x, y):
            return False
        row, col = _cell_index(y), _cell_index(x)
        if self.cell(row, col) == MAP_WALL:
            return False
        door = self.get_door(row, col)
        return door is None or door.state is DoorState.OPEN

    def is_collision(self, x: float, y: float) -> bool:
        """Tell whether the player's square at (x, y) overlaps a blocked spot."""
        x, y = int(x), int(y)
        corners = (
            (x, y),
            (x + MAP_PLAYER_SIZE, y),
            (x, y + MAP_PLAYER_SIZE),
            (x + MAP_PLAYER_SIZE, y + MAP_PLAYER_SIZE),
        )
        return not all(self.is_valid_position(cx, cy) for cx, cy in corners)

    def _resolve_x(self, x: int, y: int) -> None:
        player = self.player
        row, col = _cell_index(y), _cell_index(x)
        door = None
        if player.prev_x > x:
            player.x = float((col + 1) * MAP_CELL_SIZE)
            door = self.get_door(row, col)
        elif player.prev_x < x:
            player.x = float((col + 1) * MAP_CELL_SIZE - 1 - MAP_PLAYER_SIZE)
            door = self.get_door(row, col + 1)
        if door is not None:
            door.transition(DoorState.OPENING)

    def _resolve_y(self, x: int, y: int) -> None:
        player = self.player
        row, col = _cell_index(y), _cell_index(x)
        door = None
        if player.prev_y > player.y:
            player.y = float((row + 1) * MAP_CELL_SIZE)
            door = self.get_door(row, col)
        elif player.prev_y < player.y:
            player.y = float((row + 1) * MAP_CELL_SIZE - 1 - MAP_PLAYER_SIZE)
            door = self.get_door(row + 1, col)
        if door is not None:
            door.transition(DoorState.OPENING)

    def handle_collisions(self) -> None:
        """Push the player out of walls and closed doors, opening doors bumped into."""
        player = self.player
        if self.is_collision(player.x, player.prev_y):
            self._resolve_x(int(player.x), int(player.prev_y))
        if self.is_collision(player.prev_x, player.y):
            self._resolve_y(int(player.prev_x), int(player.y))
        if self.is_collision(player.x, player.y):
            self._resolve_x(int(player.x), int(player.y))
            self._resolve_y(int(player.x), int(player.y))

    def update(self, elapsed_time: float) -> None:
        """Advance the player and every door by ``elapsed_time`` seconds."""
        self.player.update(elapsed_time)
        for door in self.doors:
            door.update(elapsed_time)