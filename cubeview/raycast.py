"""Grid ray casting (DDA) from the player's position."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .door import DoorState
from .grid import MAP_CELL_SIZE, MAP_DOOR, MAP_PLAYER_SIZE, MAP_WALL
from .image import Image, is_equal
from .world import World

FOV = math.pi / 3

HitTest = Callable[[int, int], bool]


def _wrap_angle(angle: float) -> float:
    if angle < 0:
        angle += 2 * math.pi
    if angle >= 2 * math.pi:
        angle -= 2 * math.pi
    return angle


def _divide(a: float, b: float) -> float:
    """Divide like IEEE floats do: by zero gives an infinity or NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


@dataclass
class Ray:
    """One cast ray: start, end, direction and what it hit."""

    x_start: float
    y_start: float
    angle: float
    dir_x: float
    dir_y: float
    x_end: float = 0.0
    y_end: float = 0.0
    distance: float = 0.0
    hit_row: int = -1
    hit_col: int = -1
    hit_side: int = -1
    hit_texture: Optional[Image] = None
    hit_texture_pos_x: int = 0

    @classmethod
    def from_angle(cls, x: float, y: float, angle: float) -> "Ray":
        """Start a ray at (x, y) heading at ``angle`` radians."""
        angle = _wrap_angle(angle)
        return cls(
            x_start=x,
            y_start=y,
            x_end=x,
            y_end=y,
            angle=angle,
            dir_x=math.cos(angle),
            dir_y=math.sin(angle),
        )


def find_hit_point(ray: Ray, is_hit: HitTest) -> None:
    """Walk the grid cell by cell until ``is_hit(row, col)`` is true."""
    ray.hit_row = int(ray.y_start / MAP_CELL_SIZE)
    ray.hit_col = int(ray.x_start / MAP_CELL_SIZE)

    cur_x = math.fmod(ray.x_start, MAP_CELL_SIZE)
    dist_x, col_step = math.inf, 1
    if ray.dir_x > 0:
        dist_x = abs((MAP_CELL_SIZE - cur_x) / ray.dir_x)
    elif ray.dir_x < 0:
        dist_x = abs(cur_x / ray.dir_x)
        col_step = -1

    cur_y = math.fmod(ray.y_start, MAP_CELL_SIZE)
    if ray.dir_y > 0:
        dist_y, row_step = abs(cur_y / ray.dir_y), -1
    else:
        dist_y, row_step = abs(_divide(MAP_CELL_SIZE - cur_y, ray.dir_y)), 1

    delta_x = abs(_divide(MAP_CELL_SIZE, ray.dir_x))
    delta_y = abs(_divide(MAP_CELL_SIZE, ray.dir_y))
    while not is_hit(ray.hit_row, ray.hit_col):
        if dist_x < dist_y:
            dist_x += delta_x
            ray.hit_col += col_step
            ray.hit_side = 0
        else:
            dist_y += delta_y
            ray.hit_row += row_step
            ray.hit_side = 1


def set_end_point(ray: Ray) -> None:
    """Place the ray's end on the border of the cell it hit."""
    if ray.hit_side == 0:
        ray.x_end = ray.hit_col * MAP_CELL_SIZE
        if ray.x_end < ray.x_start:
            ray.x_end += MAP_CELL_SIZE
        dy = abs(_divide((ray.x_end - ray.x_start) * ray.dir_y, ray.dir_x))
        ray.y_end = ray.y_start - dy if ray.dir_y > 0 else ray.y_start + dy
    else:
        ray.y_end = ray.hit_row * MAP_CELL_SIZE
        if ray.y_end < ray.y_start:
            ray.y_end += MAP_CELL_SIZE
        dx = abs(_divide((ray.y_end - ray.y_start) * ray.dir_x, ray.dir_y))
        ray.x_end = ray.x_start + dx if ray.dir_x > 0 else ray.x_start - dx


def perpendicular_distance(ray: Ray, player_angle: float) -> float:
    """Distance to the hit, projected on the player's view direction."""
    if is_equal(ray.dir_x, 0.0):
        distance = abs(_divide(ray.y_end - ray.y_start, ray.dir_y))
    else:
        distance = abs((ray.x_end - ray.x_start) / ray.dir_x)
    return distance * abs(math.cos(_wrap_angle(player_angle - ray.angle)))


def set_hit_texture(ray: Ray, world: World, walls: Sequence[Image]) -> None:
    """Choose the texture and texture column for the cell the ray hit."""
    cell = world.cell(ray.hit_row, ray.hit_col)
    if cell == MAP_DOOR:
        door = world.get_door(ray.hit_row, ray.hit_col)
        ray.hit_texture = door.texture()
        coord = ray.y_end if ray.hit_side == 0 else ray.x_end
        pos_index = int(math.fmod(int(coord), MAP_CELL_SIZE))
        ray.hit_texture_pos_x = int(pos_index * door.sprite.frame_w / MAP_CELL_SIZE)
    elif cell == MAP_WALL:
        if ray.hit_side == 0:
            texture = walls[1] if ray.x_end < ray.x_start else walls[3]
            pos_index = math.fmod(ray.y_end, MAP_CELL_SIZE)
        else:
            texture = walls[2] if ray.y_end < ray.y_start else walls[0]
            pos_index = math.fmod(ray.x_end, MAP_CELL_SIZE)
        ray.hit_texture = texture
        ray.hit_texture_pos_x = int(pos_index * texture.width / MAP_CELL_SIZE)


def _blocking_hit(world: World) -> HitTest:
    game_map = world.game_map

    def is_hit(row: int, col: int) -> bool:
        if not (0 <= row < game_map.row_count and 0 <= col < game_map.col_count):
            return False
        cell = world.cell(row, col)
        if cell == MAP_DOOR:
            door = world.get_door(row, col)
            if door is not None and door.state is not DoorState.OPEN:
                return True
        return cell == MAP_WALL

    return is_hit


def cast_ray(ray: Ray, world: World, walls: Sequence[Image]) -> Ray:
    """Trace ``ray`` through the world and fill in its hit data."""
    find_hit_point(ray, _blocking_hit(world))
    set_end_point(ray)
    set_hit_texture(ray, world, walls)
    ray.distance = perpendicular_distance(ray, world.player.angle)
    return ray


def cast_all(world: World, walls: Sequence[Image], count: int) -> list[Ray]:
    """Cast ``count`` rays across the field of view, left to right."""
    player = world.player
    x = player.x + MAP_PLAYER_SIZE // 2
    y = player.y + MAP_PLAYER_SIZE // 2
    step = FOV / (count - 1) if count > 1 else 0.0
    return [
        cast_ray(Ray.from_angle(x, y, player.angle + FOV / 2 - i * step), world, walls)
        for i in range(count)
    ]