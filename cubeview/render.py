"""Drawing the world: sky and floor, the 3D scene, map, minimap and weapon."""

from __future__ import annotations

import math
from typing import NamedTuple, Sequence

import numpy as np

from .grid import MAP_CELL_SIZE, MAP_DOOR, MAP_PLAYER_SIZE, MAP_WALL
from .image import Image, color
from .raycast import Ray
from .world import World

WIDTH = 1280
HEIGHT = 960
MINIMAP_X = 30
MINIMAP_Y = 30
MINIMAP_SIZE = 200
MINIMAP_BACKGROUND = color(36, 37, 39, 255)
NAVIGATOR_COLUMNS = 9
CAMERA_PLANE_DISTANCE = (WIDTH // 2) / math.tan(math.pi / 6)


class Layer(NamedTuple):
    """An image and the window position it is shown at."""

    image: Image
    x: int
    y: int


class Renderer:
    """Owns every image shown in the window and redraws them each frame."""

    def __init__(
        self, world: World, obstacle: Image, door_icon: Image, navigator: Image
    ) -> None:
        self.world = world
        self.obstacle = obstacle
        self.door_icon = door_icon
        self.navigator = navigator
        game_map = world.game_map
        sprite = world.player.sprite

        self.ceiling = Image(WIDTH, HEIGHT // 2)
        self.floor = Image(WIDTH, HEIGHT // 2)
        self.scene = Image(WIDTH, HEIGHT)
        self.map = Image(game_map.width, game_map.height)
        self.minimap_bg = Image(MINIMAP_SIZE, MINIMAP_SIZE)
        self.minimap = Image(MINIMAP_SIZE, MINIMAP_SIZE)
        self.player = Image(sprite.frame_w, sprite.frame_h)

        self.ceiling.fill(game_map.color_ceiling)
        self.floor.fill(game_map.color_floor)
        self.minimap_bg.fill(MINIMAP_BACKGROUND)
        self._fill_map()

    def _fill_map(self) -> None:
        icons = {MAP_WALL: self.obstacle, MAP_DOOR: self.door_icon}
        for row, line in enumerate(self.world.game_map.grid):
            for col, cell in enumerate(line):
                icon = icons.get(cell)
                if icon is not None:
                    self.map.blit(
                        icon,
                        MAP_CELL_SIZE,
                        MAP_CELL_SIZE,
                        dest_x=col * MAP_CELL_SIZE,
                        dest_y=row * MAP_CELL_SIZE,
                    )

    def draw_map(self) -> None:
        """Erase the player's old marker, redraw doors and the heading marker."""
        player = self.world.player
        self.map.clear_region(
            int(player.prev_x), int(player.prev_y), MAP_PLAYER_SIZE, MAP_PLAYER_SIZE
        )
        for door in self.world.doors:
            self.map.blit(
                self.door_icon, MAP_CELL_SIZE, MAP_CELL_SIZE,
                dest_x=door.x, dest_y=door.y,
            )
        heading = int(player.angle * 36 / math.pi)
        self.map.blit(
            self.navigator,
            MAP_PLAYER_SIZE,
            MAP_PLAYER_SIZE,
            dest_x=int(player.x),
            dest_y=int(player.y),
            src_x=(heading % NAVIGATOR_COLUMNS) * MAP_PLAYER_SIZE,
            src_y=(heading // NAVIGATOR_COLUMNS) * MAP_PLAYER_SIZE,
        )

    @staticmethod
    def _window(position: float, extent: int) -> tuple[int, int]:
        start = max(int(position - MINIMAP_SIZE // 2), 0)
        size = MINIMAP_SIZE
        if start + MINIMAP_SIZE > extent:
            start = max(extent - MINIMAP_SIZE, 0)
            if start == 0:
                size = extent
        return start, size

    def draw_minimap(self) -> None:
        """Copy the part of the map around the player into the minimap."""
        player = self.world.player
        x, width = self._window(player.x, self.map.width)
        y, height = self._window(player.y, self.map.height)
        self.minimap.blit(self.map, width, height, src_x=x, src_y=y)

    def draw_player(self) -> None:
        """Show the weapon frame the player is currently at."""
        self.player.blit(self.world.player.texture(), self.player.width, self.player.height)

    def _draw_column(self, column: int, ray: Ray) -> None:
        texture = ray.hit_texture
        if texture is None:
            raise ValueError(f"ray {column} has no hit texture")
        if not 0 <= ray.hit_texture_pos_x < texture.width:
            raise IndexError(
                f"texture column {ray.hit_texture_pos_x} outside texture of width "
                f"{texture.width}"
            )
        if ray.distance == 0:
            wall_height = math.inf
        else:
            wall_height = MAP_CELL_SIZE / ray.distance * CAMERA_PLANE_DISTANCE
        if not wall_height > 0:
            return
        scale = texture.height / wall_height
        texture_offset = 0.0
        if wall_height >= HEIGHT:
            texture_offset = (wall_height - HEIGHT) / -1.0
            wall_height = HEIGHT - 1
        start_y = int(HEIGHT // 2 - wall_height / 2)
        texture_y = (start_y - HEIGHT // 2 + wall_height / 2) * scale * texture_offset
        if not math.isfinite(texture_y):
            texture_y = 0.0
        count = math.ceil(wall_height)

        steps = np.full(count, scale, dtype=np.float64)
        steps[0] = texture_y
        positions = np.trunc(np.cumsum(steps))
        last_row = texture.height - 1
        inside = (positions >= 0) & (positions < last_row)
        rows = np.where(inside, positions, last_row).astype(np.intp)

        ys = np.arange(start_y, start_y + count)
        visible = (ys >= 0) & (ys < self.scene.height)
        self.scene.pixels[ys[visible], column] = texture.pixels[
            rows[visible], ray.hit_texture_pos_x
        ]

    def draw_scene(self, rays: Sequence[Ray]) -> None:
        """Draw one textured wall slice per ray, left to right."""
        self.scene.clear()
        for column, ray in zip(range(self.scene.width), rays):
            self._draw_column(column, ray)

    def update(self, rays: Sequence[Ray]) -> None:
        """Redraw everything that changes from frame to frame."""
        self.draw_map()
        self.draw_minimap()
        self.draw_player()
        self.draw_scene(rays)

    def layers(self) -> list[Layer]:
        """The images to show, bottom first, with their window positions."""
        return [
            Layer(self.ceiling, 0, 0),
            Layer(self.floor, 0, HEIGHT // 2),
            Layer(self.scene, 0, 0),
            Layer(self.minimap_bg, MINIMAP_X, MINIMAP_Y),
            Layer(self.minimap, MINIMAP_X, MINIMAP_Y),
            Layer(self.player, WIDTH // 2, HEIGHT - self.player.height),
        ]