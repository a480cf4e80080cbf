"""The game: asset loading, input handling, the frame loop and the command."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from .door import DoorState
from .grid import MAP_DOOR, MAP_PLAYER_SIZE, MAP_WALL, GameMap, MapError
from .image import Image, Sprite, load_png
from .mapfile import load_map
from .player import PlayerState
from .raycast import Ray, cast_all, find_hit_point
from .render import HEIGHT, WIDTH, Renderer
from .world import World

PathLike = Union[str, Path]

DEFAULT_ASSET_DIR = Path("assets")
DOOR_FRAMES = 14
WAND_FRAMES = 9
WINDOW_TITLE = "cub3D"


@dataclass
class Assets:
    """Every texture and sprite the game draws with."""

    walls: tuple[Image, ...]
    obstacle: Image
    door: Image
    navigator: Image
    sprite_door: Sprite
    sprite_wand: Sprite

    @classmethod
    def load(cls, game_map: GameMap, asset_dir: PathLike = DEFAULT_ASSET_DIR) -> "Assets":
        """Load the fixed assets from ``asset_dir`` and the map's wall textures.

        Raises OSError when any image cannot be read.
        """
        base = Path(asset_dir)
        return cls(
            walls=tuple(load_png(path) for path in game_map.wall_paths),
            obstacle=load_png(base / "textures" / "obstacle.png"),
            door=load_png(base / "textures" / "door.png"),
            navigator=load_png(base / "textures" / "navigator.png"),
            sprite_door=Sprite.load(base / "sprites" / "door.png", 1, DOOR_FRAMES),
            sprite_wand=Sprite.load(base / "sprites" / "wand.png", 1, WAND_FRAMES),
        )


@dataclass(frozen=True)
class InputState:
    """What the keyboard and mouse report for one frame."""

    mouse_x: int = 0
    mouse_y: int = 0
    mouse_left: bool = False
    escape: bool = False
    move_forward: bool = False
    move_backward: bool = False
    strafe_left: bool = False
    strafe_right: bool = False
    arrow_left: bool = False
    arrow_right: bool = False


_KEY_FLAGS = (
    ("move_forward", PlayerState.MOVING_FORWARD),
    ("move_backward", PlayerState.MOVING_BACKWARD),
    ("strafe_left", PlayerState.MOVING_LEFT),
    ("strafe_right", PlayerState.MOVING_RIGHT),
    ("arrow_left", PlayerState.TURNING_RIGHT),
    ("arrow_right", PlayerState.TURNING_LEFT),
)


@dataclass
class Game:
    """The running game: world, renderer and the per-frame logic."""

    game_map: GameMap
    assets: Assets
    world: World = field(init=False)
    renderer: Renderer = field(init=False)
    rays: list[Ray] = field(init=False, default_factory=list)
    mouse_x: int = field(init=False, default=0)
    mouse_y: int = field(init=False, default=0)
    running: bool = field(init=False, default=True)

    def __post_init__(self) -> None:
        self.world = World(
            self.game_map, self.assets.sprite_door, self.assets.sprite_wand
        )
        self.renderer = Renderer(
            self.world, self.assets.obstacle, self.assets.door, self.assets.navigator
        )

    def _any_hit(self, row: int, col: int) -> bool:
        game_map = self.game_map
        if not (0 <= row < game_map.row_count and 0 <= col < game_map.col_count):
            return False
        return self.world.cell(row, col) in (MAP_DOOR, MAP_WALL)

    def _mouse_move(self, inputs: InputState) -> PlayerState:
        last_x = self.mouse_x
        self.mouse_x, self.mouse_y = inputs.mouse_x, inputs.mouse_y
        state = PlayerState.IDLE
        if last_x < self.mouse_x:
            state |= PlayerState.TURNING_LEFT
        if last_x > self.mouse_x:
            state |= PlayerState.TURNING_RIGHT
        return state

    def _close_facing_door(self) -> None:
        player = self.world.player
        x, y = int(player.x), int(player.y)
        ray = Ray.from_angle(
            x + MAP_PLAYER_SIZE // 2, y + MAP_PLAYER_SIZE // 2, player.angle
        )
        find_hit_point(ray, self._any_hit)
        door = self.world.get_door(ray.hit_row, ray.hit_col)
        if door is None:
            return
        corners = (
            (x, y),
            (x + MAP_PLAYER_SIZE, y),
            (x, y + MAP_PLAYER_SIZE),
            (x + MAP_PLAYER_SIZE, y + MAP_PLAYER_SIZE),
        )
        if not any(self.world.is_door(cx, cy) for cx, cy in corners):
            door.transition(DoorState.CLOSING)

    def process_inputs(self, inputs: InputState) -> None:
        """Turn one frame of input into a player state; Escape stops the game."""
        state = self._mouse_move(inputs)
        if inputs.mouse_left:
            state = PlayerState.ATTACKING
            self._close_facing_door()
        if inputs.escape:
            self.running = False
            return
        if state != PlayerState.ATTACKING:
            for name, flag in _KEY_FLAGS:
                if getattr(inputs, name):
                    state |= flag
        self.world.player.transition(state)

    def step(self, inputs: InputState, elapsed_time: float) -> None:
        """Run one frame: input, simulation, collisions, ray casting, drawing."""
        self.process_inputs(inputs)
        if not self.running:
            return
        self.world.update(elapsed_time)
        self.world.handle_collisions()
        self.rays = cast_all(self.world, self.assets.walls, WIDTH)
        self.renderer.update(self.rays)

    def run(self) -> None:
        """Open a window and play until it is closed or Escape is pressed."""
        import pygame

        pygame.init()
        try:
            screen = pygame.display.set_mode((WIDTH, HEIGHT))
            pygame.display.set_caption(WINDOW_TITLE)
            clock = pygame.time.Clock()
            self.mouse_x, self.mouse_y = pygame.mouse.get_pos()
            clock.tick()
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                if not self.running:
                    break
                elapsed = clock.tick() / 1000.0
                self.step(_read_inputs(pygame), elapsed)
                if not self.running:
                    break
                screen.fill((0, 0, 0))
                for layer in self.renderer.layers():
                    _blit(pygame, screen, layer.image, layer.x, layer.y)
                pygame.display.flip()
        finally:
            pygame.quit()


def _read_inputs(pygame) -> InputState:
    keys = pygame.key.get_pressed()
    mouse_x, mouse_y = pygame.mouse.get_pos()
    return InputState(
        mouse_x=mouse_x,
        mouse_y=mouse_y,
        mouse_left=bool(pygame.mouse.get_pressed()[0]),
        escape=bool(keys[pygame.K_ESCAPE]),
        move_forward=bool(keys[pygame.K_w]),
        move_backward=bool(keys[pygame.K_s]),
        strafe_left=bool(keys[pygame.K_a]),
        strafe_right=bool(keys[pygame.K_d]),
        arrow_left=bool(keys[pygame.K_LEFT]),
        arrow_right=bool(keys[pygame.K_RIGHT]),
    )


def _blit(pygame, screen, image: Image, x: int, y: int) -> None:
    if image.width == 0 or image.height == 0:
        return
    data = image.pixels.astype(">u4").tobytes()
    surface = pygame.image.frombuffer(data, (image.width, image.height), "RGBA")
    screen.blit(surface, (x, y))


def _error(message: str) -> int:
    sys.stderr.write(f"Error\n{message}\n")
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the game on the map file named by the single argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        return _error("Invalid arguments")
    try:
        game_map = load_map(args[0])
    except MapError as exc:
        return _error(str(exc))
    try:
        assets = Assets.load(game_map, DEFAULT_ASSET_DIR)
    except OSError as exc:
        return _error(str(exc))
    try:
        game = Game(game_map, assets)
    except MapError as exc:
        return _error(str(exc))
    game.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())