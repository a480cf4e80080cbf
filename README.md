# cubeview

A small first-person raycasting explorer. It reads a `.cub` map file,
checks that the map is well formed, and opens a pygame window where you
walk through the maze, open doors and watch the minimap follow you.

## Installing

```
pip install .
```

## Running

```
cubeview path/to/level.cub
```

Exactly one argument is expected: the path of a map file ending in `.cub`.
If the argument is missing, the file cannot be read, its contents are
invalid, or an image cannot be loaded, the program writes `Error`
followed by a reason on standard error and exits with status 1. It
exits with status 0 when the game is closed.

## Controls

| Input                        | Action                                   |
|------------------------------|------------------------------------------|
| `W` / `S`                    | move forward / backward                  |
| `A` / `D`                    | strafe left / right                      |
| Left / Right arrows          | turn                                     |
| Mouse movement (horizontal)  | turn                                     |
| Left mouse button            | swing the wand; closes the door you are facing, unless you stand on a door cell |
| `Esc` or closing the window  | quit                                     |

Walking into a closed door opens it. While the wand swing is playing,
movement keys are ignored.

## Map files

A map file has two parts. First, in any order and with blank lines
allowed between them, the four wall textures and the two colours. Each
identifier starts at the beginning of its line:

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png

F 220,100,0
C 225,30,0
```

- Each texture path must end in `.png` and name a readable file (paths
  are taken relative to the working directory).
- Colours are three comma-separated decimal integers from 0 to 255,
  written without leading zeros.
- Each identifier may appear only once; any other line is an error.

Then the grid, which must be the last thing in the file. Its first row
may hold only walls and spaces:

```
111111
1D0001
10N011
111111
```

- `1` wall, `0` floor, space for nothing, `D` door,
  `N`/`S`/`E`/`W` the player's start and facing.
- Exactly one player start.
- Every floor cell must be enclosed by walls.
- A door must sit between two walls (left and right, or above and below)
  and may not touch another door.
- The grid is between 3 and 400 rows and columns. A blank line ends it;
  nothing but blank lines may follow. Shorter rows are padded with spaces.

The game also expects its own artwork under `assets/` in the working
directory: `assets/textures/obstacle.png`, `assets/textures/navigator.png`,
`assets/textures/door.png`, and the animation strips
`assets/sprites/door.png` (14 frames in one row) and
`assets/sprites/wand.png` (9 frames in one row).

## Using the library

The pieces can be used on their own, for example to validate a map:

```python
from cubeview.mapfile import load_map
from cubeview.grid import MapError

try:
    game_map = load_map("level.cub")
except MapError as error:
    print(error)
```

`cubeview.mapfile.parse_map` does the same from a list of lines.

- `cubeview.grid` — `GameMap`, `MapError` and the grid checks
  (`is_enclosed`, `has_one_player`, `count_doors`, `validate_grid`).
- `cubeview.image` — `Image`, a packed-RGBA pixel buffer with `blit`,
  `fill` and `clear_region`, `Sprite` for sprite sheets, and `load_png`.
- `cubeview.door` / `cubeview.player` — the door and player state
  machines (`Door`, `DoorState`, `Player`, `PlayerState`).
- `cubeview.world.World` — the map with its player and doors: position
  checks, collision handling and per-frame updates.
- `cubeview.raycast` — the DDA raycaster (`Ray`, `find_hit_point`,
  `cast_ray`, `cast_all`).
- `cubeview.render.Renderer` — draws the scene, map, minimap and wand
  into `Image` buffers; `layers()` lists them with their window positions.
- `cubeview.app` — `Assets.load`, `InputState`, and `Game`, whose
  `step(inputs, elapsed_time)` runs one frame without a window and whose
  `run()` opens the pygame window.

## Tests

```
pip install .[test]
pytest
```