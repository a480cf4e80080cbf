"""Map grid description, row checks and grid validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

MAP_SPACE = " "
MAP_PATH = "0"
MAP_WALL = "1"
MAP_PLAYER = "NSEW"
MAP_DOOR = "D"
MAP_CELL_SIZE = 20
MAP_PLAYER_SIZE = 16

_VISITED = "X"
_ROW_CHARS = frozenset(MAP_PLAYER + MAP_DOOR + MAP_PATH + MAP_SPACE + MAP_WALL)


class MapError(ValueError):
    """Raised when a map file or grid is invalid."""


@dataclass
class GameMap:
    """A parsed map: grid rows, wall textures and colours."""

    grid: list[str]
    wall_paths: tuple[str, ...] = ()
    color_floor: int = 0
    color_ceiling: int = 0
    door_count: int = 0
    _cache: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def row_count(self) -> int:
        return len(self.grid)

    @property
    def col_count(self) -> int:
        return max((len(row) for row in self.grid), default=0)

    @property
    def width(self) -> int:
        return self.col_count * MAP_CELL_SIZE

    @property
    def height(self) -> int:
        return self.row_count * MAP_CELL_SIZE


def _content(line: str) -> str:
    """The part of a line before its newline."""
    return line.split("\n", 1)[0]


def is_valid_row(line: str) -> bool:
    """Tell whether a line holds only map characters."""
    return all(char in _ROW_CHARS for char in _content(line))


def has_spaces_only(line: str) -> bool:
    """Tell whether a line holds nothing but spaces."""
    return all(char == MAP_SPACE for char in _content(line))


def is_map_edge(line: str) -> bool:
    """Tell whether a line holds only walls and spaces."""
    return all(char in (MAP_WALL, MAP_SPACE) for char in _content(line))


def pad_rows(lines: Iterable[str], col_count: int) -> list[str]:
    """Cut rows at their newline and pad or truncate them to col_count."""
    return [_content(line)[:col_count].ljust(col_count, MAP_SPACE) for line in lines]


def _flood(cells: list[list[str]], row: int, col: int) -> bool:
    stack = [(row, col)]
    while stack:
        r, c = stack.pop()
        if not (0 <= r < len(cells) and 0 <= c < len(cells[r])):
            return False
        if cells[r][c] in (MAP_WALL, _VISITED):
            continue
        cells[r][c] = _VISITED
        stack.extend(((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)))
    return True


def is_enclosed(grid: Sequence[str]) -> bool:
    """Tell whether every floor cell is sealed off by walls."""
    cells = [list(row) for row in grid]
    for r, row in enumerate(cells):
        for c, cell in enumerate(row):
            if cell == MAP_PATH and not _flood(cells, r, c):
                return False
    return True


def has_one_player(grid: Sequence[str]) -> bool:
    """Tell whether the grid holds exactly one player start."""
    return sum(char in MAP_PLAYER for row in grid for char in row) == 1


def _cell(grid: Sequence[str], row: int, col: int) -> str:
    if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
        return grid[row][col]
    return ""


def _is_valid_door(grid: Sequence[str], row: int, col: int) -> bool:
    left = _cell(grid, row, col - 1)
    right = _cell(grid, row, col + 1)
    up = _cell(grid, row - 1, col)
    down = _cell(grid, row + 1, col)
    framed = (left == MAP_WALL and right == MAP_WALL) or (
        up == MAP_WALL and down == MAP_WALL
    )
    return framed and MAP_DOOR not in (left, right, up, down)


def count_doors(grid: Sequence[str]) -> int:
    """Count the doors inside the grid, raising MapError on a badly placed one.

    Doors on the first row or first column are not counted.
    """
    count = 0
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if cell != MAP_DOOR or r == 0 or c == 0:
                continue
            if not _is_valid_door(grid, r, c):
                raise MapError(f"door at row {r}, column {c} is not framed by walls")
            count += 1
    return count


def validate_grid(game_map: GameMap) -> None:
    """Check enclosure, player and doors; store the door count on the map."""
    if not is_enclosed(game_map.grid):
        raise MapError("map is not enclosed by walls")
    if not has_one_player(game_map.grid):
        raise MapError("map must hold exactly one player")
    game_map.door_count = count_doors(game_map.grid)