"""Reading and checking ``.cub`` map files."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, Sequence, Union

from .grid import (
    GameMap,
    MapError,
    has_spaces_only,
    is_map_edge,
    is_valid_row,
    pad_rows,
    validate_grid,
)
from .image import color

PathLike = Union[str, Path]

MAP_EXTENSION = ".cub"
TEXTURE_EXTENSION = ".png"
MIN_MAP_SIZE = 3
MAX_MAP_SIZE = 400

TEXTURE_IDS = ("NO", "EA", "SO", "WE")
FLOOR_ID = "F"
CEILING_ID = "C"

INVALID_CONTENTS = "Invalid map file contents"
INVALID_TEXTURE = "Invalid texture"
INVALID_MAP_TYPE = "Invalid map file type"

_BLANK = "\n"
_COMPONENT = re.compile(r"0|[1-9][0-9]*")


def verify_extension(path: PathLike, extension: str) -> bool:
    """Tell whether a file name ends with the given extension."""
    return os.fspath(path).endswith(extension)


def check_file_readable(path: PathLike) -> None:
    """Raise MapError unless ``path`` is a regular file that can be opened."""
    name = os.fspath(path)
    if os.path.isdir(name):
        raise MapError(f"{name} is a directory")
    try:
        with open(name, "rb"):
            pass
    except OSError as exc:
        raise MapError(f"Cannot open {name}") from exc


def validate_color_component(text: str) -> int:
    """Parse one colour channel: a plain decimal number from 0 to 255."""
    cleaned = text.strip(" ")
    if not _COMPONENT.fullmatch(cleaned):
        raise MapError(INVALID_CONTENTS)
    value = int(cleaned)
    if value > 255:
        raise MapError(INVALID_CONTENTS)
    return value


def parse_color(text: str) -> int:
    """Parse the ``R,G,B`` part of a floor or ceiling line into a packed colour."""
    extract = text.strip("\n ")
    if not extract or extract.count(",") != 2:
        raise MapError(INVALID_CONTENTS)
    parts = [part for part in extract.split(",") if part]
    if len(parts) != 3:
        raise MapError(INVALID_CONTENTS)
    red, green, blue = (validate_color_component(part) for part in parts)
    return color(red, green, blue, 255)


def _parse_texture_path(text: str) -> str:
    path = text.strip("\n ")
    if not path or not verify_extension(path, TEXTURE_EXTENSION):
        raise MapError(INVALID_TEXTURE)
    check_file_readable(path)
    return path


def _parse_header(
    lines: Sequence[str],
) -> tuple[tuple[str, ...], int, int, int]:
    """Read textures and colours; return them with the index of the first map row."""
    textures: dict[str, str] = {}
    colors: dict[str, int] = {}
    color_lines = 0
    start = None
    for index, line in enumerate(lines):
        if line == _BLANK:
            continue
        if is_map_edge(line):
            start = index
            break
        texture_id = line[:2]
        color_id = line[:1]
        if texture_id in TEXTURE_IDS:
            if texture_id in textures:
                raise MapError(INVALID_CONTENTS)
            textures[texture_id] = _parse_texture_path(line[2:])
        elif color_id in (FLOOR_ID, CEILING_ID):
            color_lines += 1
            colors[color_id] = parse_color(line[1:])
        else:
            raise MapError(INVALID_CONTENTS)
    if (
        start is None
        or color_lines != 2
        or len(colors) != 2
        or len(textures) != len(TEXTURE_IDS)
    ):
        raise MapError(INVALID_CONTENTS)
    wall_paths = tuple(textures[texture_id] for texture_id in TEXTURE_IDS)
    return wall_paths, colors[FLOOR_ID], colors[CEILING_ID], start


def _row_width(row: str) -> int:
    # Every row is counted as if it ended with one terminator character.
    return len(row) - 1


def _parse_grid(lines: Sequence[str]) -> list[str]:
    rows = [lines[0]]
    rest = iter(lines[1:])
    for line in rest:
        if line == _BLANK:
            break
        if not is_valid_row(line) or has_spaces_only(line):
            raise MapError(INVALID_CONTENTS)
        rows.append(line)
    if any(line != _BLANK for line in rest):
        raise MapError(INVALID_CONTENTS)
    col_count = max(_row_width(row) for row in rows)
    if not (
        MIN_MAP_SIZE <= len(rows) <= MAX_MAP_SIZE
        and MIN_MAP_SIZE <= col_count <= MAX_MAP_SIZE
    ):
        raise MapError(INVALID_CONTENTS)
    return pad_rows(rows, col_count)


def parse_map(lines: Iterable[str]) -> GameMap:
    """Build and validate a map from the lines of a ``.cub`` file."""
    lines = list(lines)
    wall_paths, floor, ceiling, start = _parse_header(lines)
    game_map = GameMap(
        grid=_parse_grid(lines[start:]),
        wall_paths=wall_paths,
        color_floor=floor,
        color_ceiling=ceiling,
    )
    try:
        validate_grid(game_map)
    except MapError as exc:
        raise MapError(INVALID_CONTENTS) from exc
    return game_map


def load_map(path: PathLike) -> GameMap:
    """Read, parse and validate a ``.cub`` map file."""
    name = os.fspath(path)
    if not name or not verify_extension(name, MAP_EXTENSION):
        raise MapError(INVALID_MAP_TYPE)
    check_file_readable(name)
    try:
        with open(
            name, encoding="utf-8", errors="surrogateescape", newline="\n"
        ) as handle:
            lines = handle.readlines()
    except OSError as exc:
        raise MapError(f"Cannot open {name}") from exc
    return parse_map(lines)