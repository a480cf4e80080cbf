import pytest

from cubeview.door import DoorState
from cubeview.grid import MAP_CELL_SIZE, GameMap, MapError
from cubeview.image import Image, Sprite
from cubeview.player import DEFAULT_SPEED, PlayerState
from cubeview.world import World


def _sprites():
    door = Sprite.from_image(Image(14 * 2, 2), 1, 14)
    wand = Sprite.from_image(Image(9 * 2, 2), 1, 9)
    return door, wand


def _world(rows):
    door, wand = _sprites()
    return World(GameMap(grid=list(rows)), door, wand)


BOX = ["11111", "10001", "10N01", "10001", "11111"]
DOOR_ROW = ["1111111", "1N0D001", "1111111"]


def test_player_spawns_on_its_cell():
    world = _world(BOX)
    assert world.player.x == 2 * MAP_CELL_SIZE
    assert world.player.y == 2 * MAP_CELL_SIZE
    assert world.player.prev_x == world.player.x


def test_missing_player_raises():
    with pytest.raises(MapError):
        _world(["111", "101", "111"])


def test_doors_are_collected_and_found():
    world = _world(DOOR_ROW)
    assert len(world.doors) == 1
    door = world.get_door(1, 3)
    assert door is world.doors[0]
    assert door.x == 3 * MAP_CELL_SIZE
    assert door.y == 1 * MAP_CELL_SIZE
    assert door.state is DoorState.CLOSED
    assert world.get_door(1, 2) is None


def test_is_door():
    world = _world(DOOR_ROW)
    assert world.is_door(3 * MAP_CELL_SIZE + 1, MAP_CELL_SIZE + 1)
    assert not world.is_door(2 * MAP_CELL_SIZE, MAP_CELL_SIZE)
    assert not world.is_door(-1, 0)
    assert not world.is_door(0, 3 * MAP_CELL_SIZE)


def test_is_valid_position():
    world = _world(DOOR_ROW)
    assert world.is_valid_position(2 * MAP_CELL_SIZE, MAP_CELL_SIZE)
    assert not world.is_valid_position(0, 0)
    assert not world.is_valid_position(-1, MAP_CELL_SIZE)
    assert not world.is_valid_position(7 * MAP_CELL_SIZE, MAP_CELL_SIZE)
    door_x = 3 * MAP_CELL_SIZE
    assert not world.is_valid_position(door_x, MAP_CELL_SIZE)
    world.doors[0].state = DoorState.OPEN
    assert world.is_valid_position(door_x, MAP_CELL_SIZE)


def test_is_collision():
    world = _world(BOX)
    assert not world.is_collision(world.player.x, world.player.y)
    assert world.is_collision(MAP_CELL_SIZE - 1, MAP_CELL_SIZE * 2)


def test_moving_left_into_wall_is_pushed_back():
    world = _world(["11111", "1N001", "10001", "11111"])
    world.player.x = 15.0
    world.handle_collisions()
    assert world.player.x == MAP_CELL_SIZE
    assert not world.is_collision(world.player.x, world.player.y)


def test_moving_right_into_wall_is_pushed_back():
    world = _world(["111111", "1N0011", "100001", "111111"])
    start = world.player.x
    world.player.x = 70.0
    world.handle_collisions()
    assert start < world.player.x < 70.0
    assert not world.is_collision(world.player.x, world.player.y)


def test_moving_up_into_wall_is_pushed_back():
    world = _world(["11111", "1N001", "10001", "11111"])
    world.player.y = 10.0
    world.handle_collisions()
    assert world.player.y == MAP_CELL_SIZE
    assert not world.is_collision(world.player.x, world.player.y)


def test_bumping_a_door_opens_it():
    world = _world(DOOR_ROW)
    world.player.x = 50.0
    world.handle_collisions()
    assert world.doors[0].state is DoorState.OPENING
    assert not world.is_collision(world.player.x, world.player.y)


def test_update_advances_doors():
    world = _world(DOOR_ROW)
    door = world.doors[0]
    door.transition(DoorState.OPENING)
    world.update(4.0)
    assert door.state is DoorState.OPEN
    assert door.frame_index == door.sprite.col_count - 1


def test_update_moves_player():
    world = _world(BOX)
    start_y = world.player.y
    world.player.transition(PlayerState.MOVING_FORWARD)
    world.update(1.0)
    assert world.player.prev_y == start_y
    assert world.player.y == pytest.approx(start_y - DEFAULT_SPEED)