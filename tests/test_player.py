import math

import pytest

from cubeview.grid import MAP_CELL_SIZE
from cubeview.image import Image, Sprite
from cubeview.player import Player, PlayerState


def make_sprite(columns=9):
    sheet = Image(columns, 1)
    for col in range(columns):
        sheet.put(col, 0, col + 1)
    return Sprite.from_image(sheet, 1, columns)


@pytest.mark.parametrize(
    "direction, angle",
    [("N", math.pi / 2), ("E", 0.0), ("S", 3 * math.pi / 2), ("W", math.pi)],
)
def test_spawn_angle(direction, angle):
    player = Player.spawn(2, 3, direction, make_sprite())
    assert player.angle == pytest.approx(angle)


def test_spawn_position_and_defaults():
    player = Player.spawn(2, 3, "N", make_sprite())
    assert (player.x, player.y) == (3 * MAP_CELL_SIZE, 2 * MAP_CELL_SIZE)
    assert (player.prev_x, player.prev_y) == (player.x, player.y)
    assert player.speed == 62.5
    assert player.state == PlayerState.IDLE
    assert player.frame_index == 0


def test_spawn_rejects_unknown_direction():
    with pytest.raises(ValueError):
        Player.spawn(0, 0, "X", make_sprite())


def test_transition_blocked_while_attacking():
    player = Player.spawn(1, 1, "E", make_sprite())
    player.transition(PlayerState.ATTACKING)
    player.transition(PlayerState.MOVING_FORWARD)
    assert player.state == PlayerState.ATTACKING


def test_transition_replaces_state():
    player = Player.spawn(1, 1, "E", make_sprite())
    player.transition(PlayerState.MOVING_FORWARD | PlayerState.TURNING_LEFT)
    player.transition(PlayerState.MOVING_LEFT)
    assert player.state == PlayerState.MOVING_LEFT


def test_turning_left_wraps_below_zero():
    player = Player.spawn(1, 1, "E", make_sprite())
    player.transition(PlayerState.TURNING_LEFT)
    player.update(0.0)
    assert player.angle == pytest.approx(2 * math.pi - math.pi / 36)


def test_turning_left_then_right_restores_angle():
    player = Player.spawn(1, 1, "N", make_sprite())
    player.transition(PlayerState.TURNING_LEFT)
    player.update(0.0)
    player.transition(PlayerState.TURNING_RIGHT)
    player.update(0.0)
    assert player.angle == pytest.approx(math.pi / 2)


def test_forward_facing_east_moves_right():
    player = Player.spawn(1, 1, "E", make_sprite())
    start_x, start_y = player.x, player.y
    player.transition(PlayerState.MOVING_FORWARD)
    player.update(1.0)
    assert player.x == pytest.approx(start_x + player.speed)
    assert player.y == pytest.approx(start_y)
    assert (player.prev_x, player.prev_y) == (start_x, start_y)


def test_forward_facing_north_moves_up():
    player = Player.spawn(3, 1, "N", make_sprite())
    start_y = player.y
    player.transition(PlayerState.MOVING_FORWARD)
    player.update(0.5)
    assert player.y == pytest.approx(start_y - player.speed * 0.5)


def test_diagonal_movement_is_normalised():
    player = Player.spawn(3, 3, "E", make_sprite())
    start_x, start_y = player.x, player.y
    player.transition(PlayerState.MOVING_FORWARD | PlayerState.MOVING_RIGHT)
    player.update(1.0)
    travelled = math.hypot(player.x - start_x, player.y - start_y)
    assert travelled == pytest.approx(player.speed)
    assert player.x > start_x
    assert player.y > start_y


def test_opposite_moves_cancel():
    player = Player.spawn(3, 3, "E", make_sprite())
    start_x = player.x
    player.transition(PlayerState.MOVING_FORWARD | PlayerState.MOVING_BACKWARD)
    player.update(1.0)
    assert player.x == pytest.approx(start_x)


def test_idle_update_resets_frame():
    player = Player.spawn(1, 1, "E", make_sprite())
    player.frame_index = 4
    player.update(0.1)
    assert player.frame_index == 0


def test_attack_animation_runs_then_returns_to_idle():
    player = Player.spawn(1, 1, "E", make_sprite(9))
    player.transition(PlayerState.ATTACKING)
    for _ in range(7):
        player.update(0.1)
    assert player.state == PlayerState.ATTACKING
    assert player.frame_index == 7
    player.update(0.1)
    assert player.state == PlayerState.IDLE
    assert player.frame_index == 0
    assert player.elapsed_time == 0.0


def test_texture_matches_frame():
    player = Player.spawn(1, 1, "E", make_sprite(9))
    player.transition(PlayerState.ATTACKING)
    player.update(0.1)
    assert player.texture().get(0, 0) == player.sprite.frame(1).get(0, 0)