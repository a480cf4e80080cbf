import pytest

from cubeview.door import Door, DoorState
from cubeview.image import Image, Sprite


def make_sprite(columns):
    sheet = Image(columns, 1)
    for col in range(columns):
        sheet.put(col, 0, col + 1)
    return Sprite.from_image(sheet, 1, columns)


def make_door(columns=3, state=DoorState.CLOSED, frame_index=0):
    return Door(x=40, y=60, sprite=make_sprite(columns), state=state,
                frame_index=frame_index)


def test_new_door_is_closed():
    door = make_door()
    assert door.state is DoorState.CLOSED
    assert door.frame_index == 0


@pytest.mark.parametrize(
    "start, requested, expected",
    [
        (DoorState.CLOSED, DoorState.OPENING, DoorState.OPENING),
        (DoorState.CLOSED, DoorState.CLOSING, DoorState.CLOSED),
        (DoorState.CLOSED, DoorState.OPEN, DoorState.CLOSED),
        (DoorState.OPEN, DoorState.CLOSING, DoorState.CLOSING),
        (DoorState.OPEN, DoorState.OPENING, DoorState.OPEN),
        (DoorState.OPEN, DoorState.CLOSED, DoorState.OPEN),
        (DoorState.OPENING, DoorState.CLOSING, DoorState.OPENING),
        (DoorState.OPENING, DoorState.CLOSED, DoorState.OPENING),
        (DoorState.CLOSING, DoorState.OPENING, DoorState.CLOSING),
        (DoorState.CLOSING, DoorState.OPEN, DoorState.CLOSING),
    ],
)
def test_transition_rules(start, requested, expected):
    door = make_door(state=start)
    door.transition(requested)
    assert door.state is expected


def test_closed_update_resets_frame():
    door = make_door(frame_index=2)
    door.update(1.0)
    assert door.frame_index == 0
    assert door.state is DoorState.CLOSED


def test_open_update_shows_last_frame():
    door = make_door(columns=3, state=DoorState.OPEN)
    door.update(0.01)
    assert door.frame_index == door.sprite.col_count - 1


def test_opening_reaches_open():
    door = make_door(columns=3)
    door.transition(DoorState.OPENING)
    door.update(0.45)
    assert door.state is DoorState.OPENING
    assert door.frame_index == 1
    door.update(0.3)
    assert door.state is DoorState.OPEN
    assert door.frame_index == door.sprite.col_count - 1
    assert door.elapsed_time == 0.0


def test_closing_reaches_closed():
    door = make_door(columns=3, state=DoorState.CLOSING, frame_index=2)
    door.update(0.3)
    assert door.state is DoorState.CLOSING
    assert door.frame_index == 1
    door.update(0.3)
    assert door.state is DoorState.CLOSED
    assert door.frame_index == 0
    assert door.elapsed_time == 0.0


def test_closing_waits_for_full_frame():
    door = make_door(columns=3, state=DoorState.CLOSING, frame_index=2)
    door.update(0.1)
    assert door.frame_index == 2
    assert door.elapsed_time == pytest.approx(0.1)


def test_texture_follows_frame_index():
    door = make_door(columns=3, state=DoorState.OPEN)
    door.update(0.0)
    assert door.texture().get(0, 0) == door.sprite.frame(2).get(0, 0)
    assert door.texture().get(0, 0) == 3