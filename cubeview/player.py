"""The player: position, heading and its movement/attack state machine."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from .grid import MAP_CELL_SIZE
from .image import Image, Sprite

TURN_STEP = math.pi / 36
ATTACK_FRAME_DURATION = 0.099
DEFAULT_SPEED = 62.5

_START_ANGLES = {
    "N": math.pi / 2,
    "E": 0.0,
    "S": 3 * math.pi / 2,
    "W": math.pi,
}


class PlayerState(enum.IntFlag):
    """Bit flags describing what the player is doing."""

    IDLE = 0
    MOVING_FORWARD = 1 << 0
    MOVING_RIGHT = 1 << 1
    MOVING_BACKWARD = 1 << 2
    MOVING_LEFT = 1 << 3
    TURNING_LEFT = 1 << 4
    TURNING_RIGHT = 1 << 5
    ATTACKING = 1 << 6
    DIED = 1 << 7


MOVE_MASK = (
    PlayerState.MOVING_FORWARD
    | PlayerState.MOVING_BACKWARD
    | PlayerState.MOVING_LEFT
    | PlayerState.MOVING_RIGHT
)


def _wrap_angle(angle: float) -> float:
    if angle < 0:
        angle += 2 * math.pi
    if angle >= 2 * math.pi:
        angle -= 2 * math.pi
    return angle


@dataclass
class Player:
    """The player, with pixel position and heading in radians."""

    sprite: Sprite
    x: float = 0.0
    y: float = 0.0
    prev_x: float = 0.0
    prev_y: float = 0.0
    elapsed_time: float = 0.0
    speed: float = DEFAULT_SPEED
    angle: float = 0.0
    frame_index: int = 0
    state: PlayerState = PlayerState.IDLE

    @classmethod
    def spawn(cls, row: int, col: int, direction: str, sprite: Sprite) -> "Player":
        """Place a player on a map cell facing one of N, S, E or W."""
        try:
            angle = _START_ANGLES[direction]
        except KeyError:
            raise ValueError(f"invalid player direction {direction!r}") from None
        x = float(col * MAP_CELL_SIZE)
        y = float(row * MAP_CELL_SIZE)
        return cls(sprite=sprite, x=x, y=y, prev_x=x, prev_y=y, angle=angle)

    def transition(self, state: PlayerState) -> None:
        """Switch state unless an attack is still in progress."""
        if self.state == PlayerState.ATTACKING:
            return
        self.state = PlayerState(state)

    def update(self, elapsed_time: float) -> None:
        """Advance turning, movement or the attack animation."""
        self._turn()
        if self.state == PlayerState.IDLE:
            self.frame_index = 0
        elif self.state & MOVE_MASK:
            self._move(elapsed_time)
        elif self.state == PlayerState.ATTACKING:
            self._attack(elapsed_time)

    def _turn(self) -> None:
        if not self.state & (PlayerState.TURNING_LEFT | PlayerState.TURNING_RIGHT):
            return
        if self.state & PlayerState.TURNING_LEFT:
            self.angle -= TURN_STEP
        if self.state & PlayerState.TURNING_RIGHT:
            self.angle += TURN_STEP
        self.angle = _wrap_angle(self.angle)

    def _direction(self) -> tuple[float, float]:
        offsets = (
            (PlayerState.MOVING_FORWARD, 0.0),
            (PlayerState.MOVING_BACKWARD, math.pi),
            (PlayerState.MOVING_RIGHT, 3 * math.pi / 2),
            (PlayerState.MOVING_LEFT, math.pi / 2),
        )
        dir_x = dir_y = 0.0
        for flag, offset in offsets:
            if self.state & flag:
                dir_x += math.cos(self.angle + offset)
                dir_y -= math.sin(self.angle + offset)
        return dir_x, dir_y

    def _move(self, elapsed_time: float) -> None:
        distance = self.speed * elapsed_time
        dir_x, dir_y = self._direction()
        magnitude = math.hypot(dir_x, dir_y)
        if magnitude > 1e-9:
            dir_x /= magnitude
            dir_y /= magnitude
        self.prev_x, self.prev_y = self.x, self.y
        self.x += dir_x * distance
        self.y += dir_y * distance

    def _attack(self, elapsed_time: float) -> None:
        self.elapsed_time += elapsed_time
        if self.elapsed_time >= ATTACK_FRAME_DURATION:
            self.frame_index += 1
            self.elapsed_time -= ATTACK_FRAME_DURATION
        if self.frame_index == self.sprite.col_count - 1:
            self.state = PlayerState.IDLE
            self.frame_index = 0
            self.elapsed_time = 0.0

    def texture(self) -> Image:
        """Return the weapon sprite frame currently shown."""
        return self.sprite.frame(self.frame_index)