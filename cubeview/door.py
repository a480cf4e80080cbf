"""Animated doors and their open/close state machine."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .image import Image, Sprite

FRAME_DURATION = 0.3


class DoorState(enum.Enum):
    """The four states a door can be in."""

    CLOSED = 0
    OPEN = 1
    CLOSING = 2
    OPENING = 3


@dataclass
class Door:
    """A door on the map, positioned in pixel coordinates."""

    x: int
    y: int
    sprite: Sprite
    state: DoorState = DoorState.CLOSED
    elapsed_time: float = 0.0
    frame_index: int = 0

    @property
    def last_frame(self) -> int:
        return self.sprite.col_count - 1

    def transition(self, state: DoorState) -> None:
        """Request a new state; requests that make no sense are ignored."""
        if self.state in (DoorState.OPENING, DoorState.CLOSING):
            return
        if self.state is DoorState.OPEN and state in (
            DoorState.OPENING,
            DoorState.CLOSED,
        ):
            return
        if self.state is DoorState.CLOSED and state in (
            DoorState.CLOSING,
            DoorState.OPEN,
        ):
            return
        self.state = state

    def update(self, elapsed_time: float) -> None:
        """Advance the animation by ``elapsed_time`` seconds."""
        if self.state is DoorState.CLOSED:
            self.frame_index = 0
        elif self.state is DoorState.OPEN:
            self.frame_index = self.last_frame
        elif self.state is DoorState.OPENING:
            self._advance_opening(elapsed_time)
        elif self.state is DoorState.CLOSING:
            self._advance_closing(elapsed_time)

    def _advance_opening(self, elapsed_time: float) -> None:
        self.elapsed_time += elapsed_time
        self.frame_index = int(self.elapsed_time / FRAME_DURATION)
        if self.frame_index == self.last_frame:
            self.state = DoorState.OPEN
            self.elapsed_time = 0.0

    def _advance_closing(self, elapsed_time: float) -> None:
        self.elapsed_time += elapsed_time
        if self.elapsed_time >= FRAME_DURATION:
            self.frame_index -= 1
            self.elapsed_time -= FRAME_DURATION
        if self.frame_index == 0:
            self.state = DoorState.CLOSED
            self.elapsed_time = 0.0

    def texture(self) -> Image:
        """Return the sprite frame currently shown."""
        return self.sprite.frame(self.frame_index)