"""Pointer state shared between surface events and the rasterizer."""

from __future__ import annotations

from dataclasses import dataclass

from .models import InputSnapshot


@dataclass
class InputState:
    mouse_x: int = 0
    mouse_y: int = 0
    mouse_down: bool = False

    def press(self) -> None:
        self.mouse_down = True

    def release(self) -> None:
        self.mouse_down = False

    def move(self, event_x: float, event_y: float, origin_x: float = 0, origin_y: float = 0) -> None:
        # Positions outside the surface are passed through unchanged.
        self.mouse_x = int(event_x - origin_x)
        self.mouse_y = int(event_y - origin_y)

    def snapshot(self) -> InputSnapshot:
        return InputSnapshot(mouse_x=self.mouse_x, mouse_y=self.mouse_y, mouse_down=self.mouse_down)
