from __future__ import annotations

from typing import Tuple


Color = Tuple[int, int, int]

PALETTE: Tuple[Color, ...] = (
    (128, 0, 128),    # L
    (255, 0, 0),      # I
    (255, 255, 0),    # T
    (0, 255, 0),      # S
    (0, 255, 255),    # Z
    (0, 0, 255),      # O
    (255, 255, 255),  # J
)
EMPTY_COLOR: Color = (30, 30, 36)


def color_for_value(v: int) -> Color:
    if 0 <= v < len(PALETTE):
        return PALETTE[v]
    return EMPTY_COLOR
