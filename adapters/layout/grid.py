from __future__ import annotations

import math
from collections.abc import Sequence

from domain.models import LayoutItem, Position3D


def place_grid(items: Sequence[LayoutItem], spacing: float) -> list[Position3D]:
    """Place items on a square-ish grid on the ground plane (z=0).

    Cells are exactly ``spacing`` apart, so the caller keeps ``spacing`` at least as
    large as the widest footprint it anchors at these positions.
    """
    if not items:
        return []
    grid_size = math.ceil(math.sqrt(len(items)))
    positions: list[Position3D] = []
    for index in range(len(items)):
        row, col = divmod(index, grid_size)
        positions.append(Position3D(x=float(col * spacing), y=float(row * spacing), z=0.0))
    return positions
