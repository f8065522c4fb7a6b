from __future__ import annotations

from collections.abc import Sequence

from domain.models import BoundingBox, LayoutItem, Position3D

STACK_BASE_OFFSET = 10.0


def stack_services(
    items: Sequence[LayoutItem],
    bounds: BoundingBox,
    spacing: float,
) -> list[Position3D]:
    """Stack items vertically, centered over ``bounds``, in input order."""
    center_x = bounds.x + bounds.width / 2
    center_y = bounds.y + bounds.height / 2
    current_z = bounds.z + STACK_BASE_OFFSET
    positions: list[Position3D] = []
    for _ in items:
        positions.append(Position3D(x=center_x, y=center_y, z=current_z))
        current_z += spacing
    return positions
