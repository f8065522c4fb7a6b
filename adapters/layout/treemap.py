from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.models import BoundingBox, LayoutItem, Position3D

logger = logging.getLogger(__name__)

TREEMAP_PADDING = 5.0
TREEMAP_LIFT = 5.0


def pack_treemap(
    items: Sequence[LayoutItem],
    bounds: BoundingBox,
    padding: float = TREEMAP_PADDING,
) -> list[Position3D]:
    """Greedy row-based packing of square footprints inside ``bounds``.

    Items are packed largest first but the result is aligned with the input
    order. An item wider than the bounds is not rejected: it gets a row of its
    own and sticks out past the right edge.
    """
    # (original index, item) pairs; sorted() is stable so equal sizes keep input order.
    ordered = sorted(enumerate(items), key=lambda pair: -pair[1].effective_size())
    positions: list[Position3D | None] = [None] * len(items)

    right_edge = bounds.x + bounds.width
    current_x = bounds.x
    current_y = bounds.y
    row_height = 0.0
    z = bounds.z + TREEMAP_LIFT

    for index, item in ordered:
        size = item.effective_size()
        if current_x + size > right_edge:
            current_x = bounds.x
            current_y += row_height + padding
            row_height = 0.0
        if size > bounds.width:
            logger.debug(
                "Item %s (size %.1f) is wider than its bounds (%.1f) and will protrude.",
                item.id,
                size,
                bounds.width,
            )
        positions[index] = Position3D(x=current_x, y=current_y, z=z)
        current_x += size + padding
        row_height = max(row_height, size)

    return [position for position in positions if position is not None]
