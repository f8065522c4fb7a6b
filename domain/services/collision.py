from __future__ import annotations

from collections.abc import Mapping

from domain.models import BoundingBox


def collides(a: BoundingBox, b: BoundingBox) -> bool:
    """Return True when the boxes overlap or touch on every axis.

    Bounds are inclusive, so boxes sharing a face count as colliding.
    """
    return (
        a.min_x <= b.max_x
        and a.max_x >= b.min_x
        and a.min_y <= b.max_y
        and a.max_y >= b.min_y
        and a.min_z <= b.max_z
        and a.max_z >= b.min_z
    )


def find_collisions(boxes: Mapping[str, BoundingBox]) -> list[tuple[str, str]]:
    keys = list(boxes.keys())
    pairs: list[tuple[str, str]] = []
    for idx, left in enumerate(keys):
        for right in keys[idx + 1 :]:
            if collides(boxes[left], boxes[right]):
                pairs.append((left, right))
    return pairs
