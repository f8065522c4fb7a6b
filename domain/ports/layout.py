from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import BoundingBox, LayoutItem, Position3D


class LayoutEngine(Protocol):
    def place_domains(self, items: Sequence[LayoutItem]) -> list[Position3D]:
        ...

    def domain_bounds(self, position: Position3D) -> BoundingBox:
        ...

    def pack_teams(self, items: Sequence[LayoutItem], bounds: BoundingBox) -> list[Position3D]:
        ...

    def team_bounds(self, position: Position3D) -> BoundingBox:
        ...

    def stack_services(
        self, items: Sequence[LayoutItem], bounds: BoundingBox
    ) -> list[Position3D]:
        ...
