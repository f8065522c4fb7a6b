from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from adapters.layout.grid import place_grid
from adapters.layout.stack import stack_services
from adapters.layout.treemap import TREEMAP_PADDING, pack_treemap
from domain.models import BoundingBox, Footprint, LayoutItem, Position3D
from domain.ports.layout import LayoutEngine


@dataclass(frozen=True)
class LayoutConfig:
    domain_spacing: float = 150.0
    domain_footprint: Footprint = Footprint(100.0, 100.0, 50.0)
    team_footprint: Footprint = Footprint(40.0, 40.0, 50.0)
    team_padding: float = TREEMAP_PADDING
    service_spacing: float = 10.0

    def __post_init__(self) -> None:
        largest_side = max(self.domain_footprint.width, self.domain_footprint.height)
        if self.domain_spacing < largest_side:
            msg = (
                f"domain_spacing ({self.domain_spacing}) must be at least the domain "
                f"footprint ({largest_side})"
            )
            raise ValueError(msg)
        if self.service_spacing <= 0:
            msg = "service_spacing must be positive"
            raise ValueError(msg)


class HierarchyLayoutEngine(LayoutEngine):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def place_domains(self, items: Sequence[LayoutItem]) -> list[Position3D]:
        return place_grid(items, self.config.domain_spacing)

    def domain_bounds(self, position: Position3D) -> BoundingBox:
        return BoundingBox.anchored_at(position, self.config.domain_footprint)

    def pack_teams(self, items: Sequence[LayoutItem], bounds: BoundingBox) -> list[Position3D]:
        # Every team occupies the same footprint, whatever size the store reports.
        sized = [
            item.model_copy(update={"size": self.config.team_footprint.width}) for item in items
        ]
        return pack_treemap(sized, bounds, padding=self.config.team_padding)

    def team_bounds(self, position: Position3D) -> BoundingBox:
        return BoundingBox.anchored_at(position, self.config.team_footprint)

    def stack_services(
        self, items: Sequence[LayoutItem], bounds: BoundingBox
    ) -> list[Position3D]:
        return stack_services(items, bounds, self.config.service_spacing)
