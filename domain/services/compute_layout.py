from __future__ import annotations

import logging

from domain.models import LayoutPositions
from domain.ports.layout import LayoutEngine
from domain.ports.repositories import OrganizationRepository
from domain.services.collision import find_collisions
from domain.services.layout_cache import LayoutCache

logger = logging.getLogger(__name__)


class ComputeLayout:
    """Walks domains, teams and services and places each level inside its parent."""

    def __init__(
        self,
        repository: OrganizationRepository,
        engine: LayoutEngine,
        cache: LayoutCache,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._cache = cache

    def compute(self) -> LayoutPositions:
        positions = LayoutPositions()

        domains = list(self._repository.list_domains())
        for domain, position in zip(domains, self._engine.place_domains(domains), strict=True):
            positions.domains[domain.id] = position

        for domain in domains:
            teams = list(self._repository.list_teams_of(domain.id))
            if not teams:
                continue
            domain_bounds = self._engine.domain_bounds(positions.domains[domain.id])
            team_positions = self._engine.pack_teams(teams, domain_bounds)
            for team, position in zip(teams, team_positions, strict=True):
                positions.teams[team.id] = position
            self._warn_on_collisions(domain.id, [team.id for team in teams], positions)

            for team in teams:
                services = list(self._repository.list_services_of(team.id))
                if not services:
                    continue
                team_bounds = self._engine.team_bounds(positions.teams[team.id])
                service_positions = self._engine.stack_services(services, team_bounds)
                for service, position in zip(services, service_positions, strict=True):
                    positions.services[service.id] = position

        logger.info(
            "Computed layout: %d domains, %d teams, %d services.",
            len(positions.domains),
            len(positions.teams),
            len(positions.services),
        )
        self._cache.put(positions)
        return positions

    def _warn_on_collisions(
        self,
        domain_id: str,
        team_ids: list[str],
        positions: LayoutPositions,
    ) -> None:
        boxes = {team_id: self._engine.team_bounds(positions.teams[team_id]) for team_id in team_ids}
        for left, right in find_collisions(boxes):
            logger.warning(
                "Teams %s and %s overlap inside domain %s.", left, right, domain_id
            )
