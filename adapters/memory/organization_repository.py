from __future__ import annotations

from collections.abc import Iterable

from domain.models import LayoutItem, OrganizationDocument
from domain.ports.repositories import OrganizationRepository


def _by_name(items: Iterable[LayoutItem]) -> list[LayoutItem]:
    return sorted(items, key=lambda item: (item.name, item.id))


class InMemoryOrganizationRepository(OrganizationRepository):
    def __init__(self, document: OrganizationDocument | None = None) -> None:
        self._domains: list[LayoutItem] = []
        self._teams: dict[str, list[LayoutItem]] = {}
        self._services: dict[str, list[LayoutItem]] = {}
        self.replace(document or OrganizationDocument())

    def replace(self, document: OrganizationDocument) -> None:
        self._domains = _by_name(domain.to_layout_item() for domain in document.domains)
        self._teams = {
            domain.id: _by_name(team.to_layout_item() for team in domain.teams)
            for domain in document.domains
        }
        self._services = {
            team.id: _by_name(service.to_layout_item() for service in team.services)
            for domain in document.domains
            for team in domain.teams
        }

    def list_domains(self) -> list[LayoutItem]:
        return list(self._domains)

    def list_teams_of(self, domain_id: str) -> list[LayoutItem]:
        return list(self._teams.get(domain_id, []))

    def list_services_of(self, team_id: str) -> list[LayoutItem]:
        return list(self._services.get(team_id, []))
