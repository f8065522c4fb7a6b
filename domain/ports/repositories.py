from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import LayoutItem


class OrganizationRepository(Protocol):
    def list_domains(self) -> Sequence[LayoutItem]: ...

    def list_teams_of(self, domain_id: str) -> Sequence[LayoutItem]: ...

    def list_services_of(self, team_id: str) -> Sequence[LayoutItem]: ...
