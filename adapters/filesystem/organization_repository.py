from __future__ import annotations

from pathlib import Path

from adapters.filesystem.json_utils import load_json
from adapters.memory.organization_repository import InMemoryOrganizationRepository
from domain.models import LayoutItem, OrganizationDocument
from domain.ports.repositories import OrganizationRepository


class FileSystemOrganizationRepository(OrganizationRepository):
    """Reads the organization from a JSON document on disk.

    The file is re-read on every ``list_domains`` call, so one layout computation
    sees one consistent snapshot and the next one picks up edits.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._snapshot = InMemoryOrganizationRepository()

    def load(self) -> OrganizationDocument:
        return OrganizationDocument.model_validate(load_json(self._path))

    def list_domains(self) -> list[LayoutItem]:
        self._snapshot.replace(self.load())
        return self._snapshot.list_domains()

    def list_teams_of(self, domain_id: str) -> list[LayoutItem]:
        return self._snapshot.list_teams_of(domain_id)

    def list_services_of(self, team_id: str) -> list[LayoutItem]:
        return self._snapshot.list_services_of(team_id)
