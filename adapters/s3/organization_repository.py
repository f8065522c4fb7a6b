from __future__ import annotations

from typing import cast

import boto3  # type: ignore[import-untyped]
import orjson
from botocore.client import BaseClient  # type: ignore[import-untyped]
from botocore.config import Config  # type: ignore[import-untyped]
from botocore.exceptions import ClientError  # type: ignore[import-untyped]

from adapters.memory.organization_repository import InMemoryOrganizationRepository
from app.config import S3Settings
from domain.models import LayoutItem, OrganizationDocument
from domain.ports.repositories import OrganizationRepository

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


def build_organization_client(settings: S3Settings) -> BaseClient:
    # Empty strings from YAML or env mean "let boto3 resolve it".
    return boto3.client(
        "s3",
        region_name=settings.region or None,
        endpoint_url=settings.endpoint_url or None,
        aws_access_key_id=settings.access_key_id or None,
        aws_secret_access_key=settings.secret_access_key or None,
        aws_session_token=settings.session_token or None,
        config=Config(s3={"addressing_style": "path"}) if settings.use_path_style else None,
    )


class S3OrganizationRepository(OrganizationRepository):
    """Organization document stored as a single JSON object in a bucket."""

    def __init__(self, client: BaseClient, bucket: str, key: str) -> None:
        self._client = client
        self._bucket = bucket
        self._key = key.lstrip("/")
        self._snapshot = InMemoryOrganizationRepository()

    @classmethod
    def from_settings(cls, settings: S3Settings) -> S3OrganizationRepository:
        return cls(build_organization_client(settings), settings.bucket, settings.key)

    def load(self) -> OrganizationDocument:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=self._key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise FileNotFoundError(f"s3://{self._bucket}/{self._key}") from exc
            raise
        body = response.get("Body")
        raw = cast(bytes, body.read()) if hasattr(body, "read") else b"{}"
        payload = orjson.loads(raw)
        return OrganizationDocument.model_validate(payload if isinstance(payload, dict) else {})

    def list_domains(self) -> list[LayoutItem]:
        self._snapshot.replace(self.load())
        return self._snapshot.list_domains()

    def list_teams_of(self, domain_id: str) -> list[LayoutItem]:
        return self._snapshot.list_teams_of(domain_id)

    def list_services_of(self, team_id: str) -> list[LayoutItem]:
        return self._snapshot.list_services_of(team_id)
