from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator

LAYOUT_CACHE_KEY = "layout_all"
LAYOUT_TYPE_DOMAIN_GRID = "DOMAIN_GRID"
DEFAULT_ITEM_SIZE = 50.0


class LayoutItem(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    size: Optional[float] = None
    tier: Optional[str] = None

    def effective_size(self, default: float = DEFAULT_ITEM_SIZE) -> float:
        # A zero size is treated as absent.
        return float(self.size) if self.size else default


class ServiceRecord(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    tier: Optional[str] = None

    def to_layout_item(self) -> LayoutItem:
        return LayoutItem(id=self.id, name=self.name, tier=self.tier)


class TeamRecord(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    size: Optional[float] = None
    services: List[ServiceRecord] = Field(default_factory=list)

    @field_validator("services", mode="after")
    @classmethod
    def ensure_unique_service_ids(cls, services: List[ServiceRecord]) -> List[ServiceRecord]:
        _ensure_unique_ids("service", [service.id for service in services])
        return services

    def to_layout_item(self) -> LayoutItem:
        return LayoutItem(id=self.id, name=self.name, size=self.size)


class DomainRecord(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    teams: List[TeamRecord] = Field(default_factory=list)

    @field_validator("teams", mode="after")
    @classmethod
    def ensure_unique_team_ids(cls, teams: List[TeamRecord]) -> List[TeamRecord]:
        _ensure_unique_ids("team", [team.id for team in teams])
        return teams

    def to_layout_item(self) -> LayoutItem:
        return LayoutItem(id=self.id, name=self.name)


class OrganizationDocument(BaseModel):
    domains: List[DomainRecord] = Field(default_factory=list)

    @field_validator("domains", mode="after")
    @classmethod
    def ensure_globally_unique_ids(cls, domains: List[DomainRecord]) -> List[DomainRecord]:
        _ensure_unique_ids("domain", [domain.id for domain in domains])
        _ensure_unique_ids("team", [team.id for domain in domains for team in domain.teams])
        _ensure_unique_ids(
            "service",
            [
                service.id
                for domain in domains
                for team in domain.teams
                for service in team.services
            ],
        )
        return domains


def _ensure_unique_ids(kind: str, ids: List[str]) -> None:
    seen: Set[str] = set()
    for item_id in ids:
        if item_id in seen:
            msg = f"Duplicate {kind} id found: {item_id}"
            raise ValueError(msg)
        seen.add(item_id)


@dataclass(frozen=True)
class Position3D:
    x: float
    y: float
    z: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Position3D:
        return cls(
            x=float(payload.get("x", 0.0)),
            y=float(payload.get("y", 0.0)),
            z=float(payload.get("z", 0.0)),
        )


@dataclass(frozen=True)
class Footprint:
    width: float
    height: float
    depth: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned volume owned by one placed entity.

    ``width`` runs along x, ``height`` along y and ``depth`` along z, which is the
    vertical axis.
    """

    x: float
    y: float
    z: float
    width: float
    height: float
    depth: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0 or self.depth < 0:
            msg = f"Bounding box extents must be non-negative: {self}"
            raise ValueError(msg)

    @classmethod
    def anchored_at(cls, position: Position3D, footprint: Footprint) -> BoundingBox:
        return cls(
            x=position.x,
            y=position.y,
            z=position.z,
            width=footprint.width,
            height=footprint.height,
            depth=footprint.depth,
        )

    @property
    def origin(self) -> Position3D:
        return Position3D(self.x, self.y, self.z)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def min_z(self) -> float:
        return self.z

    @property
    def max_z(self) -> float:
        return self.z + self.depth


@dataclass
class LayoutPositions:
    domains: Dict[str, Position3D] = field(default_factory=dict)
    teams: Dict[str, Position3D] = field(default_factory=dict)
    services: Dict[str, Position3D] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, float]]]:
        return {
            "domains": {key: value.to_dict() for key, value in self.domains.items()},
            "teams": {key: value.to_dict() for key, value in self.teams.items()},
            "services": {key: value.to_dict() for key, value in self.services.items()},
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> LayoutPositions:
        return cls(
            domains=_load_position_map(payload.get("domains")),
            teams=_load_position_map(payload.get("teams")),
            services=_load_position_map(payload.get("services")),
        )


def _load_position_map(raw: Any) -> Dict[str, Position3D]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): Position3D.from_dict(value)
        for key, value in raw.items()
        if isinstance(value, dict)
    }


@dataclass(frozen=True)
class CacheEntry:
    cache_key: str
    layout_type: str
    positions: LayoutPositions
    metadata: Dict[str, Any]
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @property
    def version(self) -> int | None:
        value = self.metadata.get("version")
        # bool is an int subclass; a stored `true` is not a version.
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_usable(self, now: datetime, version: int) -> bool:
        return not self.is_expired(now) and self.version == version

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cache_key": self.cache_key,
            "layout_type": self.layout_type,
            "positions": self.positions.to_dict(),
            "metadata": dict(self.metadata),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> CacheEntry:
        """Load a stored entry.

        Only ``expires_at`` is required. Older entries without ``created_at`` or
        ``updated_at`` fall back to it, and naive timestamps are read as UTC.
        """
        metadata = payload.get("metadata")
        positions = payload.get("positions")
        expires_at = _parse_timestamp(payload["expires_at"])
        updated_at = _parse_optional_timestamp(payload.get("updated_at")) or expires_at
        return cls(
            cache_key=str(payload.get("cache_key", "")),
            layout_type=str(payload.get("layout_type", "")),
            positions=LayoutPositions.from_dict(positions if isinstance(positions, dict) else {}),
            metadata=dict(metadata) if isinstance(metadata, dict) else {},
            created_at=_parse_optional_timestamp(payload.get("created_at")) or updated_at,
            updated_at=updated_at,
            expires_at=expires_at,
        )


def _parse_timestamp(raw: Any) -> datetime:
    value = datetime.fromisoformat(str(raw))
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _parse_optional_timestamp(raw: Any) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    return _parse_timestamp(raw)
