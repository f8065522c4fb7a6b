from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

DEFAULT_CONFIG_PATH = Path("config/layout.yaml")


class S3Settings(BaseModel):
    bucket: str = ""
    key: str = "organization.json"
    region: str | None = None
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    use_path_style: bool = False


class OrganizationSettings(BaseModel):
    source: Literal["filesystem", "s3"] = "filesystem"
    path: Path = Path("data/organization.json")
    s3: S3Settings = S3Settings()

    @field_validator("source", mode="before")
    @classmethod
    def normalize_source(cls, value: object) -> str:
        return str(value).strip().lower() if value else "filesystem"


class CacheSettings(BaseModel):
    backend: Literal["filesystem", "memory"] = "filesystem"
    directory: Path = Path("data/layout_cache")
    ttl_seconds: float = Field(default=3600.0, gt=0)
    invalidate_on_start: bool = False

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, value: object) -> str:
        return str(value).strip().lower() if value else "filesystem"

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCAPE_", env_nested_delimiter="__")

    title: str = "Servicescape Layout"
    organization: OrganizationSettings = OrganizationSettings()
    cache: CacheSettings = CacheSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("SCAPE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
