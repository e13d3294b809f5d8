"""Load the static club structure configuration (members + responsibility paths)."""

from __future__ import annotations

import json
import pathlib
from dataclasses import dataclass
from typing import Any, Mapping

import pydantic
import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.infra.result import Err, Ok, Result
from src.organogram.errors import NavigatorConfigError
from src.organogram.models import (
    USER_ROLES,
    Category,
    ContactRef,
    OrgNode,
    PathStep,
    ResponsibilityPath,
    parse_category,
)

LOGGER = structlog.get_logger(__name__)


class _RawModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class RawMember(_RawModel):
    id: str = Field(min_length=1)
    name: str
    title: str = ""
    parent_id: str | None = Field(default=None, alias="parentId")
    department: str = "general"
    email: str | None = None
    phone: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    position_short: str | None = Field(default=None, alias="positionShort")
    responsibilities: str | None = None
    profile_url: str | None = Field(default=None, alias="profileUrl")

    @field_validator("parent_id")
    @classmethod
    def blank_parent_is_root(cls, v: str | None) -> str | None:
        return v or None

    def to_node(self) -> OrgNode:
        return OrgNode(
            id=self.id,
            name=self.name,
            title=self.title,
            parent_id=self.parent_id,
            department=self.department,
            email=self.email,
            phone=self.phone,
            image_url=self.image_url,
            position_short=self.position_short,
            responsibilities=self.responsibilities,
            profile_url=self.profile_url,
        )


class RawContact(_RawModel):
    member_id: str | None = Field(default=None, alias="memberId")
    role: str | None = None
    note: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None

    def to_ref(self) -> ContactRef:
        return ContactRef(
            member_id=self.member_id or None,
            role=self.role,
            note=self.note,
            email=self.email,
            phone=self.phone,
            department=self.department,
        )


class RawStep(_RawModel):
    label: str = Field(validation_alias=AliasChoices("label", "description"))
    order: int | None = None
    link: str | None = None
    contact: RawContact | None = None


class RawPath(_RawModel):
    id: str = Field(min_length=1)
    category: Category
    primary_contact: RawContact | None = Field(default=None, alias="primaryContact")
    steps: list[RawStep] = Field(default_factory=list)
    question: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list, validation_alias=AliasChoices("roles", "role"))
    icon: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def accept_category_alias(cls, v: Any) -> Any:
        if isinstance(v, str):
            parsed = parse_category(v)
            if parsed is None:
                raise ValueError(f"unknown category {v!r}")
            return parsed
        return v

    @field_validator("roles")
    @classmethod
    def known_roles(cls, v: list[str]) -> list[str]:
        unknown = [role for role in v if role not in USER_ROLES]
        if unknown:
            raise ValueError(f"unknown user roles: {', '.join(unknown)}")
        return v

    def to_path(self) -> ResponsibilityPath:
        steps = list(self.steps)
        if steps and all(step.order is not None for step in steps):
            steps.sort(key=lambda step: step.order or 0)
        return ResponsibilityPath(
            id=self.id,
            category=self.category,
            primary_contact=self.primary_contact.to_ref() if self.primary_contact else None,
            steps=tuple(
                PathStep(
                    label=step.label,
                    contact=step.contact.to_ref() if step.contact else None,
                    link=step.link,
                )
                for step in steps
            ),
            question=self.question,
            summary=self.summary,
            keywords=tuple(self.keywords),
            roles=tuple(self.roles),
            icon=self.icon,
        )


class RawConfig(_RawModel):
    version: int = Field(default=1, ge=1)
    members: list[RawMember] = Field(
        default_factory=list, validation_alias=AliasChoices("members", "nodes")
    )
    responsibility_paths: list[RawPath] = Field(
        default_factory=list,
        validation_alias=AliasChoices("responsibility_paths", "responsibilityPaths", "paths"),
    )


@dataclass(frozen=True, slots=True)
class NavigatorConfig:
    version: int
    members: tuple[OrgNode, ...]
    paths: tuple[ResponsibilityPath, ...]


def parse_config(data: Mapping[str, Any]) -> Result[NavigatorConfig, NavigatorConfigError]:
    """Validate an already decoded configuration document."""
    try:
        raw = RawConfig.model_validate(data)
    except pydantic.ValidationError as exc:
        LOGGER.error("organogram.config.invalid", errors=exc.error_count())
        return Err(
            NavigatorConfigError(
                f"Invalid organogram configuration: {exc.error_count()} error(s)",
                context={"errors": [str(e["loc"]) + ": " + e["msg"] for e in exc.errors()]},
                cause=exc,
            )
        )
    return Ok(
        NavigatorConfig(
            version=raw.version,
            members=tuple(m.to_node() for m in raw.members),
            paths=tuple(p.to_path() for p in raw.responsibility_paths),
        )
    )


def load_config(path: str | pathlib.Path) -> Result[NavigatorConfig, NavigatorConfigError]:
    """Load and validate a JSON configuration file."""
    config_path = pathlib.Path(path)
    if not config_path.exists():
        LOGGER.error("organogram.config.file_not_found", path=str(config_path))
        return Err(
            NavigatorConfigError(
                f"Configuration file not found: {config_path}",
                context={"path": str(config_path)},
            )
        )
    try:
        with config_path.open(encoding="utf-8-sig") as f:
            data: Any = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.error("organogram.config.unreadable", path=str(config_path), error=str(exc))
        return Err(
            NavigatorConfigError(
                f"Configuration file could not be read: {config_path}",
                context={"path": str(config_path)},
                cause=exc,
            )
        )
    if not isinstance(data, dict):
        return Err(
            NavigatorConfigError(
                "Configuration must be a JSON object",
                context={"path": str(config_path)},
            )
        )

    result = parse_config(data)
    if isinstance(result, Ok):
        LOGGER.info(
            "organogram.config.loaded",
            path=str(config_path),
            members=len(result.value.members),
            paths=len(result.value.paths),
        )
    return result


__all__ = ["NavigatorConfig", "load_config", "parse_config"]
