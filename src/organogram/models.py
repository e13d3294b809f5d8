"""Domain models for the club organogram."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Department = Literal["hoofdbestuur", "jeugdbestuur", "general"]
DEPARTMENTS: tuple[str, ...] = ("hoofdbestuur", "jeugdbestuur", "general")

# Who is asking a question in the responsibility finder.
UserRole = Literal["speler", "ouder", "trainer", "supporter", "niet-lid", "andere"]
USER_ROLES: tuple[str, ...] = ("speler", "ouder", "trainer", "supporter", "niet-lid", "andere")

ViewMode = Literal["cards", "diagram", "finder"]
VIEW_MODES: tuple[str, ...] = ("cards", "diagram", "finder")


class Category(str, Enum):
    """Concern categories of responsibility paths.

    Values are the tags used in the club content; the member names are the
    English aliases accepted by ``parse_category``.
    """

    MEDICAL = "medisch"
    SPORTING = "sportief"
    ADMINISTRATIVE = "administratief"
    BEHAVIORAL = "gedrag"
    GENERAL = "algemeen"
    COMMERCIAL = "commercieel"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def parse_category(raw: str | Category) -> Category | None:
    """Parse a category tag or its English alias; ``None`` when unknown."""
    if isinstance(raw, Category):
        return raw
    key = raw.strip().lower()
    for category in Category:
        if key in (category.value, category.name.lower()):
            return category
    return None


@dataclass(frozen=True, slots=True)
class OrgNode:
    """One governance role or person in the club structure."""

    id: str
    name: str
    title: str
    parent_id: str | None = None
    department: str = "general"
    email: str | None = None
    phone: str | None = None
    image_url: str | None = None
    position_short: str | None = None
    responsibilities: str | None = None
    profile_url: str | None = None


@dataclass(frozen=True, slots=True)
class ContactRef:
    """Reference to the member who handles a path or a step.

    ``member_id`` may be missing when the content only names a role
    (e.g. "Trainer"), which is a valid "escalate externally" contact.
    """

    member_id: str | None = None
    role: str | None = None
    note: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None


@dataclass(frozen=True, slots=True)
class PathStep:
    label: str
    contact: ContactRef | None = None
    link: str | None = None


@dataclass(frozen=True, slots=True)
class ResponsibilityPath:
    """Escalation chain for one concern; step order is significant."""

    id: str
    category: Category
    primary_contact: ContactRef | None
    steps: tuple[PathStep, ...] = ()
    question: str = ""
    summary: str = ""
    keywords: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    icon: str | None = None

    def referenced_member_ids(self) -> list[str]:
        """Member ids referenced by the primary contact and the steps, in order."""
        ids: list[str] = []
        if self.primary_contact is not None and self.primary_contact.member_id:
            ids.append(self.primary_contact.member_id)
        for step in self.steps:
            if step.contact is not None and step.contact.member_id:
                ids.append(step.contact.member_id)
        return ids


class ViewPreference(BaseModel):
    """Persisted view preference: ``{"activeView": ..., "version": ...}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    active_view: ViewMode = Field(alias="activeView")
    version: int = Field(ge=1)


__all__ = [
    "Category",
    "ContactRef",
    "DEPARTMENTS",
    "Department",
    "OrgNode",
    "PathStep",
    "ResponsibilityPath",
    "USER_ROLES",
    "UserRole",
    "VIEW_MODES",
    "ViewMode",
    "ViewPreference",
    "parse_category",
]
