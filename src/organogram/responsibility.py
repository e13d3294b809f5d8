"""Responsibility paths: load-time validation and "who do I contact" queries."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Sequence

import structlog

from src.infra.result import Err, Ok, Result, collect
from src.organogram.errors import (
    DanglingContactReferenceError,
    DuplicateCategoryError,
    InvalidResponsibilityPathError,
    OrganogramError,
    ResponsibilityNotFoundError,
)
from src.organogram.hierarchy import TreeIndex
from src.organogram.models import (
    Category,
    ContactRef,
    OrgNode,
    ResponsibilityPath,
    parse_category,
)

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedContact:
    """A contact reference enriched with the member it points to.

    ``member`` is ``None`` for role-only contacts and for dangling references;
    ``dangling`` tells the two apart.
    """

    ref: ContactRef
    member: OrgNode | None
    dangling: bool = False

    @property
    def member_id(self) -> str | None:
        return self.ref.member_id

    @property
    def is_resolved(self) -> bool:
        return self.member is not None

    @property
    def display_name(self) -> str:
        if self.member is not None:
            return self.member.name
        return self.ref.role or ""

    @property
    def title(self) -> str | None:
        if self.member is not None:
            return self.member.title
        return self.ref.role

    @property
    def email(self) -> str | None:
        if self.ref.email:
            return self.ref.email
        return self.member.email if self.member else None

    @property
    def phone(self) -> str | None:
        if self.ref.phone:
            return self.ref.phone
        return self.member.phone if self.member else None


@dataclass(frozen=True, slots=True)
class ResolvedStep:
    position: int
    label: str
    contact: ResolvedContact | None
    link: str | None = None

    @property
    def escalates_externally(self) -> bool:
        """No club member is attached to this step."""
        return self.contact is None or not self.contact.is_resolved


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    path: ResponsibilityPath
    primary_contact: ResolvedContact | None
    steps: tuple[ResolvedStep, ...]

    @property
    def id(self) -> str:
        return self.path.id

    @property
    def category(self) -> Category:
        return self.path.category


@dataclass(frozen=True, slots=True)
class MemberResponsibilities:
    as_primary: tuple[ResponsibilityPath, ...] = ()
    as_step_contact: tuple[ResponsibilityPath, ...] = ()

    @property
    def total(self) -> int:
        return len({p.id for p in self.as_primary} | {p.id for p in self.as_step_contact})


@lru_cache(maxsize=32)
def _referenced_ids(paths: tuple[ResponsibilityPath, ...]) -> frozenset[str]:
    member_ids: set[str] = set()
    for path in paths:
        member_ids.update(path.referenced_member_ids())
    return frozenset(member_ids)


def members_with_any_responsibility(paths: Iterable[ResponsibilityPath]) -> frozenset[str]:
    """Ids of every member referenced as primary or step contact."""
    return _referenced_ids(tuple(paths))


def category_label(category: str | Category) -> str:
    """Display label of a category tag; unknown tags fall back to the general label."""
    parsed = parse_category(category)
    return (parsed or Category.GENERAL).label


def _validate_path(
    path: ResponsibilityPath, seen_ids: set[str]
) -> Result[ResponsibilityPath, InvalidResponsibilityPathError]:
    if path.id in seen_ids:
        return Err(InvalidResponsibilityPathError(path.id, "duplicate path id"))
    seen_ids.add(path.id)
    if not path.steps and path.primary_contact is None:
        return Err(InvalidResponsibilityPathError(path.id, "no steps and no primary contact"))
    for position, step in enumerate(path.steps):
        if not step.label.strip():
            return Err(InvalidResponsibilityPathError(path.id, f"step {position + 1} has no label"))
    return Ok(path)


class ResponsibilityCatalog:
    """Validated, immutable set of responsibility paths bound to one tree.

    All queries are pure and linear in the total number of steps.
    """

    def __init__(
        self,
        paths: Sequence[ResponsibilityPath],
        tree: TreeIndex,
        warnings: Sequence[OrganogramError] = (),
    ) -> None:
        self._paths: tuple[ResponsibilityPath, ...] = tuple(paths)
        self._tree = tree
        self._warnings: tuple[OrganogramError, ...] = tuple(warnings)
        by_category: dict[Category, ResponsibilityPath] = {}
        for path in self._paths:
            by_category.setdefault(path.category, path)
        self._by_category = by_category
        self._by_id = {path.id: path for path in self._paths}

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def paths(self) -> tuple[ResponsibilityPath, ...]:
        return self._paths

    @property
    def warnings(self) -> tuple[OrganogramError, ...]:
        return self._warnings

    def get(self, path_id: str) -> ResponsibilityPath | None:
        return self._by_id.get(path_id)

    def categories(self) -> list[Category]:
        return list(self._by_category)

    def paths_in_category(self, category: str | Category) -> list[ResponsibilityPath]:
        """Every path of a category, including the ones shadowed for lookups."""
        parsed = parse_category(category)
        return [p for p in self._paths if p.category is parsed]

    def resolve_contact(self, ref: ContactRef | None) -> ResolvedContact | None:
        if ref is None:
            return None
        if ref.member_id is None:
            return ResolvedContact(ref=ref, member=None)
        member = self._tree.get(ref.member_id)
        return ResolvedContact(ref=ref, member=member, dangling=member is None)

    def resolve(self, path: ResponsibilityPath) -> ResolvedPath:
        steps = tuple(
            ResolvedStep(
                position=position,
                label=step.label,
                contact=self.resolve_contact(step.contact),
                link=step.link,
            )
            for position, step in enumerate(path.steps)
        )
        return ResolvedPath(
            path=path,
            primary_contact=self.resolve_contact(path.primary_contact),
            steps=steps,
        )

    def resolve_by_category(
        self, category: str | Category
    ) -> Result[ResolvedPath, ResponsibilityNotFoundError]:
        parsed = parse_category(category)
        path = self._by_category.get(parsed) if parsed is not None else None
        if path is None:
            tag = parsed.value if parsed is not None else str(category)
            return Err(ResponsibilityNotFoundError(tag))
        return Ok(self.resolve(path))

    def contacts_for_member(self, member_id: str) -> MemberResponsibilities:
        as_primary: list[ResponsibilityPath] = []
        as_step: list[ResponsibilityPath] = []
        for path in self._paths:
            primary = path.primary_contact
            if primary is not None and primary.member_id == member_id:
                as_primary.append(path)
            if any(s.contact is not None and s.contact.member_id == member_id for s in path.steps):
                as_step.append(path)
        return MemberResponsibilities(as_primary=tuple(as_primary), as_step_contact=tuple(as_step))

    def responsibility_count(self, member_id: str) -> int:
        return self.contacts_for_member(member_id).total

    def members_with_any_responsibility(self) -> frozenset[str]:
        """Responsible members that exist in the tree (dangling ids excluded)."""
        return frozenset(m for m in members_with_any_responsibility(self._paths) if m in self._tree)


def build_catalog(
    paths: Iterable[ResponsibilityPath], tree: TreeIndex
) -> Result[ResponsibilityCatalog, InvalidResponsibilityPathError]:
    """Validate paths against the tree.

    Structurally invalid paths reject the whole load. Dangling member
    references and repeated categories are kept as warnings and logged once.
    """
    seen_ids: set[str] = set()
    validated = collect(_validate_path(path, seen_ids) for path in paths)
    if isinstance(validated, Err):
        LOGGER.error(
            "organogram.paths.invalid",
            path_id=validated.error.path_id,
            reason=validated.error.context.get("reason"),
        )
        return Err(validated.error)

    ordered = validated.value
    warnings: list[OrganogramError] = []
    category_owner: dict[Category, str] = {}

    for path in ordered:
        primary = path.primary_contact
        if primary is not None and primary.member_id and primary.member_id not in tree:
            warnings.append(DanglingContactReferenceError(path.id, primary.member_id))
        for position, step in enumerate(path.steps):
            if step.contact is not None and step.contact.member_id:
                if step.contact.member_id not in tree:
                    warnings.append(
                        DanglingContactReferenceError(
                            path.id, step.contact.member_id, step_index=position
                        )
                    )

        owner = category_owner.get(path.category)
        if owner is None:
            category_owner[path.category] = path.id
        else:
            warnings.append(DuplicateCategoryError(path.category.value, owner, path.id))

    for warning in warnings:
        LOGGER.warning(
            "organogram.paths.warning",
            code=warning.error_code.value,
            error=warning.message,
            context=warning.log_safe_context(),
        )

    catalog = ResponsibilityCatalog(ordered, tree, warnings)
    LOGGER.debug(
        "organogram.paths.loaded",
        paths=len(catalog),
        categories=len(category_owner),
        warnings=len(warnings),
    )
    return Ok(catalog)


__all__ = [
    "MemberResponsibilities",
    "ResolvedContact",
    "ResolvedPath",
    "ResolvedStep",
    "ResponsibilityCatalog",
    "build_catalog",
    "category_label",
    "members_with_any_responsibility",
]
