"""Organogram specific error types."""

from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from src.infra.result import (
    ConfigurationError,
    Error,
    NotFoundError,
    StorageError,
    ValidationError,
)


class OrganogramErrorCode(str, Enum):
    """Stable tags for every failure the navigator can report.

    Fatal: CyclicHierarchy, DuplicateNodeId, InvalidResponsibilityPath,
    InvalidConfiguration. Everything else is recoverable.
    """

    CYCLIC_HIERARCHY = "CyclicHierarchy"
    DUPLICATE_NODE_ID = "DuplicateNodeId"
    ORPHAN_NODE = "OrphanNode"
    DANGLING_CONTACT_REFERENCE = "DanglingContactReference"
    DUPLICATE_CATEGORY = "DuplicateCategory"
    INVALID_RESPONSIBILITY_PATH = "InvalidResponsibilityPath"
    UNKNOWN_MEMBER = "UnknownMember"
    NOT_FOUND = "NotFound"
    PERSISTENCE_UNAVAILABLE = "PersistenceUnavailable"
    INVALID_CONFIGURATION = "InvalidConfiguration"
    INVALID_VIEW = "InvalidView"


class OrganogramError(Error):
    """Base error for organogram operations."""

    error_code: OrganogramErrorCode = OrganogramErrorCode.INVALID_CONFIGURATION
    fatal: bool = False


# --- hierarchy ---


class HierarchyError(OrganogramError, ValidationError):
    """Failure to build a tree from the member list."""

    fatal = True


class CyclicHierarchyError(HierarchyError):
    """One or more members are their own ancestor."""

    error_code = OrganogramErrorCode.CYCLIC_HIERARCHY

    def __init__(self, cycle_ids: Sequence[str], **kwargs: Any) -> None:
        self.cycle_ids: tuple[str, ...] = tuple(cycle_ids)
        super().__init__(
            f"Cyclic hierarchy between members: {', '.join(self.cycle_ids)}",
            context={"cycle_ids": list(self.cycle_ids)},
            **kwargs,
        )


class DuplicateNodeIdError(HierarchyError):
    error_code = OrganogramErrorCode.DUPLICATE_NODE_ID

    def __init__(self, node_ids: Sequence[str], **kwargs: Any) -> None:
        self.node_ids: tuple[str, ...] = tuple(node_ids)
        super().__init__(
            f"Duplicate member ids: {', '.join(self.node_ids)}",
            context={"node_ids": list(self.node_ids)},
            **kwargs,
        )


class OrphanNodeWarning(OrganogramError):
    """A member's parent does not exist; it was attached under the synthetic root."""

    error_code = OrganogramErrorCode.ORPHAN_NODE

    def __init__(self, node_id: str, missing_parent_id: str, **kwargs: Any) -> None:
        self.node_id = node_id
        self.missing_parent_id = missing_parent_id
        super().__init__(
            f"Member {node_id!r} references unknown parent {missing_parent_id!r}",
            context={"node_id": node_id, "missing_parent_id": missing_parent_id},
            **kwargs,
        )


# --- responsibility paths ---


class DanglingContactReferenceError(OrganogramError, ConfigurationError):
    error_code = OrganogramErrorCode.DANGLING_CONTACT_REFERENCE

    def __init__(
        self, path_id: str, member_id: str, *, step_index: int | None = None, **kwargs: Any
    ) -> None:
        self.path_id = path_id
        self.member_id = member_id
        self.step_index = step_index
        where = "primary contact" if step_index is None else f"step {step_index + 1}"
        super().__init__(
            f"Responsibility path {path_id!r} references unknown member {member_id!r} ({where})",
            context={"path_id": path_id, "member_id": member_id, "step_index": step_index},
            **kwargs,
        )


class DuplicateCategoryError(OrganogramError, ConfigurationError):
    """A later path repeats an already claimed category; the first one wins."""

    error_code = OrganogramErrorCode.DUPLICATE_CATEGORY

    def __init__(
        self,
        category: str,
        kept_path_id: str,
        ignored_path_id: str,
        **kwargs: Any,
    ) -> None:
        self.category = category
        self.kept_path_id = kept_path_id
        self.ignored_path_id = ignored_path_id
        super().__init__(
            f"Category {category!r} already resolved by {kept_path_id!r}; "
            f"{ignored_path_id!r} is ignored for category lookups",
            context={
                "category": category,
                "kept_path_id": kept_path_id,
                "ignored_path_id": ignored_path_id,
            },
            **kwargs,
        )


class InvalidResponsibilityPathError(OrganogramError, ValidationError):
    error_code = OrganogramErrorCode.INVALID_RESPONSIBILITY_PATH
    fatal = True

    def __init__(self, path_id: str, reason: str, **kwargs: Any) -> None:
        self.path_id = path_id
        super().__init__(
            f"Invalid responsibility path {path_id!r}: {reason}",
            context={"path_id": path_id, "reason": reason},
            **kwargs,
        )


class ResponsibilityNotFoundError(OrganogramError, NotFoundError):
    error_code = OrganogramErrorCode.NOT_FOUND

    def __init__(self, category: str, **kwargs: Any) -> None:
        self.category = category
        super().__init__(
            f"No responsibility path for category {category!r}",
            context={"category": category},
            **kwargs,
        )


# --- coordinator / persistence / configuration ---


class UnknownMemberError(OrganogramError, NotFoundError):
    error_code = OrganogramErrorCode.UNKNOWN_MEMBER

    def __init__(self, member_id: str, **kwargs: Any) -> None:
        self.member_id = member_id
        super().__init__(
            f"Unknown member {member_id!r}",
            context={"member_id": member_id},
            **kwargs,
        )


class InvalidViewError(OrganogramError, ValidationError):
    error_code = OrganogramErrorCode.INVALID_VIEW

    def __init__(self, view: str, **kwargs: Any) -> None:
        self.view = view
        super().__init__(
            f"Unknown view {view!r}",
            context={"view": view},
            **kwargs,
        )


class PersistenceUnavailableError(OrganogramError, StorageError):
    error_code = OrganogramErrorCode.PERSISTENCE_UNAVAILABLE


class NavigatorConfigError(OrganogramError, ConfigurationError):
    error_code = OrganogramErrorCode.INVALID_CONFIGURATION
    fatal = True


__all__ = [
    "CyclicHierarchyError",
    "DanglingContactReferenceError",
    "DuplicateCategoryError",
    "DuplicateNodeIdError",
    "HierarchyError",
    "InvalidResponsibilityPathError",
    "InvalidViewError",
    "NavigatorConfigError",
    "OrganogramError",
    "OrganogramErrorCode",
    "OrphanNodeWarning",
    "PersistenceUnavailableError",
    "ResponsibilityNotFoundError",
    "UnknownMemberError",
]
