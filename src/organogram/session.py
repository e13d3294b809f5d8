"""Navigator session: one load of the static configuration, shared by all views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import structlog

from src.config.settings import NavigatorSettings, get_settings
from src.infra.result import Err, Ok, Result
from src.organogram.coordinator import (
    NARROW_VIEWPORT_MAX_WIDTH,
    CoordinatorState,
    ViewCoordinator,
)
from src.organogram.errors import (
    InvalidViewError,
    OrganogramError,
    ResponsibilityNotFoundError,
    UnknownMemberError,
)
from src.organogram.events import Subscriber, UnsubscribeCallback
from src.organogram.hierarchy import TreeIndex, build_tree
from src.organogram.loader import NavigatorConfig, load_config
from src.organogram.models import Category, OrgNode
from src.organogram.persistence import (
    FilePreferenceStorage,
    PreferenceAdapter,
    PreferenceStorage,
)
from src.organogram.responsibility import (
    MemberResponsibilities,
    ResolvedPath,
    ResponsibilityCatalog,
    build_catalog,
)
from src.organogram.search import PathHit, SearchResults, find_paths, unified_search

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MemberDetails:
    """Everything the member detail panel shows."""

    member: OrgNode
    supervisor: OrgNode | None
    direct_reports: tuple[OrgNode, ...]
    breadcrumb: tuple[str, ...]
    responsibilities: MemberResponsibilities

    @property
    def has_responsibilities(self) -> bool:
        return self.responsibilities.total > 0


class OrganogramSession:
    """Facade exposing the UI-facing operations of the navigator.

    The tree and the responsibility catalog are built once and never change;
    all mutable state lives in the ``ViewCoordinator``.
    """

    def __init__(
        self,
        tree: TreeIndex,
        catalog: ResponsibilityCatalog,
        coordinator: ViewCoordinator,
    ) -> None:
        self._tree = tree
        self._catalog = catalog
        self._coordinator = coordinator

    @classmethod
    def from_config(
        cls,
        config: NavigatorConfig,
        *,
        preferences: PreferenceAdapter | None = None,
        viewport_width: int | None = None,
        narrow_max_width: int = NARROW_VIEWPORT_MAX_WIDTH,
    ) -> Result["OrganogramSession", OrganogramError]:
        """Build tree and catalog; fatal configuration errors are returned, not raised."""
        tree_result = build_tree(config.members)
        if isinstance(tree_result, Err):
            return Err(tree_result.error)
        tree = tree_result.value

        catalog_result = build_catalog(config.paths, tree)
        if isinstance(catalog_result, Err):
            return Err(catalog_result.error)

        coordinator = ViewCoordinator(
            tree,
            preferences,
            viewport_width=viewport_width,
            narrow_max_width=narrow_max_width,
        )
        session = cls(tree, catalog_result.value, coordinator)
        LOGGER.info(
            "organogram.session.ready",
            members=len(tree),
            paths=len(catalog_result.value),
            warnings=len(session.warnings),
            view=coordinator.view,
        )
        return Ok(session)

    @classmethod
    def open(
        cls,
        settings: NavigatorSettings | None = None,
        *,
        storage: PreferenceStorage | None = None,
        viewport_width: int | None = None,
    ) -> Result["OrganogramSession", OrganogramError]:
        """Load the configured JSON file and restore the stored view preference."""
        settings = settings or get_settings()
        preferences = PreferenceAdapter(
            storage if storage is not None else FilePreferenceStorage(settings.preference_path),
            key=settings.preference_key,
            version=settings.preference_version,
        )
        return load_config(settings.config_path).and_then(
            lambda config: cls.from_config(
                config,
                preferences=preferences,
                viewport_width=viewport_width,
                narrow_max_width=settings.narrow_viewport_max_width,
            )
        )

    # --- shared read-only data ---

    @property
    def coordinator(self) -> ViewCoordinator:
        return self._coordinator

    @property
    def catalog(self) -> ResponsibilityCatalog:
        return self._catalog

    @property
    def state(self) -> CoordinatorState:
        return self._coordinator.state

    @property
    def warnings(self) -> tuple[OrganogramError, ...]:
        return (*self._tree.warnings, *self._catalog.warnings)

    def get_tree(self) -> TreeIndex:
        return self._tree

    def subscribe(self, callback: Subscriber) -> UnsubscribeCallback:
        return self._coordinator.subscribe(callback)

    # --- expansion ---

    def is_expanded(self, node_id: str) -> bool:
        return self._coordinator.is_expanded(node_id)

    def toggle(self, node_id: str) -> bool:
        return self._coordinator.toggle(node_id)

    def expand_all(self, node_ids: Iterable[str] | None = None) -> None:
        self._coordinator.expand_all(node_ids)

    def collapse_all(self) -> None:
        self._coordinator.collapse_all()

    # --- view / selection ---

    def switch_view(self, view: str) -> Result[CoordinatorState, InvalidViewError]:
        return self._coordinator.switch_view(view)

    def select_member(self, member_id: str) -> Result[CoordinatorState, UnknownMemberError]:
        return self._coordinator.select_member(member_id)

    def clear_selection(self) -> CoordinatorState:
        return self._coordinator.clear_selection()

    def focus_member(self, member_id: str) -> Result[CoordinatorState, UnknownMemberError]:
        return self._coordinator.focus_member(member_id)

    # --- responsibilities ---

    def resolve_by_category(
        self, category: str | Category
    ) -> Result[ResolvedPath, ResponsibilityNotFoundError]:
        return self._catalog.resolve_by_category(category)

    def contacts_for_member(self, member_id: str) -> MemberResponsibilities:
        return self._catalog.contacts_for_member(member_id)

    def members_with_any_responsibility(self) -> frozenset[str]:
        return self._catalog.members_with_any_responsibility()

    def member_details(self, member_id: str) -> Result[MemberDetails, UnknownMemberError]:
        member = self._tree.get(member_id)
        if member is None:
            return Err(UnknownMemberError(member_id))
        return Ok(
            MemberDetails(
                member=member,
                supervisor=self._tree.parent(member_id),
                direct_reports=tuple(self._tree.children(member_id)),
                breadcrumb=tuple(self._tree.path(member_id)),
                responsibilities=self._catalog.contacts_for_member(member_id),
            )
        )

    # --- search ---

    def search(self, query: str, max_results: int = 5) -> SearchResults:
        return unified_search(self._tree.nodes(), self._catalog.paths, query, max_results)

    def find_paths(self, role: str | None = None, question: str = "") -> list[PathHit]:
        return find_paths(self._catalog.paths, role=role, question=question)


__all__ = ["MemberDetails", "OrganogramSession"]
