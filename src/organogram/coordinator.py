"""View coordinator: the single writer of the navigator's shared UI state.

The three views (card tree, diagram, responsibility finder) only read from
the coordinator and call its commands; every command runs to completion
synchronously and then notifies subscribers with a ``NavigatorEvent``.
Rejected commands and expansion commands that change nothing stay silent.

State machine::

    { view: cards | diagram | finder, selected_member_id: str | None }

    switch_view(target)   any -> view=target, selection kept, preference saved
    select_member(id)     any -> selection=id (unknown ids rejected, state kept)
    clear_selection()     any -> selection=None
    focus_member(id)      any -> view=diagram, selection=id, preference untouched
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

import structlog

from src.infra.result import Err, Ok, Result
from src.organogram.errors import InvalidViewError, UnknownMemberError
from src.organogram.events import (
    EventHub,
    NavigatorEvent,
    NavigatorEventKind,
    Subscriber,
    UnsubscribeCallback,
)
from src.organogram.expansion import ExpansionState
from src.organogram.hierarchy import TreeIndex
from src.organogram.models import VIEW_MODES, OrgNode, ViewMode
from src.organogram.persistence import PreferenceAdapter

LOGGER = structlog.get_logger(__name__)

NARROW_VIEWPORT_MAX_WIDTH = 1023


@dataclass(frozen=True, slots=True)
class CoordinatorState:
    view: ViewMode
    selected_member_id: str | None = None


def responsive_default_view(
    viewport_width: int | None, narrow_max_width: int = NARROW_VIEWPORT_MAX_WIDTH
) -> ViewMode:
    """``cards`` on narrow viewports, ``diagram`` otherwise (and when unknown)."""
    if viewport_width is not None and viewport_width <= narrow_max_width:
        return "cards"
    return "diagram"


class ViewCoordinator:
    """Owns the active view, the selected member and the expansion state."""

    def __init__(
        self,
        tree: TreeIndex,
        preferences: PreferenceAdapter | None = None,
        *,
        viewport_width: int | None = None,
        narrow_max_width: int = NARROW_VIEWPORT_MAX_WIDTH,
    ) -> None:
        self._tree = tree
        self._preferences = preferences
        self._expansion = ExpansionState(tree)
        self._events = EventHub()

        # Viewport is measured once here; later resizes never change the view.
        stored = preferences.load() if preferences is not None else None
        if stored is not None:
            initial: ViewMode = stored.active_view
            source = "preference"
        else:
            initial = responsive_default_view(viewport_width, narrow_max_width)
            source = "responsive_default"
        self._state = CoordinatorState(view=initial)
        LOGGER.debug(
            "organogram.coordinator.mounted",
            view=initial,
            source=source,
            viewport_width=viewport_width,
        )

    # --- read-only projections ---

    @property
    def state(self) -> CoordinatorState:
        return self._state

    def snapshot(self) -> CoordinatorState:
        return self._state

    @property
    def view(self) -> ViewMode:
        return self._state.view

    @property
    def selected_member_id(self) -> str | None:
        return self._state.selected_member_id

    @property
    def selected_member(self) -> OrgNode | None:
        return self._tree.get(self._state.selected_member_id)

    def get_tree(self) -> TreeIndex:
        return self._tree

    def is_expanded(self, node_id: str) -> bool:
        return self._expansion.is_expanded(node_id)

    def expanded_ids(self) -> frozenset[str]:
        return self._expansion.snapshot()

    def subscribe(self, callback: Subscriber) -> UnsubscribeCallback:
        return self._events.subscribe(callback)

    # --- expansion commands (no-op calls publish nothing) ---

    def toggle(self, node_id: str) -> bool:
        before = self._expansion.snapshot()
        expanded = self._expansion.toggle(node_id)
        if self._expansion.snapshot() != before:
            self._notify("node_toggled", node_id=node_id)
        return expanded

    def expand_all(self, node_ids: Iterable[str] | None = None) -> None:
        before = self._expansion.snapshot()
        self._expansion.expand_all(node_ids)
        if self._expansion.snapshot() != before:
            self._notify("expanded_all")

    def collapse_all(self) -> None:
        before = self._expansion.snapshot()
        self._expansion.collapse_all()
        if self._expansion.snapshot() != before:
            self._notify("collapsed_all")

    # --- view / selection commands ---

    def switch_view(self, target: str) -> Result[CoordinatorState, InvalidViewError]:
        if target not in VIEW_MODES:
            LOGGER.warning("organogram.coordinator.invalid_view", view=target)
            return Err(InvalidViewError(target))
        view: ViewMode = target  # type: ignore[assignment]
        self._state = replace(self._state, view=view)
        if self._preferences is not None:
            # Best effort: a failed write leaves the in-memory switch in place.
            self._preferences.save(view)
        self._notify("view_switched")
        return Ok(self._state)

    def select_member(self, member_id: str) -> Result[CoordinatorState, UnknownMemberError]:
        if member_id not in self._tree:
            LOGGER.info(
                "organogram.coordinator.unknown_member",
                member_id=member_id,
                kept_selection=self._state.selected_member_id,
            )
            return Err(UnknownMemberError(member_id))
        self._state = replace(self._state, selected_member_id=member_id)
        self._notify("member_selected")
        return Ok(self._state)

    def clear_selection(self) -> CoordinatorState:
        self._state = replace(self._state, selected_member_id=None)
        self._notify("selection_cleared")
        return self._state

    def focus_member(self, member_id: str) -> Result[CoordinatorState, UnknownMemberError]:
        """Deep link from the finder: show the member in the diagram.

        The diagram is shown temporarily; the stored preference is not touched.
        """
        if member_id not in self._tree:
            return Err(UnknownMemberError(member_id))
        self._state = CoordinatorState(view="diagram", selected_member_id=member_id)
        self._notify("member_selected")
        return Ok(self._state)

    def _notify(self, kind: NavigatorEventKind, *, node_id: str | None = None) -> None:
        self._events.publish(
            NavigatorEvent(
                kind=kind,
                view=self._state.view,
                selected_member_id=self._state.selected_member_id,
                node_id=node_id,
            )
        )


__all__ = [
    "CoordinatorState",
    "NARROW_VIEWPORT_MAX_WIDTH",
    "ViewCoordinator",
    "responsive_default_view",
]
