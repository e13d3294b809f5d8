"""Unit tests for the view coordinator state machine."""

from __future__ import annotations

import pathlib

import pytest

from src.infra.result import Err, Ok
from src.organogram.coordinator import (
    CoordinatorState,
    ViewCoordinator,
    responsive_default_view,
)
from src.organogram.errors import InvalidViewError, UnknownMemberError
from src.organogram.events import NavigatorEvent
from src.organogram.hierarchy import SYNTHETIC_ROOT_ID, TreeIndex
from src.organogram.persistence import (
    FilePreferenceStorage,
    MemoryPreferenceStorage,
    PreferenceAdapter,
)

PREFERENCE_KEY = "test-view-preference"


@pytest.mark.unit
class TestResponsiveDefault:
    @pytest.mark.parametrize(
        ("width", "expected"),
        [(375, "cards"), (1023, "cards"), (1024, "diagram"), (1920, "diagram"), (None, "diagram")],
    )
    def test_breakpoint(self, width: int | None, expected: str) -> None:
        assert responsive_default_view(width) == expected

    def test_custom_breakpoint(self) -> None:
        assert responsive_default_view(800, narrow_max_width=767) == "diagram"


@pytest.mark.unit
class TestMount:
    def test_no_preference_uses_viewport(
        self, club_tree: TreeIndex, preferences: PreferenceAdapter
    ) -> None:
        coordinator = ViewCoordinator(club_tree, preferences, viewport_width=390)

        assert coordinator.state == CoordinatorState(view="cards", selected_member_id=None)

    def test_stored_preference_wins_over_viewport(
        self, club_tree: TreeIndex, memory_storage: MemoryPreferenceStorage
    ) -> None:
        memory_storage.items[PREFERENCE_KEY] = '{"activeView": "finder", "version": 2}'
        adapter = PreferenceAdapter(memory_storage, key=PREFERENCE_KEY, version=2)

        coordinator = ViewCoordinator(club_tree, adapter, viewport_width=390)

        assert coordinator.view == "finder"

    def test_older_preference_version_is_ignored(
        self, club_tree: TreeIndex, memory_storage: MemoryPreferenceStorage
    ) -> None:
        memory_storage.items[PREFERENCE_KEY] = '{"activeView": "cards", "version": 1}'
        adapter = PreferenceAdapter(memory_storage, key=PREFERENCE_KEY, version=2)

        coordinator = ViewCoordinator(club_tree, adapter, viewport_width=1440)

        assert coordinator.view == "diagram"

    def test_undecodable_preference_file_falls_back_to_viewport(
        self, club_tree: TreeIndex, tmp_path: pathlib.Path
    ) -> None:
        path = tmp_path / "prefs.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        adapter = PreferenceAdapter(FilePreferenceStorage(path), key=PREFERENCE_KEY)

        coordinator = ViewCoordinator(club_tree, adapter, viewport_width=500)

        assert coordinator.view == "cards"
        assert coordinator.switch_view("finder").unwrap().view == "finder"
        stored = adapter.load()
        assert stored is not None
        assert stored.active_view == "finder"

    def test_without_adapter(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)

        assert coordinator.view == "diagram"
        assert coordinator.snapshot() == CoordinatorState(view="diagram")
        assert coordinator.get_tree() is club_tree
        assert coordinator.expanded_ids() == {"club"}


@pytest.mark.unit
class TestViewSwitching:
    def test_switch_view_persists(
        self,
        club_tree: TreeIndex,
        preferences: PreferenceAdapter,
        memory_storage: MemoryPreferenceStorage,
    ) -> None:
        coordinator = ViewCoordinator(club_tree, preferences, viewport_width=1440)

        result = coordinator.switch_view("finder")

        assert isinstance(result, Ok)
        assert result.value.view == "finder"
        stored = preferences.load()
        assert stored is not None
        assert stored.active_view == "finder"
        assert PREFERENCE_KEY in memory_storage.items

    def test_switch_view_keeps_selection(
        self, club_tree: TreeIndex, preferences: PreferenceAdapter
    ) -> None:
        coordinator = ViewCoordinator(club_tree, preferences)
        coordinator.select_member("treasurer")

        state = coordinator.switch_view("cards").unwrap()

        assert state.selected_member_id == "treasurer"

    def test_invalid_view_is_rejected(
        self,
        club_tree: TreeIndex,
        preferences: PreferenceAdapter,
        memory_storage: MemoryPreferenceStorage,
    ) -> None:
        coordinator = ViewCoordinator(club_tree, preferences)

        result = coordinator.switch_view("timeline")

        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidViewError)
        assert coordinator.view == "diagram"
        assert memory_storage.items == {}

    def test_switch_survives_unavailable_storage(self, club_tree: TreeIndex) -> None:
        storage = MemoryPreferenceStorage(available=False)
        adapter = PreferenceAdapter(storage, key=PREFERENCE_KEY, version=2)
        coordinator = ViewCoordinator(club_tree, adapter, viewport_width=500)

        result = coordinator.switch_view("diagram")

        assert isinstance(result, Ok)
        assert coordinator.view == "diagram"


@pytest.mark.unit
class TestSelection:
    def test_select_and_clear(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)

        state = coordinator.select_member("secretary").unwrap()

        assert state.selected_member_id == "secretary"
        assert coordinator.selected_member is not None
        assert coordinator.selected_member.title == "Secretaris"

        assert coordinator.clear_selection().selected_member_id is None
        assert coordinator.selected_member is None

    def test_unknown_member_keeps_previous_selection(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)
        coordinator.select_member("president")

        result = coordinator.select_member("ghost")

        assert isinstance(result, Err)
        assert isinstance(result.error, UnknownMemberError)
        assert result.error.member_id == "ghost"
        assert coordinator.selected_member_id == "president"

    def test_focus_member_switches_to_diagram_without_persisting(
        self,
        club_tree: TreeIndex,
        preferences: PreferenceAdapter,
    ) -> None:
        coordinator = ViewCoordinator(club_tree, preferences)
        coordinator.switch_view("finder")

        state = coordinator.focus_member("insurance-officer").unwrap()

        assert state == CoordinatorState(view="diagram", selected_member_id="insurance-officer")
        stored = preferences.load()
        assert stored is not None
        assert stored.active_view == "finder"

    def test_focus_unknown_member(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree, viewport_width=320)

        assert isinstance(coordinator.focus_member("ghost"), Err)
        assert coordinator.view == "cards"


@pytest.mark.unit
class TestNotifications:
    def test_every_command_notifies_with_new_state(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)
        events: list[NavigatorEvent] = []
        coordinator.subscribe(events.append)

        coordinator.switch_view("cards")
        coordinator.select_member("president")
        coordinator.toggle("president")
        coordinator.expand_all()
        coordinator.collapse_all()
        coordinator.clear_selection()

        assert [e.kind for e in events] == [
            "view_switched",
            "member_selected",
            "node_toggled",
            "expanded_all",
            "collapsed_all",
            "selection_cleared",
        ]
        assert events[1].selected_member_id == "president"
        assert events[2].node_id == "president"
        assert all(e.view == "cards" for e in events)

    def test_rejected_commands_do_not_notify(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)
        events: list[NavigatorEvent] = []
        coordinator.subscribe(events.append)

        coordinator.switch_view("timeline")
        coordinator.select_member("ghost")

        assert events == []

    def test_noop_expansion_commands_do_not_notify(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)
        events: list[NavigatorEvent] = []
        coordinator.subscribe(events.append)

        assert coordinator.toggle("trainer-u10") is False
        assert coordinator.toggle("ghost") is False
        assert coordinator.toggle(SYNTHETIC_ROOT_ID) is False
        coordinator.expand_all(["treasurer"])
        coordinator.collapse_all()
        coordinator.collapse_all()

        assert [e.kind for e in events] == ["collapsed_all"]
        assert coordinator.expanded_ids() == frozenset()

    def test_expansion_is_shared_across_views(self, club_tree: TreeIndex) -> None:
        coordinator = ViewCoordinator(club_tree)

        assert coordinator.toggle("president") is True
        coordinator.switch_view("finder")
        coordinator.switch_view("cards")

        assert coordinator.is_expanded("president")
