"""Unit tests for the navigator session facade."""

from __future__ import annotations

import json
import pathlib

import pytest

from src.config.settings import NavigatorSettings
from src.infra.result import Err, Ok
from src.organogram.coordinator import NARROW_VIEWPORT_MAX_WIDTH, ViewCoordinator
from src.organogram.errors import (
    CyclicHierarchyError,
    DanglingContactReferenceError,
    NavigatorConfigError,
    OrphanNodeWarning,
    UnknownMemberError,
)
from src.organogram.hierarchy import TreeIndex
from src.organogram.loader import NavigatorConfig
from src.organogram.models import Category, ContactRef, OrgNode, ResponsibilityPath
from src.organogram.persistence import MemoryPreferenceStorage
from src.organogram.responsibility import ResponsibilityCatalog
from src.organogram.session import OrganogramSession


@pytest.fixture
def session(club_tree: TreeIndex, catalog: ResponsibilityCatalog) -> OrganogramSession:
    return OrganogramSession(club_tree, catalog, ViewCoordinator(club_tree))


@pytest.mark.unit
class TestOpen:
    def test_open_bundled_config(self, bundled_config_path: pathlib.Path) -> None:
        settings = NavigatorSettings(config_path=bundled_config_path)
        storage = MemoryPreferenceStorage()

        result = OrganogramSession.open(settings, storage=storage, viewport_width=600)

        assert isinstance(result, Ok)
        session = result.value
        assert session.state.view == "cards"
        assert session.warnings == ()
        assert session.resolve_by_category("gedrag").unwrap().primary_contact is not None

        session.switch_view("finder")
        assert json.loads(storage.items[settings.preference_key])["activeView"] == "finder"

    def test_open_restores_file_preference(
        self, bundled_config_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        settings = NavigatorSettings(
            config_path=bundled_config_path,
            preference_path=tmp_path / "prefs.json",
        )
        OrganogramSession.open(settings).unwrap().switch_view("cards")

        reopened = OrganogramSession.open(settings, viewport_width=1920).unwrap()

        assert reopened.state.view == "cards"

    def test_open_missing_config(self, tmp_path: pathlib.Path) -> None:
        settings = NavigatorSettings(config_path=tmp_path / "missing.json")

        result = OrganogramSession.open(settings, storage=MemoryPreferenceStorage())

        assert isinstance(result, Err)
        assert isinstance(result.error, NavigatorConfigError)


@pytest.mark.unit
class TestFromConfig:
    def test_cycle_is_returned_as_error(self) -> None:
        config = NavigatorConfig(
            version=1,
            members=(
                OrgNode(id="a", name="A", title="A", parent_id="b"),
                OrgNode(id="b", name="B", title="B", parent_id="a"),
            ),
            paths=(),
        )

        result = OrganogramSession.from_config(config)

        assert isinstance(result, Err)
        assert isinstance(result.error, CyclicHierarchyError)

    def test_warnings_from_tree_and_catalog(self) -> None:
        config = NavigatorConfig(
            version=1,
            members=(
                OrgNode(id="club", name="Club", title="Club"),
                OrgNode(id="lost", name="Lost", title="Lid", parent_id="gone"),
            ),
            paths=(
                ResponsibilityPath(
                    id="vraag",
                    category=Category.GENERAL,
                    primary_contact=ContactRef(member_id="ghost"),
                ),
            ),
        )

        session = OrganogramSession.from_config(config).unwrap()

        assert [type(w) for w in session.warnings] == [
            OrphanNodeWarning,
            DanglingContactReferenceError,
        ]

    @pytest.mark.parametrize(
        ("width", "expected"),
        [(NARROW_VIEWPORT_MAX_WIDTH, "cards"), (NARROW_VIEWPORT_MAX_WIDTH + 1, "diagram")],
    )
    def test_from_config_uses_shared_breakpoint(self, width: int, expected: str) -> None:
        config = NavigatorConfig(
            version=1, members=(OrgNode(id="club", name="Club", title="Club"),), paths=()
        )

        session = OrganogramSession.from_config(config, viewport_width=width).unwrap()

        assert session.state.view == expected


@pytest.mark.unit
class TestSessionOperations:
    def test_member_details(self, session: OrganogramSession) -> None:
        details = session.member_details("insurance-officer").unwrap()

        assert details.supervisor is not None
        assert details.supervisor.id == "secretary"
        assert details.direct_reports == ()
        assert details.breadcrumb == ("club", "president", "secretary", "insurance-officer")
        assert details.has_responsibilities is True

    def test_member_details_lists_direct_reports(self, session: OrganogramSession) -> None:
        details = session.member_details("president").unwrap()

        assert [m.id for m in details.direct_reports] == [
            "secretary",
            "treasurer",
            "youth-coordinator",
        ]
        assert details.has_responsibilities is False

    def test_member_details_unknown(self, session: OrganogramSession) -> None:
        result = session.member_details("ghost")

        assert isinstance(result, Err)
        assert isinstance(result.error, UnknownMemberError)

    def test_delegates_to_coordinator(self, session: OrganogramSession) -> None:
        session.select_member("treasurer")
        assert session.state.selected_member_id == "treasurer"

        session.focus_member("trainer-u10")
        assert session.state.view == "diagram"
        assert session.state.selected_member_id == "trainer-u10"

        session.clear_selection()
        assert session.state.selected_member_id is None

        assert session.toggle("president") is True
        assert session.is_expanded("president")
        session.collapse_all()
        assert not session.is_expanded("club")
        session.expand_all()
        assert session.is_expanded("youth-coordinator")

    def test_responsibility_queries(self, session: OrganogramSession) -> None:
        assert session.members_with_any_responsibility() == {
            "insurance-officer",
            "trainer-u10",
            "secretary",
            "treasurer",
        }
        assert session.contacts_for_member("treasurer").as_step_contact
        assert isinstance(session.resolve_by_category("commercieel"), Err)

    def test_search_and_finder(self, session: OrganogramSession) -> None:
        results = session.search("verzekering")
        hits = session.find_paths(role="ouder", question="ongeval")

        assert results.members[0].member.id == "insurance-officer"
        assert [h.path.id for h in hits] == ["ongeval"]
        assert session.get_tree() is session.coordinator.get_tree()
