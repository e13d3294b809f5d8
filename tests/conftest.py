from __future__ import annotations

import pathlib

import pytest
from faker import Faker

from src.organogram.hierarchy import TreeIndex, build_tree
from src.organogram.models import (
    Category,
    ContactRef,
    OrgNode,
    PathStep,
    ResponsibilityPath,
)
from src.organogram.persistence import MemoryPreferenceStorage, PreferenceAdapter
from src.organogram.responsibility import ResponsibilityCatalog, build_catalog

BUNDLED_CONFIG = pathlib.Path(__file__).parent.parent / "src" / "config" / "organogram.json"


@pytest.fixture
def faker() -> Faker:
    """Dutch and English names, like the club's member list."""
    return Faker(["nl_BE", "en_US"])


@pytest.fixture
def bundled_config_path() -> pathlib.Path:
    return BUNDLED_CONFIG


@pytest.fixture
def abc_nodes() -> list[OrgNode]:
    """The three-level chain a -> b -> c."""
    return [
        OrgNode(id="a", name="A", title="Root", parent_id=None),
        OrgNode(id="b", name="B", title="Middle", parent_id="a"),
        OrgNode(id="c", name="C", title="Leaf", parent_id="b"),
    ]


@pytest.fixture
def club_nodes() -> list[OrgNode]:
    return [
        OrgNode(id="club", name="KCVV Elewijt", title="Voetbalclub"),
        OrgNode(
            id="president",
            name="Jan Peeters",
            title="Voorzitter",
            parent_id="club",
            department="hoofdbestuur",
            email="voorzitter@example.org",
            position_short="PRES",
        ),
        OrgNode(
            id="secretary",
            name="An Janssens",
            title="Secretaris",
            parent_id="president",
            department="hoofdbestuur",
            email="secretaris@example.org",
        ),
        OrgNode(
            id="treasurer",
            name="Piet Maes",
            title="Penningmeester",
            parent_id="president",
            department="hoofdbestuur",
        ),
        OrgNode(
            id="youth-coordinator",
            name="Els Claes",
            title="Jeugdcoördinator",
            parent_id="president",
            department="jeugdbestuur",
        ),
        OrgNode(
            id="trainer-u10",
            name="Tom Wouters",
            title="Trainer U10",
            parent_id="youth-coordinator",
            department="jeugdbestuur",
        ),
        OrgNode(
            id="insurance-officer",
            name="Lies Goossens",
            title="Verzekeringsverantwoordelijke",
            parent_id="secretary",
            department="jeugdbestuur",
            phone="+32 470 00 00 00",
        ),
    ]


@pytest.fixture
def club_tree(club_nodes: list[OrgNode]) -> TreeIndex:
    return build_tree(club_nodes).unwrap()


@pytest.fixture
def medical_path() -> ResponsibilityPath:
    return ResponsibilityPath(
        id="ongeval",
        category=Category.MEDICAL,
        primary_contact=ContactRef(member_id="insurance-officer", role="Verzekeringen"),
        steps=(
            PathStep(label="Verwittig je trainer", contact=ContactRef(member_id="trainer-u10")),
            PathStep(label="Laat het formulier invullen door je arts"),
            PathStep(
                label="Bezorg het formulier",
                contact=ContactRef(member_id="insurance-officer"),
            ),
        ),
        question="heb een ongeval gehad",
        summary="Meld het ongeval aan de verzekeringsverantwoordelijke.",
        keywords=("ongeval", "blessure", "verzekering"),
        roles=("speler", "ouder"),
    )


@pytest.fixture
def admin_path() -> ResponsibilityPath:
    return ResponsibilityPath(
        id="inschrijving",
        category=Category.ADMINISTRATIVE,
        primary_contact=ContactRef(member_id="secretary", role="Secretaris"),
        steps=(
            PathStep(label="Vul het formulier in", link="/club/inschrijven"),
            PathStep(label="Betaal het lidgeld", contact=ContactRef(member_id="treasurer")),
        ),
        question="wil mij graag inschrijven",
        summary="Gebruik het online inschrijvingsformulier.",
        keywords=("inschrijven", "lid worden"),
        roles=("niet-lid", "ouder"),
    )


@pytest.fixture
def catalog(
    club_tree: TreeIndex,
    medical_path: ResponsibilityPath,
    admin_path: ResponsibilityPath,
) -> ResponsibilityCatalog:
    return build_catalog([medical_path, admin_path], club_tree).unwrap()


@pytest.fixture
def memory_storage() -> MemoryPreferenceStorage:
    return MemoryPreferenceStorage()


@pytest.fixture
def preferences(memory_storage: MemoryPreferenceStorage) -> PreferenceAdapter:
    return PreferenceAdapter(memory_storage, key="test-view-preference", version=2)
