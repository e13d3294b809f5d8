"""Club governance navigator: hierarchy, responsibility paths and shared view state."""

from src.organogram.coordinator import CoordinatorState, ViewCoordinator
from src.organogram.hierarchy import SYNTHETIC_ROOT_ID, TreeIndex, build_tree
from src.organogram.models import Category, OrgNode, ResponsibilityPath, ViewPreference
from src.organogram.persistence import PreferenceAdapter
from src.organogram.responsibility import ResponsibilityCatalog, build_catalog
from src.organogram.session import OrganogramSession

__all__ = [
    "Category",
    "CoordinatorState",
    "OrgNode",
    "OrganogramSession",
    "PreferenceAdapter",
    "ResponsibilityCatalog",
    "ResponsibilityPath",
    "SYNTHETIC_ROOT_ID",
    "TreeIndex",
    "ViewCoordinator",
    "ViewPreference",
    "build_catalog",
    "build_tree",
]
