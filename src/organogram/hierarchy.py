"""Build a validated tree index from the flat, parent-pointer member list."""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

import structlog

from src.infra.result import Err, Ok, Result
from src.organogram.errors import (
    CyclicHierarchyError,
    DuplicateNodeIdError,
    HierarchyError,
    OrphanNodeWarning,
)
from src.organogram.models import OrgNode

LOGGER = structlog.get_logger(__name__)

# Parent of every real root and every orphan. Never a member id itself.
SYNTHETIC_ROOT_ID = "__organogram_root__"


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """Derived position of one member in the tree."""

    node: OrgNode
    depth: int
    parent_id: str | None
    child_ids: tuple[str, ...]
    descendant_count: int

    @property
    def direct_report_count(self) -> int:
        return len(self.child_ids)


class TreeIndex:
    """Immutable index over the club structure.

    Members are stored flat by id; children are kept as id tuples in input
    order. ``parent_id`` on an entry is the *resolved* parent, so it is
    ``None`` for roots and for orphans. Lookups with unknown ids return empty
    values instead of raising.
    """

    __slots__ = ("_entries", "_root_ids", "_orphan_ids", "_warnings")

    def __init__(
        self,
        entries: Mapping[str, TreeEntry],
        root_ids: Sequence[str],
        orphan_ids: Sequence[str],
        warnings: Sequence[OrphanNodeWarning] = (),
    ) -> None:
        self._entries: Mapping[str, TreeEntry] = MappingProxyType(dict(entries))
        self._root_ids: tuple[str, ...] = tuple(root_ids)
        self._orphan_ids: frozenset[str] = frozenset(orphan_ids)
        self._warnings: tuple[OrphanNodeWarning, ...] = tuple(warnings)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    @property
    def root_ids(self) -> tuple[str, ...]:
        """Children of the synthetic root: declared roots and orphans, in input order."""
        return self._root_ids

    @property
    def orphan_ids(self) -> frozenset[str]:
        return self._orphan_ids

    @property
    def warnings(self) -> tuple[OrphanNodeWarning, ...]:
        return self._warnings

    @property
    def max_depth(self) -> int:
        return max((e.depth for e in self._entries.values()), default=-1)

    def entry(self, node_id: str) -> TreeEntry | None:
        return self._entries.get(node_id)

    def get(self, node_id: str | None) -> OrgNode | None:
        if node_id is None:
            return None
        entry = self._entries.get(node_id)
        return entry.node if entry else None

    def nodes(self) -> list[OrgNode]:
        return [e.node for e in self._entries.values()]

    def depth(self, node_id: str) -> int | None:
        entry = self._entries.get(node_id)
        return entry.depth if entry else None

    def child_ids(self, node_id: str) -> tuple[str, ...]:
        if node_id == SYNTHETIC_ROOT_ID:
            return self._root_ids
        entry = self._entries.get(node_id)
        return entry.child_ids if entry else ()

    def children(self, node_id: str) -> list[OrgNode]:
        return [self._entries[c].node for c in self.child_ids(node_id)]

    def direct_report_count(self, node_id: str) -> int:
        return len(self.child_ids(node_id))

    def has_children(self, node_id: str) -> bool:
        return bool(self.child_ids(node_id))

    def descendant_count(self, node_id: str) -> int:
        entry = self._entries.get(node_id)
        return entry.descendant_count if entry else 0

    def parent(self, node_id: str) -> OrgNode | None:
        entry = self._entries.get(node_id)
        if entry is None or entry.parent_id is None:
            return None
        return self._entries[entry.parent_id].node

    def ancestors(self, node_id: str) -> list[OrgNode]:
        """Parent chain from the immediate parent up to the root."""
        chain: list[OrgNode] = []
        entry = self._entries.get(node_id)
        while entry is not None and entry.parent_id is not None:
            entry = self._entries[entry.parent_id]
            chain.append(entry.node)
        return chain

    def path(self, node_id: str) -> list[str]:
        """Ids from the root down to ``node_id`` (inclusive); empty if unknown."""
        if node_id not in self._entries:
            return []
        ids = [a.id for a in reversed(self.ancestors(node_id))]
        ids.append(node_id)
        return ids

    def ids_at_depth(self, depth: int) -> list[str]:
        return [node_id for node_id, e in self._entries.items() if e.depth == depth]

    def expandable_ids(self) -> list[str]:
        return [node_id for node_id, e in self._entries.items() if e.child_ids]

    def members_in_department(self, department: str | None) -> list[OrgNode]:
        """Members of one department; ``None`` or ``"all"`` returns everyone."""
        if department in (None, "all"):
            return self.nodes()
        return [e.node for e in self._entries.values() if e.node.department == department]

    def department_counts(self) -> dict[str, int]:
        counts: Counter[str] = Counter(e.node.department for e in self._entries.values())
        return dict(counts)


def _find_cycle_ids(index: Mapping[str, OrgNode], order: Sequence[str]) -> list[str]:
    """Walk every ancestor chain once and return the ids sitting on a cycle."""
    done: set[str] = set()
    on_cycle: set[str] = set()
    for start in order:
        if start in done:
            continue
        chain: list[str] = []
        position: dict[str, int] = {}
        current: str | None = start
        while current is not None and current in index and current not in done:
            if current in position:
                on_cycle.update(chain[position[current] :])
                break
            position[current] = len(chain)
            chain.append(current)
            current = index[current].parent_id
        done.update(chain)
    return [node_id for node_id in order if node_id in on_cycle]


def build_tree(nodes: Iterable[OrgNode]) -> Result[TreeIndex, HierarchyError]:
    """Build a ``TreeIndex`` from a flat member list.

    Returns ``Err`` for duplicate ids or cycles; no partial tree is ever
    produced. Members whose parent is missing are attached under the
    synthetic root and reported as ``OrphanNodeWarning``.
    """
    ordered = list(nodes)

    id_counts = Counter(node.id for node in ordered)
    duplicates = [node_id for node_id, count in id_counts.items() if count > 1]
    if duplicates:
        error = DuplicateNodeIdError(duplicates)
        LOGGER.error("organogram.tree.duplicate_ids", node_ids=duplicates)
        return Err(error)

    index: dict[str, OrgNode] = {node.id: node for node in ordered}
    order = [node.id for node in ordered]

    cycle_ids = _find_cycle_ids(index, order)
    if cycle_ids:
        LOGGER.error("organogram.tree.cycle", cycle_ids=cycle_ids)
        return Err(CyclicHierarchyError(cycle_ids))

    root_ids: list[str] = []
    orphan_ids: list[str] = []
    warnings: list[OrphanNodeWarning] = []
    children: dict[str, list[str]] = {node_id: [] for node_id in order}
    resolved_parent: dict[str, str | None] = {}

    for node in ordered:
        parent_id = node.parent_id
        if parent_id is None:
            root_ids.append(node.id)
            resolved_parent[node.id] = None
        elif parent_id not in index:
            root_ids.append(node.id)
            orphan_ids.append(node.id)
            resolved_parent[node.id] = None
            warning = OrphanNodeWarning(node.id, parent_id)
            warnings.append(warning)
            LOGGER.warning(
                "organogram.tree.orphan",
                node_id=node.id,
                missing_parent_id=parent_id,
            )
        else:
            children[parent_id].append(node.id)
            resolved_parent[node.id] = parent_id

    depths: dict[str, int] = {}
    bfs_order: list[str] = []
    queue: deque[str] = deque()
    for root_id in root_ids:
        depths[root_id] = 0
        queue.append(root_id)
    while queue:
        current = queue.popleft()
        bfs_order.append(current)
        for child_id in children[current]:
            depths[child_id] = depths[current] + 1
            queue.append(child_id)

    descendants: dict[str, int] = {node_id: 0 for node_id in order}
    for node_id in reversed(bfs_order):
        parent_id = resolved_parent[node_id]
        if parent_id is not None:
            descendants[parent_id] += descendants[node_id] + 1

    entries = {
        node_id: TreeEntry(
            node=index[node_id],
            depth=depths[node_id],
            parent_id=resolved_parent[node_id],
            child_ids=tuple(children[node_id]),
            descendant_count=descendants[node_id],
        )
        for node_id in order
    }

    tree = TreeIndex(entries, root_ids, orphan_ids, warnings)
    LOGGER.debug(
        "organogram.tree.built",
        members=len(tree),
        roots=len(root_ids),
        orphans=len(orphan_ids),
        max_depth=tree.max_depth,
    )
    return Ok(tree)


__all__ = ["SYNTHETIC_ROOT_ID", "TreeEntry", "TreeIndex", "build_tree"]
