"""Expansion state of the card hierarchy view."""

from __future__ import annotations

from typing import Iterable

from src.organogram.hierarchy import TreeIndex


class ExpansionState:
    """Set of expanded member ids.

    Only members with children can be expanded; toggling a leaf or an unknown
    id is a no-op. The state never changes the tree, it can always be
    rebuilt with ``reset_to_default``.
    """

    def __init__(self, tree: TreeIndex, expanded: Iterable[str] | None = None) -> None:
        self._tree = tree
        self._expanded: set[str] = set()
        if expanded is None:
            self.reset_to_default()
        else:
            self._expanded = {i for i in expanded if self._can_expand(i)}

    @staticmethod
    def default_expanded(tree: TreeIndex) -> set[str]:
        """Depth-0 members with children: a readable first screen."""
        return {i for i in tree.root_ids if tree.has_children(i)}

    def reset_to_default(self) -> None:
        self._expanded = self.default_expanded(self._tree)

    def _can_expand(self, node_id: str) -> bool:
        return node_id in self._tree and self._tree.has_children(node_id)

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self._expanded

    def toggle(self, node_id: str) -> bool:
        """Flip one member; returns the new state (``False`` for leaves)."""
        if not self._can_expand(node_id):
            return False
        if node_id in self._expanded:
            self._expanded.discard(node_id)
            return False
        self._expanded.add(node_id)
        return True

    def expand_all(self, node_ids: Iterable[str] | None = None) -> None:
        """Expand the given members, or every expandable member when omitted."""
        candidates = self._tree.expandable_ids() if node_ids is None else node_ids
        self._expanded.update(i for i in candidates if self._can_expand(i))

    def collapse_all(self) -> None:
        self._expanded.clear()

    def expand_path_to(self, node_id: str) -> None:
        """Expand every ancestor so ``node_id`` becomes visible in the card view."""
        for ancestor in self._tree.ancestors(node_id):
            self._expanded.add(ancestor.id)

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def __len__(self) -> int:
        return len(self._expanded)


__all__ = ["ExpansionState"]
