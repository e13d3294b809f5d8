#!/usr/bin/env python3
"""Validate an organogram configuration file.

Builds the member tree and the responsibility catalog exactly as the
navigator does, prints the tree outline and every warning, and exits with
status 1 on fatal configuration errors. A per-type count of every problem
found closes the report.

Usage:
    python scripts/validate_organogram.py [path/to/organogram.json] [--quiet] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import sys

from src.config.settings import get_settings
from src.infra.logging.config import configure_logging
from src.infra.result import Err, get_error_metrics, reset_error_metrics
from src.organogram.hierarchy import SYNTHETIC_ROOT_ID, TreeIndex, build_tree
from src.organogram.loader import load_config
from src.organogram.responsibility import build_catalog


def _print_outline(tree: TreeIndex) -> None:
    stack = [(node_id, 0) for node_id in reversed(tree.child_ids(SYNTHETIC_ROOT_ID))]
    while stack:
        node_id, depth = stack.pop()
        node = tree.get(node_id)
        if node is None:
            continue
        marker = " (orphan)" if node_id in tree.orphan_ids else ""
        print(f"{'  ' * depth}- {node.title}: {node.name} [{node.id}]{marker}")
        stack.extend((child, depth + 1) for child in reversed(tree.child_ids(node_id)))


def _print_problem_counts() -> None:
    counts = {name: n for name, n in get_error_metrics().items() if name != "__total__"}
    if counts:
        summary = ", ".join(f"{name}={count}" for name, count in sorted(counts.items()))
        print(f"problems by type: {summary}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="validate_organogram",
        description="Check members and responsibility paths of the club organogram.",
    )
    parser.add_argument("path", nargs="?", help="Configuration file (defaults to settings)")
    parser.add_argument("--quiet", action="store_true", help="Only print problems")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for the JSON log lines (defaults to settings)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)
    reset_error_metrics()
    path = args.path or settings.config_path

    config_result = load_config(path)
    if isinstance(config_result, Err):
        print(f"ERROR {config_result.error.error_code.value}: {config_result.error.message}")
        return 1
    config = config_result.value

    tree_result = build_tree(config.members)
    if isinstance(tree_result, Err):
        print(f"ERROR {tree_result.error.error_code.value}: {tree_result.error.message}")
        return 1
    tree = tree_result.value

    catalog_result = build_catalog(config.paths, tree)
    if isinstance(catalog_result, Err):
        print(f"ERROR {catalog_result.error.error_code.value}: {catalog_result.error.message}")
        return 1
    catalog = catalog_result.value

    if not args.quiet:
        _print_outline(tree)
        print()
        print(f"{len(tree)} members, {len(catalog)} responsibility paths, depth {tree.max_depth}")
        for department, count in sorted(tree.department_counts().items()):
            print(f"  {department}: {count}")

    for warning in (*tree.warnings, *catalog.warnings):
        print(f"WARNING {warning.error_code.value}: {warning.message}")
    _print_problem_counts()
    return 0


if __name__ == "__main__":
    sys.exit(main())
