"""
Centralized Hierarchy Traversal Utilities for Flow.

The agent directory is a forest: every profile points at its upline via
`upline_id`. Everything that needs "an agent and everyone under them"
(analytics, deal house, my agency, leaderboard scoping, the cron reports)
goes through `get_downline_closure`.

The traversal functions are pure and work on any list of dicts or objects;
the id/parent attribute names are parameters. `load_directory` and
`get_team_ids` are the thin database wrappers.
"""
from collections import deque
from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from .constants import MAX_DOWNLINE_NODES


def _read(node: Any, field: str):
    if isinstance(node, Mapping):
        return node.get(field)
    return getattr(node, field, None)


def build_children_map(
    nodes: Iterable[Any],
    id_field: str = 'id',
    parent_field: str = 'upline_id',
) -> dict[Hashable, list[Hashable]]:
    """
    Map each parent id to the ids of its direct children.

    Nodes without a parent are left out. Build this once when computing the
    closure of many roots over the same directory.
    """
    children: dict[Hashable, list[Hashable]] = {}
    for node in nodes:
        node_id = _read(node, id_field)
        parent_id = _read(node, parent_field)
        if node_id is None or parent_id is None:
            continue
        children.setdefault(parent_id, []).append(node_id)
    return children


def closure_from_children(
    root_id: Hashable,
    children: Mapping[Hashable, list[Hashable]],
    max_nodes: int = MAX_DOWNLINE_NODES,
) -> list[Hashable]:
    """
    Breadth-first walk from root_id over a children map.

    Returns ids in BFS order, root first, each once. Stops silently once
    max_nodes ids have been collected.
    """
    if root_id is None or max_nodes < 1:
        return []

    seen = {root_id}
    out = [root_id]
    queue = deque([root_id])

    while queue and len(out) < max_nodes:
        current = queue.popleft()
        for child_id in children.get(current, ()):
            if child_id in seen:
                continue
            seen.add(child_id)
            out.append(child_id)
            if len(out) >= max_nodes:
                break
            queue.append(child_id)

    return out


def get_downline_closure(
    root_id: Hashable,
    nodes: Iterable[Any],
    id_field: str = 'id',
    parent_field: str = 'upline_id',
    max_nodes: int = MAX_DOWNLINE_NODES,
) -> list[Hashable]:
    """
    Get the root plus every node transitively under it.

    Args:
        root_id: Id to start from. Included even if absent from nodes.
        nodes: Flat directory (dicts or objects)
        id_field: Attribute holding a node's id
        parent_field: Attribute holding a node's parent id
        max_nodes: Hard cap on the result size

    Returns:
        List of ids in breadth-first order, root first
    """
    children = build_children_map(nodes, id_field=id_field, parent_field=parent_field)
    return closure_from_children(root_id, children, max_nodes=max_nodes)


def get_upline_chain(
    start_id: Hashable,
    nodes: Iterable[Any],
    id_field: str = 'id',
    parent_field: str = 'upline_id',
    max_nodes: int = MAX_DOWNLINE_NODES,
) -> list[Hashable]:
    """
    Walk parent pointers from start_id upward.

    Returns [start_id, parent, grandparent, ...]; stops at a root, an id
    missing from the directory, or an already visited id.
    """
    parents = {_read(node, id_field): _read(node, parent_field) for node in nodes}
    chain: list[Hashable] = []
    seen: set[Hashable] = set()
    current = start_id

    while current is not None and current not in seen and len(chain) < max_nodes:
        seen.add(current)
        chain.append(current)
        current = parents.get(current)

    return chain


def would_create_cycle(
    node_id: Hashable,
    new_parent_id: Hashable | None,
    nodes: Iterable[Any],
    id_field: str = 'id',
    parent_field: str = 'upline_id',
) -> bool:
    """True if pointing node_id at new_parent_id would close a loop."""
    if new_parent_id is None:
        return False
    if new_parent_id == node_id:
        return True
    descendants = get_downline_closure(
        node_id, nodes, id_field=id_field, parent_field=parent_field, max_nodes=10**9,
    )
    return new_parent_id in set(descendants)


def load_directory() -> list[dict]:
    """Load the flat profile directory used by the traversal functions."""
    from .models import Profile

    return list(
        Profile.objects.values(
            'id', 'upline_id', 'email', 'first_name', 'last_name', 'role', 'is_agency_owner',
        )
    )


def get_team_ids(root_id, directory: list[dict] | None = None) -> list:
    """Root plus downline, loading the directory when not supplied."""
    if directory is None:
        directory = load_directory()
    return get_downline_closure(root_id, directory)
