"""Tree building from flat adjacency-list rows (categories, navigation nodes)"""

from typing import Any, Callable, Dict, Iterable, List, Optional


def build_tree(
    rows: Iterable[Dict[str, Any]],
    id_key: str = "id",
    parent_key: str = "parent_id",
    position_key: str = "position",
) -> List[Dict[str, Any]]:
    """Link flat rows into a forest sorted by position at every level.

    Each returned node is a shallow copy of its row with a ``children`` list.
    A row whose parent is missing from ``rows`` is placed at the root. Rows
    caught in a parent cycle are unreachable from any root; the first such
    row (in input order) is promoted to the root, which breaks the cycle and
    keeps the rest of it as its subtree.
    """
    nodes: Dict[Any, Dict[str, Any]] = {}
    order: List[Any] = []
    for row in rows:
        node = dict(row)
        node["children"] = []
        nodes[node[id_key]] = node
        order.append(node[id_key])

    roots: List[Dict[str, Any]] = []
    parent_of: Dict[Any, Optional[Any]] = {}
    for node_id in order:
        node = nodes[node_id]
        parent_id = node.get(parent_key)
        parent = nodes.get(parent_id) if parent_id is not None else None
        if parent is None or parent_id == node_id:
            roots.append(node)
            parent_of[node_id] = None
        else:
            parent["children"].append(node)
            parent_of[node_id] = parent_id

    reachable = set()

    def mark(node: Dict[str, Any]) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            if current[id_key] in reachable:
                continue
            reachable.add(current[id_key])
            stack.extend(current["children"])

    for root in roots:
        mark(root)

    for node_id in order:
        if node_id in reachable:
            continue
        node = nodes[node_id]
        parent = nodes[parent_of[node_id]]
        parent["children"] = [child for child in parent["children"] if child is not node]
        roots.append(node)
        mark(node)

    _sort_deep(roots, lambda n: n.get(position_key) or 0)
    return roots


def _sort_deep(nodes: List[Dict[str, Any]], key: Callable[[Dict[str, Any]], Any]) -> None:
    stack = [nodes]
    while stack:
        level = stack.pop()
        level.sort(key=key)
        for node in level:
            stack.append(node["children"])


def build_category_tree(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Category rows (id, slug, name, parent_id, position) into a nested tree."""
    return build_tree(rows)


def find_node(nodes: List[Dict[str, Any]], key: str, key_field: str = "key") -> Optional[Dict[str, Any]]:
    """Depth-first search for the first node with a matching key."""
    for node in nodes:
        if node.get(key_field) == key:
            return node
        found = find_node(node.get("children") or [], key, key_field)
        if found:
            return found
    return None


def find_path(nodes: List[Dict[str, Any]], key: str, key_field: str = "key") -> List[Dict[str, Any]]:
    """Nodes from the root down to the node with a matching key, or []."""
    for node in nodes:
        if node.get(key_field) == key:
            return [node]
        below = find_path(node.get("children") or [], key, key_field)
        if below:
            return [node] + below
    return []
