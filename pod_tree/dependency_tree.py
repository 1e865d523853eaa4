"""
Reverse dependency tree reconstruction.

Rebuilds a layered tree of the pods that depend on a root pod by peeling the
frontier of unplaced dependents one level at a time. A pod is placed only once
none of its own dependencies remain unplaced, and it is attached under every
pod of the previous level it depends on. Diamonds therefore fan out into
separate branches that repeat the same name.
"""

from collections import deque
from collections.abc import Iterator

from pod_tree.dependency_graph import PackageNode
from pod_tree.exceptions import GraphIntegrityError


class TreeNode:
    """A position in the output tree. Children are owned, never shared."""

    def __init__(self, name: str):
        self.name = name
        self.children: list[TreeNode] = []

    def add_child(self, name: str) -> "TreeNode":
        node = TreeNode(name)
        self.children.append(node)
        return node

    def __repr__(self) -> str:
        return f"TreeNode({self.name!r}, children={len(self.children)})"


def collect_dependents(
    pods: dict[str, PackageNode], root_name: str, direct_only: bool = False
) -> list[str]:
    """
    Names of the pods that depend on ``root_name``.

    Walks parent references one hop at a time, breadth first. The root itself
    is never included, which guards against subspec self-loops.

    Args:
        pods: Pod graph from the lockfile.
        root_name: Pod to start from.
        direct_only: Only return the root's immediate parents.

    Returns:
        Dependent pod names in discovery order.
    """
    seen: dict[str, None] = {}
    queue = deque([pods[root_name]])
    while queue:
        node = queue.popleft()
        for parent in node.parents.values():
            if parent.name == root_name or parent.name in seen:
                continue
            seen[parent.name] = None
            if not direct_only:
                queue.append(parent)
    return list(seen)


def _compute_step(pods: dict[str, PackageNode], frontier: dict[str, None]) -> list[str]:
    step = []
    for name in frontier:
        blockers = [
            child
            for child in pods[name].children
            if child != name and child in frontier
        ]
        if not blockers:
            step.append(name)
    return step


def build_tree(
    pods: dict[str, PackageNode], root_name: str, direct_only: bool = False
) -> TreeNode:
    """
    Build the reverse dependency tree rooted at ``root_name``.

    Args:
        pods: Pod graph from the lockfile. Must contain ``root_name``.
        root_name: Pod at the root of the tree.
        direct_only: Seed the frontier with immediate dependents only instead
            of every transitive dependent.

    Returns:
        Root TreeNode. It has no children when nothing depends on the root.

    Raises:
        GraphIntegrityError: If a level cannot be built because every
            remaining pod depends on another remaining pod.
    """
    root = TreeNode(root_name)
    last: dict[str, TreeNode] = {root_name: root}
    frontier = dict.fromkeys(collect_dependents(pods, root_name, direct_only))

    while frontier:
        step = _compute_step(pods, frontier)
        if not step:
            raise GraphIntegrityError(frontier.keys())

        placed: dict[str, TreeNode] = {}
        for name in step:
            for child in pods[name].children:
                if child in last:
                    placed[name] = last[child].add_child(name)

        # Pods without an attachment point drop out of the lookup here.
        last = placed
        for name in step:
            del frontier[name]

    return root


def walk_tree(root: TreeNode, depth: int = 0) -> Iterator[tuple[int, TreeNode]]:
    """Yield ``(depth, node)`` pairs depth first, starting with the root."""
    yield depth, root
    for child in root.children:
        yield from walk_tree(child, depth + 1)
