"""
Tests for reverse dependency tree reconstruction.
"""

from itertools import product
from pathlib import Path

import pytest

from pod_tree.dependency_graph import PackageNode, load_podfile_lock
from pod_tree.dependency_tree import (
    TreeNode,
    build_tree,
    collect_dependents,
    walk_tree,
)
from pod_tree.exceptions import GraphIntegrityError

FIXTURE_LOCKFILE = Path(__file__).parent / "fixtures" / "Podfile.lock"


def make_graph(edges: dict[str, list[str]]) -> dict[str, PackageNode]:
    """Build a pod graph from a "pod -> dependencies" mapping."""
    pods: dict[str, PackageNode] = {}
    for name, children in edges.items():
        node = pods.setdefault(name, PackageNode(name))
        for child_name in children:
            node.add_child(pods.setdefault(child_name, PackageNode(child_name)))
    return pods


def as_nested(node: TreeNode) -> tuple:
    """Convert a tree into nested (name, [children]) tuples."""
    return (node.name, [as_nested(child) for child in node.children])


def test_documented_sample_tree():
    """Test the worked example: A <- D <- {C <- B, E}."""
    pods = make_graph(
        {
            "A": [],
            "B": ["A", "C", "D"],
            "C": ["A", "D"],
            "D": ["A"],
            "E": ["A", "D"],
        }
    )

    tree = build_tree(pods, "A")

    assert as_nested(tree) == (
        "A",
        [("D", [("C", [("B", [])]), ("E", [])])],
    )


def test_diamond_fans_out_into_separate_branches():
    """A package reachable via two chains appears once per chain."""
    pods = make_graph({"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": ["E"], "E": []})

    tree = build_tree(pods, "E")

    assert as_nested(tree) == (
        "E",
        [("D", [("B", [("A", [])]), ("C", [("A", [])])])],
    )
    d_node = tree.children[0]
    a_nodes = [branch.children[0] for branch in d_node.children]
    assert a_nodes[0] is not a_nodes[1]


def test_diamond_among_direct_dependents():
    """Diamonds between direct dependents also fan out with direct_only."""
    pods = make_graph(
        {
            "R": [],
            "A": ["B", "C", "R"],
            "B": ["D", "R"],
            "C": ["D", "R"],
            "D": ["R"],
        }
    )

    tree = build_tree(pods, "R", direct_only=True)

    assert as_nested(tree) == (
        "R",
        [("D", [("B", [("A", [])]), ("C", [("A", [])])])],
    )


def test_direct_only_limits_frontier():
    """Only immediate dependents are placed when direct_only is set."""
    pods = make_graph({"A": ["B"], "B": ["C"], "C": []})

    assert as_nested(build_tree(pods, "C")) == ("C", [("B", [("A", [])])])
    assert as_nested(build_tree(pods, "C", direct_only=True)) == ("C", [("B", [])])


def test_package_without_dependents():
    """Nothing depends on the root: the tree is the bare root."""
    pods = make_graph({"A": ["B"], "B": []})

    tree = build_tree(pods, "A")

    assert tree.name == "A"
    assert tree.children == []


def test_self_loop_is_ignored():
    """A pod whose only parent is itself yields a bare root."""
    pods = make_graph({"Pod": ["Pod"]})

    tree = build_tree(pods, "Pod")

    assert as_nested(tree) == ("Pod", [])


def test_self_loop_inside_frontier():
    """A dependent that references itself is still placed."""
    pods = make_graph({"Root": [], "Pod": ["Pod", "Root"]})

    assert as_nested(build_tree(pods, "Root")) == ("Root", [("Pod", [])])


def test_mutual_dependency_raises():
    """Two dependents depending on each other cannot be layered."""
    pods = make_graph({"R": [], "A": ["R", "B"], "B": ["R", "A"]})

    with pytest.raises(GraphIntegrityError) as exc_info:
        build_tree(pods, "R")

    assert exc_info.value.remaining == ["A", "B"]
    assert "Can't build a step" in str(exc_info.value)


def test_cycle_above_placed_levels_raises():
    """A cycle further up is detected after the lower levels are placed."""
    pods = make_graph({"R": [], "A": ["R"], "B": ["A", "C"], "C": ["B"]})

    with pytest.raises(GraphIntegrityError) as exc_info:
        build_tree(pods, "R")

    assert exc_info.value.remaining == ["B", "C"]


def test_collect_dependents_order_and_root_exclusion():
    """Dependents are discovered breadth first and never include the root."""
    pods = make_graph({"R": ["A"], "A": ["R"], "B": ["A"], "C": ["B", "R"]})

    assert collect_dependents(pods, "R") == ["A", "C", "B"]
    assert collect_dependents(pods, "R", direct_only=True) == ["A", "C"]


def test_fixture_lockfile_tree():
    """Test a realistic lockfile with subspecs and quoted names."""
    pods = load_podfile_lock(FIXTURE_LOCKFILE)

    tree = build_tree(pods, "PromisesObjC")

    assert as_nested(tree) == (
        "PromisesObjC",
        [
            (
                "GoogleUtilities",
                [
                    (
                        "FirebaseCoreInternal",
                        [
                            (
                                "FirebaseCore",
                                [("FirebaseCrashlytics", [("Firebase", [])])],
                            )
                        ],
                    )
                ],
            )
        ],
    )


def test_walk_tree_depths():
    """walk_tree yields nodes depth first with their depth."""
    pods = make_graph(
        {"A": [], "B": ["A", "C", "D"], "C": ["A", "D"], "D": ["A"], "E": ["A", "D"]}
    )

    walked = [(depth, node.name) for depth, node in walk_tree(build_tree(pods, "A"))]

    assert walked == [(0, "A"), (1, "D"), (2, "C"), (3, "B"), (2, "E")]


def _all_graphs(names: list[str]):
    pairs = [(a, b) for a in names for b in names if a != b]
    for mask in product((False, True), repeat=len(pairs)):
        edges: dict[str, list[str]] = {name: [] for name in names}
        for (parent, child), present in zip(pairs, mask):
            if present:
                edges[parent].append(child)
        yield edges


@pytest.mark.slow
@pytest.mark.parametrize("direct_only", [False, True])
def test_no_eligible_pod_is_left_unattached(direct_only):
    """
    Search every graph on four pods for a dependent that is placed in a step
    but finds no attachment point in the previous level.

    None exists: every eligible pod has a dependency that was placed in the
    previous step, so every dependent of the root ends up in the tree.
    """
    checked = 0
    for edges in _all_graphs(["R", "a", "b", "c"]):
        pods = make_graph(edges)
        try:
            tree = build_tree(pods, "R", direct_only=direct_only)
        except GraphIntegrityError:
            continue

        nodes = list(walk_tree(tree))
        placed = {node.name for depth, node in nodes if depth > 0}
        assert placed == set(collect_dependents(pods, "R", direct_only))
        for _depth, node in nodes:
            assert node.name in pods
            for child in node.children:
                assert node.name in pods[child.name].children
        checked += 1

    assert checked > 0
