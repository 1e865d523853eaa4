"""
Dependency graph extraction from CocoaPods lockfiles.

Parses the ``PODS:`` section of a Podfile.lock into a mapping of pod name to
PackageNode, recording both "depends on" and "depended on by" edges.
Subspecs collapse into their parent pod and entries without a version
annotation are skipped.
"""

from collections.abc import Iterable
from pathlib import Path

from pod_tree.exceptions import UserInputError

PODS_HEADER = "PODS:"
ROOT_ENTRY_PREFIX = "  -"
CHILD_ENTRY_PREFIX = "    -"


class PackageNode:
    """A pod in the lockfile graph.

    Parents and children are shared references into the same graph mapping,
    kept in insertion order so that traversal is deterministic.
    """

    def __init__(self, name: str):
        self.name = name
        self.parents: dict[str, PackageNode] = {}
        self.children: dict[str, PackageNode] = {}

    @property
    def parent_names(self) -> set[str]:
        return set(self.parents)

    @property
    def child_names(self) -> set[str]:
        return set(self.children)

    def add_child(self, child: "PackageNode") -> None:
        """Record that this pod depends on ``child``, in both directions."""
        self.children[child.name] = child
        child.parents[self.name] = self

    def __repr__(self) -> str:
        return f"PackageNode({self.name!r})"


def extract_pod_name(token: str) -> str:
    """
    Normalize a lockfile name token to a pod name.

    Strips quotes, a trailing colon and any "/Subspec" qualifier, so that
    ``"Firebase/Core`` and ``Firebase:`` both become ``Firebase``.

    Args:
        token: Second whitespace-delimited token of a lockfile entry.

    Returns:
        The bare pod name.
    """
    name = token.strip('"').rstrip(":").strip('"')
    return name.split("/", 1)[0]


def _is_section_header(line: str) -> bool:
    return bool(line.strip()) and not line[0].isspace()


def parse_podfile_lock(lines: Iterable[str]) -> dict[str, PackageNode]:
    """
    Build the pod graph from Podfile.lock lines.

    Only lines between the ``PODS:`` header and the next top-level section
    (e.g. ``DEPENDENCIES:``) are considered. Two-space entries declare the
    current pod, four-space entries declare its dependencies. A dependency
    line without a version (exactly two tokens) adds no edge.

    Args:
        lines: Lockfile lines, with or without trailing newlines.

    Returns:
        Mapping of pod name to PackageNode. Empty if there is no PODS section.
    """
    pods: dict[str, PackageNode] = {}
    current: PackageNode | None = None
    in_pods = False

    for line in lines:
        line = line.rstrip("\r\n")

        if not in_pods:
            if line.startswith(PODS_HEADER):
                in_pods = True
            continue

        if _is_section_header(line):
            break

        if line.startswith(ROOT_ENTRY_PREFIX):
            parts = line.split()
            if len(parts) < 2:
                continue
            name = extract_pod_name(parts[1])
            current = pods.setdefault(name, PackageNode(name))
        elif line.startswith(CHILD_ENTRY_PREFIX):
            parts = line.split()
            # "- Name" without a version: subspec-only or unconstrained
            if len(parts) == 2 or current is None:
                continue
            name = extract_pod_name(parts[1])
            child = pods.setdefault(name, PackageNode(name))
            current.add_child(child)

    return pods


def load_podfile_lock(lockfile_path: str | Path) -> dict[str, PackageNode]:
    """
    Parse a Podfile.lock from disk.

    Args:
        lockfile_path: Path to the lockfile.

    Returns:
        Mapping of pod name to PackageNode, empty if the file is missing or
        unreadable.
    """
    lockfile_path = Path(lockfile_path)
    if not lockfile_path.is_file():
        return {}

    try:
        with open(lockfile_path, encoding="utf-8") as f:
            return parse_podfile_lock(f)
    except (OSError, UnicodeDecodeError):
        return {}


def find_package(pods: dict[str, PackageNode], name: str) -> PackageNode:
    """
    Look up a pod by name.

    Raises:
        UserInputError: If the pod is not in the graph.
    """
    if not pods:
        raise UserInputError(f"Can't find pod name: {name} (no pods parsed)")
    try:
        return pods[name]
    except KeyError:
        raise UserInputError(f"Can't find pod name: {name}") from None
