"""Terminal rendering of reverse dependency trees."""

from collections.abc import Iterator, Sequence

from rich.console import Console
from rich.text import Text

from pod_tree.config import DEFAULT_BULLET, DEFAULT_COLORS
from pod_tree.dependency_tree import TreeNode, walk_tree


def iter_tree_lines(
    root: TreeNode, show_root: bool = False, max_depth: int | None = None
) -> Iterator[tuple[int, str]]:
    """
    Yield the printable ``(level, name)`` pairs of a tree.

    Level 1 is the first printed line. The root is printed at level 1 when
    ``show_root`` is set, otherwise its children start at level 1.

    Args:
        root: Tree to render.
        show_root: Include the root pod itself.
        max_depth: Skip lines deeper than this level.
    """
    offset = 1 if show_root else 0
    for depth, node in walk_tree(root):
        level = depth + offset
        if level == 0:
            continue
        if max_depth is not None and level > max_depth:
            continue
        yield level, node.name


def format_tree_line(
    level: int,
    name: str,
    bullet: str = DEFAULT_BULLET,
    colors: Sequence[int] = DEFAULT_COLORS,
) -> Text:
    """Indent and color a single tree line."""
    prefix = "  " * (level - 1) + bullet
    color = colors[(level - 1) % len(colors)]
    return Text.assemble((prefix, f"color({color})"), " ", name)


def render_tree(
    root: TreeNode,
    console: Console,
    bullet: str = DEFAULT_BULLET,
    colors: Sequence[int] = DEFAULT_COLORS,
    show_root: bool = False,
    max_depth: int | None = None,
) -> int:
    """
    Print a tree to a rich console.

    Returns:
        Number of lines printed.
    """
    count = 0
    for level, name in iter_tree_lines(root, show_root=show_root, max_depth=max_depth):
        console.print(format_tree_line(level, name, bullet, colors), soft_wrap=True)
        count += 1
    return count
