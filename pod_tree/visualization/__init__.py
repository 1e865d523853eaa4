"""Visualization module for reverse dependency trees.

Renders TreeNode hierarchies as indented, color-cycled bullet lists using
rich.
"""

from pod_tree.visualization.tree_renderer import (
    format_tree_line,
    iter_tree_lines,
    render_tree,
)

__all__ = [
    "format_tree_line",
    "iter_tree_lines",
    "render_tree",
]
