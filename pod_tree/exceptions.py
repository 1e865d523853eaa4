"""
Error types raised by pod-tree.
"""

from collections.abc import Iterable


class PodTreeError(Exception):
    """Base class for all pod-tree errors."""


class UserInputError(PodTreeError):
    """The user asked for something the lockfile cannot answer.

    Raised for unknown pod names, empty or missing lockfiles and help
    requests. Rerunning with corrected input is the only recovery.
    """


class GraphIntegrityError(PodTreeError):
    """No pod in the frontier could be placed on the next tree level.

    Every remaining pod depends on another remaining pod, so the
    dependency graph has a cycle that layering cannot resolve.
    """

    def __init__(self, remaining: Iterable[str]):
        self.remaining = sorted(remaining)
        super().__init__(
            "Can't build a step. Circular dependency between: "
            + ", ".join(self.remaining)
        )


class ConfigError(PodTreeError, ValueError):
    """A configuration file or environment value is malformed."""
