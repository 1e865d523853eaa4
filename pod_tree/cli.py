"""
Command-line interface for pod-tree.
"""

from itertools import zip_longest
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from pod_tree.config import load_settings
from pod_tree.dependency_graph import (
    find_package,
    load_podfile_lock,
    parse_podfile_lock,
)
from pod_tree.dependency_tree import build_tree
from pod_tree.exceptions import (
    ConfigError,
    GraphIntegrityError,
    UserInputError,
)
from pod_tree.visualization import format_tree_line, iter_tree_lines, render_tree

# --- Constants ---
HELP_COMMANDS = ("-h", "--help", "help")

SAMPLE_LOCKFILE = [
    "PODS:",
    "  - A (1.0.0)",
    "  - B (1.0.0):",
    "    - A (= 1.0.0)",
    "    - C (= 1.0.0)",
    "    - D (= 1.0.0)",
    "  - C (1.0.0):",
    "    - A (= 1.0.0)",
    "    - D (= 1.0.0)",
    "  - D (1.0.0):",
    "    - A (= 1.0.0)",
    "  - E (1.0.0):",
    "    - A (= 1.0.0)",
    "    - D (= 1.0.0)",
]

# --- Typer App ---
app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)

# --- Helper Functions ---


def print_help(out: Console) -> None:
    """Print usage together with a worked example."""
    out.print("[green]Tiny utility for visualising Pod dependency trees.[/green]")
    out.print("[green]Skips subspecs and pods without versions.[/green]")
    out.print(f"Help options: {', '.join(HELP_COMMANDS)}")
    out.print("[yellow]  • 1st argument will be used as root Pod[/yellow]")
    out.print(
        "[yellow]  • 2nd one is path to Podfile.lock"
        " (./Podfile.lock by default)[/yellow]"
    )
    out.print()
    out.print("[yellow]pod-tree A Podfile.lock[/yellow]")

    sample = SAMPLE_LOCKFILE[1:]
    width = max(len(line) for line in sample) + 4
    out.print(Text("Podfile.lock:".ljust(width) + "Output:", style="green"))

    tree = build_tree(parse_podfile_lock(SAMPLE_LOCKFILE), "A")
    output = [format_tree_line(level, name) for level, name in iter_tree_lines(tree)]
    for source_line, output_line in zip_longest(sample, output):
        line = Text((source_line or "")[2:].ljust(width))
        if output_line is not None:
            line.append_text(output_line)
        out.print(line, soft_wrap=True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]{escape(message)}[/red]", highlight=False)
    raise typer.Exit(code=1)


# --- Commands ---


@app.command(
    context_settings={"help_option_names": [], "ignore_unknown_options": True}
)
def main(
    pod_name: str | None = typer.Argument(
        None,
        help="Root pod. Pass -h, --help or help to print usage.",
        show_default=False,
    ),
    lockfile: Path | None = typer.Argument(
        None,
        help="Path to Podfile.lock (default: ./Podfile.lock).",
        show_default=False,
    ),
    direct_only: bool | None = typer.Option(
        None,
        "--direct-only/--all-dependents",
        help="Only include pods that depend on the root pod directly.",
    ),
    max_depth: int | None = typer.Option(
        None,
        "--max-depth",
        min=1,
        help="Maximum tree depth to print.",
    ),
    show_root: bool = typer.Option(
        False,
        "--show-root",
        help="Print the root pod as the first line.",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored bullets.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print parsing diagnostics to stderr.",
    ),
) -> None:
    """
    Show which pods in a Podfile.lock depend on POD_NAME.

    Example:
        pod-tree Alamofire
        pod-tree FirebaseCore ios/Podfile.lock --max-depth=2
    """
    if pod_name is None or pod_name in HELP_COMMANDS:
        print_help(console)
        raise typer.Exit(code=1)

    for value in (pod_name, lockfile):
        # unknown options arrive as positionals
        if value is not None and str(value).startswith("-"):
            _fail(f"Unknown option: {value}. Pass --help for usage.")

    try:
        settings = load_settings(
            lockfile=lockfile,
            direct_only=direct_only,
            max_depth=max_depth,
            show_root=show_root,
            color=not no_color,
            verbose=verbose,
        )
    except ConfigError as e:
        _fail(str(e))

    if settings.verbose:
        err_console.print(f"[dim]Reading lockfile: {settings.lockfile}[/dim]")

    pods = load_podfile_lock(settings.lockfile)
    if settings.verbose:
        err_console.print(f"[dim]Parsed {len(pods)} pods[/dim]")

    try:
        root_pod = find_package(pods, pod_name)
    except UserInputError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]", highlight=False)
        print_help(console)
        raise typer.Exit(code=1) from None

    if settings.verbose:
        err_console.print(
            f"[dim]{pod_name} has {len(root_pod.parents)} direct dependents[/dim]"
        )

    try:
        tree = build_tree(pods, pod_name, direct_only=settings.direct_only)
    except GraphIntegrityError as e:
        _fail(str(e))

    out = console if settings.color else Console(no_color=True, highlight=False)
    count = render_tree(
        tree,
        out,
        bullet=settings.bullet,
        colors=settings.colors,
        show_root=settings.show_root,
        max_depth=settings.max_depth,
    )
    if settings.verbose:
        err_console.print(f"[dim]Printed {count} lines[/dim]")


if __name__ == "__main__":  # pragma: no cover
    app()
