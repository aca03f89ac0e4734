"""Tree CLI commands: show, layout, render."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from equitree.cli._format import format_number, print_json, print_table
from equitree.config import load_config
from equitree.controller import TreeController
from equitree.exceptions import MalformedTreeError, UnknownNodeError
from equitree.layout import layout
from equitree.loader import StaticChildrenSource
from equitree.model import OwnershipTree, normalize_tree
from equitree.render.labels import format_percentage
from equitree.visibility import Visibility, visible_nodes

CollapseOption = Annotated[
    list[str] | None,
    typer.Option("--collapse", "-c", help="Collapse this node id (repeatable)"),
]


# ---------------------------------------------------------------------------
# Payload loading
# ---------------------------------------------------------------------------


def _load_payload(path: Path) -> dict[str, Any]:
    """Read a tree payload; a ``{"success": true, "data": {...}}`` envelope is unwrapped."""
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: Could not read '{path}': {e}")
        raise typer.Exit(1) from e

    if isinstance(payload, dict) and "success" in payload and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    return payload


def _load_tree(path: Path) -> OwnershipTree:
    try:
        return normalize_tree(_load_payload(path))
    except MalformedTreeError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e


def _require_known(tree: OwnershipTree, node_ids: list[str] | None) -> None:
    unknown = sorted({n for n in node_ids or () if n not in tree})
    if unknown:
        print(f"Error: Unknown node id(s): {', '.join(unknown)}")
        raise typer.Exit(1)


def _resolve(tree: OwnershipTree, collapse: list[str] | None) -> Visibility:
    _require_known(tree, collapse)
    return visible_nodes(tree, set(collapse or ()))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show(
    payload: Annotated[Path, typer.Argument(help="Tree payload JSON file")],
    collapse: CollapseOption = None,
):
    """Print the visible tree."""
    _require_rich()
    from rich.console import Console
    from rich.tree import Tree

    tree = _load_tree(payload)
    visibility = _resolve(tree, collapse)
    collapsed = set(collapse or ())

    branches: dict[str, Tree] = {}
    root_view: Tree | None = None
    for visible in visibility:
        label = _rich_label(visible.node, collapsed)
        if visible.parent_id is None or visible.parent_id not in branches:
            root_view = Tree(label)
            branches[visible.id] = root_view
        else:
            branches[visible.id] = branches[visible.parent_id].add(label)

    Console().print(root_view)


def layout_cmd(
    payload: Annotated[Path, typer.Argument(help="Tree payload JSON file")],
    collapse: CollapseOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """Print node positions and the bounding box."""
    config = load_config()
    tree = _load_tree(payload)
    result = layout(_resolve(tree, collapse), config)
    bounds = result.bounds

    if as_json:
        data = {
            "nodes": [{"id": p.id, "name": p.node.name, "depth": p.depth, "x": p.x, "y": p.y} for p in result.nodes],
            "bounds": {"min_x": bounds.min_x, "max_x": bounds.max_x, "min_y": bounds.min_y, "max_y": bounds.max_y},
        }
        print_json("layout", data, output)
        return

    headers = ["Id", "Depth", "X", "Y", "Name"]
    rows = [[p.id, str(p.depth), format_number(p.x), format_number(p.y), p.node.name] for p in result.nodes]
    print(f"\n  Layout ({len(result.nodes)} visible nodes):\n")
    for line in print_table(headers, rows):
        print(line)
    print(
        f"\n  Bounds: x [{format_number(bounds.min_x)}, {format_number(bounds.max_x)}]"
        f"  y [{format_number(bounds.min_y)}, {format_number(bounds.max_y)}]"
    )


def render_cmd(
    payload: Annotated[Path, typer.Argument(help="Tree payload JSON file")],
    output: Annotated[Path, typer.Option("--output", "-o", help="SVG file to write")],
    width: Annotated[float, typer.Option("--width", help="Container width in pixels")] = 960,
    height: Annotated[float, typer.Option("--height", help="Container height in pixels")] = 640,
    children: Annotated[
        Path | None, typer.Option("--children", help="JSON file mapping node ids to lazily loaded children")
    ] = None,
    expand: Annotated[
        list[str] | None, typer.Option("--expand", "-e", help="Click this node's toggle (repeatable, in order)")
    ] = None,
    collapse: CollapseOption = None,
):
    """Replay expand clicks and write the resulting SVG."""
    config = load_config()
    try:
        source = StaticChildrenSource.from_file(children) if children else None
    except (OSError, ValueError) as e:
        print(f"Error: Could not read '{children}': {e}")
        raise typer.Exit(1) from e

    try:
        controller = TreeController(
            _load_payload(payload),
            source,
            width=width,
            height=height,
            config=config,
            collapsed=collapse or (),
        )
    except MalformedTreeError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e

    async def replay() -> None:
        for node_id in expand or ():
            outcome = await controller.click(node_id)
            print(f"  {node_id}: {outcome.value}")

    try:
        _require_known(controller.tree, collapse)
        asyncio.run(replay())
    except UnknownNodeError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e
    finally:
        controller.close()

    path = controller.frame.to_svg().save(output)
    print(f"Wrote {len(controller.frame.layout.nodes)} nodes to {path}")


def register_commands(app: typer.Typer) -> None:
    app.command("show")(show)
    app.command("layout")(layout_cmd)
    app.command("render")(render_cmd)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        print("Error: rich is required for 'show'. Install with: pip install equitree[cli]")
        raise typer.Exit(1) from None


def _rich_label(node, collapsed: set[str]) -> str:
    from rich.markup import escape

    label = f"[bold]{escape(node.name)}[/bold] [dim]({escape(node.id)})[/dim]"
    if node.ownership_percentage is not None:
        label += f" [cyan]{format_percentage(node.ownership_percentage)}[/cyan]"
    if node.id in collapsed and node.children:
        label += " [yellow]+[/yellow]"
    elif node.has_more_children and not node.children:
        label += " [yellow]+ (not loaded)[/yellow]"
    return label
