"""Equitree CLI: inspect, lay out and render ownership trees.

Entry point for the `equitree` command. Requires ``pip install equitree[cli]``.

Commands:
    show      Print the visible tree
    layout    Print node positions and the bounding box
    render    Replay expand clicks and write an SVG

Pass ``--verbose`` before the command to see lazy loads, grafts and
viewport fits as they happen.
"""

from __future__ import annotations

import logging

_LOG_HANDLER_NAME = "equitree-cli"


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install equitree[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def _enable_debug_logging() -> None:
    """Send equitree's DEBUG records to stderr, once per process."""
    logger = logging.getLogger("equitree")
    logger.setLevel(logging.DEBUG)
    if any(h.get_name() == _LOG_HANDLER_NAME for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(_LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)


def create_app():
    """Create the Typer app with the tree commands."""
    _require_typer()

    import typer

    from equitree.cli.tree_cmd import register_commands

    app = typer.Typer(
        name="equitree",
        help="Shareholding tree layout and rendering CLI.",
        no_args_is_help=True,
    )

    @app.callback()
    def configure(
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Log loads, grafts and viewport fits to stderr"),
    ):
        if verbose:
            _enable_debug_logging()

    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
