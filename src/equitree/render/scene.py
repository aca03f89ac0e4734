"""Turn a layout into drawing commands.

Pure function of its inputs: no state is kept between calls.
"""

from __future__ import annotations

from equitree.config import DEFAULT_CONFIG, EngineConfig
from equitree.layout import LayoutResult, PositionedNode
from equitree.render.labels import format_percentage, wrap_label
from equitree.render.primitives import DrawCommand, Path, Rect, Scene, Text, Toggle, ToggleSymbol
from equitree.state import TreeState
from equitree.viewport import ViewportTransform

ACCENT = "#6495ED"
TEXT_COLOR = "#333"
PERCENT_COLOR = "#000"
BOX_FILL = "#fff"
ROOT_TEXT_COLOR = "#fff"

LABEL_FONT_SIZE = 12.0
PERCENT_FONT_SIZE = 11.0
PERCENT_OFFSET_X = 15.0


def render(
    layout: LayoutResult,
    transform: ViewportTransform,
    state: TreeState | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Scene:
    """Build the scene for one frame.

    Connectors come first so node boxes paint over them; nodes follow in
    visible (pre-order) order.

    Raises:
        LayoutInvariantViolation: An edge endpoint has no position
    """
    state = state or TreeState()
    commands: list[DrawCommand] = []

    for edge in layout.edges:
        source = layout.position(edge.source_id)
        target = layout.position(edge.target_id)
        commands.extend(_connector(source, target, config))

    root_id = layout.nodes[0].id if layout.nodes else None
    for positioned in layout.nodes:
        is_root = config.highlight_root and positioned.id == root_id
        commands.extend(_node_box(positioned, is_root, config))
        toggle = _toggle(positioned, state, config)
        if toggle is not None:
            commands.append(toggle)

    return Scene(tuple(commands), transform)


def toggle_symbol(positioned: PositionedNode, state: TreeState) -> ToggleSymbol | None:
    """Affordance for a node: loading marker, '+' (collapsed or unloaded), or '−'."""
    node = positioned.node
    if node.id in state.loading:
        return ToggleSymbol.LOADING
    if not node.is_expandable:
        return None
    if node.children and node.id not in state.collapsed:
        return ToggleSymbol.MINUS
    return ToggleSymbol.PLUS


def _connector(source: PositionedNode, target: PositionedNode, config: EngineConfig) -> list[DrawCommand]:
    """Elbow: down from the source, across, down to the target's top edge."""
    start_y = source.y + config.half_height
    end_y = target.y - config.half_height
    mid_y = (start_y + end_y) / 2
    commands: list[DrawCommand] = [
        Path(
            points=((source.x, start_y), (source.x, mid_y), (target.x, mid_y), (target.x, end_y)),
            stroke=ACCENT,
            arrow=True,
            source_id=source.id,
            target_id=target.id,
        )
    ]

    percentage = target.node.ownership_percentage
    if percentage is not None:
        commands.append(
            Text(
                x=target.x + PERCENT_OFFSET_X,
                y=(mid_y + end_y) / 2,
                lines=(format_percentage(percentage),),
                fill=PERCENT_COLOR,
                font_size=PERCENT_FONT_SIZE,
                anchor="start",
                bold=True,
                baseline="central",
                node_id=target.id,
            )
        )
    return commands


def _node_box(positioned: PositionedNode, is_root: bool, config: EngineConfig) -> list[DrawCommand]:
    lines = tuple(wrap_label(positioned.node.name, config.chars_per_line, config.max_label_lines))
    rect = Rect(
        node_id=positioned.id,
        x=positioned.x - config.half_width,
        y=positioned.y - config.half_height,
        width=config.node_width,
        height=config.node_height,
        fill=ACCENT if is_root else BOX_FILL,
        stroke=ACCENT,
    )
    # Center the block of lines vertically on the box
    line_step = LABEL_FONT_SIZE * 1.4
    first_baseline = positioned.y - (len(lines) - 1) * line_step / 2 + LABEL_FONT_SIZE / 3
    label = Text(
        x=positioned.x,
        y=first_baseline,
        lines=lines,
        fill=ROOT_TEXT_COLOR if is_root else TEXT_COLOR,
        font_size=LABEL_FONT_SIZE,
        node_id=positioned.id,
    )
    return [rect, label]


def _toggle(positioned: PositionedNode, state: TreeState, config: EngineConfig) -> Toggle | None:
    symbol = toggle_symbol(positioned, state)
    if symbol is None:
        return None
    return Toggle(
        node_id=positioned.id,
        x=positioned.x,
        y=positioned.y + config.half_height,
        symbol=symbol,
    )
