"""Equitree - interactive shareholding tree layout and lazy-loading engine."""

from equitree.config import EngineConfig, load_config
from equitree.controller import Frame, TreeController
from equitree.events import (
    EventDispatcher,
    EventProcessor,
    LoadEndEvent,
    LoadErrorEvent,
    LoadStartEvent,
    ToggleEvent,
    TypedEventProcessor,
    ViewportFitEvent,
)
from equitree.exceptions import (
    FetchError,
    LayoutInvariantViolation,
    MalformedTreeError,
    UnknownNodeError,
)
from equitree.layout import BoundingBox, LayoutResult, PositionedNode, layout
from equitree.loader import (
    ExpandOutcome,
    FetchResult,
    LazyLoadCoordinator,
    StaticChildrenSource,
)
from equitree.model import OwnershipTree, TreeNode, normalize_children, normalize_tree
from equitree.render import Scene, SvgDiagram, render, to_svg, wrap_label
from equitree.state import StateStore, TreeState
from equitree.viewport import ViewportManager, ViewportTransform, fit_transform
from equitree.visibility import Visibility, VisibleEdge, VisibleNode, visible_nodes

__all__ = [
    # Model
    "OwnershipTree",
    "TreeNode",
    "normalize_tree",
    "normalize_children",
    # State
    "StateStore",
    "TreeState",
    # Pipeline
    "visible_nodes",
    "Visibility",
    "VisibleNode",
    "VisibleEdge",
    "layout",
    "LayoutResult",
    "PositionedNode",
    "BoundingBox",
    "ViewportManager",
    "ViewportTransform",
    "fit_transform",
    "render",
    "Scene",
    "to_svg",
    "SvgDiagram",
    "wrap_label",
    # Loading
    "LazyLoadCoordinator",
    "ExpandOutcome",
    "FetchResult",
    "StaticChildrenSource",
    # Controller
    "TreeController",
    "Frame",
    # Config
    "EngineConfig",
    "load_config",
    # Errors
    "MalformedTreeError",
    "FetchError",
    "LayoutInvariantViolation",
    "UnknownNodeError",
    # Events
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "ToggleEvent",
    "LoadStartEvent",
    "LoadEndEvent",
    "LoadErrorEvent",
    "ViewportFitEvent",
]
