"""Collapse and load state.

``TreeState`` is an immutable snapshot; every transition returns a new
snapshot. ``StateStore`` holds the current snapshot and replaces it
wholesale on each event, so readers holding an older snapshot never see
it change under them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class TreeState:
    """Snapshot of interaction state.

    Attributes:
        collapsed: Ids whose descendants are hidden (the node itself stays visible)
        loading: Ids with a fetch in flight
        loaded: Ids whose children were fetched successfully at least once
    """

    collapsed: frozenset[str] = frozenset()
    loading: frozenset[str] = frozenset()
    loaded: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        overlap = self.loading & self.loaded
        if overlap:
            raise ValueError(f"Ids both loading and loaded: {sorted(overlap)}")

    def toggled(self, node_id: str) -> TreeState:
        return replace(self, collapsed=self.collapsed ^ {node_id})

    def expanded(self, node_id: str) -> TreeState:
        return replace(self, collapsed=self.collapsed - {node_id})

    def can_begin_load(self, node_id: str) -> bool:
        return node_id not in self.loading and node_id not in self.loaded

    def load_started(self, node_id: str) -> TreeState:
        return replace(self, loading=self.loading | {node_id})

    def load_finished(self, node_id: str, success: bool) -> TreeState:
        loaded = self.loaded | {node_id} if success else self.loaded
        return replace(self, loading=self.loading - {node_id}, loaded=loaded)


class StateStore:
    """Owner of the current ``TreeState``.

    Toggling never starts a load; deciding when an expand implies a fetch
    is the lazy-load coordinator's job.
    """

    def __init__(self, initial: TreeState | None = None) -> None:
        self._state = initial or TreeState()

    @property
    def snapshot(self) -> TreeState:
        return self._state

    def reset(self, collapsed: frozenset[str] = frozenset()) -> None:
        """Drop all state, as on a full data reload."""
        self._state = TreeState(collapsed=frozenset(collapsed))

    def toggle_collapse(self, node_id: str) -> bool:
        """Flip collapse membership; returns the new collapsed flag."""
        self._state = self._state.toggled(node_id)
        return node_id in self._state.collapsed

    def expand(self, node_id: str) -> None:
        self._state = self._state.expanded(node_id)

    def is_collapsed(self, node_id: str) -> bool:
        return node_id in self._state.collapsed

    def begin_load(self, node_id: str) -> bool:
        """Mark a fetch as started.

        Returns False without changing anything if the node is already
        loading or already loaded.
        """
        if not self._state.can_begin_load(node_id):
            return False
        self._state = self._state.load_started(node_id)
        return True

    def complete_load(self, node_id: str, success: bool) -> None:
        """Finish a fetch; a failure leaves the node eligible for retry."""
        self._state = self._state.load_finished(node_id, success)

    def is_loading(self, node_id: str) -> bool:
        return node_id in self._state.loading

    def is_loaded(self, node_id: str) -> bool:
        return node_id in self._state.loaded
