"""Exceptions for the ownership tree engine."""

from __future__ import annotations

from collections.abc import Iterable


class MalformedTreeError(ValueError):
    """Tree payload cannot be normalized.

    Raised when a node lacks an id, two nodes share an id, or a node's
    fields have the wrong shape. Fatal for the payload being normalized:
    nothing from it is kept.

    Attributes:
        reason: What is wrong with the node
        node_id: Id of the offending node, if it has one
        path: Child-index path from the payload root to the node
        message: Human-readable error message
    """

    def __init__(
        self,
        reason: str,
        *,
        node_id: str | None = None,
        path: tuple[int, ...] = (),
        message: str | None = None,
    ) -> None:
        self.reason = reason
        self.node_id = node_id
        self.path = path
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        where = "/".join(str(i) for i in self.path) or "<root>"
        msg = f"Malformed tree at {where}: {self.reason}"
        if self.node_id is not None:
            msg += f" (id={self.node_id!r})"
        return msg


class FetchError(Exception):
    """Lazy load of a node's children failed.

    Node-scoped and recoverable: the node returns to the unloaded state
    and the next expand retries.

    Attributes:
        node_id: Node whose children were requested
        reason: Error reported by the fetcher
    """

    def __init__(self, node_id: str, reason: str) -> None:
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Failed to load children of {node_id!r}: {reason}")


class LayoutInvariantViolation(AssertionError):
    """A visible node ended up without a computed position, or the visible
    sequence handed to the layout was not in pre-order.

    Indicates a bug in the visibility/layout coupling, not bad input.

    Attributes:
        missing: Ids of the offending nodes
        reason: What is wrong with them
    """

    def __init__(self, missing: Iterable[str], *, reason: str = "without a layout position") -> None:
        self.missing = sorted(missing)
        self.reason = reason
        super().__init__(f"Visible nodes {reason}: {', '.join(self.missing)}")


class UnknownNodeError(KeyError):
    """Node id is not part of the materialized tree."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Unknown node id: {self.node_id!r}"
