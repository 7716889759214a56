"""
Document store boundary.

The graph core never reads or writes storage itself. A store hands out
the full node set as records, each carrying an opaque handle that
round-trips metadata the core does not model, and accepts one ``save``
per node the core reports as changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from loom.graph.models import LearnNode


@dataclass
class NodeRecord:
    """A loaded node plus the store's opaque handle for writing it back."""

    node: LearnNode
    handle: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DocumentStore(Protocol):
    """Loads and persists learning nodes."""

    def load_all(self) -> list[NodeRecord]:
        ...

    def save(self, record: NodeRecord, node: LearnNode) -> None:
        ...
