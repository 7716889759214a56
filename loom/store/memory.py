"""
In-memory document store.

Keeps node metadata as plain mappings, the way a file-backed store keeps
its parsed metadata, so every ``load_all`` returns fresh node objects and
unknown metadata keys survive a save.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger

from loom.graph.models import LearnNode, UnknownNodeError, format_timestamp, utc_now

from .base import NodeRecord


class InMemoryDocumentStore:
    """
    DocumentStore backed by a dict of metadata mappings.

    Insertion order is preserved and is the order ``load_all`` returns.
    """

    def __init__(
        self,
        entries: Iterable[LearnNode | Mapping[str, Any]] = (),
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store.

        Args:
            entries: Nodes or metadata mappings to seed the store with
            clock: Source of the write time stamped into ``updated``

        Raises:
            ValueError: If two entries share an id
        """
        self._data: dict[str, dict[str, Any]] = {}
        self._clock = clock
        self.save_count = 0

        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._data

    def add(self, entry: LearnNode | Mapping[str, Any]) -> LearnNode:
        """Insert a new node; raises ValueError if its id already exists."""
        if isinstance(entry, LearnNode):
            node = entry
            raw = node.to_dict()
        else:
            node = LearnNode.from_dict(entry)
            raw = {**entry, "id": node.id}

        if node.id in self._data:
            raise ValueError(f"Node {node.id} already exists")

        self._data[node.id] = raw
        return node.copy()

    def get(self, node_id: str) -> LearnNode:
        """Load a single node by id."""
        try:
            return LearnNode.from_dict(self._data[node_id])
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def load_all(self) -> list[NodeRecord]:
        records = [
            NodeRecord(node=LearnNode.from_dict(raw), handle=dict(raw))
            for raw in self._data.values()
        ]
        logger.debug(f"Loaded {len(records)} nodes")
        return records

    def save(self, record: NodeRecord, node: LearnNode) -> None:
        """
        Write ``node`` back, keeping any unmodelled keys from the record's handle.

        Every write stamps ``updated`` with the store clock.
        """
        written = format_timestamp(self._clock())
        data = {**record.handle, **node.to_dict()}
        data["created"] = data["created"] or record.handle.get("created") or written
        data["updated"] = written
        data["body"] = node.body or record.node.body

        self._data[node.id] = data
        self.save_count += 1
        logger.debug(f"Saved {node.id}")
