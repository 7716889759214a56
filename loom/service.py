"""
Learning Service.

Caller-level workflows around the graph core. Each call loads a fresh
snapshot from the document store, runs the core, and saves exactly the
nodes that changed:

- unlock: resolve prerequisites and persist newly available nodes
- next_node: unlock, then recommend a node (optionally starting it)
- review: reschedule one node after a study session
- graph_summary: flat view of the graph for display
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from loom.config import Settings, get_settings
from loom.graph.models import LearnNode, Rating, SelectionReason, UnknownNodeError, format_timestamp
from loom.graph.scheduler import SRSScheduler
from loom.graph.selector import select_next_node, start_node
from loom.graph.unlock import resolve_unlocks
from loom.log import configure_logging
from loom.store.base import DocumentStore, NodeRecord


@dataclass
class NextResult:
    """Recommendation plus the ids unlocked while producing it."""

    node: LearnNode | None = None
    reason: SelectionReason | None = None
    unlocked: list[str] = field(default_factory=list)
    started: bool = False


class LearningService:
    """
    Runs unlock / select / review cycles against a document store.

    Read-modify-write cycles are serialised with a lock so concurrent
    callers sharing one service never persist from stale snapshots.
    """

    def __init__(self, store: DocumentStore, settings: Settings | None = None):
        """
        Initialize the service.

        Args:
            store: Document store supplying and persisting nodes
            settings: Scheduling settings (uses cached settings if None)
        """
        self.store = store
        self.settings = settings or get_settings()
        self.scheduler = SRSScheduler(**self.settings.get_scheduling_config())
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, store: DocumentStore, settings: Settings | None = None) -> LearningService:
        """
        Entry point for applications: configures logging, then builds the service.

        The stderr log sink is set to ``settings.log_level``.
        """
        settings = settings or get_settings()
        configure_logging(settings.log_level)
        logger.debug(f"Scheduling config: {settings.get_scheduling_config()}")
        return cls(store, settings)

    def _unlock_and_save(self, records: list[NodeRecord]) -> list[str]:
        by_node = {id(record.node): record for record in records}
        unlocked = resolve_unlocks(
            [record.node for record in records],
            self.settings.mastery_threshold,
        )
        for node in unlocked:
            self.store.save(by_node[id(node)], node)
        return [node.id for node in unlocked]

    def unlock(self) -> list[str]:
        """
        Unlock nodes whose prerequisites are met.

        Returns:
            Ids of the nodes that became available
        """
        with self._lock:
            records = self.store.load_all()
            return self._unlock_and_save(records)

    def next_node(self, start: bool = False, now: datetime | None = None) -> NextResult:
        """
        Suggest the next node to study.

        Args:
            start: Mark an available recommendation as in-progress
            now: Reference time (defaults to current UTC time)

        Returns:
            NextResult with the recommendation and any unlocked ids
        """
        with self._lock:
            records = self.store.load_all()
            unlocked = self._unlock_and_save(records)

            selection = select_next_node([record.node for record in records], now)
            result = NextResult(node=selection.node, reason=selection.reason, unlocked=unlocked)

            if selection.node is not None and start:
                record = next(r for r in records if r.node is selection.node)
                if start_node(record.node, now):
                    self.store.save(record, record.node)
                    result.started = True

        if result.node is None:
            logger.info("No available nodes found")
        else:
            logger.info(f"Next: {result.node.id} ({result.reason.value})")
        return result

    def review(self, node_id: str, rating: Rating | str, now: datetime | None = None) -> LearnNode:
        """
        Review a node and schedule its next repetition.

        Raises:
            UnknownNodeError: If ``node_id`` is not in the store
            ValueError: If the rating is not recognised
        """
        rating = Rating.parse(rating)

        with self._lock:
            records = self.store.load_all()
            record = next((r for r in records if r.node.id == node_id), None)
            if record is None:
                raise UnknownNodeError(node_id)

            updated = self.scheduler.calculate_next_review(record.node, rating, now)
            self.store.save(record, updated)

        logger.info(
            f"Reviewed {updated.id} ({rating.value}) -> stage {updated.srs_stage}, "
            f"next {format_timestamp(updated.next_review)}"
        )
        return updated

    def graph_summary(self) -> list[dict[str, Any]]:
        """Flat summary of every node for listing or JSON output."""
        with self._lock:
            records = self.store.load_all()

        return [
            {
                "id": record.node.id,
                "title": record.node.title,
                "path": record.node.path,
                "status": record.node.status.value,
                "familiarity": record.node.familiarity,
                "prerequisites": list(record.node.prerequisites),
                "unlocks": list(record.node.unlocks),
                "next_review": format_timestamp(record.node.next_review),
            }
            for record in records
        ]
