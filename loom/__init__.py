"""
Loom: a local-first learning graph.

Deterministic scheduling core for a personal knowledge graph of learning
nodes: prerequisite unlocking, next-node selection and spaced repetition
review scheduling.

Components:
- graph: LearnNode model and the three core algorithms
- store: DocumentStore boundary and an in-memory implementation
- service: LearningService caller workflows
- config: Settings (pydantic-settings)
- log: configure_logging (loguru)
"""

from .graph import (
    LearnNode,
    NextNodeResult,
    NodeStatus,
    Rating,
    SelectionReason,
    SRSScheduler,
    UnknownNodeError,
    new_node,
    resolve_unlocks,
    resolve_until_stable,
    schedule_review,
    select_next_node,
    start_node,
)
from .config import Settings, get_settings
from .log import configure_logging
from .service import LearningService, NextResult
from .store import DocumentStore, InMemoryDocumentStore, NodeRecord

__all__ = [
    "LearnNode",
    "NodeStatus",
    "Rating",
    "SelectionReason",
    "NextNodeResult",
    "UnknownNodeError",
    "new_node",
    "resolve_unlocks",
    "resolve_until_stable",
    "SRSScheduler",
    "schedule_review",
    "select_next_node",
    "start_node",
    "Settings",
    "get_settings",
    "configure_logging",
    "LearningService",
    "NextResult",
    "DocumentStore",
    "InMemoryDocumentStore",
    "NodeRecord",
]
