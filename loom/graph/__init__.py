"""
Learning graph core.

Pure, synchronous transformations over an in-memory node set:
- models: LearnNode and its enums
- unlock: prerequisite-driven locked -> available resolution
- scheduler: spaced repetition review scheduling
- selector: next-node recommendation
"""

from .models import (
    LearnNode,
    NextNodeResult,
    NodeStatus,
    Rating,
    SelectionReason,
    UnknownNodeError,
    make_node_id,
    new_node,
    slugify,
)
from .scheduler import DEFAULT_MASTERY_THRESHOLD, DEFAULT_SRS_INTERVALS, SRSScheduler, schedule_review
from .selector import select_next_node, start_node
from .unlock import prerequisite_satisfied, resolve_unlocks, resolve_until_stable

__all__ = [
    # Models
    "LearnNode",
    "NodeStatus",
    "Rating",
    "SelectionReason",
    "NextNodeResult",
    "UnknownNodeError",
    "new_node",
    "make_node_id",
    "slugify",
    # Unlocking
    "resolve_unlocks",
    "resolve_until_stable",
    "prerequisite_satisfied",
    # Scheduling
    "SRSScheduler",
    "schedule_review",
    "DEFAULT_SRS_INTERVALS",
    "DEFAULT_MASTERY_THRESHOLD",
    # Selection
    "select_next_node",
    "start_node",
]
