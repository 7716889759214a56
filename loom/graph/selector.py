"""
Next-Node Selector.

Picks the single best node to study now. Priority tiers, first
non-empty tier wins:

1. Due review     - earliest ``next_review`` at or before now
2. New available  - lowest familiarity, then earliest ``created``
3. Continue       - in-progress node with the lowest familiarity

Due reviews are never starved by new material; otherwise breadth (new
nodes) comes before continuing something already begun. ``min`` keeps
the first of equal keys, so remaining ties fall back to input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from loguru import logger

from .models import (
    EPOCH,
    LearnNode,
    NextNodeResult,
    NodeStatus,
    SelectionReason,
    as_node_list,
    parse_timestamp,
    utc_now,
)


def select_next_node(
    nodes: Iterable[LearnNode] | Mapping[str, LearnNode],
    now: datetime | None = None,
) -> NextNodeResult:
    """
    Choose the next node to study. Never mutates the nodes.

    Args:
        nodes: The full node set (after unlock resolution)
        now: Reference time for due checks (defaults to current UTC time)

    Returns:
        NextNodeResult with the chosen node and reason, or empty when
        every node is locked, mastered or paused
    """
    now = parse_timestamp(now) or utc_now()
    unlocked = [node for node in as_node_list(nodes) if not node.is_locked]

    due = [node for node in unlocked if node.is_due(now)]
    if due:
        chosen = min(due, key=lambda node: node.next_review)
        return _selected(chosen, SelectionReason.DUE_REVIEW)

    available = [node for node in unlocked if node.status == NodeStatus.AVAILABLE]
    if available:
        chosen = min(available, key=lambda node: (node.familiarity, node.created or EPOCH))
        return _selected(chosen, SelectionReason.NEW_AVAILABLE)

    in_progress = [node for node in unlocked if node.status == NodeStatus.IN_PROGRESS]
    if in_progress:
        chosen = min(in_progress, key=lambda node: node.familiarity)
        return _selected(chosen, SelectionReason.CONTINUE)

    logger.debug("No actionable node found")
    return NextNodeResult()


def _selected(node: LearnNode, reason: SelectionReason) -> NextNodeResult:
    logger.debug(f"Selected {node.id} ({reason.value})")
    return NextNodeResult(node=node, reason=reason)


def start_node(node: LearnNode, now: datetime | None = None) -> bool:
    """
    Mark an available node as in-progress.

    Returns:
        True if the status changed, False for any other starting status
    """
    if node.status != NodeStatus.AVAILABLE:
        return False
    node.status = NodeStatus.IN_PROGRESS
    node.updated = parse_timestamp(now) or utc_now()
    return True
