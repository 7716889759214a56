"""
Unlock Resolver.

Flips locked nodes to available once every prerequisite is satisfied.

Resolution is a single pass evaluated against the statuses at call time;
nodes unlocked in a pass never unlock their dependents in the same call.
``resolve_until_stable`` is the explicit fixed-point variant.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from .models import LearnNode, NodeStatus, as_node_list


def prerequisite_satisfied(
    prerequisite_id: str,
    by_id: Mapping[str, LearnNode],
    mastery_threshold: int,
) -> bool:
    """
    Check a single prerequisite edge.

    A prerequisite is satisfied when the referenced node exists and is
    either mastered or at/above the mastery threshold. Missing ids fail
    closed.
    """
    prereq = by_id.get(prerequisite_id)
    if prereq is None:
        return False
    return prereq.status == NodeStatus.MASTERED or prereq.familiarity >= mastery_threshold


def is_unlockable(node: LearnNode, by_id: Mapping[str, LearnNode], mastery_threshold: int) -> bool:
    """True when a locked node meets all of its prerequisites (vacuously for none)."""
    if node.status != NodeStatus.LOCKED:
        return False
    return all(
        prereq_id != node.id and prerequisite_satisfied(prereq_id, by_id, mastery_threshold)
        for prereq_id in node.prerequisites
    )


def resolve_unlocks(
    nodes: Iterable[LearnNode] | Mapping[str, LearnNode],
    mastery_threshold: int,
) -> list[LearnNode]:
    """
    Unlock every locked node whose prerequisites are satisfied.

    Mutates ``status`` in place on the matching nodes.

    Args:
        nodes: The full node set
        mastery_threshold: Familiarity at which a prerequisite counts as met

    Returns:
        The nodes whose status changed, in input order
    """
    node_list = as_node_list(nodes)
    by_id = {node.id: node for node in node_list}

    # Decide against a consistent snapshot before mutating anything
    eligible = [node for node in node_list if is_unlockable(node, by_id, mastery_threshold)]

    for node in eligible:
        node.status = NodeStatus.AVAILABLE
        logger.debug(f"Unlocked {node.id} ({len(node.prerequisites)} prerequisites met)")

    if eligible:
        logger.info(f"Unlocked {len(eligible)} node(s)")

    return eligible


def resolve_until_stable(
    nodes: Iterable[LearnNode] | Mapping[str, LearnNode],
    mastery_threshold: int,
) -> list[LearnNode]:
    """
    Re-run ``resolve_unlocks`` until a pass changes nothing.

    Returns:
        Every node unlocked across all passes, in unlock order
    """
    node_list = as_node_list(nodes)
    unlocked: list[LearnNode] = []

    # Each productive pass unlocks at least one node, so len + 1 passes bound the loop
    for _ in range(len(node_list) + 1):
        changed = resolve_unlocks(node_list, mastery_threshold)
        if not changed:
            break
        unlocked.extend(changed)

    return unlocked
