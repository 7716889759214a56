"""
Spaced Repetition Review Scheduler.

Reschedules a node after a review using a stage ladder over a
caller-supplied interval table (days):

    rating | familiarity | stage
    -------+-------------+--------------------
    again  |     -1      | stage - 1 (floor 0)
    hard   |      0      | unchanged
    good   |     +1      | stage + 1
    easy   |     +2      | stage + 2

Familiarity is clamped to 0-5 and the stage to the interval table, so
hand-edited or legacy values never escape their bounds. A review always
reschedules, including a failed one.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from .models import MAX_FAMILIARITY, LearnNode, NodeStatus, Rating, clamp, parse_timestamp, utc_now

DEFAULT_SRS_INTERVALS = (1, 3, 7, 14, 30, 60, 120, 240)
DEFAULT_MASTERY_THRESHOLD = 4

# rating -> (familiarity delta, stage delta)
RATING_STEPS = {
    Rating.AGAIN: (-1, -1),
    Rating.HARD: (0, 0),
    Rating.GOOD: (1, 1),
    Rating.EASY: (2, 2),
}


def interval_days(intervals: Sequence[int], stage: int) -> int:
    """
    Delay in days for a stage.

    Falls back to the last interval when the stage is out of range and to
    a single day when there are no intervals.
    """
    if not intervals:
        return 1
    if 0 <= stage < len(intervals) and intervals[stage]:
        return int(intervals[stage])
    return int(intervals[-1]) or 1


@dataclass
class SRSScheduler:
    """
    Review scheduler bound to one interval table and mastery threshold.

    ``preserve_paused`` keeps a paused node paused after a review instead
    of recomputing its status from familiarity.
    """

    intervals: Sequence[int] = field(default_factory=lambda: list(DEFAULT_SRS_INTERVALS))
    mastery_threshold: int = DEFAULT_MASTERY_THRESHOLD
    preserve_paused: bool = False

    @property
    def max_stage(self) -> int:
        return max(0, len(self.intervals) - 1)

    def next_stage(self, stage: int, rating: Rating) -> int:
        return clamp(stage + RATING_STEPS[rating][1], 0, self.max_stage)

    def next_familiarity(self, familiarity: int, rating: Rating) -> int:
        return clamp(familiarity + RATING_STEPS[rating][0], 0, MAX_FAMILIARITY)

    def status_for(self, node: LearnNode, familiarity: int) -> NodeStatus:
        if self.preserve_paused and node.status == NodeStatus.PAUSED:
            return NodeStatus.PAUSED
        if familiarity >= self.mastery_threshold:
            return NodeStatus.MASTERED
        return NodeStatus.IN_PROGRESS

    def calculate_next_review(
        self,
        node: LearnNode,
        rating: Rating | str,
        now: datetime | None = None,
    ) -> LearnNode:
        """
        Apply a review outcome to a node.

        Args:
            node: The reviewed node (not mutated)
            rating: again | hard | good | easy
            now: Review time (defaults to current UTC time)

        Returns:
            Updated copy of the node

        Raises:
            ValueError: If the rating is not recognised
        """
        rating = Rating.parse(rating)
        now = parse_timestamp(now) or utc_now()

        updated = node.copy()
        updated.familiarity = self.next_familiarity(node.familiarity, rating)
        updated.srs_stage = self.next_stage(node.srs_stage, rating)

        delay = interval_days(self.intervals, updated.srs_stage)
        updated.last_reviewed = now
        updated.next_review = now + timedelta(days=delay)
        updated.updated = now
        updated.status = self.status_for(node, updated.familiarity)

        logger.debug(
            f"Scheduled {node.id}: rating={rating.value}, familiarity={updated.familiarity}, "
            f"stage={updated.srs_stage}, interval={delay}d, status={updated.status.value}"
        )

        return updated


def schedule_review(
    node: LearnNode,
    rating: Rating | str,
    intervals: Sequence[int],
    mastery_threshold: int,
    now: datetime | None = None,
    preserve_paused: bool = False,
) -> LearnNode:
    """Reschedule ``node`` after a review; see ``SRSScheduler.calculate_next_review``."""
    scheduler = SRSScheduler(
        intervals=intervals,
        mastery_threshold=mastery_threshold,
        preserve_paused=preserve_paused,
    )
    return scheduler.calculate_next_review(node, rating, now)
