"""
Learning Graph Models.

Entity definitions shared by the unlock resolver, the review scheduler
and the next-node selector.

A loaded node set is an arena: nodes are keyed by ``id`` and edges
(``prerequisites`` / ``unlocks``) are plain id lists resolved by lookup,
so cyclic graphs never produce reference cycles in memory.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

MAX_FAMILIARITY = 5
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


# =============================================================================
# Enums
# =============================================================================


class NodeStatus(str, Enum):
    """Visibility state of a node in the graph."""

    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in-progress"
    MASTERED = "mastered"
    PAUSED = "paused"

    @classmethod
    def normalize(cls, value: Any, has_prerequisites: bool = False) -> NodeStatus:
        """
        Coerce a stored status value.

        Missing values default to locked when the node declares
        prerequisites, otherwise available. Unknown strings are read as
        available.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.LOCKED if has_prerequisites else cls.AVAILABLE
        try:
            return cls(str(value))
        except ValueError:
            return cls.AVAILABLE


class Rating(str, Enum):
    """Self-reported outcome of a review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: Rating | str) -> Rating:
        """Parse a rating, raising ValueError for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown rating {value!r} (expected one of: {choices})") from None


class SelectionReason(str, Enum):
    """Why the selector picked a node."""

    DUE_REVIEW = "due-review"
    NEW_AVAILABLE = "new-available"
    CONTINUE = "continue"


# =============================================================================
# Errors
# =============================================================================


class UnknownNodeError(LookupError):
    """Raised when a requested node id is not in the loaded set."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")


# =============================================================================
# Helpers
# =============================================================================


def clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


def slugify(value: str) -> str:
    """
    Normalize a title into an id segment.

    >>> slugify("  German: Akkusativ!  ")
    'german-akkusativ'
    """
    return _SLUG_PATTERN.sub("-", value.lower()).strip("-")[:80]


def make_node_id(title: str, path: str | None = None) -> str:
    """Build the default ``<path-slug>/<node-slug>`` identifier."""
    path_slug = slugify(path) if path else "general"
    return f"{path_slug}/{slugify(title)}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Read a stored timestamp as an aware UTC datetime.

    Accepts datetimes, dates and ISO-8601 strings (``Z`` suffix or offset).
    Naive values are taken to be UTC. Empty or unparseable values give None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    """Render a timestamp as ISO-8601 UTC with millisecond precision and ``Z``."""
    if value is None:
        return None
    value = parse_timestamp(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value]


def _int_or_default(value: Any, default: int = 0) -> int:
    # bool is an int subclass; a stored `true` is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _familiarity(value: Any) -> int:
    # YAML `.inf` loads as a float; infinities clamp to the nearest bound
    if isinstance(value, float) and math.isinf(value):
        return MAX_FAMILIARITY if value > 0 else 0
    return clamp(_int_or_default(value), 0, MAX_FAMILIARITY)


# =============================================================================
# LearnNode
# =============================================================================


@dataclass
class LearnNode:
    """
    The atomic unit of knowledge in a learning graph.

    ``familiarity`` tracks mastery depth (0-5) and ``srs_stage`` indexes
    the caller's interval table. Timestamps are aware UTC datetimes.
    """

    id: str
    title: str
    status: NodeStatus = NodeStatus.AVAILABLE
    summary: str | None = None
    path: str | None = None
    type: str | None = None
    tags: list[str] = field(default_factory=list)
    prerequisites: list[str] = field(default_factory=list)
    unlocks: list[str] = field(default_factory=list)
    familiarity: int = 0
    srs_stage: int = 0
    last_reviewed: datetime | None = None
    next_review: datetime | None = None
    created: datetime | None = None
    updated: datetime | None = None
    body: str = ""

    def __post_init__(self) -> None:
        # Accept plain status strings and naive timestamps from callers
        if not isinstance(self.status, NodeStatus):
            self.status = NodeStatus.normalize(self.status, bool(self.prerequisites))
        for name in ("last_reviewed", "next_review", "created", "updated"):
            setattr(self, name, parse_timestamp(getattr(self, name)))

    @property
    def is_locked(self) -> bool:
        return self.status == NodeStatus.LOCKED

    def is_due(self, now: datetime) -> bool:
        """True when a review is scheduled at or before ``now``."""
        return self.next_review is not None and self.next_review <= now

    def copy(self) -> LearnNode:
        """Shallow copy with independent list fields."""
        return replace(
            self,
            tags=list(self.tags),
            prerequisites=list(self.prerequisites),
            unlocks=list(self.unlocks),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fallback_path: str | None = None) -> LearnNode:
        """
        Create a node from a metadata mapping.

        Tolerates hand-edited or legacy values: familiarity is clamped,
        unknown statuses become available, non-list edges become empty
        and a missing id is derived from path and title.

        Args:
            data: Metadata keyed as stored (``srs_stage``, ``next_review``, ...)
            fallback_path: Grouping to assume when ``path`` is absent

        Returns:
            LearnNode instance
        """
        title = str(data.get("title") or data.get("id") or "untitled")
        path = data.get("path")
        prerequisites = _string_list(data.get("prerequisites"))

        node_id = data.get("id") or make_node_id(title, path or fallback_path)

        return cls(
            id=str(node_id),
            title=title,
            status=NodeStatus.normalize(data.get("status"), bool(prerequisites)),
            summary=data.get("summary"),
            path=path,
            type=data.get("type"),
            tags=_string_list(data.get("tags")),
            prerequisites=prerequisites,
            unlocks=_string_list(data.get("unlocks")),
            familiarity=_familiarity(data.get("familiarity")),
            srs_stage=_int_or_default(data.get("srs_stage", data.get("srsStage"))),
            last_reviewed=parse_timestamp(data.get("last_reviewed", data.get("lastReviewed"))),
            next_review=parse_timestamp(data.get("next_review", data.get("nextReview"))),
            created=parse_timestamp(data.get("created")),
            updated=parse_timestamp(data.get("updated")),
            body=str(data.get("body") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Metadata mapping in stored key layout (body included)."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "path": self.path,
            "type": self.type,
            "status": self.status.value,
            "tags": list(self.tags),
            "prerequisites": list(self.prerequisites),
            "unlocks": list(self.unlocks),
            "familiarity": self.familiarity,
            "srs_stage": self.srs_stage,
            "last_reviewed": format_timestamp(self.last_reviewed),
            "next_review": format_timestamp(self.next_review),
            "created": format_timestamp(self.created),
            "updated": format_timestamp(self.updated),
            "body": self.body,
        }


def new_node(
    title: str,
    body: str = "",
    *,
    path: str | None = None,
    node_id: str | None = None,
    summary: str | None = None,
    type: str = "concept",
    tags: Iterable[str] = (),
    prerequisites: Iterable[str] = (),
    unlocks: Iterable[str] = (),
    now: datetime | None = None,
) -> LearnNode:
    """
    Create a fresh node.

    The node starts locked if it declares any prerequisite, otherwise
    available, with zero familiarity and stage and no review timestamps.
    """
    now = parse_timestamp(now) or utc_now()
    prerequisites = list(prerequisites)
    return LearnNode(
        id=node_id or make_node_id(title, path),
        title=title,
        status=NodeStatus.LOCKED if prerequisites else NodeStatus.AVAILABLE,
        summary=summary,
        path=path,
        type=type,
        tags=list(tags),
        prerequisites=prerequisites,
        unlocks=list(unlocks),
        created=now,
        updated=now,
        body=body,
    )


def as_node_list(nodes: Iterable[LearnNode] | Mapping[str, LearnNode]) -> list[LearnNode]:
    """
    Normalize a node collection to a list in deterministic input order.

    Raises:
        TypeError: If ``nodes`` is not a collection of LearnNode
    """
    if isinstance(nodes, Mapping):
        items = list(nodes.values())
    elif isinstance(nodes, (str, bytes)) or not isinstance(nodes, Iterable):
        raise TypeError(f"Expected a collection of LearnNode, got {type(nodes).__name__}")
    else:
        items = list(nodes)

    for item in items:
        if not isinstance(item, LearnNode):
            raise TypeError(f"Expected LearnNode, got {type(item).__name__}")
    return items


# =============================================================================
# Results
# =============================================================================


@dataclass
class NextNodeResult:
    """Outcome of next-node selection; both fields None when nothing is actionable."""

    node: LearnNode | None = None
    reason: SelectionReason | None = None
