"""
Unit tests for the learning graph models.

Covers node creation, metadata normalisation and the small helpers the
core algorithms share.
"""

from datetime import datetime, timezone

import pytest

from loom.graph.models import (
    LearnNode,
    NodeStatus,
    Rating,
    UnknownNodeError,
    as_node_list,
    format_timestamp,
    make_node_id,
    new_node,
    parse_timestamp,
    slugify,
)


class TestSlugify:
    def test_normalizes_strings(self):
        assert slugify("Nix Derivations") == "nix-derivations"
        assert slugify("  German: Akkusativ!  ") == "german-akkusativ"

    def test_truncates_to_80_characters(self):
        assert len(slugify("a" * 200)) == 80

    def test_node_id_defaults_to_general_path(self):
        assert make_node_id("Store basics") == "general/store-basics"
        assert make_node_id("Store basics", "Nix") == "nix/store-basics"


class TestNewNode:
    def test_without_prerequisites_is_available(self, now):
        node = new_node("Nix store basics", path="nix", now=now)

        assert node.id == "nix/nix-store-basics"
        assert node.status == NodeStatus.AVAILABLE
        assert node.familiarity == 0
        assert node.srs_stage == 0
        assert node.last_reviewed is None
        assert node.next_review is None
        assert node.created == now

    def test_with_prerequisites_is_locked(self, now):
        node = new_node("Derivations", path="nix", prerequisites=["nix/store-basics"], now=now)

        assert node.status == NodeStatus.LOCKED
        assert node.prerequisites == ["nix/store-basics"]


class TestFromDict:
    def test_reads_stored_metadata(self, sample_node_data):
        node = LearnNode.from_dict(sample_node_data)

        assert node.id == "nix/derivations"
        assert node.status == NodeStatus.AVAILABLE
        assert node.prerequisites == ["nix/store-basics"]
        assert node.familiarity == 1
        assert node.created == datetime(2026, 1, 3, 12, tzinfo=timezone.utc)
        assert node.next_review is None
        assert node.body == "Body starts here."

    def test_missing_status_depends_on_prerequisites(self):
        locked = LearnNode.from_dict({"title": "B", "prerequisites": ["general/a"]})
        free = LearnNode.from_dict({"title": "A"})

        assert locked.status == NodeStatus.LOCKED
        assert free.status == NodeStatus.AVAILABLE

    def test_unknown_status_reads_as_available(self):
        node = LearnNode.from_dict({"title": "A", "status": "someday"})
        assert node.status == NodeStatus.AVAILABLE

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (9, 5),
            (-3, 0),
            (2.7, 2),
            ("high", 0),
            (None, 0),
            (True, 0),
            (float("inf"), 5),
            (float("-inf"), 0),
            (float("nan"), 0),
        ],
    )
    def test_familiarity_is_clamped(self, raw, expected):
        node = LearnNode.from_dict({"title": "A", "familiarity": raw})
        assert node.familiarity == expected

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_stage_uses_default(self, raw):
        node = LearnNode.from_dict({"id": "a/b", "title": "B", "srs_stage": raw})
        assert node.srs_stage == 0

    def test_malformed_lists_become_empty(self):
        node = LearnNode.from_dict({"title": "A", "tags": "nix", "prerequisites": {"a": 1}})

        assert node.tags == []
        assert node.prerequisites == []

    def test_derives_id_from_fallback_path(self):
        node = LearnNode.from_dict({"title": "Store Basics"}, fallback_path="nix")
        assert node.id == "nix/store-basics"

    def test_round_trips_through_to_dict(self, sample_node_data):
        data = LearnNode.from_dict(sample_node_data).to_dict()

        assert data["srs_stage"] == 0
        assert data["created"] == "2026-01-03T12:00:00.000Z"
        assert data["status"] == "available"
        assert LearnNode.from_dict(data) == LearnNode.from_dict(sample_node_data)


class TestTimestamps:
    def test_parses_z_suffix_and_offsets(self):
        expected = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert parse_timestamp("2024-01-01T00:00:00Z") == expected
        assert parse_timestamp("2024-01-01T01:00:00+01:00") == expected
        assert parse_timestamp("2024-01-01T00:00:00.000Z") == expected

    def test_naive_values_are_utc(self):
        parsed = parse_timestamp(datetime(2024, 1, 1))
        assert parsed.tzinfo is not None
        assert parsed == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_garbage_is_none(self):
        assert parse_timestamp("not a date") is None
        assert parse_timestamp("") is None

    def test_format_uses_milliseconds_and_z(self):
        value = datetime(2024, 1, 8, 0, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-01-08T00:00:00.123Z"

    def test_node_normalizes_naive_timestamps(self):
        node = LearnNode(id="a", title="A", next_review=datetime(2024, 1, 1))
        assert node.next_review.tzinfo is not None


class TestRating:
    def test_parses_strings(self):
        assert Rating.parse("good") is Rating.GOOD
        assert Rating.parse(" EASY ") is Rating.EASY

    def test_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown rating"):
            Rating.parse("perfect")


class TestNodeCollection:
    def test_mapping_uses_values(self, make_node):
        a, b = make_node("a"), make_node("b")
        assert as_node_list({"a": a, "b": b}) == [a, b]

    def test_rejects_non_collections(self):
        with pytest.raises(TypeError):
            as_node_list(42)
        with pytest.raises(TypeError):
            as_node_list("a,b")

    def test_rejects_non_nodes(self, make_node):
        with pytest.raises(TypeError):
            as_node_list([make_node("a"), {"id": "b"}])


def test_unknown_node_error_carries_id():
    error = UnknownNodeError("nix/missing")

    assert error.node_id == "nix/missing"
    assert "nix/missing" in str(error)
    assert isinstance(error, LookupError)
