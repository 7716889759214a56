"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from loom.config import Settings  # noqa: E402
from loom.graph.models import LearnNode, NodeStatus  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Workflow tests over an in-memory store")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def now():
    """Fixed reference time used across scheduling tests."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def intervals():
    return [1, 3, 7, 14]


@pytest.fixture
def make_node():
    """Factory for nodes with sensible defaults."""

    def _make(node_id: str, status: NodeStatus | str = NodeStatus.AVAILABLE, **kwargs) -> LearnNode:
        kwargs.setdefault("title", node_id.split("/")[-1].replace("-", " ").title())
        return LearnNode(id=node_id, status=status, **kwargs)

    return _make


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, mastery_threshold=4, srs_intervals=[1, 3, 7, 14])


@pytest.fixture
def sample_node_data():
    """Provide hand-written node metadata as a store would hold it."""
    return {
        "id": "nix/derivations",
        "title": "Nix derivations",
        "summary": "Understand .drv files and build inputs",
        "path": "nix",
        "type": "concept",
        "status": "available",
        "prerequisites": ["nix/store-basics"],
        "unlocks": ["nix/derivation-outputs"],
        "familiarity": 1,
        "srs_stage": 0,
        "last_reviewed": None,
        "next_review": None,
        "created": "2026-01-03T12:00:00.000Z",
        "updated": "2026-01-03T12:00:00.000Z",
        "tags": ["nix"],
        "body": "Body starts here.",
    }
