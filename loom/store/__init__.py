"""Document store boundary and the in-memory implementation."""

from .base import DocumentStore, NodeRecord
from .memory import InMemoryDocumentStore

__all__ = ["DocumentStore", "NodeRecord", "InMemoryDocumentStore"]
