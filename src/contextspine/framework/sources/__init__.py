"""Content store protocol and adapters."""

from contextspine.framework.sources.files import find_document, read_document
from contextspine.framework.sources.memory import MemoryContentStore
from contextspine.framework.sources.protocol import ContentStore, Envelope

__all__ = [
    "ContentStore",
    "Envelope",
    "MemoryContentStore",
    "find_document",
    "read_document",
]
