"""
Knowledge-base access.

PageStore is the interface the pipeline consumes; LogseqStore implements it
over the Logseq HTTP API server.
"""

from .base import PageStore
from .logseq import LogseqStore

__all__ = [
    "PageStore",
    "LogseqStore",
]
