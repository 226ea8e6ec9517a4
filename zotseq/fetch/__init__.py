"""
Record fetching.

This package talks to the remote record store (the Zotero local API).
"""

from .zotero import ALLOWED_REQUEST_HEADER, ZoteroClient

__all__ = [
    "ALLOWED_REQUEST_HEADER",
    "ZoteroClient",
]
