"""
Error taxonomy for the search-dedupe-import pipeline.

Every failure the pipeline can signal derives from ZotseqError so the
runner and CLI can catch them as one family:
- InvalidQuery / StoreUnavailable / StoreError / NoResults: Zotero search
- ExistenceCheckDegraded: primary lookup failed, title fallback in use
- PersistFailure / ContentAppendFailure: page creation and abstract append
- PageStoreError / PageStoreUnavailable: Logseq HTTP API failures
- ConfigError: missing or invalid configuration
"""

from __future__ import annotations


class ZotseqError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(ZotseqError):
    """Raised when required configuration (e.g. the Logseq token) is missing or invalid."""


class InvalidQuery(ZotseqError):
    """Raised for an empty search query or a malformed item key."""


class StoreUnavailable(ZotseqError):
    """Raised when the Zotero local API cannot be reached at all."""


class StoreError(ZotseqError):
    """Raised when Zotero answers with a non-success response.

    Attributes:
        status_code: HTTP status code, or None when the body was unusable
        detail: Reason phrase or parse error description
    """

    def __init__(self, status_code: int | None, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            message = f"Zotero API error: {detail}"
        else:
            message = f"Zotero API error: {status_code} {detail}".rstrip()
        super().__init__(message)


class NoResults(ZotseqError):
    """Signals an empty search result. Not a failure."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"No results found for {query!r}")


class ExistenceCheckDegraded(ZotseqError):
    """Internal: the identity-property lookup failed and the title fallback is used."""

    def __init__(self, key: str, cause: Exception):
        self.key = key
        self.cause = cause
        super().__init__(f"Property lookup failed for {key}: {type(cause).__name__}: {cause}")


class PersistFailure(ZotseqError):
    """Raised when page creation returns no page handle."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Page creation returned no page for {title!r}")


class ContentAppendFailure(ZotseqError):
    """Non-fatal: the abstract block could not be appended to a created page."""

    def __init__(self, page_name: str, cause: Exception):
        self.page_name = page_name
        self.cause = cause
        super().__init__(f"Failed to append abstract to {page_name!r}: {cause}")


class PageStoreError(ZotseqError):
    """Raised when the Logseq API rejects a call or returns an error body."""

    def __init__(self, method: str, detail: str, status_code: int | None = None):
        self.method = method
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{method} failed: {detail}")


class PageStoreUnavailable(PageStoreError):
    """Raised when the Logseq API server cannot be reached."""
