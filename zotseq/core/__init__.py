"""
Core domain models and business logic.

This package contains the record types, the pure formatting transforms,
the existence checker, the result set and the guarded import coordinator.
"""

from .types import (
    Creator,
    ImportableFields,
    ImportOutcome,
    ImportStatus,
    Page,
    PageProperties,
    Record,
    ResultEntry,
)
from .formatter import authors_display, extract_year, html_to_markdown, page_title
from .registry import InFlightRegistry
from .existence import ExistenceCheck, ExistenceChecker
from .result_set import ResultSet
from .importer import ImportCoordinator

__all__ = [
    "Creator",
    "Record",
    "ImportableFields",
    "PageProperties",
    "Page",
    "ResultEntry",
    "ImportOutcome",
    "ImportStatus",
    "authors_display",
    "extract_year",
    "html_to_markdown",
    "page_title",
    "InFlightRegistry",
    "ExistenceCheck",
    "ExistenceChecker",
    "ResultSet",
    "ImportCoordinator",
]
