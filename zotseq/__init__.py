"""
zotseq - search a Zotero library and import items into a Logseq graph.

Search results are checked against the graph so items that already have a
page are marked, and a selected item is imported as a new page at most once,
even when the import is triggered twice.

Main entry point is the CLI via `zotseq search` command.

Example:
    $ zotseq search "deglobalization" --import 2
"""

__all__ = [
    "__version__",
    "ExistenceChecker",
    "ImportCoordinator",
    "InFlightRegistry",
    "Record",
    "ResultSet",
]
__version__ = "0.1.0"

from .core.existence import ExistenceChecker
from .core.importer import ImportCoordinator
from .core.registry import InFlightRegistry
from .core.result_set import ResultSet
from .core.types import Record
