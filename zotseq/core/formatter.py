"""
Pure transforms from a Zotero Record to display and page fields.

Nothing in this module performs I/O; every function is deterministic in
its input.
"""

from __future__ import annotations

import re
from typing import Iterable

from .types import Creator, ImportableFields, PageProperties, Record

PAGE_TAG = "#zot"
IDENTITY_PROPERTY = "zotero-key"
ABSTRACT_HEADING = "**Abstract:**"

_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")

# Applied in order. Non-greedy and single-line, so nested or malformed
# tags are left as they are.
_MARKUP_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"<i>(.*?)</i>"), r"*\1*"),
    (re.compile(r"<em>(.*?)</em>"), r"*\1*"),
    (re.compile(r"<b>(.*?)</b>"), r"**\1**"),
    (re.compile(r"<strong>(.*?)</strong>"), r"**\1**"),
    (re.compile(r"<sup>(.*?)</sup>"), r"^\1^"),
    (re.compile(r"<sub>(.*?)</sub>"), r"~\1~"),
    (re.compile(r'<a href="(.*?)">(.*?)</a>'), r"[\2](\1)"),
    (re.compile(r"<br\s*/?>"), "\n"),
    (re.compile(r"</?p>"), "\n"),
]


def format_creator(creator: Creator) -> str:
    """Return the creator's full name, or first and last name joined by a space."""
    if creator.name:
        return creator.name
    parts = [part for part in (creator.first_name, creator.last_name) if part]
    return " ".join(parts)


def authors_display(creators: Iterable[Creator]) -> str:
    """Join the names of all creators with the "author" role.

    Editors, translators and other roles are left out. An empty input
    gives an empty string.
    """
    return ", ".join(format_creator(c) for c in creators if c.creator_type == "author")


def extract_year(date: str | None) -> int | None:
    """Return the first 19xx/20xx year found in a free-text date, if any.

    Example:
        >>> extract_year("Published 2021-05")
        2021
        >>> extract_year("n.d.") is None
        True
    """
    if not date:
        return None
    match = _YEAR_RE.search(date)
    if match is None:
        return None
    return int(match.group(1))


def placeholder_title(key: str) -> str:
    return f"Zotero Item {key}"


def lookup_title(record: Record) -> str:
    """Name used by the degraded title-based existence lookup."""
    return record.title or placeholder_title(record.key)


def page_title(record: Record) -> str:
    """Human-visible page name: the title (or placeholder) plus the #zot tag."""
    return f"{lookup_title(record)} {PAGE_TAG}"


def zotero_link(key: str) -> str:
    return f"zotero://select/library/items/{key}"


def html_to_markdown(html: str | None) -> str:
    """Convert the small set of inline tags Zotero abstracts use to Markdown.

    Handles italic, bold, superscript, subscript, links, line breaks and
    paragraphs. Anything else passes through unchanged.

    Example:
        >>> html_to_markdown("<b>Risk</b> and <i>policy</i>")
        '**Risk** and *policy*'
    """
    if not html:
        return ""
    text = html
    for pattern, replacement in _MARKUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def importable_fields(record: Record) -> ImportableFields:
    return ImportableFields(
        page_title=page_title(record),
        authors_display=authors_display(record.creators),
        year=extract_year(record.date),
        markdown_abstract=html_to_markdown(record.abstract),
    )


def page_properties(record: Record, fields: ImportableFields | None = None) -> PageProperties:
    """Build the property set for a new page from a record and its derived fields."""
    fields = fields or importable_fields(record)
    return PageProperties(
        title=record.title or "",
        authors=fields.authors_display,
        year=fields.year,
        item_type=record.item_type,
        external_id=record.key,
        external_link=zotero_link(record.key),
        url=record.url or "",
    )
