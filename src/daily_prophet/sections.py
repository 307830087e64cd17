"""Slice an edition payload into the sections the API exposes."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from .errors import SectionNotFound
from .models import EditionSummary, NewsTitle
from .schema import DEFAULT_SECTIONS

_INDEXED = re.compile(r"^(?P<field>[a-z_]+?)(?P<index>\d+)$")


def section(
    payload: Mapping[str, Any],
    name: str,
    sections: Mapping[str, str] = DEFAULT_SECTIONS,
    list_field: str = "news",
) -> Any:
    """
    Return one section of an edition.

    Scalar sections come back wrapped in their payload field name, e.g.
    "magic" -> {"magic_tip": ...}. "news2" returns the second news item.
    Raises SectionNotFound for unknown names and out-of-range indexes.
    """
    wanted = name.strip().lower()
    field = sections.get(wanted)
    if field is not None:
        return {field: payload.get(field)}

    match = _INDEXED.match(wanted)
    if not match or match.group("field") != list_field.lower():
        raise SectionNotFound(name)
    index = int(match.group("index"))
    items = payload.get(list_field)
    if index < 1 or not isinstance(items, list) or len(items) < index:
        raise SectionNotFound(name)
    item = items[index - 1]
    if item is None:
        raise SectionNotFound(name)
    return item


def summarize(payload: Mapping[str, Any], today: str, list_field: str = "news") -> EditionSummary:
    """Date, overview and (id, title) pairs of the news list."""
    items = payload.get(list_field)
    titles = []
    if isinstance(items, list):
        for item in items:
            if isinstance(item, dict):
                titles.append(NewsTitle(id=item.get("id"), title=item.get("title")))
    return EditionSummary(
        date=str(payload.get("date") or today),
        overview=str(payload.get("overview") or ""),
        titles=titles,
    )


def available_sections(sections: Mapping[str, str], list_field: str = "news") -> Dict[str, str]:
    """Human-readable map of routable names for banners and CLI help."""
    names = {name: field for name, field in sections.items()}
    names[f"{list_field}<N>"] = f"{list_field}[N-1]"
    return names
