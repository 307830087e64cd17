"""Narrow free-form model output down to the JSON object it carries."""

from __future__ import annotations

import re

# ```json\n ... ``` or ``` ... ```; the inner text replaces the whole fence.
FENCE_PATTERN = re.compile(r"```(?:json\n)?([\s\S]*?)```")


def strip_fences(text: str) -> str:
    return FENCE_PATTERN.sub(r"\1", text)


def extract_json_text(text: str) -> str:
    """
    Return the span from the first "{" to the last "}" after removing fences.

    When no such span exists the de-fenced text comes back unchanged, which
    callers should read as "parsing will probably fail". Nothing is parsed here.
    """
    unfenced = strip_fences(text)
    first = unfenced.find("{")
    last = unfenced.rfind("}")
    if first != -1 and last != -1 and last > first:
        return unfenced[first : last + 1]
    return unfenced
