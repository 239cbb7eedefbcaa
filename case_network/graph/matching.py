"""Name-mention heuristics for linking entities to free-text event fields.

Matching is a case-insensitive substring test of a name's first token, last
token or full form against the event's ``individuals`` text. Short or common
names can produce false positives; this precision trade-off is accepted.
"""

from typing import Iterable

from case_network.graph.entities import Entity


def name_tokens(name: str) -> tuple[str, str]:
    """Return the lower-cased first and last whitespace-separated tokens."""
    parts = name.lower().split()
    if not parts:
        return "", ""
    return parts[0], parts[-1]


def is_mentioned(text_lower: str, name: str, include_full_name: bool = True) -> bool:
    """Check whether ``name`` is mentioned in already lower-cased ``text_lower``.

    Empty tokens never match.
    """
    if not text_lower:
        return False
    first, last = name_tokens(name)
    if first and first in text_lower:
        return True
    if last and last in text_lower:
        return True
    if include_full_name:
        full = name.strip().lower()
        return bool(full) and full in text_lower
    return False


def mentioned_entities(
    individuals: str,
    entities: Iterable[Entity],
    include_full_name: bool = True,
) -> list[str]:
    """Return ids of entities mentioned in ``individuals``, in entity order."""
    text_lower = (individuals or "").lower()
    if not text_lower:
        return []
    return [
        entity.id for entity in entities
        if is_mentioned(text_lower, entity.name, include_full_name)
    ]
