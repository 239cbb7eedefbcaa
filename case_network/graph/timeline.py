"""Date-range filtering of event nodes."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Union

from case_network.graph.models import GraphLink, GraphNode, NodeType

logger = logging.getLogger(__name__)

DEFAULT_START = date(1900, 1, 1)
DEFAULT_END = date(2099, 12, 31)

DateLike = Union[date, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a date or ISO date/datetime string; None if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def filter_by_date_range(
    nodes: list[GraphNode],
    links: list[GraphLink],
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> tuple[list[GraphNode], list[GraphLink]]:
    """Keep event nodes dated inside [start_date, end_date].

    Non-event nodes and events without a date are always kept; events whose
    date cannot be parsed are dropped. Links survive only if both endpoints do.
    With no bounds the inputs are returned unchanged.

    Args:
        nodes: Graph nodes
        links: Graph links
        start_date: Inclusive lower bound, or None
        end_date: Inclusive upper bound, or None

    Returns:
        Tuple of (nodes, links)
    """
    if not start_date and not end_date:
        return nodes, links

    start = parse_date(start_date) or DEFAULT_START
    end = parse_date(end_date) or DEFAULT_END

    kept: list[GraphNode] = []
    for node in nodes:
        if node.type != NodeType.EVENT:
            kept.append(node)
            continue
        raw = node.metadata.get("date")
        if not raw:
            kept.append(node)
            continue
        event_date = parse_date(raw)
        if event_date is None:
            logger.debug(f"Dropping event {node.id}: unparseable date {raw!r}")
            continue
        if start <= event_date <= end:
            kept.append(node)

    kept_ids = {n.id for n in kept}
    kept_links = [l for l in links if l.source in kept_ids and l.target in kept_ids]
    return kept, kept_links
