"""Size ceilings applied before super-linear analyses."""

from typing import Optional, Sized

from case_network.errors import GraphTooLargeError


def check_graph_size(
    nodes: Sized,
    links: Sized,
    max_nodes: Optional[int] = None,
    max_links: Optional[int] = None,
) -> None:
    """Raise GraphTooLargeError if the graph exceeds a ceiling; None disables a check."""
    if max_nodes is not None and len(nodes) > max_nodes:
        raise GraphTooLargeError("nodes", len(nodes), max_nodes)
    if max_links is not None and len(links) > max_links:
        raise GraphTooLargeError("links", len(links), max_links)
