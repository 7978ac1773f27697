"""Query source discovery for graph search."""

from thoughtgraph.models.graph import GraphNode


def find_query_sources(query: str, nodes: list[GraphNode]) -> list[GraphNode]:
    """
    Nodes that match at least one query term.

    A term matches when it occurs in the node's lower-cased title and
    summary, or is one of its keywords. Nodes are ordered by the number
    of matching terms, most first; ties keep graph order.

    Args:
        query: Natural-language query
        nodes: Candidate nodes

    Returns:
        Matching nodes (empty for an empty query)
    """
    terms = query.lower().split()
    if not terms:
        return []

    scored: list[tuple[int, GraphNode]] = []
    for node in nodes:
        node_text = f"{node.title} {node.summary}".lower()
        keywords = node.metadata.keywords
        matches = sum(1 for term in terms if term in node_text or term in keywords)
        if matches > 0:
            scored.append((matches, node))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [node for _, node in scored]
