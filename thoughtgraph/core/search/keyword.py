"""
Keyword search over tree indexes (no reasoning engine required).

Scores every node against the query terms with TF-IDF-like weights:

    title term match          +10 per term
    title substring match      +5 per term
    summary occurrences        +2 each
    text occurrences         +0.5 each, at most +5 per term
    whole query in title      +15 once
"""

import time

from thoughtgraph.config import SearchConfig
from thoughtgraph.core.hierarchy import flatten_tree
from thoughtgraph.core.tokenizer import tokenize
from thoughtgraph.models.search import TreeSearchResult
from thoughtgraph.models.tree import TreeIndex, TreeNode
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

TITLE_TERM_SCORE = 10.0
TITLE_SUBSTRING_SCORE = 5.0
SUMMARY_TERM_SCORE = 2.0
TEXT_TERM_SCORE = 0.5
TEXT_TERM_CAP = 5.0
TITLE_PHRASE_BONUS = 15.0


class KeywordTreeSearch:
    """
    Keyword-based tree search.

    Usage:
        search = KeywordTreeSearch(SearchConfig(max_results=5))
        result = search.search_tree(tree, "installation guide")
    """

    def __init__(self, config: SearchConfig | None = None):
        self.config = config or SearchConfig()

    def search_tree(self, tree: TreeIndex, query: str) -> TreeSearchResult:
        """
        Rank tree nodes against a query.

        Only nodes with a positive score are returned, best first,
        truncated to max_results. Nodes deeper than max_depth are not
        considered.

        Args:
            tree: Tree index to search
            query: Natural-language query

        Returns:
            Selected node ids and a short rationale
        """
        start = time.perf_counter()
        query_terms = tokenize(query)

        scored: list[tuple[TreeNode, float]] = []
        if query_terms:
            for node in flatten_tree(tree.nodes, depth_limit=self.config.max_depth):
                score = self.score_node(node, query_terms)
                if score > 0:
                    scored.append((node, score))

        scored.sort(key=lambda pair: pair[1], reverse=True)
        top = scored[: self.config.max_results]

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"Keyword search '{query}': {len(scored)} matches, {elapsed_ms:.1f}ms")

        return TreeSearchResult(
            node_list=[node.node_id for node, _ in top],
            rationale=self.generate_rationale(query, top),
            search_time_ms=elapsed_ms,
        )

    @staticmethod
    def score_node(node: TreeNode, query_terms: list[str]) -> float:
        """
        Score one node against tokenized query terms.

        Args:
            node: Tree node
            query_terms: Output of tokenize(query)

        Returns:
            Non-negative relevance score
        """
        title = node.title.lower()
        title_terms = tokenize(node.title)
        summary_terms = tokenize(node.summary)
        text_terms = tokenize(node.text) if node.text else []

        score = 0.0
        for term in query_terms:
            if term in title_terms:
                score += TITLE_TERM_SCORE
            if term in title:
                score += TITLE_SUBSTRING_SCORE
            score += summary_terms.count(term) * SUMMARY_TERM_SCORE
            score += min(text_terms.count(term) * TEXT_TERM_SCORE, TEXT_TERM_CAP)

        if query_terms and " ".join(query_terms) in title:
            score += TITLE_PHRASE_BONUS

        return score

    @staticmethod
    def generate_rationale(query: str, scored: list[tuple[TreeNode, float]]) -> str:
        if not scored:
            return f'No matching nodes found for query: "{query}"'

        top_matches = ", ".join(f'"{node.title}" (score: {score:.1f})' for node, score in scored[:3])
        return (
            f'Found {len(scored)} relevant nodes for "{query}". Top matches: {top_matches}. '
            "Matching based on keyword overlap in titles, summaries, and content."
        )
