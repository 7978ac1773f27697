"""
Tokenizer module for query terms, keyword sets and summaries.

Used by the segmenter (summaries), the graph indexer (keywords and
semantic edge weights) and both search strategies (query terms).
"""

from thoughtgraph.core.tokenizer.tokenizer import (
    MAX_KEYWORDS,
    extract_keywords,
    jaccard_similarity,
    normalize,
    summarize,
    tokenize,
)

__all__ = [
    "MAX_KEYWORDS",
    "normalize",
    "tokenize",
    "extract_keywords",
    "jaccard_similarity",
    "summarize",
]
