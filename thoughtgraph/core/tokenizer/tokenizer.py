"""
Lexical utilities shared by the indexers and searchers.

Every relevance signal in ThoughtGraph is derived from surface text:
query terms, keyword sets and truncated summaries. Keeping the
normalization in one place guarantees that the indexer and the
searchers see the same tokens.
"""

import re

_PUNCTUATION = re.compile(r"[^\w\s]")

MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 4


def normalize(text: str) -> str:
    """Lower-case text and replace punctuation with spaces."""
    return _PUNCTUATION.sub(" ", text.lower())


def tokenize(text: str) -> list[str]:
    """
    Split text into lower-case search terms.

    Terms of a single character are dropped.

    Args:
        text: Text to tokenize

    Returns:
        Terms in document order (duplicates kept)
    """
    if not text:
        return []
    return [term for term in normalize(text).split() if len(term) > 1]


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """
    Extract the keyword set of a node.

    Keywords are lower-cased words longer than three characters, in
    order of first appearance, without duplicates and capped at `limit`.

    Args:
        text: Node text
        limit: Maximum number of keywords

    Returns:
        Ordered, duplicate-free keyword list
    """
    keywords: list[str] = []
    for word in normalize(text).split():
        if len(word) >= MIN_KEYWORD_LENGTH and word not in keywords:
            keywords.append(word)
            if len(keywords) == limit:
                break
    return keywords


def jaccard_similarity(
    keywords1: list[str] | frozenset[str], keywords2: list[str] | frozenset[str]
) -> float:
    """
    Jaccard similarity of two keyword sets.

    Frozensets are used as they are; lists are converted first.

    Returns:
        Similarity in [0, 1]; 0 when either set is empty
    """
    if not keywords1 or not keywords2:
        return 0.0
    set1 = keywords1 if isinstance(keywords1, frozenset) else frozenset(keywords1)
    set2 = keywords2 if isinstance(keywords2, frozenset) else frozenset(keywords2)
    return len(set1 & set2) / len(set1 | set2)


def summarize(paragraphs: list[str], max_length: int = 200) -> str:
    """
    Build a bounded-length summary from paragraphs.

    Paragraphs are joined with spaces; text longer than `max_length`
    is cut and terminated with an ellipsis so the result never exceeds
    `max_length` characters.
    """
    text = " ".join(paragraphs)
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
