"""Paragraph segmentation and heading detection."""

from thoughtgraph.core.segmenter.segmenter import (
    MAX_HEADING_LEVEL,
    NOT_A_HEADING,
    HeadingMatch,
    Segmenter,
    split_paragraphs,
)

__all__ = [
    "Segmenter",
    "HeadingMatch",
    "NOT_A_HEADING",
    "MAX_HEADING_LEVEL",
    "split_paragraphs",
]
