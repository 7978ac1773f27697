"""
Paragraph segmentation and heading classification.

Text is split on blank lines into paragraphs. Each paragraph is run
through an ordered chain of heading detectors; the first match wins:

1. Custom patterns from configuration (group 1 is the title, level 1)
2. Numbered outlines ("2.1 Title", level = number of components)
3. Markdown headings ("## Title", level = number of #)
4. Common section names ("Introduction", "References", ...)
5. Short label-like lines ("Setup:", "INSTALLATION", "Getting started")

Levels are capped at 4. Paragraphs that match nothing are body text of
the currently open section.
"""

import re
from typing import NamedTuple

from thoughtgraph.config import SegmenterConfig
from thoughtgraph.models.tree import Segment
from thoughtgraph.utils.exceptions import ConfigurationError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

MAX_HEADING_LEVEL = 4

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_NUMBERED = re.compile(r"(\d+(?:\.\d+)*)\.?\s+(.*)")
_MARKDOWN = re.compile(r"(#{1,6})\s+(.*)")
_COMMON_SECTIONS = re.compile(
    r"(introduction|abstract|conclusion|references|appendix|summary|overview|background)",
    re.IGNORECASE,
)
_LABEL_SENTENCE = re.compile(r"[A-Z][^.!?]*")


class HeadingMatch(NamedTuple):
    """Outcome of classifying one paragraph."""

    is_heading: bool
    title: str = ""
    level: int = 0


NOT_A_HEADING = HeadingMatch(False)


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines into trimmed, non-empty paragraphs."""
    if not text:
        return []
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


class Segmenter:
    """
    Turns raw text into a flat, leveled list of segments.

    Usage:
        segmenter = Segmenter()
        segments = segmenter.segment("# Intro\\nHello\\n\\n# Setup\\nRun install")
    """

    def __init__(self, config: SegmenterConfig | None = None):
        """
        Initialize segmenter.

        Args:
            config: Segmentation configuration. Uses defaults if not provided.

        Raises:
            ConfigurationError: If a custom heading pattern is not a valid regex
        """
        self.config = config or SegmenterConfig()
        self._custom_patterns: list[re.Pattern] = []
        for source in self.config.heading_patterns:
            try:
                self._custom_patterns.append(re.compile(source))
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid heading pattern: {source!r}", context={"error": str(e)}
                ) from e

    def classify(self, paragraph: str) -> HeadingMatch:
        """
        Decide whether a paragraph is a heading.

        Args:
            paragraph: Trimmed paragraph text

        Returns:
            HeadingMatch with title and level, or NOT_A_HEADING
        """
        for pattern in self._custom_patterns:
            match = pattern.search(paragraph)
            if match:
                title = match.group(1) if pattern.groups and match.group(1) else paragraph
                return HeadingMatch(True, title, 1)

        match = _NUMBERED.match(paragraph)
        if match:
            level = min(len(match.group(1).split(".")), MAX_HEADING_LEVEL)
            return HeadingMatch(True, match.group(2), level)

        match = _MARKDOWN.match(paragraph)
        if match:
            return HeadingMatch(True, match.group(2), min(len(match.group(1)), MAX_HEADING_LEVEL))

        if len(paragraph) < 50 and _COMMON_SECTIONS.match(paragraph):
            return HeadingMatch(True, paragraph, 1)

        if self._looks_like_label(paragraph):
            return HeadingMatch(True, paragraph.rstrip(":"), 1)

        return NOT_A_HEADING

    @staticmethod
    def _looks_like_label(paragraph: str) -> bool:
        if len(paragraph) >= 100 or len(paragraph.split()) > 10:
            return False
        return (
            paragraph.endswith(":")
            or _LABEL_SENTENCE.fullmatch(paragraph) is not None
            or paragraph == paragraph.upper()
        )

    def segment(self, text: str) -> list[Segment]:
        """
        Segment text into leveled sections.

        A heading opens a new section that collects the body paragraphs
        following it. Body paragraphs seen before any heading are each
        wrapped in a synthetic "Section N" so no content is orphaned.

        Args:
            text: Plain document text

        Returns:
            Segments in document order (empty for empty text)
        """
        paragraphs = split_paragraphs(text)
        segments: list[Segment] = []

        open_heading: HeadingMatch | None = None
        open_start = 0
        open_paragraphs: list[str] = []

        def close_section(end_index: int) -> None:
            segments.append(
                Segment(
                    title=open_heading.title,
                    paragraphs=list(open_paragraphs),
                    start_index=open_start,
                    end_index=end_index,
                    level=open_heading.level,
                )
            )

        for index, paragraph in enumerate(paragraphs):
            heading = self.classify(paragraph)

            if heading.is_heading:
                if open_heading is not None:
                    close_section(index - 1)
                open_heading = heading
                open_start = index
                open_paragraphs = [paragraph]
            elif open_heading is not None:
                open_paragraphs.append(paragraph)
            else:
                segments.append(
                    Segment(
                        title=f"Section {len(segments) + 1}",
                        paragraphs=[paragraph],
                        start_index=index,
                        end_index=index,
                        level=1,
                    )
                )

        if open_heading is not None:
            close_section(len(paragraphs) - 1)

        logger.debug(f"Segmented {len(paragraphs)} paragraphs into {len(segments)} sections")
        return segments
