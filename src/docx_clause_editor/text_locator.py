"""
Anchor lookup over the paragraph/run text stream.

Text in a Word paragraph is fragmented across runs, so every lookup works on
the concatenated run text of a paragraph and reports positions as character
offsets into that text. Three kinds of anchor are supported:

- a heading, found by substring
- a numbered section, found by its leading label (``11.``, ``11)``, ``11\\t``)
  or a fallback pattern for documents that use automatic numbering
- a sentence boundary inside one paragraph
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .errors import AnchorNotFoundError
from .models.paragraph import Paragraph
from .suggestions import SuggestionGenerator

logger = logging.getLogger(__name__)

# Delimiters that may follow a section number
STRICT_DELIMITERS = r"[.)]"
LENIENT_DELIMITERS = r"[.)]|\s"

_LABEL_PATTERN = r"^(?P<lead>\s*)(?P<number>\d+)(?P<delimiter>{delimiters})"


@dataclass(frozen=True)
class SectionLabel:
    """A leading numeric section label such as ``11.``.

    Attributes:
        number: The section number
        delimiter: The character following the number
        start: Offset of the first digit in the untrimmed paragraph text
        end: Offset just past the last digit
    """

    number: int
    delimiter: str
    start: int
    end: int

    @property
    def content_start(self) -> int:
        """Offset just past the delimiter."""
        return self.end + len(self.delimiter)


@dataclass(frozen=True)
class Anchor:
    """A located paragraph.

    Attributes:
        paragraph: The matched paragraph
        index: Position of the paragraph in the searched list
        label: The section label the paragraph was matched by, if any
    """

    paragraph: Paragraph
    index: int
    label: SectionLabel | None = None


def parse_section_label(text: str, delimiters: str = STRICT_DELIMITERS) -> SectionLabel | None:
    """Parse the leading section label of a paragraph text.

    Args:
        text: Untrimmed paragraph text
        delimiters: Regex alternation of accepted delimiters

    Returns:
        The label, or None if the text does not start with one

    Example:
        >>> parse_section_label("  10. Term")
        SectionLabel(number=10, delimiter='.', start=2, end=4)
    """
    match = re.match(_LABEL_PATTERN.format(delimiters=delimiters), text)
    if match is None:
        return None
    # "1.2." is a multi-level label, not section 1
    if match.group("delimiter") == "." and text[match.end() : match.end() + 1].isdigit():
        return None
    return SectionLabel(
        number=int(match.group("number")),
        delimiter=match.group("delimiter"),
        start=match.start("number"),
        end=match.end("number"),
    )


def starts_with_section_label(text: str) -> bool:
    """Check whether text starts with a strict label (``<digits>.`` or ``<digits>)``)."""
    return parse_section_label(text) is not None


class TextLocator:
    """Finds anchors in a list of paragraphs.

    All methods are pure: they read paragraph text and never touch the tree.
    Absence is reported with AnchorNotFoundError, which callers are expected
    to treat as "instruction does not apply".
    """

    def find_heading(self, paragraphs: list[Paragraph], search: str) -> Anchor:
        """Find the first paragraph whose text contains ``search``.

        Args:
            paragraphs: Paragraphs in document order
            search: Case-sensitive substring

        Returns:
            Anchor for the first matching paragraph

        Raises:
            AnchorNotFoundError: If no paragraph contains the text
        """
        for index, paragraph in enumerate(paragraphs):
            if search in paragraph.text:
                logger.debug("Heading %r matched paragraph %d", search, index)
                return Anchor(paragraph, index)

        raise AnchorNotFoundError(
            f"heading '{search}'",
            suggestions=SuggestionGenerator.generate_suggestions(search, paragraphs),
        )

    def find_section_content(
        self,
        paragraphs: list[Paragraph],
        number: int,
        fallback_pattern: str | None = None,
    ) -> Anchor:
        """Find the paragraph holding the content of section ``number``.

        The first paragraph wins. A paragraph matches when its text starts
        with the number followed by ``.``, ``)`` or whitespace, or when its
        stripped text matches ``fallback_pattern`` (case-insensitive, anchored
        at the start).

        Args:
            paragraphs: Paragraphs in document order
            number: Section number
            fallback_pattern: Optional regex for documents without literal labels

        Returns:
            Anchor for the first matching paragraph; ``label`` is set when the
            paragraph was matched by its number

        Raises:
            AnchorNotFoundError: If no paragraph matches
        """
        fallback = re.compile(fallback_pattern, re.IGNORECASE) if fallback_pattern else None

        for index, paragraph in enumerate(paragraphs):
            text = paragraph.text
            label = parse_section_label(text, LENIENT_DELIMITERS)
            if label is not None and label.number == number:
                logger.debug("Section %d matched paragraph %d by label", number, index)
                return Anchor(paragraph, index, label)
            if fallback is not None and fallback.match(text.strip()):
                logger.debug("Section %d matched paragraph %d by fallback", number, index)
                return Anchor(paragraph, index)

        raise AnchorNotFoundError(
            f"section {number}",
            suggestions=SuggestionGenerator.section_suggestions(number, paragraphs),
        )

    def find_section_anchor(self, paragraphs: list[Paragraph], number: int) -> Anchor:
        """Find the paragraph after which a new section ``number + 1`` goes.

        The last paragraph labelled ``<number>.`` or ``<number>)`` wins: later
        occurrences are the section itself rather than cross-references in a
        table of contents or recitals.

        Args:
            paragraphs: Paragraphs in document order
            number: Number of the section to insert after

        Returns:
            Anchor for the last matching paragraph, with its label

        Raises:
            AnchorNotFoundError: If no paragraph carries the label
        """
        found: Anchor | None = None
        for index, paragraph in enumerate(paragraphs):
            label = parse_section_label(paragraph.text)
            if label is not None and label.number == number:
                found = Anchor(paragraph, index, label)

        if found is None:
            raise AnchorNotFoundError(
                f"section {number}",
                suggestions=SuggestionGenerator.section_suggestions(number, paragraphs),
            )

        logger.debug("Section %d anchor is paragraph %d", number, found.index)
        return found

    def find_sentence_boundary(self, paragraph: Paragraph, start: int = 0) -> int:
        """Find the offset of the first ``.`` at or after ``start``.

        Callers pass the offset just past a section label, so the period of
        the label itself (``11.``) is never taken as the end of a sentence.
        With ``start=0`` this is simply the first period in the paragraph.

        Args:
            paragraph: The paragraph to search
            start: Offset to begin searching from

        Returns:
            Character offset of the period in the paragraph text

        Raises:
            AnchorNotFoundError: If the paragraph has no period after ``start``
        """
        offset = paragraph.text.find(".", start)
        if offset == -1:
            raise AnchorNotFoundError(
                "a sentence boundary",
                hint="The target paragraph contains no period to insert after",
            )
        return offset
