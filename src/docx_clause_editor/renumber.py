"""
Section renumbering after a new numbered section has been inserted.
"""

from __future__ import annotations

import logging

from .models.paragraph import Paragraph
from .text_locator import parse_section_label

logger = logging.getLogger(__name__)


class SectionRenumberer:
    """Shifts literal section labels up by one.

    Only simple numeric labels (``12.``, ``12)``) are recognised. Multi-level
    labels such as ``1.2.`` are left alone, and automatic Word numbering is
    untouched because it has no literal text.
    """

    def renumber(self, paragraphs: list[Paragraph], first_number: int) -> int:
        """Increment every label ``N >= first_number`` in ``paragraphs``.

        This is a single forward pass. The caller passes only the paragraphs
        that follow the newly inserted section, so the new section's own
        label is never re-matched.

        Args:
            paragraphs: Paragraphs to scan, in document order
            first_number: Number given to the inserted section

        Returns:
            Number of paragraphs relabelled
        """
        renumbered = 0
        for paragraph in paragraphs:
            label = parse_section_label(paragraph.text)
            if label is None or label.number < first_number:
                continue

            new_number = label.number + 1
            paragraph.replace_text(label.start, label.end, str(new_number))
            renumbered += 1
            logger.debug("Renumbered section %d -> %d", label.number, new_number)

        return renumbered
