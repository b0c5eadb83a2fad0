"""
Formatting inheritance for inserted content.

Inserted paragraphs copy their look from neighbouring paragraphs instead of
building formatting from scratch. Property bags are copied verbatim; only
break-related paragraph properties are removed before reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import BREAK_PROPERTIES
from .models.paragraph import Paragraph
from .models.properties import PropertyBag
from .text_locator import starts_with_section_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InheritedStyle:
    """Paragraph and run properties taken from a donor paragraph."""

    paragraph: PropertyBag
    run: PropertyBag


@dataclass(frozen=True)
class SectionStyles:
    """Property sources for a new numbered section.

    Attributes:
        heading_run: Run properties of the labelled donor paragraph
        body_run: Run properties for the section's content text
        body_paragraph: Paragraph properties for the new paragraph, with
            break properties already removed
    """

    heading_run: PropertyBag
    body_run: PropertyBag
    body_paragraph: PropertyBag


def paragraph_style_of(paragraph: Paragraph | None) -> PropertyBag:
    """Get the paragraph properties of ``paragraph`` (empty if None)."""
    if paragraph is None:
        return PropertyBag.empty()
    return paragraph.properties


def run_style_of(paragraph: Paragraph | None) -> PropertyBag:
    """Get the properties of the paragraph's first run (empty if none)."""
    if paragraph is None:
        return PropertyBag.empty()
    first = paragraph.first_run
    return first.properties if first is not None else PropertyBag.empty()


def strip_break_properties(properties: PropertyBag) -> PropertyBag:
    """Remove page-break-before, explicit breaks and section properties."""
    return properties.without(*BREAK_PROPERTIES)


def body_style_after(heading: Paragraph) -> InheritedStyle:
    """Get the body style for text inserted after a heading.

    The donor is the paragraph immediately following the heading, which is
    presumed to carry body formatting; the heading itself is never used.

    Args:
        heading: The heading paragraph

    Returns:
        The donor's properties (empty bags when there is no donor)
    """
    donor = heading.next_paragraph()
    if donor is None:
        logger.debug("No paragraph follows the heading; inserting without style")
    return InheritedStyle(
        paragraph=strip_break_properties(paragraph_style_of(donor)),
        run=run_style_of(donor),
    )


def find_body_donor(paragraphs: list[Paragraph], after_index: int) -> Paragraph | None:
    """Find the nearest paragraph after ``after_index`` without a section label.

    Args:
        paragraphs: Paragraphs in document order
        after_index: Index of the labelled paragraph

    Returns:
        The donor paragraph, or None if every later paragraph is labelled
    """
    for paragraph in paragraphs[after_index + 1 :]:
        if not starts_with_section_label(paragraph.text.strip()):
            return paragraph
    return None


def section_styles(paragraphs: list[Paragraph], anchor_index: int) -> SectionStyles:
    """Collect the style sources for a section inserted after ``anchor_index``.

    Args:
        paragraphs: Paragraphs in document order
        anchor_index: Index of the labelled paragraph the section follows

    Returns:
        SectionStyles; the body run falls back to the heading run when no
        body donor (or no donor run properties) exists
    """
    heading_run = run_style_of(paragraphs[anchor_index])
    donor = find_body_donor(paragraphs, anchor_index)

    body_run = run_style_of(donor)
    if not body_run:
        body_run = heading_run

    return SectionStyles(
        heading_run=heading_run,
        body_run=body_run,
        body_paragraph=strip_break_properties(paragraph_style_of(donor)),
    )
