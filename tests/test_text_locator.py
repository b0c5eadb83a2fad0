"""
Tests for anchor lookup.
"""

import pytest
from lxml import etree

from docx_clause_editor.constants import w
from docx_clause_editor.errors import AnchorNotFoundError
from docx_clause_editor.models.paragraph import Paragraph
from docx_clause_editor.text_locator import (
    LENIENT_DELIMITERS,
    TextLocator,
    parse_section_label,
    starts_with_section_label,
)


def create_paragraph(*texts: str) -> Paragraph:
    """Helper to create a Paragraph with one run per text."""
    p = etree.Element(w("p"))
    for text in texts:
        r = etree.SubElement(p, w("r"))
        t = etree.SubElement(r, w("t"))
        t.text = text
    return Paragraph(p)


def create_paragraphs(*texts: str) -> list[Paragraph]:
    return [create_paragraph(text) for text in texts]


@pytest.fixture
def locator():
    return TextLocator()


class TestParseSectionLabel:
    def test_period(self):
        label = parse_section_label("10. Term")
        assert (label.number, label.delimiter, label.start, label.end) == (10, ".", 0, 2)
        assert label.content_start == 3

    def test_leading_whitespace(self):
        label = parse_section_label("  10. Term")
        assert (label.start, label.end) == (2, 4)

    def test_parenthesis(self):
        assert parse_section_label("11) Notices").delimiter == ")"

    def test_whitespace_delimiter_is_lenient_only(self):
        assert parse_section_label("11\tNotices") is None
        label = parse_section_label("11\tNotices", LENIENT_DELIMITERS)
        assert label.number == 11
        assert label.delimiter == "\t"

    def test_multi_level_label_rejected(self):
        assert parse_section_label("1.2. Scope") is None
        assert parse_section_label("1.2 Scope", LENIENT_DELIMITERS) is None

    def test_no_label(self):
        assert parse_section_label("Section 10. Term") is None
        assert parse_section_label("") is None
        assert parse_section_label("10") is None

    def test_nothing_required_after_delimiter(self):
        label = parse_section_label("10.Term")
        assert (label.number, label.delimiter, label.content_start) == (10, ".", 3)
        assert starts_with_section_label("10)Term")

    def test_large_numbers(self):
        assert parse_section_label("1234. Big").number == 1234

    def test_starts_with_section_label(self):
        assert starts_with_section_label("3. Anything")
        assert starts_with_section_label("3) Anything")
        assert not starts_with_section_label("3 Anything")
        assert not starts_with_section_label("Body text")


class TestFindHeading:
    def test_first_match(self, locator):
        paragraphs = create_paragraphs("Intro", "1. Definitions", "Definitions again")
        anchor = locator.find_heading(paragraphs, "Definitions")

        assert anchor.index == 1
        assert anchor.paragraph is paragraphs[1]
        assert anchor.label is None

    def test_match_across_runs(self, locator):
        paragraphs = [create_paragraph("1. Defin", "itions")]
        assert locator.find_heading(paragraphs, "Definitions").index == 0

    def test_case_sensitive(self, locator):
        paragraphs = create_paragraphs("1. Definitions")
        with pytest.raises(AnchorNotFoundError) as exc_info:
            locator.find_heading(paragraphs, "definitions")

        assert any("capitalization" in s for s in exc_info.value.suggestions)

    def test_not_found(self, locator):
        with pytest.raises(AnchorNotFoundError, match="Could not find heading 'Zzz-not-present'"):
            locator.find_heading(create_paragraphs("Alpha", "Beta"), "Zzz-not-present")


class TestFindSectionContent:
    def test_first_match_wins(self, locator):
        paragraphs = create_paragraphs("10. Term", "11. First", "11. Second")
        anchor = locator.find_section_content(paragraphs, 11)

        assert anchor.index == 1
        assert anchor.label.number == 11

    def test_whitespace_delimiter(self, locator):
        paragraphs = create_paragraphs("11\tConfidentiality. Text.")
        anchor = locator.find_section_content(paragraphs, 11)
        assert anchor.label.delimiter == "\t"

    def test_leading_whitespace(self, locator):
        anchor = locator.find_section_content(create_paragraphs("   11. Text"), 11)
        assert anchor.label.start == 3

    def test_does_not_match_longer_number(self, locator):
        with pytest.raises(AnchorNotFoundError):
            locator.find_section_content(create_paragraphs("110. Text", "1. Text"), 11)

    def test_fallback_pattern(self, locator):
        paragraphs = create_paragraphs("Intro", "  the disclosing party is bound.")
        anchor = locator.find_section_content(paragraphs, 11, "The Disclosing Party is")

        assert anchor.index == 1
        assert anchor.label is None

    def test_fallback_is_anchored_at_start(self, locator):
        paragraphs = create_paragraphs("Note: The Disclosing Party is bound.")
        with pytest.raises(AnchorNotFoundError):
            locator.find_section_content(paragraphs, 11, "The Disclosing Party is")

    def test_not_found_suggests_labels(self, locator):
        with pytest.raises(AnchorNotFoundError) as exc_info:
            locator.find_section_content(create_paragraphs("1. A", "2. B"), 11)
        assert "1, 2" in exc_info.value.suggestions[0]


class TestFindSectionAnchor:
    def test_last_match_wins(self, locator):
        paragraphs = create_paragraphs("10. Term (summary)", "Body", "10. Term", "11. Notices")
        anchor = locator.find_section_anchor(paragraphs, 10)

        assert anchor.index == 2
        assert anchor.label.number == 10

    def test_whitespace_delimiter_not_accepted(self, locator):
        with pytest.raises(AnchorNotFoundError):
            locator.find_section_anchor(create_paragraphs("10 Term"), 10)

    def test_parenthesis(self, locator):
        anchor = locator.find_section_anchor(create_paragraphs("10) Term"), 10)
        assert anchor.label.delimiter == ")"


class TestFindSentenceBoundary:
    def test_first_period(self, locator):
        paragraph = create_paragraph("The Disclosing Party is bound. Nothing else follows.")
        assert locator.find_sentence_boundary(paragraph) == 29

    def test_start_offset(self, locator):
        paragraph = create_paragraph("11. Confidentiality. Text.")
        assert locator.find_sentence_boundary(paragraph, 3) == 19

    def test_period_split_across_runs(self, locator):
        paragraph = create_paragraph("First sentence", ". Second")
        assert locator.find_sentence_boundary(paragraph) == 14

    def test_no_period(self, locator):
        with pytest.raises(AnchorNotFoundError, match="sentence boundary"):
            locator.find_sentence_boundary(create_paragraph("No terminator here"))
