"""
Suggestion generation for unmatched anchors.

When an instruction does not apply to a document the result is a silent
no-op; the suggestions produced here travel with that result so a user can
tell a genuinely inapplicable instruction from a near miss.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rapidfuzz import fuzz, process

if TYPE_CHECKING:
    from .models.paragraph import Paragraph


class SuggestionGenerator:
    """Generates helpful suggestions when an anchor cannot be found."""

    @staticmethod
    def generate_suggestions(text: str, paragraphs: list[Paragraph]) -> list[str]:
        """Generate suggestions for a heading search that matched nothing.

        Args:
            text: The text that was searched for
            paragraphs: Paragraphs that were searched

        Returns:
            List of suggestion strings
        """
        suggestions = []
        texts = [p.text for p in paragraphs]
        doc_text = "\n".join(texts)

        # Check for curly quotes (common issue when copying from Word/PDF)
        if '"' in text and any(c in doc_text for c in "“”"):
            suggestions.append(
                "Document contains curly quotes (“”). "
                "Try replacing straight quotes with curly quotes in search text"
            )
        if "'" in text and any(c in doc_text for c in "‘’"):
            suggestions.append(
                "Document contains curly apostrophes (‘’). "
                "Try replacing straight apostrophes with curly ones in search text"
            )

        if text != text.strip():
            suggestions.append(f'Search text has leading/trailing whitespace. Try: "{text.strip()}"')

        if text.lower() in doc_text.lower():
            suggestions.append(
                "Text found with case-insensitive search. Check capitalization in your search text"
            )

        for similar in SuggestionGenerator.find_similar_paragraphs(text, texts):
            suggestions.append(f'Did you mean "{similar}"?')

        return suggestions

    @staticmethod
    def section_suggestions(number: int, paragraphs: list[Paragraph]) -> list[str]:
        """Generate suggestions for a section number that matched nothing.

        Args:
            number: The section number that was searched for
            paragraphs: Paragraphs that were searched

        Returns:
            List of suggestion strings
        """
        from .text_locator import parse_section_label

        labels = sorted(
            {
                label.number
                for label in (parse_section_label(p.text) for p in paragraphs)
                if label is not None
            }
        )
        if not labels:
            return [
                "Document has no literal section labels; numbering may be automatic. "
                "Try a fallback pattern that matches the start of the section text"
            ]
        shown = ", ".join(str(n) for n in labels[:20])
        return [f"Document has section labels {shown}; section {number} is not among them"]

    @staticmethod
    def find_similar_paragraphs(
        search_text: str,
        texts: list[str],
        max_suggestions: int = 3,
        min_similarity: float = 0.6,
    ) -> list[str]:
        """Find paragraph texts that nearly contain the search text.

        Uses rapidfuzz partial matching so a short heading search is compared
        against the best-aligned part of each paragraph.

        Args:
            search_text: The text that was searched for
            texts: Paragraph texts to compare against
            max_suggestions: Maximum number of suggestions to return
            min_similarity: Minimum similarity threshold (0.0 to 1.0)

        Returns:
            Up to ``max_suggestions`` stripped paragraph texts, best first
        """
        candidates = [t.strip() for t in texts if t.strip()]
        if not search_text.strip() or not candidates:
            return []

        matches = process.extract(
            search_text,
            candidates,
            scorer=fuzz.partial_ratio,
            limit=max_suggestions * 2,
            score_cutoff=min_similarity * 100,
        )

        unique: list[str] = []
        for text, _score, _index in matches:
            preview = text[:60] + "..." if len(text) > 60 else text
            if preview not in unique:
                unique.append(preview)
            if len(unique) >= max_suggestions:
                break
        return unique
