"""
Paragraph wrapper class for convenient access to paragraph elements.
"""

from __future__ import annotations

from collections.abc import Iterable

from lxml import etree

from ..constants import NON_BLOCK_MARKERS, WORD_NAMESPACE, w
from .properties import PropertyBag
from .run import Run, set_text


class Paragraph:
    """Wrapper around a w:p (paragraph) element.

    Runs are the direct w:r children of the paragraph; runs nested in
    hyperlinks, fields or tracked changes are left alone by the engine.
    """

    def __init__(self, element: etree._Element):
        """Initialize Paragraph wrapper.

        Args:
            element: The w:p XML element to wrap
        """
        if element.tag != f"{{{WORD_NAMESPACE}}}p":
            raise ValueError(f"Expected w:p element, got {element.tag}")
        self._element = element

    @classmethod
    def create(cls, runs: Iterable[Run], properties: PropertyBag | None = None) -> Paragraph:
        """Build a new paragraph from runs and optional paragraph properties.

        Args:
            runs: Runs to append, in order
            properties: Paragraph properties (w:pPr content), or None

        Returns:
            The new, detached Paragraph
        """
        p = etree.Element(w("p"))
        if properties:
            p.append(properties.to_element(w("pPr")))
        for run in runs:
            p.append(run.element)
        return cls(p)

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def runs(self) -> list[Run]:
        """Get all direct run (w:r) children of this paragraph."""
        return [Run(r) for r in self._element.findall(w("r"))]

    @property
    def text(self) -> str:
        """Get the concatenated text of the paragraph's runs."""
        return "".join(run.text for run in self.runs)

    @property
    def properties(self) -> PropertyBag:
        """Get a copy of the paragraph properties (w:pPr)."""
        return PropertyBag.from_element(self._element.find(w("pPr")))

    @property
    def style(self) -> str | None:
        """Get the paragraph style id (w:pPr/w:pStyle), if any."""
        p_style = self._element.find(f"{w('pPr')}/{w('pStyle')}")
        if p_style is None:
            return None
        return p_style.get(w("val"))

    @property
    def first_run(self) -> Run | None:
        """Get the first direct run, or None for a run-less paragraph."""
        r = self._element.find(w("r"))
        return Run(r) if r is not None else None

    def next_paragraph(self) -> Paragraph | None:
        """Get the block-level paragraph that immediately follows this one.

        Bookmark, permission, comment-range and proofing markers between the
        two paragraphs are skipped. Any other sibling (a table, the body's
        section properties) means there is no following paragraph.

        Returns:
            The following sibling Paragraph, or None
        """
        for sibling in self._element.itersiblings():
            if not isinstance(sibling.tag, str):
                continue
            if sibling.tag == w("p"):
                return Paragraph(sibling)
            if etree.QName(sibling).localname in NON_BLOCK_MARKERS:
                continue
            return None
        return None

    def replace_runs(self, runs: Iterable[Run]) -> None:
        """Replace all direct runs with ``runs``.

        The new runs take the position of the first existing run (or follow
        w:pPr when there are none). Non-run children keep their elements.

        Args:
            runs: Runs to place, in order
        """
        existing = self._element.findall(w("r"))
        if existing:
            index = self._element.index(existing[0])
        else:
            ppr = self._element.find(w("pPr"))
            index = self._element.index(ppr) + 1 if ppr is not None else 0

        # Detach before inserting: the new list may reuse existing run elements
        for r in existing:
            self._element.remove(r)
        for offset, run in enumerate(runs):
            self._element.insert(index + offset, run.element)

    def replace_text(self, start: int, end: int, text: str) -> None:
        """Replace ``self.text[start:end]`` with ``text`` in place.

        The replacement is written into the first w:t touched by the span and
        the rest of the span is cut out of the following w:t elements, so run
        properties, delimiters and trailing text are untouched.

        Args:
            start: First character offset (inclusive)
            end: Last character offset (exclusive)
            text: Replacement text

        Raises:
            ValueError: If the span is empty, out of range, or covers tabs or breaks
        """
        if not 0 <= start < end <= len(self.text):
            raise ValueError(f"Span {start}:{end} outside paragraph text")

        position = 0
        written = False
        for run in self.runs:
            segments = run.segments()
            run_length = segments[-1].end if segments else 0
            for segment in segments:
                seg_start = position + segment.start
                seg_end = position + segment.end
                if not segment.text or seg_end <= start or seg_start >= end:
                    continue
                if not segment.is_text:
                    raise ValueError("Cannot replace text across tabs or breaks")
                cut_from = max(seg_start, start) - seg_start
                cut_to = min(seg_end, end) - seg_start
                insert = "" if written else text
                written = True
                set_text(
                    segment.element,
                    segment.text[:cut_from] + insert + segment.text[cut_to:],
                )
            position += run_length

    def contains(self, text: str) -> bool:
        """Check if the paragraph text contains ``text`` (case-sensitive)."""
        return text in self.text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Paragraph):
            return NotImplemented
        return self._element is other._element

    def __hash__(self) -> int:
        return hash(self._element)

    def __repr__(self) -> str:
        """String representation of the paragraph."""
        text = self.text
        text_preview = text[:50] + "..." if len(text) > 50 else text
        style_info = f" style={self.style}" if self.style else ""
        return f"<Paragraph{style_info}: {text_preview!r}>"
