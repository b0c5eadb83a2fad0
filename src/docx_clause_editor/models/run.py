"""
Run wrapper class for text spans that share one formatting bag.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass

from lxml import etree

from ..constants import WORD_NAMESPACE, w, xml
from .properties import PropertyBag

# Run content rendered as a single character of visible text
_ATOMIC_TEXT = {
    w("tab"): "\t",
    w("br"): "\n",
    w("cr"): "\n",
}


@dataclass(frozen=True)
class RunSegment:
    """One content child of a run and the text it contributes.

    Attributes:
        element: The content element (w:t, w:tab, w:fldChar, ...)
        text: Visible text contributed (empty for zero-width content)
        start: Character offset of the segment within the run text
    """

    element: etree._Element
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_text(self) -> bool:
        return self.element.tag == w("t")


def set_text(t: etree._Element, text: str) -> None:
    """Set the text of a w:t element, preserving whitespace where needed."""
    t.text = text
    if text and (text[0].isspace() or text[-1].isspace()):
        t.set(xml("space"), "preserve")


class Run:
    """Wrapper around a w:r (run) element."""

    def __init__(self, element: etree._Element):
        if element.tag != f"{{{WORD_NAMESPACE}}}r":
            raise ValueError(f"Expected w:r element, got {element.tag}")
        self._element = element

    @classmethod
    def create(cls, text: str, properties: PropertyBag | None = None) -> Run:
        """Build a new run holding ``text`` with a copy of ``properties``.

        Args:
            text: Text payload of the run
            properties: Run properties to apply (None for none)

        Returns:
            The new, detached Run
        """
        run = etree.Element(w("r"))
        if properties:
            rpr = properties.to_element(w("rPr"))
            run.append(rpr)
        t = etree.SubElement(run, w("t"))
        set_text(t, text)
        return cls(run)

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def properties(self) -> PropertyBag:
        """Get a copy of the run properties (w:rPr)."""
        return PropertyBag.from_element(self._element.find(w("rPr")))

    def segments(self) -> list[RunSegment]:
        """Get the content children of this run with their text offsets."""
        segments = []
        position = 0
        for child in self._element:
            if not isinstance(child.tag, str) or child.tag == w("rPr"):
                continue
            if child.tag == w("t"):
                text = child.text or ""
            else:
                text = _ATOMIC_TEXT.get(child.tag, "")
            segments.append(RunSegment(child, text, position))
            position += len(text)
        return segments

    @property
    def text(self) -> str:
        """Get the visible text of the run (w:t text, tabs and breaks)."""
        return "".join(segment.text for segment in self.segments())

    def copy(self) -> Run:
        """Return a detached deep copy of this run."""
        return Run(deepcopy(self._element))

    def copy_slice(self, start: int, end: int) -> Run | None:
        """Return a copy of the run restricted to ``text[start:end]``.

        The copy keeps the run properties verbatim. Zero-width content
        (field characters, rendered page breaks) stays with the slice it
        precedes; content at the very end of the run stays with the last
        slice.

        Args:
            start: First character offset (inclusive)
            end: Last character offset (exclusive)

        Returns:
            The new Run, or None if the slice has no text
        """
        length = len(self.text)
        start = max(0, min(start, length))
        end = max(start, min(end, length))
        if start == end:
            return None

        clone = self.copy()
        for segment in clone.segments():
            if segment.is_text:
                keep_from = max(segment.start, start) - segment.start
                keep_to = min(segment.end, end) - segment.start
                if keep_to > keep_from:
                    set_text(segment.element, segment.text[keep_from:keep_to])
                    continue
            elif segment.text:
                if start <= segment.start < end:
                    continue
            elif start <= segment.start < end or segment.start == end == length:
                continue
            clone.element.remove(segment.element)
        return clone

    def __repr__(self) -> str:
        return f"<Run {self.text!r} props={self.properties.names}>"
