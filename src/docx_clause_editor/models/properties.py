"""
Opaque formatting property bags for runs (<w:rPr>) and paragraphs (<w:pPr>).

A PropertyBag carries property elements verbatim. The only properties the
engine ever creates itself are bold and underline toggles; everything else is
copied from donor paragraphs without being interpreted.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass

from lxml import etree

from ..constants import RPR_ELEMENT_ORDER, w

# Tracked property changes are never carried onto inserted content
_CHANGE_MARKERS = ("rPrChange", "pPrChange")


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


@dataclass(frozen=True)
class PropertyBag:
    """Immutable, ordered collection of property elements.

    Elements are deep-copied on the way in and on the way out, so a bag never
    aliases nodes that live in a document tree.

    Attributes:
        entries: The property elements, in document order
    """

    entries: tuple[etree._Element, ...] = ()

    @classmethod
    def empty(cls) -> PropertyBag:
        """Get a bag with no properties."""
        return cls(())

    @classmethod
    def from_element(cls, container: etree._Element | None) -> PropertyBag:
        """Copy the children of a <w:rPr> or <w:pPr> element into a bag.

        Args:
            container: The properties element, or None

        Returns:
            A bag with copies of every property child (comments skipped)
        """
        if container is None:
            return cls.empty()
        entries = tuple(
            deepcopy(child)
            for child in container
            if isinstance(child.tag, str) and _local_name(child) not in _CHANGE_MARKERS
        )
        return cls(entries)

    @classmethod
    def bold(cls) -> PropertyBag:
        """Get a bag containing only a bold toggle."""
        return cls.empty().with_bold()

    @classmethod
    def underline(cls, style: str = "single") -> PropertyBag:
        """Get a bag containing only an underline toggle."""
        return cls.empty().with_underline(style)

    @property
    def names(self) -> list[str]:
        """Local names of the contained properties, in order."""
        return [_local_name(entry) for entry in self.entries]

    def has(self, name: str) -> bool:
        """Check whether a property with the given local name is present."""
        return name in self.names

    def get(self, name: str) -> etree._Element | None:
        """Get a copy of the first property with the given local name."""
        for entry in self.entries:
            if _local_name(entry) == name:
                return deepcopy(entry)
        return None

    def without(self, *names: str) -> PropertyBag:
        """Return a new bag with every property named in ``names`` removed."""
        return PropertyBag(tuple(e for e in self.entries if _local_name(e) not in names))

    def with_element(self, element: etree._Element) -> PropertyBag:
        """Return a new bag with ``element`` added or replacing a same-named entry.

        Replacement keeps the original position. New entries go to their
        schema position according to the <w:rPr> element order; unknown names
        are appended.
        """
        name = _local_name(element)
        entries = list(self.entries)

        for i, entry in enumerate(entries):
            if _local_name(entry) == name:
                entries[i] = deepcopy(element)
                return PropertyBag(tuple(entries))

        entries.insert(self._insert_position(entries, name), deepcopy(element))
        return PropertyBag(tuple(entries))

    def with_bold(self) -> PropertyBag:
        """Return a new bag with bold switched on (replacing any w:b w:val="0")."""
        return self.with_element(etree.Element(w("b")))

    def with_underline(self, style: str = "single") -> PropertyBag:
        """Return a new bag with an underline of the given style."""
        u = etree.Element(w("u"))
        u.set(w("val"), style)
        return self.with_element(u)

    def merged(self, other: PropertyBag) -> PropertyBag:
        """Return a new bag with all of ``other``'s entries applied on top."""
        result = self
        for entry in other.entries:
            result = result.with_element(entry)
        return result

    def to_element(self, tag: str) -> etree._Element | None:
        """Materialize the bag as a new properties element.

        Args:
            tag: Fully qualified tag of the container (w("rPr") or w("pPr"))

        Returns:
            A fresh element holding copies of the entries, or None if empty
        """
        if not self.entries:
            return None
        container = etree.Element(tag)
        for entry in self.entries:
            container.append(deepcopy(entry))
        return container

    @staticmethod
    def _insert_position(entries: list[etree._Element], name: str) -> int:
        try:
            target_order = RPR_ELEMENT_ORDER.index(name)
        except ValueError:
            return len(entries)

        for i, entry in enumerate(entries):
            try:
                if RPR_ELEMENT_ORDER.index(_local_name(entry)) > target_order:
                    return i
            except ValueError:
                continue
        return len(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        return [etree.tostring(e, method="c14n") for e in self.entries] == [
            etree.tostring(e, method="c14n") for e in other.entries
        ]

    def __hash__(self) -> int:
        return hash(tuple(etree.tostring(e, method="c14n") for e in self.entries))

    def __repr__(self) -> str:
        return f"<PropertyBag {self.names}>"
