"""
DocumentTree: the parsed main document part owned by one edit.

A tree is built from markup for every instruction, mutated in place while
the instruction is applied, serialized and then discarded.
"""

from __future__ import annotations

import logging

from lxml import etree

from ..constants import WORD_NAMESPACE, w
from ..errors import MalformedDocumentError
from .paragraph import Paragraph

logger = logging.getLogger(__name__)


class DocumentTree:
    """Owned lxml tree of a word/document.xml part.

    Example:
        >>> tree = DocumentTree.parse(markup)
        >>> heading = tree.paragraphs[0]
        >>> tree.insert_after(heading, Paragraph.create([Run.create("New")]))
        >>> new_markup = tree.serialize()
    """

    def __init__(self, tree: etree._ElementTree):
        self._tree = tree
        self._root = tree.getroot()

    @classmethod
    def parse(cls, markup: bytes | str) -> DocumentTree:
        """Parse document part markup into a tree.

        Args:
            markup: Raw bytes (or text) of the main document part

        Returns:
            The parsed DocumentTree

        Raises:
            MalformedDocumentError: If the markup is not well-formed XML or
                the root element is not a WordprocessingML element
        """
        if isinstance(markup, str):
            markup = markup.encode("utf-8")

        parser = etree.XMLParser(remove_blank_text=False, resolve_entities=False)
        try:
            root = etree.fromstring(markup, parser)
        except etree.XMLSyntaxError as e:
            raise MalformedDocumentError(f"Invalid XML in document: {e}") from e

        if etree.QName(root).namespace != WORD_NAMESPACE:
            raise MalformedDocumentError(
                f"Root element {root.tag} is not in the WordprocessingML namespace"
            )

        return cls(root.getroottree())

    @property
    def root(self) -> etree._Element:
        """Get the root element (normally w:document)."""
        return self._root

    @property
    def paragraphs(self) -> list[Paragraph]:
        """Get every paragraph in document (reading) order."""
        return [Paragraph(p) for p in self._root.iter(w("p"))]

    @property
    def text(self) -> str:
        """Get the document text, one line per paragraph."""
        return "\n".join(p.text for p in self.paragraphs)

    def insert_after(self, anchor: Paragraph, new: Paragraph) -> Paragraph:
        """Insert ``new`` as the next sibling of ``anchor``.

        Args:
            anchor: A paragraph in this tree
            new: A detached paragraph

        Returns:
            The inserted paragraph
        """
        parent = anchor.element.getparent()
        if parent is None:
            raise ValueError("Anchor paragraph has no parent")

        anchor_index = parent.index(anchor.element)
        parent.insert(anchor_index + 1, new.element)
        return new

    def remove(self, paragraph: Paragraph) -> None:
        """Remove a paragraph from the tree."""
        parent = paragraph.element.getparent()
        if parent is None:
            raise ValueError("Paragraph has no parent")
        parent.remove(paragraph.element)

    def serialize(self) -> bytes:
        """Serialize the tree back to document part markup.

        Returns:
            UTF-8 encoded XML with declaration; the standalone flag of the
            input is kept

        Raises:
            MalformedDocumentError: If lxml cannot serialize the tree
        """
        try:
            return etree.tostring(
                self._tree,
                xml_declaration=True,
                encoding="UTF-8",
                standalone=self._tree.docinfo.standalone,
            )
        except (etree.SerialisationError, ValueError) as e:
            raise MalformedDocumentError(f"Failed to serialize document: {e}") from e

    def canonical(self) -> bytes:
        """Get the C14N form of the tree, for structural comparison."""
        return etree.tostring(self._root, method="c14n")

    def __len__(self) -> int:
        return len(self.paragraphs)

    def __repr__(self) -> str:
        return f"<DocumentTree paragraphs={len(self)}>"
