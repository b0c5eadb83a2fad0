"""
EditApplier: the entry point that applies edit instructions to document markup.

Each call parses the markup into a fresh tree, locates the anchor, splices in
the new content and serializes the result. A tree is never shared between
calls and a partially mutated tree is never serialized: any error raised
before serialization discards the tree and the caller keeps its input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from .errors import AnchorNotFoundError, InstructionError, MalformedDocumentError
from .instructions import (
    AddNewSection,
    InsertAfterHeading,
    InsertInSection,
    InsertPosition,
    Instruction,
)
from .models.document_tree import DocumentTree
from .models.paragraph import Paragraph
from .models.properties import PropertyBag
from .models.run import Run
from .renumber import SectionRenumberer
from .results import EditOutcome, EditResult
from .run_splitter import insert_run_at
from .style_inheritor import body_style_after, run_style_of, section_styles
from .text_locator import TextLocator

logger = logging.getLogger(__name__)

# A leading quoted term such as "Affiliate" or “Affiliate”
_QUOTED_TERM = re.compile(r"^([\"“][^\"”]*[\"”])(.*)$", re.DOTALL)


class EditApplier:
    """Applies instructions to the markup of a main document part.

    Example:
        >>> applier = EditApplier()
        >>> result = applier.apply(markup, InsertAfterHeading("Definitions", '"Affiliate" means ...'))
        >>> if result.applied:
        ...     markup = result.markup
    """

    def __init__(self) -> None:
        self._locator = TextLocator()
        self._renumberer = SectionRenumberer()
        self._handlers: dict[type, Callable[[DocumentTree, Instruction], str]] = {
            InsertAfterHeading: self._insert_after_heading,
            InsertInSection: self._insert_in_section,
            AddNewSection: self._add_new_section,
        }

    def apply(
        self, markup: bytes, instruction: Instruction, document_name: str | None = None
    ) -> EditResult:
        """Apply one instruction to document markup.

        Args:
            markup: Raw bytes of the main document part
            instruction: The edit to apply
            document_name: Identity of the document, used in failure messages

        Returns:
            EditResult with outcome APPLIED (``markup`` is the new
            serialization), NO_OP (``markup`` is the input object, unchanged)
            or FAILED (``error`` is a MalformedDocumentError)

        Raises:
            InstructionError: If the instruction type is not supported
        """
        handler = self._handlers.get(type(instruction))
        if handler is None:
            raise InstructionError(f"Unsupported instruction: {instruction!r}")

        try:
            tree = DocumentTree.parse(markup)
            message = handler(tree, instruction)
            new_markup = tree.serialize()
        except AnchorNotFoundError as e:
            logger.info(
                "%s did not apply to %s: could not find %s",
                instruction.type_name,
                document_name or "document",
                e.anchor,
            )
            return EditResult(
                outcome=EditOutcome.NO_OP,
                markup=markup,
                instruction=instruction,
                message=f"Not applied: could not find {e.anchor}",
                error=e,
                suggestions=e.suggestions,
            )
        except MalformedDocumentError as e:
            error = e.with_document(document_name)
            logger.warning("%s failed: %s", instruction.type_name, error)
            return EditResult(
                outcome=EditOutcome.FAILED,
                markup=markup,
                instruction=instruction,
                message=str(error),
                error=error,
            )

        return EditResult(
            outcome=EditOutcome.APPLIED,
            markup=new_markup,
            instruction=instruction,
            message=message,
        )

    def apply_all(
        self,
        markup: bytes,
        instructions: Iterable[Instruction],
        document_name: str | None = None,
    ) -> list[EditResult]:
        """Apply instructions in order, each one seeing the previous output.

        Processing stops after the first FAILED result. The markup of the
        last result is the final document.

        Args:
            markup: Raw bytes of the main document part
            instructions: Edits to apply, in order
            document_name: Identity of the document, used in failure messages

        Returns:
            One EditResult per attempted instruction
        """
        results = []
        for instruction in instructions:
            result = self.apply(markup, instruction, document_name)
            results.append(result)
            if result.failed:
                break
            markup = result.markup
        return results

    def _insert_after_heading(self, tree: DocumentTree, instruction: InsertAfterHeading) -> str:
        anchor = self._locator.find_heading(tree.paragraphs, instruction.search)
        match = _QUOTED_TERM.match(instruction.text)
        if match is None:
            raise AnchorNotFoundError(
                "a leading quoted term in the text",
                hint='Text inserted after a heading must start with a quoted term ("Term" means ...)',
            )

        style = body_style_after(anchor.paragraph)
        term, remainder = match.groups()
        runs = [Run.create(term, _emphasis(style.run, instruction.bold))]
        if remainder:
            runs.append(Run.create(remainder, style.run))

        tree.insert_after(anchor.paragraph, Paragraph.create(runs, style.paragraph))
        return f"Inserted paragraph after '{instruction.search}'"

    def _insert_in_section(self, tree: DocumentTree, instruction: InsertInSection) -> str:
        number = instruction.section_number
        anchor = self._locator.find_section_content(
            tree.paragraphs, number, instruction.fallback_pattern
        )
        paragraph = anchor.paragraph
        if not paragraph.runs:
            raise AnchorNotFoundError(
                f"text in section {number}",
                hint="The matched paragraph has no runs to insert into",
            )

        text = paragraph.text
        content_start = anchor.label.content_start if anchor.label is not None else 0

        if instruction.position is InsertPosition.START:
            offset = content_start
            while offset < len(text) and text[offset].isspace():
                offset += 1
            payload = f"{instruction.text} "
        elif instruction.position is InsertPosition.END:
            offset = len(text)
            payload = f" {instruction.text}"
        else:
            # The label's own period does not end the first sentence
            offset = self._locator.find_sentence_boundary(paragraph, content_start) + 1
            payload = f" {instruction.text}"

        logger.debug("Inserting into section %d at offset %d", number, offset)
        insert_run_at(paragraph, offset, Run.create(payload, run_style_of(paragraph)))
        return f"Inserted text into section {number} ({instruction.position.value})"

    def _add_new_section(self, tree: DocumentTree, instruction: AddNewSection) -> str:
        paragraphs = tree.paragraphs
        anchor = self._locator.find_section_anchor(paragraphs, instruction.after_section)
        styles = section_styles(paragraphs, anchor.index)

        new_number = instruction.after_section + 1
        delimiter = ")" if anchor.label is not None and anchor.label.delimiter == ")" else "."

        number_props = styles.heading_run.without("u")
        title_props = styles.heading_run
        if instruction.underline and not title_props.has("u"):
            title_props = title_props.with_underline()
        if instruction.bold:
            number_props = number_props.with_bold()
            title_props = title_props.with_bold()

        runs = [Run.create(f"{new_number}{delimiter} ", number_props)]
        if instruction.title:
            runs.append(Run.create(instruction.title, title_props))
        runs.append(Run.create(f" {instruction.text}", styles.body_run))

        tree.insert_after(anchor.paragraph, Paragraph.create(runs, styles.body_paragraph))

        # The list was taken before insertion, so the new paragraph is not in it
        renumbered = self._renumberer.renumber(paragraphs[anchor.index + 1 :], new_number)
        logger.debug("Added section %d; renumbered %d later sections", new_number, renumbered)
        return f"Added section {new_number} after section {instruction.after_section}"


def _emphasis(properties: PropertyBag, bold: bool) -> PropertyBag:
    return properties.with_bold() if bold else properties
