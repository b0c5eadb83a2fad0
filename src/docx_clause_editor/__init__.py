"""
docx_clause_editor - Structural clause insertion for Word documents.

This package inserts paragraphs, sentences and whole numbered sections into the
main document part of a .docx package. New content copies its formatting from
neighbouring paragraphs, runs are split at arbitrary character offsets without
losing their properties, and later section labels are renumbered.

Example:
    >>> from docx_clause_editor import DocumentProcessor, AddNewSection
    >>> processor = DocumentProcessor()
    >>> processor.process_file(
    ...     "nda.docx",
    ...     [AddNewSection(after_section=10, title="Residuals. ", text="Nothing ...")],
    ... )
"""

__version__ = "0.1.0"
__all__ = [
    "EditApplier",
    "DocumentProcessor",
    "ContractClassifier",
    "DispatchRule",
    "ContentPredicate",
    "default_rules",
    "load_rules",
    "InsertAfterHeading",
    "InsertInSection",
    "AddNewSection",
    "InsertPosition",
    "Instruction",
    "instruction_from_dict",
    "load_instruction_file",
    "EditOutcome",
    "EditResult",
    "ProcessResult",
    "FileReport",
    "ClauseEditorError",
    "MalformedDocumentError",
    "AnchorNotFoundError",
    "InstructionError",
    "PackageError",
    "DocumentTree",
    "Paragraph",
    "Run",
    "PropertyBag",
    "TextLocator",
    "SectionRenumberer",
    "read_part",
    "write_part",
    "read_document_text",
]

from .applier import EditApplier
from .dispatch import ContentPredicate, ContractClassifier, DispatchRule, default_rules, load_rules
from .errors import (
    AnchorNotFoundError,
    ClauseEditorError,
    InstructionError,
    MalformedDocumentError,
    PackageError,
)
from .instructions import (
    AddNewSection,
    InsertAfterHeading,
    InsertInSection,
    InsertPosition,
    Instruction,
    instruction_from_dict,
    load_instruction_file,
)
from .models import DocumentTree, Paragraph, PropertyBag, Run
from .package import read_document_text, read_part, write_part
from .processor import DocumentProcessor
from .renumber import SectionRenumberer
from .results import EditOutcome, EditResult, FileReport, ProcessResult
from .text_locator import TextLocator
