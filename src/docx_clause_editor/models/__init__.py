"""
Wrapper classes over the lxml tree of the main document part.
"""

from docx_clause_editor.models.document_tree import DocumentTree
from docx_clause_editor.models.paragraph import Paragraph
from docx_clause_editor.models.properties import PropertyBag
from docx_clause_editor.models.run import Run, RunSegment

__all__ = ["DocumentTree", "Paragraph", "PropertyBag", "Run", "RunSegment"]
