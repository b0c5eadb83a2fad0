"""
Custom exception classes for the docx_clause_editor package.

These exceptions carry enough context (document identity, anchor description,
suggestions) to produce helpful messages for callers and the CLI.
"""


class ClauseEditorError(Exception):
    """Base exception for all docx_clause_editor errors."""

    pass


class MalformedDocumentError(ClauseEditorError):
    """Raised when the document part cannot be parsed or serialized.

    This is fatal for the document it concerns; other documents in a batch
    are unaffected.

    Attributes:
        document: Identity of the offending document (file name), if known
    """

    def __init__(self, message: str, document: str | None = None) -> None:
        self.message = message
        self.document = document
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the message with the document identity when available."""
        if self.document:
            return f"{self.document}: {self.message}"
        return self.message

    def with_document(self, document: str | None) -> "MalformedDocumentError":
        """Return a copy of this error attributed to ``document``."""
        error = MalformedDocumentError(self.message, document=document)
        error.__cause__ = self.__cause__
        return error


class AnchorNotFoundError(ClauseEditorError):
    """Raised when an edit anchor cannot be located in the document.

    The edit applier turns this into a no-op result; it is expected on
    documents that an instruction does not apply to.

    Attributes:
        anchor: Description of the anchor that was searched for
        suggestions: List of helpful suggestions for resolving the issue
        hint: Additional context about why the anchor wasn't found
    """

    def __init__(
        self,
        anchor: str,
        suggestions: list[str] | None = None,
        hint: str | None = None,
    ) -> None:
        self.anchor = anchor
        self.suggestions = suggestions or []
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format a helpful error message with suggestions."""
        msg = f"Could not find {self.anchor}"

        if self.hint:
            msg += f"\n\nNote: {self.hint}"

        if self.suggestions:
            msg += "\n\nSuggestions:\n"
            for suggestion in self.suggestions:
                msg += f"  • {suggestion}\n"

        return msg


class InstructionError(ClauseEditorError):
    """Raised when an edit instruction or a rule file is invalid.

    Attributes:
        errors: List of specific problems found (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        details = "\n  - " + "\n  - ".join(self.errors)
        return f"{super().__str__()}{details}"


class PackageError(ClauseEditorError):
    """Raised when the .docx container cannot be read or a part is missing."""

    pass
