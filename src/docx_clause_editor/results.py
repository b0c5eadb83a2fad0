"""
Result classes for document operations.

This module provides result types that track the outcome of applying edit
instructions to a document part, a whole package, or a batch of files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .instructions import Instruction


class EditOutcome(Enum):
    """Outcome of applying one instruction."""

    APPLIED = "applied"
    NO_OP = "no_op"
    FAILED = "failed"


@dataclass
class EditResult:
    """Result of applying a single edit instruction.

    Attributes:
        outcome: APPLIED, NO_OP or FAILED
        markup: The new markup when applied, otherwise the input markup object
        instruction: The instruction that was applied
        message: Human-readable message about the result
        error: The exception behind a NO_OP or FAILED outcome, if any
        suggestions: Hints for an anchor that could not be found
    """

    outcome: EditOutcome
    markup: bytes
    instruction: Instruction
    message: str
    error: Exception | None = None
    suggestions: list[str] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return self.outcome is EditOutcome.APPLIED

    @property
    def failed(self) -> bool:
        return self.outcome is EditOutcome.FAILED

    def __str__(self) -> str:
        """Get string representation of the result."""
        status = {EditOutcome.APPLIED: "✓", EditOutcome.NO_OP: "-", EditOutcome.FAILED: "✗"}
        return f"{status[self.outcome]} {self.instruction.type_name}: {self.message}"


@dataclass
class ProcessResult:
    """Result of applying instructions to a .docx package.

    Attributes:
        archive: Bytes of the output package (the input bytes when nothing
            was applied)
        results: One EditResult per instruction that was attempted
    """

    archive: bytes
    results: list[EditResult] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        """Number of instructions that changed the document."""
        return sum(1 for r in self.results if r.applied)

    @property
    def changed(self) -> bool:
        return self.applied_count > 0


@dataclass
class FileReport:
    """Outcome of processing one file in a batch.

    Attributes:
        source: The input file
        output: The written file, or None when processing failed
        results: Per-instruction results (empty on failure)
        error: The error that stopped this file, if any
    """

    source: Path
    output: Path | None = None
    results: list[EditResult] = field(default_factory=list)
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        """Get string representation of the report."""
        if self.error is not None:
            return f"✗ {self.source.name}: {self.error}"
        applied = sum(1 for r in self.results if r.applied)
        return f"✓ {self.source.name} -> {self.output}: {applied}/{len(self.results)} edits applied"
