"""
DocumentProcessor: .docx in, .docx out.

Reads the main document part from a package, runs the edit applier over it
and writes the result back. Documents are independent of each other, so a
batch can be spread over worker threads; instructions within one document
always run in order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .applier import EditApplier
from .constants import DOCUMENT_PART, OUTPUT_PREFIX
from .dispatch import ContractClassifier
from .errors import ClauseEditorError, MalformedDocumentError
from .instructions import Instruction
from .package import read_document_text, read_part, write_part
from .results import FileReport, ProcessResult

logger = logging.getLogger(__name__)


def output_path_for(source: Path, output_dir: Path | None = None) -> Path:
    """Get the default output path ``edited_<name>`` for a source file."""
    directory = output_dir if output_dir is not None else source.parent
    return directory / f"{OUTPUT_PREFIX}{source.name}"


class DocumentProcessor:
    """Applies instructions to .docx packages.

    Example:
        >>> processor = DocumentProcessor()
        >>> report = processor.process_file("Contract1.docx")
        >>> print(report)
        ✓ Contract1.docx -> edited_Contract1.docx: 1/1 edits applied
    """

    def __init__(
        self,
        classifier: ContractClassifier | None = None,
        applier: EditApplier | None = None,
    ) -> None:
        self.classifier = classifier or ContractClassifier()
        self.applier = applier or EditApplier()

    def modify_docx(
        self,
        archive: bytes,
        instructions: Iterable[Instruction],
        document_name: str | None = None,
    ) -> ProcessResult:
        """Apply instructions to the main document of a package.

        Args:
            archive: Bytes of the .docx package
            instructions: Edits to apply, in order
            document_name: Identity of the document, used in messages

        Returns:
            ProcessResult whose archive is the input bytes when no
            instruction applied

        Raises:
            PackageError: If the package or its main document part is unreadable
            MalformedDocumentError: If an instruction failed on the document
        """
        markup = read_part(archive, DOCUMENT_PART)
        results = self.applier.apply_all(markup, instructions, document_name)

        for result in results:
            if result.failed:
                error = result.error
                if isinstance(error, MalformedDocumentError):
                    raise error
                raise MalformedDocumentError(result.message, document=document_name)

        if not any(result.applied for result in results):
            return ProcessResult(archive=archive, results=results)

        return ProcessResult(
            archive=write_part(archive, DOCUMENT_PART, results[-1].markup),
            results=results,
        )

    def instructions_for(self, path: Path, archive: bytes) -> list[Instruction]:
        """Classify a document and get the instructions that apply to it."""
        return self.classifier.classify(path.name, read_document_text(archive))

    def process_file(
        self,
        path: str | Path,
        instructions: Sequence[Instruction] | None = None,
        output: str | Path | None = None,
    ) -> FileReport:
        """Process one .docx file and write the result.

        Args:
            path: The input file
            instructions: Edits to apply; classified from the file when None
            output: Output file; ``edited_<name>`` next to the input when None

        Returns:
            FileReport for the written file

        Raises:
            FileNotFoundError: If the input file does not exist
            PackageError: If the file is not a readable .docx package
            MalformedDocumentError: If an instruction failed on the document
        """
        source = Path(path)
        if not source.exists():
            raise FileNotFoundError(f"Document not found: {source}")

        archive = source.read_bytes()
        if instructions is None:
            instructions = self.instructions_for(source, archive)

        result = self.modify_docx(archive, instructions, document_name=source.name)

        target = Path(output) if output is not None else output_path_for(source)
        target.write_bytes(result.archive)
        logger.info(
            "Processed %s: %d/%d edits applied, written to %s",
            source.name,
            result.applied_count,
            len(result.results),
            target,
        )
        return FileReport(source=source, output=target, results=result.results)

    def process_files(
        self,
        paths: Iterable[str | Path],
        instructions: Sequence[Instruction] | None = None,
        output_dir: str | Path | None = None,
        workers: int = 1,
    ) -> list[FileReport]:
        """Process many files, each independently.

        A failing file is reported and never stops the others.

        Args:
            paths: Input files
            instructions: Edits for every file; classified per file when None
            output_dir: Directory for output files; next to each input when None
            workers: Number of worker threads

        Returns:
            One FileReport per input path, in input order
        """
        directory = Path(output_dir) if output_dir is not None else None
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)

        def process(path: str | Path) -> FileReport:
            source = Path(path)
            try:
                return self.process_file(
                    source, instructions, output=output_path_for(source, directory)
                )
            except (ClauseEditorError, OSError) as e:
                logger.warning("Failed to process %s: %s", source.name, e)
                return FileReport(source=source, error=e)

        paths = list(paths)
        if workers <= 1 or len(paths) <= 1:
            return [process(path) for path in paths]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(process, paths))
