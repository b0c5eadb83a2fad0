"""Command-line interface for docx-clause-editor.

Provides commands for inserting clauses into Word documents from the terminal.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .dispatch import ContractClassifier, load_rules
from .errors import ClauseEditorError
from .instructions import (
    AddNewSection,
    InsertAfterHeading,
    InsertInSection,
    InsertPosition,
    Instruction,
    load_instruction_file,
)
from .package import read_document_text
from .processor import DocumentProcessor
from .results import EditOutcome

app = typer.Typer(
    name="docx-clause-editor",
    help="Insert clauses and sections into Word documents from the command line.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docx-clause-editor version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging.")] = False,
) -> None:
    """Insert clauses and sections into Word documents from the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _instruction(cls: type, **params) -> Instruction:
    try:
        return cls(**params)
    except ClauseEditorError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _edit(file: Path, instructions: list[Instruction], output: Path | None) -> None:
    try:
        report = DocumentProcessor().process_file(file, instructions, output=output)
    except (ClauseEditorError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for result in report.results:
        typer.echo(str(result))
        if result.outcome is EditOutcome.NO_OP:
            for suggestion in result.suggestions:
                typer.echo(f"  • {suggestion}", err=True)
    typer.echo(f"Saved to {report.output}")


@app.command("insert-after-heading")
def insert_after_heading(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    search: Annotated[str, typer.Option("--search", "-s", help="Heading text to find")],
    text: Annotated[str, typer.Option("--text", "-t", help="Paragraph text to insert")],
    bold: Annotated[
        bool, typer.Option("--bold/--no-bold", help="Bold the leading quoted term")
    ] = True,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Insert a paragraph after the first paragraph containing a heading."""
    instruction = _instruction(InsertAfterHeading, search=search, text=text, bold=bold)
    _edit(file, [instruction], output)


@app.command("insert-in-section")
def insert_in_section(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    section: Annotated[int, typer.Option("--section", "-n", help="Section number")],
    text: Annotated[str, typer.Option("--text", "-t", help="Text to insert")],
    position: Annotated[
        InsertPosition, typer.Option("--position", "-p", help="Where to insert the text")
    ] = InsertPosition.BETWEEN_SENTENCES,
    fallback: Annotated[
        str | None,
        typer.Option("--fallback", help="Regex matching the section text when it has no label"),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Insert text into a numbered section."""
    instruction = _instruction(
        InsertInSection,
        section_number=section,
        text=text,
        position=position,
        fallback_pattern=fallback,
    )
    _edit(file, [instruction], output)


@app.command("add-section")
def add_section(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    after: Annotated[int, typer.Option("--after", "-a", help="Insert after this section")],
    title: Annotated[str, typer.Option("--title", help="Title of the new section")],
    text: Annotated[str, typer.Option("--text", "-t", help="Body text of the new section")],
    bold: Annotated[bool, typer.Option("--bold", help="Bold the number and title")] = False,
    underline: Annotated[bool, typer.Option("--underline", help="Underline the title")] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Add a numbered section and renumber the sections after it."""
    instruction = _instruction(
        AddNewSection, after_section=after, title=title, text=text, bold=bold, underline=underline
    )
    _edit(file, [instruction], output)


@app.command()
def apply(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    instructions: Annotated[Path, typer.Argument(help="Path to YAML/JSON instruction file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Apply instructions from a YAML or JSON file."""
    try:
        loaded = load_instruction_file(instructions)
    except (ClauseEditorError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _edit(file, loaded, output)


@app.command()
def auto(
    files: Annotated[list[Path], typer.Argument(help="Paths to .docx files")],
    output_dir: Annotated[
        Path | None, typer.Option("--output-dir", "-d", help="Directory for edited files")
    ] = None,
    rules: Annotated[
        Path | None, typer.Option("--rules", "-r", help="YAML file with dispatch rules")
    ] = None,
    workers: Annotated[int, typer.Option("--workers", "-w", min=1, help="Worker threads")] = 1,
) -> None:
    """Detect each contract's type and apply the matching edits."""
    try:
        classifier = load_rules(rules) if rules else ContractClassifier()
    except (ClauseEditorError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    processor = DocumentProcessor(classifier=classifier)
    reports = processor.process_files(files, output_dir=output_dir, workers=workers)

    failed = 0
    for report in reports:
        typer.echo(str(report), err=not report.success)
        if not report.success:
            failed += 1

    typer.echo(f"Processed {len(reports) - failed}/{len(reports)} documents")
    if failed:
        raise typer.Exit(1)


@app.command()
def text(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
) -> None:
    """Print the document text, one line per paragraph."""
    try:
        typer.echo(read_document_text(file.read_bytes()))
    except (ClauseEditorError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
