"""
Edit instructions: immutable value objects describing one edit each.

Instructions can be built directly, from dictionaries, or from YAML/JSON
instruction files. Dictionary keys accept both the snake_case names used here
and the camelCase names used by browser-side instruction payloads
(``searchText``, ``insertText``, ``sectionNumber``, ...).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import InstructionError

# Characters XML 1.0 cannot carry (vertical tab and form feed are common in
# text copied out of Word)
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _check_xml_text(value: str, name: str) -> None:
    if not isinstance(value, str):
        raise InstructionError(f"'{name}' must be a string, got {type(value).__name__}")
    match = _XML_ILLEGAL.search(value)
    if match is not None:
        raise InstructionError(
            f"'{name}' contains a character that cannot be stored in a document: "
            f"{match.group()!r} at position {match.start()}"
        )


class InsertPosition(Enum):
    """Where text goes inside a section's content paragraph."""

    START = "start"
    END = "end"
    BETWEEN_SENTENCES = "between_sentences"


@dataclass(frozen=True)
class InsertAfterHeading:
    """Insert a new paragraph after the first paragraph containing ``search``.

    ``text`` must start with a quoted term (``"Affiliate" means ...``); the
    term is emitted as its own run and made bold when ``bold`` is set. Text
    without a leading quoted term is not inserted.
    """

    search: str
    text: str
    bold: bool = True

    type_name = "insert_after_heading"

    def __post_init__(self) -> None:
        _check_xml_text(self.text, "text")


@dataclass(frozen=True)
class InsertInSection:
    """Insert text into the content paragraph of section ``section_number``."""

    section_number: int
    text: str
    position: InsertPosition = InsertPosition.BETWEEN_SENTENCES
    fallback_pattern: str | None = None

    type_name = "insert_in_section"

    def __post_init__(self) -> None:
        _check_xml_text(self.text, "text")
        if self.fallback_pattern is not None:
            try:
                re.compile(self.fallback_pattern)
            except (re.error, TypeError) as e:
                raise InstructionError(
                    f"Invalid fallback pattern {self.fallback_pattern!r}: {e}"
                ) from e


@dataclass(frozen=True)
class AddNewSection:
    """Add section ``after_section + 1`` and renumber the sections after it."""

    after_section: int
    title: str
    text: str
    bold: bool = False
    underline: bool = False

    type_name = "add_new_section"

    def __post_init__(self) -> None:
        _check_xml_text(self.title, "title")
        _check_xml_text(self.text, "text")


Instruction = InsertAfterHeading | InsertInSection | AddNewSection

INSTRUCTION_TYPES = {
    cls.type_name: cls for cls in (InsertAfterHeading, InsertInSection, AddNewSection)
}


def _first(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _require(data: dict[str, Any], *keys: str) -> Any:
    value = _first(data, *keys)
    if value is None:
        raise InstructionError(f"Missing required parameter: {' or '.join(repr(k) for k in keys)}")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InstructionError(f"'{name}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InstructionError(f"'{name}' must be an integer, got {value!r}") from e


def instruction_from_dict(data: dict[str, Any]) -> Instruction:
    """Build an instruction from a dictionary.

    Args:
        data: Mapping with a ``type`` key and the parameters of that type.
            Formatting may be given flat (``bold: true``) or nested
            (``formatting: {bold: true}``).

    Returns:
        The instruction

    Raises:
        InstructionError: If the type is unknown or a parameter is missing
            or invalid

    Example:
        >>> instruction_from_dict({"type": "add_new_section", "afterSection": 10,
        ...                        "sectionTitle": "Residuals. ", "insertText": "..."})
        AddNewSection(after_section=10, title='Residuals. ', text='...', bold=False, underline=False)
    """
    if not isinstance(data, dict):
        raise InstructionError(f"Instruction must be a mapping, got {type(data).__name__}")

    edit_type = data.get("type")
    if not edit_type:
        raise InstructionError("Missing 'type' field")
    if edit_type not in INSTRUCTION_TYPES:
        raise InstructionError(f"Unknown instruction type: {edit_type}")

    formatting = data.get("formatting") or {}
    if not isinstance(formatting, dict):
        raise InstructionError("'formatting' must be a mapping")
    merged = {**formatting, **{k: v for k, v in data.items() if k in ("bold", "underline")}}

    text = _require(data, "text", "insert_text", "insertText")

    if edit_type == InsertAfterHeading.type_name:
        return InsertAfterHeading(
            search=str(_require(data, "search", "search_text", "searchText")),
            text=str(text),
            bold=bool(merged.get("bold", True)),
        )

    if edit_type == InsertInSection.type_name:
        position = _first(data, "position", default=InsertPosition.BETWEEN_SENTENCES.value)
        try:
            position = InsertPosition(position)
        except ValueError as e:
            choices = ", ".join(p.value for p in InsertPosition)
            raise InstructionError(f"Unknown position {position!r}; expected one of: {choices}") from e
        return InsertInSection(
            section_number=_as_int(
                _require(data, "section_number", "sectionNumber"), "section_number"
            ),
            text=str(text),
            position=position,
            fallback_pattern=_first(data, "fallback_pattern", "fallbackPattern"),
        )

    return AddNewSection(
        after_section=_as_int(_require(data, "after_section", "afterSection"), "after_section"),
        title=str(_require(data, "title", "section_title", "sectionTitle")),
        text=str(text),
        bold=bool(merged.get("bold", False)),
        underline=bool(merged.get("underline", False)),
    )


def instruction_to_dict(instruction: Instruction) -> dict[str, Any]:
    """Convert an instruction back to its dictionary form."""
    data: dict[str, Any] = {"type": instruction.type_name}
    if isinstance(instruction, InsertAfterHeading):
        data.update(search=instruction.search, text=instruction.text, bold=instruction.bold)
    elif isinstance(instruction, InsertInSection):
        data.update(
            section_number=instruction.section_number,
            text=instruction.text,
            position=instruction.position.value,
        )
        if instruction.fallback_pattern:
            data["fallback_pattern"] = instruction.fallback_pattern
    else:
        data.update(
            after_section=instruction.after_section,
            title=instruction.title,
            text=instruction.text,
            bold=instruction.bold,
            underline=instruction.underline,
        )
    return data


def instructions_from_list(items: list[Any]) -> list[Instruction]:
    """Build instructions from a list of dictionaries.

    Raises:
        InstructionError: Listing every invalid entry
    """
    instructions = []
    errors = []
    for i, item in enumerate(items):
        try:
            instructions.append(instruction_from_dict(item))
        except InstructionError as e:
            errors.append(f"Instruction {i}: {e}")
    if errors:
        raise InstructionError("Invalid instructions", errors=errors)
    return instructions


def load_instruction_file(path: str | Path, format: str | None = None) -> list[Instruction]:
    """Load instructions from a YAML or JSON file.

    The file must contain an ``instructions`` key with a list of instruction
    mappings.

    Args:
        path: Path to the instruction file
        format: "yaml" or "json"; inferred from the extension when None

    Returns:
        List of instructions, in file order

    Raises:
        FileNotFoundError: If the file does not exist
        InstructionError: If the file cannot be parsed or has invalid content

    Example YAML file:
        ```yaml
        instructions:
          - type: insert_after_heading
            search: Definitions
            text: '"Affiliate" means ...'
          - type: add_new_section
            after_section: 10
            title: "Residuals. "
            text: "Nothing in this Agreement ..."
            formatting: {bold: true, underline: true}
        ```
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Instruction file not found: {path}")

    if format is None:
        format = "json" if file_path.suffix.lower() == ".json" else "yaml"

    try:
        with open(file_path, encoding="utf-8") as f:
            if format == "yaml":
                data = yaml.safe_load(f)
            elif format == "json":
                data = json.load(f)
            else:
                raise InstructionError(f"Unsupported format: {format}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InstructionError(f"Failed to parse {format.upper()}: {e}") from e

    if not isinstance(data, dict):
        raise InstructionError("Instruction file must contain a dictionary/object")
    if "instructions" not in data:
        raise InstructionError("Instruction file must contain an 'instructions' key")
    if not isinstance(data["instructions"], list):
        raise InstructionError("'instructions' must be a list")

    return instructions_from_list(data["instructions"])
