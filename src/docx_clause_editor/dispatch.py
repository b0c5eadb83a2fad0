"""
Document classification: choosing which instructions apply to a document.

A classifier holds an ordered list of dispatch rules. A rule matches a
document by keywords in its file name or, failing that, by a content
predicate over the document text. The built-in rules cover the three contract
edits the tool was written for; other rule sets can be loaded from YAML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import InstructionError
from .instructions import (
    AddNewSection,
    InsertAfterHeading,
    InsertInSection,
    InsertPosition,
    Instruction,
    instructions_from_list,
)

logger = logging.getLogger(__name__)

AFFILIATE_DEFINITION = (
    '"Affiliate" means any entity that directly or indirectly controls, is controlled by, '
    'or is under common control with a party, where "control" means the possession, '
    "directly or indirectly, of the power to direct or cause the direction of the management "
    "and policies of such entity, whether through ownership of voting securities, by "
    "contract, or otherwise."
)

WARRANTY_DISCLAIMER = (
    "THE DISCLOSING PARTY MAKES NO REPRESENTATIONS OR WARRANTIES REGARDING THE ACCURACY "
    "OR COMPLETENESS OF THE CONFIDENTIAL INFORMATION."
)

RESIDUALS_CLAUSE = (
    "Nothing in this Agreement shall be construed to limit the Receiving Party's right to "
    "independently develop or acquire products or services without use of the Disclosing "
    "Party's Confidential Information, nor shall it restrict the use of any general "
    "knowledge, skills, or experience retained in unaided memory by personnel of the "
    "Receiving Party."
)

PROCESSED_NOTICE = "This document has been processed by the automated contract editor."


@dataclass(frozen=True)
class ContentPredicate:
    """Keyword test over lower-cased document text.

    Accepts a text when every ``required`` keyword occurs in it and no
    ``forbidden`` keyword does. An empty predicate accepts nothing.
    """

    required: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()

    def __call__(self, text: str) -> bool:
        if not self.required and not self.forbidden:
            return False
        lowered = text.lower()
        return all(k.lower() in lowered for k in self.required) and not any(
            k.lower() in lowered for k in self.forbidden
        )


@dataclass(frozen=True)
class DispatchRule:
    """A named set of instructions and the documents it applies to.

    Attributes:
        name: Rule name, used in logs and reports
        filename_keywords: Any of these in the lower-cased file name selects the rule
        content_predicate: Fallback test over the document text
        instructions: Instructions to apply when the rule is selected
    """

    name: str
    filename_keywords: tuple[str, ...] = ()
    content_predicate: ContentPredicate = field(default_factory=ContentPredicate)
    instructions: tuple[Instruction, ...] = ()

    def matches_filename(self, filename: str) -> bool:
        lowered = filename.lower()
        return any(keyword.lower() in lowered for keyword in self.filename_keywords)


DEFAULT_INSTRUCTIONS: tuple[Instruction, ...] = (
    InsertAfterHeading(search="1.", text=PROCESSED_NOTICE, bold=True),
)


def default_rules() -> list[DispatchRule]:
    """Get the built-in rules for the three supported contract edits."""
    return [
        DispatchRule(
            name="affiliate-definition",
            filename_keywords=("contract1", "contract 1"),
            content_predicate=ContentPredicate(required=("definitions",), forbidden=("affiliate",)),
            instructions=(
                InsertAfterHeading(search="Definitions", text=AFFILIATE_DEFINITION, bold=True),
            ),
        ),
        DispatchRule(
            name="warranty-disclaimer",
            filename_keywords=("contract2", "contract 2"),
            content_predicate=ContentPredicate(required=("confidential information", "11")),
            instructions=(
                InsertInSection(
                    section_number=11,
                    text=WARRANTY_DISCLAIMER,
                    position=InsertPosition.BETWEEN_SENTENCES,
                    fallback_pattern="The Disclosing Party is",
                ),
            ),
        ),
        DispatchRule(
            name="residuals-section",
            filename_keywords=("contract3", "contract 3"),
            content_predicate=ContentPredicate(required=("10",), forbidden=("residuals",)),
            instructions=(
                AddNewSection(
                    after_section=10,
                    title="Residuals. ",
                    text=RESIDUALS_CLAUSE,
                    bold=True,
                    underline=True,
                ),
            ),
        ),
    ]


class ContractClassifier:
    """Selects the instructions to apply to a document.

    Example:
        >>> classifier = ContractClassifier()
        >>> classifier.classify("Contract2.docx", text)
        [InsertInSection(section_number=11, ...)]
    """

    def __init__(
        self,
        rules: list[DispatchRule] | None = None,
        default: tuple[Instruction, ...] | list[Instruction] = DEFAULT_INSTRUCTIONS,
    ) -> None:
        self.rules = list(rules) if rules is not None else default_rules()
        self.default = tuple(default)

    def select_rule(self, filename: str, text: str | None = None) -> DispatchRule | None:
        """Find the rule for a document.

        File name keywords are checked for every rule before any content
        predicate is evaluated.

        Args:
            filename: The document's file name
            text: The document's plain text, or None to skip content checks

        Returns:
            The selected rule, or None when no rule matches
        """
        for rule in self.rules:
            if rule.matches_filename(filename):
                logger.debug("%s matched rule %r by file name", filename, rule.name)
                return rule

        if text is not None:
            for rule in self.rules:
                if rule.content_predicate(text):
                    logger.debug("%s matched rule %r by content", filename, rule.name)
                    return rule

        return None

    def classify(self, filename: str, text: str | None = None) -> list[Instruction]:
        """Get the instructions for a document.

        Args:
            filename: The document's file name
            text: The document's plain text, or None to skip content checks

        Returns:
            Instructions of the selected rule, or the default instructions
        """
        rule = self.select_rule(filename, text)
        if rule is None:
            logger.info("Could not determine document type of %s; using default", filename)
            return list(self.default)
        return list(rule.instructions)


def _keywords(value: Any, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InstructionError(f"'{name}' must be a string or a list of strings")
    return tuple(value)


def rule_from_dict(data: dict[str, Any]) -> DispatchRule:
    """Build a dispatch rule from a dictionary.

    Raises:
        InstructionError: If the rule is missing a name or has invalid fields
    """
    if not isinstance(data, dict):
        raise InstructionError(f"Rule must be a mapping, got {type(data).__name__}")
    if not data.get("name"):
        raise InstructionError("Rule is missing a 'name'")

    content = data.get("content") or {}
    if not isinstance(content, dict):
        raise InstructionError(f"Rule {data['name']!r}: 'content' must be a mapping")

    return DispatchRule(
        name=str(data["name"]),
        filename_keywords=_keywords(data.get("filename_keywords"), "filename_keywords"),
        content_predicate=ContentPredicate(
            required=_keywords(content.get("required"), "content.required"),
            forbidden=_keywords(content.get("forbidden"), "content.forbidden"),
        ),
        instructions=tuple(instructions_from_list(data.get("instructions") or [])),
    )


def load_rules(path: str | Path) -> ContractClassifier:
    """Load a classifier from a YAML rules file.

    Example YAML file:
        ```yaml
        rules:
          - name: residuals-section
            filename_keywords: [contract3]
            content:
              required: ["10"]
              forbidden: [residuals]
            instructions:
              - type: add_new_section
                after_section: 10
                title: "Residuals. "
                text: "Nothing in this Agreement ..."
        default: []
        ```

    When ``default`` is omitted the built-in processed-document notice is used.

    Raises:
        FileNotFoundError: If the file does not exist
        InstructionError: If the file cannot be parsed or has invalid content
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Rules file not found: {path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InstructionError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise InstructionError("Rules file must contain a dictionary/object")
    if "rules" not in data:
        raise InstructionError("Rules file must contain a 'rules' key")
    if not isinstance(data["rules"], list):
        raise InstructionError("'rules' must be a list")

    rules = [rule_from_dict(item) for item in data["rules"]]
    if "default" in data:
        default = instructions_from_list(data["default"] or [])
    else:
        default = list(DEFAULT_INSTRUCTIONS)

    logger.debug("Loaded %d dispatch rules from %s", len(rules), file_path)
    return ContractClassifier(rules, default=default)
