"""
Tests for DocumentProcessor: .docx in, .docx out.
"""

import zipfile
from pathlib import Path

import pytest

from docx_clause_editor.constants import WORD_NAMESPACE
from docx_clause_editor.errors import MalformedDocumentError, PackageError
from docx_clause_editor.instructions import AddNewSection, InsertAfterHeading, InsertInSection
from docx_clause_editor.package import read_document_text, read_part
from docx_clause_editor.processor import DocumentProcessor, output_path_for
from docx_clause_editor.results import EditOutcome


def create_document_xml(*paragraphs: str) -> str:
    body = "".join(f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p>" for text in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{WORD_NAMESPACE}"><w:body>{body}</w:body></w:document>'
    )


def create_test_docx(path: Path, *paragraphs: str, document_xml: str | None = None) -> Path:
    """Create a minimal .docx file for testing."""
    content_types = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
    <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
    <Default Extension="xml" ContentType="application/xml"/>
    <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

    rels = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
    <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", content_types)
        zf.writestr("_rels/.rels", rels)
        zf.writestr("word/document.xml", document_xml or create_document_xml(*paragraphs))
    return path


CONTRACT = ("1. Definitions", "Terms are defined below.", "10. Term.", "11. Notices. Written.")


@pytest.fixture
def processor():
    return DocumentProcessor()


@pytest.fixture
def contract_path(tmp_path):
    return create_test_docx(tmp_path / "nda.docx", *CONTRACT)


def test_output_path_for():
    assert output_path_for(Path("/a/b/nda.docx")) == Path("/a/b/edited_nda.docx")
    assert output_path_for(Path("/a/b/nda.docx"), Path("/out")) == Path("/out/edited_nda.docx")


class TestModifyDocx:
    def test_applied(self, processor, contract_path):
        archive = contract_path.read_bytes()

        result = processor.modify_docx(archive, [AddNewSection(10, "Residuals.", "X.")], "nda.docx")

        assert result.changed
        assert result.applied_count == 1
        assert read_document_text(result.archive).splitlines() == [
            "1. Definitions",
            "Terms are defined below.",
            "10. Term.",
            "11. Residuals. X.",
            "12. Notices. Written.",
        ]

    def test_other_parts_untouched(self, processor, contract_path):
        archive = contract_path.read_bytes()
        result = processor.modify_docx(archive, [InsertInSection(11, "Sent.")])

        assert read_part(result.archive, "_rels/.rels") == read_part(archive, "_rels/.rels")

    def test_nothing_applied_returns_original_bytes(self, processor, contract_path):
        archive = contract_path.read_bytes()

        result = processor.modify_docx(archive, [InsertAfterHeading("Zzz-not-present", "x")])

        assert result.archive is archive
        assert not result.changed
        assert result.results[0].outcome is EditOutcome.NO_OP

    def test_no_instructions(self, processor, contract_path):
        archive = contract_path.read_bytes()
        result = processor.modify_docx(archive, [])
        assert result.archive is archive
        assert result.results == []

    def test_malformed_document_raises(self, processor, tmp_path):
        path = create_test_docx(tmp_path / "bad.docx", document_xml="<w:document><w:body>")

        with pytest.raises(MalformedDocumentError) as exc_info:
            processor.modify_docx(path.read_bytes(), [InsertAfterHeading("a", "b")], "bad.docx")

        assert exc_info.value.document == "bad.docx"

    def test_not_a_package(self, processor):
        with pytest.raises(PackageError):
            processor.modify_docx(b"not a zip", [InsertAfterHeading("a", "b")])


class TestProcessFile:
    def test_writes_edited_copy(self, processor, contract_path):
        report = processor.process_file(contract_path, [InsertInSection(11, "Sent.")])

        assert report.success
        assert report.output == contract_path.parent / "edited_nda.docx"
        assert report.output.exists()
        text = read_document_text(report.output.read_bytes())
        assert "11. Notices. Sent. Written." in text
        assert read_document_text(contract_path.read_bytes()) == "\n".join(CONTRACT)

    def test_explicit_output(self, processor, contract_path, tmp_path):
        output = tmp_path / "out.docx"
        report = processor.process_file(contract_path, [InsertInSection(11, "Sent.")], output=output)
        assert report.output == output
        assert output.exists()

    def test_classifies_when_no_instructions(self, processor, tmp_path):
        path = create_test_docx(tmp_path / "Contract3.docx", *CONTRACT)

        report = processor.process_file(path)

        assert report.results[0].instruction.title == "Residuals. "
        assert "11. Residuals. " in read_document_text(report.output.read_bytes())

    def test_classifies_by_content(self, processor, contract_path):
        report = processor.process_file(contract_path)

        text = read_document_text(report.output.read_bytes())
        assert text.splitlines()[1].startswith('"Affiliate" means')

    def test_unclassified_document_is_left_unchanged(self, processor, tmp_path):
        path = create_test_docx(tmp_path / "memo.docx", "1. Scope", "Applies to staff.")

        report = processor.process_file(path)

        assert report.success
        assert report.results[0].outcome is EditOutcome.NO_OP
        assert report.output.read_bytes() == path.read_bytes()

    def test_missing_file(self, processor, tmp_path):
        with pytest.raises(FileNotFoundError):
            processor.process_file(tmp_path / "missing.docx", [])

    def test_str(self, processor, contract_path):
        report = processor.process_file(contract_path, [InsertInSection(11, "Sent.")])
        assert str(report).startswith("✓ nda.docx")
        assert "1/1 edits applied" in str(report)


class TestProcessFiles:
    def test_failure_is_isolated(self, processor, tmp_path):
        good = create_test_docx(tmp_path / "good.docx", *CONTRACT)
        bad = create_test_docx(tmp_path / "bad.docx", document_xml="<w:document>")
        missing = tmp_path / "missing.docx"

        reports = processor.process_files(
            [bad, good, missing], instructions=[InsertInSection(11, "Sent.")]
        )

        assert [r.success for r in reports] == [False, True, False]
        assert isinstance(reports[0].error, MalformedDocumentError)
        assert isinstance(reports[2].error, FileNotFoundError)
        assert reports[1].output.exists()
        assert str(reports[0]).startswith("✗ bad.docx")

    def test_parallel_workers_keep_input_order(self, processor, tmp_path):
        paths = [create_test_docx(tmp_path / f"doc{i}.docx", *CONTRACT) for i in range(6)]

        reports = processor.process_files(
            paths, instructions=[AddNewSection(10, "Residuals.", "X.")], workers=3
        )

        assert [r.source for r in reports] == paths
        assert all(r.success for r in reports)
        for report in reports:
            assert "12. Notices. Written." in read_document_text(report.output.read_bytes())

    def test_output_dir(self, processor, tmp_path):
        path = create_test_docx(tmp_path / "nda.docx", *CONTRACT)
        output_dir = tmp_path / "out" / "nested"

        reports = processor.process_files([path], [InsertInSection(11, "Sent.")], output_dir)

        assert reports[0].output == output_dir / "edited_nda.docx"
        assert reports[0].output.exists()
