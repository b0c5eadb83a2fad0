"""
Tests for DocumentTree parsing, mutation and serialization.
"""

import pytest

from docx_clause_editor.constants import WORD_NAMESPACE, w
from docx_clause_editor.errors import MalformedDocumentError
from docx_clause_editor.models.document_tree import DocumentTree
from docx_clause_editor.models.paragraph import Paragraph
from docx_clause_editor.models.run import Run


def create_document_xml(*paragraphs: str, standalone: bool = True) -> bytes:
    """Helper to build document.xml markup from paragraph texts."""
    body = "".join(
        f'<w:p><w:r><w:t xml:space="preserve">{text}</w:t></w:r></w:p>' for text in paragraphs
    )
    flag = ' standalone="yes"' if standalone else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"{flag}?>\n'
        f'<w:document xmlns:w="{WORD_NAMESPACE}" '
        f'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
        f"<w:body>{body}<w:sectPr/></w:body></w:document>"
    ).encode("utf-8")


def test_parse_bytes():
    tree = DocumentTree.parse(create_document_xml("One", "Two"))
    assert [p.text for p in tree.paragraphs] == ["One", "Two"]
    assert len(tree) == 2


def test_parse_str_with_declaration():
    tree = DocumentTree.parse(create_document_xml("One").decode("utf-8"))
    assert tree.paragraphs[0].text == "One"


def test_parse_malformed_xml():
    with pytest.raises(MalformedDocumentError, match="Invalid XML"):
        DocumentTree.parse(b"<w:document><w:body>")


def test_parse_wrong_namespace():
    with pytest.raises(MalformedDocumentError, match="WordprocessingML"):
        DocumentTree.parse(b"<document><body/></document>")


def test_root():
    tree = DocumentTree.parse(create_document_xml("One"))
    assert tree.root.tag == w("document")


def test_text():
    tree = DocumentTree.parse(create_document_xml("One", "Two"))
    assert tree.text == "One\nTwo"


def test_paragraphs_in_tables_are_included():
    markup = (
        f'<w:document xmlns:w="{WORD_NAMESPACE}"><w:body>'
        "<w:p><w:r><w:t>Before</w:t></w:r></w:p>"
        "<w:tbl><w:tr><w:tc><w:p><w:r><w:t>Cell</w:t></w:r></w:p></w:tc></w:tr></w:tbl>"
        "<w:p><w:r><w:t>After</w:t></w:r></w:p>"
        "</w:body></w:document>"
    )
    tree = DocumentTree.parse(markup)
    assert [p.text for p in tree.paragraphs] == ["Before", "Cell", "After"]


def test_insert_after():
    tree = DocumentTree.parse(create_document_xml("One", "Three"))
    anchor = tree.paragraphs[0]

    tree.insert_after(anchor, Paragraph.create([Run.create("Two")]))

    assert [p.text for p in tree.paragraphs] == ["One", "Two", "Three"]


def test_insert_after_last_paragraph_precedes_section_properties():
    tree = DocumentTree.parse(create_document_xml("One"))
    tree.insert_after(tree.paragraphs[0], Paragraph.create([Run.create("Two")]))

    body = tree.root.find(w("body"))
    assert body[-1].tag == w("sectPr")
    assert [p.text for p in tree.paragraphs] == ["One", "Two"]


def test_insert_after_detached_anchor():
    tree = DocumentTree.parse(create_document_xml("One"))
    with pytest.raises(ValueError):
        tree.insert_after(Paragraph.create([]), Paragraph.create([]))


def test_remove():
    tree = DocumentTree.parse(create_document_xml("One", "Two"))
    tree.remove(tree.paragraphs[0])
    assert [p.text for p in tree.paragraphs] == ["Two"]


def test_serialize_has_declaration():
    output = DocumentTree.parse(create_document_xml("One")).serialize()
    assert output.startswith(b"<?xml")
    assert b"UTF-8" in output


def test_serialize_keeps_standalone_flag():
    assert b"standalone" in DocumentTree.parse(create_document_xml("One")).serialize()
    output = DocumentTree.parse(create_document_xml("One", standalone=False)).serialize()
    assert b"standalone" not in output


def test_serialize_is_deterministic():
    markup = create_document_xml("One", " two ")
    assert DocumentTree.parse(markup).serialize() == DocumentTree.parse(markup).serialize()


def test_round_trip_is_structurally_equivalent():
    markup = create_document_xml("1. Definitions", "  leading space", "Ünïcode ‘quotes’")
    original = DocumentTree.parse(markup)

    reparsed = DocumentTree.parse(original.serialize())

    assert reparsed.canonical() == DocumentTree.parse(markup).canonical()


def test_round_trip_after_mutation():
    tree = DocumentTree.parse(create_document_xml("One"))
    tree.insert_after(tree.paragraphs[0], Paragraph.create([Run.create(" Two ")]))

    reparsed = DocumentTree.parse(tree.serialize())

    assert reparsed.canonical() == tree.canonical()
    assert reparsed.paragraphs[1].text == " Two "


def test_repr():
    assert repr(DocumentTree.parse(create_document_xml("One"))) == "<DocumentTree paragraphs=1>"
