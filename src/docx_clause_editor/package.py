"""
Part-level access to the .docx ZIP container.

The edit engine works on the markup of one part; these helpers move that
markup in and out of the package bytes. Everything else in the package is
carried over untouched.
"""

import io
import zipfile

from .constants import DOCUMENT_PART
from .errors import MalformedDocumentError, PackageError
from .models.document_tree import DocumentTree


def _open_archive(archive: bytes) -> zipfile.ZipFile:
    buffer = io.BytesIO(archive)
    if not zipfile.is_zipfile(buffer):
        raise PackageError("File is not a valid .docx (ZIP) package")
    buffer.seek(0)
    try:
        return zipfile.ZipFile(buffer, "r")
    except zipfile.BadZipFile as e:
        raise PackageError(f"Could not open package: {e}") from e


def read_part(archive: bytes, part_name: str = DOCUMENT_PART) -> bytes:
    """Read the raw bytes of one part.

    Args:
        archive: Bytes of the .docx package
        part_name: Name of the part inside the package

    Returns:
        The part's bytes

    Raises:
        PackageError: If the package is not a ZIP file or the part is missing
    """
    with _open_archive(archive) as zip_ref:
        try:
            return zip_ref.read(part_name)
        except KeyError as e:
            raise PackageError(f"Invalid .docx package: {part_name} not found") from e


def write_part(archive: bytes, part_name: str, data: bytes) -> bytes:
    """Return a copy of the package with one part replaced.

    Entry order, metadata and compression of every entry are kept; the
    replaced part keeps those of the entry it replaces.

    Args:
        archive: Bytes of the .docx package
        part_name: Name of the part to replace
        data: New bytes of the part

    Returns:
        Bytes of the new package

    Raises:
        PackageError: If the package is not a ZIP file or the part is missing
    """
    buffer = io.BytesIO()
    with _open_archive(archive) as source:
        if part_name not in source.namelist():
            raise PackageError(f"Invalid .docx package: {part_name} not found")

        with zipfile.ZipFile(buffer, "w") as target:
            for info in source.infolist():
                payload = data if info.filename == part_name else source.read(info)
                target.writestr(info, payload, compress_type=info.compress_type)

    return buffer.getvalue()


def read_document_text(archive: bytes) -> str:
    """Extract the plain text of the main document, one line per paragraph.

    Args:
        archive: Bytes of the .docx package

    Returns:
        The document text

    Raises:
        PackageError: If the package or its main document cannot be read
    """
    try:
        return DocumentTree.parse(read_part(archive)).text
    except MalformedDocumentError as e:
        raise PackageError(f"Could not read document text: {e.message}") from e
