"""
Centralized constants for OOXML namespaces, part names and element ordering.

Import from here rather than repeating namespace URLs across modules.
"""

# =============================================================================
# Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# XML namespace (xml:space)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Basic namespace map with just the main Word namespace
NSMAP = {"w": WORD_NAMESPACE}


# =============================================================================
# Package parts
# =============================================================================

# The main document part inside a .docx package
DOCUMENT_PART = "word/document.xml"

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Prefix used for output files when no explicit path is given
OUTPUT_PREFIX = "edited_"


# =============================================================================
# Element ordering
# =============================================================================

# ISO/IEC 29500-1 section 17.3.2.28 (rPr). New toggles are inserted at their
# schema position so copied property bags stay valid.
RPR_ELEMENT_ORDER = [
    "rStyle",
    "rFonts",
    "b",
    "bCs",
    "i",
    "iCs",
    "caps",
    "smallCaps",
    "strike",
    "dstrike",
    "outline",
    "shadow",
    "emboss",
    "imprint",
    "noProof",
    "snapToGrid",
    "vanish",
    "webHidden",
    "color",
    "spacing",
    "w",
    "kern",
    "position",
    "sz",
    "szCs",
    "highlight",
    "u",
    "effect",
    "bdr",
    "shd",
    "fitText",
    "vertAlign",
    "rtl",
    "cs",
    "em",
    "lang",
    "eastAsianLayout",
    "specVanish",
    "oMath",
    "rPrChange",  # Tracked change must be last
]

# Paragraph properties that start a new page or section. Copying them onto an
# inserted paragraph would duplicate the break.
BREAK_PROPERTIES = ("pageBreakBefore", "br", "sectPr")

# Markers that may sit between block-level paragraphs without being content
NON_BLOCK_MARKERS = frozenset(
    {
        "bookmarkStart",
        "bookmarkEnd",
        "proofErr",
        "permStart",
        "permEnd",
        "commentRangeStart",
        "commentRangeEnd",
    }
)


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"


def xml(tag: str) -> str:
    """Create a fully qualified XML namespace attribute name (e.g. xml:space)."""
    return f"{{{XML_NAMESPACE}}}{tag}"
