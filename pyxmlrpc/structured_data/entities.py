"""
Named entity table and the two-pass text escaping used by the encoder.

Plain XML only predefines five entities, so every named reference that HTML
would accept is rewritten into a numeric character reference before it is
written out. The table is the HTML 4 set (Latin-1, symbols, Greek letters).
"""
import html.entities
import logging
import re
import types

from pyxmlrpc.exceptions import EncodeError

logger = logging.getLogger(__name__)

NUMERIC_ENTITIES: types.MappingProxyType = types.MappingProxyType(
    {name: f"&#{codepoint};" for name, codepoint in html.entities.name2codepoint.items()}
)
"""Entity name (``euro``) to numeric character reference (``&#8364;``)."""

# Characters replaced in the first pass. Apostrophes have no HTML 4 name.
_CHAR_TO_NAMED = {codepoint: f"&{name};" for codepoint, name in html.entities.codepoint2name.items()}
_CHAR_TO_NAMED[ord("'")] = "&#39;"
# Parsers fold a literal carriage return into a newline
_CHAR_TO_NAMED[ord("\r")] = "&#13;"

# References already present in the text are kept as they are (no double encoding).
_EXISTING_REFERENCE = re.compile(r"(&(?:[a-zA-Z][a-zA-Z0-9]+|#[0-9]+|#[xX][0-9a-fA-F]+);)")
_NAMED_REFERENCE = re.compile(r"&([a-zA-Z][a-zA-Z0-9]+);")
# Anything outside the XML 1.0 Char production, lone surrogates included
_INVALID_XML_CHAR = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _is_xml_char(codepoint: int) -> bool:
    return (codepoint in (0x9, 0xA, 0xD)
            or 0x20 <= codepoint <= 0xD7FF
            or 0xE000 <= codepoint <= 0xFFFD
            or 0x10000 <= codepoint <= 0x10FFFF)


def check_xml_text(text: str) -> str:
    """
    Returns ``text`` unchanged if every character in it may appear in an XML
    document.

    Raises:
        EncodeError: on control characters other than tab, newline and
            carriage return, on U+FFFE/U+FFFF and on lone surrogates.
    """
    match = _INVALID_XML_CHAR.search(text)
    if match is not None:
        raise EncodeError(f"Character U+{ord(match.group()):04X} cannot be written to XML")
    return text


def _keeps_reference(reference: str) -> bool:
    if reference[1] != "#":
        return True
    digits = reference[2:-1]
    try:
        codepoint = int(digits[1:], 16) if digits[0] in "xX" else int(digits)
    except ValueError:
        return False
    return _is_xml_char(codepoint)


def html_entities(text: str) -> str:
    """
    First pass: replaces quotes, ampersands, angle brackets and every character
    that has a named HTML entity with its reference. Well-formed references
    already in ``text`` survive untouched.
    """
    pieces = _EXISTING_REFERENCE.split(text)
    # split() with one capture group alternates plain text and references
    for i, piece in enumerate(pieces):
        if i % 2 == 1 and _keeps_reference(piece):
            continue
        pieces[i] = piece.translate(_CHAR_TO_NAMED)
    return "".join(pieces)


def _to_numeric(match: re.Match) -> str:
    name = match.group(1)
    replacement = NUMERIC_ENTITIES.get(name)
    if replacement is None:
        logger.debug(f"Dropping unknown entity reference '&{name};'")
        return ""
    return replacement


def numeric_entities(text: str) -> str:
    """Second pass: rewrites named references as numeric ones; unknown names are dropped."""
    return _NAMED_REFERENCE.sub(_to_numeric, text)


def escape_text(text: str) -> str:
    """Escapes ``text`` for use as XML-RPC string content."""
    return numeric_entities(html_entities(check_xml_text(text)))


__all__ = ["NUMERIC_ENTITIES", "check_xml_text", "html_entities", "numeric_entities", "escape_text"]
