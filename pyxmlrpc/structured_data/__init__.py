# This file marks pyxmlrpc.structured_data as a Python package.

from .xrv import (
    XRValue,
    XRType,
    XRNil,
    XRBoolean,
    XRInteger,
    XRDouble,
    XRString,
    XRBase64,
    XRDateTime,
    XRCData,
    XRStruct,
    XRArray,
    Fault,
    python_to_xrv # Helper function
)

from .entities import NUMERIC_ENTITIES, check_xml_text, escape_text
from .writer import XmlWriter
from .encoder import XmlrpcEncoder
from .decoder import XmlrpcDecoder, parse_document

__all__ = [
    # XRValue base and types
    "XRValue",
    "XRType",
    "XRNil",
    "XRBoolean",
    "XRInteger",
    "XRDouble",
    "XRString",
    "XRBase64",
    "XRDateTime",
    "XRCData",
    "XRStruct",
    "XRArray",
    "Fault",
    "python_to_xrv",
    # Entity table
    "NUMERIC_ENTITIES",
    "check_xml_text",
    "escape_text",
    # Codec
    "XmlWriter",
    "XmlrpcEncoder",
    "XmlrpcDecoder",
    "parse_document",
]
