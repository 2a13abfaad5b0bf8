"""XML-RPC codec: a tagged value model and its XML-RPC encoder/decoder."""

__version__ = "0.1.0"

from .exceptions import XmlrpcError, EncodeError, DecodeError, InvalidValueError
from .settings import CodecSettings
from .structured_data import (
    XRValue, XRType, XRNil, XRBoolean, XRInteger, XRDouble, XRString,
    XRBase64, XRDateTime, XRCData, XRStruct, XRArray, Fault, python_to_xrv,
    XmlrpcEncoder, XmlrpcDecoder,
)

__all__ = [
    "__version__",
    "XmlrpcError", "EncodeError", "DecodeError", "InvalidValueError",
    "CodecSettings",
    "XRValue", "XRType", "XRNil", "XRBoolean", "XRInteger", "XRDouble", "XRString",
    "XRBase64", "XRDateTime", "XRCData", "XRStruct", "XRArray", "Fault", "python_to_xrv",
    "XmlrpcEncoder", "XmlrpcDecoder",
]
