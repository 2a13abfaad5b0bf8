"""
Error types raised by the XML-RPC codec.

Encode and decode failures are kept apart so a server can turn an
``EncodeError`` into a fault response while a client treats a
``DecodeError`` as a broken peer.
"""


class XmlrpcError(Exception):
    """Base class for every codec failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class EncodeError(XmlrpcError):
    """A value could not be turned into XML-RPC markup."""


class InvalidValueError(EncodeError, ValueError):
    """A value model node was constructed with unusable content."""


class DecodeError(XmlrpcError):
    """An XML-RPC document is malformed or has the wrong shape."""


__all__ = ["XmlrpcError", "EncodeError", "InvalidValueError", "DecodeError"]
