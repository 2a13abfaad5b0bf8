"""
XML-RPC encoder: value model to XML-RPC documents.

Supports ``<nil/>`` and the Apache ``<ex:nil/>`` extension, CDATA string
bodies, and converts every named entity into a numeric character reference
so the output is plain, well-formed XML.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from pyxmlrpc.exceptions import EncodeError
from pyxmlrpc.settings import CodecSettings
from .entities import escape_text
from .writer import XmlWriter
from .xrv import (
    XRValue, XRType, XRArray, XRStruct, XRString, Fault, python_to_xrv
)

logger = logging.getLogger(__name__)


class XmlrpcEncoder:
    """Builds XML-RPC calls, responses, faults and multicall requests."""

    def __init__(self, encoding: str | None = None, settings: CodecSettings | None = None):
        self.settings: CodecSettings = (settings or CodecSettings()).with_encoding(encoding)

    # --- Configuration ---

    @property
    def encoding(self) -> str:
        return self.settings.encoding

    def set_encoding(self, encoding: str | None) -> XmlrpcEncoder:
        """Sets the encoding announced in the XML declaration. Empty values are ignored."""
        self.settings = self.settings.with_encoding(encoding)
        return self

    def use_ex_nil(self, mode: bool = True) -> XmlrpcEncoder:
        """Use ``<ex:nil/>`` instead of ``<nil/>`` (Apache XML-RPC compatible)."""
        self.settings = self.settings.with_ex_nil(mode)
        return self

    # --- Documents ---

    def encode_response(self, value) -> str:
        """
        Encodes ``value`` as a ``methodResponse``. A ``Fault`` produces a fault
        response instead.

        Raises:
            EncodeError: if the value, or anything nested in it, cannot be encoded.
        """
        if isinstance(value, Fault):
            return self.encode_error(value.code, value.message)

        settings = self.settings
        xml = self._start_document(settings, "methodResponse")
        xml.start_element("params")
        xml.start_element("param")
        self._encode_value(xml, python_to_xrv(value), settings)
        xml.end_document()
        return xml.getvalue()

    def encode_call(self, method: str, params: Iterable = ()) -> str:
        """
        Encodes a ``methodCall`` of ``method`` with one ``<param>`` per item of ``params``.

        Raises:
            EncodeError: if a parameter cannot be encoded.
        """
        if not isinstance(method, str):
            raise EncodeError(f"Method name must be a string, got {type(method).__name__}")
        settings = self.settings
        xml = self._start_document(settings, "methodCall")
        xml.write_element("methodName", method.strip())
        xml.start_element("params")
        for param in params:
            xml.start_element("param")
            self._encode_value(xml, python_to_xrv(param), settings)
            xml.end_element()
        xml.end_document()
        return xml.getvalue()

    def encode_multicall(self, calls: Mapping | Sequence) -> str:
        """
        Packs several calls into one ``system.multicall`` request.

        ``calls`` maps method names to their parameter lists. An integer key
        whose value is a ``(method_name, params)`` pair is unpacked as that
        call, so a plain list of pairs works as well.

        Raises:
            EncodeError: if a call has no usable method name or its parameters
                cannot be encoded.
        """
        items = calls.items() if isinstance(calls, Mapping) else enumerate(calls)

        packed = XRArray()
        for key, params in items:
            if isinstance(key, int) and _is_call_pair(params):
                method_name, params = params
            else:
                method_name = key
            if not isinstance(method_name, str):
                raise EncodeError(f"Invalid multicall method name: {method_name!r}")
            packed.append(XRStruct({"methodName": XRString(method_name), "params": python_to_xrv(params)}))

        logger.debug(f"Packed {len(packed)} calls into {CodecSettings.MULTICALL_METHOD}")
        return self.encode_call(CodecSettings.MULTICALL_METHOD, [packed])

    def encode_multicall_response(self, results: Iterable) -> str:
        """
        Encodes the response to a ``system.multicall`` request: each result is
        wrapped in a one-element array, each ``Fault`` becomes a
        ``faultCode``/``faultString`` struct.
        """
        packed = XRArray()
        for result in results:
            if isinstance(result, Fault):
                packed.append(result.as_struct())
            else:
                packed.append(XRArray([result]))
        return self.encode_response(packed)

    def encode_error(self, code: int, message: str) -> str:
        """Encodes a complete fault ``methodResponse``."""
        settings = self.settings
        xml = self._start_document(settings, "methodResponse")
        xml.write_raw(self.encode_fault_body(code, message))
        xml.end_document()
        return xml.getvalue()

    def encode_fault_body(self, code: int, message: str) -> str:
        """
        Encodes the ``<fault>`` element alone, without the document around it.

        Raises:
            EncodeError: if ``code`` is not an integer within ``<int>`` limits.
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise EncodeError(f"Fault code must be an integer, got {type(code).__name__}")
        fault = Fault(code, str(message))

        xml = XmlWriter()
        xml.start_element("fault")
        self._encode_value(xml, fault.as_struct(), self.settings)
        xml.end_element()
        return xml.getvalue()

    # --- Internals ---

    @staticmethod
    def _start_document(settings: CodecSettings, root: str) -> XmlWriter:
        xml = XmlWriter()
        xml.start_document(settings.encoding)
        attributes = None
        if settings.use_ex_nil:
            attributes = {"xmlns:ex": CodecSettings.EX_NIL_NAMESPACE}
        xml.start_element(root, attributes)
        return xml

    def _encode_value(self, xml: XmlWriter, value: XRValue, settings: CodecSettings) -> None:
        """Writes ``<value>`` and its typed child for ``value``, recursing into containers."""
        xml.start_element("value")
        t = value.xr_type if isinstance(value, XRValue) else None

        if t == XRType.NIL:
            xml.write_empty_element("ex:nil" if settings.use_ex_nil else "nil")
        elif t == XRType.ARRAY:
            xml.start_element("array")
            xml.start_element("data")
            for item in value:
                self._encode_value(xml, item, settings)
            xml.end_element()
            xml.end_element()
        elif t == XRType.STRUCT:
            xml.start_element("struct")
            for name, member in value.items():
                xml.start_element("member")
                xml.write_element("name", name)
                self._encode_value(xml, member, settings)
                xml.end_element()
            xml.end_element()
        elif t == XRType.BASE64:
            xml.write_element("base64", value.as_string())
        elif t == XRType.DATETIME:
            xml.write_element("dateTime.iso8601", value.as_string())
        elif t == XRType.BOOLEAN:
            xml.write_element("boolean", value.as_string())
        elif t == XRType.DOUBLE:
            xml.write_element("double", value.as_string())
        elif t == XRType.INTEGER:
            xml.write_element("int", value.as_string())
        elif t == XRType.STRING:
            xml.write_raw(f"<string>{escape_text(value.as_string())}</string>")
        elif t == XRType.CDATA:
            xml.start_element("string")
            xml.write_cdata(value.as_string())
            xml.end_element()
        else:
            raise EncodeError(f"unsupported type: {type(value).__name__}")

        xml.end_element()


def _is_call_pair(params) -> bool:
    return isinstance(params, (list, tuple)) and len(params) == 2 and isinstance(params[0], str)
