"""
XML-RPC decoder: XML-RPC documents to the value model.

Documents are parsed with expat into an ElementTree. Namespace processing is
left off so the Apache ``<ex:nil/>`` tag is accepted whether or not its
prefix is declared.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from xml.parsers import expat

from pyxmlrpc.exceptions import DecodeError, InvalidValueError
from pyxmlrpc.settings import CodecSettings
from pyxmlrpc.utils import helpers
from .xrv import (
    XRValue, XRNil, XRBoolean, XRInteger, XRDouble, XRString, XRBase64,
    XRDateTime, XRArray, XRStruct, Fault
)

logger = logging.getLogger(__name__)

MulticallEntry = tuple[str, XRValue] | None

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_TRUE_TEXT = frozenset(("1", "true", "on", "yes"))


def parse_document(document: str | bytes) -> ET.Element:
    """
    Parses an XML document into an ElementTree element.

    Raises:
        DecodeError: if the document is not well-formed XML.
    """
    builder = ET.TreeBuilder()
    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    try:
        parser.Parse(document, True)
    except expat.ExpatError as e:
        raise DecodeError(f"not valid XML-RPC: {e}") from e
    return builder.close()


class XmlrpcDecoder:
    """
    Decodes XML-RPC responses, calls and multicall requests.

    ``is_fault()`` reports on the last decoded response, so an instance should
    serve one response at a time. The ``Fault`` returned by
    ``decode_response`` carries the same information without shared state.
    """

    def __init__(self):
        self._is_fault: bool = False

    def is_fault(self) -> bool:
        return self._is_fault

    # --- Documents ---

    def decode_response(self, response: str | bytes) -> XRValue | Fault:
        """
        Decodes a ``methodResponse``.

        Returns:
            The decoded value, or a ``Fault`` if the response carries one.

        Raises:
            DecodeError: if the document is not a well-formed response.
        """
        self._is_fault = False
        root = parse_document(response)
        if root.tag != "methodResponse":
            raise DecodeError("not a valid response")

        fault = root.find("fault")
        if fault is not None and fault.find("value") is not None:
            try:
                result = Fault.from_struct(self._decode_value(fault.find("value")))
            except ValueError as e:
                raise DecodeError(f"invalid fault: {e}") from e
            logger.debug(f"Response carries fault {result.code}")
            self._is_fault = True
            return result

        params = root.findall("params")
        if len(params) == 1:
            param = params[0].findall("param")
            if len(param) == 1 and param[0].find("value") is not None:
                return self._decode_value(param[0].find("value"))

        raise DecodeError("not a valid response")

    def decode_call(self, request: str | bytes) -> tuple[str, list]:
        """
        Decodes a ``methodCall`` into ``(method_name, params)``.

        For ``system.multicall`` the params are the boxcarred calls, see
        ``decode_multicall``.

        Raises:
            DecodeError: if the document is not a well-formed call.
        """
        self._is_fault = False
        root = parse_document(request)
        method_name = self._method_name(root)

        if method_name == CodecSettings.MULTICALL_METHOD:
            return method_name, self._decode_multicall_params(root)
        return method_name, self._decode_params(root)

    def decode_multicall(self, request: str | bytes) -> list[MulticallEntry]:
        """
        Decodes a ``system.multicall`` request into its boxcarred calls.

        Each entry is ``(method_name, params)``, or ``None`` where the call
        lacks a ``methodName`` or ``params`` member. A bad entry does not
        fail the others and positions are kept.

        Raises:
            DecodeError: if the document is not a multicall request.
        """
        self._is_fault = False
        root = parse_document(request)
        if self._method_name(root) != CodecSettings.MULTICALL_METHOD:
            raise DecodeError("not a multicall request")
        return self._decode_multicall_params(root)

    def decode_multicall_response(self, response: str | bytes) -> list[XRValue | Fault] | Fault:
        """
        Decodes the response to a ``system.multicall`` request into one value
        or ``Fault`` per boxcarred call. A fault for the whole request is
        returned as is.
        """
        result = self.decode_response(response)
        if isinstance(result, Fault):
            return result
        if not isinstance(result, XRArray):
            raise DecodeError("invalid multicall response")

        unpacked = []
        for entry in result:
            if isinstance(entry, XRStruct):
                try:
                    unpacked.append(Fault.from_struct(entry))
                except ValueError as e:
                    raise DecodeError(f"invalid multicall fault: {e}") from e
            elif isinstance(entry, XRArray) and len(entry) == 1:
                unpacked.append(entry[0])
            else:
                raise DecodeError("invalid multicall response entry")
        return unpacked

    # --- Internals ---

    @staticmethod
    def _method_name(root: ET.Element) -> str:
        method = root.find("methodName")
        if root.tag != "methodCall" or method is None:
            raise DecodeError("incomprehensible request")
        return (method.text or "").strip()

    def _decode_params(self, root: ET.Element) -> list[XRValue]:
        params = root.find("params")
        if params is None:
            return []
        decoded = []
        for param in params.findall("param"):
            value = param.find("value")
            if value is None:
                raise DecodeError("invalid param element")
            decoded.append(self._decode_value(value))
        return decoded

    def _decode_multicall_params(self, root: ET.Element) -> list[MulticallEntry]:
        params = self._decode_params(root)
        if len(params) != 1 or not isinstance(params[0], XRArray):
            raise DecodeError("invalid multicall request")

        calls: list[MulticallEntry] = []
        for position, call in enumerate(params[0]):
            method_name = call.get("methodName") if isinstance(call, XRStruct) else None
            call_params = call.get("params") if isinstance(call, XRStruct) else None
            if not isinstance(method_name, XRString) or call_params is None:
                logger.debug(f"Boxcarred call {position} has no methodName/params, substituting None")
                calls.append(None)
                continue
            calls.append((method_name.value, call_params))
        return calls

    def _decode_value(self, node: ET.Element) -> XRValue:
        children = list(node)
        if len(children) != 1:
            raise DecodeError("invalid value element")

        child = children[0]
        tag = child.tag
        text = child.text or ""

        if tag == "int" or tag == "i4":
            if not _INTEGER_TEXT.fullmatch(text.strip()):
                raise DecodeError(f"invalid {tag} value '{text}'")
            try:
                return XRInteger(int(text.strip()))
            except InvalidValueError as e:
                raise DecodeError(str(e)) from e
        elif tag == "double":
            try:
                return XRDouble(float(text.strip()))
            except ValueError as e:
                raise DecodeError(f"invalid double value '{text}'") from e
        elif tag == "boolean":
            return XRBoolean(text.strip().lower() in _TRUE_TEXT)
        elif tag == "base64":
            try:
                return XRBase64.from_wire(text)
            except ValueError as e:
                raise DecodeError(str(e)) from e
        elif tag == "dateTime.iso8601":
            try:
                return XRDateTime(helpers.parse_iso8601(text))
            except ValueError as e:
                raise DecodeError(str(e)) from e
        elif tag == "string":
            return XRString("".join(child.itertext()))
        elif tag == "array":
            data = child.find("data")
            if data is None:
                return XRArray()
            return XRArray([self._decode_value(value) for value in data.findall("value")])
        elif tag == "struct":
            struct = XRStruct()
            for member in child.findall("member"):
                name = member.find("name")
                value = member.find("value")
                if name is None or value is None:
                    raise DecodeError("invalid struct member")
                key = name.text or ""
                if key in struct:
                    raise DecodeError(f"duplicate struct member '{key}'")
                struct[key] = self._decode_value(value)
            return struct
        elif tag == "nil" or tag == "ex:nil":
            return XRNil()

        raise DecodeError(f"invalid value type '{tag}'")
