import os
import sys
import xmlrpc.client

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from pyxmlrpc.exceptions import DecodeError
from pyxmlrpc.structured_data import (
    XmlrpcDecoder, XmlrpcEncoder, XRNil, XRBoolean, XRInteger, XRDouble,
    XRString, XRBase64, XRDateTime, XRCData, XRArray, XRStruct, Fault
)


def wrap_value(markup: str) -> str:
    return ("<?xml version=\"1.0\"?><methodResponse><params><param><value>"
            + markup + "</value></param></params></methodResponse>")


def decode_value(markup: str):
    return XmlrpcDecoder().decode_response(wrap_value(markup))


def test_scalar_types():
    assert decode_value("<int>42</int>") == XRInteger(42)
    assert decode_value("<i4>-7</i4>") == XRInteger(-7)
    assert decode_value("<double>2.5</double>") == XRDouble(2.5)
    assert decode_value("<string>hi there</string>") == XRString("hi there")
    assert decode_value("<string></string>") == XRString("")
    assert decode_value("<base64>aGVsbG8=</base64>") == XRBase64(b"hello")
    assert decode_value("<dateTime.iso8601>20231114T22:13:20</dateTime.iso8601>") == XRDateTime(1700000000)
    assert decode_value("<nil/>") == XRNil()


@pytest.mark.parametrize("text,expected", [
    ("1", True), ("true", True), ("TRUE", True), ("on", True), ("yes", True),
    ("0", False), ("false", False), ("", False), ("nope", False),
])
def test_boolean_coercion(text, expected):
    assert decode_value(f"<boolean>{text}</boolean>") == XRBoolean(expected)


def test_empty_base64_decodes_to_empty_bytes():
    assert decode_value("<base64></base64>").as_binary() == b""


def test_ex_nil_with_and_without_namespace_declaration():
    assert decode_value("<ex:nil/>") == XRNil()
    declared = ('<methodResponse xmlns:ex="http://ws.apache.org/xmlrpc/namespaces/extensions">'
                "<params><param><value><ex:nil/></value></param></params></methodResponse>")
    assert XmlrpcDecoder().decode_response(declared) == XRNil()


def test_entities_and_cdata_are_resolved():
    assert decode_value("<string>100&#8364; &#38; &#60;tag&#62;</string>") == XRString("100€ & <tag>")
    assert decode_value("<string><![CDATA[<b>]]></string>") == XRString("<b>")


def test_array_and_struct():
    value = decode_value(
        "<struct>"
        "<member><name>list</name><value><array><data>"
        "<value><int>1</int></value><value><string>two</string></value>"
        "</data></array></value></member>"
        "<member><name>empty</name><value><array><data></data></array></value></member>"
        "<member><name>nodata</name><value><array></array></value></member>"
        "</struct>"
    )
    assert value == XRStruct({
        "list": XRArray([XRInteger(1), XRString("two")]),
        "empty": XRArray(),
        "nodata": XRArray(),
    })
    assert value.as_python_object() == {"list": [1, "two"], "empty": [], "nodata": []}


def test_whitespace_between_elements_is_ignored():
    doc = xmlrpc.client.dumps(({"a": [1, 2.5, "x"]},), methodresponse=True)
    assert "\n" in doc
    value = XmlrpcDecoder().decode_response(doc)
    assert value.as_python_object() == {"a": [1, 2.5, "x"]}


def test_decodes_stdlib_xmlrpc_output():
    payload = {
        "session_id": "sess",
        "agent_id": "agent",
        "ok": True,
        "nothing": None,
        "blob": b"\x01\x02",
        "when": xmlrpc.client.DateTime("20231114T22:13:20"),
    }
    doc = xmlrpc.client.dumps((payload,), methodresponse=True, allow_none=True)
    value = XmlrpcDecoder().decode_response(doc)
    assert value["session_id"] == XRString("sess")
    assert value["ok"] == XRBoolean(True)
    assert value["nothing"] == XRNil()
    assert value["blob"] == XRBase64(b"\x01\x02")
    assert value["when"] == XRDateTime(1700000000)


def test_bytes_document_uses_declared_encoding():
    doc = ('<?xml version="1.0" encoding="iso-8859-1"?>'
           "<methodResponse><params><param><value><string>caf\xe9</string></value></param></params>"
           "</methodResponse>").encode("iso-8859-1")
    assert XmlrpcDecoder().decode_response(doc) == XRString("café")


def test_fault_response_sets_fault_state():
    decoder = XmlrpcDecoder()
    doc = XmlrpcEncoder().encode_error(300, "Invalid parameters")
    result = decoder.decode_response(doc)
    assert result == Fault(300, "Invalid parameters")
    assert result.code == 300
    assert result.message == "Invalid parameters"
    assert decoder.is_fault()

    decoder.decode_response(wrap_value("<int>1</int>"))
    assert not decoder.is_fault()


def test_stdlib_fault_is_decoded():
    doc = xmlrpc.client.dumps(xmlrpc.client.Fault(4, "Too many parameters"), methodresponse=True)
    assert XmlrpcDecoder().decode_response(doc) == Fault(4, "Too many parameters")


def test_fault_with_wrong_shape_fails():
    doc = ("<methodResponse><fault><value><struct>"
           "<member><name>faultCode</name><value><string>x</string></value></member>"
           "</struct></value></fault></methodResponse>")
    with pytest.raises(DecodeError, match="invalid fault"):
        XmlrpcDecoder().decode_response(doc)


@pytest.mark.parametrize("doc", [
    "<methodResponse></methodResponse>",
    "<methodResponse><params></params></methodResponse>",
    "<methodResponse><params><param><value><int>1</int></value></param>"
    "<param><value><int>2</int></value></param></params></methodResponse>",
    "<methodResponse><params><param></param></params></methodResponse>",
    "<methodResponse><fault></fault></methodResponse>",
    "<methodCall><params><param><value><int>1</int></value></param></params></methodCall>",
])
def test_invalid_response_shapes(doc):
    with pytest.raises(DecodeError, match="not a valid response"):
        XmlrpcDecoder().decode_response(doc)


@pytest.mark.parametrize("markup", ["", "<int>1</int><int>2</int>", "text only"])
def test_value_needs_exactly_one_child(markup):
    with pytest.raises(DecodeError, match="invalid value element"):
        decode_value(markup)


def test_unknown_value_type_fails():
    with pytest.raises(DecodeError, match="invalid value type"):
        decode_value("<float>1.0</float>")


@pytest.mark.parametrize("markup", [
    "<int>1.5</int>",
    "<int></int>",
    "<i4>12abc</i4>",
    "<int>2147483648</int>",
    "<double>one</double>",
    "<base64>!!!</base64>",
    "<dateTime.iso8601>soon</dateTime.iso8601>",
    "<struct><member><value><int>1</int></value></member></struct>",
    "<struct><member><name>a</name></member></struct>",
])
def test_bad_scalar_content_fails(markup):
    with pytest.raises(DecodeError):
        decode_value(markup)


def test_malformed_xml_fails():
    with pytest.raises(DecodeError, match="not valid XML-RPC"):
        XmlrpcDecoder().decode_response("<methodResponse><params>")
    with pytest.raises(DecodeError, match="not valid XML-RPC"):
        XmlrpcDecoder().decode_call("")


def test_decode_call():
    decoder = XmlrpcDecoder()
    method, params = decoder.decode_call(XmlrpcEncoder().encode_call("sample.add", [1, "two"]))
    assert method == "sample.add"
    assert params == [XRInteger(1), XRString("two")]

    method, params = decoder.decode_call("<methodCall><methodName>system.listMethods</methodName></methodCall>")
    assert method == "system.listMethods"
    assert params == []


def test_decode_call_requires_method_name():
    with pytest.raises(DecodeError, match="incomprehensible request"):
        XmlrpcDecoder().decode_call("<methodCall><params></params></methodCall>")
    with pytest.raises(DecodeError, match="incomprehensible request"):
        XmlrpcDecoder().decode_call("<methodResponse><methodName>x</methodName></methodResponse>")


def test_round_trip_of_every_wire_type():
    value = XRStruct({
        "nil": XRNil(),
        "yes": XRBoolean(True),
        "int": XRInteger(-2**31),
        "double": XRDouble(-0.125),
        "text": XRString("quotes \" and ' & <angles> €"),
        "bin": XRBase64(bytes(range(256))),
        "when": XRDateTime(1700000000),
        "nested": XRArray([XRArray([]), XRStruct({}), XRStruct({"deep": XRArray([XRInteger(1)])})]),
    })
    for use_ex_nil in (False, True):
        encoder = XmlrpcEncoder().use_ex_nil(use_ex_nil)
        assert XmlrpcDecoder().decode_response(encoder.encode_response(value)) == value


def test_cdata_decodes_as_plain_string():
    doc = XmlrpcEncoder().encode_response(XRCData("<raw> & ]]> text"))
    assert XmlrpcDecoder().decode_response(doc) == XRString("<raw> & ]]> text")


def test_duplicate_struct_member_fails():
    with pytest.raises(DecodeError, match="duplicate struct member 'a'"):
        decode_value(
            "<struct>"
            "<member><name>a</name><value><int>1</int></value></member>"
            "<member><name>a</name><value><int>2</int></value></member>"
            "</struct>"
        )
