import logging
import os
import sys

current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
sys.path.insert(0, parent_dir)

from pyxmlrpc import (
    XmlrpcEncoder, XmlrpcDecoder, XRBase64, XRDateTime, XRCData, Fault, EncodeError
)
from pyxmlrpc.utils import get_unix_time


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    encoder = XmlrpcEncoder("UTF-8")
    decoder = XmlrpcDecoder()

    # Client side: a single call and a boxcarred batch
    call = encoder.encode_call("sample.add", [1, 2])
    logging.info(f"[Call] {call}")
    batch = encoder.encode_multicall({"sample.add": [1, 2], "system.listMethods": []})
    for entry in decoder.decode_multicall(batch):
        logging.info(f"[Multicall] entry: {entry}")

    # Server side: answer with a value built from explicit special types
    response = encoder.encode_response({
        "when": XRDateTime(get_unix_time()),
        "logo": XRBase64(b"\x89PNG"),
        "note": XRCData("<b>raw markup</b>"),
        "price": "100€ & <tax>",
        "missing": None,
    })
    logging.info(f"[Response] {response}")
    result = decoder.decode_response(response)
    logging.info(f"[Decoded] {result.as_python_object()}")

    # Turning an encode failure into a fault response
    try:
        encoder.encode_response(object())
    except EncodeError as e:
        fault_doc = encoder.encode_error(-32603, e.message)
        fault = decoder.decode_response(fault_doc)
        assert isinstance(fault, Fault) and decoder.is_fault()
        logging.info(f"[Fault] {fault}")


if __name__ == "__main__":
    main()
