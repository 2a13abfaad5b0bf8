"""
Minimal streaming XML writer.

Markup is collected as string chunks and joined once at the end. Element
text goes through ``xml.sax.saxutils`` escaping; callers that already hold
escaped markup use ``write_raw``. Text that XML cannot carry raises
``EncodeError``.
"""
from xml.sax.saxutils import escape, quoteattr

from .entities import check_xml_text


class XmlWriter:
    """Writes XML events into an in-memory buffer."""

    def __init__(self):
        self._chunks: list[str] = []
        self._open: list[str] = []

    def start_document(self, encoding: str, version: str = "1.0") -> None:
        self._chunks.append(f'<?xml version="{version}" encoding="{encoding}"?>\n')

    def start_element(self, name: str, attributes: dict[str, str] | None = None) -> None:
        attrs = "".join(f" {key}={quoteattr(value)}" for key, value in (attributes or {}).items())
        self._chunks.append(f"<{name}{attrs}>")
        self._open.append(name)

    def end_element(self) -> None:
        if not self._open:
            raise RuntimeError("end_element() called with no open element")
        self._chunks.append(f"</{self._open.pop()}>")

    def write_element(self, name: str, text: str = "") -> None:
        self.start_element(name)
        self.write_text(text)
        self.end_element()

    def write_empty_element(self, name: str) -> None:
        self._chunks.append(f"<{name}/>")

    def write_text(self, text: str) -> None:
        self._chunks.append(escape(check_xml_text(text), {"\r": "&#13;"}))

    def write_raw(self, markup: str) -> None:
        self._chunks.append(markup)

    def write_cdata(self, text: str) -> None:
        # "]]>" cannot appear inside a section; split it across two.
        # A carriage return leaves the section as a reference so it is not folded.
        body = check_xml_text(text).replace("]]>", "]]]]><![CDATA[>").replace("\r", "]]>&#13;<![CDATA[")
        self._chunks.append("<![CDATA[" + body + "]]>")

    def end_document(self) -> None:
        while self._open:
            self.end_element()

    def getvalue(self) -> str:
        return "".join(self._chunks)
