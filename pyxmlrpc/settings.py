"""
Codec configuration and protocol constants.
"""
import dataclasses


@dataclasses.dataclass(frozen=True)
class CodecSettings:
    """
    Per-codec configuration. Instances are immutable; the encoder swaps in a
    new one when a setting changes, so a document is always produced with a
    consistent snapshot.
    """

    # --- Class Variables (Constants) ---
    DEFAULT_ENCODING = "utf-8"
    """Character encoding written into the XML declaration when none is set."""

    EX_NIL_NAMESPACE = "http://ws.apache.org/xmlrpc/namespaces/extensions"
    """Namespace bound to the ``ex`` prefix by Apache XML-RPC peers."""

    MULTICALL_METHOD = "system.multicall"
    """Method name used to boxcar several calls into one request."""

    MAXINT = 2**31 - 1
    MININT = -2**31
    """Bounds of the XML-RPC ``<int>`` type."""

    # --- Instance Fields ---
    encoding: str = DEFAULT_ENCODING
    """Character encoding announced in the XML declaration, lower-case."""

    use_ex_nil: bool = False
    """Emit ``<ex:nil/>`` instead of ``<nil/>`` (Apache XML-RPC compatibility)."""

    def __post_init__(self):
        encoding = (self.encoding or "").strip().lower()
        object.__setattr__(self, "encoding", encoding or self.DEFAULT_ENCODING)
        object.__setattr__(self, "use_ex_nil", bool(self.use_ex_nil))

    def with_encoding(self, encoding: str | None) -> "CodecSettings":
        """Returns a copy using ``encoding``; an empty value keeps the current one."""
        if not encoding:
            return self
        return dataclasses.replace(self, encoding=encoding)

    def with_ex_nil(self, mode: bool = True) -> "CodecSettings":
        return dataclasses.replace(self, use_ex_nil=mode)
