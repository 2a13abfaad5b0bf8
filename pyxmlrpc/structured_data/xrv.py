import base64
import binascii
import dataclasses
import datetime
import enum

from pyxmlrpc.exceptions import EncodeError, InvalidValueError
from pyxmlrpc.settings import CodecSettings
from pyxmlrpc.utils import helpers

class XRType(enum.Enum):
    NIL = 0
    BOOLEAN = 1
    INTEGER = 2
    DOUBLE = 3
    STRING = 4
    BASE64 = 5
    DATETIME = 6
    CDATA = 7 # Encode only, never produced by the decoder
    ARRAY = 8
    STRUCT = 9

class XRValue:
    """Base class for XML-RPC value model nodes."""
    def __init__(self, type: XRType):
        self.xr_type: XRType = type

    def as_boolean(self) -> bool:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to Boolean")

    def as_integer(self) -> int:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to Integer")

    def as_double(self) -> float:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to Double")

    def as_string(self) -> str:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to String")

    def as_binary(self) -> bytes:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to Binary")

    def as_date(self) -> datetime.datetime:
        raise TypeError(f"Cannot convert XRType {self.xr_type} to Date")

    def as_python_object(self):
        """Converts the value to a native Python object."""
        raise TypeError(f"Cannot convert XRType {self.xr_type} to a Python object directly.")

    def __str__(self) -> str:
        return f"XRValue(Type: {self.xr_type})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} type={self.xr_type}>"

class XRNil(XRValue):
    def __init__(self):
        super().__init__(XRType.NIL)

    def as_python_object(self) -> None: return None
    def __repr__(self) -> str: return "XRNil()"
    def __eq__(self, other): return isinstance(other, XRNil)

class XRBoolean(XRValue):
    def __init__(self, value: bool):
        super().__init__(XRType.BOOLEAN)
        self.value: bool = bool(value)

    def as_boolean(self) -> bool: return self.value
    def as_integer(self) -> int: return int(self.value)
    def as_string(self) -> str: return "1" if self.value else "0" # Wire form
    def as_python_object(self) -> bool: return self.value
    def __repr__(self) -> str: return f"XRBoolean({self.value})"
    def __eq__(self, other): return isinstance(other, XRBoolean) and self.value == other.value

class XRInteger(XRValue):
    def __init__(self, value: int):
        super().__init__(XRType.INTEGER)
        value = int(value)
        if not CodecSettings.MININT <= value <= CodecSettings.MAXINT:
            raise InvalidValueError(f"Integer {value} exceeds XML-RPC <int> limits")
        self.value: int = value

    def as_integer(self) -> int: return self.value
    def as_double(self) -> float: return float(self.value)
    def as_string(self) -> str: return str(self.value)
    def as_python_object(self) -> int: return self.value
    def __repr__(self) -> str: return f"XRInteger({self.value})"
    def __eq__(self, other): return isinstance(other, XRInteger) and self.value == other.value

class XRDouble(XRValue):
    def __init__(self, value: float):
        super().__init__(XRType.DOUBLE)
        self.value: float = float(value)

    def as_integer(self) -> int: return int(self.value)
    def as_double(self) -> float: return self.value
    def as_string(self) -> str: return repr(self.value) # Shortest round-trip form
    def as_python_object(self) -> float: return self.value
    def __repr__(self) -> str: return f"XRDouble({self.value})"
    def __eq__(self, other): return isinstance(other, XRDouble) and self.value == other.value

class XRString(XRValue):
    def __init__(self, value: str):
        super().__init__(XRType.STRING)
        self.value: str = str(value)

    def as_string(self) -> str: return self.value
    def as_python_object(self) -> str: return self.value
    def __str__(self) -> str: return self.value
    def __repr__(self) -> str: return f"XRString({self.value!r})"
    def __eq__(self, other): return isinstance(other, XRString) and self.value == other.value

class XRBase64(XRValue):
    """Raw bytes carried as base64 text on the wire."""
    def __init__(self, value: bytes | bytearray):
        super().__init__(XRType.BASE64)
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidValueError("XRBase64 value must be bytes.")
        if not value:
            raise InvalidValueError("XRBase64 value cannot be empty.")
        self.value: bytes = bytes(value)

    @classmethod
    def from_wire(cls, text: str) -> "XRBase64":
        """
        Builds a value from base64 text read off the wire. Unlike the
        constructor, an empty payload is accepted here since peers send one.

        Raises:
            ValueError: if ``text`` is not valid base64.
        """
        try:
            raw = base64.b64decode("".join(text.split()), validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 content: {e}") from e
        instance = cls.__new__(cls)
        XRValue.__init__(instance, XRType.BASE64)
        instance.value = raw
        return instance

    def as_binary(self) -> bytes: return self.value
    def as_string(self) -> str: return base64.b64encode(self.value).decode('ascii')
    def as_python_object(self) -> bytes: return self.value
    def __repr__(self) -> str: return f"XRBase64(len={len(self.value)})"
    def __eq__(self, other): return isinstance(other, XRBase64) and self.value == other.value

class XRDateTime(XRValue):
    """A point in time held as integer seconds since the Unix epoch (UTC)."""
    def __init__(self, value: int | datetime.datetime | datetime.date):
        super().__init__(XRType.DATETIME)
        if isinstance(value, bool) or value is None:
            raise InvalidValueError("XRDateTime value must be a timestamp or date.")
        if isinstance(value, datetime.datetime):
            value = helpers.datetime_to_unix_time(value)
        elif isinstance(value, datetime.date):
            value = helpers.date_to_unix_time(value)
        elif not isinstance(value, int):
            raise InvalidValueError(f"Invalid type for XRDateTime value: {type(value)}")
        if not helpers.MIN_UNIX_TIME <= value <= helpers.MAX_UNIX_TIME:
            raise InvalidValueError(f"Timestamp {value} is outside years 1-9999")
        self.value: int = value

    def as_integer(self) -> int: return self.value
    def as_date(self) -> datetime.datetime: return helpers.unix_time_to_datetime(self.value)
    def as_string(self) -> str: return helpers.format_iso8601(self.value)
    def as_python_object(self) -> int: return self.value
    def __repr__(self) -> str: return f"XRDateTime('{self.as_string()}')"
    def __eq__(self, other): return isinstance(other, XRDateTime) and self.value == other.value

class XRCData(XRValue):
    """String content written as a CDATA section instead of being entity-escaped."""
    def __init__(self, value: str):
        super().__init__(XRType.CDATA)
        if not isinstance(value, str):
            raise InvalidValueError("XRCData value must be a string.")
        if not value:
            raise InvalidValueError("XRCData value cannot be empty.")
        self.value: str = value

    def as_string(self) -> str: return self.value
    def as_python_object(self) -> str: return self.value
    def __str__(self) -> str: return self.value
    def __repr__(self) -> str: return f"XRCData({self.value!r})"
    def __eq__(self, other): return isinstance(other, XRCData) and self.value == other.value

class XRStruct(XRValue, dict):
    """Member names are strings; every way of storing a member converts its value."""
    def __init__(self, initial_dict: dict | None = None):
        XRValue.__init__(self, XRType.STRUCT)
        dict.__init__(self)
        if initial_dict:
            self.update(initial_dict)

    def __setitem__(self, key: str, value) -> None:
        if not isinstance(key, str):
            raise InvalidValueError("XRStruct member names must be strings.")
        # Attempt to convert basic python types to XR types
        dict.__setitem__(self, key, python_to_xrv(value))

    def update(self, *args, **kwargs) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default=None) -> XRValue:
        if key not in self:
            self[key] = default
        return self[key]

    def __ior__(self, other):
        self.update(other)
        return self

    def as_python_object(self) -> dict:
        """Converts the XRStruct to a native Python dictionary."""
        return {key: value.as_python_object() for key, value in self.items()}

    def __str__(self) -> str:
        return repr(self.as_python_object())
    def __repr__(self) -> str: return f"XRStruct({len(self)} members)"

class XRArray(XRValue, list):
    def __init__(self, initial_list=None):
        XRValue.__init__(self, XRType.ARRAY)
        list.__init__(self)
        if initial_list:
            self.extend(initial_list)

    def append(self, item) -> None:
        list.append(self, python_to_xrv(item))

    def extend(self, items) -> None:
        list.extend(self, [python_to_xrv(item) for item in items])

    def insert(self, index: int, item) -> None:
        list.insert(self, index, python_to_xrv(item))

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = [python_to_xrv(item) for item in value]
        else:
            value = python_to_xrv(value)
        list.__setitem__(self, index, value)

    def __iadd__(self, items):
        self.extend(items)
        return self

    def as_python_object(self) -> list:
        """Converts the XRArray to a native Python list."""
        return [item.as_python_object() for item in self]

    def __str__(self) -> str:
        return repr(self.as_python_object())
    def __repr__(self) -> str: return f"XRArray({len(self)} items)"


@dataclasses.dataclass
class Fault:
    """An XML-RPC fault: the error half of a method response."""
    code: int
    message: str

    def as_struct(self) -> XRStruct:
        return XRStruct({"faultCode": XRInteger(self.code), "faultString": XRString(self.message)})

    @classmethod
    def from_struct(cls, value: XRValue) -> "Fault":
        """
        Raises:
            ValueError: if ``value`` is not a struct with an integer ``faultCode``
                and a string ``faultString``.
        """
        if not isinstance(value, XRStruct):
            raise ValueError("Fault value must be a struct")
        code = value.get("faultCode")
        message = value.get("faultString")
        if not isinstance(code, XRInteger) or not isinstance(message, XRString):
            raise ValueError("Fault struct needs an int faultCode and a string faultString")
        return cls(code.value, message.value)

    def __str__(self) -> str:
        return f"<Fault {self.code}: {self.message}>"


def _has_array_keys(data: dict) -> bool:
    """True if the keys are exactly the integers 0..n-1, in that order."""
    for expected, key in enumerate(data):
        if isinstance(key, bool) or key != expected or not isinstance(key, int):
            return False
    return True

# Helper function to convert Python types to XR types (used by XRStruct/XRArray constructors)
def python_to_xrv(data) -> XRValue:
    """
    Converts a Python native value to its XRValue equivalent.

    A ``dict`` whose keys are exactly ``0..n-1`` in order becomes an array;
    any other ``dict`` becomes a struct with its keys turned into names.

    Raises:
        EncodeError: for types outside the value model.
    """
    if isinstance(data, XRValue): return data
    if data is None: return XRNil()
    if isinstance(data, bool): return XRBoolean(data)
    if isinstance(data, int): return XRInteger(data)
    if isinstance(data, float): return XRDouble(data)
    if isinstance(data, str): return XRString(data)
    if isinstance(data, (bytes, bytearray)): return XRBase64(data)
    if isinstance(data, (datetime.datetime, datetime.date)): return XRDateTime(data)
    if isinstance(data, (list, tuple)): return XRArray(data)
    if isinstance(data, dict):
        if _has_array_keys(data):
            return XRArray(data.values())
        struct = XRStruct()
        for key, value in data.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise EncodeError(f"unsupported type for struct member name: {type(key).__name__}")
            name = str(key)
            if name in struct:
                raise InvalidValueError(f"Duplicate struct member name '{name}'")
            struct[name] = value
        return struct
    raise EncodeError(f"unsupported type: {type(data).__name__}")
