"""
Value types accepted by declarations.

A declaration's type is one of exactly four primitives, scanned in this order
when the type has to be inferred from a default or from choices:

    INTEGER → FLOAT → TEXT → SYMBOL

Each primitive owns one strict cast (token text → value), one instance check
used for inference and validation, and one label used in help rows.

Symbols are interned strings: Symbol("fast") is Symbol("fast").
"""
import enum
import re

from .faults import InvalidKindError


class Symbol(str):
    """
    Interned, atom-like string.

    Equal texts share one instance, so symbols can be compared by identity.
    Symbols still compare equal to plain strings with the same text.
    """
    __slots__ = ()

    def __new__(cls, text=""):
        if isinstance(text, Symbol):
            return text
        text = str(text)
        try:
            return _symbols[text]
        except KeyError:
            return _symbols.setdefault(text, super().__new__(cls, text))

    def __repr__(self):
        return f"Symbol({str.__repr__(self)})"

    def __reduce__(self):
        return type(self), (str(self),)


_symbols = {}


_INTEGER = re.compile(r"\s*[+-]?\d+(_\d+)*\s*", re.ASCII)
_FLOAT = re.compile(
    r"\s*[+-]?(\d+(_\d+)*(\.(\d+(_\d+)*)?)?|\.\d+(_\d+)*)([eE][+-]?\d+(_\d+)*)?\s*",
    re.ASCII
)


def _integer(token):
    # int() alone accepts non-ASCII digits; keep it to plain decimal text
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"invalid literal for integer: {token!r}")
    return int(token)


def _float(token):
    # float() alone also reads "nan", "inf" and non-ASCII digits
    if not _FLOAT.fullmatch(token):
        raise ValueError(f"invalid literal for float: {token!r}")
    return float(token)


class Primitive(enum.Enum):
    """Closed set of value types: one cast, one check and one label each."""

    INTEGER = "Integer"
    FLOAT = "Float"
    TEXT = "Text"
    SYMBOL = "Symbol"

    @property
    def label(self):
        return self.value

    def matches(self, value, /):
        match self:
            case Primitive.INTEGER:
                return isinstance(value, int) and not isinstance(value, bool)
            case Primitive.FLOAT:
                return isinstance(value, float)
            case Primitive.TEXT:
                return isinstance(value, str) and not isinstance(value, Symbol)
            case Primitive.SYMBOL:
                return isinstance(value, Symbol)

    def cast(self, token, /):
        """
        Convert raw token text into a value of this primitive.

        Raises ValueError on malformed numeric text; TEXT and SYMBOL never fail.
        """
        if not isinstance(token, str):
            raise TypeError("cast() argument must be a string")
        match self:
            case Primitive.INTEGER:
                return _integer(token)
            case Primitive.FLOAT:
                return _float(token)
            case Primitive.TEXT:
                return token
            case Primitive.SYMBOL:
                return Symbol(token)

    @classmethod
    def resolve(cls, designator, /):
        """
        Map a type designator (member, int, float, str or Symbol) to a member.
        """
        if isinstance(designator, cls):
            return designator
        try:
            return {int: cls.INTEGER, float: cls.FLOAT, str: cls.TEXT, Symbol: cls.SYMBOL}[designator]
        except (KeyError, TypeError):
            raise InvalidKindError(
                f"type must be one of int, float, str or Symbol ({designator!r} is given)"
            ) from None

    @classmethod
    def infer(cls, *values):
        """
        Return the first primitive matching every non-None value, or None.
        """
        values = [value for value in values if value is not None]
        if not values:
            return None
        for primitive in cls:
            if all(map(primitive.matches, values)):
                return primitive
        return None


__all__ = (
    "Primitive",
    "Symbol",
)
