"""
Argosy utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr).
    Containers are handed out as fresh copies so callers cannot mutate state.

- ordinal(number)
  • Human-friendly position labels for diagnostics ("first", "12th", ...).

- pluralize(text, count)
  • Tiny pluralizer for the nouns used in fault messages.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3), ordinal(22)
    ('third', '22nd')
"""
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used wherever None is a legitimate user value (defaults, program names)
    and the API still needs to tell “not provided” apart from “provided as None”.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values such as None, 0, "" or [] are returned as-is.
    """
    return object if object is not Unset else default


def _materialize(object):
    """
    Copy container values recursively; scalars are returned unchanged.

    Tuples stay tuples (declarations keep choices as tuples), other
    sequences become lists, mappings become dicts and sets become sets.
    """
    if isinstance(object, tuple):
        return tuple(map(_materialize, object))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_materialize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_materialize, object.values())))
    elif isinstance(object, Set):
        return set(map(_materialize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Example
        class Point:
            x = mirror("x")
            def __init__(self):
                self._x = 1
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _materialize(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


@functools.lru_cache(maxsize=None, typed=True)
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes (11th, 21st, 102nd).
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")

    words = {
        1: "first",
        2: "second",
        3: "third",
        4: "fourth",
        5: "fifth",
        6: "sixth",
        7: "seventh",
        8: "eighth",
        9: "ninth",
        10: "tenth",
    }
    if number in words:
        return words[number]

    # 11th, 12th, 13th (and 111th, 112th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def pluralize(text, count, /):
    """
    Pluralize a single lowercase noun when count is not exactly one.

    Only the regular English suffix rules needed by fault messages are covered:
    s/sh/ch/x/z → +es, consonant+y → -ies, otherwise +s.
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() first argument must be a string")
    if count == 1 or not text:
        return text
    if text.endswith(("s", "sh", "ch", "x", "z")):
        return text + "es"
    if text.endswith("y") and len(text) > 1 and text[-2] not in "aeiou":
        return text[:-1] + "ies"
    return text + "s"


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Singleton, falsey and distinct from None; materialize with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "ordinal",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
