r"""
Argosy argument declarations.

Overview
- Declaration: one argument's identity, surface form, type, default and
  validation rules. Built through two factories:
  • Declaration.optional(name, help=None, short=True, **settings)
    matched by "--long-name" or "-s" tokens anywhere in the input.
  • Declaration.positional(name, help=None, **settings)
    matched by plain tokens.
  The module-level aliases `optional` and `positional` point to the factories.

Settings (all optional)
- default: value of the declared type. A boolean default turns an optional
  into a flag: its presence flips the default and consumes no token.
- type: int, float, str, Symbol or a Primitive member. Inferred from the
  default, else from the choices, when omitted; without either the value is
  kept as raw text.
- choices: non-empty list or tuple of permitted values (same type, no duplicates).
- proc: one-argument callable applied to the value after cast and choice check.
  Whatever it returns becomes the parsed value; whatever it raises is reported
  as a rejected value.
- required: informational boolean (positionals are always required).

Surface forms
- long: "--" + name with underscores replaced by hyphens.
- short: the dash plus the first letter of the name ("--dry-run" → "-d"),
  unless short=False (no short form) or an explicit "-x" override.

Lifecycle
- Declarations are immutable once built, except for `group`, which the parser
  assigns exactly once at registration.

Quick example:
    >>> from argosy import optional, positional
    >>> count = optional("count", "how many times", default=1)
    >>> count.long, count.short, count.type
    ('--count', '-c', <Primitive.INTEGER: 'Integer'>)
    >>> verbose = optional("verbose", default=False)
    >>> verbose.is_flag
    True
    >>> source = positional("source", type=str)
"""
import functools
import inspect
import operator
import re
from collections.abc import Sequence

from .faults import *
from .primitives import Primitive
from .utils import *


class DeclarationType(type):
    """
    Metaclass that exposes declaration fields as read-only properties.

    Responsibilities
    - Publish every name listed in __introspectable__ through mirror(), backed
      by the matching private attribute ("_name").
    - Derive __typename__ from the class name for messages.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"

        def __rich_repr__(self):
            # only the fields that were set, in declaration order
            for name in type(self).__introspectable__:
                if (value := getattr(self, name)) is not None:
                    yield name, value

        if "__repr__" not in namespace:
            self.__repr__ = __repr__
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__
        return self


def _sanitize_identity(cls, name, help, /):
    """
    Internal: validate the name and the help text.

    Names must start with a letter and contain only letters, digits and
    underscores, so derived long forms are conventional ("dry_run" → "--dry-run").
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string ({type(name).__name__} is given)")
    if not re.fullmatch(r"[^\W\d_]\w*", name):
        raise InvalidNameError(f"{cls.__typename__} name {name!r} must start with a letter and contain only word characters")
    if not isinstance(help, str | None):
        raise TypeError(f"{cls.__typename__} help must be a string")
    if isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} help cannot be empty")
    return help


def _sanitize_short(cls, long, short, /):
    """
    Internal: resolve the short form of an optional.

    - True  → derived from the long form ("--name" → "-n").
    - False or None → no short form.
    - str   → explicit override, a dash followed by one character.
    """
    if short is True:
        return long[1:3]
    if short is False or short is None:
        return None
    if not isinstance(short, str):
        raise TypeError(f"{cls.__typename__} short must be a boolean or a string")
    if not re.fullmatch(r"-[^\s-]", short):
        raise InvalidNameError(f"{cls.__typename__} short form {short!r} must be a dash followed by one character")
    return short


def _accepts_one(proc, /):
    """Check that proc can be called with exactly one positional argument."""
    try:
        inspect.signature(proc).bind(None)
    except TypeError:
        return False
    except ValueError:
        # no signature available (some builtins); trust the callable
        return True
    return True


def _sanitize_settings(cls, settings, positional, /):
    """
    Internal: validate and normalize default/type/choices/proc/required.

    Returns a dict with exactly those five keys. Type inference scans the
    primitives in order against the default, else against every non-None
    choice; with neither, the declaration stays untyped.
    """
    settings = dict(settings)
    default = settings.pop("default", None)
    type = settings.pop("type", None)
    choices = settings.pop("choices", None)
    proc = settings.pop("proc", None)
    required = settings.pop("required", False)

    if settings:
        raise UnknownSettingError(f"{cls.__typename__} got unknown settings {sorted(settings)}")

    if type is not None:
        type = Primitive.resolve(type)

    if choices is not None:
        if not isinstance(choices, Sequence) or isinstance(choices, str | bytes):
            raise InvalidChoicesError(f"{cls.__typename__} choices must be given as a list or a tuple")
        if not choices:
            raise InvalidChoicesError(f"{cls.__typename__} choices cannot be empty")
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise InvalidChoicesError(f"{cls.__typename__} choices cannot contain duplicates ({choice!r})")
            sanitized.append(choice)
        choices = tuple(sanitized)

    if proc is not None:
        if not callable(proc):
            raise InvalidProcError(f"{cls.__typename__} proc must be callable ({proc.__class__.__name__} is given)")
        if not _accepts_one(proc):
            raise InvalidProcError(f"{cls.__typename__} proc must accept exactly one argument")

    if not isinstance(required, bool):
        raise ConfigurationError(f"{cls.__typename__} required must be a boolean")

    if isinstance(default, bool):
        # flag: presence flips the default
        if positional:
            raise InvalidDefaultError(f"{cls.__typename__} positionals cannot be flags (boolean default given)")
        if type is not None:
            raise InvalidKindError(f"{cls.__typename__} flags cannot declare a type")
        if choices is not None:
            raise InvalidChoicesError(f"{cls.__typename__} flags cannot declare choices")
    else:
        if type is None and default is not None:
            if (type := Primitive.infer(default)) is None:
                raise InvalidDefaultError(
                    f"{cls.__typename__} default must be an int, float, str or Symbol ({default!r} is given)"
                )
        elif type is None and choices is not None:
            if all(choice is None for choice in choices):
                raise InvalidChoicesError(f"{cls.__typename__} choices must contain at least one value")
            if (type := Primitive.infer(*choices)) is None:
                raise InvalidChoicesError(
                    f"{cls.__typename__} choices must all be int, float, str or Symbol ({list(choices)!r} is given)"
                )
        if type is not None and default is not None and not type.matches(default):
            raise InvalidDefaultError(f"{cls.__typename__} default {default!r} is not {type.label}")
        if type is not None and choices is not None:
            for choice in choices:
                if choice is not None and not type.matches(choice):
                    raise InvalidChoicesError(f"{cls.__typename__} choice {choice!r} is not {type.label}")

    return dict(default=default, type=type, choices=choices, proc=proc, required=required)


class Declaration(metaclass=DeclarationType):
    """
    One argument specification: identity, surface form, type, default and rules.

    Build instances through Declaration.optional() or Declaration.positional();
    the initializer takes an explicit long form and a short form resolved
    the same way as the factory's `short` argument.

    Properties
    - The names listed in __introspectable__ are read-only attributes.
    - is_flag / is_positional / label are derived views.
    """

    __introspectable__ = (
        "name",
        "long",
        "short",
        "help",
        "default",
        "type",
        "choices",
        "proc",
        "required",
        "group",
    )

    def __init__(self, name, long=None, short=None, help=None, /, **settings):
        cls = type(self)
        self._help = _sanitize_identity(cls, name, help)
        self._name = name

        if long is None and short is not None:
            raise ConfigurationError(f"{cls.__typename__} {name!r} cannot have a short form without a long form")
        if long is not None and not re.fullmatch(r"--[^\W_](?:[^\W_]|-)*", long):
            raise InvalidNameError(f"{cls.__typename__} long form {long!r} is not a valid option name")
        self._long = long
        self._short = None if long is None else _sanitize_short(cls, long, short)

        settings = _sanitize_settings(cls, settings, long is None)
        self._default = settings["default"]
        self._type = settings["type"]
        self._choices = settings["choices"]
        self._proc = settings["proc"]
        self._required = settings["required"]
        self._group = None

    @classmethod
    def optional(cls, name, /, help=None, short=True, **settings):
        """
        Build an optional declaration matched by "--long" or "-s" tokens.
        """
        _sanitize_identity(cls, name, help)
        long = "--" + name.replace("_", "-")
        return cls(name, long, short, help, **settings)

    @classmethod
    def positional(cls, name, /, help=None, **settings):
        """
        Build a positional declaration matched by plain tokens.
        """
        return cls(name, None, None, help, **settings)

    @property
    def is_flag(self):
        return isinstance(self._default, bool)

    @property
    def is_positional(self):
        return self._long is None

    @property
    def label(self):
        """Identity used in messages: the long form, or the upper-cased name."""
        return self._long or self._name.upper()

    def assign(self, group, /):
        """
        Assign the result group. Called once by the parser at registration.
        """
        if not isinstance(group, str):
            raise TypeError(f"{type(self).__typename__} group must be a string")
        if not (group := group.strip()):
            raise ValueError(f"{type(self).__typename__} group cannot be empty")
        if self._group is not None:
            raise ConfigurationError(
                f"{type(self).__typename__} {self._name!r} is already registered in group {self._group!r}"
            )
        self._group = group

    def cast(self, token, /):
        """Convert token text to the declared type; untyped values stay text."""
        if self._type is None:
            return token
        return self._type.cast(token)

    def parse(self, tokens, /):
        """
        Extract this declaration's value from the token stream.

        - Flags return the negated default and consume nothing.
        - Otherwise exactly one token is taken, cast, checked against choices
          and passed through proc.

        Raises MissingValueError, UncastableValueError, InvalidChoiceError or
        RejectedValueError (all ExtractionError).
        """
        if self.is_flag:
            return not self._default

        try:
            token = tokens.take()
        except IndexError:
            raise MissingValueError(
                "no value follows",
                hint="pass a value after %s (for example: %s <%s>)" % (self.label, self.label, self._name)
            ) from None

        try:
            value = self.cast(token)
        except ValueError:
            raise UncastableValueError(
                "cannot read %r as %s" % (token, self._type.label),
                input=token,
                hint="pass %s %s" % ("an" if self._type.label[0] in "AEIOU" else "a", self._type.label.lower())
            ) from None

        if self._choices is not None and value not in self._choices:
            raise InvalidChoiceError(
                "value %r is not in %r" % (value, list(self._choices)),
                input=token,
                hint="pick one of: %s" % ", ".join(map(str, self._choices))
            )

        if self._proc is not None:
            try:
                value = self._proc(value)
            except Exception as exception:
                raise RejectedValueError(
                    "value %r was rejected: %s" % (value, exception),
                    input=token,
                    exception=exception,
                    hint="check the value passed to %s" % self.label
                ) from exception

        return value

    def usage_row(self):
        """
        Return the 5 help columns: long, short, metavar, tag and help text.

        Flags have no metavar; untyped non-flags have no tag.
        """
        if self._type is not None:
            tag = "[%s]" % self._type.label
        elif self.is_flag:
            tag = "[Flag]"
        else:
            tag = ""
        parts = [self._help]
        if self._default is not None and self._default is not False:
            parts.append("default=%r" % (self._default,))
        if self._choices is not None:
            parts.append("choice:%r" % (list(self._choices),))
        return (
            self._long or "",
            self._short or "",
            "" if self.is_flag else self._name.upper(),
            tag,
            ", ".join(part for part in parts if part),
        )


optional = Declaration.optional
positional = Declaration.positional


__all__ = (
    "Declaration",
    "optional",
    "positional",
)
