"""
Argosy faults (configuration errors, parse faults, help signal) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue. Codes are
  grouped by domain so logs and searches stay predictable.
- ConfigurationError: raised while declaring or registering arguments. These are
  programmer errors; they are raised immediately and never rendered.
- ParseFault: base type for everything that can go wrong while parsing tokens.
  Faults carry a message plus keyword options and know how to render themselves
  through rich, how to copy themselves with merged options (copy.replace), and
  how to surface themselves (raise, or print and exit in shell mode).
- HelpRequested: early, successful termination when the help flag is seen.
- trigger(): central entry point to surface a fault with runtime options.

Rendering options understood by faults
- shell: print and exit instead of raising.
- colorful / fancy: palette and panel chrome.
- prog: program name shown in the header.
- usage: usage line appended below the message in shell mode.
- title, code, hint: header and footer copy.
- sheet: rich renderable shown instead of the plain help text (help signal only).

Integration
- A __styles__ mapping in __main__ overrides palette entries.
- A __codes__ mapping in __main__ remaps codes to custom labels.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)
stdout = Console()


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (101xx): bad declarations or conflicting registrations.
    - classification (111xx): tokens that match no declaration, repeated options.
    - extraction (113xx): a matched declaration could not produce its value.
    - completeness (114xx): declarations that never received a token.
    """
    # --- configuration errors (101xx) ---
    UNKNOWN_SETTING         = 10101
    INVALID_KIND            = 10102
    INVALID_DEFAULT         = 10103
    INVALID_CHOICES         = 10104
    INVALID_PROC            = 10105
    INVALID_NAME            = 10106
    RESERVED_NAME           = 10111
    DUPLICATE_NAME          = 10112
    DUPLICATE_SWITCH        = 10113

    # --- classification errors (111xx) ---
    UNKNOWN_OPTION          = 11111
    DUPLICATE_OPTION        = 11112
    UNEXPECTED_POSITIONAL   = 11121

    # --- extraction errors (113xx) ---
    MISSING_VALUE           = 11131
    UNCASTABLE_VALUE        = 11132
    INVALID_CHOICE          = 11133
    REJECTED_VALUE          = 11134

    # --- completeness errors (114xx) ---
    MISSING_POSITIONALS     = 11141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


# --- configuration errors ---

class ConfigurationError(ValueError):
    """Base class for errors raised while declaring or registering arguments."""
    code = Unset


class UnknownSettingError(ConfigurationError):
    code = FaultCode.UNKNOWN_SETTING


class InvalidKindError(ConfigurationError, TypeError):
    code = FaultCode.INVALID_KIND


class InvalidDefaultError(ConfigurationError, TypeError):
    code = FaultCode.INVALID_DEFAULT


class InvalidChoicesError(ConfigurationError):
    code = FaultCode.INVALID_CHOICES


class InvalidProcError(ConfigurationError, TypeError):
    code = FaultCode.INVALID_PROC


class InvalidNameError(ConfigurationError):
    code = FaultCode.INVALID_NAME


class ReservedNameError(ConfigurationError):
    code = FaultCode.RESERVED_NAME


class DuplicateNameError(ConfigurationError):
    code = FaultCode.DUPLICATE_NAME


class DuplicateSwitchError(ConfigurationError):
    code = FaultCode.DUPLICATE_SWITCH


# --- parse faults ---

def _palette(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _prog(options):
    return coalesce(options.get("prog", Unset), getattr(__import__("__main__"), "__prog__", "argosy"))


class ParseFault(Exception):
    """
    Base class for faults raised while parsing tokens.

    Subclasses set the class attributes `code` and `title`; both can be
    overridden per instance through the options.
    """
    code = Unset
    title = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code, "title": type(self).title} | options)

    def __str__(self):
        return str(coalesce(self.message, self.options["title"]))

    def __rich__(self):
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "usage": "bold #36C5F0",
        })
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            text(_prog(self.options), "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        parts = [text(str(self), "error-message")]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        if usage := self.options.get("usage"):
            parts.append(Text(""))
            parts.append(text(usage, "usage"))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")
        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class UnknownOptionError(ParseFault):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class UnexpectedPositionalError(ParseFault):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional"


class DuplicateOptionError(ParseFault):
    code = FaultCode.DUPLICATE_OPTION
    title = "option given twice"


class ExtractionError(ParseFault):
    """A matched declaration could not produce its value."""
    title = "bad value"


class MissingValueError(ExtractionError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class UncastableValueError(ExtractionError):
    code = FaultCode.UNCASTABLE_VALUE
    title = "uncastable value"


class InvalidChoiceError(ExtractionError):
    code = FaultCode.INVALID_CHOICE
    title = "invalid choice"


class RejectedValueError(ExtractionError):
    code = FaultCode.REJECTED_VALUE
    title = "rejected value"


class MissingPositionalsError(ParseFault):
    code = FaultCode.MISSING_POSITIONALS
    title = "missing positionals"


class HelpRequested(BaseException):
    """
    Raised when the built-in help flag is parsed.

    Not a failure: it derives from BaseException so that `except Exception`
    blocks around a parse do not swallow it. In shell mode the help text is
    printed on stdout and the process exits with status 0.
    """

    def __init__(self, usage, help, /, **options):
        super().__init__(usage)
        self.usage = usage
        self.help = help
        self.options = MappingProxyType(options)

    def __str__(self):
        return "\n".join(part for part in (self.usage, self.help) if part)

    def __rich__(self):
        styles = _palette({
            "usage": "bold #36C5F0",
            "help": "",
            "panel-title": "bold #FF4D94",
        })
        colorful = self.options.get("colorful", True)
        body = Group(
            Text(self.usage, styles["usage"] if colorful else ""),
            Text(""),
            # the parser hands over its help table; plain text otherwise
            self.options.get("sheet") or Text(self.help, styles["help"] if colorful else ""),
        )
        if self.options.get("fancy", False):
            title = Text(_prog(self.options), styles["panel-title"] if colorful else "")
            return Panel(body, title=title, title_align="left")
        return body

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        stdout.print(self)
        sys.exit(0)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.usage, self.help, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseFault).
    - options are merged into a copy of the fault via copy.replace before triggering.
    - in shell mode the fault is rendered via rich and the process exits;
      otherwise the fault is raised.
    """
    if (
        not callable(getattr(fault, "__trigger__", None)) or
        not callable(getattr(fault, "__replace__", None))
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "UnknownSettingError",
    "InvalidKindError",
    "InvalidDefaultError",
    "InvalidChoicesError",
    "InvalidProcError",
    "InvalidNameError",
    "ReservedNameError",
    "DuplicateNameError",
    "DuplicateSwitchError",
    "ParseFault",
    "UnknownOptionError",
    "UnexpectedPositionalError",
    "DuplicateOptionError",
    "ExtractionError",
    "MissingValueError",
    "UncastableValueError",
    "InvalidChoiceError",
    "RejectedValueError",
    "MissingPositionalsError",
    "HelpRequested",
    "trigger",
)
