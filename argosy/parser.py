"""
Argosy parser: register declarations, then turn raw tokens into grouped values.

What this module provides
- Parser: owns the declarations of one command line, indexes them by long and
  short form, and runs the token-consumption loop.

Parsing in a nutshell
- "--name" tokens are looked up among the long forms.
- Otherwise the first two characters ("-n") are looked up among the short forms:
  • "-n" alone is consumed whole;
  • "-nvf" with a flag "-n" leaves "-vf" in front of the stream (bundled flags);
  • "-nvalue" with a valued "-n" leaves "value" in front as its value.
- Plain tokens feed positionals, last-declared first: with positionals declared
  as SOURCE then DEST, the first plain token goes to DEST.
- Unknown tokens raise (or are set aside in `leftovers` with ignore_unknown).
- "--help" / "-h" stops everything and requests help.

Result
- {group: {name: value}}, where unmatched declarations fall back to their default.

Quick start
    from argosy import Parser, optional, positional

    parser = Parser(shell=True)
    parser.register(
        optional("count", "how many times", default=1),
        optional("verbose", "talk more", default=False),
        positional("source", "file to read"),
    )
    parser.register(optional("mode", choices=["fast", "safe"]), group="tuning")
    values = parser.parse()          # reads sys.argv[1:]
    values["default"]["count"]

Shell mode
- With shell=True faults are printed through rich (with the usage line) and the
  process exits with status 1; help is printed on stdout and exits with status 0.
- Without it, faults are raised and help raises HelpRequested.
"""
import io
import itertools
import logging
import os.path
import shlex
import sys
from collections import defaultdict

from rich.cells import cell_len
from rich.console import Console, Group
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from .declarations import Declaration
from .faults import *
from .tokens import TokenStream
from .utils import *

logger = logging.getLogger(__name__)

HELP = "help"


class Parser:
    """
    Parse-time registry of declarations (one per command line, parse once).

    Properties (read-only copies)
    - longs: {long form: declaration}, including the built-in help flag.
    - shorts: {short form: declaration}.
    - positionals: declarations matched by plain tokens, in declaration order.
    - leftovers: tokens skipped by the last parse in ignore_unknown mode.
    """

    longs = mirror("longs")
    shorts = mirror("shorts")
    positionals = mirror("positionals")
    leftovers = mirror("leftovers")
    ignore_unknown = mirror("ignore_unknown")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, ignore_unknown=False, /, *, prog=Unset, shell=False, colorful=True, fancy=False):
        for key, value in (("ignore_unknown", ignore_unknown), ("shell", shell), ("colorful", colorful), ("fancy", fancy)):
            if not isinstance(value, bool):
                raise TypeError(f"parser {key!r} must be a boolean")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")

        helper = Declaration.optional(HELP, "to show help", default=False)

        self._helper = helper
        self._names = set()
        self._longs = {helper.long: helper}
        self._shorts = {helper.short: helper}
        self._positionals = []
        self._leftovers = ()

        self._ignore_unknown = ignore_unknown
        self._prog = prog
        self._shell = shell
        self._colorful = colorful
        self._fancy = fancy

    @property
    def prog(self):
        """
        Program name shown in usage and faults.

        Resolution order: the prog option, __prog__ in __main__, then the
        basename of sys.argv[0].
        """
        main = __import__("__main__")
        fallback = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argosy"
        return coalesce(self._prog, getattr(main, "__prog__", fallback))

    def register(self, *declarations, group="default"):
        """
        Register declarations under a result group.

        Checks, per declaration and before it is indexed:
        - it is a Declaration (TypeError otherwise);
        - its name is not the reserved "help" (ReservedNameError);
        - its name is not taken (DuplicateNameError);
        - its long and short forms are free (DuplicateSwitchError).

        Returns the parser so registrations can be chained.
        """
        for index, declaration in enumerate(declarations):
            if not isinstance(declaration, Declaration):
                raise TypeError(
                    f"register() argument {index} must be a declaration ({type(declaration).__name__} is given)"
                )
            name = declaration.name

            if name == HELP:
                raise ReservedNameError(f"declaration name {HELP!r} is reserved")
            if name in self._names:
                raise DuplicateNameError(f"declaration name {name!r} is already taken")

            if not declaration.is_positional:
                if (long := declaration.long) in self._longs:
                    raise DuplicateSwitchError(
                        f"long option {long!r} is already taken by {self._longs[long].name!r}"
                    )
                if (short := declaration.short) is not None and short in self._shorts:
                    raise DuplicateSwitchError(
                        f"short option {short!r} is already taken by {self._shorts[short].name!r}"
                    )

            declaration.assign(group)
            self._names.add(name)

            if declaration.is_positional:
                self._positionals.append(declaration)
            else:
                self._longs[declaration.long] = declaration
                if declaration.short is not None:
                    self._shorts[declaration.short] = declaration

            logger.debug("registered %s %r in group %r", declaration.label, name, declaration.group)

        return self

    add = register

    def usage(self):
        """One-line synopsis: program name followed by the positionals in declaration order."""
        return " ".join(["usage:", self.prog, *(declaration.name.upper() for declaration in self._positionals)])

    def _sections(self):
        sections = []
        if self._positionals:
            sections.append(("positionals", list(self._positionals)))
        sections.append(("optionals", list(self._longs.values())))
        return sections

    def sheet(self, colorful=True):
        """
        Help block as a rich renderable: a positionals section (when any) and
        an optionals section, each a borderless table of usage rows.

        Every column is as wide as its widest cell across both sections, and
        columns are separated by four spaces.

        Palette keys (overridable through __styles__ in __main__)
        - group-label, option-name, flag-name, metavar, type-tag, argument-description
        """
        styles = defaultdict(str, {
            "group-label": "bold #FFFFFF",  # Pure white headers
            "option-name": "bold #00E6FF",  # CYAN for options
            "flag-name": "bold #22C55E",  # GREEN for flags
            "metavar": "bold #FFD600",  # AMBER for parameters
            "type-tag": "#A3A3A3",  # Neutral gray
            "argument-description": "#9CA3AF",  # Muted gray
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            return Text(fragment, styles[style] if colorful else "", no_wrap=True)

        sections = self._sections()
        rows = {declaration: declaration.usage_row() for _, section in sections for declaration in section}
        widths = [max(map(cell_len, column)) for column in zip(*rows.values())]

        renders = []
        for title, section in sections:
            table = Table(box=None, show_header=False, padding=(0, 4, 0, 0), pad_edge=False)
            for width in widths:
                table.add_column(min_width=width, no_wrap=True)
            for declaration in section:
                long, short, metavar, tag, help = rows[declaration]
                name = "flag-name" if declaration.is_flag else "option-name"
                table.add_row(
                    text(long, name),
                    text(short, name),
                    text(metavar, "metavar"),
                    text(tag, "type-tag"),
                    text(help, "argument-description"),
                )
            renders.append(Text.assemble(" ", text(title, "group-label"), ":", no_wrap=True))
            renders.append(Padding(table, (0, 0, 0, 4), expand=False))
        return Group(*renders)

    def help(self):
        """
        Plain-text rendition of sheet(), one line per row, trailing spaces stripped.
        """
        width = 4 + sum(
            max(map(cell_len, column)) + 4
            for column in zip(*(declaration.usage_row() for _, section in self._sections() for declaration in section))
        )
        capture = Console(file=io.StringIO(), color_system=None, width=max(width, 80), highlight=False)
        capture.print(self.sheet(colorful=False))
        return "\n".join(line.rstrip() for line in capture.file.getvalue().splitlines())

    def trigger(self, fault, /, **options):
        """
        Surface a fault (or the help signal) with this parser's presentation options.

        Never returns: the fault is raised, or rendered before the process exits.
        """
        context = dict(prog=self.prog, shell=self._shell, colorful=self._colorful, fancy=self._fancy)
        if isinstance(fault, ParseFault):
            context["usage"] = self.usage()
        trigger(fault, **context | options)

    def _classify(self, token, stream):
        """
        Find the declaration for a dash-prefixed token, or None when unknown.

        Bundled short flags and attached short values are spliced back in front
        of the stream so the next iteration (or the value extraction) sees them.
        """
        if (declaration := self._longs.get(token)) is not None:
            return declaration

        if (declaration := self._shorts.get(token[:2])) is None:
            return None

        if len(token) > 2:
            if declaration.is_flag:
                # "-abc" → "-a" now, "-bc" next
                stream.splice("-" + token[2:])
            else:
                # "-ovalue" → "-o" now, "value" as its value
                stream.splice(token[2:])
        return declaration

    def parse(self, tokens=Unset, /):
        """
        Parse tokens into {group: {name: value}}.

        Parameters
        - tokens: iterable of strings, a shell-style string (split with shlex),
          or omitted to read sys.argv[1:]. The given sequence is never mutated.

        Faults (raised, or rendered in shell mode)
        - UnknownOptionError / UnexpectedPositionalError: unmatched tokens
          (skipped into `leftovers` when ignore_unknown is set).
        - DuplicateOptionError: a declaration matched twice.
        - ExtractionError subclasses: bad or missing values, annotated with the
          option and the position of the offending token.
        - MissingPositionalsError: positionals left without a token, all listed.
        - HelpRequested: the help flag was seen; parsing stops right there.
        """
        if tokens is Unset:
            tokens = sys.argv[1:]
        elif isinstance(tokens, str):
            tokens = shlex.split(tokens)

        stream = TokenStream(tokens)
        positionals = list(self._positionals)
        parsed = {}
        leftovers = []
        self._leftovers = ()

        while stream:
            token = stream.take()
            position = stream.position

            if token.startswith("-"):
                declaration = self._classify(token, stream)
                if declaration is None:
                    if self._ignore_unknown:
                        logger.debug("skipping unknown option %r at %s position", token, ordinal(position))
                        leftovers.append(token)
                        continue
                    self.trigger(UnknownOptionError(
                        "unknown option %r at %s position" % (token, ordinal(position)),
                        input=token,
                        index=position,
                        hint="try '%s --help' to see all available options" % self.prog
                    ))
            elif positionals:
                # last-declared first; the token itself becomes the value
                declaration = positionals.pop()
                stream.splice(token)
            elif self._ignore_unknown:
                logger.debug("skipping unexpected positional %r at %s position", token, ordinal(position))
                leftovers.append(token)
                continue
            else:
                self.trigger(UnexpectedPositionalError(
                    "unexpected positional %r at %s position" % (token, ordinal(position)),
                    input=token,
                    index=position,
                    hint="%s takes %d %s" % (
                        self.prog, len(self._positionals), pluralize("positional", len(self._positionals))
                    )
                ))

            logger.debug("matched %r at %s position to %s", token, ordinal(position), declaration.label)

            if declaration.name in parsed:
                self.trigger(DuplicateOptionError(
                    "option %s parsed multiple times (again at %s position)" % (declaration.label, ordinal(position)),
                    input=token,
                    index=position,
                    argument=declaration,
                    hint="pass %s only once" % declaration.label
                ))

            if declaration is self._helper:
                self.trigger(HelpRequested(self.usage(), self.help(), sheet=self.sheet(self._colorful)))

            try:
                value = declaration.parse(stream)
            except ExtractionError as fault:
                kind = "positional" if declaration.is_positional else "option"
                self.trigger(
                    fault,
                    message="error on parsing %s %s at %s position: %s" % (
                        kind, declaration.label, ordinal(position), fault.message
                    ),
                    argument=declaration,
                    index=position,
                )
            parsed[declaration.name] = value

        if positionals:
            missing = [declaration.name.upper() for declaration in positionals]
            self.trigger(MissingPositionalsError(
                "%s %s required" % (pluralize("positional", len(missing)), ", ".join(missing)),
                missing=tuple(missing),
                hint="expected: %s" % " ".join(declaration.name.upper() for declaration in self._positionals)
            ))

        result = {}
        for declaration in itertools.chain(self._longs.values(), self._positionals):
            if declaration.group is None:
                continue
            name = declaration.name
            result.setdefault(declaration.group, {})[name] = parsed[name] if name in parsed else declaration.default

        self._leftovers = tuple(leftovers)
        return result


__all__ = (
    "Parser",
)
