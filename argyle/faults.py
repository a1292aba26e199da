"""
Argyle faults (errors, warnings, control outcomes) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every outcome a parser
  can surface (help requests, parse errors, schema errors, and warnings).
  Codes are grouped by domain to keep copy consistent and searches predictable.
- ParserException: base type that carries a message + options and knows how to
  render and surface itself.
  • HelpRequested: clean early exit when -h/--help is scanned (not an error).
  • ParserError and its seven kinds: one-line diagnostics plus a help suggestion.
- SchemaError: build-time rejection of a malformed schema (never rendered, always fatal).
- ParserWarning: non-fatal schema diagnostics routed through the warnings module.
- trigger(): central entry point to surface any fault (respecting shell/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The scanner builds a fault and calls ArgumentParser.trigger(fault), which merges
  the runtime options (tool, shell, colorful) and forwards to trigger().
- Errors always print to the error console; in shell mode the process then exits,
  otherwise the exception is raised so callers can branch on its type or code.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - control (101xx)
      • HELP_REQUESTED
    - options (111xx)
      • REPEATED_OPTION, MISSING_OPTION_ARGUMENT, INVALID_OPTION_ARGUMENT,
        MISSING_REQUIRED_OPTION, CONFLICTING_OPTIONS
    - positionals (1112x / 1114x)
      • MISSING_POSITIONAL, UNPARSED_ARGUMENTS
    - warnings (121xx)
      • SHADOWED_OPTION
    - schema (131xx / 132xx)
      • every invariant checked by argyle.validator.validate()

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- control outcomes (10xxx) ---
    HELP_REQUESTED              = 10101

    # --- option errors (11xxx) ---
    REPEATED_OPTION             = 11111
    MISSING_OPTION_ARGUMENT     = 11112
    INVALID_OPTION_ARGUMENT     = 11113
    MISSING_REQUIRED_OPTION     = 11114
    CONFLICTING_OPTIONS         = 11115

    # --- positional errors (11xxx) ---
    MISSING_POSITIONAL          = 11121
    UNPARSED_ARGUMENTS          = 11141

    # --- warnings (12xxx) ---
    SHADOWED_OPTION             = 12111

    # --- schema errors: options (131xx) ---
    EMPTY_NAME                  = 13101
    BLANK_NAME                  = 13102
    MISSING_FORMS               = 13103
    NEGATIVE_ARITY              = 13104
    REQUIRED_DEFAULT            = 13105
    FLAG_DEFAULT                = 13106
    FLAG_CHOICES                = 13107
    DEFAULT_LENGTH              = 13108
    INVALID_DEFAULT             = 13109
    EMPTY_CHOICE                = 13110
    BLANK_CHOICE                = 13111
    SELF_CONFLICT               = 13112
    UNKNOWN_CONFLICT            = 13113

    # --- schema errors: positionals and records (132xx) ---
    MISPLACED_CAPTURE           = 13201
    DUPLICATED_NAME             = 13202
    RESERVED_NAME               = 13203

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette():
    return defaultdict(str, {
        "error-label": "bold bright_red",
        "subject": "bold bright_green",
        "error-message": "",
        "suggestion": "",
    } | getattr(__import__("__main__"), "__styles__", {}))


class ParserException(Exception):
    """
    base for every runtime outcome of a parse (control exits and errors).

    options
    - tool: the ArgumentParser that produced the fault.
    - shell: exit the process instead of raising.
    - colorful: keep styles when rendering.
    """
    code = None

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class HelpRequested(ParserException):
    """
    control outcome: -h/--help was scanned.

    the help text goes to the standard output console; callers treat this as
    a clean early exit, never as a failure.
    """
    code = FaultCode.HELP_REQUESTED

    def __init__(self, message="help requested", /, **options):
        super().__init__(message, **options)

    def __rich__(self):
        return self.options["tool"].help()

    def __trigger__(self):
        self.options["tool"].display_help()
        if self.options.get("shell", False):
            sys.exit(0)
        raise self from None


class ParserError(ParserException):
    """
    base for the parse errors; one subclass per error kind.

    subclasses define a `template` whose "{}" placeholders are filled with the
    offending subjects (display forms, metavars, or values); subjects are
    highlighted when rendered.
    """
    template = ""

    def __init__(self, *subjects, **options):
        self.subjects = tuple(map(str, subjects))
        super().__init__(self.template.format(*self.subjects), **options)

    def __rich__(self):
        styles = _palette()
        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        line = Text.assemble(("Error: ", styler("error-label")))
        pieces = self.template.split("{}")
        for index, piece in enumerate(pieces):
            line.append(piece, styler("error-message"))
            if index < len(self.subjects):
                line.append(self.subjects[index], styler("subject"))
        line.append("\n")

        if tool := self.options.get("tool"):
            line.append_text(tool.suggestion())
        return line

    def __trigger__(self):
        console.print(self, end="", highlight=False, soft_wrap=True)
        if self.options.get("shell", False):
            sys.exit(1)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(*self.subjects, **{**self.options, **overrides})


class RepeatedOptionError(ParserError):
    code = FaultCode.REPEATED_OPTION
    template = "Option {} appears more than one time"


class MissingOptionArgumentError(ParserError):
    code = FaultCode.MISSING_OPTION_ARGUMENT
    template = "Missing arguments for option {}"


class InvalidOptionArgumentError(ParserError):
    code = FaultCode.INVALID_OPTION_ARGUMENT
    template = "Invalid argument {} for option {}"


class MissingPositionalError(ParserError):
    code = FaultCode.MISSING_POSITIONAL
    template = "Missing argument {}"


class UnparsedArgumentsError(ParserError):
    code = FaultCode.UNPARSED_ARGUMENTS
    template = "Too many arguments"


class MissingRequiredOptionError(ParserError):
    code = FaultCode.MISSING_REQUIRED_OPTION
    template = "Required option {} is not present"


class ConflictingOptionsError(ParserError):
    code = FaultCode.CONFLICTING_OPTIONS
    template = "Options {} and {} can't both be active"


class SchemaError(ValueError):
    """
    a schema declaration violates one of the validator invariants.

    raised while an ArgumentParser is being built, so a malformed schema can
    never produce a parser. `code` names the violated invariant and `subject`
    the offending option/positional name.
    """

    def __init__(self, message, /, code, subject=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.subject = subject

    def __reduce__(self):
        return type(self), (self.message,), {"code": self.code, "subject": self.subject}


class ParserWarning(Warning):
    """base for non-fatal schema diagnostics."""
    code = None


class ShadowedOptionWarning(ParserWarning):
    """an option can never be matched because an earlier prefix always wins."""
    code = FaultCode.SHADOWED_OPTION


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - help requests print to stdout, errors print to stderr; both then raise
      (or exit when shell=True).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParserException",
    "HelpRequested",
    "ParserError",
    "RepeatedOptionError",
    "MissingOptionArgumentError",
    "InvalidOptionArgumentError",
    "MissingPositionalError",
    "UnparsedArgumentsError",
    "MissingRequiredOptionError",
    "ConflictingOptionsError",
    "SchemaError",
    "ParserWarning",
    "ShadowedOptionWarning",
    "trigger",
    "getdoc",
)
