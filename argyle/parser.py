"""
Argyle argument parser (schema in, typed record out).

Build
- ArgumentParser(info, options, positionals) sanitizes its inputs, validates
  the whole schema (argyle.validator.validate, fail-fast), emits a warning for
  every option that can never be matched, and synthesizes the result Shape.

Scan (ArgumentParser.parse)
- option phase
  • a token starting with "-h" or "--help" renders the help and stops the parse
    with HelpRequested (a clean exit, not an error).
  • otherwise the first option (declaration order) whose short or long form
    prefixes the token wins; "-fstrict" matches "-f".
  • value tokens are taken verbatim and never looked at as options.
  • the first token no option matches ends the phase for good.
- positional phase
  • each positional takes one token while tokens remain; a capturing last
    positional takes them all (possibly none).
- leftovers fail with UnparsedArgumentsError.
- post-scan checks, in order: required options, positionals, conflicts (only
  from the declaring option's side).

Faults
- every outcome goes through ArgumentParser.trigger(), which merges the tool,
  shell and colorful options into the fault and hands it to faults.trigger().
"""
import sys
import warnings
from collections.abc import Iterable
from enum import Enum

from .faults import *
from .faults import console as stderr, trigger as _trigger
from .render import *
from .render import console as stdout
from .results import ParsedResult
from .schema import AppInfo, OptionSpec, PositionalSpec, SpecType
from .shape import synthesize
from .utils import *
from .validator import HELP_FORMS, STORAGE, inspect, validate


class State(Enum):
    SCANNING_OPTIONS = "scanning-options"
    SCANNING_POSITIONALS = "scanning-positionals"
    DONE = "done"
    FAILED = "failed"


def _sanitize_schema(cls, metadata, /):
    if not isinstance(metadata["info"], AppInfo):
        raise TypeError(f"{cls.__typename__} 'info' must be an app-info")

    for field, type, typename in (("options", OptionSpec, "option-spec"), ("positionals", PositionalSpec, "positional-spec")):
        if isinstance(items := metadata[field], str) or not isinstance(items, Iterable):
            raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of {typename}s")
        metadata[field] = tuple(items)
        for item in metadata[field]:
            if not isinstance(item, type):
                raise TypeError(f"{cls.__typename__} {field!r} must only contain {typename}s")

    for field in ("shell", "colorful"):
        if not isinstance(metadata[field], bool):
            raise TypeError(f"{cls.__typename__} {field!r} must be a boolean")


class ArgumentParser(metaclass=SpecType):
    """
    Parser built from an application description, options and positionals.

    Properties
    - info, options, positionals, shell, colorful: the construction metadata (read-only).
    - shape: the synthesized layout of the records parse() returns.
    - state: where the last parse() ended (State).

    Runtime flags
    - shell: exit the process (0 on help, 1 on error) instead of raising.
    - colorful: keep styles in help and error output.
    """

    __introspectable__ = (
        "info",
        "options",
        "positionals",
        "shell",
        "colorful",
    )

    def __new__(cls, info, /, options=(), positionals=(), *, shell=False, colorful=True):
        metadata = {
            "info": info,
            "options": options,
            "positionals": positionals,
            "shell": shell,
            "colorful": colorful,
        }
        _sanitize_schema(cls, metadata)
        validate(metadata["options"], metadata["positionals"])
        for warning in inspect(metadata["options"]):
            warnings.warn(warning, stacklevel=2)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._shape = synthesize(self._options, self._positionals)
        self._state = State.DONE
        return self

    @property
    def shape(self):
        return self._shape

    @property
    def state(self):
        return self._state

    def _option(self, name):
        for option in self._options:
            if option.name == name:
                return option
        raise KeyError(name)

    def _fail(self, fault):
        self._state = State.FAILED
        self.trigger(fault)

    def trigger(self, fault, /, **options):
        """
        surface a fault produced by this parser.

        the fault is copied with tool=self and the parser's shell/colorful
        flags, then printed and raised (or the process exits in shell mode).
        """
        _trigger(fault, **options, tool=self, shell=self.shell, colorful=self.colorful)

    def initial(self):
        """
        build a record holding every slot's starting value.

        - flags: False
        - arity 1: the default value, else ""
        - arity N: the default values, else N empty strings
        - positionals: ""; a capturing positional: an empty list (also the storage handle)
        """
        result = ParsedResult(self._shape)
        for option in self._options:
            match option.arity:
                case 0:
                    result._assign(option.name, False)
                case 1:
                    result._assign(option.name, option.default[0] if option.default else "")
                case arity:
                    result._assign(option.name, option.default if option.default else ("",) * arity)

        storage = None
        for positional in self._positionals:
            if positional.capture:
                result._assign(positional.name, storage := [])
            else:
                result._assign(positional.name, "")
        result._assign(STORAGE, storage)
        return result

    def is_valid_argument(self, option, argument, /):
        """
        Return True when `argument` is acceptable for `option` (an OptionSpec or an option name).
        """
        if isinstance(option, str):
            option = self._option(option)
        return option.choices is None or argument in option.choices

    def _parse_option(self, result, option, tokens, index):
        # Returns the index of the first token after the option and its values.
        if option.arity == 0:
            result._assign(option.name, True)
            return index + 1

        if index + option.arity >= len(tokens):
            self._fail(MissingOptionArgumentError(option.display))
        values = tokens[index + 1:index + 1 + option.arity]
        for value in values:
            if not self.is_valid_argument(option, value):
                self._fail(InvalidOptionArgumentError(value, option.display))

        result._assign(option.name, values[0] if option.arity == 1 else values)
        return index + 1 + option.arity

    def _finalize(self, seen):
        for option in self._options:
            if option.required and option.name not in seen:
                self._fail(MissingRequiredOptionError(option.display))

        for positional in self._positionals:
            if positional.name not in seen:
                self._fail(MissingPositionalError(positional.metavar))

        for option in self._options:
            if option.name not in seen:
                continue
            for name in option.conflicts or ():
                if name in seen:
                    self._fail(ConflictingOptionsError(option.display, self._option(name).display))

    def parse(self, arguments, /):
        """
        scan an argument vector (without the program name) into a record.

        raises
        - HelpRequested when a token starts with -h/--help (help already printed).
        - ParserError subclasses for every parse failure (message already printed).
        - TypeError when `arguments` is not an iterable of strings.
        in shell mode the process exits instead of raising.
        """
        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = tuple(arguments)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must only contain strings")

        result = self.initial()
        seen = set()
        index = 0

        self._state = State.SCANNING_OPTIONS
        while index < len(tokens):
            token = tokens[index]
            if token.startswith(HELP_FORMS):
                self._state = State.DONE
                self.trigger(HelpRequested())
            for option in self._options:
                if option.matches(token):
                    break
            else:
                break
            if option.name in seen:
                self._fail(RepeatedOptionError(option.display))
            seen.add(option.name)
            index = self._parse_option(result, option, tokens, index)

        self._state = State.SCANNING_POSITIONALS
        for positional in self._positionals:
            if positional.capture:
                result.capture(positional.name).extend(tokens[index:])
                index = len(tokens)
                seen.add(positional.name)
            elif index < len(tokens):
                result._assign(positional.name, tokens[index])
                index += 1
                seen.add(positional.name)

        if index < len(tokens):
            self._fail(UnparsedArgumentsError())

        self._finalize(seen)
        self._state = State.DONE
        return result

    def parse_args(self, arguments=Unset, /):
        """
        parse(), reading sys.argv[1:] when no arguments are given.
        """
        return self.parse(coalesce(arguments, sys.argv[1:]))

    def release(self, result, /):
        """
        Release the capture storage of a record returned by parse().
        """
        if not isinstance(result, ParsedResult):
            raise TypeError("release() argument must be a parsed-result")
        if result.shape != self._shape:
            raise ValueError("release() argument was not produced by this parser")
        result.release()

    def help(self):
        return render_help(self.info, self.options, self.positionals, colorful=self.colorful)

    def suggestion(self):
        return render_suggestion(self.info, colorful=self.colorful)

    def _display(self, text):
        stdout.print(text, end="", highlight=False, soft_wrap=True)

    def display_name_version(self):
        self._display(render_name_version(self.info, colorful=self.colorful))

    def display_description(self):
        self._display(render_description(self.info, colorful=self.colorful))

    def display_usage(self):
        self._display(render_usage(self.info, self.positionals, colorful=self.colorful))

    def display_arguments(self):
        self._display(render_arguments(self.options, self.positionals, colorful=self.colorful))

    def display_help(self):
        self._display(self.help())

    def suggest_help(self):
        stderr.print(self.suggestion(), end="", highlight=False, soft_wrap=True)


__all__ = (
    "State",
    "ArgumentParser",
)
