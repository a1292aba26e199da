r"""
Argyle schema specifications.

Overview
- Specs
  • Version: three-component (major, minor, patch) application version.
  • AppInfo: static identity of the application (name, descr, version).
  • OptionSpec: one declared switch; a flag (arity 0), a single value (arity 1),
    or a fixed tuple of values (arity N), reachable through a short and/or long form.
  • PositionalSpec: one declared positional slot; the last one may capture
    every remaining token.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties (see mirror()).

Metadata (sanitized on construction)
- Shared
  • name: str (the result-record slot name).
  • descr: str (possibly multi-line help text; "" by default).
- OptionSpec
  • long/short: Unset | str, non-empty when provided (stored as None when omitted).
  • metavar: str, non-empty ("ARG" by default).
  • arity: int (not bool).
  • required: bool.
  • default: Unset | Sequence[str] (a bare string is rejected).
  • choices: Unset | Iterable[str] (duplicates rejected unless a Set; sets are sorted).
  • conflicts: Unset | Iterable[str] (names of other options).
- PositionalSpec
  • metavar: Unset | str (defaults to the upper-cased name).
  • capture: bool.

Construction only checks shapes and types. The semantic invariants (empty or
blank names, required+default, arity/default agreement, conflicts, capture
placement, ...) are enforced over the whole schema by argyle.validator when a
parser is built.

Quick example:
    >>> from argyle.schema import AppInfo, OptionSpec, PositionalSpec
    >>> info = AppInfo("grep", "search files", (1, 0, 2))
    >>> verbose = OptionSpec("verbose", short="-v", long="--verbose", descr="be chatty")
    >>> pattern = PositionalSpec("pattern", metavar="PATTERN")
"""
import functools
import operator
import re
from collections.abc import Iterable, Sequence, Set
from typing import NamedTuple

from .utils import *


class Version(NamedTuple):
    """
    Application version, rendered as "major.minor.patch".
    """
    major: int
    minor: int
    patch: int

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.patch}"


class SpecType(type):
    """
    Metaclass that turns schema specs into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the "_{name}" attribute (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used as the prefix of every construction error message.
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

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(other) is not type(self):
                return NotImplemented
            return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())
        self.__eq__ = __eq__

        @rename("__hash__")
        def __hash__(self):
            return hash((type(self), tuple(self.__rich_repr__())))
        self.__hash__ = __hash__

        @rename("__setattr__")
        def __setattr__(self, name, value):
            if name in type(self).__introspectable__:
                raise AttributeError(f"{type(self).__typename__} field {name!r} is read-only")
            object.__setattr__(self, name, value)
        self.__setattr__ = __setattr__

        return self


def _sanitize_string(cls, metadata, field, /, *, empty=True):
    if not isinstance(value := metadata[field], str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if not empty and not value:
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")


def _sanitize_strings(cls, metadata, field, /, *, unique=False):
    """
    Internal: normalize an Unset | Iterable[str] field into a tuple (or None).

    Sets are accepted as-is and sorted for a stable display order; other
    iterables keep their declaration order and, when `unique` is set, reject
    duplicates.
    """
    if (values := metadata[field]) is Unset:
        metadata[field] = None
        return
    if isinstance(values, str) or not isinstance(values, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of strings")
    if isinstance(values, Set):
        values = sorted(values, key=str)
    sanitized = []
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"{cls.__typename__} {field!r} must only contain strings")
        if unique and value in sanitized:
            raise ValueError(f"{cls.__typename__} {field!r} cannot contain duplicates")
        sanitized.append(value)
    metadata[field] = tuple(sanitized)


def _sanitize_option_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata for OptionSpec.

    Responsibilities
    - name/descr/metavar must be strings (metavar non-empty).
    - long/short must be Unset or non-empty strings; Unset becomes None.
    - arity must be an int (booleans are rejected to avoid `arity=True` slips).
    - default must be Unset or a non-string sequence of strings; stored as a tuple.
    - choices/conflicts must be Unset or iterables of strings; stored as tuples.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    _sanitize_string(cls, metadata, "name")
    _sanitize_string(cls, metadata, "descr")
    _sanitize_string(cls, metadata, "metavar", empty=False)

    for form in ("long", "short"):
        if not isinstance(value := metadata[form], str | Unset):
            raise TypeError(f"{cls.__typename__} {form!r} must be a string")
        elif isinstance(value, str) and not value:
            raise ValueError(f"{cls.__typename__} {form!r} cannot be empty")
        metadata[form] = coalesce(value)

    if isinstance(arity := metadata["arity"], bool) or not isinstance(arity, int):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")

    if (default := metadata["default"]) is not Unset:
        if isinstance(default, str) or not isinstance(default, Sequence):
            raise TypeError(f"{cls.__typename__} 'default' must be a sequence of strings")
    _sanitize_strings(cls, metadata, "default")
    _sanitize_strings(cls, metadata, "choices", unique=True)
    _sanitize_strings(cls, metadata, "conflicts", unique=True)


class OptionSpec(metaclass=SpecType):
    """
    One declared switch.

    An option is recognized when one of its forms (short and/or long) is a
    prefix of the scanned token; declaration order breaks ties. Its arity
    decides the slot type in the result record:
    - 0 → bool (flag, True when present)
    - 1 → str (one value token)
    - N → tuple of N str (N value tokens)

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "long",
        "short",
        "metavar",
        "descr",
        "arity",
        "required",
        "default",
        "choices",
        "conflicts",
    )

    def __new__(
            cls,
            name,
            /,
            long=Unset,
            short=Unset,
            metavar="ARG",
            descr="",
            arity=0,
            required=False,
            default=Unset,
            choices=Unset,
            conflicts=Unset,
    ):
        """
        Construct an OptionSpec with the provided metadata.

        Parameters
        - name: str
          Slot name in the result record; also the name other options use in
          their `conflicts`.
        - long/short: str
          Command-line forms (e.g., "--output" / "-o"). At least one is required.
        - metavar: str
          Placeholder shown in help for the values ("ARG" by default).
        - descr: str
          Help text; each source line is rendered on its own indented line.
        - arity: int
          Number of value tokens consumed after the form.
        - required: bool
          The option must appear on every command line.
        - default: Sequence[str]
          Values used when the option is absent (exactly `arity` of them).
        - choices: Iterable[str]
          Accepted value tokens.
        - conflicts: Iterable[str]
          Names of options that cannot appear together with this one.
        """
        metadata = {
            "name": name,
            "long": long,
            "short": short,
            "metavar": metavar,
            "descr": descr,
            "arity": arity,
            "required": bool(required),
            "default": default,
            "choices": choices,
            "conflicts": conflicts,
        }
        _sanitize_option_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def display(self):
        """
        Preferred display form: long form, else short form, else the name.
        """
        return self.long or self.short or self.name

    @property
    def forms(self):
        """
        The declared forms in matching order (short first, then long).
        """
        return tuple(form for form in (self.short, self.long) if form)

    def matches(self, token, /):
        """
        Return True when one of the forms is a prefix of `token`.
        """
        return any(token.startswith(form) for form in self.forms)


class PositionalSpec(metaclass=SpecType):
    """
    One declared positional slot.

    A positional consumes exactly one token, unless it captures: the capturing
    positional (necessarily the last one) takes every remaining token, possibly
    none, as a list.
    """

    __introspectable__ = (
        "name",
        "metavar",
        "descr",
        "capture",
    )

    def __new__(cls, name, /, metavar=Unset, descr="", capture=False):
        metadata = {
            "name": name,
            "metavar": metavar,
            "descr": descr,
            "capture": bool(capture),
        }
        _sanitize_string(cls, metadata, "name")
        _sanitize_string(cls, metadata, "descr")
        metadata["metavar"] = coalesce(metavar, name.upper())
        _sanitize_string(cls, metadata, "metavar", empty=False)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def display(self):
        return self.metavar


class AppInfo(metaclass=SpecType):
    """
    Static identity of the application: name, description, and version.
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
    )

    def __new__(cls, name, /, descr="", version=Version(0, 1, 0)):
        metadata = {
            "name": name,
            "descr": descr,
            "version": version,
        }
        _sanitize_string(cls, metadata, "name")
        _sanitize_string(cls, metadata, "descr")

        if not isinstance(version, Iterable) or isinstance(version, str):
            raise TypeError(f"{cls.__typename__} 'version' must be a (major, minor, patch) triple")
        if len(version := tuple(version)) != 3:
            raise ValueError(f"{cls.__typename__} 'version' must have exactly three components")
        for component in version:
            if isinstance(component, bool) or not isinstance(component, int):
                raise TypeError(f"{cls.__typename__} 'version' components must be integers")
            if component < 0:
                raise ValueError(f"{cls.__typename__} 'version' components cannot be negative")
        metadata["version"] = Version(*version)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


__all__ = (
    "Version",
    "AppInfo",
    "OptionSpec",
    "PositionalSpec",
)
