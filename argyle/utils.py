"""
Argyle helpers shared by the schema, parser and result layers.

Contents
- Unset: the "argument omitted" marker used as a default wherever None is a
  value a caller may legitimately pass.
- coalesce(): turn Unset into a concrete default.
- rename(): give generated functions readable names in tracebacks and reprs.
- mirror(): read-only property over a "_name" backing attribute; containers
  come back frozen (tuple, mapping proxy, frozenset).

    >>> coalesce(Unset, "ARG")
    'ARG'
    >>> coalesce("", "ARG")
    ''
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    - UnsetType() always returns the one process-wide instance.
    - Unset is falsy yet never equal to None, False or 0.
    - Copies and pickles resolve back to the same instance.
    - Subclassing is refused.
    """

    def __or__(self, other, /):
        # Lets annotations and isinstance() checks spell `Unset | str`.
        try:
            return type(self) | other
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

    def __reduce__(self):
        # Pickle by reference so round-trips keep the singleton identity.
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `object`, or `default` when `object` is Unset.

    Only Unset is replaced: None, 0, "" and () are returned unchanged.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Name a callable (sets both __name__ and __qualname__).

    - rename(function, "name") renames in place and returns the function.
    - rename("name") returns a decorator doing the same.
    """
    match parameters:
        case (callable, name):
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__name__ = callable.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case (name,):
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def decorator(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(decorator, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # tuples (named tuples included) pass through untouched
    if isinstance(object, tuple):
        return object
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return coalesce(object)


def mirror(name, /):
    """
    Build a read-only property returning a frozen view of self._{name}.

        class Spec:
            choices = mirror("choices")   # reads self._choices
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "mirror",
    "rename",
)
