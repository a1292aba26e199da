"""
Argyle result-shape synthesis.

A Shape is the static layout of the record a parser produces: one Slot per
declared option, then one per declared positional, then the implicit storage
handle. It is computed once when a parser is built and never changes.

slot kinds
- FLAG        option with arity 0       → bool
- VALUE       option with arity 1       → str
- TUPLE       option with arity N > 1   → tuple[str, ...] of length N
- POSITIONAL  non-capturing positional  → str
- CAPTURE     capturing positional      → list[str]
- HANDLE      "__storage__"             → list[str] | None (owned capture storage)
"""
from enum import StrEnum
from types import MappingProxyType
from typing import NamedTuple

from .validator import STORAGE


class SlotKind(StrEnum):
    FLAG = "flag"
    VALUE = "value"
    TUPLE = "tuple"
    POSITIONAL = "positional"
    CAPTURE = "capture"
    HANDLE = "handle"


_types = {
    SlotKind.FLAG: bool,
    SlotKind.VALUE: str,
    SlotKind.TUPLE: tuple[str, ...],
    SlotKind.POSITIONAL: str,
    SlotKind.CAPTURE: list[str],
    SlotKind.HANDLE: list[str] | None,
}


class Slot(NamedTuple):
    """
    One field of a result record: its name, its kind and (for options) its arity.
    """
    name: str
    kind: SlotKind
    arity: int = 0

    @property
    def type(self):
        """
        Python type of the value held by this slot.
        """
        return _types[self.kind]


class Shape(tuple):
    """
    Ordered, immutable collection of slots.

    Indexing accepts both positions and slot names; two shapes built from the
    same schema compare equal.
    """

    def __new__(cls, slots=(), /):
        slots = tuple(slots)
        for slot in slots:
            if not isinstance(slot, Slot):
                raise TypeError("shape items must be slots")
        return super().__new__(cls, slots)

    def __getitem__(self, key, /):
        if isinstance(key, str):
            for slot in self:
                if slot.name == key:
                    return slot
            raise KeyError(key)
        return super().__getitem__(key)

    def __contains__(self, key, /):
        if isinstance(key, str):
            return key in self.names
        return super().__contains__(key)

    def __repr__(self):
        return "shape(%s)" % ", ".join(f"{slot.name}: {slot.kind}" for slot in self)

    @property
    def names(self):
        return tuple(slot.name for slot in self)

    @property
    def types(self):
        """
        Read-only mapping of slot names to their Python types, in slot order.
        """
        return MappingProxyType({slot.name: slot.type for slot in self})


def synthesize(options, positionals):
    """
    build the Shape of the record produced for a schema.

    the schema is expected to be valid (see argyle.validator.validate); this
    function performs no checks of its own.
    """
    slots = []
    for option in options:
        match option.arity:
            case 0:
                slots.append(Slot(option.name, SlotKind.FLAG, 0))
            case 1:
                slots.append(Slot(option.name, SlotKind.VALUE, 1))
            case arity:
                slots.append(Slot(option.name, SlotKind.TUPLE, arity))
    for positional in positionals:
        slots.append(Slot(positional.name, SlotKind.CAPTURE if positional.capture else SlotKind.POSITIONAL))
    slots.append(Slot(STORAGE, SlotKind.HANDLE))
    return Shape(slots)


__all__ = (
    "SlotKind",
    "Slot",
    "Shape",
    "synthesize",
)
