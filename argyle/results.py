"""
Argyle parse results.

ParsedResult is the typed map a parser returns: one entry per slot of its
Shape, readable by attribute, by item, or through kind-checked accessors.

Ownership
- The capture list (the value of the capturing positional, also held by the
  "__storage__" handle) is the only owned substructure of a record.
- release() clears it and drops the handle. A record can be released once;
  any later release, or any later read of the capture, raises RuntimeError.
- Records are context managers and release themselves on exit.
"""
from types import MappingProxyType

from .shape import Shape, SlotKind
from .validator import STORAGE


class ParsedResult:
    """
    Typed record produced by ArgumentParser.parse().
    """

    __slots__ = ("_shape", "_values", "_released")

    def __init__(self, shape, /):
        if not isinstance(shape, Shape):
            raise TypeError("parsed-result shape must be a shape")
        object.__setattr__(self, "_shape", shape)
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_released", False)

    @property
    def shape(self):
        return self._shape

    @property
    def released(self):
        return self._released

    def _assign(self, name, value, /):
        # Parser-side write access; the public surface is read-only.
        if name not in self._shape:
            raise KeyError(name)
        if self._released:
            raise RuntimeError("parsed-result has already been released")
        self._values[name] = value

    def _lookup(self, name, /, *kinds):
        slot = self._shape[name]
        if kinds and slot.kind not in kinds:
            raise TypeError(f"parsed-result slot {name!r} is a {slot.kind}, not a {" or ".join(kinds)}")
        if self._released and slot.kind in (SlotKind.CAPTURE, SlotKind.HANDLE):
            raise RuntimeError(f"parsed-result slot {name!r} has been released")
        return self._values[name]

    def flag(self, name, /):
        return self._lookup(name, SlotKind.FLAG)

    def value(self, name, /):
        return self._lookup(name, SlotKind.VALUE)

    def values(self, name, /):
        return self._lookup(name, SlotKind.TUPLE)

    def positional(self, name, /):
        return self._lookup(name, SlotKind.POSITIONAL)

    def capture(self, name, /):
        return self._lookup(name, SlotKind.CAPTURE)

    def release(self):
        """
        free the capture storage of this record.

        raises
        - RuntimeError when the record was already released.
        """
        if self._released:
            raise RuntimeError("parsed-result has already been released")
        if (storage := self._values.get(STORAGE)) is not None:
            storage.clear()
        self._values[STORAGE] = None
        object.__setattr__(self, "_released", True)

    def as_dict(self):
        """
        Read-only snapshot of every readable slot, in slot order.

        The handle is excluded, and so is the capture once the record is released.
        """
        return MappingProxyType({
            slot.name: self._lookup(slot.name)
            for slot in self._shape
            if slot.kind is not SlotKind.HANDLE and not (self._released and slot.kind is SlotKind.CAPTURE)
        })

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._lookup(name)
        except KeyError:
            raise AttributeError(f"parsed-result has no slot {name!r}") from None

    def __setattr__(self, name, value):
        raise AttributeError("parsed-result is read-only")

    def __getitem__(self, name, /):
        return self._lookup(name)

    def __contains__(self, name, /):
        return name in self._shape

    def __iter__(self):
        return iter(self._shape.names)

    def __len__(self):
        return len(self._shape)

    def __eq__(self, other):
        if not isinstance(other, ParsedResult):
            return NotImplemented
        return self._shape == other._shape and self._values == other._values

    __hash__ = None

    def __enter__(self):
        return self

    def __exit__(self, *unused):
        if not self._released:
            self.release()

    def __repr__(self):
        if self._released:
            return "parsed-result(<released>)"
        return "parsed-result(%s)" % ", ".join(
            "%s=%r" % (name, value) for name, value in self._values.items() if name != STORAGE
        )

    def __rich_repr__(self):
        for name, value in self._values.items():
            if name != STORAGE and not (self._released and self._shape[name].kind is SlotKind.CAPTURE):
                yield name, value


__all__ = (
    "ParsedResult",
)
