"""
Argyle schema validation.

validate() is the build-time pass over a whole schema: it either accepts the
declared options and positionals (no effect) or raises a SchemaError naming the
first violated invariant. ArgumentParser runs it unconditionally on
construction, so a malformed schema never yields a parser.

inspect() runs after a successful validation and yields non-fatal warnings for
declarations that are legal but can never be reached by the scanner.

check order (first violation wins)
- per option, in declaration order:
  empty name, blank name, no forms, negative arity, required with default,
  flag with default, flag with choices, default length, default outside choices,
  empty choice, blank choice, self conflict, unknown conflict.
- per positional, in declaration order:
  empty name, blank name, capturing positional not in last place.
- record-wide: duplicated slot names, reserved slot names (the handle slot,
  result record members, names with a leading underscore).
"""
from collections import Counter

from .faults import FaultCode, SchemaError, ShadowedOptionWarning

# Name of the implicit record slot that owns the capture storage.
STORAGE = "__storage__"

# Forms the scanner always checks (by prefix) before any declared option.
HELP_FORMS = ("-h", "--help")

# Result record members that attribute access would return instead of a slot.
RESERVED = frozenset({
    "as_dict", "capture", "flag", "positional", "release", "released", "shape", "value", "values"
})


def _isblank(text):
    return any(char.isspace() for char in text)


def _validate_option(option, names):
    kind = "option %r" % option.name

    if not option.name:
        raise SchemaError("option name cannot be empty", code=FaultCode.EMPTY_NAME)
    if _isblank(option.name):
        raise SchemaError(f"{kind} name cannot contain blank spaces", code=FaultCode.BLANK_NAME, subject=option.name)
    if option.short is None and option.long is None:
        raise SchemaError(f"{kind} must declare a short or a long form", code=FaultCode.MISSING_FORMS, subject=option.name)
    if option.arity < 0:
        raise SchemaError(f"{kind} arity cannot be negative", code=FaultCode.NEGATIVE_ARITY, subject=option.name)
    if option.required and option.default is not None:
        raise SchemaError(f"required {kind} cannot have default values", code=FaultCode.REQUIRED_DEFAULT, subject=option.name)

    if option.arity == 0:
        if option.default is not None:
            raise SchemaError(f"{kind} with 0 arguments cannot have default values", code=FaultCode.FLAG_DEFAULT, subject=option.name)
        if option.choices is not None:
            raise SchemaError(f"{kind} with 0 arguments cannot have possible values", code=FaultCode.FLAG_CHOICES, subject=option.name)
    elif option.default is not None:
        if len(option.default) != option.arity:
            raise SchemaError(
                f"{kind} takes {option.arity} argument(s) but declares {len(option.default)} default value(s)",
                code=FaultCode.DEFAULT_LENGTH,
                subject=option.name
            )
        if option.choices is not None:
            for default in option.default:
                if default not in option.choices:
                    raise SchemaError(
                        f"{kind} default value {default!r} is not a possible value",
                        code=FaultCode.INVALID_DEFAULT,
                        subject=option.name
                    )

    for choice in option.choices or ():
        if not choice:
            raise SchemaError(f"{kind} possible values cannot be empty strings", code=FaultCode.EMPTY_CHOICE, subject=option.name)
        if _isblank(choice):
            raise SchemaError(f"{kind} possible values cannot contain blank spaces", code=FaultCode.BLANK_CHOICE, subject=option.name)

    for conflict in option.conflicts or ():
        if conflict == option.name:
            raise SchemaError(f"{kind} cannot conflict with itself", code=FaultCode.SELF_CONFLICT, subject=option.name)
        if conflict not in names:
            raise SchemaError(f"{kind} conflicts with unknown option {conflict!r}", code=FaultCode.UNKNOWN_CONFLICT, subject=option.name)


def _validate_positional(positional, index, count):
    kind = "positional %r" % positional.name

    if not positional.name:
        raise SchemaError("positional name cannot be empty", code=FaultCode.EMPTY_NAME)
    if _isblank(positional.name):
        raise SchemaError(f"{kind} name cannot contain blank spaces", code=FaultCode.BLANK_NAME, subject=positional.name)
    if positional.capture and index != count - 1:
        raise SchemaError(
            f"{kind} captures the remaining arguments but is not the last positional",
            code=FaultCode.MISPLACED_CAPTURE,
            subject=positional.name
        )


def validate(options, positionals):
    """
    check a whole schema; raise SchemaError on the first violated invariant.

    parameters
    - options: Sequence[OptionSpec] in declaration order.
    - positionals: Sequence[PositionalSpec] in declaration order.

    returns
    - None when every invariant holds.
    """
    names = {option.name for option in options}

    for option in options:
        _validate_option(option, names)

    for index, positional in enumerate(positionals):
        _validate_positional(positional, index, len(positionals))

    counter = Counter(item.name for item in (*options, *positionals))
    for name, count in counter.items():
        if count > 1:
            raise SchemaError(f"slot name {name!r} is declared {count} times", code=FaultCode.DUPLICATED_NAME, subject=name)
        if name.startswith("_") or name in RESERVED:
            raise SchemaError(f"slot name {name!r} is reserved", code=FaultCode.RESERVED_NAME, subject=name)


def inspect(options):
    """
    yield ShadowedOptionWarning for options the scanner can never match.

    the scanner tries the built-in help forms first, then the options in
    declaration order, and the first prefix match wins. an option is shadowed
    when every one of its forms starts with a help form or with a form of an
    earlier option.
    """
    earlier = list(HELP_FORMS)
    for option in options:
        shadows = {}
        for form in option.forms:
            for prefix in earlier:
                if form.startswith(prefix):
                    shadows[form] = prefix
                    break
        if option.forms and len(shadows) == len(option.forms):
            yield ShadowedOptionWarning(
                "option %r can never be matched: %s" % (
                    option.name,
                    ", ".join(f"{form!r} starts with {prefix!r}" for form, prefix in shadows.items())
                )
            )
        earlier.extend(option.forms)


__all__ = (
    "STORAGE",
    "HELP_FORMS",
    "RESERVED",
    "validate",
    "inspect",
)
