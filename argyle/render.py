"""
Argyle help rendering.

Every function here is pure: it takes schema objects and returns a rich Text
whose plain form is the exact text printed by the parser. Printing is left to
the caller (see ArgumentParser.display_* and the module-level `console`).

Palette keys
- name: option forms, positional metavars, program name in suggestions.
- value: version, default values, possible values, conflicting options.
- section: USAGE / ARGUMENTS / OPTIONS labels.
- description: description lines.

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- With colorful=False every style is dropped and only plain text remains.
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .schema import OptionSpec

console = Console()

INDENT = " " * 4

HELP_OPTION = OptionSpec("help", long="--help", short="-h", descr="Display this and exit")


def _styler(colorful):
    styles = defaultdict(str, {
        "name": "bold bright_green",
        "value": "bold bright_blue",
        "section": "bold bright_yellow",
        "description": "",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _lines(descr, styler):
    text = Text()
    for line in descr.split("\n"):
        text.append(INDENT * 2).append(line, styler("description")).append("\n")
    return text


def render_name_version(info, /, *, colorful=True):
    styler = _styler(colorful)
    return Text.assemble((info.name, styler("name")), (f" {info.version}", styler("value")), "\n")


def render_description(info, /, *, colorful=True):
    return Text.assemble((info.descr, _styler(colorful)("description")), "\n")


def render_usage(info, positionals=(), /, *, colorful=True):
    """
    usage section: program name, the option placeholder, then every positional
    metavar; a capturing last positional repeats its metavar as "[METAVAR...]".
    """
    styler = _styler(colorful)
    usage = Text()
    usage.append("USAGE\n", styler("section"))
    usage.append(INDENT).append(info.name).append(" [OPTION]")
    for positional in positionals:
        usage.append(" ").append(positional.metavar)
    if positionals and positionals[-1].capture:
        usage.append(f" [{positionals[-1].metavar}...]")
    return usage.append("\n")


def render_positional(positional, /, *, colorful=True):
    styler = _styler(colorful)
    text = Text()
    text.append(INDENT).append(positional.metavar, styler("name")).append("\n")
    return text.append_text(_lines(positional.descr, styler))


def render_option(option, options=(), /, *, colorful=True):
    """
    one option block: the forms and metavar, the annotations, then the
    description lines.

    annotations appear in a fixed order: default values, possible values,
    required, conflicting options. conflicting options are shown by their
    display form, looked up by name in `options`.
    """
    styler = _styler(colorful)
    match option.arity:
        case 0:
            metavar = ""
        case 1:
            metavar = f" <{option.metavar}>"
        case _:
            metavar = f" <{option.metavar}...>"

    text = Text(INDENT)
    text.append(", ".join(option.forms) + metavar, styler("name"))

    if option.default is not None:
        text.append(" (default:", styler("name"))
        for value in option.default:
            text.append(f" {value}", styler("value"))
        text.append(")", styler("name"))

    if option.choices is not None:
        text.append(" (possible values:", styler("name"))
        for index, choice in enumerate(option.choices):
            text.append(" " if index == 0 else ", ", styler("name")).append(choice, styler("value"))
        text.append(")", styler("name"))

    if option.required:
        text.append(" (required)", styler("name"))

    if option.conflicts is not None:
        displays = {other.name: other.display for other in options}
        text.append(" (conflicting options:", styler("name"))
        for index, name in enumerate(option.conflicts):
            text.append(" " if index == 0 else ", ", styler("name")).append(displays.get(name, name), styler("value"))
        text.append(")", styler("name"))

    text.append("\n")
    return text.append_text(_lines(option.descr, styler))


def render_arguments(options=(), positionals=(), /, *, colorful=True):
    """
    ARGUMENTS section (only when positionals exist) followed by the OPTIONS
    section; the implicit help option always closes the list.
    """
    styler = _styler(colorful)
    text = Text()
    if positionals:
        text.append("ARGUMENTS\n", styler("section"))
        for positional in positionals:
            text.append("\n").append_text(render_positional(positional, colorful=colorful))
        text.append("\n")

    text.append("OPTIONS\n", styler("section"))
    for option in options:
        text.append("\n").append_text(render_option(option, options, colorful=colorful))
    text.append("\n").append_text(render_option(HELP_OPTION, colorful=colorful))
    return text


def render_help(info, options=(), positionals=(), /, *, colorful=True):
    return Text.assemble(
        render_name_version(info, colorful=colorful),
        "\n",
        render_description(info, colorful=colorful),
        "\n",
        render_usage(info, positionals, colorful=colorful),
        "\n",
        render_arguments(options, positionals, colorful=colorful),
        "\n",
    )


def render_suggestion(info, /, *, colorful=True):
    """
    "Use PROG --help for more information"; PROG defaults to the application
    name and can be overridden with __prog__ in __main__.
    """
    prog = getattr(__import__("__main__"), "__prog__", info.name)
    return Text.assemble("Use ", (f"{prog} --help", _styler(colorful)("name")), " for more information\n")


__all__ = (
    "HELP_OPTION",
    "render_name_version",
    "render_description",
    "render_usage",
    "render_positional",
    "render_option",
    "render_arguments",
    "render_help",
    "render_suggestion",
)
