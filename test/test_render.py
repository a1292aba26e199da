"""
Help rendering tests (byte-exact layout on plain text, palette handling).

Scope
- Validate every section of the help text against its exact plain form.
- Validate option annotations order and metavar decorations.
- Validate that declaration order is preserved in the rendered blocks.
- Validate palette overrides from __main__ and colorless rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is asserted on Text.plain; printing through Console.capture().
"""
import sys
import unittest
from unittest import TestCase, mock

from argyle import AppInfo, ArgumentParser, OptionSpec, PositionalSpec
from argyle import render
from argyle.render import *

INFO = AppInfo("tool", "Does things", (1, 2, 3))

OPTIONS = (
    OptionSpec("foo", short="-f", long="--foo", descr="Enable foo"),
    OptionSpec(
        "mode",
        short="-m",
        long="--mode",
        metavar="MODE",
        arity=1,
        default=["fast"],
        choices=["fast", "safe"],
        descr="Pick a mode\nfrom the list",
    ),
    OptionSpec("pair", short="-p", arity=2, required=True, conflicts=["foo"]),
)

POSITIONALS = (
    PositionalSpec("src", descr="Source file"),
    PositionalSpec("rest", metavar="FILE", descr="More files", capture=True),
)

HELP = (
    "tool 1.2.3\n"
    "\n"
    "Does things\n"
    "\n"
    "USAGE\n"
    "    tool [OPTION] SRC FILE [FILE...]\n"
    "\n"
    "ARGUMENTS\n"
    "\n"
    "    SRC\n"
    "        Source file\n"
    "\n"
    "    FILE\n"
    "        More files\n"
    "\n"
    "OPTIONS\n"
    "\n"
    "    -f, --foo\n"
    "        Enable foo\n"
    "\n"
    "    -m, --mode <MODE> (default: fast) (possible values: fast, safe)\n"
    "        Pick a mode\n"
    "        from the list\n"
    "\n"
    "    -p <ARG...> (required) (conflicting options: --foo)\n"
    "        \n"
    "\n"
    "    -h, --help\n"
    "        Display this and exit\n"
    "\n"
)


class TestRender(TestCase):
    """Behavioral tests for the render_* functions."""

    def testFullHelp(self):
        self.assertEqual(render_help(INFO, OPTIONS, POSITIONALS, colorful=False).plain, HELP)

    def testNameVersion(self):
        self.assertEqual(render_name_version(INFO).plain, "tool 1.2.3\n")

    def testDescription(self):
        self.assertEqual(render_description(INFO).plain, "Does things\n")

    def testUsageWithoutPositionals(self):
        self.assertEqual(render_usage(INFO).plain, "USAGE\n    tool [OPTION]\n")

    def testUsageWithoutCapture(self):
        self.assertEqual(render_usage(INFO, POSITIONALS[:1]).plain, "USAGE\n    tool [OPTION] SRC\n")

    def testArgumentsWithoutPositionals(self):
        self.assertEqual(
            render_arguments(OPTIONS[:1]).plain,
            "OPTIONS\n"
            "\n"
            "    -f, --foo\n"
            "        Enable foo\n"
            "\n"
            "    -h, --help\n"
            "        Display this and exit\n"
        )

    def testHelpOptionIsAlwaysLast(self):
        blocks = render_arguments(OPTIONS).plain.split("\n\n")
        self.assertEqual(blocks[-1], "    -h, --help\n        Display this and exit\n")

    def testMetavarByArity(self):
        self.assertEqual(render_option(OptionSpec("a", long="--all")).plain, "    --all\n        \n")
        self.assertEqual(render_option(OptionSpec("a", long="--all", arity=1)).plain.split("\n")[0], "    --all <ARG>")
        self.assertEqual(render_option(OptionSpec("a", long="--all", arity=3)).plain.split("\n")[0], "    --all <ARG...>")

    def testDefaultValuesAreSpaceSeparated(self):
        option = OptionSpec("size", short="-s", arity=2, default=["1", "2"])
        self.assertEqual(render_option(option).plain.split("\n")[0], "    -s <ARG...> (default: 1 2)")

    def testConflictsUseDisplayForms(self):
        options = (
            OptionSpec("a", short="-a", conflicts=["b", "c"]),
            OptionSpec("b", short="-b"),
            OptionSpec("c", short="-c", long="--cee"),
        )
        self.assertEqual(
            render_option(options[0], options).plain.split("\n")[0],
            "    -a (conflicting options: -b, --cee)"
        )

    def testDeclarationOrderRoundTrip(self):
        # re-derive the option forms from the rendered blocks
        text = render_arguments(OPTIONS, POSITIONALS, colorful=False).plain
        section = text.split("OPTIONS\n", 1)[1]
        heads = [block.split()[0].rstrip(",") for block in section.split("\n\n") if block.strip()]
        self.assertEqual(heads, [*(option.forms[0] for option in OPTIONS), "-h"])

        section = text.split("OPTIONS\n", 1)[0]
        metavars = [line.strip() for line in section.split("\n") if line.startswith("    ") and not line.startswith("        ")]
        self.assertEqual(metavars, [positional.metavar for positional in POSITIONALS])

    def testSuggestion(self):
        self.assertEqual(render_suggestion(INFO).plain, "Use tool --help for more information\n")

    def testSuggestionProgOverride(self):
        with mock.patch.object(sys.modules["__main__"], "__prog__", "python -m tool", create=True):
            self.assertEqual(render_suggestion(INFO).plain, "Use python -m tool --help for more information\n")

    def testColorlessHasNoSpans(self):
        self.assertEqual(render_help(INFO, OPTIONS, POSITIONALS, colorful=False).spans, [])

    def testColorfulHasStyles(self):
        text = render_name_version(INFO)
        self.assertEqual(str(text.spans[0].style), "bold bright_green")
        self.assertEqual(text.plain, render_name_version(INFO, colorful=False).plain)

    def testPaletteOverride(self):
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"name": "italic red"}, create=True):
            text = render_name_version(INFO)
        self.assertEqual(str(text.spans[0].style), "italic red")


class TestDisplay(TestCase):
    """Behavioral tests for the parser display methods."""

    def setUp(self):
        self.parser = ArgumentParser(INFO, OPTIONS, POSITIONALS, colorful=False)

    def capture(self, method):
        with render.console.capture() as capture:
            method()
        return capture.get()

    def testDisplayHelp(self):
        self.assertEqual(self.capture(self.parser.display_help), HELP)

    def testDisplaySections(self):
        self.assertEqual(self.capture(self.parser.display_name_version), "tool 1.2.3\n")
        self.assertEqual(self.capture(self.parser.display_description), "Does things\n")
        self.assertEqual(self.capture(self.parser.display_usage), "USAGE\n    tool [OPTION] SRC FILE [FILE...]\n")
        self.assertTrue(self.capture(self.parser.display_arguments).startswith("ARGUMENTS\n"))

    def testHelpMatchesRenderer(self):
        self.assertEqual(self.parser.help().plain, HELP)

    def testSuggestHelpGoesToErrorConsole(self):
        from argyle import faults

        with faults.console.capture() as capture:
            self.parser.suggest_help()
        self.assertEqual(capture.get(), "Use tool --help for more information\n")


if __name__ == '__main__':
    unittest.main()
