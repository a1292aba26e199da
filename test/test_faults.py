"""
Faults module tests (codes, messages, rendering, triggering).

Scope
- Validate FaultCode grouping and host overrides (__codes__, __docs__).
- Validate each error kind's message and rendered form.
- Validate trigger() option merging, raising and shell exits.

Conventions
- Test method names follow CamelCase per project convention.
"""
import sys
import unittest
from unittest import TestCase, mock

from argyle import AppInfo, ArgumentParser, PositionalSpec
from argyle import faults
from argyle.faults import *


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNPARSED_ARGUMENTS.normalize(), "11141")

    def testNormalizeHonoursHostCodes(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.UNPARSED_ARGUMENTS: "E-LEFTOVER"}, create=True):
            self.assertEqual(FaultCode.UNPARSED_ARGUMENTS.normalize(), "E-LEFTOVER")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.REPEATED_OPTION))
        with mock.patch.object(sys.modules["__main__"], "__docs__", {FaultCode.REPEATED_OPTION: "once only"}, create=True):
            self.assertEqual(getdoc(FaultCode.REPEATED_OPTION), "once only")
        with self.assertRaises(TypeError):
            getdoc(11111)


class TestMessages(TestCase):
    """Behavioral tests for the error kinds."""

    def testMessages(self):
        self.assertEqual(UnparsedArgumentsError().message, "Too many arguments")
        self.assertEqual(MissingOptionArgumentError("--out").message, "Missing arguments for option --out")
        self.assertEqual(InvalidOptionArgumentError("x", "--mode").message, "Invalid argument x for option --mode")
        self.assertEqual(MissingPositionalError("FILE").message, "Missing argument FILE")
        self.assertEqual(MissingRequiredOptionError("--name").message, "Required option --name is not present")
        self.assertEqual(RepeatedOptionError("-v").message, "Option -v appears more than one time")
        self.assertEqual(ConflictingOptionsError("-q", "-v").message, "Options -q and -v can't both be active")

    def testKindsAreDistinguishable(self):
        kinds = (
            UnparsedArgumentsError,
            MissingOptionArgumentError,
            InvalidOptionArgumentError,
            MissingPositionalError,
            MissingRequiredOptionError,
            RepeatedOptionError,
            ConflictingOptionsError,
        )
        self.assertEqual(len({kind.code for kind in kinds}), len(kinds))
        for kind in kinds:
            self.assertTrue(issubclass(kind, ParserError))
        self.assertFalse(issubclass(HelpRequested, ParserError))
        self.assertTrue(issubclass(HelpRequested, ParserException))

    def testRenderWithoutTool(self):
        error = RepeatedOptionError("-v")
        self.assertEqual(error.__rich__().plain, "Error: Option -v appears more than one time\n")

    def testRenderWithTool(self):
        tool = ArgumentParser(AppInfo("tool"), colorful=False)
        error = MissingPositionalError("FILE", tool=tool)
        self.assertEqual(
            error.__rich__().plain,
            "Error: Missing argument FILE\nUse tool --help for more information\n"
        )

    def testRenderHighlightsSubjects(self):
        error = ConflictingOptionsError("-q", "-v", colorful=True)
        text = error.__rich__()
        styled = [text.plain[span.start:span.end] for span in text.spans if span.style == "bold bright_green"]
        self.assertEqual(styled, ["-q", "-v"])

    def testReplaceKeepsSubjects(self):
        import copy

        error = copy.replace(InvalidOptionArgumentError("x", "--mode"), shell=True)
        self.assertEqual(error.subjects, ("x", "--mode"))
        self.assertTrue(error.options["shell"])

    def testOptionsAreReadOnly(self):
        error = UnparsedArgumentsError(shell=False)
        with self.assertRaises(TypeError):
            error.options["shell"] = True


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def setUp(self):
        capture = faults.console.capture()
        capture.__enter__()
        self.addCleanup(capture.__exit__, None, None, None)

    def testTriggerRaisesMergedCopy(self):
        with self.assertRaises(UnparsedArgumentsError) as context:
            trigger(UnparsedArgumentsError(), colorful=False)
        self.assertFalse(context.exception.options["colorful"])

    def testTriggerExitsInShellMode(self):
        with self.assertRaises(SystemExit) as context:
            trigger(UnparsedArgumentsError(), shell=True)
        self.assertEqual(context.exception.code, 1)

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testParserTriggerAttachesTool(self):
        tool = ArgumentParser(AppInfo("tool"), positionals=(PositionalSpec("x"),), colorful=False)
        with self.assertRaises(MissingPositionalError) as context:
            tool.trigger(MissingPositionalError("X"))
        self.assertIs(context.exception.options["tool"], tool)

    def testSchemaErrorCarriesCode(self):
        error = SchemaError("bad", code=FaultCode.EMPTY_NAME, subject="x")
        self.assertIsInstance(error, ValueError)
        self.assertEqual(error.code, FaultCode.EMPTY_NAME)
        self.assertEqual(error.subject, "x")
        self.assertEqual(str(error), "bad")

    def testWarningHierarchy(self):
        self.assertTrue(issubclass(ShadowedOptionWarning, ParserWarning))
        self.assertTrue(issubclass(ParserWarning, Warning))
        self.assertEqual(ShadowedOptionWarning.code, FaultCode.SHADOWED_OPTION)


if __name__ == '__main__':
    unittest.main()
