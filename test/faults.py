"""
Faults module behavioral tests (codes, equality, delivery, rendering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stderr
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from cmdparse import (
    AmbiguousGroupingError,
    EmptyInlineValueWarning,
    FaultCode,
    MissingValueError,
    ParseError,
    ParseWarning,
    Registry,
    UnknownOptionError,
    getdoc,
    trigger,
)


def render(fault):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(fault)
    return console.file.getvalue()


class TestFaultTypes(TestCase):
    """Codes, titles and tag-based equality."""

    def testEveryErrorIsAParseError(self):
        for error in (UnknownOptionError, MissingValueError, AmbiguousGroupingError):
            with self.subTest(error=error):
                self.assertTrue(issubclass(error, ParseError))

    def testWarningsAreWarnings(self):
        self.assertTrue(issubclass(EmptyInlineValueWarning, ParseWarning))
        self.assertTrue(issubclass(ParseWarning, Warning))

    def testCodeDefaultsToTheClass(self):
        self.assertIs(UnknownOptionError("x").code, FaultCode.UNKNOWN_OPTION)

    def testEqualityFollowsTags(self):
        self.assertEqual(
            AmbiguousGroupingError("one", cluster="ab", position=0, index=1),
            AmbiguousGroupingError("two", cluster="ab", position=0, index=7),
        )
        self.assertNotEqual(
            AmbiguousGroupingError(cluster="ab", position=0),
            AmbiguousGroupingError(cluster="ab", position=1),
        )
        self.assertNotEqual(UnknownOptionError(token="x"), MissingValueError(token="x"))

    def testHashFollowsEquality(self):
        self.assertEqual(hash(UnknownOptionError(token="x")), hash(UnknownOptionError("other", token="x")))

    def testNormalizeUsesHostCodes(self):
        main = sys.modules["__main__"]
        with patch.object(main, "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11112")

    def testGetdocReadsHostDocs(self):
        main = sys.modules["__main__"]
        with patch.object(main, "__docs__", {FaultCode.MISSING_VALUE: "give it a value"}, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_VALUE), "give it a value")
            self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))

    def testGetdocRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11111)


class TestDelivery(TestCase):
    """trigger() in library and shell modes."""

    def testErrorsAreRaised(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("boom", token="x"), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")
        self.assertEqual(context.exception.message, "boom")

    def testWarningsAreWarned(self):
        with self.assertWarns(EmptyInlineValueWarning):
            trigger(EmptyInlineValueWarning("empty", option=None))

    def testNonFaultRejected(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testShellErrorExits(self):
        registry = Registry(prog="tool", shell=True, colorful=False)
        registry.flag("-v", "--verbose")
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                registry.parse(["--verbos"])
        self.assertEqual(context.exception.code, 1)
        output = stderr.getvalue()
        self.assertIn("usage", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("--verbose", output)

    def testShellWarningDoesNotExit(self):
        registry = Registry(prog="tool", shell=True, colorful=False)
        registry.option("-o")
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            result = registry.parse(["-o="])
        self.assertEqual(result.value_of("o"), "")
        self.assertIn("Empty Inline Value", stderr.getvalue())


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testHeaderMessageAndHint(self):
        output = render(UnknownOptionError(
            "unknown option '--x' at first position",
            token="x",
            prog="tool",
            hint="run 'tool --help'",
        ))
        self.assertIn("tool", output)
        self.assertIn("11111", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("unknown option '--x' at first position", output)
        self.assertIn("run 'tool --help'", output)

    def testFancyUsesAPanel(self):
        output = render(MissingValueError("needs a value", option=None, prog="tool", fancy=True))
        self.assertIn("╭", output)
        self.assertIn("needs a value", output)

    def testPositionFirstMessages(self):
        registry = Registry(prog="tool")
        registry.option("-o")
        with self.assertRaises(MissingValueError) as context:
            registry.parse(["a", "b", "-o"])
        self.assertIn("at third position", context.exception.message)


if __name__ == "__main__":
    unittest.main()
