"""
Results module behavioral tests (ParseResult accessors and the Assembler).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase
from unittest.mock import patch

from cmdparse import (
    Assembler,
    DuplicateOptionError,
    DuplicatePolicy,
    Occurrence,
    Registry,
    UncastableValueError,
)


class TestParseResult(TestCase):
    """Behavioral tests for ParseResult accessors."""

    def setUp(self):
        self.registry = Registry(prog="tool")
        self.verbose = self.registry.flag("-v", "--verbose", repeatable=True)
        self.jobs = self.registry.option("-j", "--jobs")
        self.include = self.registry.option("-I", repeatable=True)
        self.quiet = self.registry.flag("-q")
        self.result = self.registry.parse(["-vv", "-j", "4", "-I", "a", "-I", "b", "file"])

    def testMappingKeysAreSpecs(self):
        self.assertEqual(list(self.result), [self.verbose, self.jobs, self.include])
        self.assertEqual(len(self.result), 3)

    def testMappingAcceptsNames(self):
        self.assertEqual(self.result["--jobs"], Occurrence(self.jobs, "4", 1))
        self.assertEqual(self.result["j"], self.result[self.jobs])
        self.assertIn("verbose", self.result)
        self.assertNotIn("q", self.result)

    def testUnknownNameRaisesKeyError(self):
        with self.assertRaises(KeyError):
            self.result["--nope"]
        self.assertIsNone(self.result.get("--nope"))

    def testPresenceAndCount(self):
        self.assertTrue(self.result.is_present("v"))
        self.assertFalse(self.result.is_present(self.quiet))
        self.assertEqual(self.result.count("verbose"), 2)
        self.assertEqual(self.result.count("q"), 0)

    def testValueOf(self):
        self.assertEqual(self.result.value_of("jobs"), "4")
        self.assertIsNone(self.result.value_of("verbose"))
        self.assertIsNone(self.result.value_of("q"))

    def testValueOfRepeatableIsTheLast(self):
        self.assertEqual(self.result.value_of("I"), "b")

    def testValuesOf(self):
        self.assertEqual(self.result.values_of("I"), ("a", "b"))
        self.assertEqual(self.result.values_of("jobs"), ("4",))
        self.assertEqual(self.result.values_of("q"), ())

    def testValueOrConverts(self):
        self.assertEqual(self.result.value_or("jobs", 1, type=int), 4)

    def testValueOrDefaultIsUntouched(self):
        result = self.registry.parse([])
        self.assertEqual(result.value_or("jobs", "many", type=int), "many")
        self.assertIsNone(result.value_or("jobs"))

    def testValueOrUncastable(self):
        result = self.registry.parse(["--jobs=four"])
        with self.assertRaises(UncastableValueError) as context:
            result.value_or("jobs", 1, type=int)
        self.assertEqual(context.exception.value, "four")
        self.assertIs(context.exception.option, self.jobs)

    def testValuesOrConvertsInOrder(self):
        result = self.registry.parse(["-I", "3", "-I=1", "-I2"])
        self.assertEqual(result.values_or("I", type=int), (3, 1, 2))

    def testValuesOrSingleValued(self):
        self.assertEqual(self.result.values_or("jobs", type=int), (4,))

    def testValuesOrDefaultIsUntouched(self):
        result = self.registry.parse([])
        self.assertEqual(result.values_or("I", type=int), ())
        self.assertEqual(result.values_or("I", ["x"], type=int), ["x"])

    def testValuesOrUncastable(self):
        result = self.registry.parse(["-I", "1", "-I", "two", "-I", "three"])
        with self.assertRaises(UncastableValueError) as context:
            result.values_or("I", type=int)
        self.assertEqual(context.exception.value, "two")
        self.assertIs(context.exception.option, self.include)

    def testValuesOrReturnsDefaultWhenFaultIsNotRaised(self):
        registry = Registry(prog="tool")
        registry.option("-n", repeatable=True)
        result = registry.parse(["-n", "x"])
        faults = []
        with patch.object(registry, "trigger", faults.append):
            self.assertEqual(result.values_or("n", (0,), type=int), (0,))
        self.assertEqual(faults, [UncastableValueError(option=registry.lookup("n"), value="x")])

    def testPositionals(self):
        self.assertEqual(self.result.positionals, ("file",))

    def testToDict(self):
        self.assertEqual(self.result.to_dict(), {"verbose": None, "jobs": "4", "I": ("a", "b")})

    def testNotHashable(self):
        with self.assertRaises(TypeError):
            hash(self.result)

    def testReprShowsOptions(self):
        self.assertIn("'jobs': '4'", repr(self.result))


class TestAssembler(TestCase):
    """Behavioral tests for the Assembler folding rules."""

    def setUp(self):
        self.registry = Registry(prog="tool")
        self.output = self.registry.option("-o")
        self.include = self.registry.option("-I", repeatable=True)
        self.include_optional = self.registry.option("-L", optional=True, repeatable=True)

    def testFirstOccurrence(self):
        assembler = Assembler()
        assembler.add(self.output, "x")
        self.assertEqual(assembler.build(self.registry)["o"], Occurrence(self.output, "x", 1))

    def testRepeatableStoresTuples(self):
        assembler = Assembler()
        assembler.add(self.include, "a")
        assembler.add(self.include, "b")
        self.assertEqual(assembler.build(self.registry)["I"], Occurrence(self.include, ("a", "b"), 2))

    def testRepeatableSkipsOmittedValues(self):
        assembler = Assembler()
        assembler.add(self.include_optional)
        assembler.add(self.include_optional, "x")
        self.assertEqual(assembler.build(self.registry)["L"], Occurrence(self.include_optional, ("x",), 2))

    def testErrorPolicy(self):
        assembler = Assembler(DuplicatePolicy.ERROR)
        assembler.add(self.output, "x", index=2, input="-o")
        with self.assertRaises(DuplicateOptionError) as context:
            assembler.add(self.output, "y", index=4, input="-o")
        self.assertEqual(context.exception.index, 4)

    def testCustomTriggerReceivesFaults(self):
        faults = []
        assembler = Assembler("error", trigger=faults.append)
        assembler.add(self.output, "x")
        assembler.add(self.output, "y")
        self.assertEqual(faults, [DuplicateOptionError(option=self.output)])
        self.assertEqual(assembler.build(self.registry).value_of("o"), "x")

    def testPositionalsKeepOrder(self):
        assembler = Assembler()
        for text in ("b", "a", "c"):
            assembler.positional(text)
        self.assertEqual(assembler.positionals, ("b", "a", "c"))
        self.assertEqual(assembler.build(self.registry).positionals, ("b", "a", "c"))


if __name__ == "__main__":
    unittest.main()
