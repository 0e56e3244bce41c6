"""
Utils module behavioral tests (sentinel, coalescing, freezing, ordinals).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from cmdparse.utils import Unset, UnsetType, coalesce, freeze, ordinal


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)

    def testSubclassingRejected(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesce(self):
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(Unset, 3), 3)
        self.assertEqual(coalesce(0, 3), 0)


class TestFreeze(TestCase):
    """Behavioral tests for freeze()."""

    def testSequencesBecomeTuples(self):
        self.assertEqual(freeze([1, 2]), (1, 2))

    def testMappingsBecomeProxies(self):
        self.assertIsInstance(freeze({"a": 1}), MappingProxyType)

    def testSetsBecomeFrozen(self):
        self.assertEqual(freeze({1}), frozenset({1}))

    def testStringsAreKept(self):
        self.assertEqual(freeze("abc"), "abc")


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal()."""

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
