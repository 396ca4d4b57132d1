# python
"""
Utilities behavioral tests (Unset, coalesce, mirror, ordinal, pluralize).

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from argosy.utils import *


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalseyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass


class TestCoalesce(TestCase):

    def testReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")


class TestMirror(TestCase):

    def testReadOnlyCopies(self):
        class Holder:
            items = mirror("items")
            pairs = mirror("pairs")

            def __init__(self):
                self._items = [1, [2]]
                self._pairs = (1, 2)

        holder = Holder()
        items = holder.items
        items[1].append(3)
        self.assertEqual(holder.items, [1, [2]])
        self.assertEqual(holder.pairs, (1, 2))
        with self.assertRaises(AttributeError):
            holder.items = []

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testNumericSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(101), "101st")

    def testRejectsNonIntegers(self):
        with self.assertRaises(TypeError):
            ordinal("1")
        with self.assertRaises(TypeError):
            ordinal(True)


class TestPluralize(TestCase):

    def testSingularKept(self):
        self.assertEqual(pluralize("positional", 1), "positional")

    def testRegularSuffixes(self):
        self.assertEqual(pluralize("positional", 2), "positionals")
        self.assertEqual(pluralize("box", 0), "boxes")
        self.assertEqual(pluralize("entry", 3), "entries")
        self.assertEqual(pluralize("key", 2), "keys")


if __name__ == "__main__":
    unittest.main()
