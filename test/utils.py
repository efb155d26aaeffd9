"""
Tests for the shared helpers.

This module verifies semantic guarantees of the utilities:
- The Unset sentinel (singleton identity, falsy semantics, finality).
- coalesce() preserving falsy values other than Unset.
- mirror() handing out copies of container state.
- ordinal() and suggest() used to phrase messages.
- IntrospectableType shaping entries and parameters.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from conch.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the module-level instance every time.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsyButDistinct(self) -> None:
        """
        Unset is falsy yet never equal to other falsy values.
        """
        self.assertFalse(Unset)
        for value in (None, 0, "", []):
            self.assertIsNot(Unset, value)
            self.assertNotEqual(Unset, value)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesPreserveIdentity(self) -> None:
        """
        Copy, deep copy and pickle round-trips yield the same instance.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):  # NOQA: F-841
                pass


class HelpersTest(TestCase):
    """
    Test suite for coalesce, mirror, ordinal and suggest.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, "fallback"))

    def testMirrorHandsOutCopies(self) -> None:
        """
        Mutating a mirrored container leaves the backing field untouched.
        """
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = {"a": [1, 2]}

        holder = Holder()
        view = holder.items
        view["a"].append(3)
        view["b"] = []
        self.assertEqual(holder.items, {"a": [1, 2]})

    def testMirrorIsReadOnly(self) -> None:
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = Unset

        holder = Holder()
        self.assertIsNone(holder.value)
        with self.assertRaises(AttributeError):
            holder.value = 1

    def testRename(self) -> None:
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(1, 2, 3)

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        for number, label in ((11, "11th"), (12, "12th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (113, "113th")):
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)

    def testSuggest(self) -> None:
        self.assertEqual(suggest("lsit", ["list", "echo"]), ["list"])
        self.assertEqual(suggest("zzz", ["list", "echo"]), [])


class IntrospectableTypeTest(TestCase):
    """
    Test suite for the metaclass shared by entries and parameters.
    """

    def testSharedByEntriesAndParameters(self):
        from conch import Directory, Parameter

        self.assertIsInstance(Directory, IntrospectableType)
        self.assertIsInstance(Parameter, IntrospectableType)

    def testShape(self):
        class SampleKind(metaclass=IntrospectableType):
            __introspectable__ = ("name", "tags")
            __displayable__ = ("name",)

            def __init__(self):
                self._name = "sample"
                self._tags = ["a"]

        sample = SampleKind()
        self.assertEqual(SampleKind.__typename__, "sample-kind")
        self.assertEqual(repr(sample), "sample-kind(name='sample')")
        sample.tags.append("b")
        self.assertEqual(sample.tags, ["a"])
        with self.assertRaises(AttributeError):
            sample.name = "other"

    def testSealed(self):
        class Closed(metaclass=IntrospectableType, sealed=True):
            pass

        with self.assertRaises(TypeError):
            class Subclass(Closed):  # NOQA: F-841
                pass


if __name__ == "__main__":
    unittest.main()
