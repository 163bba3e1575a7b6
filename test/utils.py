"""
Tests for the Unset and Present singletons and coalesce().

This module verifies semantic guarantees of the sentinels:
- Singleton identity (single instance per interpreter process).
- Truthiness and representation behavior.
- Rich rendering integration (Present only).
- Copying, deep copying, pickling, and thread safety properties.
- Finality (types cannot be subclassed).
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from argstruct.utils import *


class PresentTest(TestCase):
    """
    Test suite for the `PresentType` singleton.

    This suite asserts that:
    - PresentType() always returns the same instance (singleton).
    - The marker is truthy but not equal to True.
    - Copy/deepcopy/pickle round-trips preserve identity.
    - Concurrent construction attempts are safe and return the same instance.
    - The type is final and cannot be subclassed.
    """

    def setUp(self) -> None:
        self.present: PresentType = PresentType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.present, PresentType())
        self.assertIs(Present, self.present)

    def testTruthy(self) -> None:
        """
        The marker is truthy (a flag that was given is a positive signal).
        """
        self.assertTrue(self.present)
        self.assertNotEqual(self.present, True)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.present), "Present")
        self.assertEqual(str(self.present), "Present")

    def testRich(self) -> None:
        """
        __rich__() returns a dim green Text 'Present'.
        """
        self.assertEqual(self.present.__rich__(), Text("Present", style="dim green"))

    def testRichConsolePrint(self) -> None:
        """
        Console.print(...) renders 'Present' without ANSI when color is disabled.
        """
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(self.present)
        self.assertEqual(capture.get().strip(), "Present")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.present), self.present)
        self.assertIs(copy.deepcopy(self.present), self.present)
        self.assertIs(copy.deepcopy({"verbose": self.present})["verbose"], self.present)

    def testPickleRoundTrip(self) -> None:
        """
        Pickle round-trips preserve the identity of the singleton.
        """
        restored: PresentType = pickle.loads(pickle.dumps(self.present))
        self.assertIs(restored, self.present)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance (thread-safe singleton).
        """
        results: list[PresentType] = []
        lock: Lock = Lock()

        def worker():
            instance = PresentType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.present)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("PresentType", (PresentType,), {})


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` sentinel and coalesce().
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsy(self) -> None:
        """
        The sentinel is falsy but distinct from None and False.
        """
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testNotATypeOperand(self) -> None:
        """
        The sentinel is a value, not a type: it does not form unions.
        """
        with self.assertRaises(TypeError):
            Unset | str

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})

    def testCoalesce(self) -> None:
        """
        Only Unset is replaced; other falsy values are preserved.
        """
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


if __name__ == '__main__':
    unittest.main()
