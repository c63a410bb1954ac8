"""Tests for flexinject custom exceptions."""

import unittest

from flexinject.exceptions import (
    DependencyNotRegisteredError,
    DependencyTypeMismatchError,
    FlexInjectError,
    NotWeakReferenceableError,
    RegistrationError,
    ResolutionError,
)


class TestRegistrationError(unittest.TestCase):
    def test_can_be_raised_and_caught(self) -> None:
        with self.assertRaises(FlexInjectError):
            raise RegistrationError("bad registration")

    def test_message_is_preserved(self) -> None:
        err = RegistrationError("factory must be callable")
        self.assertEqual(str(err), "factory must be callable")


class TestResolutionError(unittest.TestCase):
    def test_key_defaults_to_none(self) -> None:
        err = ResolutionError("missing dep")
        self.assertEqual(str(err), "missing dep")
        self.assertIsNone(err.key)

    def test_not_registered_message(self) -> None:
        err = DependencyNotRegisteredError("app.Database")
        self.assertIsInstance(err, ResolutionError)
        self.assertEqual(err.key, "app.Database")
        self.assertEqual(str(err), "No dependency registered for 'app.Database'")

    def test_type_mismatch_message(self) -> None:
        err = DependencyTypeMismatchError("answer", str, int)
        self.assertIsInstance(err, ResolutionError)
        self.assertEqual(str(err), "Dependency registered for 'answer' is int, expected str")
        self.assertIs(err.expected_type, str)
        self.assertIs(err.actual_type, int)

    def test_not_weak_referenceable_message(self) -> None:
        err = NotWeakReferenceableError("port", int)
        self.assertIsInstance(err, ResolutionError)
        self.assertIn("cannot be weakly referenced", str(err))

    def test_all_derive_from_base(self) -> None:
        for cls in (
            RegistrationError,
            ResolutionError,
            DependencyNotRegisteredError,
            DependencyTypeMismatchError,
            NotWeakReferenceableError,
        ):
            self.assertTrue(issubclass(cls, FlexInjectError))


if __name__ == "__main__":
    unittest.main()
