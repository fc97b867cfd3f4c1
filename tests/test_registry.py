import unittest

from repcount.repdetect.extrema import ExtremumKind
from repcount.repdetect.registry import (
    ActionDescriptor,
    DescriptorRegistry,
    UnknownActionTypeError,
)
from repcount.signals.kinematics import Axis

MIN = ExtremumKind.MINIMUM
MAX = ExtremumKind.MAXIMUM


def squat() -> ActionDescriptor:
    return ActionDescriptor.build({"left_hip", "right_hip"}, [MIN, MAX], Axis.VERTICAL)


def jumping_jack() -> ActionDescriptor:
    return ActionDescriptor.build(["left_wrist"], [MAX, MIN], Axis.HORIZONTAL)


class DescriptorRegistryTests(unittest.TestCase):
    def test_lookup_returns_registered_descriptor(self) -> None:
        registry = DescriptorRegistry()
        registry.register("squat", squat())

        descriptor = registry.lookup("squat")
        self.assertEqual(descriptor.joints, frozenset({"left_hip", "right_hip"}))
        self.assertEqual(descriptor.pattern.tokens, (MIN, MAX))
        self.assertIs(descriptor.axis, Axis.VERTICAL)

    def test_lookup_of_unknown_type_raises(self) -> None:
        registry = DescriptorRegistry()
        with self.assertRaises(UnknownActionTypeError) as ctx:
            registry.lookup("plank")
        self.assertEqual(ctx.exception.action_type, "plank")
        self.assertIsInstance(ctx.exception, LookupError)

    def test_register_overwrites_existing_key(self) -> None:
        registry = DescriptorRegistry({"squat": squat()})
        registry.register("squat", jumping_jack())
        self.assertEqual(registry.lookup("squat"), jumping_jack())
        self.assertEqual(len(registry), 1)

    def test_register_many_merges_with_later_values_winning(self) -> None:
        registry = DescriptorRegistry({"squat": squat()})
        registry.register_many({"squat": jumping_jack(), "jumping_jack": jumping_jack()})

        self.assertEqual(sorted(registry), ["jumping_jack", "squat"])
        self.assertEqual(registry.lookup("squat"), jumping_jack())

    def test_unregister_reports_whether_key_existed(self) -> None:
        registry = DescriptorRegistry({"squat": squat()})
        self.assertTrue(registry.unregister("squat"))
        self.assertFalse(registry.unregister("squat"))
        self.assertNotIn("squat", registry)

    def test_registries_are_independent(self) -> None:
        first = DescriptorRegistry()
        second = DescriptorRegistry()
        first.register("squat", squat())
        self.assertIn("squat", first)
        self.assertNotIn("squat", second)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
