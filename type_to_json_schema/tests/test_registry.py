"""
Unit tests for interface detection and registrations.
"""

import unittest
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import NewType, Protocol

from type_to_json_schema import DiscriminatorRegistrationError, EnumRegistrationError, Reflector
from type_to_json_schema.registry import implements, is_interface, protocol_members


class Named(Protocol):
    name: str

    def greet(self) -> str: ...


class Animal(ABC):
    @abstractmethod
    def sound(self) -> str: ...


@dataclass
class Dog(Animal):
    name: str = ""

    def sound(self) -> str:
        return "woof"

    def greet(self) -> str:
        return f"I am {self.name}"


@dataclass
class Rock:
    weight: int = 0


class Level(Enum):
    LOW = 1
    HIGH = 2


Slug = NewType("Slug", str)


class TestInterfaces(unittest.TestCase):
    def test_is_interface(self):
        self.assertTrue(is_interface(Named))
        self.assertTrue(is_interface(Animal))
        self.assertFalse(is_interface(Dog))
        self.assertFalse(is_interface(Rock))
        self.assertFalse(is_interface(int))
        self.assertFalse(is_interface(Level))

    def test_protocol_members(self):
        self.assertEqual(protocol_members(Named), {"name", "greet"})

    def test_implements(self):
        self.assertTrue(implements(Dog, Animal))
        self.assertTrue(implements(Dog, Named))
        self.assertFalse(implements(Rock, Animal))
        self.assertFalse(implements(Rock, Named))
        self.assertFalse(implements("Dog", Named))

    def test_virtual_subclass(self):
        class Parrot:
            pass

        Animal.register(Parrot)
        self.assertTrue(implements(Parrot, Animal))


class TestRegisterEnum(unittest.TestCase):
    def test_register(self):
        reflector = Reflector()
        reflector.register_enum(Level, [Level.LOW, Level.HIGH])
        self.assertEqual(reflector.get_enum(Level).values, [Level.LOW, Level.HIGH])
        self.assertIsNone(reflector.get_enum(int))

    def test_value_type_must_match_exactly(self):
        reflector = Reflector()
        with self.assertRaises(EnumRegistrationError):
            reflector.register_enum(Level, [Level.LOW, 2])
        with self.assertRaises(EnumRegistrationError):
            reflector.register_enum(int, [True])
        self.assertEqual(reflector.enum_types, [])

    def test_new_type_values(self):
        reflector = Reflector()
        reflector.register_enum(Slug, ["a", "b"])
        self.assertEqual(reflector.reflect(Slug).to_dict(), {"enum": ["a", "b"], "default": "a"})


class TestRegisterDiscriminator(unittest.TestCase):
    def test_register(self):
        reflector = Reflector()
        reflector.register_discriminator(Animal, "kind", {"dog": Dog})
        discriminator = reflector.get_discriminator(Animal)
        self.assertEqual(discriminator.discriminator_field, "kind")
        self.assertEqual(discriminator.variants, {"dog": Dog})

    def test_base_must_be_interface(self):
        with self.assertRaises(DiscriminatorRegistrationError):
            Reflector().register_discriminator(Dog, "kind", {"dog": Dog})

    def test_variants_must_implement_base(self):
        reflector = Reflector()
        with self.assertRaises(DiscriminatorRegistrationError):
            reflector.register_discriminator(Named, "kind", {"dog": Dog, "rock": Rock})
        self.assertEqual(reflector.discriminated_types, [])


if __name__ == "__main__":
    unittest.main()
