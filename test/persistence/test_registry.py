import typing as t
from unittest import TestCase

from objectdb.persistence.errors import NotRegistered
from objectdb.persistence.registry import KindRegistry, default_registry
from objectdb.types.data import StoredObject
from objectdb.types.entities import Animal, Person


class Plant(StoredObject):
    kind: t.ClassVar[str] = "Plant"

    id: str = ""
    name: str = ""
    genus: str = ""


class TestKindRegistry(TestCase):
    def test_default_registry(self):
        registry = default_registry()
        self.assertEqual(sorted(registry.kinds()), ["Animal", "Person"])
        self.assertIs(registry.resolve("Person"), Person)
        self.assertIs(registry.resolve("Animal"), Animal)
        self.assertIn("Person", registry)
        self.assertNotIn("Plant", registry)

    def test_instantiate_gives_zero_value(self):
        registry = default_registry()
        obj = registry.instantiate("Animal")
        self.assertIsInstance(obj, Animal)
        self.assertEqual(obj, Animal())
        # Each call is a new instance.
        self.assertIsNot(obj, registry.instantiate("Animal"))

    def test_not_registered(self):
        registry = KindRegistry()
        self.assertEqual(len(registry), 0)
        with self.assertRaises(NotRegistered) as ctx:
            registry.instantiate("Person")
        self.assertEqual(ctx.exception.kind, "Person")
        with self.assertRaises(NotRegistered):
            registry.resolve("*main.Person")

    def test_can_register(self):
        registry = default_registry()
        registry.register("Plant", Plant)
        self.assertIs(registry.resolve("Plant"), Plant)
        # Registering the same factory again is fine.
        registry.register_class(Plant)
        self.assertEqual(len(registry), 3)

    def test_register_class_as_decorator(self):
        registry = KindRegistry()

        @registry.register_class
        class Rock(StoredObject):
            kind: t.ClassVar[str] = "Rock"
            id: str = ""
            name: str = ""

        self.assertIs(registry.resolve("Rock"), Rock)

    def test_invalid_kinds(self):
        registry = KindRegistry()
        with self.assertRaises(ValueError):
            registry.register("", Plant)
        with self.assertRaises(ValueError):
            registry.register("Pl:ant", Plant)
        registry.register("Plant", Plant)
        with self.assertRaises(ValueError):
            # Kind tags can't be taken over by another variant.
            registry.register("Plant", Person)
