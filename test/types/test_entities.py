import json
from datetime import datetime, timezone
from unittest import TestCase

from objectdb.persistence.errors import DecodeError
from objectdb.types.entities import Animal, Person


class TestEntities(TestCase):
    def setUp(self):
        self.person = Person(
            id="123",
            name="John Doe",
            last_name="Doe",
            birthday="01-01-1990",
            birth_date=datetime(1990, 1, 1, tzinfo=timezone.utc),
        )
        self.animal = Animal(id="456", name="Rex", type="Dog", owner_id="123")

    def test_kind_comes_from_the_variant(self):
        self.assertEqual(self.person.get_kind(), "Person")
        self.assertEqual(self.animal.get_kind(), "Animal")
        # Not from the data.
        self.assertEqual(Person().get_kind(), "Person")
        self.assertEqual(Animal(type="Cat").get_kind(), "Animal")

    def test_zero_values(self):
        person = Person()
        self.assertEqual(person.get_id(), "")
        self.assertEqual(person.get_name(), "")
        self.assertIsNone(person.birth_date)
        self.assertEqual(Animal().owner_id, "")

    def test_accessors(self):
        animal = Animal()
        animal.set_id("789")
        animal.set_name("Tom")
        self.assertEqual(animal.get_id(), "789")
        self.assertEqual(animal.get_name(), "Tom")
        self.assertEqual(animal.id, "789")

    def test_can_encode_and_decode(self):
        for obj in [self.person, self.animal, Person(id="1")]:
            decoded = type(obj).decode(obj.encode())
            self.assertIsInstance(decoded, type(obj))
            self.assertEqual(obj, decoded)
            # An independent copy.
            self.assertIsNot(obj, decoded)

    def test_payload_has_no_kind_envelope(self):
        payload = json.loads(self.animal.encode())
        self.assertEqual(set(payload), {"name", "id", "type", "owner_id"})
        self.assertEqual(payload["owner_id"], "123")
        self.assertNotIn("kind", json.loads(self.person.encode()))

    def test_decode_rejects_other_shapes(self):
        with self.assertRaises(DecodeError):
            Person.decode(self.animal.encode())
        with self.assertRaises(DecodeError):
            Animal.decode(self.person.encode())
        with self.assertRaises(DecodeError):
            Person.decode(b"not json")
        with self.assertRaises(DecodeError):
            Person.decode(b'{"id": 5, "name": ["a"]}')
