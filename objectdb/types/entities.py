"""The built-in object variants."""
import typing as t
from datetime import datetime

from objectdb.types.data import StoredObject


class Person(StoredObject):
    kind: t.ClassVar[str] = "Person"

    name: str = ""
    id: str = ""
    last_name: str = ""
    birthday: str = ""  # free-form text, e.g. "01-01-1990"
    birth_date: t.Optional[datetime] = None


class Animal(StoredObject):
    kind: t.ClassVar[str] = "Animal"

    name: str = ""
    id: str = ""
    type: str = ""
    owner_id: str = ""
    """The ID of the :class:`Person` that owns this animal. Not validated, and not kept consistent by the store."""


BUILTIN_VARIANTS: t.Tuple[t.Type[StoredObject], ...] = (Person, Animal)
