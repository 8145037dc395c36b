import typing as t
from abc import ABC

from pydantic import BaseModel, ConfigDict, ValidationError

from objectdb.persistence.errors import DecodeError, EncodeError


ObjectT = t.TypeVar("ObjectT", bound="StoredObject")  # used to help static type checking tools


class StoredObject(BaseModel, ABC):
    """
    A pydantic model that can be persisted in an :class:`~objectdb.persistence.object_store.ObjectStore`. Subclasses
    declare their own fields, and must set the class-level :attr:`kind` tag, which names the variant in storage keys.
    Every field should have a default, so that calling the class with no arguments produces the variant's zero value.

    Each variant must have an ``id`` and a ``name`` field, or override the accessor methods below to map them onto its
    own fields. E.g.

    >>> class Plant(StoredObject):
    ...     kind: t.ClassVar[str] = "Plant"
    ...     id: str = ""
    ...     name: str = ""
    ...     genus: str = ""
    ...
    ... plant = Plant(id="p1", name="fern", genus="Polypodium")
    ... Plant.decode(plant.encode()) == plant  # True
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    kind: t.ClassVar[str] = ""
    """The variant's stable kind tag. Must be non-empty and must not contain ``":"``."""

    def get_kind(self) -> str:
        return type(self).kind

    def get_id(self) -> str:
        return self.id

    def set_id(self, id_: str):
        self.id = id_

    def get_name(self) -> str:
        return self.name

    def set_name(self, name: str):
        self.name = name

    def encode(self) -> bytes:
        """
        Serializes this object's fields to UTF-8 JSON. Only the variant's own fields are included; the kind tag is not
        part of the payload.
        """
        try:
            return self.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as exc:
            raise EncodeError(f"could not encode {self.get_kind()} object {self.get_id()!r}: {exc}") from exc

    @classmethod
    def decode(cls: t.Type[ObjectT], data: t.Union[bytes, str]) -> ObjectT:
        """
        Deserializes ``data``, which was produced by :meth:`encode`, into an instance of this variant. The payload must
        match this variant's field set; unknown fields are rejected.
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise DecodeError(f"payload does not match the {cls.kind} shape: {exc}") from exc
