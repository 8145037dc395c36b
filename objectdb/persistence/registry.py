import typing as t

from objectdb.persistence.errors import NotRegistered
from objectdb.persistence.keys import SEPARATOR
from objectdb.types.data import StoredObject
from objectdb.types.entities import BUILTIN_VARIANTS


ObjectFactory = t.Type[StoredObject]


class KindRegistry:
    """
    Maps kind tags to the :class:`~objectdb.types.data.StoredObject` subclasses they were stored from. The backing
    store only holds a key and a byte payload, so the kind recovered from the key is the only reliable way to know which
    concrete class a payload should be decoded into.
    """

    def __init__(self, factories: t.Iterable[ObjectFactory] = ()):
        self._factories: t.Dict[str, ObjectFactory] = {}
        for factory in factories:
            self.register_class(factory)

    def register(self, kind: str, factory: ObjectFactory):
        """
        Registers ``factory`` as the variant for ``kind``. ``factory`` must produce a zero-valued instance when called
        with no arguments, and provide a ``decode`` class method.
        """
        if not kind:
            raise ValueError("kind tags must be non-empty")
        if SEPARATOR in kind:
            raise ValueError(f"kind tag {kind!r} must not contain {SEPARATOR!r}")
        existing = self._factories.get(kind)
        if existing is not None and existing is not factory:
            raise ValueError(f"kind {kind!r} is already registered to {existing.__name__}")
        self._factories[kind] = factory

    def register_class(self, cls: ObjectFactory) -> ObjectFactory:
        """Registers ``cls`` under its own ``kind`` tag. Returns ``cls``, so this can be used as a class decorator."""
        self.register(cls.kind, cls)
        return cls

    def resolve(self, kind: str) -> ObjectFactory:
        try:
            return self._factories[kind]
        except KeyError:
            raise NotRegistered(kind) from None

    def instantiate(self, kind: str) -> StoredObject:
        """Returns a zero-valued instance of the variant registered for ``kind``."""
        return self.resolve(kind)()

    def kinds(self) -> t.List[str]:
        return list(self._factories)

    def __contains__(self, kind: object) -> bool:
        return kind in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def default_registry() -> KindRegistry:
    """A registry populated with all the built-in variants."""
    return KindRegistry(BUILTIN_VARIANTS)
