import typing as t


class ObjectStoreError(Exception):
    """Base class for all errors raised by the object store and its collaborators."""


class NotFound(ObjectStoreError):
    """No stored object matches the requested ID or name."""

    def __init__(self, field: str, value: str):
        super().__init__(f"object with {field} {value!r} not found")
        self.field = field
        self.value = value


class Malformed(ObjectStoreError):
    """A storage key does not parse as ``<kind>:<id>``."""

    def __init__(self, key: str):
        super().__init__(f"malformed key {key!r}: expected '<kind>:<id>'")
        self.key = key


class NotRegistered(ObjectStoreError):
    """A kind tag has no registered factory."""

    def __init__(self, kind: str):
        super().__init__(f"kind {kind!r} is not registered")
        self.kind = kind


class EncodeError(ObjectStoreError):
    """An object could not be serialized."""


class DecodeError(ObjectStoreError):
    """A stored payload could not be deserialized into its kind's shape."""


class BackendError(ObjectStoreError):
    """
    An operation on the backing key-value store failed. The original exception, if any, is available as
    ``__cause__``.

    Parameters
    ----------
    operation : str
        The key-value operation that failed, e.g. ``"set"`` or ``"scan"``.
    key : str, optional
        The key (or scan prefix) the operation was acting on.
    """

    def __init__(self, operation: str, key: t.Optional[str] = None, message: t.Optional[str] = None):
        detail = f"backend {operation} failed"
        if key is not None:
            detail += f" for {key!r}"
        if message:
            detail += f": {message}"
        super().__init__(detail)
        self.operation = operation
        self.key = key


class Cancelled(BackendError):
    """An operation was cancelled by the caller, or timed out in the back-end."""
