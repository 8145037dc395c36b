"""
Storage keys. Every object is stored under ``"<kind>:<id>"``, so objects of different kinds share one namespace while
each kind still occupies its own prefix range.
"""
import typing as t

from objectdb.persistence.errors import Malformed


SEPARATOR = ":"


def encode_key(kind: str, id_: str) -> str:
    return f"{kind}{SEPARATOR}{id_}"


def decode_key(key: str) -> t.Tuple[str, str]:
    """
    Splits ``key`` on its first separator into ``(kind, id)``. The ID may itself contain separators. Raises
    :class:`~objectdb.persistence.errors.Malformed` if there is no separator at all.
    """
    kind, sep, id_ = key.partition(SEPARATOR)
    if not sep:
        raise Malformed(key)
    return kind, id_


def kind_prefix(kind: str) -> str:
    """The key prefix shared by all objects of ``kind``."""
    return f"{kind}{SEPARATOR}"


def prefix_upper_bound(prefix: str) -> t.Optional[str]:
    """
    An exclusive upper bound for the strings starting with ``prefix``, for back-ends that scan prefixes as
    ``[prefix, bound)`` ranges. Made by bumping the last character of ``prefix`` that can be bumped. Returns ``None``
    if no character can be bumped, in which case the range has no upper end.
    """
    for i in reversed(range(len(prefix))):
        code = ord(prefix[i]) + 1
        if 0xD800 <= code <= 0xDFFF:
            # Surrogates have no UTF-8 encoding.
            code = 0xE000
        if code <= 0x10FFFF:
            return prefix[:i] + chr(code)
    return None
