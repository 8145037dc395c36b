"""
The object model: the :class:`~objectdb.types.data.StoredObject` contract every persistable entity satisfies, and the
built-in variants in the :mod:`~objectdb.types.entities` module.
"""
