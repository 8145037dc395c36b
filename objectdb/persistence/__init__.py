"""
Persistence for :class:`~objectdb.types.data.StoredObject` models. The :mod:`~objectdb.persistence.object_store`
module contains the store itself, which sits on top of any of the key-value back-ends in the
:mod:`~objectdb.persistence.kv_store` sub-package.
"""
