"""
Key-value back-ends for the object store. Contains a base class defining the minimal contract the object store relies
on (set, get, delete, and prefix scans over byte-valued keys), as well as subclasses which allow an in-memory dict,
Redis, AWS DynamoDB, or Google Cloud Firestore to be used as the storage back-end. The non-memory back-ends each require
a package extra, e.g.

.. code-block::

   pip install objectdb[redis]
"""
from objectdb.persistence.kv_store.base import BaseKeyValueStore
from objectdb.persistence.kv_store.memory import InMemoryKeyValueStore
