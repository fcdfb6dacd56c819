from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Storage(Protocol):
    """
    Key/value capability set the task core depends on.

    Values are opaque serialized records. Implementations must make each
    operation atomic per key; the most recent successful ``put`` on a key is
    what the next ``get`` returns.

    - get: raises NotFound when the key is absent
    - put: create-or-replace, raises StorageWriteError
    - post: create-only, raises StorageWriteError when the key already exists
    - delete: raises NotFound when the key is absent
    """

    def get(self, key: str) -> str: ...

    def put(self, key: str, value: str) -> None: ...

    def post(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
