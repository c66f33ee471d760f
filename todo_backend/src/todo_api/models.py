from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the ``todos`` table as handed back by the store.

    Fields:
    - id: Unique integer identifier, assigned by the store
    - title: Free text, stored and returned unmodified
    - completed: Boolean completion flag
    """

    id: int
    title: str
    completed: bool
