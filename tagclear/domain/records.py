"""Plain in-memory records returned by and given to the repository."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


class _NotLoaded:
    """Marker for a collection that was never populated from the store."""

    _instance: _NotLoaded | None = None

    def __new__(cls) -> _NotLoaded:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_LOADED"

    def __bool__(self) -> bool:
        return False


NOT_LOADED = _NotLoaded()


@dataclass(eq=False)
class TagRecord:
    name: str
    id: int | None = None
    user_id: int | None = None


TagCollection = Union[list[TagRecord], _NotLoaded]


@dataclass(eq=False)
class UserRecord:
    """A user and its tag collection.

    ``tags`` is ``NOT_LOADED`` until the collection is populated; an empty list
    means "populated and empty". ``loaded_tag_ids`` holds the tag ids persisted
    for this user the last time the collection was loaded or saved, and is the
    baseline the next save diffs against.
    """

    name: str
    tags: TagCollection | None = None
    id: int | None = None
    loaded_tag_ids: frozenset[int] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        # no collection given: empty for a new user, unknown for an existing one
        if self.tags is None:
            self.tags = NOT_LOADED if self.id is not None else []

    @property
    def tags_loaded(self) -> bool:
        return self.tags is not NOT_LOADED

    def previous_tag_ids(self) -> frozenset[int] | _NotLoaded:
        """Membership snapshot to diff against, or NOT_LOADED when unknown."""
        if self.id is None:
            return frozenset()
        if self.loaded_tag_ids is None:
            return NOT_LOADED
        return self.loaded_tag_ids

    def mark_loaded(self) -> None:
        if self.tags is NOT_LOADED:
            self.loaded_tag_ids = None
            return
        self.loaded_tag_ids = frozenset(tag.id for tag in self.tags if tag.id is not None)
