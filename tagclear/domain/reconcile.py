"""Reconciliation of a replaced tag collection against what is persisted.

A policy receives the previous membership (a frozenset of tag ids, or
``NOT_LOADED`` when the collection was never materialized), the new collection
and a callable returning the ids currently persisted for the user. It returns a
``ReconcilePlan`` describing which rows to delete, insert and update.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol

from tagclear.domain.records import NOT_LOADED, TagRecord, _NotLoaded

FetchPersisted = Callable[[], Iterable[int]]


@dataclass(frozen=True)
class ReconcilePlan:
    deletes: frozenset[int] = frozenset()
    inserts: tuple[TagRecord, ...] = field(default_factory=tuple)
    updates: tuple[TagRecord, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.deletes or self.inserts or self.updates)


class ReconcilePolicy(Protocol):
    def __call__(
        self,
        previous: frozenset[int] | _NotLoaded,
        current: Iterable[TagRecord],
        *,
        fetch_persisted: FetchPersisted,
    ) -> ReconcilePlan: ...


def _plan(previous: frozenset[int], current: Iterable[TagRecord]) -> ReconcilePlan:
    inserts: list[TagRecord] = []
    updates: list[TagRecord] = []
    seen: set[int] = set()
    pending: set[int] = set()
    for tag in current:
        if tag.id is None:
            if id(tag) not in pending:
                pending.add(id(tag))
                inserts.append(tag)
        elif tag.id not in seen:
            seen.add(tag.id)
            updates.append(tag)
    return ReconcilePlan(
        deletes=frozenset(previous) - seen,
        inserts=tuple(inserts),
        updates=tuple(updates),
    )


def replace_all(previous, current, *, fetch_persisted: FetchPersisted) -> ReconcilePlan:
    """Treat the new collection as the complete membership.

    When the previous collection was never loaded, the persisted ids are
    fetched so that tags missing from ``current`` are still deleted.
    """
    if previous is NOT_LOADED:
        previous = frozenset(fetch_persisted())
    return _plan(previous, current)


def keep_unloaded(previous, current, *, fetch_persisted: FetchPersisted) -> ReconcilePlan:
    """Only delete what was seen before; an unloaded collection deletes nothing."""
    if previous is NOT_LOADED:
        previous = frozenset()
    return _plan(previous, current)


POLICIES: dict[str, ReconcilePolicy] = {
    "replace_all": replace_all,
    "keep_unloaded": keep_unloaded,
}


def get_policy(name: str) -> ReconcilePolicy:
    key = (name or "").strip().lower()
    try:
        return POLICIES[key]
    except KeyError:
        raise ValueError(f"Unknown reconciliation policy {name!r}; expected one of {sorted(POLICIES)}") from None
