from __future__ import annotations

import pytest

from tagclear.domain.reconcile import POLICIES, get_policy, keep_unloaded, replace_all
from tagclear.domain.records import NOT_LOADED, TagRecord, UserRecord


def _never_called():
    raise AssertionError("persisted ids should not be fetched")


def test_replace_all_with_loaded_previous_deletes_missing_ids():
    kept = TagRecord(name="B", id=2)
    new = TagRecord(name="D")
    plan = replace_all(frozenset({1, 2, 3}), [kept, new], fetch_persisted=_never_called)
    assert plan.deletes == frozenset({1, 3})
    assert plan.updates == (kept,)
    assert plan.inserts == (new,)


def test_empty_collection_over_loaded_previous_deletes_everything():
    for policy in POLICIES.values():
        plan = policy(frozenset({1, 2, 3}), [], fetch_persisted=_never_called)
        assert plan.deletes == frozenset({1, 2, 3})
        assert not plan.inserts and not plan.updates


def test_replace_all_fetches_persisted_ids_when_not_loaded():
    calls = []

    def fetch():
        calls.append(True)
        return [4, 5]

    plan = replace_all(NOT_LOADED, [], fetch_persisted=fetch)
    assert calls == [True]
    assert plan.deletes == frozenset({4, 5})


def test_keep_unloaded_leaves_persisted_rows_alone():
    new = TagRecord(name="X")
    plan = keep_unloaded(NOT_LOADED, [new], fetch_persisted=_never_called)
    assert plan.deletes == frozenset()
    assert plan.inserts == (new,)


def test_duplicates_are_planned_once():
    new = TagRecord(name="X")
    existing = TagRecord(name="Y", id=7)
    plan = replace_all(frozenset(), [new, new, existing, TagRecord(name="Y2", id=7)], fetch_persisted=_never_called)
    assert plan.inserts == (new,)
    assert [tag.id for tag in plan.updates] == [7]


def test_no_changes_gives_empty_plan():
    plan = replace_all(frozenset(), [], fetch_persisted=_never_called)
    assert plan.is_empty


def test_get_policy_rejects_unknown_names():
    assert get_policy(" Replace_All ") is replace_all
    with pytest.raises(ValueError):
        get_policy("cascade")


def test_previous_tag_ids_depends_on_record_state():
    assert UserRecord(name="new").previous_tag_ids() == frozenset()

    unloaded = UserRecord(name="u", id=1, tags=NOT_LOADED)
    assert unloaded.previous_tag_ids() is NOT_LOADED
    assert not unloaded.tags_loaded

    loaded = UserRecord(name="l", id=1, tags=[TagRecord(name="A", id=3)])
    loaded.mark_loaded()
    loaded.tags = []
    assert loaded.previous_tag_ids() == frozenset({3})
