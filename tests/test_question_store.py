import random

import pytest

from conftest import FakeDocumentStore, ScriptedRandom
from errors import NotFound, StoreError
from question_store import QuestionStore


def test_fetch_returns_only_unasked_question():
    store = FakeDocumentStore()
    for n, key in ((1, 0.2), (2, 0.5), (3, 0.8)):
        store.add(f"q{n}", key=key)

    for seed in range(50):
        asked = ["q1", "q2"]
        doc, updated = QuestionStore(store, random.Random(seed)).fetch_unseen_question(asked)
        assert doc["_id"] == "q3"
        assert updated == ["q1", "q2", "q3"]
        assert asked == ["q1", "q2"]


def test_fetch_never_repeats_until_exhausted(fake_store):
    qs = QuestionStore(fake_store, random.Random(99))
    asked = []
    for _ in range(len(fake_store.docs)):
        doc, updated = qs.fetch_unseen_question(asked)
        assert doc["_id"] not in asked
        assert updated == asked + [doc["_id"]]
        asked = updated
    assert sorted(asked) == sorted(fake_store.docs)


def test_fetch_resets_to_singleton_when_all_asked(fake_store):
    everything = sorted(fake_store.docs)
    for seed in range(20):
        doc, updated = QuestionStore(fake_store, random.Random(seed)).fetch_unseen_question(
            everything
        )
        assert updated == [doc["_id"]]


def test_exhausted_reset_uses_first_row_of_retry(fake_store):
    # ascending from 0.35 first (q4..q7), then descending (q3, q2, q1)
    qs = QuestionStore(fake_store, ScriptedRandom([0.9, 0.35]))
    doc, updated = qs.fetch_unseen_question(sorted(fake_store.docs))
    assert fake_store.queries == [(False, 0.35), (True, 0.35)]
    assert doc["_id"] == "q3"
    assert updated == ["q3"]


def test_exhausted_reset_falls_back_to_first_query_when_retry_empty(fake_store):
    # ascending from 0.0 sees everything; descending from 0.0 sees nothing
    qs = QuestionStore(fake_store, ScriptedRandom([0.9, 0.0]))
    doc, updated = qs.fetch_unseen_question(sorted(fake_store.docs))
    assert len(fake_store.queries) == 2
    assert doc["_id"] == "q1"
    assert updated == ["q1"]


def test_empty_first_query_still_retries_opposite_direction(fake_store):
    # ascending from 0.99 is empty
    qs = QuestionStore(fake_store, ScriptedRandom([0.9, 0.99]))
    doc, updated = qs.fetch_unseen_question([])
    assert fake_store.queries == [(False, 0.99), (True, 0.99)]
    assert doc["_id"] == "q7"
    assert updated == ["q7"]


def test_single_query_when_unseen_found_first(fake_store):
    qs = QuestionStore(fake_store, ScriptedRandom([0.1, 0.45]))
    doc, updated = qs.fetch_unseen_question(["q4"])
    assert fake_store.queries == [(True, 0.45)]
    assert doc["_id"] == "q3"
    assert updated == ["q4", "q3"]


def test_no_questions_at_all_is_not_found():
    store = FakeDocumentStore()
    with pytest.raises(NotFound):
        QuestionStore(store, random.Random(1)).fetch_unseen_question([])
    assert len(store.queries) == 2


def test_store_error_on_first_query_aborts(fake_store):
    fake_store.fail_queries = {0}
    asked = ["q1"]
    with pytest.raises(StoreError):
        QuestionStore(fake_store, random.Random(3)).fetch_unseen_question(asked)
    assert len(fake_store.queries) == 1
    assert asked == ["q1"]


def test_store_error_on_retry_aborts(fake_store):
    fake_store.fail_queries = {1}
    with pytest.raises(StoreError):
        QuestionStore(fake_store, random.Random(3)).fetch_unseen_question(sorted(fake_store.docs))


def test_read_and_update_pass_through(fake_store):
    qs = QuestionStore(fake_store)
    doc = qs.read_document("q2")
    doc["timesAttempted"] = 4
    new_rev = qs.apply_update("q2", doc["_rev"], doc)
    assert new_rev.startswith("2-")
    assert qs.read_document("q2")["timesAttempted"] == 4
