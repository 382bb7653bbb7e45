# tests/test_progress_store.py

from __future__ import annotations

import json

import pytest

from study_companion.progress.catalog import seed_subjects
from study_companion.progress.models import Chapter, LoadReason, LoadSource, Subject, decode_snapshot
from study_companion.progress.store import DEFAULT_PROGRESS_KEY, ProgressStore

from .fakes import InMemoryKeyValueStore


def subject_ids() -> list[str]:
    return [s.id for s in seed_subjects()]


def _complete(store: ProgressStore, subject_id: str, n: int) -> None:
    subject = store.get_subject(subject_id)
    assert subject is not None
    for chapter in subject.chapters[:n]:
        assert store.toggle_chapter_completion(subject_id, chapter.id)


def test_first_run_seeds_catalog(kv: InMemoryKeyValueStore) -> None:
    store = ProgressStore(kv)
    result = store.initialize()

    assert result.source is LoadSource.SEEDED
    assert result.reason is LoadReason.MISSING
    assert [s.id for s in store.subjects] == subject_ids()
    assert store.get_overall_progress() == 0
    assert store.total_chapters() == 106


def test_initialize_is_idempotent(kv: InMemoryKeyValueStore) -> None:
    store = ProgressStore(kv)
    first = store.initialize()
    kv.data[DEFAULT_PROGRESS_KEY] = "garbage"
    assert store.initialize() is first


def test_mathematics_example_half_done(store: ProgressStore) -> None:
    math = store.get_subject("mathematics")
    assert math is not None and math.chapter_count == 14
    assert store.get_subject_progress("mathematics") == 0

    _complete(store, "mathematics", 7)
    assert store.get_subject_progress("mathematics") == 50


def test_double_toggle_restores_every_chapter(store: ProgressStore) -> None:
    for subject in store.subjects:
        for chapter in subject.chapters:
            before = chapter.completed
            store.toggle_chapter_completion(subject.id, chapter.id)
            store.toggle_chapter_completion(subject.id, chapter.id)
            assert chapter.completed is before
    assert store.get_overall_progress() == 0


def test_toggle_unknown_ids_is_silent_noop(store: ProgressStore, kv: InMemoryKeyValueStore) -> None:
    before = store.snapshot()
    puts = len(kv.puts)

    assert store.toggle_chapter_completion("astrology", "real-numbers") is False
    assert store.toggle_chapter_completion("mathematics", "no-such-chapter") is False
    # Chapter id from another subject.
    assert store.toggle_chapter_completion("mathematics", "electricity") is False

    assert store.snapshot() == before
    assert len(kv.puts) == puts


def test_toggle_is_isolated_to_its_subject(store: ProgressStore) -> None:
    others_before = {s.id: [c.completed for c in s.chapters] for s in store.subjects if s.id != "mathematics"}

    _complete(store, "mathematics", 5)

    others_after = {s.id: [c.completed for c in s.chapters] for s in store.subjects if s.id != "mathematics"}
    assert others_after == others_before


def test_overall_progress_bounds(store: ProgressStore) -> None:
    assert store.get_overall_progress() == 0

    store.toggle_chapter_completion("science", "electricity")
    assert 0 < store.get_overall_progress() < 100  # 1/106 rounds to 1

    for subject in store.subjects:
        for chapter in subject.chapters:
            if not chapter.completed:
                store.toggle_chapter_completion(subject.id, chapter.id)
    assert store.get_overall_progress() == 100
    assert all(store.get_subject_progress(s) == 100 for s in subject_ids())


def test_overall_and_subject_use_same_rounding(kv: InMemoryKeyValueStore) -> None:
    # 1 of 8 = 12.5 -> 13 both overall and per subject (ties round up).
    catalog = lambda: [Subject("s", "S", "", "", [Chapter(f"c{i}", f"C{i}") for i in range(8)])]  # noqa: E731
    store = ProgressStore(kv, catalog=catalog)
    store.toggle_chapter_completion("s", "c0")
    assert store.get_subject_progress("s") == 13
    assert store.get_overall_progress() == 13


def test_zero_chapters_never_divides(kv: InMemoryKeyValueStore) -> None:
    store = ProgressStore(kv, catalog=lambda: [Subject("empty", "Empty", "", "")])
    assert store.get_subject_progress("empty") == 0
    assert store.get_overall_progress() == 0

    empty = ProgressStore(InMemoryKeyValueStore(), catalog=list)
    assert empty.get_overall_progress() == 0


def test_unknown_subject_progress_is_zero(store: ProgressStore) -> None:
    assert store.get_subject_progress("nope") == 0


def test_reset_restores_seed_and_persists(store: ProgressStore, kv: InMemoryKeyValueStore) -> None:
    _complete(store, "mathematics", 7)
    _complete(store, "hindi-kritika", 4)
    assert store.get_overall_progress() > 0

    store.reset_progress()

    assert store.get_overall_progress() == 0
    assert store.snapshot() == [s.to_dict() for s in seed_subjects()]
    assert json.loads(kv.data[DEFAULT_PROGRESS_KEY]) == store.snapshot()


def test_reset_gives_fresh_objects(store: ProgressStore) -> None:
    store.reset_progress()
    math = store.get_subject("mathematics")
    assert math is not None
    store.toggle_chapter_completion("mathematics", "polynomials")
    # A new seed must not see the previous toggle.
    assert not any(c.completed for c in seed_subjects()[0].chapters)


def test_every_toggle_persists_full_state(store: ProgressStore, kv: InMemoryKeyValueStore) -> None:
    store.toggle_chapter_completion("science", "electricity")
    key, value = kv.puts[-1]
    assert key == DEFAULT_PROGRESS_KEY
    data = json.loads(value)
    assert [s["id"] for s in data] == subject_ids()
    science = next(s for s in data if s["id"] == "science")
    assert next(c for c in science["chapters"] if c["id"] == "electricity")["completed"] is True


def test_restart_restores_persisted_state(kv: InMemoryKeyValueStore) -> None:
    first = ProgressStore(kv)
    _complete(first, "mathematics", 7)
    _complete(first, "english-footprints", 3)

    second = ProgressStore(kv)
    result = second.initialize()

    assert result.source is LoadSource.RESTORED
    assert second.snapshot() == first.snapshot()
    assert second.get_subject_progress("mathematics") == 50
    assert second.get_subject_progress("english-footprints") == 30


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        '{"subjects": []}',
        "[1, 2, 3]",
        '[{"id": "m", "name": "M", "chapters": "nope"}]',
        '[{"id": "m", "name": "M", "chapters": [{"id": "c", "name": "C", "completed": "yes"}]}]',
        '[{"id": "m", "name": "M", "chapters": []}, {"id": "m", "name": "M2", "chapters": []}]',
        '[{"id": "m", "name": "M", "chapters": [{"id": "c", "name": "C"}, {"id": "c", "name": "D"}]}]',
        "[" * 100_000 + "]" * 100_000,
    ],
)
def test_corrupt_snapshot_reseeds(payload: str) -> None:
    kv = InMemoryKeyValueStore({DEFAULT_PROGRESS_KEY: payload})
    store = ProgressStore(kv)
    result = store.initialize()

    assert result.source is LoadSource.SEEDED
    assert result.reason is LoadReason.MALFORMED
    assert [s.id for s in store.subjects] == subject_ids()
    assert store.get_overall_progress() == 0


def test_read_failure_reseeds() -> None:
    kv = InMemoryKeyValueStore()
    kv.fail_get = True
    store = ProgressStore(kv)
    result = store.initialize()
    assert result.reason is LoadReason.READ_ERROR
    assert len(store.subjects) == 7


def test_write_failure_keeps_memory_state(store: ProgressStore, kv: InMemoryKeyValueStore) -> None:
    kv.fail_put = True
    assert store.toggle_chapter_completion("mathematics", "probability") is True
    assert store.get_subject_progress("mathematics") == 7  # 1/14
    store.reset_progress()
    assert store.get_overall_progress() == 0


def test_operations_initialize_lazily(kv: InMemoryKeyValueStore) -> None:
    store = ProgressStore(kv)
    assert store.toggle_chapter_completion("mathematics", "circles") is True
    assert store.load_result.source is LoadSource.SEEDED


def test_snapshot_round_trip_preserves_order_and_flags(store: ProgressStore) -> None:
    _complete(store, "social-science", 11)
    store.toggle_chapter_completion("hindi-kshitij", "top")

    raw = json.dumps(store.snapshot(), ensure_ascii=False)
    result = decode_snapshot(raw)

    assert result.restored
    assert result.subjects == store.subjects
    assert [c.id for c in result.subjects[4].chapters] == [c.id for c in store.subjects[4].chapters]
