# src/study_companion/progress/store.py

"""
Progress store: single source of truth for syllabus completion.

Key invariants:
- the catalog (subjects, chapters, order) never changes, only `completed` flags do,
- every successful mutation writes the whole subject list under one key,
- nothing here raises outward: corrupt snapshots reseed, bad ids are no-ops,
  failed writes are logged and the in-memory state stays authoritative.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.numbers import percent
from ..core.ports import KeyValueStore
from .catalog import seed_subjects
from .models import LoadReason, LoadResult, Subject, decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_KEY = "syllabusProgress"

CatalogFactory = Callable[[], list[Subject]]


class ProgressStore:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_PROGRESS_KEY,
        catalog: CatalogFactory = seed_subjects,
    ) -> None:
        self._kv = kv
        self._key = key
        self._catalog = catalog
        self._subjects: list[Subject] = []
        self._load_result: LoadResult | None = None

    # ---- lifecycle ----

    def initialize(self) -> LoadResult:
        """
        Restore the persisted snapshot, or seed from the catalog.

        Idempotent: later calls return the first result without re-reading.
        """
        if self._load_result is not None:
            return self._load_result

        result = self._read_snapshot()
        if not result.restored:
            result.subjects = self._catalog()
            if result.reason is LoadReason.MISSING:
                logger.info("No saved progress under key=%s, seeding catalog.", self._key)
            else:
                logger.info(
                    "Saved progress unusable (%s: %s), seeding catalog.", result.reason, result.detail
                )

        self._subjects = result.subjects
        self._load_result = result
        logger.info(
            "ProgressStore ready source=%s subjects=%d chapters=%d completed=%d",
            result.source,
            len(self._subjects),
            self.total_chapters(),
            self.completed_chapters(),
        )
        return result

    def _read_snapshot(self) -> LoadResult:
        try:
            raw = self._kv.get(self._key)
        except Exception as e:
            return LoadResult.fallback(LoadReason.READ_ERROR, str(e))
        return decode_snapshot(raw)

    def _ensure_loaded(self) -> None:
        if self._load_result is None:
            self.initialize()

    def _persist(self) -> None:
        try:
            self._kv.put(self._key, encode_snapshot(self._subjects))
        except Exception:
            logger.exception("Failed to persist progress under key=%s", self._key)

    # ---- queries ----

    @property
    def subjects(self) -> list[Subject]:
        self._ensure_loaded()
        return list(self._subjects)

    @property
    def load_result(self) -> LoadResult:
        self._ensure_loaded()
        assert self._load_result is not None
        return self._load_result

    def get_subject(self, subject_id: str) -> Subject | None:
        self._ensure_loaded()
        for subject in self._subjects:
            if subject.id == subject_id:
                return subject
        return None

    def total_chapters(self) -> int:
        self._ensure_loaded()
        return sum(s.chapter_count for s in self._subjects)

    def completed_chapters(self) -> int:
        self._ensure_loaded()
        return sum(s.completed_count for s in self._subjects)

    def get_overall_progress(self) -> int:
        self._ensure_loaded()
        return percent(self.completed_chapters(), self.total_chapters())

    def get_subject_progress(self, subject_id: str) -> int:
        subject = self.get_subject(subject_id)
        if subject is None:
            return 0
        return percent(subject.completed_count, subject.chapter_count)

    def snapshot(self) -> list[dict]:
        self._ensure_loaded()
        return [s.to_dict() for s in self._subjects]

    # ---- mutations ----

    def toggle_chapter_completion(self, subject_id: str, chapter_id: str) -> bool:
        """Flip one chapter. Unknown ids are ignored. Returns True if state changed."""
        subject = self.get_subject(subject_id)
        chapter = subject.find_chapter(chapter_id) if subject is not None else None
        if chapter is None:
            logger.debug("Toggle ignored: unknown subject=%r chapter=%r", subject_id, chapter_id)
            return False

        chapter.completed = not chapter.completed
        logger.debug(
            "Toggled %s/%s -> completed=%s", subject_id, chapter_id, chapter.completed
        )
        self._persist()
        return True

    def reset_progress(self) -> None:
        self._ensure_loaded()
        self._subjects = self._catalog()
        logger.info("Progress reset to seed catalog.")
        self._persist()
