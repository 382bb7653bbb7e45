# src/study_companion/progress/models.py

"""
Syllabus data model and the JSON snapshot format.

Snapshot format (one JSON array, written wholesale under a single key):

    [{"id": "...", "name": "...", "icon": "...", "color": "...",
      "chapters": [{"id": "...", "name": "...", "completed": false}, ...]}, ...]

Decoding never raises: it returns a LoadResult that says whether the data
was restored or whether the caller must fall back to the seed catalog.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


@dataclass(slots=True)
class Chapter:
    id: str
    name: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "completed": self.completed}


@dataclass(slots=True)
class Subject:
    id: str
    name: str
    icon: str
    color: str
    chapters: list[Chapter] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return sum(1 for c in self.chapters if c.completed)

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)

    def find_chapter(self, chapter_id: str) -> Chapter | None:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
            "chapters": [c.to_dict() for c in self.chapters],
        }


class LoadSource(StrEnum):
    RESTORED = "restored"
    SEEDED = "seeded"


class LoadReason(StrEnum):
    OK = "ok"
    MISSING = "missing"
    MALFORMED = "malformed"
    READ_ERROR = "read_error"


@dataclass(slots=True)
class LoadResult:
    source: LoadSource
    subjects: list[Subject]
    reason: LoadReason = LoadReason.OK
    detail: str = ""

    @property
    def restored(self) -> bool:
        return self.source is LoadSource.RESTORED

    @classmethod
    def fallback(cls, reason: LoadReason, detail: str = "") -> LoadResult:
        """Result that tells the caller to seed; subjects are filled in by the caller."""
        return cls(source=LoadSource.SEEDED, subjects=[], reason=reason, detail=detail)


def encode_snapshot(subjects: list[Subject]) -> str:
    return json.dumps([s.to_dict() for s in subjects], ensure_ascii=False)


class _Malformed(ValueError):
    pass


def _require_str(obj: dict[str, Any], key: str, *, where: str, default: str | None = None) -> str:
    val = obj.get(key, default)
    if not isinstance(val, str):
        raise _Malformed(f"{where}: '{key}' must be a string")
    return val


def _chapter_from_obj(obj: Any, *, where: str) -> Chapter:
    if not isinstance(obj, dict):
        raise _Malformed(f"{where}: chapter must be an object")
    completed = obj.get("completed", False)
    if not isinstance(completed, bool):
        raise _Malformed(f"{where}: 'completed' must be a boolean")
    return Chapter(
        id=_require_str(obj, "id", where=where),
        name=_require_str(obj, "name", where=where),
        completed=completed,
    )


def _subject_from_obj(obj: Any, *, where: str) -> Subject:
    if not isinstance(obj, dict):
        raise _Malformed(f"{where}: subject must be an object")
    subject_id = _require_str(obj, "id", where=where)
    raw_chapters = obj.get("chapters")
    if not isinstance(raw_chapters, list):
        raise _Malformed(f"{where}: 'chapters' must be a list")

    chapters = [
        _chapter_from_obj(c, where=f"{where}.chapters[{i}]") for i, c in enumerate(raw_chapters)
    ]
    ids = [c.id for c in chapters]
    if len(set(ids)) != len(ids):
        raise _Malformed(f"{where}: duplicate chapter id in subject {subject_id!r}")

    return Subject(
        id=subject_id,
        name=_require_str(obj, "name", where=where),
        icon=_require_str(obj, "icon", where=where, default=""),
        color=_require_str(obj, "color", where=where, default=""),
        chapters=chapters,
    )


def decode_snapshot(raw: str | None) -> LoadResult:
    """
    Parse a stored snapshot.

    Returns RESTORED with the subjects on success, otherwise a SEEDED fallback
    with an empty subject list and the reason (missing/malformed).
    """
    if raw is None or not raw.strip():
        return LoadResult.fallback(LoadReason.MISSING)

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        return LoadResult.fallback(LoadReason.MALFORMED, f"invalid JSON: {e}")

    if not isinstance(data, list):
        return LoadResult.fallback(LoadReason.MALFORMED, "top-level value must be a list")

    try:
        subjects = [_subject_from_obj(s, where=f"[{i}]") for i, s in enumerate(data)]
    except _Malformed as e:
        return LoadResult.fallback(LoadReason.MALFORMED, str(e))

    ids = [s.id for s in subjects]
    if len(set(ids)) != len(ids):
        return LoadResult.fallback(LoadReason.MALFORMED, "duplicate subject id")

    return LoadResult(source=LoadSource.RESTORED, subjects=subjects)
