# src/study_companion/core/notify.py

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field

from .ports import NoticeVariant

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Notice:
    title: str
    description: str = ""
    variant: NoticeVariant = "default"
    created_at: float = field(default_factory=time.time)

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class NoticeQueue:
    """
    Transient notices for the front-end.

    Notices are dismissed by draining; the queue is bounded so an unattended
    session never grows it without limit.
    """

    def __init__(self, maxlen: int = 32) -> None:
        self._items: deque[Notice] = deque(maxlen=maxlen)

    def push(self, title: str, description: str = "", variant: NoticeVariant = "default") -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self._items.append(notice)
        logger.debug("Notice pushed variant=%s title=%r", variant, title)
        return notice

    def pending(self) -> list[Notice]:
        return list(self._items)

    def drain(self) -> list[Notice]:
        out = list(self._items)
        self._items.clear()
        return out

    def __len__(self) -> int:
        return len(self._items)
