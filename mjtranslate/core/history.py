import math
import time
from datetime import datetime, timezone
from threading import Lock
from typing import List, Optional

from mjtranslate.models.history import Category, HistoryPage, HistoryRecord

HISTORY_CAPACITY = 10


class HistoryStore:
    """内存中的翻译历史，最多保留最近 capacity 条，新记录在前。进程重启后丢失。"""

    def __init__(self, capacity: int = HISTORY_CAPACITY, clock=time.time):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._clock = clock
        self._records: List[HistoryRecord] = []
        self._last_id = 0
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _next_id(self) -> str:
        # 毫秒时间戳；同一毫秒内的记录顺延，保证唯一
        value = max(int(self._clock() * 1000), self._last_id + 1)
        self._last_id = value
        return str(value)

    def add(
        self,
        original_text: str,
        translated_text: str,
        language: str,
        category: Category = Category.GENERAL,
    ) -> HistoryRecord:
        with self._lock:
            record = HistoryRecord(
                id=self._next_id(),
                originalText=original_text,
                translatedText=translated_text,
                language=language,
                category=category,
                createdAt=datetime.now(timezone.utc),
            )
            self._insert(record)
        return record

    def append(self, record: HistoryRecord) -> HistoryRecord:
        with self._lock:
            self._insert(record)
        return record

    def _insert(self, record: HistoryRecord) -> None:
        self._records.insert(0, record)
        del self._records[self.capacity:]

    def get(self, record_id: str) -> Optional[HistoryRecord]:
        with self._lock:
            return next((r for r in self._records if r.id == record_id), None)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    return True
        return False

    def list(self, category: Optional[str] = None, page: int = 1, page_size: int = 20) -> HistoryPage:
        with self._lock:
            records = list(self._records)
        if category and category != "all":
            records = [r for r in records if r.category.value == category]
        return _paginate(records, page, page_size)

    def search(self, query: str, page: int = 1, page_size: int = 20) -> HistoryPage:
        term = query.strip().lower()
        with self._lock:
            records = list(self._records)
        matched = [
            r for r in records
            if term in r.originalText.lower() or term in r.translatedText.lower()
        ]
        return _paginate(matched, page, page_size)


def _paginate(records: List[HistoryRecord], page: int, page_size: int) -> HistoryPage:
    page = max(page, 1)
    page_size = max(page_size, 1)
    offset = (page - 1) * page_size
    return HistoryPage(
        records=records[offset:offset + page_size],
        total=len(records),
        page=page,
        page_size=page_size,
        pages=math.ceil(len(records) / page_size),
    )
