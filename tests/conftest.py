# tests/conftest.py

import os
import tempfile

# Keep test runs from writing into the project log directory.
os.environ.setdefault("MEMOPAD_LOG_DIR", tempfile.mkdtemp(prefix="memopad-logs-"))

import itertools
from typing import List, Optional

import pytest

from memopad.clients.store_client import MemoGateway, MemoStoreError
from memopad.core.memo_store import MemoStore
from memopad.memory.models import Memo


def make_memo(memo_id: str, title: str, content: str = "", created_at: str = "2026-10-16T09:00:00+00:00") -> Memo:
    return Memo(id=memo_id, title=title, content=content, created_at=created_at)


class FakeGateway(MemoGateway):
    """
    In-memory stand-in for the hosted data service.
    Set `fail_on` to an operation name (or "*") to make calls raise MemoStoreError.
    """

    def __init__(self, rows: Optional[List[Memo]] = None) -> None:
        self.rows: List[Memo] = list(rows or [])
        self.calls: List[tuple] = []
        self.fail_on: Optional[str] = None
        self._ids = itertools.count(100)
        self._clock = itertools.count(1)

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on in (operation, "*"):
            raise MemoStoreError(f"{operation} failed: simulated outage", operation=operation, status_code=503)

    def load_all(self) -> List[Memo]:
        self.calls.append(("load_all",))
        self._maybe_fail("load_all")
        return sorted(self.rows, key=lambda m: m.created_at, reverse=True)

    def insert(self, title: str, content: str) -> Memo:
        self.calls.append(("insert", title, content))
        self._maybe_fail("insert")
        memo = Memo(
            id=f"m{next(self._ids)}",
            title=title,
            content=content,
            created_at=f"2026-10-17T00:00:{next(self._clock):02d}+00:00",
        )
        self.rows.append(memo)
        return memo

    def update_by_id(self, memo_id: str, title: str, content: str, updated_at: str) -> Memo:
        self.calls.append(("update_by_id", memo_id, title, content, updated_at))
        self._maybe_fail("update_by_id")
        for idx, row in enumerate(self.rows):
            if row.id == memo_id:
                updated = Memo(
                    id=row.id,
                    title=title,
                    content=content,
                    created_at=row.created_at,
                    updated_at=updated_at,
                )
                self.rows[idx] = updated
                return updated
        raise MemoStoreError(
            "update_by_id failed with HTTP 406",
            operation="update_by_id",
            status_code=406,
            not_found=True,
        )

    def delete_by_id(self, memo_id: str) -> None:
        self.calls.append(("delete_by_id", memo_id))
        self._maybe_fail("delete_by_id")
        self.rows = [r for r in self.rows if r.id != memo_id]


@pytest.fixture
def memo_a() -> Memo:
    return make_memo("a", "Trip plan", "Book the train to Busan", created_at="2026-10-15T10:00:00+00:00")


@pytest.fixture
def memo_b() -> Memo:
    return make_memo("b", "Recipe", "Kimchi stew: pork, tofu", created_at="2026-10-14T10:00:00+00:00")


@pytest.fixture
def gateway(memo_a, memo_b) -> FakeGateway:
    return FakeGateway([memo_b, memo_a])


@pytest.fixture
def store(gateway) -> MemoStore:
    s = MemoStore(gateway)
    assert s.load()
    gateway.calls.clear()
    return s
