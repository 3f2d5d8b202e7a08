# memopad/core/memo_store.py

from typing import Callable, List, Optional

from memopad.clients.store_client import MemoGateway, MemoStoreError
from memopad.core.session import EditMode, EditSession, EditSessionError
from memopad.memory.models import Memo, normalize_fields, now_iso
from memopad.utils.logging import get_logger

logger = get_logger(__name__)


class MemoNotFoundError(LookupError):
    pass


def filter_memos(memos: List[Memo], search_text: str) -> List[Memo]:
    """
    Case-insensitive substring match over title or content.

    Blank search text returns the list as-is. Matching keeps the original
    relative order and never mutates `memos`.
    """
    if not (search_text or "").strip():
        return memos
    needle = search_text.lower()
    return [
        m for m in memos
        if needle in m.title.lower() or needle in m.content.lower()
    ]


class MemoStore:
    """
    In-memory memo list plus the view state around it.

    Every mutation goes to the gateway first; the local list changes only
    after the gateway returns, and always with the record the service sent
    back. Gateway failures are logged and leave the list untouched.
    """

    def __init__(self, gateway: MemoGateway) -> None:
        self.gateway = gateway
        self.memos: List[Memo] = []
        self.loading: bool = True
        self.search_text: str = ""
        self.session = EditSession()
        # Cause of the most recent failed store call; None after a success.
        self.last_error: Optional[MemoStoreError] = None

    # ---------- READS ----------

    def load(self) -> bool:
        """
        Replace the list with everything in the store, newest first.
        On failure the previous list is kept.
        """
        self.loading = True
        self.last_error = None
        try:
            memos = self.gateway.load_all()
        except MemoStoreError as e:
            self.last_error = e
            logger.error("load failed: %s", e)
            return False
        finally:
            self.loading = False

        self.memos = list(memos)
        logger.info("Loaded %d memos.", len(self.memos))
        return True

    def get(self, memo_id: str) -> Optional[Memo]:
        for memo in self.memos:
            if memo.id == memo_id:
                return memo
        return None

    def set_search(self, text: Optional[str]) -> None:
        self.search_text = text or ""

    def visible_memos(self) -> List[Memo]:
        return filter_memos(self.memos, self.search_text)

    # ---------- MUTATIONS ----------

    def create(self, title: str, content: str) -> Optional[Memo]:
        """
        Insert a memo and put the returned record first.

        Raises MemoValidationError (no request sent) for an empty title.
        Returns None when the store call fails.
        """
        title, content = normalize_fields(title, content)

        self.last_error = None
        try:
            memo = self.gateway.insert(title, content)
        except MemoStoreError as e:
            self.last_error = e
            logger.error("create failed: %s", e)
            return None

        self.memos = [memo] + self.memos
        logger.info("Created memo id=%s (total=%d).", memo.id, len(self.memos))
        return memo

    def update(self, memo_id: str, title: str, content: str) -> Optional[Memo]:
        """
        Update a memo and swap in the record the store returned.

        Raises MemoValidationError (no request sent) for an empty title.
        Returns None when the store call fails, including when the id no
        longer exists there.
        """
        title, content = normalize_fields(title, content)

        self.last_error = None
        try:
            memo = self.gateway.update_by_id(memo_id, title, content, now_iso())
        except MemoStoreError as e:
            self.last_error = e
            if e.not_found:
                logger.error("update failed: memo id=%s no longer exists in the store.", memo_id)
            else:
                logger.error("update failed for id=%s: %s", memo_id, e)
            return None

        self.memos = [memo if m.id == memo_id else m for m in self.memos]
        logger.info("Updated memo id=%s.", memo_id)
        return memo

    def delete(self, memo_id: str, confirm: Callable[[], bool]) -> bool:
        """
        Delete a memo once `confirm()` says yes.
        Declining sends nothing; a failed call keeps the entry.
        """
        if not confirm():
            logger.info("Delete of id=%s declined by user.", memo_id)
            return False

        self.last_error = None
        try:
            self.gateway.delete_by_id(memo_id)
        except MemoStoreError as e:
            self.last_error = e
            logger.error("delete failed for id=%s: %s", memo_id, e)
            return False

        self.memos = [m for m in self.memos if m.id != memo_id]
        logger.info("Deleted memo id=%s (total=%d).", memo_id, len(self.memos))
        return True

    # ---------- EDIT SESSION ----------

    def open_new(self) -> None:
        self.session.start_create()

    def open_edit(self, memo_id: str) -> Memo:
        memo = self.get(memo_id)
        if memo is None:
            raise MemoNotFoundError(f"No memo with id {memo_id!r}.")
        self.session.start_edit(memo)
        return memo

    def cancel_edit(self) -> None:
        self.session.clear()

    def submit(self, title: str, content: str) -> Optional[Memo]:
        """
        Send the open edit session to create or update.

        The session is cleared only on success. A store failure keeps it
        open so the user can submit again; a MemoValidationError propagates
        and also keeps it open.
        """
        if self.session.mode == EditMode.CREATING:
            result = self.create(title, content)
        elif self.session.mode == EditMode.EDITING and self.session.memo is not None:
            result = self.update(self.session.memo.id, title, content)
        else:
            raise EditSessionError("No edit session is open.")

        if result is not None:
            self.session.clear()
        return result
