# memopad/core/session.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from memopad.memory.models import Memo


class EditMode(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"


class EditSessionError(RuntimeError):
    pass


@dataclass
class EditSession:
    """
    At most one open edit at a time: nothing, a new memo, or one existing memo.
    """
    mode: EditMode = EditMode.IDLE
    memo: Optional[Memo] = None

    @property
    def is_open(self) -> bool:
        return self.mode != EditMode.IDLE

    @property
    def is_editing(self) -> bool:
        return self.mode == EditMode.EDITING

    def _require_idle(self) -> None:
        if self.is_open:
            raise EditSessionError(
                f"An edit session is already open ({self.mode.value}); submit or cancel it first."
            )

    def start_create(self) -> None:
        self._require_idle()
        self.mode = EditMode.CREATING
        self.memo = None

    def start_edit(self, memo: Memo) -> None:
        self._require_idle()
        self.mode = EditMode.EDITING
        self.memo = memo

    def clear(self) -> None:
        self.mode = EditMode.IDLE
        self.memo = None

    def initial_fields(self) -> Tuple[str, str]:
        if self.memo is None:
            return "", ""
        return self.memo.title, self.memo.content
