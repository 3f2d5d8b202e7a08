# memopad/memory/models.py

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoValidationError(ValueError):
    """
    Raised before any request is sent when memo fields are unacceptable
    (currently: an empty title).
    """


@dataclass
class Memo:
    id: str
    title: str
    content: str
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Memo":
        """
        Build a Memo from a row returned by the data service.
        Extra columns are ignored; id/title/created_at are mandatory.
        """
        if not isinstance(record, dict):
            raise ValueError(f"Memo record must be a JSON object, got {type(record).__name__}")

        missing = [key for key in ("id", "title", "created_at") if record.get(key) is None]
        if missing:
            raise ValueError(f"Memo record is missing required fields: {', '.join(missing)}")

        for key in ("title", "content"):
            value = record.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Memo field {key!r} must be text, got {type(value).__name__}")

        return cls(
            id=str(record["id"]),
            title=record["title"],
            content=record.get("content") or "",
            created_at=record["created_at"],
            updated_at=record.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalize_fields(title: Optional[str], content: Optional[str]) -> Tuple[str, str]:
    """
    Trim both fields; the title must still have something left afterwards.
    """
    cleaned_title = (title or "").strip()
    cleaned_content = (content or "").strip()
    if not cleaned_title:
        raise MemoValidationError("Memo title must not be empty.")
    return cleaned_title, cleaned_content
