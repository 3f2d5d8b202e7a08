# memopad/clients/store_client.py
#
# Single integration layer for the hosted data service.
# Speaks the PostgREST dialect (what Supabase exposes under /rest/v1).
# One HTTP request per operation: no retries, no backoff.

import random
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from memopad.config.settings import Settings, load_settings
from memopad.memory.models import Memo
from memopad.utils.logging import get_logger

logger = get_logger(__name__)

# PostgREST signals "singular response requested but 0 rows matched" with this code.
PGRST_NO_ROWS = "PGRST116"

SINGLE_OBJECT_ACCEPT = "application/vnd.pgrst.object+json"


class MemoStoreError(RuntimeError):
    """
    External-store operation failed. The underlying cause is chained
    (raise ... from exc) when there is one.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: Optional[int] = None,
        not_found: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.not_found = not_found


class MemoGateway(ABC):
    """
    Data-access contract the memo store depends on.
    Implementations must raise MemoStoreError for every failure.
    """

    @abstractmethod
    def load_all(self) -> List[Memo]:
        """Every memo, newest first by created_at."""

    @abstractmethod
    def insert(self, title: str, content: str) -> Memo:
        """Insert a memo; the service assigns id and created_at."""

    @abstractmethod
    def update_by_id(self, memo_id: str, title: str, content: str, updated_at: str) -> Memo:
        """Update one memo; zero rows matched is a failure."""

    @abstractmethod
    def delete_by_id(self, memo_id: str) -> None:
        """Delete one memo."""


# ---------------------------------------------------------------------------
# Request ids for logs
# ---------------------------------------------------------------------------

def _mk_req_id(prefix: str = "req") -> str:
    return f"{prefix}_{int(time.time()*1000)}_{random.randint(1000, 9999)}"


def _error_code(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        code = body.get("code")
        return str(code) if code is not None else None
    return None


def _short_body(resp: requests.Response, limit: int = 300) -> str:
    text = resp.text or ""
    return text if len(text) <= limit else text[:limit] + "..."


class RestMemoGateway(MemoGateway):
    """
    MemoGateway over the PostgREST HTTP API, using a shared requests.Session.
    """

    def __init__(
        self,
        store_url: str,
        store_key: str,
        table: str = "memos",
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = f"{store_url.rstrip('/')}/rest/v1/{table}"
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": store_key,
            "Authorization": f"Bearer {store_key}",
            "User-Agent": "memopad/client (requests)",
        })

    # ---------- transport ----------

    def _request(
        self,
        operation: str,
        method: str,
        *,
        params: Dict[str, str],
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        req_id = _mk_req_id(operation)
        try:
            resp = self.session.request(
                method,
                self.base_url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("[%s] request_id=%s transport error: %s", operation, req_id, e)
            raise MemoStoreError(f"{operation} failed: {e}", operation=operation) from e

        if not resp.ok:
            code = _error_code(resp)
            not_found = code == PGRST_NO_ROWS
            logger.error(
                "[%s] request_id=%s status=%d code=%s body=%r",
                operation,
                req_id,
                resp.status_code,
                code,
                _short_body(resp),
            )
            raise MemoStoreError(
                f"{operation} failed with HTTP {resp.status_code}",
                operation=operation,
                status_code=resp.status_code,
                not_found=not_found,
            )

        logger.info("[%s] request_id=%s status=%d", operation, req_id, resp.status_code)
        return resp

    def _decode_memo(self, operation: str, resp: requests.Response) -> Memo:
        try:
            payload = resp.json()
            # Some deployments ignore the object Accept header and return a list.
            if isinstance(payload, list):
                if len(payload) != 1:
                    raise MemoStoreError(
                        f"{operation} expected one row, got {len(payload)}",
                        operation=operation,
                        status_code=resp.status_code,
                        not_found=not payload,
                    )
                payload = payload[0]
            return Memo.from_record(payload)
        except MemoStoreError:
            raise
        except ValueError as e:
            logger.error("[%s] undecodable response: %s", operation, e)
            raise MemoStoreError(
                f"{operation} returned an unexpected payload: {e}",
                operation=operation,
                status_code=resp.status_code,
            ) from e

    # ---------- MemoGateway ----------

    def load_all(self) -> List[Memo]:
        resp = self._request(
            "load_all",
            "GET",
            params={"select": "*", "order": "created_at.desc"},
        )
        try:
            payload = resp.json()
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
            return [Memo.from_record(row) for row in payload]
        except ValueError as e:
            logger.error("[load_all] undecodable response: %s", e)
            raise MemoStoreError(
                f"load_all returned an unexpected payload: {e}",
                operation="load_all",
                status_code=resp.status_code,
            ) from e

    def insert(self, title: str, content: str) -> Memo:
        resp = self._request(
            "insert",
            "POST",
            params={"select": "*"},
            json={"title": title, "content": content},
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT_ACCEPT},
        )
        return self._decode_memo("insert", resp)

    def update_by_id(self, memo_id: str, title: str, content: str, updated_at: str) -> Memo:
        resp = self._request(
            "update_by_id",
            "PATCH",
            params={"id": f"eq.{memo_id}", "select": "*"},
            json={"title": title, "content": content, "updated_at": updated_at},
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT_ACCEPT},
        )
        return self._decode_memo("update_by_id", resp)

    def delete_by_id(self, memo_id: str) -> None:
        self._request(
            "delete_by_id",
            "DELETE",
            params={"id": f"eq.{memo_id}"},
        )


def build_gateway(settings: Optional[Settings] = None) -> RestMemoGateway:
    """
    Build the REST gateway from configuration (.env / environment by default).
    """
    settings = settings or load_settings()
    logger.info("Memo store resolved to: %s (table=%s)", settings.store_url, settings.table)
    return RestMemoGateway(
        store_url=settings.store_url,
        store_key=settings.store_key,
        table=settings.table,
        timeout_seconds=settings.timeout_seconds,
    )
