# memopad/api/server.py
"""
FastAPI server exposing the memo view model as a small local JSON API:

- /memos            : list (optionally filtered with ?q=) and create
- /memos/{memo_id}  : update and delete (delete needs ?confirm=true)
- /memos/reload     : re-fetch everything from the data service
- /health           : basic health check

Run with:
    uvicorn memopad.api.server:create_app --factory

The server holds one MemoStore; store failures come back as 502 and the
in-memory list is left exactly as it was.
"""

import uuid
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from memopad.clients.store_client import build_gateway
from memopad.core.memo_store import MemoStore, filter_memos
from memopad.memory.models import Memo, MemoValidationError
from memopad.utils.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class MemoWriteRequest(BaseModel):
    title: str = Field(..., description="Memo title; must not be blank after trimming.")
    content: str = Field("", description="Memo body; may be empty.")


class MemoResponse(BaseModel):
    id: str
    title: str
    content: str
    created_at: str
    updated_at: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    loading: bool
    count: int


def _to_response(memo: Memo) -> MemoResponse:
    return MemoResponse(**memo.to_dict())


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(store: Optional[MemoStore] = None) -> FastAPI:
    """
    Build the API around `store`. Without one, a REST-backed store is built
    from configuration and loaded once before serving.
    """
    if store is None:
        store = MemoStore(build_gateway())
        store.load()

    app = FastAPI(
        title="memopad API",
        description="Local API for listing, searching and editing memos.",
        version="1.0.0",
    )
    app.state.store = store

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        return HealthResponse(status="ok", loading=store.loading, count=len(store.memos))

    @app.get("/memos", response_model=List[MemoResponse])
    def list_memos(
        q: Optional[str] = Query(None, description="Case-insensitive text to look for in title/content"),
    ) -> List[MemoResponse]:
        return [_to_response(m) for m in filter_memos(store.memos, q or "")]

    @app.post("/memos", response_model=MemoResponse)
    def create_memo(req: MemoWriteRequest) -> MemoResponse:
        request_id = str(uuid.uuid4())
        try:
            memo = store.create(req.title, req.content)
        except MemoValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if memo is None:
            logger.error("[create_memo] request_id=%s store call failed", request_id)
            raise HTTPException(status_code=502, detail="Memo store failed to create the memo.")
        return _to_response(memo)

    @app.put("/memos/{memo_id}", response_model=MemoResponse)
    def update_memo(memo_id: str, req: MemoWriteRequest) -> MemoResponse:
        request_id = str(uuid.uuid4())
        if store.get(memo_id) is None:
            raise HTTPException(status_code=404, detail=f"No memo with id {memo_id!r}.")
        try:
            memo = store.update(memo_id, req.title, req.content)
        except MemoValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if memo is None:
            if store.last_error is not None and store.last_error.not_found:
                raise HTTPException(status_code=404, detail=f"Memo {memo_id!r} no longer exists in the store.")
            logger.error("[update_memo] request_id=%s memo_id=%s store call failed", request_id, memo_id)
            raise HTTPException(status_code=502, detail="Memo store failed to update the memo.")
        return _to_response(memo)

    @app.delete("/memos/{memo_id}", status_code=204)
    def delete_memo(
        memo_id: str,
        confirm: bool = Query(False, description="Must be true; deletion is not reversible."),
    ) -> None:
        if not confirm:
            raise HTTPException(status_code=400, detail="Deletion requires confirm=true.")
        if store.get(memo_id) is None:
            raise HTTPException(status_code=404, detail=f"No memo with id {memo_id!r}.")
        if not store.delete(memo_id, confirm=lambda: True):
            raise HTTPException(status_code=502, detail="Memo store failed to delete the memo.")

    @app.post("/memos/reload", response_model=HealthResponse)
    def reload_memos() -> HealthResponse:
        if not store.load():
            raise HTTPException(status_code=502, detail="Memo store failed to load memos.")
        return HealthResponse(status="ok", loading=store.loading, count=len(store.memos))

    return app
