# -*- coding: utf-8 -*-
"""Tests for the PostgREST gateway, using a stub requests session."""

import json as jsonlib

import pytest
import requests

from memopad.clients.store_client import MemoStoreError, RestMemoGateway, build_gateway
from memopad.config.settings import Settings

ROW_A = {
    "id": "a",
    "title": "Trip plan",
    "content": "Train",
    "created_at": "2026-10-15T10:00:00+00:00",
    "updated_at": None,
}


class StubResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else jsonlib.dumps(body))

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            return jsonlib.loads(self.text)
        return self._body


class StubSession:
    def __init__(self, *responses, error=None):
        self.headers = {}
        self.responses = list(responses)
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _gateway(session, timeout=None):
    return RestMemoGateway(
        store_url="https://demo.supabase.co/",
        store_key="secret-key",
        timeout_seconds=timeout,
        session=session,
    )


def test_session_headers_carry_key() -> None:
    session = StubSession()
    gw = _gateway(session)

    assert gw.base_url == "https://demo.supabase.co/rest/v1/memos"
    assert session.headers["apikey"] == "secret-key"
    assert session.headers["Authorization"] == "Bearer secret-key"


def test_load_all_requests_newest_first() -> None:
    session = StubSession(StubResponse(200, [ROW_A]))
    memos = _gateway(session, timeout=5.0).load_all()

    assert [m.id for m in memos] == ["a"]
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert kwargs["params"] == {"select": "*", "order": "created_at.desc"}
    assert kwargs["timeout"] == 5.0


def test_insert_sends_fields_and_asks_for_row() -> None:
    session = StubSession(StubResponse(201, ROW_A))
    memo = _gateway(session).insert("Trip plan", "Train")

    assert memo.title == "Trip plan"
    method, _, kwargs = session.requests[0]
    assert method == "POST"
    assert kwargs["json"] == {"title": "Trip plan", "content": "Train"}
    assert kwargs["headers"]["Prefer"] == "return=representation"
    assert kwargs["timeout"] is None


def test_update_targets_id_and_accepts_list_payload() -> None:
    updated = dict(ROW_A, title="Trip v2", updated_at="2026-10-16T00:00:00+00:00")
    session = StubSession(StubResponse(200, [updated]))

    memo = _gateway(session).update_by_id("a", "Trip v2", "Train", "2026-10-16T00:00:00+00:00")

    assert memo.title == "Trip v2"
    assert memo.updated_at == "2026-10-16T00:00:00+00:00"
    method, _, kwargs = session.requests[0]
    assert method == "PATCH"
    assert kwargs["params"]["id"] == "eq.a"
    assert kwargs["json"]["updated_at"] == "2026-10-16T00:00:00+00:00"


def test_update_zero_rows_is_not_found() -> None:
    body = {"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"}
    session = StubSession(StubResponse(406, body))

    with pytest.raises(MemoStoreError) as info:
        _gateway(session).update_by_id("gone", "T", "", "2026-10-16T00:00:00+00:00")

    assert info.value.not_found is True
    assert info.value.status_code == 406
    assert info.value.operation == "update_by_id"


def test_update_empty_list_payload_is_not_found() -> None:
    session = StubSession(StubResponse(200, []))
    with pytest.raises(MemoStoreError) as info:
        _gateway(session).update_by_id("gone", "T", "", "2026-10-16T00:00:00+00:00")
    assert info.value.not_found is True


def test_delete_uses_id_filter() -> None:
    session = StubSession(StubResponse(204, text=""))
    assert _gateway(session).delete_by_id("a") is None

    method, _, kwargs = session.requests[0]
    assert method == "DELETE"
    assert kwargs["params"] == {"id": "eq.a"}


def test_transport_error_is_chained() -> None:
    cause = requests.ConnectionError("connection refused")
    session = StubSession(error=cause)

    with pytest.raises(MemoStoreError) as info:
        _gateway(session).load_all()

    assert info.value.__cause__ is cause
    assert info.value.operation == "load_all"


def test_server_error_status() -> None:
    session = StubSession(StubResponse(500, {"message": "boom"}))
    with pytest.raises(MemoStoreError) as info:
        _gateway(session).insert("T", "")
    assert info.value.status_code == 500
    assert info.value.not_found is False


def test_unexpected_payload_is_store_error() -> None:
    session = StubSession(StubResponse(200, {"not": "a list"}))
    with pytest.raises(MemoStoreError):
        _gateway(session).load_all()

    session = StubSession(StubResponse(201, text="<html>oops</html>"))
    with pytest.raises(MemoStoreError) as info:
        _gateway(session).insert("T", "")
    assert isinstance(info.value.__cause__, ValueError)


def test_key_is_not_logged(caplog) -> None:
    session = StubSession(StubResponse(401, {"message": "bad key"}))
    with pytest.raises(MemoStoreError):
        _gateway(session).load_all()
    assert "secret-key" not in caplog.text


def test_build_gateway_from_settings() -> None:
    settings = Settings(
        store_url="https://demo.supabase.co",
        store_key="k",
        table="notes",
        timeout_seconds=3.0,
    )
    gw = build_gateway(settings)
    assert gw.base_url == "https://demo.supabase.co/rest/v1/notes"
    assert gw.timeout_seconds == 3.0


def test_non_text_title_in_payload_is_store_error() -> None:
    session = StubSession(StubResponse(200, [dict(ROW_A, title=123)]))
    with pytest.raises(MemoStoreError) as info:
        _gateway(session).load_all()
    assert isinstance(info.value.__cause__, ValueError)
