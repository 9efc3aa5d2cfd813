from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from fastapi.testclient import TestClient

from metin_analiz.adapters.gemini_provider import GeminiAnalysisProvider
from metin_analiz.adapters.memory_analysis_store import InMemoryAnalysisStore
from metin_analiz.api.app import create_app
from metin_analiz.core.analysis_requester import AnalysisRequester
from metin_analiz.domain.errors import ProviderError
from metin_analiz.domain.models import AnalysisPayload, AnalysisRecord


def _reply(summary: str = "Bu bir test cümlesidir.", sentiment: str = "Neutral") -> str:
    return json.dumps(
        {
            "summary": summary,
            "keyIdeas": ["Test", "Cümle", "Deneme"],
            "sentiment": sentiment,
            "rewrittenText": "Bu, bir deneme cümlesidir.",
        },
        ensure_ascii=False,
    )


class _FakeProvider:
    """Deterministic provider that counts calls and can be told to fail."""

    name = "fake"

    def __init__(self, reply: str | None = None) -> None:
        self.reply = reply if reply is not None else _reply()
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def generate(self, *, prompt: str, response_schema: dict[str, Any]) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def _client(
    provider: _FakeProvider | GeminiAnalysisProvider | None = None,
    store: InMemoryAnalysisStore | None = None,
) -> tuple[TestClient, InMemoryAnalysisStore]:
    effective_store = store if store is not None else InMemoryAnalysisStore()
    app = create_app(
        store=effective_store,
        requester=AnalysisRequester(provider if provider is not None else _FakeProvider()),
    )
    return TestClient(app), effective_store


def _seeded_store(analysis_id: str = "seeded") -> InMemoryAnalysisStore:
    store = InMemoryAnalysisStore()
    store.insert(
        AnalysisRecord(
            analysis_id=analysis_id,
            timestamp="2026-01-01T00:00:00+00:00",
            analysis=AnalysisPayload(
                summary="Eski özet.",
                key_ideas=("a", "b", "c"),
                sentiment="Negative",
                rewritten_text="Eski metin.",
            ),
        )
    )
    return store


def test_health_endpoint_returns_ok_payload() -> None:
    client, _ = _client()
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_openapi_lists_analysis_resource() -> None:
    client, _ = _client()
    payload = client.get("/openapi.json").json()
    assert payload["info"]["title"] == "metin_analiz API"
    assert set(payload["paths"]["/api/analyze"]) == {"get", "post", "put", "delete"}


def test_create_returns_201_record_with_location_header() -> None:
    client, store = _client()

    response = client.post("/api/analyze", json={"text": "Test cümlesi."})

    assert response.status_code == 201
    body = response.json()
    assert isinstance(body["id"], str) and body["id"]
    datetime.fromisoformat(body["timestamp"])
    assert 3 <= len(body["analysis"]["keyIdeas"]) <= 5
    assert body["analysis"]["sentiment"] in {"Positive", "Negative", "Neutral"}
    assert set(body["analysis"]) == {"summary", "keyIdeas", "sentiment", "rewrittenText"}
    assert response.headers["location"] == f"/api/analyze?id={body['id']}"
    assert store.contains(body["id"])


def test_crud_lifecycle_round_trip() -> None:
    provider = _FakeProvider()
    client, _ = _client(provider)

    created = client.post("/api/analyze", json={"text": "İlk metin."}).json()
    analysis_id = created["id"]

    fetched = client.get("/api/analyze", params={"id": analysis_id})
    assert fetched.status_code == 200
    assert fetched.json() == created

    listed = client.get("/api/analyze")
    assert listed.status_code == 200
    assert listed.json() == {"analyses": [{"id": analysis_id, "timestamp": created["timestamp"]}]}

    provider.reply = _reply(summary="Güncel özet.", sentiment="Olumlu")
    updated = client.put("/api/analyze", json={"id": analysis_id, "text": "İkinci metin."})
    assert updated.status_code == 200
    updated_body = updated.json()
    assert updated_body["id"] == analysis_id
    assert updated_body["analysis"]["summary"] == "Güncel özet."
    assert updated_body["analysis"]["sentiment"] == "Positive"
    assert client.get("/api/analyze", params={"id": analysis_id}).json() == updated_body

    deleted = client.delete("/api/analyze", params={"id": analysis_id})
    assert deleted.status_code == 204
    assert deleted.content == b""
    missing = client.get("/api/analyze", params={"id": analysis_id})
    assert missing.status_code == 404
    assert client.get("/api/analyze").json() == {"analyses": []}


def test_list_is_insertion_ordered() -> None:
    client, _ = _client()
    ids = [client.post("/api/analyze", json={"text": f"Metin {n}"}).json()["id"] for n in range(3)]
    listed = client.get("/api/analyze").json()["analyses"]
    assert [item["id"] for item in listed] == ids


def test_get_unknown_id_returns_404_message() -> None:
    client, _ = _client()
    response = client.get("/api/analyze?id=doesnotexist")
    assert response.status_code == 404
    assert response.json() == {"message": "Analysis with id doesnotexist not found."}


def test_post_blank_or_missing_text_returns_400_without_provider_call() -> None:
    provider = _FakeProvider()
    client, store = _client(provider)

    for body in ({"text": "   "}, {"text": ""}, {}):
        response = client.post("/api/analyze", json=body)
        assert response.status_code == 400
        assert response.json() == {"message": '"text" field is required and cannot be empty.'}
    no_body = client.post("/api/analyze")
    assert no_body.status_code == 400

    assert provider.prompts == []
    assert len(store) == 0


def test_post_with_non_string_text_or_bad_json_returns_400() -> None:
    provider = _FakeProvider()
    client, _ = _client(provider)

    wrong_type = client.post("/api/analyze", json={"text": 42})
    bad_json = client.post(
        "/api/analyze",
        content=b'{"text": ',
        headers={"Content-Type": "application/json"},
    )

    assert wrong_type.status_code == 400
    assert wrong_type.json()["message"] == "Invalid request body."
    assert "text" in wrong_type.json()["error"]
    assert bad_json.status_code == 400
    assert bad_json.json()["message"] == "Invalid request body."
    assert provider.prompts == []


def test_post_provider_failure_returns_500_and_stores_nothing() -> None:
    provider = _FakeProvider()
    provider.error = ProviderError("Provider responded with HTTP 503.")
    client, store = _client(provider)

    response = client.post("/api/analyze", json={"text": "Metin"})

    assert response.status_code == 500
    assert response.json() == {
        "message": "Failed to analyze text.",
        "error": "Provider responded with HTTP 503.",
    }
    assert len(store) == 0


def test_post_schema_violation_returns_500_and_stores_nothing() -> None:
    client, store = _client(_FakeProvider(reply='{"summary": "eksik"}'))

    response = client.post("/api/analyze", json={"text": "Metin"})

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to analyze text."
    assert "missing fields" in body["error"]
    assert len(store) == 0


def test_missing_credential_returns_configuration_error_for_create_and_update(
    monkeypatch: Any,
) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    store = _seeded_store()
    client, _ = _client(GeminiAnalysisProvider(), store)

    created = client.post("/api/analyze", json={"text": "Metin"})
    updated = client.put("/api/analyze", json={"id": "seeded", "text": "Metin"})

    expected = {"message": "Internal Server Error: API key not configured."}
    assert created.status_code == 500
    assert created.json() == expected
    assert updated.status_code == 500
    assert updated.json() == expected
    assert len(store) == 1
    record = store.get("seeded")
    assert record is not None
    assert record.analysis.summary == "Eski özet."


def test_blank_text_is_rejected_before_missing_credential(monkeypatch: Any) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    client, _ = _client(GeminiAnalysisProvider())
    response = client.post("/api/analyze", json={"text": " "})
    assert response.status_code == 400


def test_put_validation_not_found_and_failure_paths() -> None:
    provider = _FakeProvider()
    store = _seeded_store()
    client, _ = _client(provider, store)

    missing_id = client.put("/api/analyze", json={"text": "x"})
    blank_text = client.put("/api/analyze", json={"id": "seeded", "text": "  "})
    unknown = client.put("/api/analyze", json={"id": "<missing>", "text": "x"})

    assert missing_id.status_code == 400
    assert missing_id.json() == {"message": '"id" field is required.'}
    assert blank_text.status_code == 400
    assert unknown.status_code == 404
    assert unknown.json() == {"message": "Analysis with id <missing> not found."}
    assert provider.prompts == []

    provider.error = ProviderError("Provider call timed out after 60 seconds.")
    failed = client.put("/api/analyze", json={"id": "seeded", "text": "Yeni"})
    assert failed.status_code == 500
    assert failed.json()["message"] == "Failed to update analysis."
    record = store.get("seeded")
    assert record is not None
    assert record.timestamp == "2026-01-01T00:00:00+00:00"


def test_delete_accepts_id_in_json_body() -> None:
    client, store = _client(store=_seeded_store("body-id"))
    response = client.request("DELETE", "/api/analyze", json={"id": "body-id"})
    assert response.status_code == 204
    assert not store.contains("body-id")


def test_delete_without_id_returns_400_and_unknown_returns_404() -> None:
    client, _ = _client()

    no_id = client.delete("/api/analyze")
    unknown = client.delete("/api/analyze", params={"id": "nope"})

    assert no_id.status_code == 400
    assert no_id.json() == {"message": '"id" parameter or body field is required.'}
    assert unknown.status_code == 404
    assert unknown.json() == {"message": "Analysis with id nope not found."}


def test_unsupported_method_returns_405_json() -> None:
    client, _ = _client()
    response = client.patch("/api/analyze", json={"text": "x"})
    assert response.status_code == 405
    assert response.json() == {"message": "Method Not Allowed"}
    assert "allow" in response.headers


def test_separate_apps_have_isolated_stores() -> None:
    first, _ = _client()
    second, _ = _client()
    created = first.post("/api/analyze", json={"text": "Sadece ilk"}).json()
    assert second.get("/api/analyze", params={"id": created["id"]}).status_code == 404


def test_cors_allows_local_dev_origin() -> None:
    client, _ = _client()
    response = client.options(
        "/api/analyze",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers.get("access-control-allow-origin") == "http://localhost:5173"


class _BrokenRequester:
    async def request(self, text: str) -> AnalysisPayload:
        raise ValueError("unexpected")


def test_unexpected_error_returns_generic_500_json() -> None:
    store = InMemoryAnalysisStore()
    app = create_app(store=store, requester=_BrokenRequester())
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/api/analyze", json={"text": "Merhaba."})

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Server Error."}
    assert len(store) == 0


def test_get_by_id_ignores_surrounding_whitespace() -> None:
    client, _ = _client(store=_seeded_store("abc"))

    response = client.get("/api/analyze", params={"id": " abc "})

    assert response.status_code == 200
    assert response.json()["id"] == "abc"
    blank = client.get("/api/analyze", params={"id": "   "})
    assert blank.status_code == 200
    assert [item["id"] for item in blank.json()["analyses"]] == ["abc"]
