# tests/unit/test_ats_client.py
import asyncio
import json

import httpx
import pytest

from src.api.schemas import ApplicationPayload, ContactPayload
from src.config.settings import Settings
from src.relay.ats_client import (
    AtsResponse,
    HttpAtsBackend,
    StubAtsBackend,
    UpstreamError,
    build_backend,
    extract_contact_id,
)

SETTINGS = Settings(
    ats_api_key="ats-key",
    ats_contact_url="https://ats.test/contacts",
    ats_application_url="https://ats.test/applications",
    environment="production",
)


def _contact():
    return ContactPayload(
        firstName="Jan", lastName="Jansen", email="jan@example.nl",
        phone="+31612345678", city="Utrecht", motivation="m", cv="Y3Y=",
    )

def _application():
    return ApplicationPayload(jobId="job-1", timestamp=1_700_000_000_000_000, contactId="c-1")

def _run_http(handler, coro_fn):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coro_fn(HttpAtsBackend(client, SETTINGS))
    return asyncio.run(go())


# ---- stub ----
def test_stub_contact_ids_never_collide():
    backend = StubAtsBackend()

    async def go():
        return [await backend.create_contact(_contact()) for _ in range(20)]

    ids = [extract_contact_id(r) for r in asyncio.run(go())]
    assert len(set(ids)) == len(ids)

def test_stub_application_echoes_payload():
    r = asyncio.run(StubAtsBackend().create_application(_application()))
    assert r.data == {"jobId": "job-1", "timestamp": 1_700_000_000_000_000, "contactId": "c-1"}


# ---- http ----
def test_http_contact_posts_json_with_bearer():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "abc"})

    r = _run_http(handler, lambda b: b.create_contact(_contact()))
    assert seen["url"] == "https://ats.test/contacts"
    assert seen["auth"] == "Bearer ats-key"
    assert seen["body"]["firstName"] == "Jan"
    assert r.status_code == 201
    assert r.data == {"id": "abc"}

def test_http_application_hits_application_url():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"stored": True})

    r = _run_http(handler, lambda b: b.create_application(_application()))
    assert seen["url"] == "https://ats.test/applications"
    assert r.data == {"stored": True}

def test_http_non_success_status_raises_upstream():
    handler = lambda request: httpx.Response(503, json={"error": "down"})
    with pytest.raises(UpstreamError) as ei:
        _run_http(handler, lambda b: b.create_contact(_contact()))
    assert ei.value.operation == "create_contact"
    assert "503" in str(ei.value)

def test_http_transport_error_raises_upstream():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError, match="connection refused"):
        _run_http(handler, lambda b: b.create_application(_application()))

def test_http_non_json_body_raises_upstream():
    handler = lambda request: httpx.Response(200, text="<html>ok</html>")
    with pytest.raises(UpstreamError):
        _run_http(handler, lambda b: b.create_contact(_contact()))


# ---- helpers ----
def test_extract_contact_id_requires_id():
    assert extract_contact_id(AtsResponse(200, {"id": 7})) == "7"
    for data in [{}, {"id": ""}, {"id": None}, [], "x"]:
        with pytest.raises(UpstreamError):
            extract_contact_id(AtsResponse(200, data))

def test_build_backend_by_environment():
    assert isinstance(build_backend(Settings(environment="development")), StubAtsBackend)

    async def go():
        async with httpx.AsyncClient() as client:
            return build_backend(SETTINGS, client)

    assert isinstance(asyncio.run(go()), HttpAtsBackend)

    with pytest.raises(ValueError):
        build_backend(SETTINGS)
