"""
Tests for the REST datastore.
"""

import json

import httpx
import pytest

from feedbackhub.config import Settings
from feedbackhub.storage import InMemoryDatastore, RestDatastore, create_datastore
from feedbackhub.utils.error_handling import ConfigurationError, PersistenceError


def make_store(handler):
    """Build a RestDatastore whose HTTP calls go to `handler`."""
    client = httpx.AsyncClient(
        base_url="https://example.supabase.co/rest/v1",
        headers={"apikey": "test-key", "Authorization": "Bearer test-key"},
        transport=httpx.MockTransport(handler)
    )
    return RestDatastore("https://example.supabase.co/", "test-key", client=client)


@pytest.mark.asyncio
async def test_select_builds_query():
    """Filters, ordering and limits become PostgREST query parameters."""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=[{"id": 1, "content": "hi"}])

    store = make_store(handler)
    rows = await store.select("feedback", filters={"project_id": "p1"}, order="created_at.desc", limit=30)

    assert rows == [{"id": 1, "content": "hi"}]
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/feedback"
    assert request.url.params["select"] == "*"
    assert request.url.params["project_id"] == "eq.p1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["limit"] == "30"
    assert request.headers["apikey"] == "test-key"
    assert request.headers["authorization"] == "Bearer test-key"


@pytest.mark.asyncio
async def test_insert_returns_stored_row():
    """Inserts ask for the stored representation and return it."""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json=[{"id": 7, "name": "App"}])

    store = make_store(handler)
    row = await store.insert("projects", {"name": "App"})

    assert row == {"id": 7, "name": "App"}
    request = requests[0]
    assert request.method == "POST"
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == [{"name": "App"}]


@pytest.mark.asyncio
async def test_error_response_raises_persistence_error():
    """Datastore errors keep their message and code."""
    def handler(request):
        return httpx.Response(400, json={
            "code": "23502",
            "message": "null value in column \"name\"",
            "hint": None
        })

    store = make_store(handler)

    with pytest.raises(PersistenceError) as exc_info:
        await store.insert("projects", {})

    error = exc_info.value
    assert error.code == "23502"
    assert error.status_code == 500
    assert error.to_dict()["details"] == "null value in column \"name\""


@pytest.mark.asyncio
async def test_network_error_raises_persistence_error():
    """Transport failures are wrapped as persistence errors."""
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)

    with pytest.raises(PersistenceError) as exc_info:
        await store.select("feedback")

    assert exc_info.value.code == "NETWORK"
    assert "connection refused" in exc_info.value.details["reason"]


@pytest.mark.asyncio
async def test_non_json_reply_raises_persistence_error():
    """A 2xx reply that is not JSON (e.g. a proxy error page) is a persistence error."""
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    store = make_store(handler)

    with pytest.raises(PersistenceError) as exc_info:
        await store.select("feedback")

    assert exc_info.value.code == "BAD_RESPONSE"
    assert exc_info.value.to_dict()["details"].startswith("Response body is not JSON")


@pytest.mark.asyncio
async def test_non_list_reply_raises_persistence_error():
    """A JSON object where rows are expected is a persistence error."""
    def handler(request):
        return httpx.Response(201, json={"id": 7})

    store = make_store(handler)

    with pytest.raises(PersistenceError) as exc_info:
        await store.insert("projects", {"name": "App"})

    assert exc_info.value.code == "BAD_RESPONSE"


@pytest.mark.asyncio
async def test_ping_reports_each_table():
    """The health ping reports per-table status."""
    def handler(request):
        if request.url.path.endswith("/projects"):
            return httpx.Response(200, json=[])
        return httpx.Response(404, json={"code": "42P01", "message": "relation does not exist"})

    store = make_store(handler)
    status = await store.ping()

    assert status["projects"] == "connected"
    assert status["feedback"].startswith("error:")


def test_create_datastore_memory():
    """The memory backend needs no credentials."""
    store = create_datastore(Settings(datastore_backend="memory"))

    assert isinstance(store, InMemoryDatastore)


def test_create_datastore_rest_requires_credentials():
    """The REST backend refuses to start without a URL and key."""
    with pytest.raises(ConfigurationError):
        create_datastore(Settings(datastore_backend="rest", supabase_url="", supabase_key=""))


def test_create_datastore_unknown_backend():
    """Unknown backends are a configuration error."""
    with pytest.raises(ConfigurationError):
        create_datastore(Settings(datastore_backend="sqlite"))
