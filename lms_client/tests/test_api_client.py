"""
HTTP adapter: error mapping and per-request credentials.
"""
from __future__ import annotations

import httpx
import pytest

from lms_client.api_client import ApiClient
from lms_client.errors import AuthError, NetworkError, ServerError


pytestmark = pytest.mark.anyio


async def test_bearer_token_is_bound_to_single_request(backend, api):
    backend.on("GET", "/author/get", json={"name": "Ann"})

    await api.request("GET", "/author/get", token="tok-1")
    await api.request("GET", "/author/get")

    first, second = backend.requests
    assert first.headers["Authorization"] == "Bearer tok-1"
    assert "Authorization" not in second.headers


async def test_server_error_prefers_message_field(backend, api):
    backend.on("GET", "/course/add", status=400, json={"message": "Title taken", "error": "Bad Request"})

    with pytest.raises(ServerError) as exc:
        await api.request("GET", "/course/add")

    assert exc.value.status_code == 400
    assert exc.value.message == "Title taken"


async def test_server_error_uses_string_body(backend, api):
    backend.on("GET", "/x", status=422, text="credits must be positive")

    with pytest.raises(ServerError) as exc:
        await api.request("GET", "/x")

    assert exc.value.message == "credits must be positive"


async def test_server_error_falls_back_to_status(backend, api):
    backend.on("GET", "/x", status=503, json={"error": "unavailable"})

    with pytest.raises(ServerError) as exc:
        await api.request("GET", "/x")

    assert exc.value.message == "status 503"


async def test_unauthorized_maps_to_auth_error(backend, api):
    backend.on("GET", "/learner/courses", status=401)

    with pytest.raises(AuthError) as exc:
        await api.request("GET", "/learner/courses", token="stale")

    assert exc.value.code == "unauthorized"


async def test_transport_failure_maps_to_network_error():
    def boom(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = ApiClient("http://lms.test", transport=httpx.MockTransport(boom))
    with pytest.raises(NetworkError) as exc:
        await client.request("GET", "/course/getAllCourses")
    await client.aclose()

    assert isinstance(exc.value.__cause__, httpx.ReadTimeout)


async def test_body_decoding(backend, api):
    backend.on("POST", "/empty", status=200)
    backend.on("POST", "/text", text="42")
    backend.on("POST", "/plain", text="profile.png")
    backend.on("GET", "/json", json=[{"id": 1}])

    assert await api.request("POST", "/empty") is None
    assert await api.request("POST", "/text") == 42
    assert await api.request("POST", "/plain") == "profile.png"
    assert await api.request("GET", "/json") == [{"id": 1}]
