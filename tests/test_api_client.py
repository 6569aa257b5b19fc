import asyncio

import httpx
import pytest

from app.core.exceptions import ApiError, ErrorKind
from app.services.api_client import ApiClient, classify_error

BASE_URL = "http://backend.test/api"


def client_for(handler):
    return ApiClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def test_classify_error_by_status():
    assert classify_error(400, {}) is ErrorKind.VALIDATION
    assert classify_error(401, {}) is ErrorKind.UNAUTHORIZED
    assert classify_error(403, {}) is ErrorKind.UNAUTHORIZED
    assert classify_error(409, {}) is ErrorKind.CONFLICT
    assert classify_error(500, {}) is ErrorKind.SERVER


def test_classify_error_prefers_machine_readable_code():
    assert classify_error(403, {"code": "EMAIL_NOT_VERIFIED"}) is ErrorKind.EMAIL_NOT_VERIFIED
    assert classify_error(403, {"errorCode": "EMAIL_NOT_VERIFIED"}) is ErrorKind.EMAIL_NOT_VERIFIED


def test_requests_go_to_base_url_with_json_body():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, json={"success": True, "data": {"ok": 1}})

    async def scenario():
        api = client_for(handler)
        body = await api.post("/auth/login", {"email": "a@b.co", "password": "x"})
        await api.close()
        return body

    body = asyncio.run(scenario())
    assert seen["url"] == "http://backend.test/api/auth/login"
    assert seen["content_type"] == "application/json"
    assert b'"email"' in seen["body"]
    assert body["data"] == {"ok": 1}


def test_bearer_token_is_sent_once_set_and_dropped_on_clear():
    headers = []

    def handler(request):
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"success": True})

    async def scenario():
        api = client_for(handler)
        await api.get("/auth/me")
        api.set_token("abc")
        await api.get("/auth/me")
        api.clear_credentials()
        await api.get("/auth/me")
        assert not api.has_token
        await api.close()

    asyncio.run(scenario())
    assert headers == [None, "Bearer abc", None]


def test_rejected_response_keeps_server_message():
    def handler(request):
        return httpx.Response(409, json={"success": False, "message": "User already exists"})

    async def scenario():
        api = client_for(handler)
        try:
            await api.post("/auth/register", {})
        finally:
            await api.close()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.message == "User already exists"
    assert exc_info.value.kind is ErrorKind.CONFLICT
    assert exc_info.value.status_code == 409


def test_rejected_response_without_message_uses_generic_text():
    def handler(request):
        return httpx.Response(500, text="<html>oops</html>")

    async def scenario():
        api = client_for(handler)
        try:
            await api.get("/auth/me")
        finally:
            await api.close()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.message == "An error occurred"
    assert exc_info.value.kind is ErrorKind.SERVER


def test_network_failure_is_a_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        api = client_for(handler)
        try:
            await api.get("/auth/me")
        finally:
            await api.close()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.kind is ErrorKind.NETWORK


def test_timeout_is_a_network_error():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    async def scenario():
        api = client_for(handler)
        try:
            await api.get("/auth/me")
        finally:
            await api.close()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.kind is ErrorKind.NETWORK
    assert exc_info.value.status_code == 504


def test_unreadable_success_body_is_a_server_error():
    def handler(request):
        return httpx.Response(200, text="not json")

    async def scenario():
        api = client_for(handler)
        try:
            await api.get("/auth/me")
        finally:
            await api.close()

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.kind is ErrorKind.SERVER


def test_empty_json_object_is_a_valid_body():
    async def scenario():
        api = client_for(lambda request: httpx.Response(200, json={}))
        body = await api.post("/auth/logout")
        await api.close()
        return body

    assert asyncio.run(scenario()) == {}
