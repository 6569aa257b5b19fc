import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.api_client import ApiClient
from app.services.visitor_service import VisitorService, get_visitor_service

BACKEND_URL = "http://backend.test/api"
VALID_CODE = "123456"


class FakeBackend:
    """
    In-memory stand-in for the Employ.me REST API.

    Users are keyed by email; a signed-in client is recognized by its bearer
    token. Every request is recorded in `calls` as (method, path, json body).
    """

    def __init__(self):
        self.users = {}
        self.tokens = {}
        self.calls = []
        self.fail_logout = False
        self.verification_code = VALID_CODE
        self._next_id = 1

    # ---- seeding ----

    def add_user(self, email, password="secret123", role="JOB_SEEKER", verified=True, has_profile=False,
                 first_name="Ama", last_name="Mensah"):
        user = {
            "id": str(self._next_id),
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "role": role,
            "isVerified": verified,
            "hasProfile": has_profile,
            "password": password,
        }
        self._next_id += 1
        self.users[email] = user
        return user

    def paths(self):
        return [path for _, path, _ in self.calls]

    # ---- transport ----

    def client(self, handler=None) -> ApiClient:
        return ApiClient(base_url=BACKEND_URL, transport=httpx.MockTransport(handler or self.handler))

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, body))

        route = {
            ("GET", "/auth/me"): self._me,
            ("POST", "/auth/login"): self._login,
            ("POST", "/auth/register"): self._register,
            ("POST", "/auth/logout"): self._logout,
            ("POST", "/auth/verify-email"): self._verify,
            ("POST", "/auth/resend-verification"): self._resend,
            ("POST", "/auth/forgot-password"): self._forgot,
            ("POST", "/auth/reset-password"): self._reset,
            ("POST", "/users/profile/job-seeker"): self._profile,
            ("POST", "/users/profile/employer"): self._profile,
        }.get((request.method, path))

        if route is None:
            return self._json(404, {"success": False, "message": "Route not found"})
        return route(request, body or {})

    # ---- helpers ----

    @staticmethod
    def _json(status, body):
        return httpx.Response(status, json=body)

    @staticmethod
    def _public(user):
        return {key: value for key, value in user.items() if key != "password"}

    def _current(self, request):
        auth = request.headers.get("Authorization", "")
        token = auth[len("Bearer "):] if auth.startswith("Bearer ") else None
        return self.tokens.get(token)

    def _signed_in(self, user, message):
        token = f"token-{user['id']}-{len(self.tokens)}"
        self.tokens[token] = user
        return self._json(200, {
            "success": True,
            "message": message,
            "data": {"user": self._public(user), "token": token},
        })

    # ---- endpoints ----

    def _me(self, request, body):
        user = self._current(request)
        if user is None:
            return self._json(401, {"success": False, "message": "Not authenticated"})
        return self._json(200, {"success": True, "data": {"user": self._public(user)}})

    def _login(self, request, body):
        user = self.users.get(body.get("email"))
        if user is None or user["password"] != body.get("password"):
            return self._json(401, {"success": False, "message": "Invalid email or password"})
        if not user["isVerified"]:
            return self._json(403, {
                "success": False,
                "message": "Please verify your email address before logging in. "
                           "Check your inbox for the verification link.",
            })
        return self._signed_in(user, "Login successful")

    def _register(self, request, body):
        if body.get("email") in self.users:
            return self._json(409, {"success": False, "message": "User already exists"})
        user = self.add_user(
            body["email"],
            password=body["password"],
            role=body.get("role", "JOB_SEEKER"),
            verified=False,
            first_name=body.get("firstName", ""),
            last_name=body.get("lastName", ""),
        )
        return self._json(201, {
            "success": True,
            "message": "Registration successful. Please check your email for the verification code.",
            "data": {"user": self._public(user)},
        })

    def _logout(self, request, body):
        if self.fail_logout:
            return self._json(500, {"success": False, "message": "Logout failed"})
        return self._json(200, {"success": True, "message": "Logged out successfully"})

    def _verify(self, request, body):
        pending = [user for user in self.users.values() if not user["isVerified"]]
        if body.get("code") != self.verification_code or not pending:
            return self._json(400, {"success": False, "message": "Invalid or expired verification code"})
        user = pending[-1]
        user["isVerified"] = True
        return self._signed_in(user, "Email verified successfully")

    def _resend(self, request, body):
        return self._json(200, {"success": True, "message": "Verification code sent"})

    def _forgot(self, request, body):
        return self._json(200, {
            "success": True,
            "message": "If an account exists, a reset code has been sent",
        })

    def _reset(self, request, body):
        if body.get("code") != VALID_CODE:
            return self._json(400, {"success": False, "message": "Invalid or expired reset code"})
        return self._json(200, {"success": True, "message": "Password reset successful"})

    def _profile(self, request, body):
        user = self._current(request)
        if user is None:
            return self._json(401, {"success": False, "message": "Not authenticated"})
        user["hasProfile"] = True
        user["profile"] = body
        return self._json(201, {"success": True, "message": "Profile created", "data": {"profile": body}})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def visitor_service(backend):
    return VisitorService(client_factory=backend.client)


@pytest.fixture
def client(visitor_service):
    app.dependency_overrides[get_visitor_service] = lambda: visitor_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
