from unittest.mock import patch

from squad.api.routes import ROUTES, Role


class TestHealth:

    def test_health_is_public(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["timestamp"]


class TestPreflight:

    def test_bare_options_on_any_path(self, client):
        for path in ("/api/events", "/api/attendance/whatever", "/api/nowhere/at/all"):
            response = client.options(path)
            assert response.status_code == 200
            assert response.json() == {}

    def test_cors_preflight_answers_with_allow_headers(self, client):
        response = client.options(
            "/api/events",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_cors_preflight_accepts_any_requested_header(self, client):
        response = client.options(
            "/api/events",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type, x-requested-with",
            },
        )
        assert response.status_code == 200
        assert "x-requested-with" in response.headers["access-control-allow-headers"].lower()

    def test_simple_request_carries_cors_header(self, client):
        response = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
        assert response.headers["access-control-allow-origin"] == "*"


class TestNotFound:

    def test_unknown_path(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_known_path_with_wrong_method(self, client):
        response = client.put("/api/events", json={})
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestServerError:

    def test_unexpected_fault_becomes_500(self, client, player, auth_headers):
        with patch(
            "squad.services.event_service.list_events_with_totals",
            side_effect=RuntimeError("boom"),
        ):
            response = client.get("/api/events", headers=auth_headers(player))

        assert response.status_code == 500
        assert response.json() == {"error": "Server error", "details": "boom"}

    def test_server_keeps_serving_after_a_fault(self, client, player, auth_headers):
        with patch("squad.services.event_service.list_events_with_totals", side_effect=RuntimeError("boom")):
            client.get("/api/events", headers=auth_headers(player))
        assert client.get("/api/events", headers=auth_headers(player)).status_code == 200


class TestRouteTable:

    def _role(self, method, path):
        return next(route.role for route in ROUTES if route.method == method and route.path == path)

    def test_admin_only_routes(self):
        admin_routes = {(route.method, route.path) for route in ROUTES if route.role == Role.ADMIN}
        assert admin_routes == {
            ("POST", "/events"),
            ("PATCH", "/events/{event_id}"),
            ("DELETE", "/events/{event_id}"),
            ("PATCH", "/users/{user_id}/status"),
        }

    def test_public_routes(self):
        assert self._role("POST", "/auth/login") == Role.PUBLIC
        assert self._role("POST", "/auth/register") == Role.PUBLIC
        assert self._role("GET", "/health") == Role.PUBLIC
        assert self._role("OPTIONS", "/{path:path}") == Role.PUBLIC

    def test_everything_else_needs_a_user(self):
        assert self._role("GET", "/auth/me") == Role.USER
        assert self._role("GET", "/events") == Role.USER
        assert self._role("POST", "/attendance/{event_id}") == Role.USER
        assert self._role("DELETE", "/attendance/{event_id}") == Role.USER
        assert self._role("GET", "/users") == Role.USER
