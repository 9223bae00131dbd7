"""
Tests for application wiring - routing errors, request context, health.
"""


class TestRoutingErrors:

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Not found"}


class TestRequestContext:

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.headers["X-Request-ID"]

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
