"""
Tests for the referrer type endpoints.
"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from gac.storage.repo import DEFAULT_REFERRER_TYPES


def create_type(client, headers, name="Web", desc=None) -> dict:
    body = {"referrer_type_name": name}
    if desc is not None:
        body["referrer_type_desc"] = desc
    response = client.post("/referrer-types", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestListReferrerTypes:
    """GET /referrer-types"""

    def test_lists_seeded_defaults(self, client, user_headers):
        response = client.get("/referrer-types", headers=user_headers)

        assert response.status_code == 200
        names = {t["referrer_type_name"] for t in response.json()["data"]}
        assert names == {name for name, _ in DEFAULT_REFERRER_TYPES}

    def test_requires_authentication(self, client):
        assert client.get("/referrer-types").status_code == 401


class TestCreateReferrerType:
    """POST /referrer-types"""

    def test_admin_creates_type(self, client, admin_headers):
        data = create_type(client, admin_headers, name="Trade Show", desc="Met at an event")

        assert data["referrer_type_name"] == "Trade Show"
        assert data["referrer_type_desc"] == "Met at an event"

        detail = client.get(f"/referrer-types/{data['idreferrer_type']}", headers=admin_headers)
        assert detail.json()["data"] == {**data, "referrer_count": 0}

    def test_description_defaults_to_empty(self, client, admin_headers):
        assert create_type(client, admin_headers)["referrer_type_desc"] == ""

    def test_staff_is_forbidden(self, client, staff_headers):
        response = client.post(
            "/referrer-types", json={"referrer_type_name": "Web"}, headers=staff_headers
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Only administrators can create referrer types"

    def test_unauthenticated_is_401(self, client):
        response = client.post("/referrer-types", json={"referrer_type_name": "Web"})
        assert response.status_code == 401

    @pytest.mark.parametrize("body", [{}, {"referrer_type_name": ""}, {"referrer_type_desc": "x"}])
    def test_name_required(self, client, admin_headers, body):
        response = client.post("/referrer-types", json=body, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Referrer type name is required"

    def test_malformed_json(self, client, admin_headers):
        response = client.post(
            "/referrer-types",
            content=b"{'single': 'quotes'}",
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid JSON: ")


class TestGetReferrerType:
    """GET /referrer-types/{id}"""

    def test_referrer_count(self, client, admin_headers):
        for name in ("Acme", "Zeta"):
            client.post(
                "/referrers",
                json={"referrer_name": name, "referrer_type": 2},
                headers=admin_headers,
            )

        response = client.get("/referrer-types/2", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["referrer_type_name"] == "Website"
        assert data["referrer_count"] == 2

    def test_not_found(self, client, user_headers):
        response = client.get("/referrer-types/99999", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Referrer type not found"


class TestUpdateReferrerType:
    """PUT /referrer-types/{id}"""

    def test_admin_updates_type(self, client, admin_headers):
        created = create_type(client, admin_headers, desc="old")

        response = client.put(
            f"/referrer-types/{created['idreferrer_type']}",
            json={"referrer_type_name": "Web Form"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "idreferrer_type": created["idreferrer_type"],
            "referrer_type_name": "Web Form",
            "referrer_type_desc": "",
        }

    def test_not_found(self, client, admin_headers):
        response = client.put(
            "/referrer-types/99999",
            json={"referrer_type_name": "Web"},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_name_required(self, client, admin_headers):
        response = client.put(
            "/referrer-types/1", json={"referrer_type_desc": "x"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_staff_is_forbidden(self, client, staff_headers):
        response = client.put(
            "/referrer-types/1", json={"referrer_type_name": "Web"}, headers=staff_headers
        )
        assert response.status_code == 403


class TestDeleteReferrerType:
    """DELETE /referrer-types/{id}"""

    def test_admin_deletes_unused_type(self, client, admin_headers):
        created = create_type(client, admin_headers)

        response = client.delete(
            f"/referrer-types/{created['idreferrer_type']}", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Referrer type deleted successfully"

    def test_type_in_use_cannot_be_deleted(self, client, admin_headers):
        client.post(
            "/referrers",
            json={"referrer_name": "Acme", "referrer_type": 4},
            headers=admin_headers,
        )

        response = client.delete("/referrer-types/4", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Cannot delete this referrer type as it is used by one or more referrers"
        )
        detail = client.get("/referrer-types/4", headers=admin_headers)
        assert detail.status_code == 200
        assert detail.json()["data"]["referrer_count"] == 1

    def test_not_found(self, client, admin_headers):
        assert client.delete("/referrer-types/99999", headers=admin_headers).status_code == 404

    def test_staff_is_forbidden(self, client, staff_headers):
        assert client.delete("/referrer-types/1", headers=staff_headers).status_code == 403

    def test_wrong_method_is_405(self, client):
        assert client.patch("/referrer-types/1").status_code == 405


class TestReferrerTypeIdBounds:

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_too_large_id_is_client_error(self, client, admin_headers, method):
        response = client.request(
            method,
            "/referrer-types/99999999999999999999",
            json={"referrer_type_name": "Web"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestReferrerTypeFailedCommit:

    def test_create_is_not_applied(self, client, monkeypatch, admin_headers):
        def failing_commit(self):
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(Session, "commit", failing_commit)
        response = client.post(
            "/referrer-types", json={"referrer_type_name": "Trade Show"}, headers=admin_headers
        )
        assert response.status_code == 500
        assert response.json()["message"] == "Unable to create referrer type"

        monkeypatch.undo()
        listed = client.get("/referrer-types", headers=admin_headers).json()["data"]
        names = [t["referrer_type_name"] for t in listed]
        assert "Trade Show" not in names
