"""Every error response shares one envelope."""

import pytest

pytestmark = pytest.mark.integration


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/orders/")
        assert response.status_code == 401
        data = response.json()
        assert data["type"] == "client_error"
        assert isinstance(data["errors"], list)
        assert data["errors"][0]["code"] == "not_authenticated"
        assert data["retryable"] is False

    def test_parse_error_has_standard_format(self, auth_client):
        response = auth_client.post(
            "/api/v1/orders/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "client_error"
        assert data["errors"][0]["code"] == "parse_error"

    def test_validation_error_lists_fields(self, auth_client):
        response = auth_client.post("/api/v1/orders/", {}, format="json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        attrs = {error["attr"] for error in data["errors"]}
        assert {"customer_email", "item_code", "quantity"} <= attrs
