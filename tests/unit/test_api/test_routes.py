"""
Unit tests for API routes
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from api.app import app
from api.routes import get_budget_manager
from utils.exceptions import DatabaseError, ErrorCodes
from tests.factories import QuoteFactory

API = "/api/v1"


@pytest.fixture
def quote_id(client):
    response = client.post(f"{API}/quotes", json={"customer_name": "Ana García", "quote_date": "2024-01-15T10:00:00"})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.unit
class TestAppEndpoints:
    """Test cases for the application level endpoints"""

    def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = client.get("/")
        assert response.status_code == 200
        assert "Budget API" in response.json()["message"]

    def test_health_check_endpoint(self, client):
        """Test health check endpoint"""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "version" in data

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Process-Time" in response.headers

    def test_choices(self, client):
        response = client.get(f"{API}/choices")
        assert response.status_code == 200
        data = response.json()
        assert data["categories"]["lente"] == "Lente"
        assert data["payment_methods"]["efectivo"] == "Efectivo"
        assert list(data["categories"]) == ["lente", "montura", "tratamiento", "accesorio", "servicio", "other"]


@pytest.mark.unit
class TestQuoteRoutes:
    """Test cases for quote routes"""

    def test_create_quote(self, client):
        response = client.post(f"{API}/quotes", json=QuoteFactory.create_data(customer_name="Luis Ruiz"))
        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["customer_name"] == "Luis Ruiz"
        assert data["quote_date"] is not None
        assert data["line_items"] == []
        assert data["payments"] == []
        assert data["totals"] == {
            "total": "0.00", "total_paid": "0.00", "remaining_balance": "0.00", "fully_paid": True
        }
        assert data["category_breakdown"] == {}

    def test_create_quote_validation_error(self, client):
        response = client.post(f"{API}/quotes", json={"customer_contact": "600 000 000"})
        assert response.status_code == 422
        assert response.json() == {"errors": ["Customer name can't be blank"]}

    def test_create_quote_malformed_body(self, client):
        response = client.post(f"{API}/quotes", json={"customer_name": 12})
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert len(errors) == 1
        assert errors[0].startswith("Customer name")

    def test_get_quote(self, client, quote_id):
        response = client.get(f"{API}/quotes/{quote_id}")
        assert response.status_code == 200
        assert response.json()["quote_date"].startswith("2024-01-15T10:00:00")

    @pytest.mark.parametrize("missing", ["999", "abc"])
    def test_get_quote_not_found(self, client, missing):
        response = client.get(f"{API}/quotes/{missing}")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_list_quotes(self, client, quote_id):
        client.post(f"{API}/quotes", json={"customer_name": "Pedro"})

        response = client.get(f"{API}/quotes")
        assert response.status_code == 200
        data = response.json()
        assert [q["customer_name"] for q in data] == ["Pedro", "Ana García"]
        assert data[0]["line_items_count"] == 0
        assert data[0]["totals"]["fully_paid"] is True

        response = client.get(f"{API}/quotes", params={"customer": "garc"})
        assert [q["id"] for q in response.json()] == [quote_id]

    def test_update_quote_partial(self, client, quote_id):
        for method in (client.put, client.patch):
            response = method(f"{API}/quotes/{quote_id}", json={"notes": "Urgente"})
            assert response.status_code == 200
            data = response.json()
            assert data["notes"] == "Urgente"
            assert data["customer_name"] == "Ana García"
            assert data["quote_date"].startswith("2024-01-15T10:00:00")

    def test_update_quote_validation_error(self, client, quote_id):
        response = client.patch(f"{API}/quotes/{quote_id}", json={"customer_name": ""})
        assert response.status_code == 422
        assert response.json() == {"errors": ["Customer name can't be blank"]}

    def test_delete_quote(self, client, quote_id):
        response = client.delete(f"{API}/quotes/{quote_id}")
        assert response.status_code == 204
        assert client.get(f"{API}/quotes/{quote_id}").status_code == 404
        assert client.delete(f"{API}/quotes/{quote_id}").status_code == 404

    def test_summary(self, client, quote_id):
        client.post(f"{API}/quotes/{quote_id}/line_items",
                    json={"description": "Lente", "price": "150", "category": "lente"})

        response = client.get(f"{API}/quotes/{quote_id}/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == "150.00"
        assert data["line_items_count"] == 1
        assert data["category_breakdown"] == {"lente": "150.00"}

    def test_report(self, client, quote_id):
        response = client.get(f"{API}/quotes/{quote_id}/report")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert f"PRESUPUESTO #{quote_id}" in response.text
        assert "Fecha: 15/01/2024" in response.text

    def test_pending(self, client, quote_id):
        client.post(f"{API}/quotes/{quote_id}/line_items", json={"description": "Lente", "price": "10"})
        client.post(f"{API}/quotes", json={"customer_name": "Sin items"})

        response = client.get(f"{API}/quotes/pending")
        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == [quote_id]


@pytest.mark.unit
class TestLineItemRoutes:
    """Test cases for line item routes"""

    def test_create_line_item(self, client, quote_id):
        response = client.post(f"{API}/quotes/{quote_id}/line_items", json={
            "description": "Antirreflejo", "price": 35, "quantity": 2, "category": "tratamiento"
        })
        assert response.status_code == 201
        data = response.json()
        assert data["quote_id"] == quote_id
        assert data["price"] == "35.00"
        assert data["subtotal"] == "70.00"
        assert data["category_name"] == "Tratamiento"

    def test_create_line_item_defaults(self, client, quote_id):
        response = client.post(f"{API}/quotes/{quote_id}/line_items",
                               json={"description": "Lente", "price": "150", "category": "invalid_cat"})
        assert response.status_code == 201
        assert response.json()["category"] == "other"
        assert response.json()["quantity"] == 1

    def test_create_line_item_validation_error(self, client, quote_id):
        response = client.post(f"{API}/quotes/{quote_id}/line_items",
                               json={"description": "", "price": 0, "quantity": 0})
        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Description can't be blank",
            "Price must be greater than 0",
            "Quantity must be greater than 0",
        ]

    def test_create_line_item_missing_quote(self, client):
        response = client.post(f"{API}/quotes/999/line_items", json={"description": "Lente", "price": "10"})
        assert response.status_code == 404

    def test_line_item_crud(self, client, quote_id):
        created = client.post(f"{API}/quotes/{quote_id}/line_items",
                              json={"description": "Lente", "price": "10"}).json()
        url = f"{API}/quotes/{quote_id}/line_items/{created['id']}"

        assert client.get(url).json()["description"] == "Lente"

        response = client.patch(url, json={"price": "12.5"})
        assert response.status_code == 200
        assert response.json()["price"] == "12.50"
        assert response.json()["description"] == "Lente"

        listing = client.get(f"{API}/quotes/{quote_id}/line_items").json()
        assert [item["id"] for item in listing] == [created["id"]]

        assert client.delete(url).status_code == 204
        assert client.get(url).status_code == 404

    def test_line_item_under_other_quote(self, client, quote_id):
        other = client.post(f"{API}/quotes", json={"customer_name": "Luis"}).json()["id"]
        item = client.post(f"{API}/quotes/{quote_id}/line_items",
                           json={"description": "Lente", "price": "10"}).json()

        url = f"{API}/quotes/{other}/line_items/{item['id']}"
        assert client.get(url).status_code == 404
        assert client.put(url, json={"price": "99"}).status_code == 404
        assert client.delete(url).status_code == 404


@pytest.mark.unit
class TestPaymentRoutes:
    """Test cases for payment routes"""

    def test_create_payment_defaults(self, client, quote_id):
        response = client.post(f"{API}/quotes/{quote_id}/payments", json={"amount": "145"})
        assert response.status_code == 201
        data = response.json()
        assert data["amount"] == "145.00"
        assert data["payment_method"] == "efectivo"
        assert data["payment_method_name"] == "Efectivo"
        assert data["payment_date"] is not None

    def test_create_payment_validation_error(self, client, quote_id):
        response = client.post(f"{API}/quotes/{quote_id}/payments", json={"amount": "cero"})
        assert response.status_code == 422
        assert response.json() == {"errors": ["Amount is not a number"]}

    def test_list_payments(self, client, quote_id):
        url = f"{API}/quotes/{quote_id}/payments"
        client.post(url, json={"amount": "20", "payment_date": "2024-03-10", "payment_method": "tarjeta"})
        client.post(url, json={"amount": "10", "payment_date": "2024-03-01"})

        assert [p["amount"] for p in client.get(url).json()] == ["10.00", "20.00"]
        assert [p["amount"] for p in client.get(url, params={"method": "tarjeta"}).json()] == ["20.00"]

    def test_payment_crud(self, client, quote_id):
        created = client.post(f"{API}/quotes/{quote_id}/payments",
                              json={"amount": "50", "payment_date": "2024-03-01"}).json()
        url = f"{API}/quotes/{quote_id}/payments/{created['id']}"

        response = client.put(url, json={"notes": "Seña", "payment_method": "cheque"})
        assert response.status_code == 200
        data = response.json()
        assert data["notes"] == "Seña"
        assert data["payment_method"] == "cheque"
        assert data["payment_date"].startswith("2024-03-01")

        assert client.delete(url).status_code == 204
        assert client.get(url).status_code == 404


@pytest.mark.unit
class TestErrorMapping:
    """Test cases for mapping service errors to responses"""

    @pytest.fixture
    def failing_client(self):
        manager = Mock()
        manager.list_quotes.side_effect = DatabaseError("disk full", ErrorCodes.DB_TRANSACTION_FAILED)
        manager.get_quote.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_budget_manager] = lambda: manager
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_budget_error_is_500(self, failing_client):
        response = failing_client.get(f"{API}/quotes")
        assert response.status_code == 500
        data = response.json()
        assert data["error"] is True
        assert data["error_code"] == ErrorCodes.DB_TRANSACTION_FAILED

    def test_unexpected_error_is_500(self, failing_client):
        response = failing_client.get(f"{API}/quotes/1")
        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"
