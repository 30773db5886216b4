"""Integration tests for POST /api/v1/orders/."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from modules.orders.models import Order
from modules.orders.validators import BUSINESS_RULES_MESSAGE, DUPLICATE_ISBN_MESSAGE

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _payload(**overrides):
    data = {
        "title": "Advanced Programming Techniques",
        "author": "John Smith",
        "isbn": "9780132350884",
        "category": "Technical",
        "price": "45.99",
        "published_date": (date.today() - timedelta(days=400)).isoformat(),
        "cover_image_url": "https://example.com/covers/advanced.jpg",
        "stock_quantity": 15,
    }
    data.update(overrides)
    return data


def _messages(response):
    return [d["message"] for d in response.json()["details"]]


class TestCreateOrderApi:
    def test_technical_order_created(self, api_client):
        response = api_client.post(URL, _payload(), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Advanced Programming Techniques"
        assert body["category"] == "Technical"
        assert body["category_display_name"] == "Technical & Professional"
        assert body["price"] == "45.99"
        assert body["formatted_price"] == "$45.99"
        assert body["published_age"] == "1 years old"
        assert body["author_initials"] == "JS"
        assert body["availability_status"] == "In Stock"
        assert body["is_available"] is True
        assert body["updated_at"] is None
        assert Order.objects.filter(pk=body["id"]).exists()

    def test_children_order_discounted_without_cover(self, api_client):
        response = api_client.post(
            URL,
            _payload(
                title="Happy Children Stories",
                author="Jane Doe",
                isbn="9780060254926",
                category="Children",
                price="25.00",
                published_date="2015-05-09",
                cover_image_url="https://example.com/happy.jpg",
            ),
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["price"] == "22.50"
        assert body["formatted_price"] == "$22.50"
        assert body["cover_image_url"] is None
        assert body["category_display_name"] == "Children's Orders"

    def test_cheap_technical_order_rejected(self, api_client):
        response = api_client.post(URL, _payload(price="15.00"), format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert "Technical orders must have a minimum price of $20.00" in _messages(
            response
        )
        assert {"field": "__all__", "message": BUSINESS_RULES_MESSAGE} in body[
            "details"
        ]
        assert not Order.objects.exists()

    def test_duplicate_isbn_rejected(self, api_client):
        assert api_client.post(URL, _payload(), format="json").status_code == 201

        response = api_client.post(
            URL,
            _payload(title="The Programming Guide Mystery", category="Fiction"),
            format="json",
        )

        assert response.status_code == 400
        assert {"field": "isbn", "message": DUPLICATE_ISBN_MESSAGE} in response.json()[
            "details"
        ]
        assert Order.objects.count() == 1

    def test_values_longer_than_their_columns_rejected(self, api_client):
        response = api_client.post(
            URL,
            _payload(
                isbn="9-7-8-0-1-3-2-3-5-0-8-8-4",
                cover_image_url="https://example.com/" + "c" * 500 + ".png",
            ),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["details"] == [
            {"field": "isbn", "message": "ISBN cannot exceed 20 characters"},
            {
                "field": "cover_image_url",
                "message": "Cover image URL cannot exceed 500 characters",
            },
        ]
        assert not Order.objects.exists()

    def test_all_failures_reported_together(self, api_client):
        response = api_client.post(
            URL,
            _payload(title="", author="", isbn="123", category="Poetry"),
            format="json",
        )

        assert response.status_code == 400
        fields = [d["field"] for d in response.json()["details"]]
        assert fields[:4] == ["title", "author", "isbn", "category"]

    def test_expensive_order_stock_limit(self, api_client):
        response = api_client.post(
            URL,
            _payload(
                title="Expensive Premium Book",
                category="NonFiction",
                price="600.00",
                stock_quantity=21,
            ),
            format="json",
        )

        assert response.status_code == 400
        assert _messages(response) == [
            BUSINESS_RULES_MESSAGE,
            "Expensive orders (>$100) must have limited stock (≤20 units)",
        ]

    def test_high_value_order_limited_to_ten_units(self, api_client):
        response = api_client.post(
            URL,
            _payload(
                title="Expensive Premium Book",
                category="NonFiction",
                price="600.00",
                stock_quantity=11,
            ),
            format="json",
        )

        assert response.status_code == 400
        assert _messages(response) == [BUSINESS_RULES_MESSAGE]

    def test_malformed_payload_uses_same_error_body(self, api_client):
        response = api_client.post(
            URL, _payload(price="cheap", published_date="soon"), format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert {d["field"] for d in body["details"]} == {"price", "published_date"}

    def test_response_echoes_request_id(self, api_client_with_correlation):
        client, cid = api_client_with_correlation
        response = client.post(URL, _payload(), format="json")
        assert response["X-Request-ID"] == cid
