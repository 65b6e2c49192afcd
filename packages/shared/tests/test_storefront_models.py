"""Tests for storefront request models and their wire shapes."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from solecraft_shared.storefront_models import (
    AppointmentRequest,
    CartItemRequest,
    CobblerQuery,
    ProductQuery,
)


class TestProductQuery:
    def test_default_params(self) -> None:
        assert ProductQuery().to_params() == {"page": 1, "limit": 12, "sortBy": "featured"}

    def test_price_bounds_are_not_filters(self) -> None:
        params = ProductQuery(min_price=0, max_price=200).to_params()
        assert "minPrice" not in params
        assert "maxPrice" not in params

    def test_all_filters(self) -> None:
        params = ProductQuery(
            search="boot",
            brands=["Nike"],
            categories=["sneakers"],
            min_price=20,
            max_price=150,
            page=3,
        ).to_params()
        assert params["search"] == "boot"
        assert params["brand"] == ["Nike"]
        assert params["category"] == ["sneakers"]
        assert params["minPrice"] == 20
        assert params["maxPrice"] == 150
        assert params["page"] == 3


class TestCobblerQuery:
    def test_radius_search_params(self) -> None:
        params = CobblerQuery(lat=19.07, lng=72.87).to_params()
        assert params == {
            "lat": 19.07,
            "lng": 72.87,
            "maxDistance": 50000,
            "sortBy": "distance",
            "page": 1,
            "limit": 50,
        }

    def test_optional_filters(self) -> None:
        params = CobblerQuery(
            lat=0, lng=0, services=["resole"], verified_only=True, search="mumbai"
        ).to_params()
        assert params["services"] == ["resole"]
        assert params["verified"] == "true"
        assert params["search"] == "mumbai"


class TestAppointmentRequest:
    def _valid(self, **overrides: str) -> dict[str, str]:
        data = {
            "customer_name": "A",
            "customer_email": "a@b.com",
            "customer_phone": "(555) 123-4567",
            "appointment_date": "2026-11-02",
            "appointment_time": "10:00",
            "service_type": "Resole",
        }
        data.update(overrides)
        return data

    def test_body_uses_camel_case(self) -> None:
        body = AppointmentRequest(**self._valid(notes="left heel")).to_body()
        assert body["customerPhone"] == "(555) 123-4567"
        assert body["appointmentDate"] == "2026-11-02"
        assert body["notes"] == "left heel"

    def test_phone_must_have_ten_digits(self) -> None:
        with pytest.raises(ValidationError, match="10-digit"):
            AppointmentRequest(**self._valid(customer_phone="12345"))

    def test_email_must_have_domain(self) -> None:
        with pytest.raises(ValidationError, match="valid email"):
            AppointmentRequest(**self._valid(customer_email="a@b"))


def test_cart_item_rejects_zero_quantity() -> None:
    with pytest.raises(ValidationError):
        CartItemRequest(product_id="p1", quantity=0)
