"""Storefront request models: the query and body shapes the shop, cobbler
finder and service booking screens send to the backend.

Each model knows how to render itself as the query params or JSON body the
backend expects (camelCase keys, optional filters omitted).
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Price slider bounds on the shop page; a filter at the bound is "no filter"
MIN_PRICE = 0
MAX_PRICE = 200

COBBLER_SEARCH_RADIUS_M = 50000
COBBLER_PAGE_LIMIT = 50
PRODUCT_PAGE_LIMIT = 12


class ProductQuery(BaseModel):
    """Filters for GET /api/products."""

    page: int = 1
    limit: int = PRODUCT_PAGE_LIMIT
    sort_by: str = "featured"
    search: str = ""
    brands: list[str] = []
    categories: list[str] = []
    min_price: float = MIN_PRICE
    max_price: float = MAX_PRICE

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "limit": self.limit, "sortBy": self.sort_by}
        if self.search:
            params["search"] = self.search
        if self.brands:
            params["brand"] = self.brands
        if self.categories:
            params["category"] = self.categories
        if self.min_price > MIN_PRICE:
            params["minPrice"] = self.min_price
        if self.max_price < MAX_PRICE:
            params["maxPrice"] = self.max_price
        return params


class CobblerQuery(BaseModel):
    """Filters for GET /api/cobblers, a radius search around the user."""

    lat: float
    lng: float
    sort_by: str = "distance"
    services: list[str] = []
    verified_only: bool = False
    search: str = ""

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "lat": self.lat,
            "lng": self.lng,
            "maxDistance": COBBLER_SEARCH_RADIUS_M,
            "sortBy": self.sort_by,
            "page": 1,
            "limit": COBBLER_PAGE_LIMIT,
        }
        if self.services:
            params["services"] = self.services
        if self.verified_only:
            params["verified"] = "true"
        if self.search:
            params["search"] = self.search
        return params


class AppointmentRequest(BaseModel):
    """Body for POST /api/cobblers/{id}/book."""

    customer_name: str = Field(min_length=1)
    customer_email: str
    customer_phone: str
    appointment_date: str = Field(min_length=1)  # YYYY-MM-DD
    appointment_time: str = Field(min_length=1)
    service_type: str = Field(min_length=1)
    notes: str = ""

    @field_validator("customer_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not re.fullmatch(r"[^\s@]+@[^\s@]+\.[^\s@]+", value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("customer_phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        digits = re.sub(r"\D", "", value)
        if len(digits) != 10:
            raise ValueError("Please enter a valid 10-digit phone number")
        return value

    def to_body(self) -> dict[str, Any]:
        return {
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "appointmentDate": self.appointment_date,
            "appointmentTime": self.appointment_time,
            "serviceType": self.service_type,
            "notes": self.notes,
        }


class ServiceBooking(BaseModel):
    """Body for POST /api/services/{id}/book."""

    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    shoe_details: dict[str, str] = {}
    special_instructions: str = ""

    def to_body(self) -> dict[str, Any]:
        return {
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "address": self.address,
            "shoeDetails": self.shoe_details,
            "specialInstructions": self.special_instructions,
        }


class CartItemRequest(BaseModel):
    """Body for POST /api/cart/add."""

    product_id: str
    quantity: int = Field(default=1, ge=1)
    size: str = ""
    color: str = ""

    def to_body(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }
