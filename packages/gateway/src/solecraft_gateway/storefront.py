"""Storefront endpoints: services, cobblers, products, cart, wishlist.

Everything goes through the session's ApiClient, so the bearer token and
session-expiry handling apply uniformly. Two kinds of call live here:

  - Best-effort reads (stats, filter options, cart, wishlist): failures fall
    back to an empty default so a page can still render.
  - Writes (bookings, cart changes, wishlist toggles): need a live session
    (NotAuthenticatedError otherwise) and let HTTP errors propagate so the
    caller can show ``describe_error(...)``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from solecraft_shared.routes import (
    CART,
    COBBLERS,
    PRODUCT_BRANDS,
    PRODUCT_CATEGORIES,
    PRODUCTS,
    SERVICES,
    SHOP_STATS,
    WISHLIST,
)
from solecraft_shared.storefront_models import (
    AppointmentRequest,
    CartItemRequest,
    CobblerQuery,
    ProductQuery,
    ServiceBooking,
)

from solecraft_gateway.client import ApiClient
from solecraft_gateway.session import SessionManager

logger = logging.getLogger(__name__)


class NotAuthenticatedError(Exception):
    """Raised when a storefront write is attempted without a live session."""


def empty_cart() -> dict[str, Any]:
    return {"items": [], "subtotal": 0, "itemCount": 0}


def empty_stats() -> dict[str, Any]:
    return {"totalProducts": 0, "inStockProducts": 0, "totalOrders": 0, "averageRating": 0}


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class StorefrontApi:
    """Typed wrappers over the shop, booking and cobbler-finder endpoints."""

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    @property
    def client(self) -> ApiClient:
        return self.session.client

    def _require_session(self, action: str) -> None:
        if not self.session.is_authenticated():
            raise NotAuthenticatedError(f"Please login to {action}")

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def list_services(self) -> list[dict[str, Any]]:
        body = _json(await self.client.get(SERVICES))
        return body.get("services", []) if body.get("success") else []

    async def book_service(self, service_id: str, booking: ServiceBooking) -> dict[str, Any]:
        self._require_session("book a service")
        response = await self.client.post(f"{SERVICES}/{service_id}/book", json=booking.to_body())
        return _json(response)

    # ------------------------------------------------------------------
    # Cobblers
    # ------------------------------------------------------------------

    async def find_cobblers(self, query: CobblerQuery) -> list[dict[str, Any]]:
        body = _json(await self.client.get(COBBLERS, params=query.to_params()))
        return body.get("cobblers", []) if body.get("success") else []

    async def book_cobbler(self, cobbler_id: str, appointment: AppointmentRequest) -> dict[str, Any]:
        response = await self.client.post(
            f"{COBBLERS}/{cobbler_id}/book", json=appointment.to_body()
        )
        return _json(response)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(self, query: ProductQuery | None = None) -> dict[str, Any]:
        """Products plus pagination, as the shop grid consumes them."""
        query = query or ProductQuery()
        body = _json(await self.client.get(PRODUCTS, params=query.to_params()))
        return {
            "products": body.get("products", []),
            "pagination": body.get("pagination")
            or {
                "currentPage": 1,
                "totalPages": 1,
                "totalItems": 0,
                "itemsPerPage": query.limit,
            },
        }

    async def shop_stats(self) -> dict[str, Any]:
        try:
            body = _json(await self.client.get(SHOP_STATS))
        except httpx.HTTPError as e:
            logger.debug(f"Shop stats unavailable: {type(e).__name__}")
            return empty_stats()
        stats = body.get("stats")
        return stats if isinstance(stats, dict) and stats else empty_stats()

    async def brands(self) -> list[str]:
        try:
            body = _json(await self.client.get(PRODUCT_BRANDS))
        except httpx.HTTPError as e:
            logger.debug(f"Brand filters unavailable: {type(e).__name__}")
            return ["all"]
        return ["all", *(body.get("brands") or [])]

    async def categories(self) -> list[str]:
        try:
            body = _json(await self.client.get(PRODUCT_CATEGORIES))
        except httpx.HTTPError as e:
            logger.debug(f"Category filters unavailable: {type(e).__name__}")
            return []
        return list(body.get("categories") or [])

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    async def get_cart(self) -> dict[str, Any]:
        if not self.session.is_authenticated():
            return empty_cart()
        try:
            body = _json(await self.client.get(CART))
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 404):
                return empty_cart()
            raise
        except httpx.RequestError:
            return empty_cart()
        return body.get("cart") or empty_cart()

    async def add_to_cart(self, item: CartItemRequest) -> dict[str, Any]:
        self._require_session("add items to cart")
        return _json(await self.client.post(f"{CART}/add", json=item.to_body()))

    async def remove_from_cart(self, item_id: str) -> dict[str, Any]:
        self._require_session("update your cart")
        return _json(await self.client.delete(f"{CART}/remove/{item_id}"))

    async def update_cart_quantity(self, item_id: str, quantity: int) -> dict[str, Any]:
        """Set an item's quantity; anything below 1 removes it."""
        if quantity < 1:
            return await self.remove_from_cart(item_id)
        self._require_session("update your cart")
        return _json(
            await self.client.put(f"{CART}/update/{item_id}", json={"quantity": quantity})
        )

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------

    async def get_wishlist(self) -> list[str]:
        """Product ids on the wishlist; empty if it can't be loaded."""
        if not self.session.is_authenticated():
            return []
        try:
            body = _json(await self.client.get(WISHLIST))
        except httpx.HTTPError as e:
            logger.debug(f"Wishlist unavailable: {type(e).__name__}")
            return []
        items = body.get("wishlist") or []
        return [item["_id"] for item in items if isinstance(item, dict) and "_id" in item]

    async def toggle_wishlist(self, product_id: str, currently_listed: bool) -> bool:
        """Add or remove a product. Returns whether it's on the wishlist afterwards."""
        self._require_session("use your wishlist")
        if currently_listed:
            body = _json(await self.client.delete(f"{WISHLIST}/{product_id}"))
            return not body.get("success")
        body = _json(await self.client.post(f"{WISHLIST}/{product_id}"))
        return bool(body.get("success"))
