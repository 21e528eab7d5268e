"""Listings (posts) service lookup: price per day and owner of a listing."""
from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.exceptions import InvalidInputError, NotFoundError, UpstreamError
from app.schemas.upstream import ListingDetail

log = logging.getLogger("uvicorn.error")


class ListingClient:
    """GET {listing_service_url}/posts/{id}. One attempt, no retry."""

    def __init__(self, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def get_listing(self, listing_id: int) -> ListingDetail:
        url = f"{self.settings.listing_service_url}/posts/{listing_id}"
        try:
            with httpx.Client(timeout=self.settings.upstream_timeout_seconds, transport=self.transport) as client:
                r = client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            log.warning("Listing lookup failed: listing_id=%s error=%s: %s", listing_id, type(e).__name__, e)
            raise UpstreamError("Failed to fetch listing details") from e

        if r.status_code == 400:
            raise InvalidInputError("Invalid listing ID or bad request")
        if r.status_code == 404:
            raise NotFoundError("Listing not found")
        if r.status_code != 200:
            log.warning("Listing lookup failed: listing_id=%s status=%s body=%s", listing_id, r.status_code, r.text[:500])
            raise UpstreamError(f"Listing service error: status code {r.status_code}")

        try:
            return ListingDetail.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            log.warning("Listing lookup returned an unreadable body: listing_id=%s error=%s", listing_id, e)
            raise UpstreamError("Failed to decode listing response") from e
