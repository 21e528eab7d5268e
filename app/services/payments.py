"""Payment service: create a payment session and get the provider redirect URL."""
from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.exceptions import UpstreamError
from app.schemas.upstream import PaymentSessionRequest, PaymentSessionResponse

log = logging.getLogger("uvicorn.error")


def build_callback_url(settings: Settings, rent_request_id: int) -> str:
    """The payment service appends &status=success|cancel when it calls back."""
    return f"{settings.callback_base_url}/rent-request/callback?requestId={rent_request_id}"


class PaymentClient:
    """POST {payment_service_url}/payment/request, expects 201 {"redirectURL": ...}."""

    def __init__(self, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def create_payment_session(self, payload: PaymentSessionRequest) -> str:
        url = f"{self.settings.payment_service_url}/payment/request"
        try:
            with httpx.Client(timeout=self.settings.upstream_timeout_seconds, transport=self.transport) as client:
                r = client.post(url, json=payload.model_dump(by_alias=True))
        except httpx.HTTPError as e:
            log.warning("Payment session failed: request_id=%s error=%s: %s", payload.request_id, type(e).__name__, e)
            raise UpstreamError("Payment service unavailable") from e

        if r.status_code != 201:
            log.warning(
                "Payment session failed: request_id=%s status=%s body=%s",
                payload.request_id, r.status_code, r.text[:500],
            )
            raise UpstreamError(f"Payment service error: status code {r.status_code}")

        try:
            return PaymentSessionResponse.model_validate(r.json()).redirect_url
        except (ValueError, ValidationError) as e:
            raise UpstreamError("Failed to decode payment service response") from e
