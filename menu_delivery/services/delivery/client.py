"""
Delivery Estimate API Client

Async client for GET /menu/{slug}/calculate-delivery used by interactive
callers (menu sidebar calculator, checkout form). Each slot keeps only the
outcome of its most recent request; see RequestSequencer.

Usage:
    async with DeliveryEstimateClient("http://localhost:8001") as client:
        outcome = await client.request_estimate("checkout", "pizzaria", "20040-020")
        if outcome is None:
            pass  # superseded by a newer request for "checkout"
"""

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Optional

import httpx

from menu_delivery.services.delivery.postal_code import normalize_postal_code
from menu_delivery.services.delivery.sequencer import RequestSequencer

logger = logging.getLogger(__name__)


@dataclass
class EstimateOutcome:
    """
    What a slot shows after a request completes.

    Attributes:
        slot: Slot the request belongs to
        token: Sequencer token of the request
        postal_code: CEP as typed by the user
        status_code: HTTP status (None if no response was received)
        data: Response body on success
        error: Error message on failure
    """
    slot: Hashable
    token: int
    postal_code: str
    status_code: Optional[int] = None
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    @property
    def fee(self) -> Optional[float]:
        return self.data.get("fee") if self.data else None


class DeliveryEstimateClient:
    """Calls the delivery calculator and keeps the latest outcome per slot."""

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        sequencer: Optional[RequestSequencer] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.sequencer = sequencer or RequestSequencer()
        self._latest: dict[Hashable, EstimateOutcome] = {}

    async def __aenter__(self) -> "DeliveryEstimateClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def latest(self, slot: Hashable) -> Optional[EstimateOutcome]:
        """Outcome currently shown in slot."""
        return self._latest.get(slot)

    async def request_estimate(self, slot: Hashable, slug: str, postal_code: str) -> Optional[EstimateOutcome]:
        """
        Request an estimate for slot.

        Returns the applied outcome, or None when a newer request for the
        same slot started while this one was in flight.
        """
        token = self.sequencer.begin_request(slot)
        outcome = EstimateOutcome(slot=slot, token=token, postal_code=postal_code)

        if normalize_postal_code(postal_code) is None:
            # Still invalidates older in-flight results for this slot
            outcome.error = "Enter a CEP with 8 digits."
            return self._apply(outcome)

        try:
            response = await self._client.get(
                f"/menu/{slug}/calculate-delivery",
                params={"cep": postal_code},
            )
            outcome.status_code = response.status_code
            body = response.json()
            if not isinstance(body, dict):
                # Proxies and gateways may answer with non-JSON-object bodies
                body = {}
            if response.is_success and body:
                outcome.data = body
            else:
                message = body.get("error")
                outcome.error = message if isinstance(message, str) and message else f"HTTP {response.status_code}"
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Estimate request failed for slot {slot!r}: {e}")
            outcome.error = "Could not calculate delivery. Try again."

        return self._apply(outcome)

    def _apply(self, outcome: EstimateOutcome) -> Optional[EstimateOutcome]:
        if not self.sequencer.is_current(outcome.slot, outcome.token):
            logger.debug(f"Discarding stale estimate for slot {outcome.slot!r} (token {outcome.token})")
            return None
        self._latest[outcome.slot] = outcome
        return outcome
