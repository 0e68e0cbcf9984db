"""
ViaCEP Address Lookup

Resolves a CEP to its street address. ViaCEP carries no coordinates, so the
address is handed to the free-text geocoder afterwards.

API Documentation:
    https://viacep.com.br/
"""

import logging
from typing import Optional

import httpx

from menu_delivery.services.geo.base import AddressLookupResult
from menu_delivery.services.geo.http import get_within

logger = logging.getLogger(__name__)


class ViaCepClient:
    """CEP to address lookup. Single attempt; failures return no address."""

    provider_name = "viacep"

    def __init__(self, client: httpx.AsyncClient, base_url: str, deadline: Optional[float] = None):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._deadline = deadline

    async def lookup(self, postal_code: str) -> AddressLookupResult:
        url = f"{self._base_url}/ws/{postal_code}/json/"

        try:
            response = await get_within(self._client, url, self._deadline)
            if not response.is_success:
                logger.info(f"ViaCEP: HTTP {response.status_code} for {postal_code}")
                return AddressLookupResult(success=False, error_code="http_error")

            data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"ViaCEP: timeout for {postal_code}")
            return AddressLookupResult(success=False, error_code="timeout")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"ViaCEP: request failed for {postal_code} - {e}")
            return AddressLookupResult(success=False, error_code="transport_error")

        # ViaCEP answers 200 with {"erro": true} for unknown CEPs
        if not isinstance(data, dict) or data.get("erro"):
            logger.debug(f"ViaCEP: CEP {postal_code} not found")
            return AddressLookupResult(success=False, error_code="not_found")

        return AddressLookupResult(
            success=True,
            street=_text(data.get("logradouro")),
            neighborhood=_text(data.get("bairro")),
            city=_text(data.get("localidade")),
            state=_text(data.get("uf")),
        )


def _text(value) -> Optional[str]:
    """Keep non-blank strings; anything else is treated as missing."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
