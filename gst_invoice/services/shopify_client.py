# gst_invoice/services/shopify_client.py
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from gst_invoice.config import Settings
from gst_invoice.models.invoice import TaxLookup
from gst_invoice.models.shopify import Metafield, Order

logger = logging.getLogger(__name__)

GST_NAMESPACE = "gst"


class ShopifyClient:
    """Client Admin REST, un par requête."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            headers={"X-Shopify-Access-Token": settings.SHOPIFY_ACCESS_TOKEN},
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "ShopifyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch_order(self, order_id: str) -> Order:
        # Toute erreur ici doit remonter et annuler la génération
        response = await self.client.get(f"/orders/{quote(order_id, safe='')}.json")
        response.raise_for_status()
        return Order.model_validate(response.json()["order"])

    async def fetch_product_metafields(self, product_id: int) -> List[Metafield]:
        try:
            response = await self.client.get(f"/products/{product_id}/metafields.json")
            response.raise_for_status()
            raw = response.json().get("metafields") or []
            return [Metafield.model_validate(m) for m in raw]
        except (httpx.HTTPError, ValueError, AttributeError, TypeError, ValidationError) as e:
            logger.warning("Métadonnées produit indisponibles", extra={"extra": {"product_id": product_id, "error": str(e)}})
            return []

    async def lookup_tax(self, product_id: Optional[int]) -> TaxLookup:
        if not product_id:
            return TaxLookup.not_found()
        metafields = await self.fetch_product_metafields(product_id)
        return tax_lookup_from_metafields(metafields)


def _find(metafields: List[Metafield], key: str) -> Optional[Metafield]:
    return next((m for m in metafields if m.namespace == GST_NAMESPACE and m.key == key), None)


def tax_lookup_from_metafields(metafields: List[Metafield]) -> TaxLookup:
    hsn = _find(metafields, "hsn")
    rate = _find(metafields, "rate")
    if hsn is None and rate is None:
        return TaxLookup.not_found()
    return TaxLookup(
        found=True,
        hsn=None if hsn is None or hsn.value is None else str(hsn.value),
        rate=None if rate is None or rate.value is None else str(rate.value),
    )
