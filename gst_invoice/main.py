from contextlib import asynccontextmanager
import json
import logging
import time

import httpx
from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse, Response

from gst_invoice.config import Settings, get_settings
from gst_invoice.models.invoice import Seller
from gst_invoice.services.html_renderer import render_html
from gst_invoice.services.invoice_builder import build_invoice
from gst_invoice.services.pdf_generator import generate_pdf
from gst_invoice.services.shopify_client import ShopifyClient
from gst_invoice.services.storage import save_pdf

VERSION = "1.0.0"
ERROR_MESSAGE = "Error generating invoice - check server logs"

# Horloge des numéros de facture
clock = time.time


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            log_data.update(record.extra)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False, default=str)

# Supprime les handlers existants et applique le notre
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
for h in root_logger.handlers[:]:
    root_logger.removeHandler(h)
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
root_logger.addHandler(handler)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse de démarrer sans identifiants Shopify
    settings = get_settings()
    settings.INVOICE_DIR.mkdir(parents=True, exist_ok=True)
    logger.info("GST Invoice app prête", extra={"extra": {"shop": settings.SHOP, "invoice_dir": str(settings.INVOICE_DIR)}})
    yield


app = FastAPI(
    title="GST Invoice",
    description="Factures GST au format PDF pour les commandes Shopify",
    version=VERSION,
    lifespan=lifespan,
)


async def get_shopify_client(settings: Settings = Depends(get_settings)):
    async with ShopifyClient(settings) as client:
        yield client


def _error_detail(e: Exception) -> dict:
    detail = {"error": str(e), "type": type(e).__name__}
    if isinstance(e, httpx.HTTPStatusError):
        detail["status_code"] = e.response.status_code
        detail["response"] = e.response.text
    return detail


@app.get("/health")
def health_check():
    return {"status": "ok", "version": VERSION}


@app.get("/invoice/{order_id}")
async def generate_invoice(
    order_id: str,
    settings: Settings = Depends(get_settings),
    shopify: ShopifyClient = Depends(get_shopify_client),
):
    try:
        start = time.time()
        order = await shopify.fetch_order(order_id)

        # Une recherche par ligne, dans l'ordre de la commande
        taxes = []
        for line_item in order.line_items:
            taxes.append(await shopify.lookup_tax(line_item.product_id))

        seller = Seller(name=settings.SELLER_NAME, address=settings.SELLER_ADDRESS, gstin=settings.SELLER_GSTIN)
        invoice = build_invoice(order, taxes, seller, clock=clock)
        logger.info("Génération facture", extra={"extra": {"order_id": order_id, "order_name": order.name, "invoice_number": invoice.invoice_number, "items": len(invoice.items), "total": invoice.totals.total}})

        html = render_html(invoice)
        pdf_bytes = await generate_pdf(html, timeout=settings.RENDER_TIMEOUT)

        save_pdf(settings.INVOICE_DIR, invoice.filename, pdf_bytes)
        duration = round((time.time() - start) * 1000)
        logger.info("Facture générée", extra={"extra": {"invoice_number": invoice.invoice_number, "filename": invoice.filename, "duration_ms": duration}})

        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f"attachment; filename={invoice.filename}"}
        )
    except Exception as e:
        logger.exception("Erreur génération facture", extra={"extra": {"order_id": order_id, **_error_detail(e)}})
        return PlainTextResponse(ERROR_MESSAGE, status_code=500)
