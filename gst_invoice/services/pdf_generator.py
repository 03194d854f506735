# gst_invoice/services/pdf_generator.py
import asyncio

from playwright.async_api import async_playwright

PAGE_FORMAT = "A4"
MARGINS = {"top": "15mm", "bottom": "15mm"}
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


async def _print_to_pdf(html: str) -> bytes:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(args=BROWSER_ARGS)
        try:
            page = await browser.new_page()
            # Attendre que le réseau soit inactif avant l'impression
            await page.set_content(html, wait_until="networkidle")
            return await page.pdf(format=PAGE_FORMAT, margin=MARGINS, print_background=True)
        finally:
            await browser.close()


async def generate_pdf(html: str, timeout: float = 60.0) -> bytes:
    """Rend le HTML en PDF via un Chromium headless dédié à la requête."""
    return await asyncio.wait_for(_print_to_pdf(html), timeout=timeout)
