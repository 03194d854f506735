import asyncio

import pytest

from gst_invoice.services import pdf_generator


class FakePage:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = {}

    async def set_content(self, html, wait_until=None):
        self.calls["set_content"] = (html, wait_until)

    async def pdf(self, **kwargs):
        if self.fail:
            raise RuntimeError("print failed")
        self.calls["pdf"] = kwargs
        return b"%PDF-1.4 rendered"


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self, browser):
        self.browser = browser
        self.chromium = self
        self.launch_args = None

    async def launch(self, args=None):
        self.launch_args = args
        return self.browser

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture
def fake_playwright(monkeypatch):
    def install(fail=False):
        pw = FakePlaywright(FakeBrowser(FakePage(fail=fail)))
        monkeypatch.setattr(pdf_generator, "async_playwright", lambda: pw)
        return pw
    return install


def test_generate_pdf_waits_for_network_idle(fake_playwright):
    """Le contenu doit être chargé avant l'impression A4."""
    pw = fake_playwright()
    pdf = asyncio.run(pdf_generator.generate_pdf("<html><body>Facture</body></html>"))

    page = pw.browser.page
    assert pdf == b"%PDF-1.4 rendered"
    assert page.calls["set_content"] == ("<html><body>Facture</body></html>", "networkidle")
    assert page.calls["pdf"]["format"] == "A4"
    assert page.calls["pdf"]["margin"] == {"top": "15mm", "bottom": "15mm"}
    assert pw.launch_args == ["--no-sandbox", "--disable-setuid-sandbox"]
    assert pw.browser.closed is True


def test_generate_pdf_closes_browser_on_error(fake_playwright):
    pw = fake_playwright(fail=True)
    with pytest.raises(RuntimeError):
        asyncio.run(pdf_generator.generate_pdf("<html></html>"))
    assert pw.browser.closed is True


def test_generate_pdf_timeout(monkeypatch):
    async def slow_print(html):
        await asyncio.sleep(1)
        return b""

    monkeypatch.setattr(pdf_generator, "_print_to_pdf", slow_print)
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(pdf_generator.generate_pdf("<html></html>", timeout=0.01))
