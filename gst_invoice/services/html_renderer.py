# gst_invoice/services/html_renderer.py
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from gst_invoice.models.invoice import Invoice

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_NAME = "invoice.html"

env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def render_html(invoice: Invoice, template_name: str = TEMPLATE_NAME) -> str:
    template = env.get_template(template_name)
    return template.render(**invoice.model_dump())
