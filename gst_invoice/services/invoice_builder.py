# gst_invoice/services/invoice_builder.py
import re
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext, localcontext
from typing import Callable, List, Optional

from gst_invoice.models.invoice import Buyer, Invoice, InvoiceItem, Seller, TaxLookup, Totals
from gst_invoice.models.shopify import Address, LineItem, Order

DEFAULT_GST_RATE = Decimal("18")
CENT = Decimal("0.01")
# Au-delà, le taux ne tient pas dans un flottant double
MAX_RATE_EXPONENT = 308
# Chiffres significatifs des calculs de montants
MONEY_PRECISION = 1000

# Préfixe numérique en tête de chaîne ("12", "12.5", "5%", ".5")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def money_context():
    ctx = getcontext().copy()
    ctx.prec = MONEY_PRECISION
    return localcontext(ctx)


def round2(value: Decimal) -> Decimal:
    with money_context():
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _fmt(value: Decimal) -> str:
    return str(round2(value))


def parse_rate(raw: Optional[str]) -> Optional[Decimal]:
    """Lit un taux saisi librement; None si aucun nombre en tête."""
    if raw is None:
        return None
    match = _LEADING_NUMBER.match(raw)
    if not match:
        return None
    try:
        rate = Decimal(match.group(1))
    except InvalidOperation:
        return None
    if rate.adjusted() > MAX_RATE_EXPONENT:
        return None
    return rate


def invoice_number(clock: Callable[[], float] = time.time) -> str:
    # Horodatage en ms: pas de garantie d'unicité en cas de requêtes simultanées
    return f"INV-{int(clock() * 1000)}"


def build_item(line_item: LineItem, tax: TaxLookup) -> InvoiceItem:
    gst_rate, hsn = DEFAULT_GST_RATE, ""
    if tax.found:
        hsn = tax.hsn or ""
        found_rate = parse_rate(tax.rate)
        # Taux illisible: on garde le taux par défaut
        if found_rate is not None:
            gst_rate = found_rate
    with money_context():
        taxable = round2(line_item.quantity * line_item.price)
        tax_amount = round2(taxable * gst_rate / 100)
    return InvoiceItem(
        title=line_item.name,
        hsn=hsn,
        quantity=line_item.quantity,
        rate=_fmt(line_item.price),
        taxable=_fmt(taxable),
        gst_rate=_fmt(gst_rate),
        tax_amount=_fmt(tax_amount),
    )


def compute_totals(items: List[InvoiceItem]) -> Totals:
    # Somme des montants déjà arrondis par ligne, puis nouvel arrondi
    with money_context():
        taxable = round2(sum((Decimal(i.taxable) for i in items), Decimal("0")))
        tax = round2(sum((Decimal(i.tax_amount) for i in items), Decimal("0")))
        total = round2(taxable + tax)
    return Totals(taxable=_fmt(taxable), tax=_fmt(tax), total=_fmt(total))


def build_buyer(order: Order) -> Buyer:
    billing: Optional[Address] = order.billing_address
    if billing is None:
        return Buyer(name=order.email or "", address="")
    address = f"{billing.address1 or ''} {billing.city or ''} {billing.province or ''}"
    return Buyer(name=billing.name or order.email or "", address=address)


def build_invoice(
    order: Order,
    taxes: List[TaxLookup],
    seller: Seller,
    clock: Callable[[], float] = time.time,
) -> Invoice:
    """
    Construit la vue facture à partir de la commande et des métadonnées GST.
    `taxes` est aligné sur `order.line_items`.
    """
    if len(taxes) != len(order.line_items):
        raise ValueError("Une recherche GST est attendue par ligne de commande")

    items = [build_item(li, tax) for li, tax in zip(order.line_items, taxes)]
    return Invoice(
        invoice_number=invoice_number(clock),
        date=order.created_at.strftime("%d/%m/%Y"),
        order_name=order.name,
        place_of_supply=(order.shipping_address.province or "") if order.shipping_address else "",
        seller=seller,
        buyer=build_buyer(order),
        items=items,
        totals=compute_totals(items),
    )
