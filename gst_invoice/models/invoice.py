# gst_invoice/models/invoice.py
from pydantic import BaseModel
from typing import List, Optional


class Seller(BaseModel):
    name: str
    address: str = ""
    gstin: str = ""


class Buyer(BaseModel):
    name: str
    address: str = ""
    gstin: str = ""  # not collected at checkout


class TaxLookup(BaseModel):
    """Résultat de la recherche des métadonnées GST d'un produit."""
    found: bool = False
    hsn: Optional[str] = None
    rate: Optional[str] = None

    @classmethod
    def not_found(cls) -> "TaxLookup":
        return cls()


class InvoiceItem(BaseModel):
    title: str
    hsn: str
    quantity: int
    rate: str
    taxable: str
    gst_rate: str
    tax_amount: str


class Totals(BaseModel):
    taxable: str
    tax: str
    total: str


class Invoice(BaseModel):
    invoice_number: str
    date: str
    order_name: str
    place_of_supply: str
    seller: Seller
    buyer: Buyer
    items: List[InvoiceItem]
    totals: Totals

    @property
    def filename(self) -> str:
        return f"{self.invoice_number}.pdf"
