# gst_invoice/models/shopify.py
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShopifyModel(BaseModel):
    """Base for upstream documents: unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")


class Address(ShopifyModel):
    name: Optional[str] = None
    address1: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None


class LineItem(ShopifyModel):
    product_id: Optional[int] = None
    name: str = ""
    quantity: int = Field(ge=0)
    price: Decimal = Field(ge=0)


class Order(ShopifyModel):
    id: int
    created_at: datetime
    name: str = ""
    email: Optional[str] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    line_items: List[LineItem] = Field(default_factory=list)


class Metafield(ShopifyModel):
    namespace: str
    key: str
    value: Any = None
