# Overview: Product master data; payload normalization and CRUD.

from __future__ import annotations

from .resource_client import ResourceClient, ilike
from ..validation import ValidationError, is_blank, money, optional_number


PRICE_FIELDS = ("sales_price", "purchase_price", "cost_price", "tax_percent")
TEXT_FIELDS = ("category", "hsn_code")
DEFAULT_PRODUCT_TYPE = "Goods"


class ProductNotFoundError(Exception):
    """Raised when a product is not found."""
    pass


def product_payload(data: dict, *, partial: bool = False) -> dict:
    """
    Normalize product form input.

    Blank text fields become null; prices are numbers >= 0 or null.
    Raises ValidationError if the name is missing or a price is not a number.
    """
    payload = {}
    if "name" in data or not partial:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Product name is required")
        payload["name"] = name

    for key in TEXT_FIELDS:
        if key in data or not partial:
            value = data.get(key)
            payload[key] = value.strip() if isinstance(value, str) and value.strip() else None

    if "type" in data or not partial:
        product_type = data.get("type")
        payload["type"] = product_type.strip() if isinstance(product_type, str) and product_type.strip() else DEFAULT_PRODUCT_TYPE

    for key in PRICE_FIELDS:
        if key in data or not partial:
            number = optional_number(data.get(key), key)
            payload[key] = None if number is None else money(number)

    return payload


def list_products(client: ResourceClient, *, search: str | None = None, category: str | None = None,
                  page: int = 1, page_size: int = 50):
    filters = {}
    if search and search.strip():
        filters["name"] = ilike(search.strip())
    if not is_blank(category):
        filters["category"] = f"eq.{category}"
    return client.list("products", filters=filters, order="name.asc", page=page, page_size=page_size, count=True)


def get_product(client: ResourceClient, product_id) -> dict:
    product = client.get("products", product_id)
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product


def create_product(client: ResourceClient, data: dict) -> dict:
    return client.create("products", product_payload(data))


def update_product(client: ResourceClient, product_id, data: dict) -> dict:
    product = client.update("products", product_id, product_payload(data, partial=True))
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product


def delete_product(client: ResourceClient, product_id) -> None:
    client.delete("products", product_id)
