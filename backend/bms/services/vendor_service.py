# Overview: Vendor master data; validation and CRUD through the resource client.

from __future__ import annotations

from .resource_client import ResourceClient, ilike
from ..validation import ValidationError, compact


VENDOR_FIELDS = ("name", "contact_person", "email", "phone", "address")


class VendorNotFoundError(Exception):
    """Raised when a vendor is not found."""
    pass


def _vendor_payload(data: dict, *, partial: bool) -> dict:
    payload = {k: data[k] for k in VENDOR_FIELDS if k in data}
    if "name" in payload or not partial:
        name = (payload.get("name") or "").strip()
        if not name:
            raise ValidationError("Vendor name is required")
        payload["name"] = name
    for key in ("contact_person", "email", "phone", "address"):
        if isinstance(payload.get(key), str):
            payload[key] = payload[key].strip()
    return payload


def list_vendors(client: ResourceClient, *, search: str | None = None, page: int = 1, page_size: int = 50):
    filters = {"name": ilike(search.strip())} if search and search.strip() else None
    return client.list("vendors", filters=filters, order="name.asc", page=page, page_size=page_size, count=True)


def get_vendor(client: ResourceClient, vendor_id) -> dict:
    vendor = client.get("vendors", vendor_id)
    if vendor is None:
        raise VendorNotFoundError(f"Vendor {vendor_id} not found")
    return vendor


def create_vendor(client: ResourceClient, data: dict) -> dict:
    return client.create("vendors", compact(_vendor_payload(data, partial=False)))


def update_vendor(client: ResourceClient, vendor_id, data: dict) -> dict:
    vendor = client.update("vendors", vendor_id, _vendor_payload(data, partial=True))
    if vendor is None:
        raise VendorNotFoundError(f"Vendor {vendor_id} not found")
    return vendor


def delete_vendor(client: ResourceClient, vendor_id) -> None:
    client.delete("vendors", vendor_id)
