# Overview: HSN code cache (tax classification lookups) kept in the data store.

from __future__ import annotations

from .resource_client import ResourceClient
from ..validation import ValidationError, compact, is_blank


def _key_for(id_or_code) -> str:
    """Numeric identifiers address rows by id, anything else by hsn_code."""
    return "id" if str(id_or_code).isdigit() else "hsn_code"


def list_codes(client: ResourceClient, *, page: int = 1, page_size: int = 100):
    return client.list("hsn_cache", order="hsn_code.asc", page=page, page_size=page_size, count=True)


def get_by_code(client: ResourceClient, code: str) -> dict | None:
    return client.get("hsn_cache", code, key="hsn_code")


def upsert(client: ResourceClient, record: dict) -> dict:
    """Update the cached code if present, otherwise create it."""
    code = record.get("hsn_code")
    if is_blank(code):
        raise ValidationError("hsn_code is required")
    code = str(code).strip()
    payload = compact({**record, "hsn_code": code})
    if get_by_code(client, code):
        return client.update("hsn_cache", code, payload, key="hsn_code")
    return client.create("hsn_cache", payload)


def update(client: ResourceClient, id_or_code, record: dict) -> dict | None:
    return client.update("hsn_cache", id_or_code, compact(record), key=_key_for(id_or_code))


def delete(client: ResourceClient, id_or_code) -> None:
    client.delete("hsn_cache", id_or_code, key=_key_for(id_or_code))
