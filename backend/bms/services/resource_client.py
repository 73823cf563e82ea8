# Overview: HTTP client for the PostgREST-style data API; CRUD and filtered list per resource.

"""
Resource Client

WHY: Every page talks to the same REST data store, which exposes one
collection endpoint per table and follows PostgREST conventions:

- Filters are query parameters of the form field=op.value (id=eq.5,
  name=ilike.*term*, created_at=gte.2024-01-01)
- Ordering uses the `order` parameter (created_at.desc)
- Pagination uses the Range request header; the total row count comes back
  in Content-Range (0-9/57) when `Prefer: count=exact` is sent
- Writes send `Prefer: return=representation` so the created/updated rows
  come back in the response body (always as a JSON array)

AUTH: A 401 from the store means the stored token is no longer accepted.
The client calls `on_unauthorized` (bound to SessionContext.clear by the
routes) and raises AuthorizationError. This is never retried.

Timeouts and retries belong to the httpx transport; this layer adds none.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx


logger = logging.getLogger(__name__)


RESOURCES = (
    "vendors",
    "products",
    "purchase_orders",
    "purchase_order_lines",
    "vendor_bills",
    "vendor_bill_lines",
    "payments",
    "users",
    "hsn_cache",
)


class ResourceError(Exception):
    """Raised when the data store rejects a request or cannot be reached."""

    def __init__(self, message: str, status: int | None = None, details: Any = None):
        super().__init__(message)
        self.status = status
        self.details = details


class AuthorizationError(ResourceError):
    """401 from the data store; the session has already been cleared."""


@dataclass
class ListResult:
    items: list = field(default_factory=list)
    total: int = 0


# =============================================================================
# FILTER HELPERS
# =============================================================================

def eq(value) -> str:
    return f"eq.{value}"


def ilike(term: str) -> str:
    return f"ilike.*{term}*"


def gte(value) -> str:
    return f"gte.{value}"


def lte(value) -> str:
    return f"lte.{value}"


def in_(values) -> str:
    return "in.(" + ",".join(str(v) for v in values) + ")"


def parse_content_range(header: str | None, fallback: int) -> int:
    """
    Total from a Content-Range header ("0-9/57" -> 57).

    "*/0", "0-9/*" or a missing/garbled header fall back to `fallback`
    (normally the number of rows actually returned).
    """
    if not header or "/" not in header:
        return fallback
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return fallback
    total = int(total)
    if total == 0 and fallback:
        return fallback
    return total


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        body = response.json()
    except ValueError:
        body = response.text
    if isinstance(body, dict):
        message = body.get("message") or body.get("hint") or body.get("error")
        if message:
            return str(message), body
    return f"Data API returned {response.status_code}", body


class ResourceClient:
    """
    Thin CRUD + list wrapper over httpx for named resource collections.

    One client is built per request from the session's auth token, so two
    concurrent requests never share mutable state here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        demo_token: str | None = "demo-token",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        headers = {
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        # The demo token is a local login marker, not a JWT the store accepts
        if token and token != demo_token:
            headers["Authorization"] = f"Bearer {token}"

        self.on_unauthorized = on_unauthorized
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Data API %s %s failed: %s", method, path, e)
            raise ResourceError(f"Data API unreachable: {e}") from e

        if response.status_code == 401:
            logger.warning("Data API rejected credentials on %s %s", method, path)
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise AuthorizationError("Unauthorized: please sign in again", status=401)

        if response.is_error:
            message, details = _error_message(response)
            logger.warning("Data API %s %s -> %s: %s", method, path, response.status_code, message)
            raise ResourceError(message, status=response.status_code, details=details)

        return response

    @staticmethod
    def _rows(response: httpx.Response) -> list:
        if not response.content:
            return []
        body = response.json()
        if body is None:
            return []
        return body if isinstance(body, list) else [body]

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(
        self,
        resource: str,
        *,
        filters: dict | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        page: int | None = None,
        page_size: int | None = None,
        count: bool = False,
    ) -> ListResult:
        """
        Filtered/sorted list.

        Pagination is either page/page_size (1-based) or limit/offset; both
        become a Range header. `count=True` asks the store for an exact total.
        """
        params = dict(filters or {})
        if order:
            params["order"] = order

        headers = {}
        if page is not None and page_size:
            offset = (max(page, 1) - 1) * page_size
            limit = page_size
        if limit is not None:
            start = max(offset or 0, 0)
            headers["Range-Unit"] = "items"
            headers["Range"] = f"{start}-{start + max(limit, 1) - 1}"
        if count:
            headers["Prefer"] = "count=exact"

        response = self._request("GET", f"/{resource}", params=params, headers=headers)
        items = self._rows(response)
        total = parse_content_range(response.headers.get("Content-Range"), len(items))
        return ListResult(items=items, total=total)

    def find(self, resource: str, **equals) -> list:
        """Rows where every given field equals the given value."""
        filters = {name: eq(value) for name, value in equals.items()}
        return self.list(resource, filters=filters).items

    def get(self, resource: str, record_id, key: str = "id") -> dict | None:
        rows = self.find(resource, **{key: record_id})
        return rows[0] if rows else None

    def ping(self) -> bool:
        """The store serves its OpenAPI description at the root."""
        self._request("GET", "/")
        return True

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, resource: str, payload: dict) -> dict | None:
        response = self._request("POST", f"/{resource}", json=payload)
        rows = self._rows(response)
        return rows[0] if rows else None

    def update(self, resource: str, record_id, patch: dict, key: str = "id") -> dict | None:
        response = self._request("PATCH", f"/{resource}", params={key: eq(record_id)}, json=patch)
        rows = self._rows(response)
        return rows[0] if rows else None

    def delete(self, resource: str, record_id, key: str = "id") -> None:
        self._request("DELETE", f"/{resource}", params={key: eq(record_id)})
