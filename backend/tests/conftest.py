"""
Pytest fixtures for BMS tests.

Provides an in-memory PostgREST-style data store (httpx.MockTransport), a
test app with an in-memory SQLite session store, and logged-in clients.
"""

import json
from collections import Counter, defaultdict
from urllib.parse import urlparse

import bcrypt
import httpx
import pytest

from bms import create_app
from bms.extensions import db
from bms.services.resource_client import ResourceClient


API_BASE_URL = "http://data-api.test"
PASSWORD = "Password123!"
# Low cost factor keeps the suite fast; verification is cost-agnostic
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


class FakeDataStore:
    """
    Minimal PostgREST emulator.

    Supports eq./in./ilike./gte./lte. filters, Range pagination with
    Content-Range, POST/PATCH returning representations, DELETE, and
    failure injection per (method, resource, call number).
    """

    def __init__(self):
        self.tables = defaultdict(list)
        self.requests = []
        self.calls = Counter()
        self.failures = {}
        self._next_id = defaultdict(int)
        self.transport = httpx.MockTransport(self.handler)

    # -- setup ---------------------------------------------------------------

    def seed(self, resource, *rows):
        for row in rows:
            self._insert(resource, dict(row))
        return self

    def fail(self, method, resource, *, on_call=1, status=400, message="rejected"):
        self.failures[(method, resource, on_call)] = (status, message)

    def client(self, **kwargs):
        return ResourceClient(API_BASE_URL, transport=self.transport, **kwargs)

    # -- inspection ----------------------------------------------------------

    def writes(self, method, resource):
        return [
            json.loads(r.content) if r.content else None
            for r in self.requests
            if r.method == method and r.url.path.strip("/") == resource
        ]

    # -- emulation -----------------------------------------------------------

    def _insert(self, resource, row):
        if row.get("id") is None:
            self._next_id[resource] += 1
            row["id"] = self._next_id[resource]
        else:
            self._next_id[resource] = max(self._next_id[resource], int(row["id"]))
        self.tables[resource].append(row)
        return row

    @staticmethod
    def _matches(row, name, expression):
        op, _, operand = expression.partition(".")
        value = row.get(name)
        if op == "eq":
            return str(value) == operand
        if op == "in":
            return str(value) in operand.strip("()").split(",")
        if op == "ilike":
            return operand.strip("*").lower() in str(value or "").lower()
        if op == "gte":
            return value is not None and str(value) >= operand
        if op == "lte":
            return value is not None and str(value) <= operand
        return True

    def _select(self, resource, params):
        rows = self.tables[resource]
        for name, expression in params.multi_items():
            if name in ("order", "and", "select", "limit", "offset"):
                continue
            rows = [r for r in rows if self._matches(r, name, expression)]
        return rows

    def handler(self, request):
        self.requests.append(request)
        resource = request.url.path.strip("/")
        self.calls[(request.method, resource)] += 1

        failure = self.failures.get((request.method, resource, self.calls[(request.method, resource)]))
        if failure:
            status, message = failure
            return httpx.Response(status, json={"message": message})

        if not resource:
            return httpx.Response(200, json={"swagger": "2.0"})

        if request.method == "GET":
            rows = self._select(resource, request.url.params)
            total = len(rows)
            start = 0
            if "Range" in request.headers:
                first, _, last = request.headers["Range"].partition("-")
                start = int(first)
                rows = rows[start:int(last) + 1]
            end = start + len(rows) - 1 if rows else start
            return httpx.Response(200, json=rows, headers={"Content-Range": f"{start}-{end}/{total}"})

        if request.method == "POST":
            row = self._insert(resource, json.loads(request.content))
            return httpx.Response(201, json=[row])

        if request.method == "PATCH":
            patch = json.loads(request.content)
            rows = self._select(resource, request.url.params)
            for row in rows:
                row.update(patch)
            return httpx.Response(200, json=rows)

        if request.method == "DELETE":
            doomed = self._select(resource, request.url.params)
            self.tables[resource] = [r for r in self.tables[resource] if r not in doomed]
            return httpx.Response(204)

        return httpx.Response(405)


def location_path(response):
    return urlparse(response.headers["Location"]).path


@pytest.fixture
def store():
    return FakeDataStore()


@pytest.fixture
def api(store):
    client = store.client()
    yield client
    client.close()


@pytest.fixture
def app(store):
    """Application wired to the fake data store and an in-memory session DB."""
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "DATA_API_BASE_URL": API_BASE_URL,
        "DATA_API_TRANSPORT": store.transport,
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(store):
    rows = [
        {"id": 1, "username": "adminuser", "name": "Admin User", "role": "admin", "email": "admin@bms.local"},
        {"id": 2, "username": "salesuser", "name": "Sales User", "role": "sales", "email": "sales@bms.local"},
        {"id": 3, "username": "accountsuser", "name": "Accounts User", "role": "accounts", "email": "acc@bms.local"},
        {"id": 4, "username": "purchaseuser", "name": "Purchase User", "role": "purchase", "email": "po@bms.local"},
    ]
    for row in rows:
        store.seed("users", {**row, "password_hash": PASSWORD_HASH, "status": "active"})
    return {row["role"]: row for row in rows}


def login(client, username, role, password=PASSWORD):
    return client.post("/login", json={"username": username, "password": password, "role": role})


@pytest.fixture
def login_as(client, users):
    """Log the test client in with the given role."""
    def _login(role):
        response = login(client, users[role]["username"], role)
        assert response.status_code == 200, response.get_json()
        return client
    return _login


@pytest.fixture
def catalog(store):
    """Two vendors and three products."""
    store.seed(
        "vendors",
        {"id": 1, "name": "Acme Supplies"},
        {"id": 2, "name": "Beta Traders"},
    )
    store.seed(
        "products",
        {"id": 1, "name": "Widget", "tax_percent": 10},
        {"id": 2, "name": "Gadget", "tax_percent": 0},
        {"id": 3, "name": "Gizmo", "tax_percent": 20},
    )
    return store
