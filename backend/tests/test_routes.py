"""
Route guard and page tests through the Flask test client.

Verifies:
- Anonymous requests go to /login; denied roles go to their landing page
- Login lands each role on its page and persists across requests
- Order creation reports full and partial outcomes distinctly
- A 401 from the data store ends the session, including during bill derivation
- Malformed request bodies are 400s, never 500s
"""

import pytest

from conftest import PASSWORD, location_path, login


LINES = [
    {"product_id": 1, "qty": 2, "unit_price": 100, "tax_percent": 10},
    {"product_id": 2, "qty": 1, "unit_price": 50, "tax_percent": 0},
    {"product_id": 3, "qty": 3, "unit_price": 10, "tax_percent": 20},
]


class TestGuards:

    @pytest.mark.parametrize("path", ["/", "/orders", "/users", "/accounts/ledger"])
    def test_anonymous_redirected_to_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert location_path(response) == "/login"

    @pytest.mark.parametrize("role,path,landing", [
        ("sales", "/users", "/sales"),
        ("sales", "/orders", "/sales"),
        ("purchase", "/payments", "/orders"),
        ("accounts", "/settings", "/accounts/ledger"),
        ("accounts", "/inventory", "/accounts/ledger"),
    ])
    def test_denied_route_goes_to_landing(self, login_as, role, path, landing):
        response = login_as(role).get(path)
        assert response.status_code == 302
        assert location_path(response) == landing

    def test_admin_opens_user_admin(self, login_as):
        response = login_as("admin").get("/users")
        assert response.status_code == 200
        usernames = [u["username"] for u in response.get_json()["items"]]
        assert "salesuser" in usernames
        assert all("password_hash" not in u for u in response.get_json()["items"])

    def test_sub_path_allowed(self, login_as, catalog):
        response = login_as("purchase").get("/orders/new")
        assert response.status_code == 200
        assert [v["name"] for v in response.get_json()["vendors"]] == ["Acme Supplies", "Beta Traders"]


class TestLogin:

    @pytest.mark.parametrize("role,landing", [
        ("admin", "/"),
        ("sales", "/sales"),
        ("accounts", "/accounts/ledger"),
        ("purchase", "/orders"),
    ])
    def test_login_returns_landing(self, client, users, role, landing):
        response = login(client, users[role]["username"], role)
        assert response.status_code == 200
        assert response.get_json()["redirect"] == landing

    def test_role_mismatch_rejected(self, client, users):
        response = login(client, "salesuser", "admin")
        assert response.status_code == 401
        assert client.get("/session").get_json()["authenticated"] is False

    def test_session_persists_and_logout_clears(self, login_as):
        client = login_as("accounts")

        body = client.get("/session").get_json()
        assert body["authenticated"] is True
        assert body["user"]["role"] == "accounts"
        assert body["landing_path"] == "/accounts/ledger"

        client.post("/logout")
        assert client.get("/session").get_json()["authenticated"] is False
        assert location_path(client.get("/accounts/ledger")) == "/login"

    def test_login_page_redirects_when_signed_in(self, login_as):
        response = login_as("purchase").get("/login")
        assert location_path(response) == "/orders"

    def test_register_then_login(self, client):
        response = client.post("/register", json={
            "name": "New Buyer",
            "username": "newbuyer",
            "email": "buyer@example.com",
            "password": "secret1",
            "role": "purchase",
        })
        assert response.status_code == 201
        assert login(client, "newbuyer", "purchase", password="secret1").status_code == 200

    def test_menu_follows_role(self, login_as):
        items = login_as("purchase").get("/menu").get_json()["items"]
        assert [i["path"] for i in items] == [
            "/", "/inventory", "/orders", "/bills", "/vendors", "/products", "/reports",
        ]

    def test_menu_requires_login(self, client):
        assert location_path(client.get("/menu")) == "/login"

    @pytest.mark.parametrize("body", [
        {"username": 123, "password": PASSWORD, "role": "sales"},
        {"username": "salesuser", "password": ["x"], "role": "sales"},
        ["salesuser", PASSWORD, "sales"],
    ])
    def test_malformed_login_body_rejected(self, client, users, body):
        response = client.post("/login", json=body)
        assert response.status_code == 400
        assert "error" in response.get_json()
        assert client.get("/session").get_json()["authenticated"] is False


class TestOrders:

    def test_create_confirmed_order(self, login_as, store, catalog):
        response = login_as("purchase").post("/orders", json={
            "vendor_id": 1, "status": "Confirmed", "lines": LINES,
        })

        assert response.status_code == 201
        body = response.get_json()
        assert body["order"]["id"] == 1
        assert "Vendor bill has been automatically generated" in body["message"]
        assert len(store.writes("POST", "purchase_order_lines")) == 3
        assert store.writes("POST", "vendor_bills")[0]["amount"] == 306.0

    def test_bill_failure_reported(self, login_as, store, catalog):
        store.fail("POST", "vendor_bills", status=500, message="bill insert failed")
        response = login_as("purchase").post("/orders", json={
            "vendor_id": 1, "status": "Confirmed", "lines": LINES,
        })

        assert response.status_code == 201
        body = response.get_json()
        assert body["bill"] is None
        assert "could not be generated" in body["message"]
        assert "automatically generated" not in body["message"]

    def test_draft_message_has_no_bill_note(self, login_as, catalog):
        body = login_as("purchase").post("/orders", json={"vendor_id": 1, "lines": LINES}).get_json()
        assert body["message"] == "Purchase Order #1 created successfully!"
        assert body["bill"] is None

    def test_client_line_total_ignored(self, login_as, store, catalog):
        line = {**LINES[0], "total": 999}
        response = login_as("purchase").post("/orders", json={
            "vendor_id": 1, "status": "Confirmed", "lines": [line],
        })

        assert response.status_code == 201
        assert store.writes("POST", "purchase_order_lines")[0]["total"] == 220.0
        assert response.get_json()["bill"]["amount"] == 220.0

    def test_array_body_rejected(self, login_as, store, catalog):
        response = login_as("purchase").post("/orders", json=[{"vendor_id": 1, "lines": LINES}])
        assert response.status_code == 400
        assert store.writes("POST", "purchase_orders") == []

    @pytest.mark.parametrize("lines", ["abc", [1, 2], {"product_id": 1, "qty": 1}])
    def test_lines_must_be_list_of_objects(self, login_as, store, catalog, lines):
        response = login_as("purchase").post("/orders", json={"vendor_id": 1, "lines": lines})
        assert response.status_code == 400
        assert store.writes("POST", "purchase_orders") == []

    def test_no_lines_rejected(self, login_as, store, catalog):
        response = login_as("purchase").post("/orders", json={"vendor_id": 1, "lines": []})
        assert response.status_code == 400
        assert response.get_json()["partial"] is False
        assert store.writes("POST", "purchase_orders") == []

    def test_order_failure_nothing_saved(self, login_as, store, catalog):
        store.fail("POST", "purchase_orders", status=500, message="insert failed")
        response = login_as("purchase").post("/orders", json={"vendor_id": 1, "lines": LINES})

        assert response.status_code == 502
        body = response.get_json()
        assert body["partial"] is False
        assert "Nothing was saved" in body["message"]

    def test_partial_failure_reported(self, login_as, store, catalog):
        store.fail("POST", "purchase_order_lines", on_call=2)
        response = login_as("purchase").post("/orders", json={"vendor_id": 1, "lines": LINES})

        assert response.status_code == 502
        body = response.get_json()
        assert body["partial"] is True
        assert body["step"] == "create_line"
        assert body["index"] == 1
        assert body["order_id"] == 1
        assert body["created_lines"] == 1
        assert "Purchase order #1 was created but line item 2 failed" in body["message"]

    def test_order_detail_with_totals(self, login_as, catalog):
        client = login_as("purchase")
        client.post("/orders", json={"vendor_id": 1, "lines": LINES})

        body = client.get("/orders/1").get_json()
        assert [line["line_number"] for line in body["lines"]] == [1, 2, 3]
        assert body["totals"]["total"] == 306.0

    def test_missing_order(self, login_as):
        assert login_as("purchase").get("/orders/42").status_code == 404

    def test_preview_totals(self, login_as):
        response = login_as("purchase").post("/orders/totals", json={"lines": [
            {"quantity": 1, "unit_price": 50, "tax_percent": 0},
            {"quantity": 3, "unit_price": 10, "tax_percent": 20},
        ]})
        assert response.get_json() == {"subtotal": 80.0, "tax": 6.0, "total": 86.0}


class TestAccounts:

    def test_ledger_bad_date(self, login_as, catalog):
        response = login_as("accounts").get("/accounts/ledger?vendor_id=1&from=yesterday")
        assert response.status_code == 400

    def test_ledger_without_vendor_lists_vendors(self, login_as, catalog):
        body = login_as("accounts").get("/accounts/ledger").get_json()
        assert len(body["vendors"]) == 2
        assert body["entries"] == []

    def test_payment_settles_bill(self, login_as, store, catalog):
        store.seed("vendor_bills", {"id": 1, "bill_number": "B-1", "vendor_id": 1, "amount": 250, "status": "Unpaid"})
        response = login_as("accounts").post("/payments", json={"vendor_bill_id": 1, "amount": 250})

        assert response.status_code == 201
        assert store.tables["vendor_bills"][0]["status"] == "Paid"


class TestBills:

    def test_unreadable_stored_due_date_lists(self, login_as, store, catalog):
        store.seed("vendor_bills", {"id": 1, "bill_number": "B-1", "vendor_id": 1, "amount": 250,
                                    "status": "Unpaid", "due_date": "31/12/2024"})
        response = login_as("purchase").get("/bills")

        assert response.status_code == 200
        assert response.get_json()["items"][0]["status"] == "Unpaid"

    def test_malformed_due_date_rejected(self, login_as, store, catalog):
        response = login_as("purchase").post("/bills", json={
            "vendor_id": 1, "bill_number": "B-9", "amount": 10, "due_date": "31/12/2026",
        })
        assert response.status_code == 400
        assert store.writes("POST", "vendor_bills") == []

    def test_ledger_tolerates_unreadable_stored_dates(self, login_as, store, catalog):
        store.seed("vendor_bills", {"id": 1, "bill_number": "B-1", "vendor_id": 1, "amount": 250,
                                    "bill_date": "2026-01-05", "status": "Unpaid"})
        store.seed("payments", {"id": 1, "vendor_bill_id": 1, "amount": 50, "paid_at": "01/02/2026"})

        response = login_as("accounts").get("/accounts/ledger?vendor_id=1")

        assert response.status_code == 200
        assert response.get_json()["closing"] == 250.0


class TestDataApiFailures:

    def test_unauthorized_ends_session(self, client, users, store, catalog):
        client.post("/login", json={
            "username": "purchaseuser", "password": PASSWORD, "role": "purchase", "token": "jwt-live",
        })
        store.fail("GET", "vendors", status=401)

        response = client.get("/vendors")

        assert location_path(response) == "/login"
        assert store.requests[-1].headers["Authorization"] == "Bearer jwt-live"
        assert client.get("/session").get_json()["authenticated"] is False

    def test_unauthorized_during_bill_derivation_ends_session(self, client, users, store, catalog):
        client.post("/login", json={
            "username": "purchaseuser", "password": PASSWORD, "role": "purchase", "token": "jwt-live",
        })
        store.fail("POST", "vendor_bills", status=401)

        response = client.post("/orders", json={"vendor_id": 1, "status": "Confirmed", "lines": LINES})

        assert response.status_code == 302
        assert location_path(response) == "/login"
        assert client.get("/session").get_json()["authenticated"] is False

    def test_store_error_is_502(self, login_as, store):
        store.fail("GET", "vendors", status=500, message="db down")
        response = login_as("purchase").get("/vendors")
        assert response.status_code == 502
        assert response.get_json()["error"] == "db down"


def test_cors_header_for_known_origin(client):
    response = client.get("/session", headers={"Origin": "http://localhost:5173"})
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert "Access-Control-Allow-Origin" not in client.get("/session", headers={"Origin": "http://evil.test"}).headers
