# backend/bms/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Durable session storage (user identity + auth token per browser session)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///bms.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # PostgREST-style data API
    DATA_API_BASE_URL = os.environ.get("BMS_API_BASE_URL", "http://localhost:3000")
    DATA_API_TIMEOUT = float(os.environ.get("BMS_API_TIMEOUT", "30"))
    # Optional httpx transport (tests inject an httpx.MockTransport here)
    DATA_API_TRANSPORT = None

    # Placeholder token issued by password login; never sent as a bearer token
    DEMO_TOKEN = "demo-token"

    # admin/admin login when the users resource is unreachable or empty
    DEV_LOGIN_FALLBACK = os.environ.get("BMS_DEV_LOGIN_FALLBACK", "false").lower() == "true"

    CORS_ALLOWED_ORIGINS = {
        "http://localhost:3001",
        "http://127.0.0.1:3001",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    }
