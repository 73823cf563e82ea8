# Overview: Identity and session context backed by durable key-value storage.

"""
Session / Identity Management

The authenticated identity and the data API token live in two named entries
("user" and "authToken") per browser session, stored in the session_entries
table so they survive restarts. The browser only carries an opaque session
key in Flask's signed cookie.

LIFECYCLE:
- init: SessionContext.load() reads both entries from durable storage
- login: SessionContext.login() writes both entries
- teardown: SessionContext.clear() removes both entries and the in-memory copy
  (logout, or a 401 from the data store)

A context is created per request and passed explicitly to the code that
needs it (Flask g.session_context); there is no module-level current user.
"""

from __future__ import annotations

import json
import logging
import secrets
from dataclasses import asdict, dataclass
from datetime import timedelta

from ..extensions import db
from ..models import SessionEntry
from ..permissions import validate_role
from ..time_utils import utcnow
from ..validation import ValidationError


logger = logging.getLogger(__name__)


USER_ENTRY = "user"
TOKEN_ENTRY = "authToken"


def generate_session_key() -> str:
    """Opaque browser session key (32 bytes of entropy, hex)."""
    return secrets.token_hex(32)


@dataclass(frozen=True)
class Identity:
    """The logged-in user. Role is fixed for the lifetime of the login."""
    id: object
    username: str
    role: str
    name: str
    email: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "Identity":
        """
        Build an identity from a users row (or a stored identity).

        Raises ValidationError if the role is not one of the known roles.
        """
        role = record.get("role")
        if not validate_role(role):
            raise ValidationError(f"Unknown role: {role!r}")
        username = record.get("username") or ""
        return cls(
            id=record.get("id"),
            username=username,
            role=role,
            name=record.get("name") or username,
            email=record.get("email"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class SessionStore:
    """Durable key-value entries grouped by browser session key."""

    def get(self, session_key: str, name: str):
        entry = db.session.query(SessionEntry).filter_by(session_key=session_key, name=name).first()
        return entry.decoded() if entry else None

    def set(self, session_key: str, name: str, value) -> None:
        entry = db.session.query(SessionEntry).filter_by(session_key=session_key, name=name).first()
        encoded = json.dumps(value)
        if entry:
            entry.value = encoded
            entry.updated_at = utcnow()
        else:
            db.session.add(SessionEntry(session_key=session_key, name=name, value=encoded))
        db.session.commit()

    def remove(self, session_key: str, name: str) -> None:
        db.session.query(SessionEntry).filter_by(session_key=session_key, name=name).delete()
        db.session.commit()

    def clear(self, session_key: str) -> int:
        deleted = db.session.query(SessionEntry).filter_by(session_key=session_key).delete()
        db.session.commit()
        return deleted


class SessionContext:
    """
    Explicit per-request session state.

    `identity` and `auth_token` are either both set or both None.
    """

    def __init__(self, store: SessionStore, session_key: str):
        self.store = store
        self.session_key = session_key
        self.identity: Identity | None = None
        self.auth_token: str | None = None

    @classmethod
    def load(cls, store: SessionStore, session_key: str) -> "SessionContext":
        ctx = cls(store, session_key)
        user = store.get(session_key, USER_ENTRY)
        token = store.get(session_key, TOKEN_ENTRY)
        if user and token:
            try:
                ctx.identity = Identity.from_record(user)
                ctx.auth_token = token
            except ValidationError:
                logger.warning("Discarding stored session with invalid identity")
                store.clear(session_key)
        return ctx

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def role(self) -> str | None:
        return self.identity.role if self.identity else None

    def login(self, identity: Identity, token: str) -> None:
        self.store.set(self.session_key, USER_ENTRY, identity.to_dict())
        self.store.set(self.session_key, TOKEN_ENTRY, token)
        self.identity = identity
        self.auth_token = token
        logger.info("User %s logged in as %s", identity.username, identity.role)

    def clear(self) -> None:
        if self.identity:
            logger.info("Clearing session for %s", self.identity.username)
        self.store.clear(self.session_key)
        self.identity = None
        self.auth_token = None


def cleanup_stale_entries(older_than: timedelta = timedelta(days=30)) -> int:
    """
    Delete session entries not touched within `older_than`.

    Returns count of entries deleted. Run periodically (flask session cleanup).
    """
    cutoff = utcnow() - older_than
    deleted = db.session.query(SessionEntry).filter(SessionEntry.updated_at < cutoff).delete()
    db.session.commit()
    return deleted
