from __future__ import annotations

import json

from .extensions import db
from .time_utils import utcnow


class SessionEntry(db.Model):
    """
    Durable key-value storage for one browser session.

    Each browser session (identified by the opaque key kept in Flask's signed
    cookie) owns a handful of named entries, currently `user` and `authToken`.
    Entries survive process restarts and are deleted on logout or when the
    data store rejects the stored token.
    """
    __tablename__ = "session_entries"
    __table_args__ = (
        db.UniqueConstraint("session_key", "name", name="uq_session_entries_key_name"),
        db.Index("ix_session_entries_session_key", "session_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    session_key = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(64), nullable=False)

    # JSON-encoded value
    value = db.Column(db.Text, nullable=False)

    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def decoded(self):
        return json.loads(self.value)
