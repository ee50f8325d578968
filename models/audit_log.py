from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    """One structured diagnostic event: lockout transitions, logins and user changes."""
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.String(40), nullable=False, index=True)  # LOGIN_LOCKED, USER_UPDATE, ...

    # unknown-email logins have no user
    user_id = db.Column(db.Integer, nullable=True, index=True)
    entity = db.Column(db.String(40), nullable=True)
    entity_id = db.Column(db.String(40), nullable=True)

    details = db.Column(db.JSON, nullable=True)

    # empty for CLI events
    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
