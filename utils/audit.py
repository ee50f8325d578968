from flask import has_request_context, request
from models import db
from models.audit_log import AuditLog


def _request_origin():
    # CLI commands run without a request; they are recorded without an origin
    if not has_request_context():
        return None, None
    ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    user_agent = request.headers.get("User-Agent") or None
    return ip, user_agent[:255] if user_agent else None


def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """
    Persists one structured audit event. Lockout transitions (LOGIN_LOCKED,
    LOGIN_LOCK_EXPIRED, LOGIN_FAIL) and user changes all go through here.
    """
    ip, user_agent = _request_origin()

    db.session.add(AuditLog(
        action=action,
        user_id=user_id,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=metadata or None,
        ip=ip,
        user_agent=user_agent,
    ))
    db.session.commit()
