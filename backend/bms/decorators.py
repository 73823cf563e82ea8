# Overview: Session loading, route guards and the per-request data API client.

from functools import wraps

from flask import current_app, g, jsonify, redirect, request, session

from .permissions import has_role, is_route_allowed, landing_path
from .services.resource_client import ResourceClient
from .services.session_service import SessionContext, SessionStore, generate_session_key
from .validation import ValidationError


LOGIN_PATH = "/login"


def load_session_context() -> None:
    """
    Attach the browser's SessionContext to g (before_request hook).

    A new opaque key is issued on first visit; identity and token are read
    from durable storage on every request.
    """
    key = session.get("sid")
    if not key:
        key = generate_session_key()
        session["sid"] = key
        session.permanent = True
    g.session_context = SessionContext.load(SessionStore(), key)


def current_session() -> SessionContext:
    if g.get("session_context") is None:
        load_session_context()
    return g.session_context


def get_client() -> ResourceClient:
    """
    Data API client for this request, authenticated with the session token.

    A 401 from the store clears the session through on_unauthorized.
    """
    client = g.get("resource_client")
    if client is None:
        ctx = current_session()
        config = current_app.config
        client = ResourceClient(
            config["DATA_API_BASE_URL"],
            token=ctx.auth_token,
            demo_token=config.get("DEMO_TOKEN"),
            timeout=config.get("DATA_API_TIMEOUT", 30),
            transport=config.get("DATA_API_TRANSPORT"),
            on_unauthorized=ctx.clear,
        )
        g.resource_client = client
    return client


def close_client(exc=None):
    client = g.pop("resource_client", None)
    if client is not None:
        client.close()


def require_route_access(f):
    """
    Guard a page route with the access policy.

    - No identity: redirect to the login page
    - Identity whose role may not open request.path: redirect to the
      role's landing page
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        ctx = current_session()
        if not ctx.is_authenticated:
            return redirect(LOGIN_PATH)

        if not is_route_allowed(ctx.role, request.path):
            current_app.logger.info(
                "Route %s denied for role %s", request.path, ctx.role
            )
            return redirect(landing_path(ctx.role))

        return f(*args, **kwargs)

    return decorated_function


def require_roles(*roles):
    """
    Require one of the given roles for an action (admin always passes).

    Use after @require_route_access.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ctx = current_session()
            if not ctx.is_authenticated:
                return redirect(LOGIN_PATH)

            if not has_role(ctx.role, roles):
                return jsonify({
                    "error": "Permission denied",
                    "required_roles": list(roles),
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def json_object() -> dict:
    """
    The request's JSON body as a dict ({} when absent).

    Raises ValidationError for any other JSON value (list, string, number).
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
