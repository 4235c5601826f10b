# rollserver/deps.py
from fastapi import Request

from .state import RollLogStore


class AdminUnauthorized(Exception):
    pass


def authorize(supplied_token: str, configured_token: str) -> bool:
    # An unset admin token disables the admin routes entirely.
    if not configured_token:
        return False
    return supplied_token == configured_token


def resolve_admin_token(header_value: str | None, query_value: str | None) -> str:
    for candidate in (header_value, query_value):
        if candidate:
            return candidate
    return ""


def require_admin_token(request: Request, x_admin_token: str | None, token: str | None):
    """Raise AdminUnauthorized unless the supplied token matches ADMIN_TOKEN.

    Called from inside the rate-limited admin handlers, so rejected
    attempts still count against the admin limit.
    """
    supplied = resolve_admin_token(x_admin_token, token)
    if not authorize(supplied, request.app.state.settings.ADMIN_TOKEN):
        raise AdminUnauthorized()


def get_store(request: Request) -> RollLogStore:
    return request.app.state.store
