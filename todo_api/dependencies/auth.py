"""
Access guard for protected routes.

The session token travels in an HTTP-only cookie. The guard only verifies the
token; it never reads or writes user records.
"""

import uuid

from fastapi import Request

from todo_api.utils.auth import TokenManager


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


async def get_current_user_id(request: Request) -> uuid.UUID:
    """
    Dependency resolving the verified user id of the caller.

    Raises UnauthorizedError when the cookie is absent or the token does not
    verify. The id is also stored on ``request.state.user_id``.
    """
    cookie_name = request.app.state.settings.session_cookie_name
    token = request.cookies.get(cookie_name)
    user_id = get_token_manager(request).verify_session_token(token)
    request.state.user_id = user_id
    return user_id
