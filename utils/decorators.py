from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from api.errors import AuthError
from utils.security import decode_token, TokenError
from models import storage
from models.user import User


def _access_token_from_request() -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get("accessToken") or None


def jwt_required():
    """
    Require a valid access token, read from the Authorization header
    or the accessToken cookie. Sets g.current_user.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = _access_token_from_request()
            if not token:
                raise AuthError("Unauthorized request")
            try:
                decoded = decode_token(
                    token,
                    current_app.config["ACCESS_TOKEN_SECRET"],
                    algorithm=current_app.config["JWT_ALGORITHM"],
                    expected_type="access",
                )
            except TokenError as e:
                raise AuthError(str(e))

            user = storage.get(User, decoded["sub"])
            if not user:
                raise AuthError("Invalid access token")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator
