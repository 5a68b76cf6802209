"""
Users blueprint (credential & session management):
- POST /users/register
- POST /users/login
- POST /users/refresh-token
- POST /users/logout
- POST /users/change-password
- GET  /users/current-user

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, separate secrets)
- Keeps exactly one refresh token per user on the users row; refreshing with any
  other token (e.g. one already rotated out) is rejected
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g, current_app
from sqlalchemy import or_

from models import storage
from models.user import User
from models.schemas.user import (
    UserRegisterSchema,
    UserLoginSchema,
    ChangePasswordSchema,
    UserOutSchema,
)
from api.errors import ValidationError, ConflictError, NotFoundError, AuthError, InternalError
from api.utils.response import api_response
from utils.decorators import jwt_required
from utils.media import first_upload, save_upload, discard_upload
from utils.security import (
    hash_password,
    verify_password,
    create_token,
    decode_token,
    TokenError,
)

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()
change_password_schema = ChangePasswordSchema()
user_out_schema = UserOutSchema()

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _cookie_options() -> dict:
    return {"httponly": True, "secure": current_app.config.get("COOKIE_SECURE", True)}


def _set_token_cookies(response, access_token: str, refresh_token: str):
    options = _cookie_options()
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)
    return response


def _clear_token_cookies(response):
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response


def _store_refresh_token(user_id: str, refresh_token: str, expected: str | None) -> bool:
    """
    Single-row UPDATE of the stored refresh token. With `expected` set it is a
    compare-and-swap: the row only changes if it still holds `expected`.
    """
    query = storage.get_session().query(User).filter(User.id == user_id)
    if expected is not None:
        query = query.filter(User.refresh_token == expected)
    updated = query.update({User.refresh_token: refresh_token}, synchronize_session="fetch")
    storage.save()
    return updated == 1


def issue_token_pair(user_id: str, replaces: str | None = None) -> tuple[str, str]:
    """
    Sign a new access/refresh pair for `user_id` and store the refresh token
    on the user row. Any failure comes out as InternalError; the cause is logged only.

    When `replaces` is given the new refresh token is only stored if the row still
    holds `replaces`; losing that race raises AuthError.
    """
    config = current_app.config
    try:
        user = storage.get(User, user_id)
        if user is None:
            raise LookupError(f"user {user_id} not found")

        access_token = create_token(
            user.id,
            "access",
            config["ACCESS_TOKEN_SECRET"],
            config["ACCESS_TOKEN_EXPIRES"],
            algorithm=config["JWT_ALGORITHM"],
            claims={"username": user.username, "email": user.email, "fullName": user.full_name},
        )
        refresh_token = create_token(
            user.id,
            "refresh",
            config["REFRESH_TOKEN_SECRET"],
            config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config["JWT_ALGORITHM"],
        )

        stored = _store_refresh_token(user.id, refresh_token, replaces)
    except Exception:
        logger.exception("Token issuance failed for user %s", user_id)
        raise InternalError("Something went wrong while generating refresh and access token")
    if not stored:
        logger.warning("Refresh token for user %s was rotated concurrently", user_id)
        raise AuthError("Refresh token is expired or used")
    return access_token, refresh_token


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: username, type: string, required: true }
      - { in: formData, name: email, type: string, required: true }
      - { in: formData, name: password, type: string, required: true }
      - { in: formData, name: fullName, type: string, required: true }
      - { in: formData, name: avatar, type: file, required: true }
      - { in: formData, name: coverImage, type: file, required: false }
    responses:
      201:
        description: Created
      400:
        description: Validation error (blank field or missing avatar)
      409:
        description: Username or email already registered
    """
    data = user_register_schema.load(request.form.to_dict())

    session = storage.get_session()
    existing = (
        session.query(User)
        .filter(or_(User.username == data["username"], User.email == data["email"]))
        .first()
    )
    if existing:
        raise ConflictError("User with email or username already exists")

    avatar_file = first_upload(request.files, "avatar")
    if avatar_file is None:
        raise ValidationError("Avatar file is required")
    cover_file = first_upload(request.files, "coverImage")

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    url_prefix = current_app.config["MEDIA_URL_PREFIX"]
    saved = []
    try:
        avatar_url = save_upload(avatar_file, upload_folder, url_prefix)
        saved.append(avatar_url)
        cover_url = save_upload(cover_file, upload_folder, url_prefix) if cover_file else None
        if cover_url:
            saved.append(cover_url)

        user = User(
            username=data["username"],
            email=data["email"],
            full_name=data["full_name"],
            password_hash=hash_password(data["password"]),
            avatar=avatar_url,
            cover_image=cover_url,
        )
        storage.new(user)
        storage.save()
    except Exception:
        for url in saved:
            discard_upload(url, upload_folder)
        raise

    created = storage.get(User, user.id)
    if created is None:
        raise InternalError("Something went wrong while registering the user")

    logger.info("Registered user %s", created.id)
    return api_response(user_out_schema.dump(created), "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login: returns the user plus access and refresh tokens, and sets both as cookies.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Missing identifier or invalid credentials
      404:
        description: User does not exist
    """
    data = user_login_schema.load(_json_body())
    username = data.get("username")
    email = data.get("email")
    if not username and not email:
        raise ValidationError("username or email is required")

    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)

    session = storage.get_session()
    user = session.query(User).filter(or_(*conditions)).first()
    if not user:
        raise NotFoundError("User does not exist")

    if not verify_password(data["password"], user.password_hash):
        raise ValidationError("Invalid user credentials")

    access_token, refresh_token = issue_token_pair(user.id)
    logger.info("User %s logged in", user.id)

    body = {
        "user": user_out_schema.dump(user),
        "accessToken": access_token,
        "refreshToken": refresh_token,
    }
    response, status = api_response(body, "User logged in successfully")
    return _set_token_cookies(response, access_token, refresh_token), status


@bp.post("/refresh-token")
def refresh_access_token():
    """
    Exchange the current refresh token (cookie or body) for a brand-new pair.
    ---
    tags:
      - Users
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New tokens issued
      401:
        description: Missing, invalid, expired or superseded refresh token
    """
    incoming = request.cookies.get(REFRESH_COOKIE) or _json_body().get("refreshToken")
    if not incoming:
        raise AuthError("Unauthorized request")

    config = current_app.config
    try:
        decoded = decode_token(
            incoming,
            config["REFRESH_TOKEN_SECRET"],
            algorithm=config["JWT_ALGORITHM"],
            expected_type="refresh",
        )
    except TokenError as e:
        raise AuthError(str(e))

    user = storage.get(User, decoded["sub"])
    if not user:
        raise AuthError("Invalid refresh token")

    if incoming != user.refresh_token:
        logger.warning("Rejected superseded refresh token for user %s", user.id)
        raise AuthError("Refresh token is expired or used")

    access_token, refresh_token = issue_token_pair(user.id, replaces=incoming)
    logger.info("Rotated tokens for user %s", user.id)

    response, status = api_response(
        {"accessToken": access_token, "refreshToken": refresh_token},
        "Access token refreshed",
    )
    return _set_token_cookies(response, access_token, refresh_token), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: forgets the stored refresh token and clears both cookies.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    user: User = g.current_user
    user.refresh_token = None
    user.save()
    logger.info("User %s logged out", user.id)

    response, status = api_response({}, "User logged out")
    return _clear_token_cookies(response), status


@bp.post("/change-password")
@jwt_required()
def change_password():
    """
    Change the caller's password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
    responses:
      200:
        description: Password changed
      401:
        description: Old password is wrong
    """
    data = change_password_schema.load(_json_body())
    user: User = g.current_user
    if not verify_password(data["old_password"], user.password_hash):
        raise AuthError("Invalid old password")

    user.password_hash = hash_password(data["new_password"])
    user.save()
    return api_response({}, "Password changed successfully")


@bp.get("/current-user")
@jwt_required()
def current_user():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(g.current_user), "Current user fetched successfully")
