from __future__ import annotations

from datetime import timedelta

from flask import Flask, Response
from flask_jwt_extended import JWTManager, create_access_token, set_access_cookies, unset_jwt_cookies

from ..common.http import fail
from .claims import Claims


def init_jwt(app: Flask, *, secret_key: str, cookie_secure: bool) -> JWTManager:
    """Configure flask-jwt-extended: bearer header or cookie, JSON 401s in the app's error shape."""
    app.config["JWT_SECRET_KEY"] = secret_key
    app.config["JWT_TOKEN_LOCATION"] = ["headers", "cookies"]
    app.config["JWT_ACCESS_COOKIE_NAME"] = "token"
    app.config["JWT_COOKIE_SECURE"] = bool(cookie_secure)
    app.config["JWT_COOKIE_SAMESITE"] = "Lax"
    # JSON API: cookies are SameSite=Lax, bearer clients are not cookie based
    app.config["JWT_COOKIE_CSRF_PROTECT"] = False

    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return fail("Authentication required", 401)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return fail("Invalid token", 401)

    @jwt.expired_token_loader
    def _expired_token(_header, _payload):
        return fail("Token expired, please log in again", 401)

    return jwt


def issue_token(claims: Claims, *, hours: int) -> str:
    return create_access_token(
        identity=claims.subject,
        additional_claims=claims.to_payload(),
        expires_delta=timedelta(hours=int(hours)),
    )


def attach_token(response: Response, token: str) -> Response:
    set_access_cookies(response, token)
    return response


def clear_token(response: Response) -> Response:
    unset_jwt_cookies(response)
    return response
