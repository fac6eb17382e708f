import logging
from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token, set_access_cookies
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from werkzeug.security import check_password_hash, generate_password_hash

from taskboard.errors import ConfigurationError


logger = logging.getLogger(__name__)


def hash_password(password):
    return generate_password_hash(password, method=current_app.config["PASSWORD_HASH_METHOD"])


def verify_password(password, password_hash):
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # Unknown method or corrupt hash string
        logger.warning("Stored password hash could not be parsed")
        return False


def session_ttl():
    return timedelta(seconds=current_app.config["SESSION_TTL_SECONDS"])


def issue_token(user):
    """Sign a session token for ``user`` (anything with id/username/email)."""
    if not current_app.config.get("JWT_SECRET_KEY"):
        raise ConfigurationError("Missing JWT_SECRET environment variable")
    return create_access_token(
        identity=user.id,
        additional_claims={"username": user.username, "email": user.email},
        expires_delta=session_ttl(),
    )


def validate_token(token):
    """Return the token's claims, or None if it is not a valid session token.

    Malformed, expired and badly signed tokens are all reported the same way.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        return decode_token(token)
    except (PyJWTError, JWTExtendedException) as exc:
        logger.debug("Rejected session token: %s", exc)
        return None


def set_session_cookie(response, token):
    set_access_cookies(response, token, max_age=current_app.config["SESSION_TTL_SECONDS"])
    return response


def clear_session_cookie(response):
    config = current_app.config
    response.set_cookie(
        config["JWT_ACCESS_COOKIE_NAME"],
        value="",
        max_age=0,
        expires=0,
        path=config["JWT_ACCESS_COOKIE_PATH"],
        secure=config["JWT_COOKIE_SECURE"],
        httponly=True,
        samesite=config["JWT_COOKIE_SAMESITE"],
    )
    return response
