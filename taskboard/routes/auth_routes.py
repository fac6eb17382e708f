from flask import Blueprint, current_app, jsonify, request

from taskboard.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from taskboard.repositories.user_repository import UserRepository
from taskboard.routes import json_body
from taskboard.utils.db import get_mongo
from taskboard.utils.security import (
    clear_session_cookie,
    hash_password,
    issue_token,
    set_session_cookie,
    validate_token,
    verify_password,
)
from taskboard.utils.validation import validate_login_payload, validate_signup_payload


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/signup")
def signup():
    payload = validate_signup_payload(json_body())
    users = UserRepository(get_mongo())

    if users.is_email_taken(payload["email"]):
        raise DuplicateEmailError()
    if users.is_username_taken(payload["username"]):
        raise DuplicateUsernameError()

    user = users.create(
        username=payload["username"],
        email=payload["email"],
        password_hash=hash_password(payload["password"]),
    )
    current_app.logger.info("Created user %s", user.id)

    response = jsonify(user=user.to_dict())
    response.status_code = 201
    return set_session_cookie(response, issue_token(user))


@auth_bp.post("/login")
def login():
    payload = validate_login_payload(json_body())
    users = UserRepository(get_mongo())

    user = users.find_by_identifier(payload["identifier"])
    if user is None or not verify_password(payload["password"], user.password_hash):
        raise InvalidCredentialsError()

    response = jsonify(user=user.to_dict())
    return set_session_cookie(response, issue_token(user))


@auth_bp.post("/logout")
def logout():
    response = current_app.response_class(status=204)
    return clear_session_cookie(response)


@auth_bp.get("/me")
def me():
    # Invalid, expired and orphaned sessions all answer the same 401
    claims = validate_token(request.cookies.get(current_app.config["JWT_ACCESS_COOKIE_NAME"]))
    if claims is None:
        raise UnauthenticatedError()

    user = UserRepository(get_mongo()).find_by_id(claims["sub"])
    if user is None:
        raise UnauthenticatedError()
    return jsonify(user=user.to_dict()), 200
