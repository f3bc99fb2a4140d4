# foodie_api/core/security.py
import re
from typing import Dict

from flask import current_app, jsonify
from flask_jwt_extended import create_access_token, create_refresh_token

PASSWORD_MIN_LENGTH = 8
PASSWORD_RULE_MESSAGE = (
    "The password must be at least 8 characters long, contain at least one uppercase letter, "
    "and include at least one symbol."
)

_UPPERCASE = re.compile(r'[A-Z]')
_SYMBOL = re.compile(r'[!@#$%^&*(),.?":{}|<>\[\]/\\`~;=_+\-]')


def password_is_valid(password) -> bool:
    """Length >= 8, at least one uppercase letter and at least one symbol."""
    if not isinstance(password, str):
        return False
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    if not _UPPERCASE.search(password):
        return False
    if not _SYMBOL.search(password):
        return False
    return True


TOKEN_VERSION_CLAIM = "ver"


def issue_tokens(user_id: str, token_version: int = 0) -> Dict[str, str]:
    """
    Access + refresh token pair bound to the identity provider's user id.
    ``token_version`` must match the profile's ``token_version`` for the pair to stay valid.
    """
    claims = {TOKEN_VERSION_CLAIM: token_version}
    return {
        "access_token": create_access_token(identity=user_id, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=user_id, additional_claims=claims),
    }


def register_jwt_handlers(jwt):
    """Every token problem answers 401 with the usual error body (the library default for a bad token is 422)."""

    def _unauthorized(message: str):
        return jsonify({"error_code": "UNAUTHORIZED", "message": message}), 401

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return _unauthorized("No token provided")

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return _unauthorized("Invalid token")

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return _unauthorized("Token has expired")

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return current_app.services['auth'].is_token_revoked(jwt_payload)

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return _unauthorized("Token has been revoked")
