# foodie_api/api/auth/routes.py
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required
from marshmallow import ValidationError

from foodie_api.api.auth.schemas import ChangePasswordSchema, LoginSchema, RegisterSchema
from foodie_api.api.users.schemas import UserResponseSchema
from foodie_api.core.exceptions import (
    IdentityProviderError,
    InvalidRequestError,
    NotFoundError,
    UpstreamError,
)
from foodie_api.core.security import TOKEN_VERSION_CLAIM, issue_tokens

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and its profile, and hand back a token pair."""
    auth_service = current_app.services['auth']
    try:
        data = RegisterSchema().load(request.get_json(silent=True) or {})
        logging.info(f"Registration attempt for {data['email']}")
        user = auth_service.register(data['email'], data['password'], data['first_name'])
        return jsonify({
            "message": "Registration successful!",
            "user": UserResponseSchema().dump(user),
            **issue_tokens(user['uid'], user.get('token_version', 0))
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except IdentityProviderError as e:
        # provider refused the account, nothing was written
        return jsonify({"error_code": "REGISTRATION_FAILED", "message": e.message}), 400
    except UpstreamError as e:
        return jsonify(e.to_dict()), e.status_code


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
        logging.info(f"Login attempt for {data['email']}")
        user = auth_service.login(data['email'], data['password'])
        return jsonify({
            "message": "Login successful",
            "user": UserResponseSchema().dump(user),
            **issue_tokens(user['uid'], user.get('token_version', 0))
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": e.message}), 404
    except IdentityProviderError as e:
        logging.error(f"Login failed: {e}")
        return jsonify({"error_code": "AUTHENTICATION_FAILED", "message": e.message}), 500


@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """A valid refresh token buys a new access token."""
    claims = {TOKEN_VERSION_CLAIM: get_jwt().get(TOKEN_VERSION_CLAIM, 0)}
    new_access_token = create_access_token(identity=get_jwt_identity(), additional_claims=claims)
    return jsonify(access_token=new_access_token), 200


@auth_bp.route('/change-password', methods=['POST'])
@jwt_required()
def change_password():
    auth_service = current_app.services['auth']
    user_id = get_jwt_identity()
    try:
        data = ChangePasswordSchema().load(request.get_json(silent=True) or {})
        auth_service.change_password(user_id, data['new_password'])
        return jsonify({"message": "Password changed successfully."}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": e.message}), 404
    except UpstreamError as e:
        logging.error(f"Password change failed (uid: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PASSWORD_CHANGE_FAILED", "message": e.message}), 500


@auth_bp.route('/delete-account', methods=['DELETE'])
@jwt_required()
def delete_account():
    """Remove the caller's posts (with cascades), profile and credential."""
    auth_service = current_app.services['auth']
    user_id = get_jwt_identity()
    try:
        auth_service.delete_account(user_id)
        return jsonify({"message": "User and all their posts deleted successfully."}), 200
    except Exception as e:
        logging.error(f"Account deletion failed (uid: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "ACCOUNT_DELETION_FAILED", "message": "Error deleting user and posts."}), 500
