# foodie_api/api/users/routes.py
import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import ValidationError

from foodie_api.api.posts.schemas import PostResponseSchema
from foodie_api.api.users.schemas import (
    UpdateNameSchema,
    UserPublicResponseSchema,
    UserResponseSchema,
    UserStatisticsSchema,
)
from foodie_api.core.exceptions import InvalidRequestError, NotFoundError

users_bp = Blueprint('users_bp', __name__)


def _user_not_found(e: NotFoundError):
    return jsonify({"error_code": "USER_NOT_FOUND", "message": e.message}), 404


@users_bp.route('/user/<string:uid>', methods=['GET'])
@jwt_required()
def get_user_profile(uid: str):
    """Whole profile for its owner, public view for everyone else."""
    user_service = current_app.services['users']
    current_user_id = get_jwt_identity()
    try:
        profile = user_service.get_user_profile(uid, current_user_id)
        if uid == current_user_id:
            return jsonify(UserResponseSchema().dump(profile)), 200
        return jsonify(UserPublicResponseSchema().dump(profile)), 200
    except NotFoundError as e:
        return _user_not_found(e)


@users_bp.route('/liked-posts/<string:user_id>', methods=['GET'])
@jwt_required()
def get_liked_posts(user_id: str):
    user_service = current_app.services['users']
    try:
        posts = user_service.get_liked_posts(user_id)
        return jsonify({
            "message": "Liked posts retrieved successfully",
            "posts": PostResponseSchema(many=True).dump(posts)
        }), 200
    except NotFoundError as e:
        return _user_not_found(e)


@users_bp.route('/bookmarked-posts/<string:user_id>', methods=['GET'])
@jwt_required()
def get_bookmarked_posts(user_id: str):
    user_service = current_app.services['users']
    try:
        posts = user_service.get_bookmarked_posts(user_id)
        return jsonify({
            "message": "Bookmarked posts retrieved successfully",
            "posts": PostResponseSchema(many=True).dump(posts)
        }), 200
    except NotFoundError as e:
        return _user_not_found(e)


@users_bp.route('/user-posts/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user_posts(user_id: str):
    """Originals, shares and reposts listed on the user's profile."""
    user_service = current_app.services['users']
    try:
        posts = user_service.get_user_posts(user_id)
        return jsonify({
            "message": "User's posts retrieved successfully",
            "posts": PostResponseSchema(many=True).dump(posts)
        }), 200
    except NotFoundError as e:
        return _user_not_found(e)


@users_bp.route('/user-statistics/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user_statistics(user_id: str):
    user_service = current_app.services['users']
    try:
        statistics = user_service.get_user_statistics(user_id)
        return jsonify(UserStatisticsSchema().dump(statistics)), 200
    except NotFoundError as e:
        return _user_not_found(e)


@users_bp.route('/update-name', methods=['PUT'])
@jwt_required()
def update_name():
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = UpdateNameSchema().load(request.get_json(silent=True) or {})
        user_service.update_name(user_id, data['first_name'])
        return jsonify({"message": "Name updated successfully."}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400
    except NotFoundError as e:
        return _user_not_found(e)
    except Exception as e:
        logging.error(f"Name update failed (uid: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "Error updating name."}), 500
